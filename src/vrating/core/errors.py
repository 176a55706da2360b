"""Custom exception hierarchy for the rating engine.

Malformed *domain* data (bad emotional-state encodings, missing P&L,
missing timestamps) never raises; these exceptions are reserved for
programming and configuration errors.
"""


class VRatingError(Exception):
    """Base exception for all rating engine errors."""


# --- Configuration ---
class ConfigError(VRatingError):
    """Invalid or missing configuration."""


class WeightsError(ConfigError):
    """Category weights do not sum to 1.0."""

    def __init__(self, total: float):
        self.total = total
        super().__init__(f"Category weights must sum to 1.0, got {total:.4f}")


class BandCurveError(ConfigError):
    """A scoring curve has unordered or out-of-range anchors."""


# --- Input ---
class InvalidTradeInputError(VRatingError, TypeError):
    """Trade input is not a collection of trade records."""
