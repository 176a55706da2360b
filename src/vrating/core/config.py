"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.

Every weight, threshold and band anchor the engine uses lives here as a
frozen pydantic model so that scoring can be tuned (and unit-tested)
without touching the extractors.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from .curves import BandCurve, curve
from .enums import CapitalBase, Category, EmotionGroup
from .errors import ConfigError, WeightsError

_FROZEN = {"frozen": True}


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

class CategoryWeights(BaseModel):
    """Fixed category weights for the overall rating. Must sum to 1.0."""

    model_config = _FROZEN

    profitability: float = 0.30
    risk_management: float = 0.25
    consistency: float = 0.20
    emotional_discipline: float = 0.15
    journaling_adherence: float = 0.10

    @model_validator(mode="after")
    def _check_total(self) -> "CategoryWeights":
        total = sum(self.as_dict().values())
        if abs(total - 1.0) > 1e-9:
            raise WeightsError(total)
        return self

    def as_dict(self) -> dict[Category, float]:
        return {
            Category.PROFITABILITY: self.profitability,
            Category.RISK_MANAGEMENT: self.risk_management,
            Category.CONSISTENCY: self.consistency,
            Category.EMOTIONAL_DISCIPLINE: self.emotional_discipline,
            Category.JOURNALING_ADHERENCE: self.journaling_adherence,
        }


# ---------------------------------------------------------------------------
# Metric inputs
# ---------------------------------------------------------------------------

class CapitalConfig(BaseModel):
    model_config = _FROZEN

    # Account balance before the first trade; when unset the capital base
    # is derived from position notionals.
    starting_balance: float | None = Field(default=None, gt=0)
    capital_base: CapitalBase = CapitalBase.PEAK_NOTIONAL


class LargeLossConfig(BaseModel):
    """Calibration of the "large loss" threshold.

    threshold = max(floor, mean_loss * mean_loss_multiple,
                    mean_loss + std_multiple * std_loss)
    """

    model_config = _FROZEN

    floor: float = Field(default=50.0, ge=0)  # Account currency
    mean_loss_multiple: float = Field(default=1.5, ge=1.0)
    std_multiple: float = Field(default=1.0, ge=1.0)


class EmotionVocabulary(BaseModel):
    """Emotion tags grouped by their effect on trading discipline."""

    model_config = _FROZEN

    positive: tuple[str, ...] = ("PATIENCE", "DISCIPLINE", "CONFIDENT", "FOCUSED", "CALM")
    negative: tuple[str, ...] = ("FOMO", "REVENGE", "TILT", "GREED")
    neutral: tuple[str, ...] = ("NEUTRAL", "ANALYTICAL", "OBJECTIVE")
    normal_trading: tuple[str, ...] = ("OVERRISK", "ANXIOUS", "FEAR")

    # Share of a "positive" trade credited to neutral / normal-trading tags
    neutral_credit: float = Field(default=0.5, ge=0, le=1)
    normal_trading_credit: float = Field(default=0.25, ge=0, le=1)

    @field_validator("positive", "negative", "neutral", "normal_trading")
    @classmethod
    def _upper(cls, tags: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(t.strip().upper() for t in tags if t.strip())

    def groups_of(self, tags: tuple[str, ...] | list[str]) -> set[EmotionGroup]:
        """All groups represented by ``tags``."""
        found: set[EmotionGroup] = set()
        for tag in tags:
            if tag in self.positive:
                found.add(EmotionGroup.POSITIVE)
            elif tag in self.negative:
                found.add(EmotionGroup.NEGATIVE)
            elif tag in self.neutral:
                found.add(EmotionGroup.NEUTRAL)
            elif tag in self.normal_trading:
                found.add(EmotionGroup.NORMAL_TRADING)
            else:
                found.add(EmotionGroup.UNKNOWN)
        return found

    def positive_credit(self, tags: tuple[str, ...] | list[str]) -> float:
        """How much of one constructive trade a tag set is worth (0..1)."""
        groups = self.groups_of(tags)
        credit = 0.0
        if EmotionGroup.POSITIVE in groups:
            credit += 1.0
        if EmotionGroup.NEUTRAL in groups:
            credit += self.neutral_credit
        if EmotionGroup.NORMAL_TRADING in groups:
            credit += self.normal_trading_credit
        return min(1.0, credit)


# ---------------------------------------------------------------------------
# Scoring bands
# ---------------------------------------------------------------------------

class ProfitabilityBands(BaseModel):
    model_config = _FROZEN

    net_return: BandCurve = curve(
        (-20, 0.0, "poor"),
        (-10, 1.0, "poor"),
        (0, 2.0, "poor"),
        (10, 6.0, "moderate"),
        (30, 8.0, "good"),
        (50, 9.5, "excellent"),
        (100, 10.0, "excellent"),
    )
    win_rate: BandCurve = curve(
        (0, 0.0, "poor"),
        (30, 2.0, "poor"),
        (40, 4.0, "moderate"),
        (50, 6.0, "moderate"),
        (60, 8.0, "good"),
        (70, 9.5, "excellent"),
        (100, 10.0, "excellent"),
    )
    axis_weights: dict[str, float] = Field(
        default_factory=lambda: {"net_return": 0.6, "win_rate": 0.4}
    )
    positive_months_bonus_above: float = 80.0  # Percent of months
    positive_months_bonus: float = 0.5
    profit_factor_bonus_at: float = 3.0  # Gross profit / gross loss
    profit_factor_bonus: float = 1.0


class RiskBands(BaseModel):
    model_config = _FROZEN

    drawdown: BandCurve = curve(
        (0, 10.0, "excellent"),
        (5, 9.5, "excellent"),
        (10, 8.0, "good"),
        (20, 5.5, "moderate"),
        (30, 2.0, "poor"),
        (40, 1.0, "poor"),
        (50, 0.0, "poor"),
    )
    # Net-profitable accounts: raised moderate anchors, same extremes
    drawdown_relaxed: BandCurve = curve(
        (0, 10.0, "excellent"),
        (5, 9.5, "excellent"),
        (10, 8.5, "good"),
        (20, 7.0, "moderate"),
        (30, 2.2, "poor"),
        (40, 1.0, "poor"),
        (50, 0.0, "poor"),
    )
    large_loss: BandCurve = curve(
        (0, 10.0, "excellent"),
        (5, 9.5, "excellent"),
        (10, 8.0, "good"),
        (20, 5.5, "moderate"),
        (30, 3.0, "poor"),
        (40, 1.5, "poor"),
        (60, 0.0, "poor"),
    )
    variability: BandCurve = curve(
        (0, 10.0, "excellent"),
        (10, 9.5, "excellent"),
        (30, 8.0, "good"),
        (50, 5.5, "moderate"),
        (70, 2.0, "poor"),
        (80, 1.0, "poor"),
        (100, 0.0, "poor"),
    )
    variability_relaxed: BandCurve = curve(
        (0, 10.0, "excellent"),
        (10, 9.5, "excellent"),
        (30, 8.5, "good"),
        (50, 7.0, "moderate"),
        (70, 2.2, "poor"),
        (80, 1.0, "poor"),
        (100, 0.0, "poor"),
    )
    duration: BandCurve = curve(
        (0, 1.0, "poor"),
        (1, 3.0, "poor"),
        (6, 5.5, "moderate"),
        (12, 8.0, "good"),
        (24, 9.5, "excellent"),
        (48, 10.0, "excellent"),
    )
    axis_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "drawdown": 0.35,
            "large_loss": 0.25,
            "variability": 0.25,
            "duration": 0.15,
        }
    )
    weakest_link_headroom: float = 0.5
    # Axes eligible for the weakest-link ceiling; duration only feeds the mean
    weakest_link_axes: tuple[str, ...] = ("drawdown", "large_loss", "variability")
    oversized_multiple: float = 2.0  # x mean quantity
    oversized_penalty_above: float = 10.0  # Percent of trades
    oversized_penalty: float = 1.0


class ConsistencyBands(BaseModel):
    model_config = _FROZEN

    volatility: BandCurve = curve(
        (0, 10.0, "excellent"),
        (5, 9.0, "excellent"),
        (10, 8.0, "good"),
        (15, 6.0, "moderate"),
        (20, 4.0, "poor"),
        (50, 2.5, "poor"),
        (100, 2.0, "poor"),
    )
    loss_streak: BandCurve = curve(
        (0, 10.0, "excellent"),
        (3, 9.0, "excellent"),
        (5, 8.0, "good"),
        (7, 6.0, "moderate"),
        (10, 4.0, "poor"),
        (15, 2.0, "poor"),
    )
    monthly_ratio: BandCurve = curve(
        (0.0, 2.0, "poor"),
        (0.2, 4.0, "poor"),
        (0.5, 7.0, "moderate"),
        (0.6, 8.0, "good"),
        (1.0, 10.0, "excellent"),
    )
    axis_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "volatility": 0.4,
            "loss_streak": 0.3,
            "monthly_ratio": 0.3,
        }
    )
    weakest_link_headroom: float = 0.5


class EmotionalBands(BaseModel):
    model_config = _FROZEN

    positive: BandCurve = curve(
        (0, 3.0, "poor"),
        (35, 5.5, "moderate"),
        (50, 7.0, "moderate"),
        (65, 8.5, "good"),
        (80, 10.0, "excellent"),
    )
    negative: BandCurve = curve(
        (0, 10.0, "excellent"),
        (15, 9.0, "excellent"),
        (25, 8.0, "good"),
        (40, 6.5, "moderate"),
        (55, 5.0, "poor"),
        (100, 3.0, "poor"),
    )
    win_correlation: BandCurve = curve(
        (-100, 2.5, "poor"),
        (-50, 3.0, "poor"),
        (0, 6.0, "moderate"),
        (20, 8.0, "good"),
        (40, 10.0, "excellent"),
    )
    logging_completeness: BandCurve = curve(
        (0, 2.0, "poor"),
        (50, 5.0, "moderate"),
        (80, 8.0, "good"),
        (95, 10.0, "excellent"),
    )
    axis_weights: dict[str, float] = Field(
        default_factory=lambda: {
            "positive": 0.35,
            "negative": 0.30,
            "win_correlation": 0.15,
            "logging_completeness": 0.20,
        }
    )
    profitable_bonus: float = 0.5
    profitable_bonus_below: float = 8.0  # Only applied to scores under this


class JournalingBands(BaseModel):
    model_config = _FROZEN

    completeness: BandCurve = curve(
        (0, 2.0, "poor"),
        (40, 4.0, "poor"),
        (60, 6.0, "moderate"),
        (80, 8.0, "good"),
        (95, 10.0, "excellent"),
    )
    full_emotion_logging_bonus: float = 0.5


class ObservabilityConfig(BaseModel):
    model_config = _FROZEN

    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class RatingSettings(BaseSettings):
    """Top-level rating engine settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    weights: CategoryWeights = Field(default_factory=CategoryWeights)
    capital: CapitalConfig = Field(default_factory=CapitalConfig)
    large_loss: LargeLossConfig = Field(default_factory=LargeLossConfig)
    emotions: EmotionVocabulary = Field(default_factory=EmotionVocabulary)

    profitability: ProfitabilityBands = Field(default_factory=ProfitabilityBands)
    risk: RiskBands = Field(default_factory=RiskBands)
    consistency: ConsistencyBands = Field(default_factory=ConsistencyBands)
    emotional: EmotionalBands = Field(default_factory=EmotionalBands)
    journaling: JournalingBands = Field(default_factory=JournalingBands)

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    # Overall rating range; empty input scores every category at the floor
    rating_floor: float = 1.0
    rating_ceiling: float = 10.0

    model_config = {
        "env_prefix": "VRATING_",
        "env_nested_delimiter": "__",
        "frozen": True,
    }


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> RatingSettings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            try:
                with open(path, "rb") as f:
                    data = tomli.load(f)
            except tomli.TOMLDecodeError as exc:
                raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    if overrides:
        data.update(overrides)

    return RatingSettings(**data)
