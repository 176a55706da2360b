"""Piecewise-linear scoring curves with named anchor bands.

A curve maps a raw metric (drawdown %, win rate, loss streak, ...) onto a
0-10 score.  Each anchor pins one metric value to one score and names the
band it represents ("excellent", "good", "moderate", "poor").  Values
between anchors are linearly interpolated so that a metric sitting on a
band boundary never causes a score jump; values beyond the outer anchors
are clamped to the outer scores.

Usage::

    drawdown = curve(
        (0, 10.0, "excellent"),
        (10, 8.0, "good"),
        (20, 5.5, "moderate"),
        (30, 2.0, "poor"),
    )
    drawdown.score(15.0)   # 6.75
    drawdown.band(15.0)    # "good" (nearest anchor)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

import numpy as np
from pydantic import BaseModel, model_validator

from .errors import BandCurveError

SCORE_MIN = 0.0
SCORE_MAX = 10.0


class BandAnchor(BaseModel):
    """One interpolation point: ``value`` scores ``score`` in ``band``."""

    model_config = {"frozen": True}

    value: float
    score: float
    band: str = ""


class BandCurve(BaseModel):
    """Monotonic scoring curve defined by ordered anchors."""

    model_config = {"frozen": True}

    anchors: tuple[BandAnchor, ...]

    @model_validator(mode="after")
    def _check_anchors(self) -> "BandCurve":
        if len(self.anchors) < 2:
            raise BandCurveError("A band curve needs at least two anchors")
        values = [a.value for a in self.anchors]
        if any(b <= a for a, b in zip(values, values[1:])):
            raise BandCurveError(
                f"Band anchors must be strictly increasing, got {values}"
            )
        for anchor in self.anchors:
            if not SCORE_MIN <= anchor.score <= SCORE_MAX:
                raise BandCurveError(
                    f"Anchor score {anchor.score} outside "
                    f"[{SCORE_MIN}, {SCORE_MAX}]"
                )
        return self

    @property
    def higher_is_better(self) -> bool:
        return self.anchors[-1].score >= self.anchors[0].score

    def score(self, value: float) -> float:
        """Interpolated score for ``value``; non-finite input gets the worst score."""
        if not math.isfinite(value):
            return min(a.score for a in self.anchors)
        xs = np.array([a.value for a in self.anchors], dtype=float)
        ys = np.array([a.score for a in self.anchors], dtype=float)
        return float(np.interp(value, xs, ys))

    def band(self, value: float) -> str:
        """Name of the anchor band nearest to ``value``."""
        if not math.isfinite(value):
            worst = min(self.anchors, key=lambda a: a.score)
            return worst.band
        nearest = min(self.anchors, key=lambda a: abs(a.value - value))
        return nearest.band


def curve(*points: tuple[float, float, str]) -> BandCurve:
    """Build a curve from ``(value, score, band)`` tuples."""
    return BandCurve(
        anchors=tuple(
            BandAnchor(value=value, score=score, band=band)
            for value, score, band in points
        )
    )


def clamp_score(
    value: float,
    lower: float = SCORE_MIN,
    upper: float = SCORE_MAX,
) -> float:
    """Clip to ``[lower, upper]``; NaN and infinities collapse to ``lower``."""
    if math.isnan(value) or math.isinf(value):
        return lower
    return max(lower, min(upper, value))


def weighted_mean(scores: Mapping[str, float], weights: Mapping[str, float]) -> float:
    """Weighted mean of axis scores; axes without a weight are ignored."""
    total_weight = sum(weights.get(name, 0.0) for name in scores)
    if total_weight <= 0:
        return 0.0
    return sum(s * weights.get(name, 0.0) for name, s in scores.items()) / total_weight


def weakest_link(
    scores: Mapping[str, float],
    weights: Mapping[str, float],
    headroom: float,
    capped_by: Iterable[str] | None = None,
) -> float:
    """Weighted mean capped by the two weakest axes.

    The ceiling is the mean of the two lowest axis scores plus ``headroom``,
    so two axes in the poor band pull the category down even when the
    remaining axes are excellent.  Both terms are continuous in the axis
    scores, so the result stays continuous too.

    ``capped_by`` restricts the ceiling to the named axes; the others only
    contribute to the weighted mean.
    """
    if not scores:
        return 0.0
    mean = weighted_mean(scores, weights)
    if capped_by is None:
        candidates = list(scores.values())
    else:
        names = set(capped_by)
        candidates = [s for name, s in scores.items() if name in names]
    if not candidates:
        return mean
    lowest = sorted(candidates)[:2]
    ceiling = sum(lowest) / len(lowest) + headroom
    return min(mean, ceiling)
