"""Band scorer — turns category metrics into 0-10 sub-scores.

Each category has a handful of axes (one per metric), each axis has a
``BandCurve`` in ``RatingSettings``.  Axis scores are interpolated between
named anchors, then combined per category:

    Category              Combination
    ─────────────────────────────────────────────────────────────
    Profitability         weighted mean (+ positive-months and
                          profit-factor bonuses)
    Risk Management       weighted mean, weakest-link capped,
                          relaxed curves for net-profitable accounts,
                          oversized-position penalty
    Consistency           weighted mean, weakest-link capped
    Emotional Discipline  weighted mean (+ profitable-account bonus)
    Journaling Adherence  completeness curve (+ full emotion logging bonus)

An axis with nothing to measure (no capital base, no holding durations,
no dated months) is left out of its category rather than scored as poor.
Every category score is clamped to [0, 10].
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..core.config import RatingSettings
from ..core.curves import BandCurve, clamp_score, weakest_link, weighted_mean
from ..core.enums import Category
from .extractors import (
    ConsistencyMetrics,
    EmotionalDisciplineMetrics,
    JournalingAdherenceMetrics,
    ProfitabilityMetrics,
    RiskManagementMetrics,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AxisScore:
    """One metric placed on its scoring curve."""

    name: str
    value: float
    score: float
    band: str


@dataclass(frozen=True)
class CategoryAssessment:
    """A category's final score with the axis breakdown behind it."""

    category: Category
    score: float
    axes: tuple[AxisScore, ...] = field(default_factory=tuple)
    adjustments: tuple[tuple[str, float], ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "score": round(self.score, 2),
            "axes": [
                {
                    "name": a.name,
                    "value": round(a.value, 4),
                    "score": round(a.score, 2),
                    "band": a.band,
                }
                for a in self.axes
            ],
            "adjustments": [
                {"reason": reason, "delta": delta} for reason, delta in self.adjustments
            ],
        }


def _axis(name: str, value: float, band_curve: BandCurve) -> AxisScore:
    return AxisScore(
        name=name,
        value=value,
        score=band_curve.score(value),
        band=band_curve.band(value),
    )


def _scores(axes: Iterable[AxisScore]) -> dict[str, float]:
    return {a.name: a.score for a in axes}


class BandScorer:
    """Maps category metrics to 0-10 scores using configured band curves.

    Parameters
    ----------
    settings : RatingSettings | None
        Source of every curve, weight and bonus.  Defaults are used when
        omitted.
    """

    def __init__(self, settings: RatingSettings | None = None) -> None:
        self._settings = settings or RatingSettings()

    # ------------------------------------------------------------------ #
    # Profitability                                                        #
    # ------------------------------------------------------------------ #

    def score_profitability(self, metrics: ProfitabilityMetrics) -> CategoryAssessment:
        bands = self._settings.profitability
        axes = []
        if metrics.capital_base > 0:
            axes.append(_axis("net_return", metrics.net_pl_percentage, bands.net_return))
        axes.append(_axis("win_rate", metrics.win_rate, bands.win_rate))
        score = weighted_mean(_scores(axes), bands.axis_weights)

        adjustments: list[tuple[str, float]] = []
        if metrics.positive_months_percentage > bands.positive_months_bonus_above:
            adjustments.append(("positive_months", bands.positive_months_bonus))
        if metrics.profit_factor >= bands.profit_factor_bonus_at:
            adjustments.append(("profit_factor", bands.profit_factor_bonus))

        return self._finish(Category.PROFITABILITY, score, tuple(axes), adjustments)

    # ------------------------------------------------------------------ #
    # Risk management                                                      #
    # ------------------------------------------------------------------ #

    def score_risk_management(self, metrics: RiskManagementMetrics) -> CategoryAssessment:
        bands = self._settings.risk
        relaxed = metrics.net_profitable
        axes = [
            _axis(
                "drawdown",
                metrics.max_drawdown_percentage,
                bands.drawdown_relaxed if relaxed else bands.drawdown,
            ),
            _axis("large_loss", metrics.large_loss_percentage, bands.large_loss),
            _axis(
                "variability",
                metrics.quantity_variability,
                bands.variability_relaxed if relaxed else bands.variability,
            ),
        ]
        if metrics.duration_samples > 0:
            axes.append(
                _axis("duration", metrics.average_trade_duration, bands.duration)
            )
        score = weakest_link(
            _scores(axes),
            bands.axis_weights,
            bands.weakest_link_headroom,
            capped_by=bands.weakest_link_axes,
        )

        adjustments: list[tuple[str, float]] = []
        if metrics.oversized_trades_percentage > bands.oversized_penalty_above:
            adjustments.append(("oversized_trades", -bands.oversized_penalty))

        return self._finish(Category.RISK_MANAGEMENT, score, tuple(axes), adjustments)

    # ------------------------------------------------------------------ #
    # Consistency                                                          #
    # ------------------------------------------------------------------ #

    def score_consistency(self, metrics: ConsistencyMetrics) -> CategoryAssessment:
        bands = self._settings.consistency
        axes = [
            _axis("volatility", metrics.pl_std_dev_percentage, bands.volatility),
            _axis("loss_streak", float(metrics.longest_loss_streak), bands.loss_streak),
        ]
        if metrics.months_observed > 0:
            axes.append(
                _axis(
                    "monthly_ratio",
                    metrics.monthly_consistency_ratio,
                    bands.monthly_ratio,
                )
            )
        score = weakest_link(_scores(axes), bands.axis_weights, bands.weakest_link_headroom)
        return self._finish(Category.CONSISTENCY, score, tuple(axes), [])

    # ------------------------------------------------------------------ #
    # Emotional discipline                                                 #
    # ------------------------------------------------------------------ #

    def score_emotional_discipline(
        self,
        metrics: EmotionalDisciplineMetrics,
        net_pnl: float = 0.0,
    ) -> CategoryAssessment:
        bands = self._settings.emotional
        axes = (
            _axis("positive", metrics.positive_emotion_percentage, bands.positive),
            _axis("negative", metrics.negative_impact_percentage, bands.negative),
            _axis(
                "win_correlation",
                metrics.positive_emotion_win_correlation,
                bands.win_correlation,
            ),
            _axis(
                "logging_completeness",
                metrics.emotion_logging_completeness,
                bands.logging_completeness,
            ),
        )
        score = weighted_mean(_scores(axes), bands.axis_weights)

        adjustments: list[tuple[str, float]] = []
        if net_pnl > 0 and score < bands.profitable_bonus_below:
            adjustments.append(("profitable_account", bands.profitable_bonus))

        return self._finish(Category.EMOTIONAL_DISCIPLINE, score, axes, adjustments)

    # ------------------------------------------------------------------ #
    # Journaling adherence                                                 #
    # ------------------------------------------------------------------ #

    def score_journaling_adherence(
        self, metrics: JournalingAdherenceMetrics
    ) -> CategoryAssessment:
        bands = self._settings.journaling
        axes = (
            _axis("completeness", metrics.completeness_percentage, bands.completeness),
        )
        score = axes[0].score

        adjustments: list[tuple[str, float]] = []
        if metrics.emotion_usage >= 100.0:
            adjustments.append(("full_emotion_logging", bands.full_emotion_logging_bonus))

        return self._finish(Category.JOURNALING_ADHERENCE, score, axes, adjustments)

    # ------------------------------------------------------------------ #

    @staticmethod
    def _finish(
        category: Category,
        base_score: float,
        axes: tuple[AxisScore, ...],
        adjustments: list[tuple[str, float]],
    ) -> CategoryAssessment:
        score = clamp_score(base_score + sum(delta for _, delta in adjustments))
        logger.debug(
            "Band score: category=%s base=%.2f final=%.2f adjustments=%s",
            category.value,
            base_score,
            score,
            adjustments,
        )
        return CategoryAssessment(
            category=category,
            score=score,
            axes=axes,
            adjustments=tuple(adjustments),
        )
