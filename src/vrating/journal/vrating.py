"""VRating — overall 1-10 trader performance rating.

Pipeline::

    raw trades ──> normalize ──> five extractors ──> BandScorer ──> aggregate
                                                                      │
                                                                VRatingResult

The overall rating is a fixed-weight sum of five category scores:

    Category              Weight   Measures
    ──────────────────────────────────────────────────────────────────
    Profitability          30%     net return on capital, win rate
    Risk Management        25%     drawdown, large losses, sizing, holding
    Consistency            20%     P&L volatility, loss streaks, months
    Emotional Discipline   15%     emotion tags and their outcomes
    Journaling Adherence   10%     notes / strategy / emotion logging

Usage::

    from vrating import calculate_vrating

    result = calculate_vrating(trades)
    result.overall_rating                  # 7.42
    result.category_scores.risk_management # 8.1
    print(result.summary_table())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..core.config import CategoryWeights, RatingSettings
from ..core.curves import clamp_score
from ..core.enums import Category
from ..core.models import NormalizedTrade, Trade
from ..observability.logger import rating_scope
from .bands import BandScorer, CategoryAssessment
from .extractors import (
    ConsistencyMetrics,
    EmotionalDisciplineMetrics,
    JournalingAdherenceMetrics,
    ProfitabilityMetrics,
    RiskManagementMetrics,
    extract_consistency,
    extract_emotional_discipline,
    extract_journaling_adherence,
    extract_profitability,
    extract_risk_management,
)
from .insights import category_status, describe_rating, performance_level
from .normalizer import coerce_trades, normalize_rows

logger = logging.getLogger(__name__)

_DISPLAY_NAMES: dict[Category, str] = {
    Category.PROFITABILITY: "Profitability",
    Category.RISK_MANAGEMENT: "Risk Management",
    Category.CONSISTENCY: "Consistency",
    Category.EMOTIONAL_DISCIPLINE: "Emotional Discipline",
    Category.JOURNALING_ADHERENCE: "Journaling Adherence",
}


# ================================================================== #
# Result types                                                        #
# ================================================================== #

@dataclass(frozen=True)
class CategoryScores:
    """The five 0-10 category scores."""

    profitability: float
    risk_management: float
    consistency: float
    emotional_discipline: float
    journaling_adherence: float

    @classmethod
    def uniform(cls, score: float) -> CategoryScores:
        return cls(score, score, score, score, score)

    def as_dict(self) -> dict[Category, float]:
        return {
            Category.PROFITABILITY: self.profitability,
            Category.RISK_MANAGEMENT: self.risk_management,
            Category.CONSISTENCY: self.consistency,
            Category.EMOTIONAL_DISCIPLINE: self.emotional_discipline,
            Category.JOURNALING_ADHERENCE: self.journaling_adherence,
        }

    def to_dict(self) -> dict[str, float]:
        return {c.value: round(s, 2) for c, s in self.as_dict().items()}


@dataclass(frozen=True)
class RatingMetrics:
    """Raw metrics behind each category score."""

    profitability: ProfitabilityMetrics = field(default_factory=ProfitabilityMetrics)
    risk_management: RiskManagementMetrics = field(default_factory=RiskManagementMetrics)
    consistency: ConsistencyMetrics = field(default_factory=ConsistencyMetrics)
    emotional_discipline: EmotionalDisciplineMetrics = field(
        default_factory=EmotionalDisciplineMetrics
    )
    journaling_adherence: JournalingAdherenceMetrics = field(
        default_factory=JournalingAdherenceMetrics
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "profitability": self.profitability.to_dict(),
            "risk_management": self.risk_management.to_dict(),
            "consistency": self.consistency.to_dict(),
            "emotional_discipline": self.emotional_discipline.to_dict(),
            "journaling_adherence": self.journaling_adherence.to_dict(),
        }


@dataclass(frozen=True)
class RatingPeriod:
    """First and last trade date among rated trades (``None`` when unknown)."""

    start_date: date | None = None
    end_date: date | None = None

    @classmethod
    def of(cls, trades: Iterable[NormalizedTrade]) -> RatingPeriod:
        dates = [t.trade_date for t in trades if t.trade_date is not None]
        if not dates:
            return cls()
        return cls(start_date=min(dates), end_date=max(dates))

    def to_dict(self) -> dict[str, str | None]:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }


@dataclass(frozen=True)
class VRatingResult:
    """Immutable snapshot of one rating run."""

    overall_rating: float
    category_scores: CategoryScores
    metrics: RatingMetrics
    trade_count: int
    total_logged_trades: int = 0
    period: RatingPeriod = field(default_factory=RatingPeriod)
    assessments: tuple[CategoryAssessment, ...] = ()
    weights: CategoryWeights = field(default_factory=CategoryWeights)

    @property
    def description(self) -> str:
        return describe_rating(self.overall_rating)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_rating": round(self.overall_rating, 2),
            "description": self.description,
            "performance_level": performance_level(self.overall_rating).value,
            "category_scores": self.category_scores.to_dict(),
            "metrics": self.metrics.to_dict(),
            "trade_count": self.trade_count,
            "total_logged_trades": self.total_logged_trades,
            "period": self.period.to_dict(),
        }

    def summary_table(self) -> str:
        """Format as a human-readable summary table."""
        start = self.period.start_date.isoformat() if self.period.start_date else "-"
        end = self.period.end_date.isoformat() if self.period.end_date else "-"
        lines = [
            "╔══════════════════════════════════════════════════════════════╗",
            f"║  VRATING: {self.overall_rating:<5.2f} {self.description:<45}║",
            f"║  Trades: {self.trade_count:<5} Logged: {self.total_logged_trades:<5} "
            f"Period: {start:<10} - {end:<11}║",
            "╠══════════════════════════════════════════════════════════════╣",
            f"║  {'Category':<24} {'Weight':>8} {'Score':>8}   {'Status':<15}║",
            f"║  {'─' * 60}║",
        ]
        weights = self.weights.as_dict()
        for category, score in self.category_scores.as_dict().items():
            lines.append(
                f"║  {_DISPLAY_NAMES[category]:<24} {weights[category]:>8.0%} "
                f"{score:>8.2f}   {category_status(score).value:<15}║"
            )
        lines.append("╚══════════════════════════════════════════════════════════════╝")
        return "\n".join(lines)


# ================================================================== #
# Aggregation                                                         #
# ================================================================== #

def aggregate(
    scores: CategoryScores,
    weights: CategoryWeights | None = None,
    floor: float = 1.0,
    ceiling: float = 10.0,
) -> float:
    """Weighted sum of the category scores, clamped to ``[floor, ceiling]``."""
    weights = weights or CategoryWeights()
    values = scores.as_dict()
    total = sum(weight * values[category] for category, weight in weights.as_dict().items())
    return clamp_score(total, floor, ceiling)


def calculate_vrating(
    trades: Iterable[Trade | Mapping[str, Any]],
    settings: RatingSettings | None = None,
) -> VRatingResult:
    """Rate a trade history on the 1-10 VRating scale.

    Args:
        trades: Journal rows, as ``Trade`` models or plain mappings.  Rows
            without a numeric P&L are excluded from every statistic but
            still count towards journaling adherence.
        settings: Weights, band curves and thresholds.  Defaults apply
            when omitted.

    Raises:
        InvalidTradeInputError: If ``trades`` is not a collection of trade
            records.  Malformed field values inside a record never raise.
    """
    settings = settings or RatingSettings()
    raw = coerce_trades(trades)
    with rating_scope():
        return _rate(raw, settings)


def _rate(raw: list[Trade], settings: RatingSettings) -> VRatingResult:
    normalized = normalize_rows(raw)

    if not normalized:
        scores = CategoryScores.uniform(settings.rating_floor)
        result = VRatingResult(
            overall_rating=aggregate(
                scores, settings.weights, settings.rating_floor, settings.rating_ceiling
            ),
            category_scores=scores,
            metrics=RatingMetrics(
                journaling_adherence=extract_journaling_adherence(raw),
            ),
            trade_count=0,
            total_logged_trades=len(raw),
            weights=settings.weights,
        )
        logger.info(
            "VRating: no rateable trades (logged=%d), rating=%.2f",
            len(raw),
            result.overall_rating,
        )
        return result

    metrics = RatingMetrics(
        profitability=extract_profitability(normalized, settings),
        risk_management=extract_risk_management(normalized, settings),
        consistency=extract_consistency(normalized),
        emotional_discipline=extract_emotional_discipline(normalized, settings),
        journaling_adherence=extract_journaling_adherence(raw),
    )

    scorer = BandScorer(settings)
    assessments = (
        scorer.score_profitability(metrics.profitability),
        scorer.score_risk_management(metrics.risk_management),
        scorer.score_consistency(metrics.consistency),
        scorer.score_emotional_discipline(
            metrics.emotional_discipline, metrics.profitability.net_pnl
        ),
        scorer.score_journaling_adherence(metrics.journaling_adherence),
    )
    scores = CategoryScores(*(a.score for a in assessments))
    overall = aggregate(
        scores, settings.weights, settings.rating_floor, settings.rating_ceiling
    )

    result = VRatingResult(
        overall_rating=overall,
        category_scores=scores,
        metrics=metrics,
        trade_count=len(normalized),
        total_logged_trades=len(raw),
        weights=settings.weights,
        period=RatingPeriod.of(normalized),
        assessments=assessments,
    )

    logger.info(
        "VRating: rating=%.2f level=%s trades=%d logged=%d "
        "profitability=%.2f risk=%.2f consistency=%.2f emotional=%.2f journaling=%.2f",
        overall,
        performance_level(overall).value,
        result.trade_count,
        result.total_logged_trades,
        scores.profitability,
        scores.risk_management,
        scores.consistency,
        scores.emotional_discipline,
        scores.journaling_adherence,
    )
    return result
