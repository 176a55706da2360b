"""Human-facing interpretation of ratings.

Turns numeric scores into the labels and advice shown next to a rating:
a one-line description, a performance level, a per-category status and
improvement suggestions for weak categories.  Also provides a quick
heuristic score for a single trade, used when there is not enough history
for a full rating.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.config import RatingSettings
from ..core.curves import clamp_score
from ..core.enums import Category, CategoryStatus, EmotionGroup, PerformanceLevel
from ..core.models import Trade
from .normalizer import coerce_number, resolve_emotions

# (threshold, description), highest first
_DESCRIPTIONS: tuple[tuple[float, str], ...] = (
    (9.0, "Exceptional - Elite trading performance"),
    (8.0, "Excellent - Superior trading skills"),
    (7.0, "Very Good - Above average performance"),
    (6.0, "Good - Competent trading"),
    (5.0, "Average - Room for improvement"),
    (4.0, "Below Average - Needs significant work"),
    (3.0, "Poor - Major improvements needed"),
    (2.0, "Very Poor - Fundamental issues"),
)
_CRITICAL = "Critical - Complete review required"

_LEVELS: tuple[tuple[float, PerformanceLevel], ...] = (
    (9.0, PerformanceLevel.ELITE),
    (7.5, PerformanceLevel.EXPERT),
    (6.0, PerformanceLevel.ADVANCED),
    (4.5, PerformanceLevel.DEVELOPING),
    (3.0, PerformanceLevel.NOVICE),
)

PASSING_SCORE = 7.0
WARNING_SCORE = 5.0
IMPROVEMENT_BELOW = 6.0

_IMPROVEMENTS: dict[Category, tuple[str, ...]] = {
    Category.PROFITABILITY: (
        "Focus on improving win rate through better entry/exit strategies",
        "Consider reducing position size to minimize losses",
        "Review losing trades to identify common patterns",
        "Implement stricter risk-reward ratios",
    ),
    Category.RISK_MANAGEMENT: (
        "Implement stop-loss orders consistently",
        "Reduce position size variability",
        "Avoid oversized trades (>2x average)",
        "Consider longer holding periods for better risk management",
    ),
    Category.CONSISTENCY: (
        "Focus on reducing P&L volatility",
        "Work on shorter loss streaks",
        "Improve monthly consistency with more positive months",
    ),
    Category.EMOTIONAL_DISCIPLINE: (
        "Focus on reducing negative emotional impact on trades",
        "Take breaks after emotional trades",
        "Develop pre-trade emotional checklist",
        "Work on improving emotional correlation with winning trades",
    ),
    Category.JOURNALING_ADHERENCE: (
        "Use journaling templates for consistency",
        "Focus on complete emotional logging",
        "Review journal entries weekly for insights",
        "Improve strategy usage documentation",
    ),
}


def describe_rating(rating: float) -> str:
    for threshold, description in _DESCRIPTIONS:
        if rating >= threshold:
            return description
    return _CRITICAL


def performance_level(rating: float) -> PerformanceLevel:
    for threshold, level in _LEVELS:
        if rating >= threshold:
            return level
    return PerformanceLevel.BEGINNER


def category_status(score: float) -> CategoryStatus:
    """Traffic-light status for a 0-10 category score."""
    if score >= PASSING_SCORE:
        return CategoryStatus.PASSING
    if score >= WARNING_SCORE:
        return CategoryStatus.WARNING
    return CategoryStatus.FAILING


def category_improvements(
    scores: Mapping[Category, float] | Mapping[str, float],
) -> dict[Category, list[str]]:
    """Suggestions for every category scoring below 6.0.

    Accepts either ``Category`` keys or their string values (as produced
    by ``CategoryScores.to_dict``).  Unknown keys are ignored.
    """
    improvements: dict[Category, list[str]] = {}
    for key, score in scores.items():
        try:
            category = Category(key)
        except ValueError:
            continue
        if score < IMPROVEMENT_BELOW:
            improvements[category] = list(_IMPROVEMENTS[category])
    return improvements


def rate_single_trade(
    trade: Trade | Mapping[str, Any],
    settings: RatingSettings | None = None,
) -> float:
    """Heuristic 0-10 score for one trade in isolation.

    Starts at 5.0, moves with the trade's P&L (at most +2 for a win, -3
    for a loss), then +/-0.5 for a positive or negative leading emotion
    tag and up to +1.0 for journaling (strategy 0.3, notes 0.3, emotion
    0.4).  A trade without a numeric P&L is scored on the rest alone.
    """
    settings = settings or RatingSettings()
    if not isinstance(trade, Trade):
        trade = Trade.model_validate(dict(trade))

    score = 5.0

    pnl = coerce_number(trade.pnl) or 0.0
    if pnl > 0:
        score += min(2.0, pnl / 10)
    elif pnl < 0:
        score -= min(3.0, abs(pnl) / 5)

    emotions = resolve_emotions(trade.emotional_state)
    if emotions:
        groups = settings.emotions.groups_of(emotions[:1])
        if EmotionGroup.POSITIVE in groups:
            score += 0.5
        elif EmotionGroup.NEGATIVE in groups:
            score -= 0.5

    if trade.has_strategy:
        score += 0.3
    if trade.has_notes:
        score += 0.3
    if emotions:
        score += 0.4

    return clamp_score(round(score, 2))
