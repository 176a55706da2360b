"""Per-category metric extractors.

Five independent, side-effect-free functions.  Each consumes the
normalized (P&L-bearing, chronological) trade list and returns a small
frozen bag of numbers for its category; journaling adherence is the one
exception and looks at every logged trade, P&L or not.

    Category              Metrics
    ─────────────────────────────────────────────────────────────────
    Profitability         net P&L % of capital, win rate, positive months %
    Risk Management       max drawdown %, large-loss %, size variability,
                          average holding duration, oversized trades %
    Consistency           P&L volatility %, longest loss streak,
                          monthly consistency ratio
    Emotional Discipline  positive / negative tag shares, tag-win
                          correlation, emotion logging completeness
    Journaling Adherence  notes / strategy / emotion usage, completeness
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from ..core.config import CapitalConfig, RatingSettings
from ..core.enums import CapitalBase, EmotionGroup
from ..core.models import NormalizedTrade, Trade
from .normalizer import resolve_emotions
from .stats import (
    coefficient_of_variation,
    large_loss_threshold,
    longest_streak,
    max_drawdown_percentage,
    monthly_totals,
    population_std,
    profit_factor,
    safe_mean,
    safe_percentage,
)


def _rounded(values: dict[str, Any], places: int = 4) -> dict[str, Any]:
    return {
        k: round(v, places) if isinstance(v, float) else v
        for k, v in values.items()
    }


# ================================================================== #
# Metric containers                                                   #
# ================================================================== #

@dataclass(frozen=True)
class ProfitabilityMetrics:
    net_pl_percentage: float = 0.0
    win_rate: float = 0.0
    positive_months_percentage: float = 0.0
    total_profit: float = 0.0
    total_loss: float = 0.0
    net_pnl: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0
    profit_factor: float = 0.0
    capital_base: float = 0.0
    monthly_pl: tuple[tuple[str, float], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data = _rounded(asdict(self))
        data["monthly_pl"] = [
            {"month": month, "pl": round(pl, 2)} for month, pl in self.monthly_pl
        ]
        return data


@dataclass(frozen=True)
class RiskManagementMetrics:
    max_drawdown_percentage: float = 0.0
    large_loss_percentage: float = 0.0
    quantity_variability: float = 0.0
    average_trade_duration: float = 0.0  # Hours
    duration_samples: int = 0
    oversized_trades_percentage: float = 0.0
    large_loss_threshold: float = 0.0
    net_profitable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _rounded(asdict(self))


@dataclass(frozen=True)
class ConsistencyMetrics:
    pl_std_dev_percentage: float = 0.0
    longest_loss_streak: int = 0
    monthly_consistency_ratio: float = 0.0
    months_observed: int = 0

    def to_dict(self) -> dict[str, Any]:
        return _rounded(asdict(self))


@dataclass(frozen=True)
class EmotionalDisciplineMetrics:
    positive_emotion_percentage: float = 0.0
    negative_impact_percentage: float = 0.0
    positive_emotion_win_correlation: float = 0.0
    emotion_logging_completeness: float = 0.0
    negative_emotion_loss_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return _rounded(asdict(self))


@dataclass(frozen=True)
class JournalingAdherenceMetrics:
    completeness_percentage: float = 0.0
    strategy_usage: float = 0.0
    notes_usage: float = 0.0
    emotion_usage: float = 0.0
    total_logged_trades: int = 0

    def to_dict(self) -> dict[str, Any]:
        return _rounded(asdict(self))


# ================================================================== #
# Profitability                                                       #
# ================================================================== #

def resolve_capital_base(
    trades: Sequence[NormalizedTrade],
    capital: CapitalConfig,
) -> float:
    """Capital the net P&L is measured against (0.0 when unknown)."""
    if capital.starting_balance is not None:
        return capital.starting_balance
    notionals = [t.notional for t in trades]
    if not notionals:
        return 0.0
    if capital.capital_base == CapitalBase.TOTAL_NOTIONAL:
        return sum(notionals)
    return max(notionals)


def extract_profitability(
    trades: Sequence[NormalizedTrade],
    settings: RatingSettings | None = None,
) -> ProfitabilityMetrics:
    settings = settings or RatingSettings()
    if not trades:
        return ProfitabilityMetrics()

    wins = [t.pnl for t in trades if t.is_win]
    losses = [t.pnl for t in trades if t.is_loss]
    total_profit = sum(wins)
    total_loss = abs(sum(losses))
    net_pnl = total_profit - total_loss

    base = resolve_capital_base(trades, settings.capital)
    months = monthly_totals(trades)
    positive_months = sum(1 for pl in months.values() if pl > 0)

    return ProfitabilityMetrics(
        net_pl_percentage=safe_percentage(net_pnl, base),
        win_rate=safe_percentage(len(wins), len(trades)),
        positive_months_percentage=safe_percentage(positive_months, len(months)),
        total_profit=total_profit,
        total_loss=total_loss,
        net_pnl=net_pnl,
        winning_trades=len(wins),
        losing_trades=len(losses),
        profit_factor=profit_factor(total_profit, total_loss),
        capital_base=base,
        monthly_pl=tuple(months.items()),
    )


# ================================================================== #
# Risk management                                                     #
# ================================================================== #

def extract_risk_management(
    trades: Sequence[NormalizedTrade],
    settings: RatingSettings | None = None,
) -> RiskManagementMetrics:
    settings = settings or RatingSettings()
    if not trades:
        return RiskManagementMetrics(large_loss_threshold=settings.large_loss.floor)

    pnls = [t.pnl for t in trades]
    starting = settings.capital.starting_balance or 0.0
    drawdown = max_drawdown_percentage(
        pnls,
        starting_equity=starting,
        denominator_floor=safe_mean([abs(p) for p in pnls]),
    )

    loss_sizes = [abs(p) for p in pnls if p < 0]
    threshold = large_loss_threshold(
        loss_sizes,
        floor=settings.large_loss.floor,
        mean_multiple=settings.large_loss.mean_loss_multiple,
        std_multiple=settings.large_loss.std_multiple,
    )
    large_losses = sum(1 for size in loss_sizes if size > threshold)

    quantities = [t.quantity for t in trades if t.quantity > 0]
    mean_quantity = safe_mean(quantities)
    oversized = sum(
        1 for q in quantities
        if mean_quantity > 0 and q > mean_quantity * settings.risk.oversized_multiple
    )

    durations = [t.duration_hours for t in trades if t.duration_hours is not None]

    return RiskManagementMetrics(
        max_drawdown_percentage=drawdown,
        large_loss_percentage=safe_percentage(large_losses, len(trades)),
        quantity_variability=coefficient_of_variation(quantities),
        average_trade_duration=safe_mean(durations),
        duration_samples=len(durations),
        oversized_trades_percentage=safe_percentage(oversized, len(quantities)),
        large_loss_threshold=threshold,
        net_profitable=sum(pnls) > 0,
    )


# ================================================================== #
# Consistency                                                         #
# ================================================================== #

def extract_consistency(trades: Sequence[NormalizedTrade]) -> ConsistencyMetrics:
    if not trades:
        return ConsistencyMetrics()

    pnls = [t.pnl for t in trades]
    trade_size = safe_mean([abs(p) for p in pnls])
    volatility = safe_percentage(population_std(pnls), trade_size)

    months = monthly_totals(trades)
    positive_months = sum(1 for pl in months.values() if pl > 0)
    ratio = positive_months / len(months) if months else 0.0

    return ConsistencyMetrics(
        pl_std_dev_percentage=volatility,
        longest_loss_streak=longest_streak(t.is_loss for t in trades),
        monthly_consistency_ratio=ratio,
        months_observed=len(months),
    )


# ================================================================== #
# Emotional discipline                                                #
# ================================================================== #

def extract_emotional_discipline(
    trades: Sequence[NormalizedTrade],
    settings: RatingSettings | None = None,
) -> EmotionalDisciplineMetrics:
    settings = settings or RatingSettings()
    if not trades:
        return EmotionalDisciplineMetrics()

    vocabulary = settings.emotions
    overall_win_rate = safe_percentage(sum(1 for t in trades if t.is_win), len(trades))

    tagged = [t for t in trades if t.emotions]
    positive_credit = 0.0
    positive_win_credit = 0.0
    negative_trades = 0
    negative_wins = 0
    negative_losses = 0

    for trade in tagged:
        credit = vocabulary.positive_credit(trade.emotions)
        positive_credit += credit
        if trade.is_win:
            positive_win_credit += credit
        if EmotionGroup.NEGATIVE in vocabulary.groups_of(trade.emotions):
            negative_trades += 1
            if trade.is_win:
                negative_wins += 1
            elif trade.is_loss:
                negative_losses += 1

    positive_win_rate = (
        safe_percentage(positive_win_credit, positive_credit)
        if positive_credit > 0 else overall_win_rate
    )
    negative_win_rate = (
        safe_percentage(negative_wins, negative_trades)
        if negative_trades > 0 else overall_win_rate
    )

    return EmotionalDisciplineMetrics(
        positive_emotion_percentage=safe_percentage(positive_credit, len(tagged)),
        negative_impact_percentage=safe_percentage(negative_trades, len(tagged)),
        positive_emotion_win_correlation=positive_win_rate - negative_win_rate,
        emotion_logging_completeness=safe_percentage(len(tagged), len(trades)),
        negative_emotion_loss_rate=safe_percentage(negative_losses, negative_trades),
    )


# ================================================================== #
# Journaling adherence                                                #
# ================================================================== #

def extract_journaling_adherence(trades: Sequence[Trade]) -> JournalingAdherenceMetrics:
    """Record-keeping completeness over every logged trade.

    Takes the raw trades (not the normalized list) because journaling
    quality does not depend on whether the trade has a realized P&L.
    """
    if not trades:
        return JournalingAdherenceMetrics()

    total = len(trades)
    strategy = sum(1 for t in trades if t.has_strategy)
    notes = sum(1 for t in trades if t.has_notes)
    emotions = sum(1 for t in trades if resolve_emotions(t.emotional_state))

    strategy_usage = safe_percentage(strategy, total)
    notes_usage = safe_percentage(notes, total)
    emotion_usage = safe_percentage(emotions, total)

    return JournalingAdherenceMetrics(
        completeness_percentage=(strategy_usage + notes_usage + emotion_usage) / 3,
        strategy_usage=strategy_usage,
        notes_usage=notes_usage,
        emotion_usage=emotion_usage,
        total_logged_trades=total,
    )
