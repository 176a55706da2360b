"""Shared numeric helpers for the metric extractors.

All helpers are NaN/inf safe and guard every division: an empty input or
a zero denominator returns ``0.0`` rather than raising or propagating NaN.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

import numpy as np

from ..core.models import NormalizedTrade

PROFIT_FACTOR_CAP = 999.0


def safe_percentage(value: float, total: float) -> float:
    """``value / total * 100``, or 0.0 when ``total`` is zero."""
    if total == 0:
        return 0.0
    return value / total * 100.0


def safe_mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (ddof=0); 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Standard deviation as a percentage of the mean; 0.0 for a non-positive mean."""
    mean = safe_mean(values)
    if mean <= 0:
        return 0.0
    return population_std(values) / mean * 100.0


def profit_factor(total_profit: float, total_loss: float) -> float:
    """Gross profit over gross loss, capped at ``PROFIT_FACTOR_CAP``.

    A history with profits and no losses reports the cap; one with no
    profit reports 0.0.
    """
    if total_profit <= 0:
        return 0.0
    if total_loss <= 0:
        return PROFIT_FACTOR_CAP
    return min(PROFIT_FACTOR_CAP, total_profit / total_loss)


def longest_streak(flags: Iterable[bool]) -> int:
    """Longest run of consecutive ``True`` values."""
    longest = 0
    current = 0
    for flag in flags:
        if flag:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def max_drawdown_percentage(
    pnls: Sequence[float],
    starting_equity: float = 0.0,
    denominator_floor: float = 0.0,
) -> float:
    """Largest peak-to-trough decline of the equity curve, in percent.

    The curve is ``starting_equity`` plus cumulative P&L in the given
    order.  Each point's drawdown is ``(peak - equity) / max(peak,
    denominator_floor)``, where the running peak starts at
    ``starting_equity``.  Points whose running peak is not positive
    contribute 0; the floor only steadies a small positive peak.
    """
    if len(pnls) == 0:
        return 0.0
    equity = starting_equity + np.cumsum(np.asarray(pnls, dtype=float))
    peaks = np.maximum.accumulate(np.concatenate(([starting_equity], equity)))[1:]
    denominators = np.maximum(peaks, denominator_floor)
    drawdowns = np.divide(
        peaks - equity,
        denominators,
        out=np.zeros_like(equity),
        where=peaks > 0,
    )
    return max(0.0, float(drawdowns.max()) * 100.0)


def monthly_totals(trades: Iterable[NormalizedTrade]) -> dict[str, float]:
    """Summed P&L per ``YYYY-MM`` month, in calendar order; undated trades skipped."""
    totals: dict[str, float] = defaultdict(float)
    for trade in trades:
        month = trade.month
        if month is not None:
            totals[month] += trade.pnl
    return dict(sorted(totals.items()))


def large_loss_threshold(
    loss_magnitudes: Sequence[float],
    *,
    floor: float,
    mean_multiple: float,
    std_multiple: float,
) -> float:
    """Loss size above which a single loss counts as "large".

    Calibrated to the account's own losses so that ordinary losing trades
    (within one standard deviation of the mean loss) are never flagged.
    """
    if len(loss_magnitudes) == 0:
        return floor
    mean_loss = safe_mean(loss_magnitudes)
    std_loss = population_std(loss_magnitudes)
    return max(floor, mean_loss * mean_multiple, mean_loss + std_multiple * std_loss)
