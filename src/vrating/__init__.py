"""VRating — trading performance rating engine.

Rates a trader's journaled history on a 1-10 scale from five weighted
categories: profitability, risk management, consistency, emotional
discipline and journaling adherence.

Usage::

    from vrating import calculate_vrating, load_settings

    result = calculate_vrating(trades, load_settings("vrating.toml"))
    print(result.summary_table())
"""

from .core.config import RatingSettings, load_settings
from .core.enums import Category, CategoryStatus, PerformanceLevel
from .core.errors import ConfigError, InvalidTradeInputError, VRatingError
from .core.models import NormalizedTrade, Trade
from .journal import (
    VRatingResult,
    calculate_vrating,
    category_improvements,
    category_status,
    describe_rating,
    performance_level,
    rate_single_trade,
)

__all__ = [
    "RatingSettings",
    "load_settings",
    "Category",
    "CategoryStatus",
    "PerformanceLevel",
    "VRatingError",
    "ConfigError",
    "InvalidTradeInputError",
    "Trade",
    "NormalizedTrade",
    "VRatingResult",
    "calculate_vrating",
    "category_improvements",
    "category_status",
    "describe_rating",
    "performance_level",
    "rate_single_trade",
]
