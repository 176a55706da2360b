"""Enumerations used across the rating engine."""

from enum import Enum


class Category(str, Enum):
    PROFITABILITY = "profitability"
    RISK_MANAGEMENT = "risk_management"
    CONSISTENCY = "consistency"
    EMOTIONAL_DISCIPLINE = "emotional_discipline"
    JOURNALING_ADHERENCE = "journaling_adherence"


class EmotionGroup(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    NORMAL_TRADING = "normal_trading"  # Ordinary responses, lightly weighted
    UNKNOWN = "unknown"


class CapitalBase(str, Enum):
    """How net P&L is turned into a return percentage."""

    PEAK_NOTIONAL = "peak_notional"  # Largest single quantity * entry price
    TOTAL_NOTIONAL = "total_notional"  # Sum of all position notionals


class PerformanceLevel(str, Enum):
    ELITE = "elite"
    EXPERT = "expert"
    ADVANCED = "advanced"
    DEVELOPING = "developing"
    NOVICE = "novice"
    BEGINNER = "beginner"


class CategoryStatus(str, Enum):
    PASSING = "passing"
    WARNING = "warning"
    FAILING = "failing"
