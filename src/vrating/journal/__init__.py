"""Trade Journal Rating — the VRating performance engine.

Scores a journal's trade history on a 1-10 scale across five weighted
categories, from the raw rows the journal stores.

Key components
--------------
**Pipeline**

normalize             Canonical, chronological, P&L-bearing trades
extract_*             Per-category metric extractors (five)
BandScorer            Metrics to 0-10 category scores via band curves
aggregate             Fixed-weight overall rating, clamped to [1, 10]
calculate_vrating     Entry point: trades in, VRatingResult out

**Interpretation**

describe_rating       One-line description of an overall rating
performance_level     Elite / Expert / ... / Beginner
category_status       passing / warning / failing per category
category_improvements Suggestions for weak categories
rate_single_trade     Heuristic score for one trade in isolation
"""

from .normalizer import normalize, resolve_emotions, compute_duration_hours
from .extractors import (
    ProfitabilityMetrics,
    RiskManagementMetrics,
    ConsistencyMetrics,
    EmotionalDisciplineMetrics,
    JournalingAdherenceMetrics,
    extract_profitability,
    extract_risk_management,
    extract_consistency,
    extract_emotional_discipline,
    extract_journaling_adherence,
)
from .bands import BandScorer, CategoryAssessment
from .vrating import (
    CategoryScores,
    RatingMetrics,
    RatingPeriod,
    VRatingResult,
    aggregate,
    calculate_vrating,
)
from .insights import (
    describe_rating,
    performance_level,
    category_status,
    category_improvements,
    rate_single_trade,
)

__all__ = [
    "normalize",
    "resolve_emotions",
    "compute_duration_hours",
    "ProfitabilityMetrics",
    "RiskManagementMetrics",
    "ConsistencyMetrics",
    "EmotionalDisciplineMetrics",
    "JournalingAdherenceMetrics",
    "extract_profitability",
    "extract_risk_management",
    "extract_consistency",
    "extract_emotional_discipline",
    "extract_journaling_adherence",
    "BandScorer",
    "CategoryAssessment",
    "CategoryScores",
    "RatingMetrics",
    "RatingPeriod",
    "VRatingResult",
    "aggregate",
    "calculate_vrating",
    "describe_rating",
    "performance_level",
    "category_status",
    "category_improvements",
    "rate_single_trade",
]
