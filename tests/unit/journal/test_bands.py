"""Tests for BandScorer — metrics to 0-10 category scores."""

import pytest

from vrating.core.enums import Category
from vrating.journal.bands import BandScorer
from vrating.journal.extractors import (
    ConsistencyMetrics,
    EmotionalDisciplineMetrics,
    JournalingAdherenceMetrics,
    ProfitabilityMetrics,
    RiskManagementMetrics,
)


@pytest.fixture
def scorer():
    return BandScorer()


class TestProfitabilityScore:
    def test_strong_return_and_win_rate(self, scorer):
        result = scorer.score_profitability(
            ProfitabilityMetrics(net_pl_percentage=50.0, win_rate=70.0, capital_base=1000.0)
        )
        assert result.score >= 9.0
        assert result.category == Category.PROFITABILITY

    def test_losing_account(self, scorer):
        result = scorer.score_profitability(
            ProfitabilityMetrics(net_pl_percentage=-25.0, win_rate=20.0, capital_base=1000.0)
        )
        assert result.score < 1.0

    def test_positive_months_bonus(self, scorer):
        base = ProfitabilityMetrics(
            net_pl_percentage=10.0, win_rate=50.0, capital_base=1000.0
        )
        bonus = ProfitabilityMetrics(
            net_pl_percentage=10.0,
            win_rate=50.0,
            positive_months_percentage=90.0,
            capital_base=1000.0,
        )
        assert scorer.score_profitability(base).score == pytest.approx(6.0)
        assert scorer.score_profitability(bonus).score == pytest.approx(6.5)

    def test_profit_factor_bonus(self, scorer):
        metrics = ProfitabilityMetrics(
            net_pl_percentage=20.0, win_rate=100.0, profit_factor=999.0, capital_base=5000.0
        )
        result = scorer.score_profitability(metrics)
        # 0.6 * 7.0 + 0.4 * 10.0, plus 1.0
        assert result.score == pytest.approx(9.2)
        assert dict(result.adjustments) == {"profit_factor": 1.0}

    def test_profit_factor_below_threshold_earns_nothing(self, scorer):
        metrics = ProfitabilityMetrics(
            net_pl_percentage=20.0, win_rate=60.0, profit_factor=2.9, capital_base=5000.0
        )
        assert scorer.score_profitability(metrics).adjustments == ()

    def test_unknown_capital_scores_win_rate_alone(self, scorer):
        result = scorer.score_profitability(
            ProfitabilityMetrics(net_pl_percentage=0.0, win_rate=60.0, capital_base=0.0)
        )
        assert [a.name for a in result.axes] == ["win_rate"]
        assert result.score == pytest.approx(8.0)

    def test_score_is_clamped(self, scorer):
        result = scorer.score_profitability(
            ProfitabilityMetrics(
                net_pl_percentage=500.0,
                win_rate=100.0,
                positive_months_percentage=100.0,
                capital_base=1000.0,
            )
        )
        assert result.score == 10.0
        assert dict(result.adjustments) == {"positive_months": 0.5}


class TestRiskScore:
    def test_good_profile(self, scorer):
        result = scorer.score_risk_management(
            RiskManagementMetrics(
                max_drawdown_percentage=9.9,
                large_loss_percentage=9.9,
                quantity_variability=29.9,
                average_trade_duration=12.1,
                duration_samples=10,
            )
        )
        assert result.score >= 8.0

    def test_bad_profile(self, scorer):
        result = scorer.score_risk_management(
            RiskManagementMetrics(
                max_drawdown_percentage=30.1,
                large_loss_percentage=0.0,
                quantity_variability=70.1,
                average_trade_duration=48.0,
                duration_samples=10,
            )
        )
        assert result.score <= 2.9

    def test_relaxed_curves_for_profitable_accounts(self, scorer):
        metrics = dict(
            max_drawdown_percentage=20.0,
            large_loss_percentage=0.0,
            quantity_variability=50.0,
            duration_samples=0,
        )
        strict = scorer.score_risk_management(RiskManagementMetrics(**metrics))
        relaxed = scorer.score_risk_management(
            RiskManagementMetrics(**metrics, net_profitable=True)
        )
        strict_axes = {a.name: a.score for a in strict.axes}
        relaxed_axes = {a.name: a.score for a in relaxed.axes}
        assert strict_axes["drawdown"] == pytest.approx(5.5)
        assert relaxed_axes["drawdown"] == pytest.approx(7.0)
        assert relaxed_axes["variability"] == pytest.approx(7.0)
        assert relaxed.score > strict.score

    def test_duration_never_caps_the_score(self, scorer):
        result = scorer.score_risk_management(
            RiskManagementMetrics(average_trade_duration=0.0, duration_samples=20)
        )
        # Weighted mean of 10, 10, 10 and 1
        assert result.score == pytest.approx(8.65)

    def test_unknown_duration_is_left_out(self, scorer):
        result = scorer.score_risk_management(RiskManagementMetrics())
        assert [a.name for a in result.axes] == ["drawdown", "large_loss", "variability"]
        assert result.score == pytest.approx(10.0)

    def test_oversized_penalty(self, scorer):
        result = scorer.score_risk_management(
            RiskManagementMetrics(oversized_trades_percentage=15.0)
        )
        assert result.score == pytest.approx(9.0)
        assert dict(result.adjustments) == {"oversized_trades": -1.0}

    def test_weakest_link_caps_two_poor_axes(self, scorer):
        result = scorer.score_risk_management(
            RiskManagementMetrics(
                max_drawdown_percentage=50.0,
                quantity_variability=100.0,
            )
        )
        # Mean would be ~2.9 (large losses perfect); two zero axes cap at 0.5
        assert result.score == pytest.approx(0.5)


class TestConsistencyScore:
    def test_perfect(self, scorer):
        result = scorer.score_consistency(
            ConsistencyMetrics(monthly_consistency_ratio=1.0, months_observed=3)
        )
        assert result.score == pytest.approx(10.0)

    def test_volatile_with_long_streaks(self, scorer):
        result = scorer.score_consistency(
            ConsistencyMetrics(
                pl_std_dev_percentage=100.0,
                longest_loss_streak=15,
                monthly_consistency_ratio=1.0,
                months_observed=2,
            )
        )
        # Mean 4.4, capped at (2 + 2) / 2 + 0.5
        assert result.score == pytest.approx(2.5)

    def test_undated_history_skips_monthly_axis(self, scorer):
        result = scorer.score_consistency(ConsistencyMetrics())
        assert [a.name for a in result.axes] == ["volatility", "loss_streak"]
        assert result.score == pytest.approx(10.0)


class TestEmotionalScore:
    def test_disciplined_with_occasional_negative_tags(self, scorer):
        metrics = EmotionalDisciplineMetrics(
            positive_emotion_percentage=70.0,
            negative_impact_percentage=15.0,
            positive_emotion_win_correlation=10.0,
            emotion_logging_completeness=90.0,
        )
        assert scorer.score_emotional_discipline(metrics, net_pnl=500.0).score >= 6.0

    def test_profitable_bonus_below_eight(self, scorer):
        metrics = EmotionalDisciplineMetrics(
            positive_emotion_percentage=50.0,
            negative_impact_percentage=40.0,
            positive_emotion_win_correlation=0.0,
            emotion_logging_completeness=50.0,
        )
        losing = scorer.score_emotional_discipline(metrics, net_pnl=-10.0)
        winning = scorer.score_emotional_discipline(metrics, net_pnl=10.0)
        assert winning.score == pytest.approx(losing.score + 0.5)

    def test_no_bonus_at_or_above_eight(self, scorer):
        metrics = EmotionalDisciplineMetrics(
            positive_emotion_percentage=80.0,
            negative_impact_percentage=0.0,
            positive_emotion_win_correlation=40.0,
            emotion_logging_completeness=95.0,
        )
        result = scorer.score_emotional_discipline(metrics, net_pnl=10.0)
        assert result.score == pytest.approx(10.0)
        assert result.adjustments == ()


class TestJournalingScore:
    def test_completeness_curve(self, scorer):
        result = scorer.score_journaling_adherence(
            JournalingAdherenceMetrics(completeness_percentage=60.0, emotion_usage=50.0)
        )
        assert result.score == pytest.approx(6.0)

    def test_full_emotion_logging_bonus(self, scorer):
        result = scorer.score_journaling_adherence(
            JournalingAdherenceMetrics(completeness_percentage=60.0, emotion_usage=100.0)
        )
        assert result.score == pytest.approx(6.5)

    def test_nothing_logged(self, scorer):
        result = scorer.score_journaling_adherence(JournalingAdherenceMetrics())
        assert result.score == pytest.approx(2.0)


class TestAssessmentDict:
    def test_to_dict(self, scorer):
        result = scorer.score_journaling_adherence(
            JournalingAdherenceMetrics(completeness_percentage=100.0, emotion_usage=100.0)
        )
        data = result.to_dict()
        assert data["category"] == "journaling_adherence"
        assert data["score"] == 10.0
        assert data["axes"][0]["band"] == "excellent"
        assert data["adjustments"] == [{"reason": "full_emotion_logging", "delta": 0.5}]
