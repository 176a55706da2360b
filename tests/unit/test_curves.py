"""Test band curves and score blending helpers."""

import math

import pytest

from vrating.core.curves import (
    BandAnchor,
    BandCurve,
    clamp_score,
    curve,
    weakest_link,
    weighted_mean,
)
from vrating.core.errors import BandCurveError, ConfigError


@pytest.fixture
def drawdown_curve() -> BandCurve:
    return curve(
        (0, 10.0, "excellent"),
        (10, 8.0, "good"),
        (20, 5.5, "moderate"),
        (30, 2.0, "poor"),
    )


class TestBandCurveScore:
    def test_exact_anchor(self, drawdown_curve):
        assert drawdown_curve.score(10) == pytest.approx(8.0)

    def test_interpolates_between_anchors(self, drawdown_curve):
        assert drawdown_curve.score(15) == pytest.approx(6.75)

    def test_continuous_at_anchor(self, drawdown_curve):
        below = drawdown_curve.score(20 - 1e-9)
        above = drawdown_curve.score(20 + 1e-9)
        assert below == pytest.approx(above, abs=1e-6)

    def test_clamped_beyond_outer_anchors(self, drawdown_curve):
        assert drawdown_curve.score(-5) == pytest.approx(10.0)
        assert drawdown_curve.score(500) == pytest.approx(2.0)

    def test_non_finite_gets_worst_score(self, drawdown_curve):
        assert drawdown_curve.score(float("nan")) == 2.0
        assert drawdown_curve.score(float("inf")) == 2.0

    def test_direction(self, drawdown_curve):
        assert drawdown_curve.higher_is_better is False
        assert curve((0, 1.0, "poor"), (1, 9.0, "good")).higher_is_better is True


class TestBandCurveBand:
    def test_nearest_anchor(self, drawdown_curve):
        assert drawdown_curve.band(12) == "good"
        assert drawdown_curve.band(17) == "moderate"
        assert drawdown_curve.band(99) == "poor"

    def test_non_finite(self, drawdown_curve):
        assert drawdown_curve.band(float("nan")) == "poor"


class TestBandCurveValidation:
    def test_needs_two_anchors(self):
        with pytest.raises(BandCurveError, match="at least two"):
            curve((0, 5.0, "only"))

    def test_values_must_increase(self):
        with pytest.raises(BandCurveError, match="strictly increasing"):
            curve((10, 5.0, "a"), (5, 6.0, "b"))

    def test_scores_in_range(self):
        with pytest.raises(BandCurveError, match="outside"):
            BandCurve(anchors=(BandAnchor(value=0, score=0), BandAnchor(value=1, score=11)))

    def test_is_a_config_error(self):
        with pytest.raises(ConfigError):
            curve((1, 5.0, "a"), (1, 6.0, "b"))

    def test_frozen(self, drawdown_curve):
        with pytest.raises(Exception):
            drawdown_curve.anchors = ()


class TestClampScore:
    def test_clamps(self):
        assert clamp_score(-1.0) == 0.0
        assert clamp_score(11.0) == 10.0
        assert clamp_score(5.5) == 5.5

    def test_custom_bounds(self):
        assert clamp_score(0.2, 1.0, 10.0) == 1.0

    def test_nan_and_inf_collapse_to_lower(self):
        assert clamp_score(float("nan")) == 0.0
        assert clamp_score(float("inf"), 1.0) == 1.0
        assert not math.isnan(clamp_score(float("-inf")))


class TestBlending:
    def test_weighted_mean(self):
        assert weighted_mean({"a": 10.0, "b": 5.0}, {"a": 0.6, "b": 0.4}) == pytest.approx(8.0)

    def test_weighted_mean_renormalizes_missing_axes(self):
        assert weighted_mean({"a": 6.0}, {"a": 0.6, "b": 0.4}) == pytest.approx(6.0)

    def test_weighted_mean_without_weights(self):
        assert weighted_mean({"a": 6.0}, {}) == 0.0

    def test_weakest_link_caps_mean(self):
        scores = {"a": 10.0, "b": 10.0, "c": 1.0, "d": 1.0}
        weights = {"a": 0.25, "b": 0.25, "c": 0.25, "d": 0.25}
        assert weakest_link(scores, weights, headroom=0.5) == pytest.approx(1.5)

    def test_weakest_link_keeps_mean_when_lower(self):
        scores = {"a": 8.0, "b": 8.0}
        weights = {"a": 0.5, "b": 0.5}
        assert weakest_link(scores, weights, headroom=0.5) == pytest.approx(8.0)

    def test_weakest_link_restricted_axes(self):
        scores = {"a": 10.0, "b": 10.0, "c": 0.0}
        weights = {"a": 0.4, "b": 0.4, "c": 0.2}
        result = weakest_link(scores, weights, headroom=0.5, capped_by=("a", "b"))
        assert result == pytest.approx(8.0)

    def test_weakest_link_empty(self):
        assert weakest_link({}, {}, headroom=0.5) == 0.0
