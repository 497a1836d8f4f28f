"""Tests for the equilibrium formula pipeline."""

import math

import numpy as np
import pytest

from gigsim.config import SCENARIO_PRESETS, EngineConstants, ParameterVector
from gigsim.engine import (
    STRESS_LEVELS,
    SUSTAINABILITY_LEVELS,
    EquilibriumEngine,
    _tier,
)
from gigsim.exceptions import InvalidParameterError


def _sample_params(rng) -> ParameterVector:
    """Random parameter vector inside the documented ranges."""
    return ParameterVector(
        r=rng.uniform(0.0, 0.99),
        e=rng.uniform(0.1, 6.0),
        eta=rng.uniform(0.05, 1.0),
        tau=rng.uniform(1.0, 90.0),
        lambda_=rng.uniform(0.0, 1.0),
        monitoring=rng.uniform(0.0, 1.0),
        competition=rng.uniform(0.0, 1.0),
        regulation=rng.uniform(0.0, 1.0),
        innovation=rng.uniform(0.0, 1.0),
    )


class TestBaselineRegression:
    """Reference scenario must reproduce the calibrated equilibrium."""

    @pytest.mark.parametrize("attr, expected", [
        ("demand", 3534),
        ("platform_profit", 10963),
        ("rider_utility", 1114),
        ("consumer_surplus", 454),
        ("social_welfare", 12515),
        ("stress_probability", 0.490),
        ("market_efficiency", 99.9),
        ("gini_coefficient", 0.960),
        ("sustainability_index", 99.6),
    ])
    def test_headline_values(self, baseline_snapshot, attr, expected):
        assert getattr(baseline_snapshot, attr) == pytest.approx(expected, rel=0.01)

    def test_no_recommendations(self, baseline_snapshot):
        assert baseline_snapshot.recommendations == ()

    def test_labels(self, baseline_snapshot):
        labels = baseline_snapshot.labels
        assert labels.is_pareto is False  # SW below 15000
        assert labels.stress_level == "STABLE"
        assert labels.market_status == "MONOPOLISTIC"
        assert labels.regulation_status == "LAISSEZ_FAIRE"
        assert labels.sustainability_level == "EXCELLENT"

    def test_effective_intensity_without_blending(self, baseline_snapshot):
        assert baseline_snapshot.effective_intensity == 2.5

    def test_welfare_identity(self, baseline_snapshot):
        s = baseline_snapshot
        assert s.social_welfare == pytest.approx(
            s.platform_profit + s.rider_utility + s.consumer_surplus
            - s.costs.total_externality
        )

    def test_no_wage_subsidy_above_minimum_wage(self, baseline_snapshot):
        assert baseline_snapshot.costs.subsidy == 0.0

    def test_compute_matches_evaluate(self, engine, baseline_snapshot):
        snapshot = engine.compute(0.2, 2.5, 0.85, 30, 0.0)
        assert snapshot == baseline_snapshot


class TestDeterminism:
    def test_repeated_calls_identical(self, engine):
        params = SCENARIO_PRESETS["Intense Competition"]
        first = engine.evaluate(params)
        for _ in range(5):
            assert engine.evaluate(params) == first

    def test_separate_engines_identical(self, baseline_params):
        a = EquilibriumEngine().evaluate(baseline_params)
        b = EquilibriumEngine(EngineConstants()).evaluate(baseline_params)
        assert a == b


class TestRangeInvariants:
    """Clamps keep every output bounded for in-range inputs."""

    @pytest.fixture(scope="class")
    def snapshots(self):
        rng = np.random.default_rng(42)
        engine = EquilibriumEngine()
        return [engine.evaluate(_sample_params(rng)) for _ in range(500)]

    def test_stress_probability_in_unit_interval(self, snapshots):
        for s in snapshots:
            assert 0.0 <= s.stress_probability <= 1.0

    def test_gini_in_unit_interval(self, snapshots):
        for s in snapshots:
            assert 0.0 <= s.gini_coefficient <= 1.0

    def test_market_efficiency_bounded(self, snapshots):
        for s in snapshots:
            assert 0.0 <= s.market_efficiency <= 100.0

    def test_sustainability_bounded(self, snapshots):
        for s in snapshots:
            assert 0.0 <= s.sustainability_index <= 100.0

    def test_core_outputs_finite(self, snapshots):
        for s in snapshots:
            for value in (s.demand, s.platform_profit, s.rider_utility,
                          s.consumer_surplus, s.social_welfare):
                assert math.isfinite(value)

    def test_demand_positive_and_surplus_non_negative(self, snapshots):
        for s in snapshots:
            assert s.demand > 0
            assert s.consumer_surplus >= 0

    def test_extreme_corners_finite(self, engine):
        for r in (0.0, 0.99):
            for e in (0.01, 50.0):
                for tau in (0.5, 500.0):
                    s = engine.evaluate(ParameterVector(
                        r=r, e=e, eta=1.0, tau=tau, lambda_=1.0,
                        monitoring=1.0, competition=1.0, regulation=1.0, innovation=1.0,
                    ))
                    assert math.isfinite(s.social_welfare)
                    assert 0.0 <= s.stress_probability <= 1.0


class TestPipelineStages:
    def test_social_optimum_blending(self, engine):
        s = engine.evaluate(ParameterVector(e=2.0, lambda_=1.0, regulation=0.5))
        # e * (0.75 - 0.5 * 0.2)
        assert s.effective_intensity == pytest.approx(2.0 * 0.65)

    def test_stress_saturates_under_heavy_load(self, engine):
        s = engine.evaluate(ParameterVector(e=6.0, tau=10.0, monitoring=1.0))
        assert s.stress_probability == 1.0
        assert s.labels.stress_level == "CRITICAL"
        assert s.recommendations[0].kind == "URGENT"

    def test_higher_commission_lowers_demand(self, engine):
        low = engine.evaluate(ParameterVector(r=0.1))
        high = engine.evaluate(ParameterVector(r=0.4))
        assert high.demand < low.demand

    def test_wage_subsidy_counts_as_externality(self, engine):
        # Riders earn well below minimum wage at a near-total commission
        s = engine.evaluate(ParameterVector(r=0.95, regulation=1.0))
        assert s.costs.subsidy > 0

    def test_indices(self, engine):
        params = ParameterVector(innovation=0.5, regulation=0.4)
        s = engine.evaluate(params)
        eta_adjusted = 0.85 * (1 + 0.5 * 0.02) * (1 - 0.4 * 0.1)
        assert s.innovation_index == pytest.approx(0.5 * eta_adjusted * 100)
        assert s.regulatory_effectiveness == pytest.approx(0.4 * s.social_welfare / 20000 * 100)

    def test_market_power_recommendation(self, engine):
        s = engine.evaluate(ParameterVector(r=0.3, competition=0.2))
        assert "POLICY" in [rec.kind for rec in s.recommendations]


class TestLabelThresholds:
    """Thresholds are strict; ties fall to the lower tier."""

    @pytest.mark.parametrize("competition, expected", [
        (0.8, "COMPETITIVE"), (0.7, "OLIGOPOLY"), (0.5, "OLIGOPOLY"),
        (0.4, "MONOPOLISTIC"), (0.0, "MONOPOLISTIC"),
    ])
    def test_market_status(self, engine, competition, expected):
        s = engine.evaluate(ParameterVector(competition=competition))
        assert s.labels.market_status == expected

    @pytest.mark.parametrize("regulation, expected", [
        (0.9, "STRICT"), (0.6, "MODERATE"), (0.45, "MODERATE"),
        (0.3, "LAISSEZ_FAIRE"), (0.1, "LAISSEZ_FAIRE"),
    ])
    def test_regulation_status(self, engine, regulation, expected):
        s = engine.evaluate(ParameterVector(regulation=regulation))
        assert s.labels.regulation_status == expected

    @pytest.mark.parametrize("p, expected", [
        (0.71, "CRITICAL"), (0.7, "HIGH"), (0.6, "HIGH"),
        (0.5, "STABLE"), (0.2, "STABLE"),
    ])
    def test_stress_tiers(self, p, expected):
        assert _tier(p, 0.7, 0.5, STRESS_LEVELS) == expected

    @pytest.mark.parametrize("index, expected", [
        (95.0, "EXCELLENT"), (80.0, "GOOD"), (70.0, "GOOD"),
        (60.0, "POOR"), (0.0, "POOR"),
    ])
    def test_sustainability_tiers(self, index, expected):
        assert _tier(index, 80, 60, SUSTAINABILITY_LEVELS) == expected

    def test_high_stress_from_full_monitoring(self, engine):
        s = engine.evaluate(ParameterVector(monitoring=1.0))
        assert 0.5 < s.stress_probability <= 0.7
        assert s.labels.stress_level == "HIGH"

    def test_pareto_in_a_larger_market(self):
        # Doubling the base market lifts welfare well past 15000
        s = EquilibriumEngine(EngineConstants(A=28000.0)).evaluate(ParameterVector())
        assert s.social_welfare > 15000
        assert s.rider_utility > 0
        assert s.market_efficiency > 75
        assert s.labels.is_pareto is True


class TestInputRejection:
    def test_zero_effective_intensity_rejected(self, engine):
        with pytest.raises(InvalidParameterError) as excinfo:
            engine.evaluate(ParameterVector(e=0.0))
        assert excinfo.value.name == "e_eff"

    def test_compute_validates(self, engine):
        with pytest.raises(InvalidParameterError):
            engine.compute(1.2, 2.5, 0.85, 30, 0.0)

    def test_compute_rejects_nan(self, engine):
        with pytest.raises(InvalidParameterError):
            engine.compute(0.2, 2.5, float("nan"), 30, 0.0)

    @pytest.mark.parametrize("e", [1e150, 1e160])
    def test_huge_intensity_rejected(self, engine, e):
        with pytest.raises(InvalidParameterError) as excinfo:
            engine.compute(0.2, e, 0.85, 30.0, 0.0)
        assert excinfo.value.name == "e"

    def test_huge_tolerance_rejected(self, engine):
        with pytest.raises(InvalidParameterError) as excinfo:
            engine.compute(0.2, 2.5, 0.85, 1e300, 0.0)
        assert excinfo.value.name == "tau"

    def test_largest_accepted_inputs_stay_finite(self, engine):
        s = engine.compute(0.2, 1e6, 0.85, 1e6, 0.0)
        for value in (s.demand, s.platform_profit, s.rider_utility,
                      s.consumer_surplus, s.social_welfare):
            assert math.isfinite(value)
