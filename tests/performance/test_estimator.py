"""Tests for the three-stage takeoff performance estimate."""

from dataclasses import replace
from pathlib import Path

import pytest
import yaml

from takeoffperf.core.config import ConfigurationError
from takeoffperf.performance import (
    DEFAULT_CALIBRATION,
    Criteria,
    PerformanceData,
    PerformanceEstimator,
    RotationSpeedLine,
    estimate_performance,
)
from takeoffperf.performance.interpolation import I64_MAX, I64_MIN


def _criteria(**overrides: float) -> Criteria:
    values = {"temp_c": 15.0, "pressure_alt": 0.0, "take_off_weight": 2400.0, "headwind": 0.0}
    values.update(overrides)
    return Criteria(**values)


class TestEstimatePerformance:
    """Test the public estimate against known chart readings."""

    def test_standard_day(self, standard_day: Criteria) -> None:
        result = estimate_performance(standard_day)
        assert isinstance(result, PerformanceData)
        assert result.ground_roll == pytest.approx(1312, abs=1)
        assert result.vr == 66

    def test_repeated_calls_are_identical(self, standard_day: Criteria) -> None:
        results = [estimate_performance(standard_day) for _ in range(3)]
        assert results[0] == results[1] == results[2]
        assert (results[0].ground_roll, results[0].vr) == (results[2].ground_roll, results[2].vr)

    def test_module_function_matches_default_estimator(
        self, estimator: PerformanceEstimator, standard_day: Criteria
    ) -> None:
        assert estimate_performance(standard_day) == estimator.estimate(standard_day)

    def test_result_fields_are_ints(self, standard_day: Criteria) -> None:
        result = estimate_performance(standard_day)
        assert isinstance(result.ground_roll, int)
        assert isinstance(result.vr, int)
        assert result.to_dict() == {"ground_roll": result.ground_roll, "vr": result.vr}

    @pytest.mark.parametrize(
        "overrides",
        [
            {"temp_c": 1e200},
            {"temp_c": -1e200},
            {"pressure_alt": 1e300},
            {"take_off_weight": 1e200},
            {"headwind": -1e300},
        ],
    )
    def test_huge_finite_inputs_still_produce_a_result(self, overrides: dict) -> None:
        result = estimate_performance(_criteria(**overrides))
        assert isinstance(result.ground_roll, int)
        assert isinstance(result.vr, int)
        assert I64_MIN <= result.ground_roll <= I64_MAX

    def test_huge_weight_saturates_vr(self) -> None:
        assert estimate_performance(_criteria(take_off_weight=1e200)).vr == I64_MAX


class TestPipelineStages:
    """Test that each stage is keyed on the previous stage's output."""

    def test_standard_day_breakdown(
        self, estimator: PerformanceEstimator, standard_day: Criteria
    ) -> None:
        trace = estimator.estimate_breakdown(standard_day)

        assert trace.temp_f == pytest.approx(59.0)

        assert trace.altitude.anchors == (0.0, 2000.0)
        assert trace.altitude.key == 0.0
        assert trace.altitude.fraction == 0.0
        assert trace.init_roll == pytest.approx(1738.0, abs=0.5)

        assert trace.weight.key == trace.init_roll
        assert trace.weight.anchors == (1710.0, 2050.0)
        assert trace.adj_roll == pytest.approx(1311.6, abs=0.5)

        assert trace.wind.key == trace.adj_roll
        assert trace.wind.anchors == (1275.0, 1725.0)
        # Calm wind lines pass through their anchors, so the roll is unchanged
        assert trace.final_roll == pytest.approx(trace.adj_roll)

        assert trace.vr_kts == pytest.approx(65.867, abs=0.001)
        assert trace.to_performance_data() == estimator.estimate(standard_day)

    def test_at_exact_altitude_anchor_uses_that_curve(
        self, estimator: PerformanceEstimator
    ) -> None:
        trace = estimator.estimate_breakdown(_criteria(pressure_alt=2000.0))
        curve = DEFAULT_CALIBRATION.altitude.segments[1]
        assert trace.altitude.anchors[0] == 2000.0
        assert trace.init_roll == pytest.approx(curve.evaluate(59.0))

    def test_in_range_is_not_extrapolated(
        self, estimator: PerformanceEstimator, standard_day: Criteria
    ) -> None:
        trace = estimator.estimate_breakdown(standard_day)
        assert not trace.altitude.extrapolated
        assert not trace.weight.extrapolated
        assert not trace.wind.extrapolated

    def test_high_altitude_extrapolates(self, estimator: PerformanceEstimator) -> None:
        trace = estimator.estimate_breakdown(_criteria(pressure_alt=9000.0))
        assert trace.altitude.extrapolated
        assert trace.altitude.fraction > 1.0 or trace.altitude.fraction < 0.0


class TestPhysicalTrends:
    """Sanity checks that the chart behaves like an airplane."""

    def test_headwind_never_lengthens_roll(self) -> None:
        rolls = [estimate_performance(_criteria(headwind=w)).ground_roll for w in (0, 5, 10)]
        assert rolls[0] >= rolls[1] >= rolls[2]
        assert rolls[2] < rolls[0]

    @pytest.mark.parametrize("pressure_alt", [0.0, 3000.0, 6500.0])
    @pytest.mark.parametrize("weight", [2100.0, 2550.0])
    def test_headwind_monotonic_across_conditions(self, pressure_alt: float, weight: float) -> None:
        rolls = [
            estimate_performance(
                _criteria(pressure_alt=pressure_alt, take_off_weight=weight, headwind=w)
            ).ground_roll
            for w in (0, 5, 10)
        ]
        assert rolls == sorted(rolls, reverse=True)

    def test_tailwind_lengthens_roll(self) -> None:
        calm = estimate_performance(_criteria(headwind=0.0)).ground_roll
        tail = estimate_performance(_criteria(headwind=-5.0)).ground_roll
        assert tail > calm

    def test_heavier_needs_more_runway(self) -> None:
        light = estimate_performance(_criteria(take_off_weight=2200.0)).ground_roll
        heavy = estimate_performance(_criteria(take_off_weight=2600.0)).ground_roll
        assert heavy > light

    def test_hotter_needs_more_runway(self) -> None:
        cool = estimate_performance(_criteria(temp_c=0.0)).ground_roll
        hot = estimate_performance(_criteria(temp_c=30.0)).ground_roll
        assert hot > cool

    def test_higher_needs_more_runway(self) -> None:
        low = estimate_performance(_criteria(pressure_alt=0.0)).ground_roll
        high = estimate_performance(_criteria(pressure_alt=4000.0)).ground_roll
        assert high > low


class TestRotationSpeed:
    """Test the two-point Vr line."""

    @pytest.mark.parametrize(
        "weight, expected", [(2000.0, 60), (2375.0, 66), (2400.0, 66), (2750.0, 71)]
    )
    def test_inside_range(self, weight: float, expected: int) -> None:
        vr = estimate_performance(_criteria(take_off_weight=weight)).vr
        assert vr == expected
        assert 60 <= vr <= 71

    def test_inside_range_is_bounded(self, estimator: PerformanceEstimator) -> None:
        for weight in range(2000, 2751, 25):
            assert 60.0 <= estimator.rotation_speed(float(weight)) <= 71.0

    def test_below_range_extrapolates(self) -> None:
        vr = estimate_performance(_criteria(take_off_weight=1500.0)).vr
        assert vr == 53
        assert vr < 60

    def test_above_range_extrapolates(self) -> None:
        vr = estimate_performance(_criteria(take_off_weight=3000.0)).vr
        assert vr == 75
        assert vr > 71

    def test_vr_ignores_environment(self) -> None:
        hot_high = estimate_performance(_criteria(temp_c=35.0, pressure_alt=6000.0, headwind=15.0))
        assert hot_high.vr == estimate_performance(_criteria()).vr


class TestCustomCalibration:
    """Test estimators built from non-default calibrations."""

    def test_custom_rotation_line(self, standard_day: Criteria) -> None:
        calibration = replace(
            DEFAULT_CALIBRATION,
            rotation=RotationSpeedLine(low_kts=50.0, high_kts=50.0),
        )
        result = PerformanceEstimator(calibration).estimate(standard_day)
        assert result.vr == 50
        assert result.ground_roll == estimate_performance(standard_day).ground_roll

    def test_from_config(self, tmp_path: Path, standard_day: Criteria) -> None:
        data = {
            "calibration": {
                "name": "flat",
                "altitude_curves": [
                    {"anchor": 0.0, "a": 0.0, "b": 0.0, "c": 1000.0},
                    {"anchor": 5000.0, "a": 0.0, "b": 0.0, "c": 2000.0},
                ],
                "weight_curves": [
                    {"anchor": 1000.0, "a": 0.0, "b": 0.0, "c": 1000.0},
                    {"anchor": 2000.0, "a": 0.0, "b": 0.0, "c": 2000.0},
                ],
                "wind_lines": [
                    {"anchor": 1000.0, "a": -10.0, "b": 1000.0},
                    {"anchor": 2000.0, "a": -20.0, "b": 2000.0},
                ],
            }
        }
        path = tmp_path / "flat.yaml"
        path.write_text(yaml.safe_dump(data), encoding="utf-8")

        estimator = PerformanceEstimator.from_config(path)
        trace = estimator.estimate_breakdown(_criteria(pressure_alt=2500.0, headwind=10.0))

        assert estimator.calibration.name == "flat"
        assert trace.init_roll == pytest.approx(1500.0)
        assert trace.adj_roll == pytest.approx(1500.0)
        # Halfway between 1000 - 100 and 2000 - 200
        assert trace.final_roll == pytest.approx(1350.0)

    def test_from_config_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            PerformanceEstimator.from_config(tmp_path / "nope.yaml")
