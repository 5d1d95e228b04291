"""Takeoff ground roll and rotation speed estimate.

The estimate chains three table lookups, each stage's result becoming the
next stage's lookup key, the same way the printed chart is read:

1. Pressure altitude selects two altitude curves, evaluated at OAT (°F)
   and blended: the uncorrected ground roll.
2. That roll selects two weight curves, evaluated at takeoff weight and
   blended: the weight-corrected roll.
3. The corrected roll selects two wind lines, evaluated at headwind and
   blended: the final ground roll.

Inputs outside the calibrated ranges are extrapolated, which gives
reduced-confidence results but never an error.

Typical usage:
    from takeoffperf.performance import Criteria, estimate_performance

    result = estimate_performance(
        Criteria(temp_c=15.0, pressure_alt=0.0, take_off_weight=2400.0, headwind=0.0)
    )
    print(f"Ground roll: {result.ground_roll} ft, Vr: {result.vr} kt")
"""

from dataclasses import asdict, dataclass
from pathlib import Path

from takeoffperf.core.logging_system import get_logger
from takeoffperf.performance.calibration import DEFAULT_CALIBRATION, Calibration, load_calibration
from takeoffperf.performance.curves import CurveTable
from takeoffperf.performance.interpolation import (
    fahrenheit_from_celsius,
    interpolate_linear,
    round_half_away,
    scale,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Criteria:
    """Takeoff conditions.

    Attributes:
        temp_c: Outside air temperature (°C)
        pressure_alt: Pressure altitude (ft)
        take_off_weight: Takeoff weight (lbs)
        headwind: Headwind component (kts), negative for tailwind
    """

    temp_c: float
    pressure_alt: float
    take_off_weight: float
    headwind: float


@dataclass(frozen=True)
class PerformanceData:
    """Estimated takeoff performance.

    Attributes:
        ground_roll: Ground roll distance (ft)
        vr: Rotation speed (kts)
    """

    ground_roll: int
    vr: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class StageResult:
    """One lookup stage: which anchors were blended and what came out."""

    table: str
    key: float
    anchors: tuple[float, float]
    fraction: float
    value: float
    extrapolated: bool


@dataclass(frozen=True)
class PipelineTrace:
    """Intermediate values of one estimate, for diagnostics."""

    temp_f: float
    altitude: StageResult
    weight: StageResult
    wind: StageResult
    vr_kts: float

    @property
    def init_roll(self) -> float:
        return self.altitude.value

    @property
    def adj_roll(self) -> float:
        return self.weight.value

    @property
    def final_roll(self) -> float:
        return self.wind.value

    def to_performance_data(self) -> PerformanceData:
        return PerformanceData(
            ground_roll=round_half_away(self.final_roll),
            vr=round_half_away(self.vr_kts),
        )


def _blend(table: CurveTable, key: float, x: float) -> StageResult:
    """Evaluate the two segments nearest ``key`` at ``x`` and blend them."""
    first, second = table.nearest_pair(key)
    fraction = scale(first.anchor, second.anchor, key)
    value = interpolate_linear(first.evaluate(x), second.evaluate(x), fraction)
    extrapolated = not table.covers(key)

    if extrapolated:
        low, high = table.span
        logger.debug(
            "%s table: key %.1f outside calibrated %.1f..%.1f, extrapolating",
            table.name,
            key,
            low,
            high,
        )
    logger.debug(
        "%s table: key=%.1f anchors=(%.1f, %.1f) fraction=%.4f x=%.2f -> %.2f",
        table.name,
        key,
        first.anchor,
        second.anchor,
        fraction,
        x,
        value,
    )

    return StageResult(
        table=table.name,
        key=key,
        anchors=(first.anchor, second.anchor),
        fraction=fraction,
        value=value,
        extrapolated=extrapolated,
    )


class PerformanceEstimator:
    """Estimate ground roll and Vr from a calibration.

    The estimator holds no mutable state; one instance can serve any number
    of callers.

    Examples:
        >>> estimator = PerformanceEstimator()
        >>> estimator.estimate(Criteria(15.0, 0.0, 2400.0, 0.0)).vr
        66
    """

    def __init__(self, calibration: Calibration = DEFAULT_CALIBRATION) -> None:
        self.calibration = calibration
        logger.debug("PerformanceEstimator using calibration '%s'", calibration.name)

    @classmethod
    def from_config(cls, path: str | Path) -> "PerformanceEstimator":
        """Create an estimator from a calibration YAML file.

        Raises:
            ConfigurationError: If the calibration cannot be loaded.
        """
        return cls(load_calibration(path))

    def rotation_speed(self, take_off_weight: float) -> float:
        """Vr (kts, unrounded) for the given weight, extrapolated outside the line."""
        line = self.calibration.rotation
        fraction = scale(line.low_weight_lbs, line.high_weight_lbs, take_off_weight)
        return interpolate_linear(line.low_kts, line.high_kts, fraction)

    def estimate_breakdown(self, criteria: Criteria) -> PipelineTrace:
        """Run the three stages and return every intermediate value."""
        temp_f = fahrenheit_from_celsius(criteria.temp_c)

        altitude = _blend(self.calibration.altitude, criteria.pressure_alt, temp_f)
        weight = _blend(self.calibration.weight, altitude.value, criteria.take_off_weight)
        wind = _blend(self.calibration.wind, weight.value, criteria.headwind)

        return PipelineTrace(
            temp_f=temp_f,
            altitude=altitude,
            weight=weight,
            wind=wind,
            vr_kts=self.rotation_speed(criteria.take_off_weight),
        )

    def estimate(self, criteria: Criteria) -> PerformanceData:
        """Estimate takeoff performance.

        Args:
            criteria: Takeoff conditions.

        Returns:
            Ground roll (ft) and Vr (kts), rounded to whole numbers.
        """
        trace = self.estimate_breakdown(criteria)
        result = trace.to_performance_data()

        logger.info(
            "Estimate for %.1f°C, PA %.0f ft, %.0f lbs, %.1f kts headwind: "
            "ground roll %d ft, Vr %d kts",
            criteria.temp_c,
            criteria.pressure_alt,
            criteria.take_off_weight,
            criteria.headwind,
            result.ground_roll,
            result.vr,
        )
        return result


_default_estimator = PerformanceEstimator()


def estimate_performance(criteria: Criteria) -> PerformanceData:
    """Estimate takeoff performance with the built-in calibration."""
    return _default_estimator.estimate(criteria)
