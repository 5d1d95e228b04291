"""Takeoff performance estimation.

This package turns temperature, pressure altitude, takeoff weight and
headwind into a ground roll and rotation speed, using curve fits calibrated
against a POH takeoff-distance chart.
"""

from takeoffperf.performance.calibration import (
    DEFAULT_CALIBRATION,
    Calibration,
    RotationSpeedLine,
    calibration_from_dict,
    load_calibration,
)
from takeoffperf.performance.curves import (
    CurveTable,
    ICurveSegment,
    LinearSegment,
    QuadraticSegment,
)
from takeoffperf.performance.estimator import (
    Criteria,
    PerformanceData,
    PerformanceEstimator,
    PipelineTrace,
    estimate_performance,
)

__all__ = [
    "Calibration",
    "Criteria",
    "CurveTable",
    "DEFAULT_CALIBRATION",
    "ICurveSegment",
    "LinearSegment",
    "PerformanceData",
    "PerformanceEstimator",
    "PipelineTrace",
    "QuadraticSegment",
    "RotationSpeedLine",
    "calibration_from_dict",
    "estimate_performance",
    "load_calibration",
]
