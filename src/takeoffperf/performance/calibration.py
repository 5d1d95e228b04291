"""Calibration data for the takeoff ground-roll estimate.

The built-in tables were fitted by hand against a light single's POH
takeoff-distance chart, which is read in three nested steps:

1. ALTITUDE_CURVES: ground roll (ft) against outside air temperature (°F),
   one parabola per pressure altitude (ft).
2. WEIGHT_CURVES: corrected ground roll against takeoff weight (lb), one
   parabola per uncorrected ground roll from step 1.
3. WIND_LINES: corrected ground roll against headwind (kt), one line per
   weight-corrected ground roll from step 2.

Rotation speed is a straight line between two weights.

Alternative calibrations can be loaded from YAML, see
``config/calibration/default.yaml`` for the layout.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from takeoffperf.core.config import ConfigLoader, ConfigurationError
from takeoffperf.core.logging_system import get_logger
from takeoffperf.performance.curves import CurveTable, LinearSegment, QuadraticSegment

logger = get_logger(__name__)

ALTITUDE_CURVES = CurveTable(
    "altitude",
    [
        QuadraticSegment(anchor=0.0, a=-184.484, b=0.024538, c=283.3),
        QuadraticSegment(anchor=2000.0, a=-148.028, b=0.0362252, c=665.469),
        QuadraticSegment(anchor=4000.0, a=-216.325, b=0.0318901, c=392.791),
        QuadraticSegment(anchor=6000.0, a=-235.315, b=0.0353866, c=434.767),
        QuadraticSegment(anchor=7000.0, a=-175.482, b=0.051501, c=1064.07),
    ],
)

# Order matters: the nearest-pair search seeds from the first two entries
WEIGHT_CURVES = CurveTable(
    "weight",
    [
        QuadraticSegment(anchor=3300.0, a=-4043.7, b=0.000163585, c=-4250.13),
        QuadraticSegment(anchor=3000.0, a=-473.892, b=0.000325273, c=-380.715),
        QuadraticSegment(anchor=2500.0, a=25.0, b=0.0003333333, c=24.7917),
        QuadraticSegment(anchor=2050.0, a=383.947, b=0.000324786, c=231.78),
        QuadraticSegment(anchor=1710.0, a=-379.118, b=0.000203106, c=-278.691),
    ],
)

WIND_LINES = CurveTable(
    "wind",
    [
        LinearSegment(anchor=1275.0, a=-17.0, b=1275.0),
        LinearSegment(anchor=1725.0, a=-22.0, b=1725.0),
        LinearSegment(anchor=2240.0, a=-26.0, b=2240.0),
        LinearSegment(anchor=2750.0, a=-34.0, b=2750.0),
        LinearSegment(anchor=3350.0, a=-40.0, b=3350.0),
    ],
)

VR_LOW_WEIGHT_LBS = 2000.0
VR_LOW_KTS = 60.0
VR_HIGH_WEIGHT_LBS = 2750.0
VR_HIGH_KTS = 71.0


@dataclass(frozen=True)
class RotationSpeedLine:
    """Two-point line giving Vr (kt) from takeoff weight (lb)."""

    low_weight_lbs: float = VR_LOW_WEIGHT_LBS
    low_kts: float = VR_LOW_KTS
    high_weight_lbs: float = VR_HIGH_WEIGHT_LBS
    high_kts: float = VR_HIGH_KTS

    def __post_init__(self) -> None:
        if self.low_weight_lbs == self.high_weight_lbs:
            raise ConfigurationError(
                f"Rotation speed weights must differ, both are {self.low_weight_lbs}"
            )


@dataclass(frozen=True)
class Calibration:
    """Everything the estimator needs to turn criteria into a ground roll.

    Attributes:
        altitude: Ground roll vs °F, anchored on pressure altitude.
        weight: Ground roll vs weight, anchored on uncorrected ground roll.
        wind: Ground roll vs headwind, anchored on weight-corrected ground roll.
        rotation: Vr vs weight.
        name: Label used in logs.
    """

    altitude: CurveTable
    weight: CurveTable
    wind: CurveTable
    rotation: RotationSpeedLine = RotationSpeedLine()
    name: str = "default"


DEFAULT_CALIBRATION = Calibration(
    altitude=ALTITUDE_CURVES,
    weight=WEIGHT_CURVES,
    wind=WIND_LINES,
)

_QUADRATIC_KEYS = ("anchor", "a", "b", "c")
_LINEAR_KEYS = ("anchor", "a", "b")


def _number(entry: Mapping[str, Any], key: str, where: str) -> float:
    if key not in entry:
        raise ConfigurationError(f"{where}: missing '{key}'")
    value = entry[key]
    # bool is an int subclass; a YAML 'yes' is never a coefficient
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{where}: '{key}' must be a number, got {value!r}")
    try:
        return float(value)
    except OverflowError as e:
        raise ConfigurationError(f"{where}: '{key}' is out of range") from e


def _table(data: Mapping[str, Any], key: str, name: str, linear: bool) -> CurveTable:
    entries = data.get(key)
    if not isinstance(entries, list):
        raise ConfigurationError(f"Calibration is missing the '{key}' list")

    segments = []
    for index, entry in enumerate(entries):
        where = f"{key}[{index}]"
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"{where}: expected a mapping, got {entry!r}")
        if linear:
            segments.append(LinearSegment(*(_number(entry, k, where) for k in _LINEAR_KEYS)))
        else:
            segments.append(QuadraticSegment(*(_number(entry, k, where) for k in _QUADRATIC_KEYS)))

    return CurveTable(name, segments)


def calibration_from_dict(data: Mapping[str, Any], name: str = "custom") -> Calibration:
    """Build a Calibration from its mapping form.

    Args:
        data: Mapping with ``altitude_curves``, ``weight_curves`` and
            ``wind_lines`` lists, and an optional ``rotation_speed`` section.
        name: Fallback label if ``data`` has no ``name``.

    Raises:
        ConfigurationError: If any table or value is malformed.
    """
    rotation_data = data.get("rotation_speed") or {}
    if not isinstance(rotation_data, Mapping):
        raise ConfigurationError("'rotation_speed' must be a mapping")

    rotation = RotationSpeedLine(
        **{
            key: _number(rotation_data, key, "rotation_speed")
            for key in ("low_weight_lbs", "low_kts", "high_weight_lbs", "high_kts")
            if key in rotation_data
        }
    )

    return Calibration(
        altitude=_table(data, "altitude_curves", "altitude", linear=False),
        weight=_table(data, "weight_curves", "weight", linear=False),
        wind=_table(data, "wind_lines", "wind", linear=True),
        rotation=rotation,
        name=str(data.get("name", name)),
    )


def load_calibration(path: str | Path) -> Calibration:
    """Load a calibration from a YAML file with a top-level ``calibration`` section.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed.

    Examples:
        >>> calibration = load_calibration("config/calibration/default.yaml")
        >>> calibration.altitude.anchors
        (0.0, 2000.0, 4000.0, 6000.0, 7000.0)
    """
    config = ConfigLoader.load(path)
    calibration = calibration_from_dict(
        config.get_section("calibration"), name=Path(path).stem
    )
    logger.info(
        "Loaded calibration '%s': %d altitude, %d weight, %d wind segments",
        calibration.name,
        len(calibration.altitude),
        len(calibration.weight),
        len(calibration.wind),
    )
    return calibration
