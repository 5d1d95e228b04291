"""Request parsing and result rendering around the estimator.

A request body is a JSON object with the four takeoff criteria:

    {"temp_c": 15, "pressure_alt": 0, "take_off_weight": 2400, "headwind": 0}

and the response is ``{"ground_roll": 1312, "vr": 66}``.

Typical usage:
    from takeoffperf.request import handle_request

    body = handle_request(b'{"temp_c": 15, "pressure_alt": 0, ...}')
"""

import json
import math
from collections.abc import Mapping
from typing import Any

from takeoffperf.core.logging_system import get_logger
from takeoffperf.performance.estimator import (
    Criteria,
    PerformanceData,
    PerformanceEstimator,
    estimate_performance,
)

logger = get_logger(__name__)

CRITERIA_FIELDS = ("temp_c", "pressure_alt", "take_off_weight", "headwind")


class RequestError(ValueError):
    """Raised when a request body cannot be turned into Criteria."""


def parse_criteria(body: bytes | str | Mapping[str, Any]) -> Criteria:
    """Parse a request body into Criteria.

    Args:
        body: JSON text (bytes or str) or an already decoded mapping.

    Returns:
        Criteria built from the body.

    Raises:
        RequestError: If the body is not a JSON object, a field is missing,
            or a value is not a finite number. Extra fields are ignored.
    """
    if isinstance(body, (bytes, str)):
        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RequestError(f"Request body is not valid JSON: {e}") from e
    else:
        data = body

    if not isinstance(data, Mapping):
        raise RequestError(f"Request body must be a JSON object, got {type(data).__name__}")

    missing = [name for name in CRITERIA_FIELDS if name not in data]
    if missing:
        raise RequestError(f"Request is missing field(s): {', '.join(missing)}")

    values = {}
    for name in CRITERIA_FIELDS:
        value = data[name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise RequestError(f"Field '{name}' must be a number, got {value!r}")
        try:
            value = float(value)
        except OverflowError as e:
            raise RequestError(f"Field '{name}' is out of range, got {value!r}") from e
        if not math.isfinite(value):
            raise RequestError(f"Field '{name}' must be finite, got {value!r}")
        values[name] = value

    return Criteria(**values)


def render_result(data: PerformanceData) -> str:
    """Serialize a result as a JSON object."""
    return json.dumps(data.to_dict())


def handle_request(
    body: bytes | str | Mapping[str, Any], estimator: PerformanceEstimator | None = None
) -> str:
    """Parse a request, run the estimate and render the response body.

    Raises:
        RequestError: If the body is malformed.
    """
    criteria = parse_criteria(body)
    logger.debug("Parsed request: %s", criteria)

    if estimator is None:
        result = estimate_performance(criteria)
    else:
        result = estimator.estimate(criteria)

    return render_result(result)
