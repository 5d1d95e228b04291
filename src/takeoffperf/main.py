"""TakeoffPerf - command-line takeoff performance estimate.

Typical usage:
    takeoffperf --temp-c 15 --pressure-alt 0 --weight 2400 --headwind 5
    takeoffperf --request criteria.json --json
    echo '{"temp_c": 30, ...}' | takeoffperf --request - --json
    takeoffperf --temp-c 15 --pressure-alt 0 --weight 2400 --calibration my_poh.yaml -v
"""

import argparse
import math
import sys
from pathlib import Path

from takeoffperf.core.config import ConfigurationError
from takeoffperf.core.logging_system import LoggingError, get_logger, initialize_logging
from takeoffperf.core.resource_path import get_config_path
from takeoffperf.performance.estimator import Criteria, PerformanceEstimator
from takeoffperf.request import RequestError, parse_criteria, render_result

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_BAD_REQUEST = 2


def finite_float(text: str) -> float:
    """argparse type for criteria options: a float that is neither NaN nor infinite."""
    try:
        value = float(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from e
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"must be finite, got {text!r}")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="takeoffperf",
        description="Estimate takeoff ground roll and rotation speed from POH chart fits",
    )

    parser.add_argument("--temp-c", type=finite_float, help="Outside air temperature (°C)")
    parser.add_argument("--pressure-alt", type=finite_float, help="Pressure altitude (ft)")
    parser.add_argument("--weight", type=finite_float, help="Takeoff weight (lbs)")
    parser.add_argument(
        "--headwind",
        type=finite_float,
        default=0.0,
        help="Headwind component (kts), negative for tailwind (default: 0)",
    )
    parser.add_argument(
        "--request",
        type=str,
        help="JSON request body with temp_c, pressure_alt, take_off_weight, headwind "
        "('-' reads stdin); replaces the individual criteria options",
    )
    parser.add_argument(
        "--calibration",
        type=Path,
        help="Calibration YAML file (default: built-in calibration)",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-config", type=Path, help="Logging configuration YAML file")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log each interpolation stage to the console"
    )

    args = parser.parse_args(argv)

    if args.request is None:
        missing = [
            option
            for option, value in (
                ("--temp-c", args.temp_c),
                ("--pressure-alt", args.pressure_alt),
                ("--weight", args.weight),
            )
            if value is None
        ]
        if missing:
            parser.error(f"missing {', '.join(missing)} (or pass --request)")

    return args


def _setup_logging(args: argparse.Namespace) -> None:
    console_level = "DEBUG" if args.verbose else None

    if args.log_config:
        initialize_logging(args.log_config, use_platform_dir=False, console_level=console_level)
        return

    default_config = get_config_path("logging.yaml")
    if default_config.exists():
        initialize_logging(default_config, use_platform_dir=True, console_level=console_level)
    else:
        initialize_logging(use_platform_dir=False, console_level=console_level)


def _read_criteria(args: argparse.Namespace) -> Criteria:
    if args.request is None:
        return Criteria(
            temp_c=args.temp_c,
            pressure_alt=args.pressure_alt,
            take_off_weight=args.weight,
            headwind=args.headwind,
        )

    if args.request == "-":
        return parse_criteria(sys.stdin.read())

    try:
        body = Path(args.request).read_bytes()
    except OSError as e:
        raise RequestError(f"Cannot read request file {args.request}: {e}") from e
    return parse_criteria(body)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code: 0 on success, 1 on a configuration error, 2 on a bad request.
    """
    args = parse_args(argv)

    try:
        _setup_logging(args)
    except LoggingError as e:
        print(f"takeoffperf: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        if args.calibration:
            estimator = PerformanceEstimator.from_config(args.calibration)
        else:
            estimator = PerformanceEstimator()
        criteria = _read_criteria(args)
        result = estimator.estimate(criteria)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG_ERROR
    except RequestError as e:
        logger.error("Bad request: %s", e)
        return EXIT_BAD_REQUEST

    if args.json:
        print(render_result(result))
    else:
        print(f"Ground roll: {result.ground_roll} ft")
        print(f"Vr:          {result.vr} kts")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
