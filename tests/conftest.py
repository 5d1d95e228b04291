"""Pytest configuration and fixtures for all tests."""

from pathlib import Path

import pytest
import yaml

from takeoffperf.core.logging_system import shutdown_logging
from takeoffperf.performance import Criteria, PerformanceEstimator


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by a test so log files never outlive it."""
    yield
    shutdown_logging()


@pytest.fixture
def logging_config(tmp_path: Path) -> Path:
    """Logging YAML writing a combined log into the test's temp directory."""
    config = {
        "version": 1,
        "log_dir": str(tmp_path / "logs"),
        "combined_log": {"enabled": True, "filename": "takeoffperf.log", "backup_count": 5},
        "console": {"enabled": False},
        "components": {},
    }
    path = tmp_path / "logging.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path


@pytest.fixture
def estimator() -> PerformanceEstimator:
    """Estimator with the built-in calibration."""
    return PerformanceEstimator()


@pytest.fixture
def standard_day() -> Criteria:
    """Sea level, ISA temperature, 2400 lbs, calm wind."""
    return Criteria(temp_c=15.0, pressure_alt=0.0, take_off_weight=2400.0, headwind=0.0)
