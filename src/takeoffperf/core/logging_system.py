"""Logging setup shared by the estimator, request layer and CLI.

Loggers are configured from a YAML file (or built-in defaults), cached per
component, and written both to the console and to a combined log file that
is rotated each time the tool starts.

Platform-specific log locations:
    - macOS: ~/Library/Logs/TakeoffPerf/takeoffperf.log
    - Linux: ~/.takeoffperf/logs/takeoffperf.log
    - Windows: %AppData%/TakeoffPerf/Logs/takeoffperf.log

Typical usage example:
    from takeoffperf.core.logging_system import get_logger

    logger = get_logger(__name__)
    logger.debug("init_roll=%.1f ft", init_roll)
"""

import logging
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

_logging_config: dict[str, Any] = {}
_loggers_cache: dict[str, logging.Logger] = {}
_root_handlers: list[logging.Handler] = []
_initialized = False


class LoggingError(Exception):
    """Raised when logging system operations fail."""


def get_platform_log_dir() -> Path:
    """Get platform-specific log directory.

    Returns:
        Path to the platform-appropriate log directory:
        - macOS: ~/Library/Logs/TakeoffPerf
        - Linux: ~/.takeoffperf/logs
        - Windows: %AppData%/TakeoffPerf/Logs
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "TakeoffPerf"
    elif system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "TakeoffPerf" / "Logs"
    else:
        return Path.home() / ".takeoffperf" / "logs"


def rotate_logs(log_dir: Path, log_filename: str = "takeoffperf.log", keep_count: int = 5) -> None:
    """Rotate logs on startup, keeping the last N runs.

    Renames the current log to ``<name>.1``, shifts older logs up by one and
    deletes anything beyond ``keep_count``.

    Args:
        log_dir: Directory containing log files.
        log_filename: Base name of the log file.
        keep_count: Number of old logs to keep.
    """
    log_file = log_dir / log_filename

    if not log_file.exists():
        return

    oldest_log = log_dir / f"{log_filename}.{keep_count}"
    if oldest_log.exists():
        oldest_log.unlink()

    for i in range(keep_count - 1, 0, -1):
        old_log = log_dir / f"{log_filename}.{i}"
        if old_log.exists():
            old_log.rename(log_dir / f"{log_filename}.{i + 1}")

    log_file.rename(log_dir / f"{log_filename}.1")


def initialize_logging(
    config_path: str | Path | None = None,
    use_platform_dir: bool = True,
    console_level: str | None = None,
) -> None:
    """Initialize the logging system from YAML configuration.

    Call once at startup, before the first log record is emitted.

    Args:
        config_path: Path to a logging YAML file. If None, defaults are used.
        use_platform_dir: If True, write logs to the platform log directory
            instead of the ``log_dir`` from the configuration.
        console_level: Overrides the configured console level (e.g. "DEBUG").

    Raises:
        LoggingError: If the configuration cannot be loaded.

    Examples:
        >>> initialize_logging("config/logging.yaml", use_platform_dir=False)
        >>> get_logger("takeoffperf").info("Logging initialized")
    """
    global _logging_config, _initialized

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise LoggingError(f"Logging config file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                _logging_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LoggingError(f"Failed to load logging config: {e}") from e
    else:
        _logging_config = _get_default_config()

    if use_platform_dir:
        _logging_config["log_dir"] = str(get_platform_log_dir())

    if console_level:
        _logging_config.setdefault("console", {})["level"] = console_level.upper()

    # Module-level loggers are created at import time, before this call
    previous = list(_loggers_cache)
    for name in previous:
        logging.getLogger(name).setLevel(logging.NOTSET)
    _loggers_cache.clear()

    combined = _logging_config.get("combined_log", {})
    if combined.get("enabled", True):
        log_dir = Path(_logging_config.get("log_dir", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        rotate_logs(
            log_dir,
            combined.get("filename", "takeoffperf.log"),
            combined.get("backup_count", 5),
        )

    _configure_root_logger()
    _initialized = True

    for name in {*previous, *(_logging_config.get("components") or {})}:
        get_logger(name)


def _get_default_config() -> dict[str, Any]:
    """Get default logging configuration.

    The combined log file is off by default so that library use never
    writes outside the caller's control; the CLI enables it via
    ``config/logging.yaml``.
    """
    return {
        "version": 1,
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "log_dir": "logs",
        "combined_log": {
            "enabled": False,
            "filename": "takeoffperf.log",
            "backup_count": 5,
        },
        "console": {
            "enabled": True,
            "level": "WARNING",
        },
        "components": {},
    }


def _configure_root_logger() -> None:
    """Configure the root logger with handlers."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # filtered per handler
    root_logger.handlers.clear()
    _root_handlers.clear()

    console = _logging_config.get("console", {})
    if console.get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_level(console.get("level", "INFO")))
        console_handler.setFormatter(_get_formatter())
        root_logger.addHandler(console_handler)
        _root_handlers.append(console_handler)

    combined = _logging_config.get("combined_log", {})
    if combined.get("enabled", True):
        log_dir = Path(_logging_config.get("log_dir", "logs"))
        # Rotation happens at startup, so the file is simply truncated
        file_handler = logging.FileHandler(
            log_dir / combined.get("filename", "takeoffperf.log"),
            mode="w",
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_get_formatter())
        root_logger.addHandler(file_handler)
        _root_handlers.append(file_handler)


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise LoggingError(f"Unknown log level: {name}")
    return level


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds with a dot separator."""

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s}.{int(record.msecs):03d}"


def _get_formatter() -> logging.Formatter:
    fmt = _logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    datefmt = _logging_config.get("date_format", "%Y-%m-%d %H:%M:%S")
    return MillisecondFormatter(fmt, datefmt)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a component.

    Loggers are cached. A component can be given its own level or be
    disabled through the ``components`` section of the logging configuration.

    Before ``initialize_logging`` has run, this returns a plain logger and
    leaves the root logger alone, so importing the package never touches
    the host application's handlers. Levels are applied once logging is
    initialized.

    Args:
        name: Logger name (typically ``__name__``).

    Returns:
        Configured logger instance.

    Note:
        Use lazy formatting (%) instead of f-strings in log calls.
    """
    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = logging.getLogger(name)
    if not _initialized:
        _loggers_cache[name] = logger
        return logger

    component_config = (_logging_config.get("components") or {}).get(name, {})

    if component_config.get("enabled", True):
        logger.disabled = False
        if "level" in component_config:
            logger.setLevel(_level(component_config["level"]))
    else:
        logger.disabled = True

    _loggers_cache[name] = logger
    return logger


def shutdown_logging() -> None:
    """Flush and remove the handlers installed by ``initialize_logging``.

    Handlers added to the root logger by anyone else are left in place.
    """
    global _initialized

    root_logger = logging.getLogger()
    for handler in _root_handlers:
        handler.flush()
        handler.close()
        root_logger.removeHandler(handler)
    _root_handlers.clear()
    _loggers_cache.clear()
    _initialized = False
