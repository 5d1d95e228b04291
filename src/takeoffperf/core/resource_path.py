"""Resource path resolution for shipped configuration files.

Typical usage:
    from takeoffperf.core.resource_path import get_config_path

    logging_config = get_config_path("logging.yaml")
"""

from pathlib import Path


def get_project_root() -> Path:
    """Get the project root directory.

    When running from a source checkout (or an editable install) this is the
    directory holding ``config/``: three levels up from src/takeoffperf/core.
    """
    return Path(__file__).resolve().parent.parent.parent.parent


def get_resource_path(relative_path: str) -> Path:
    """Get absolute path to a resource relative to the project root.

    Examples:
        >>> str(get_resource_path("config/logging.yaml"))
        '/home/user/dev/takeoffperf/config/logging.yaml'
    """
    return get_project_root() / relative_path


def get_config_path(config_file: str) -> Path:
    """Get path to a configuration file.

    Args:
        config_file: Config filename or relative path (e.g., "logging.yaml" or
            "calibration/default.yaml").

    Returns:
        Absolute path to the config file. It may not exist when the package
        is installed without the source tree; callers fall back to defaults.
    """
    return get_resource_path(f"config/{config_file}")
