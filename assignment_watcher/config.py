"""
Configuration loading for the Assignment Watcher.

Settings are read from a JSON file and can be overridden by environment
variables. Priority (highest first):
1. Environment variables (GLEARN_USERNAME, GLEARN_PASSWORD, ...)
2. The JSON configuration file
3. Built-in defaults (credentials have none and are mandatory)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from assignment_watcher.errors import ConfigError
from assignment_watcher.utils import get_env_var, get_logger, parse_duration, safe_read_json


# Module logger
logger = get_logger("config")

# Default configuration path
DEFAULT_CONFIG_PATH = "config/config.json"

# Default endpoints
DEFAULT_BASE_URL = "https://login.gitam.edu"
DEFAULT_GLEARN_URL = "https://glearn.gitam.edu"
DEFAULT_NTFY_URL = "https://ntfy.sh/nothrglearn"
DEFAULT_CHECK_DELAY = 5 * 60  # seconds

# Options used verbatim: credentials are opaque, surrounding whitespace included
VERBATIM_OPTIONS = {"password"}

# Environment variable overrides, keyed by (section, option)
ENV_OVERRIDES = {
    ("credentials", "username"): "GLEARN_USERNAME",
    ("credentials", "password"): "GLEARN_PASSWORD",
    ("urls", "base"): "GLEARN_BASE_URL",
    ("urls", "glearn"): "GLEARN_URL",
    ("notification", "ntfy_url"): "NTFY_URL",
    ("notification", "check_delay"): "CHECK_DELAY",
}


@dataclass(frozen=True)
class WatcherConfig:
    """
    Validated runtime configuration.

    Attributes:
        username: Portal login name.
        password: Portal password.
        base_url: Host serving the login form.
        glearn_url: Host serving the protected course page.
        ntfy_url: Push topic URL notifications are posted to.
        check_delay: Seconds to wait between polls.
    """
    username: str
    password: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    glearn_url: str = DEFAULT_GLEARN_URL
    ntfy_url: str = DEFAULT_NTFY_URL
    check_delay: float = DEFAULT_CHECK_DELAY


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"Configuration section '{name}' must be an object")
    return value


def _read_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """
    Read the raw configuration mapping.

    A missing default file is tolerated (everything may come from the
    environment). A file that exists but cannot be read or parsed is an
    error, as is a missing file that was explicitly requested.
    """
    env_path = os.environ.get("WATCHER_CONFIG_PATH", "").strip()
    explicit_path = env_path or config_path
    file_path = explicit_path or DEFAULT_CONFIG_PATH

    data = safe_read_json(file_path, default=None)

    if data is None:
        if explicit_path or Path(file_path).exists():
            raise ConfigError(f"Could not read configuration file: {file_path}")
        logger.debug(f"No configuration file at {file_path}, using environment only")
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {file_path} must contain a JSON object")

    logger.info(f"Loaded configuration from {file_path}")
    return data


def load_config(config_path: Optional[str] = None) -> WatcherConfig:
    """
    Load and validate the watcher configuration.

    Args:
        config_path: Optional path to the JSON configuration file.
                     WATCHER_CONFIG_PATH takes precedence when set.

    Returns:
        WatcherConfig with defaults applied.

    Raises:
        ConfigError: If credentials are missing or a value is invalid.
    """
    data = _read_config_file(config_path)

    values: Dict[str, Any] = {}
    for (section, option), env_name in ENV_OVERRIDES.items():
        if option in VERBATIM_OPTIONS:
            env_value = os.environ.get(env_name) or None
        else:
            env_value = get_env_var(env_name, required=False)
        if env_value is not None:
            values[option] = env_value
            continue

        file_value = _section(data, section).get(option)
        if isinstance(file_value, str) and option not in VERBATIM_OPTIONS:
            file_value = file_value.strip()
        if file_value not in (None, ""):
            values[option] = file_value

    username = values.get("username")
    password = values.get("password")
    if not username or not password:
        raise ConfigError("username and password must be set in the configuration")

    try:
        check_delay = parse_duration(values.get("check_delay", DEFAULT_CHECK_DELAY))
    except ValueError as e:
        raise ConfigError(f"Invalid check_delay: {e}") from e

    config = WatcherConfig(
        username=str(username),
        password=str(password),
        base_url=str(values.get("base", DEFAULT_BASE_URL)).rstrip("/"),
        glearn_url=str(values.get("glearn", DEFAULT_GLEARN_URL)).rstrip("/"),
        ntfy_url=str(values.get("ntfy_url", DEFAULT_NTFY_URL)),
        check_delay=check_delay,
    )

    logger.debug(f"Configuration: {config}")
    return config
