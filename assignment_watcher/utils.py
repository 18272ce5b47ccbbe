"""
Utility functions for the Assignment Watcher.

This module provides:
- Central logging configuration
- Safe JSON reading for configuration files
- Environment variable and duration helpers shared across modules
"""

import json
import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Optional, Union


# Units accepted in duration strings such as "5m" or "1h30m"
DURATION_UNITS = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure and return the root logger for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to INFO.

    Returns:
        Configured logger instance.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    logger = logging.getLogger("assignment_watcher")
    logger.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Name for the logger, typically the module name.

    Returns:
        Logger instance configured as a child of the main application logger.
    """
    return logging.getLogger(f"assignment_watcher.{name}")


def safe_read_json(filepath: str, default: Optional[Any] = None) -> Any:
    """
    Safely read JSON data from a file.

    Args:
        filepath: Path to the JSON file.
        default: Value to return if the file doesn't exist or is invalid.

    Returns:
        Parsed JSON data or the default value on failure.
    """
    logger = get_logger("utils")

    try:
        path = Path(filepath)
        if not path.exists():
            logger.debug(f"File does not exist: {filepath}, returning default")
            return default

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
            logger.debug(f"Successfully read JSON from {filepath}")
            return data

    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in {filepath}: {e}")
        return default
    except PermissionError as e:
        logger.error(f"Permission denied reading {filepath}: {e}")
        return default
    except OSError as e:
        logger.error(f"Unexpected error reading {filepath}: {e}")
        return default


def get_env_var(name: str, required: bool = True, default: Optional[str] = None) -> Optional[str]:
    """
    Get an environment variable with optional requirement enforcement.

    Args:
        name: Name of the environment variable.
        required: If True, raises ValueError when variable is not set.
                  Defaults to True.
        default: Default value if variable is not set and not required.

    Returns:
        Value of the environment variable or default.

    Raises:
        ValueError: If required=True and the variable is not set.
    """
    value = os.environ.get(name)

    if value is None or value.strip() == "":
        if required:
            raise ValueError(f"Required environment variable '{name}' is not set")
        return default

    return value.strip()


def is_truthy(value: Optional[str]) -> bool:
    """Interpret common environment flag spellings ("true", "1", "yes")."""
    return (value or "").strip().lower() in ("true", "1", "yes")


def parse_duration(value: Union[str, int, float]) -> float:
    """
    Convert a duration into seconds.

    Accepts plain numbers (seconds) or duration strings made of
    number+unit pairs, e.g. "90s", "5m", "1h30m", "250ms".

    Args:
        value: Number of seconds or duration string.

    Returns:
        Duration in seconds.

    Raises:
        ValueError: If the value cannot be parsed or is not positive.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")

    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        text = str(value).strip().lower()
        if not text:
            raise ValueError("Duration is empty")

        try:
            seconds = float(text)
        except ValueError:
            parts = _DURATION_PART.findall(text)
            if not parts or "".join(n + u for n, u in parts) != text:
                raise ValueError(f"Invalid duration: {value!r}")
            seconds = sum(float(number) * DURATION_UNITS[unit] for number, unit in parts)

    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")

    return seconds
