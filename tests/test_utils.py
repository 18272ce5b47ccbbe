"""
Tests for the utils module.
"""

import logging
import os
from unittest.mock import patch

import pytest

from assignment_watcher.utils import (
    get_env_var,
    get_logger,
    is_truthy,
    parse_duration,
    safe_read_json,
)


class TestParseDuration:
    """Tests for duration parsing."""

    @pytest.mark.parametrize("value,expected", [
        (300, 300.0),
        (1.5, 1.5),
        ("45", 45.0),
        ("90s", 90.0),
        ("5m", 300.0),
        ("1h30m", 5400.0),
        ("250ms", 0.25),
        (" 2M ", 120.0),
    ])
    def test_valid_durations(self, value, expected):
        """Test accepted duration formats."""
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "soon", "5x", "m5", "5m junk", 0, -3, "0s", True])
    def test_invalid_durations(self, value):
        """Test rejected duration values."""
        with pytest.raises(ValueError):
            parse_duration(value)


class TestGetEnvVar:
    """Tests for environment variable lookup."""

    def test_value_is_stripped(self):
        with patch.dict(os.environ, {"WATCHER_TEST_VAR": "  value "}):
            assert get_env_var("WATCHER_TEST_VAR") == "value"

    def test_missing_required(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="WATCHER_TEST_VAR"):
                get_env_var("WATCHER_TEST_VAR")

    def test_missing_optional_uses_default(self):
        with patch.dict(os.environ, {"WATCHER_TEST_VAR": " "}, clear=True):
            assert get_env_var("WATCHER_TEST_VAR", required=False, default="d") == "d"


class TestIsTruthy:
    """Tests for flag parsing."""

    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes", " Yes "])
    def test_truthy(self, value):
        assert is_truthy(value) is True

    @pytest.mark.parametrize("value", [None, "", "false", "0", "no", "on"])
    def test_falsy(self, value):
        assert is_truthy(value) is False


class TestSafeReadJson:
    """Tests for JSON reading."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"a": 1}', encoding="utf-8")

        assert safe_read_json(str(path)) == {"a": 1}

    def test_missing_file_returns_default(self, tmp_path):
        assert safe_read_json(str(tmp_path / "missing.json"), default={}) == {}

    def test_invalid_json_returns_default(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{oops", encoding="utf-8")

        assert safe_read_json(str(path)) is None


class TestGetLogger:
    """Tests for logger naming."""

    def test_child_of_application_logger(self):
        logger = get_logger("session")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "assignment_watcher.session"
