"""
Tests for the main module.

Tests cover startup: configuration errors, fatal login errors, and the
hand-off to the polling loop.
"""

from unittest.mock import Mock, patch

import pytest

from assignment_watcher.config import WatcherConfig
from assignment_watcher.errors import ConfigError, ExtractionError, LoginFailure, NetworkError
from assignment_watcher.main import (
    EXIT_CONFIG_ERROR,
    EXIT_FAILURE,
    EXIT_SUCCESS,
    login,
    main,
    run_watcher,
)
from assignment_watcher.session import Credentials


@pytest.fixture
def config():
    return WatcherConfig(
        username="student1",
        password="secret",
        base_url="https://login.example.edu",
        glearn_url="https://glearn.example.edu",
        ntfy_url="https://ntfy.sh/test",
        check_delay=60,
    )


class TestLogin:
    """Tests for startup login."""

    @patch("assignment_watcher.main.PortalSession")
    def test_login_with_config_credentials(self, mock_portal_class, config):
        """Test that the configured credentials are used."""
        portal = mock_portal_class.return_value

        session = login(config)

        assert session is portal
        mock_portal_class.assert_called_once_with(
            base_url="https://login.example.edu",
            protected_url="https://glearn.example.edu"
        )
        portal.login.assert_called_once_with(Credentials("student1", "secret"))

    @patch("assignment_watcher.main.PortalSession")
    def test_failed_login_closes_session(self, mock_portal_class, config):
        """Test that the session is closed when login fails."""
        portal = mock_portal_class.return_value
        portal.login.side_effect = LoginFailure("bad", status_code=200)

        with pytest.raises(LoginFailure):
            login(config)

        portal.close.assert_called_once()


class TestRunWatcher:
    """Tests for the login-then-poll sequence."""

    @pytest.mark.parametrize("error", [
        LoginFailure("Login failed with status: 200", status_code=200),
        ExtractionError("Could not find pattern", field="__VIEWSTATE"),
        NetworkError("Request timeout"),
    ])
    @patch("assignment_watcher.main.PollLoop")
    @patch("assignment_watcher.main.login")
    def test_login_errors_are_fatal(self, mock_login, mock_loop_class, error, config):
        """Test that login errors exit without polling."""
        mock_login.side_effect = error

        assert run_watcher(config) == EXIT_FAILURE
        mock_loop_class.assert_not_called()

    @patch("assignment_watcher.main.Notifier")
    @patch("assignment_watcher.main.PollLoop")
    @patch("assignment_watcher.main.login")
    def test_polls_after_login(self, mock_login, mock_loop_class, mock_notifier_class, config):
        """Test that the loop gets the session, notifier and interval."""
        session = Mock()
        mock_login.return_value = session

        result = run_watcher(config, dry_run=True, max_cycles=2)

        assert result == EXIT_SUCCESS
        mock_notifier_class.assert_called_once_with("https://ntfy.sh/test", dry_run=True)
        mock_loop_class.assert_called_once_with(
            session, mock_notifier_class.return_value, interval_seconds=60
        )
        mock_loop_class.return_value.run_forever.assert_called_once_with(max_cycles=2)
        session.close.assert_called_once()


class TestMain:
    """Tests for the process entry point."""

    @patch("assignment_watcher.main.setup_logging")
    @patch("assignment_watcher.main.load_config")
    def test_config_error_exit_code(self, mock_load_config, mock_setup_logging):
        """Test that configuration errors exit with the config code."""
        mock_load_config.side_effect = ConfigError("username and password must be set")

        assert main() == EXIT_CONFIG_ERROR

    @patch("assignment_watcher.main.setup_logging")
    @patch("assignment_watcher.main.run_watcher")
    @patch("assignment_watcher.main.load_config")
    def test_keyboard_interrupt(self, mock_load_config, mock_run, mock_setup_logging):
        """Test that Ctrl+C ends cleanly."""
        mock_run.side_effect = KeyboardInterrupt

        assert main() == EXIT_SUCCESS

    @patch("assignment_watcher.main.setup_logging")
    @patch("assignment_watcher.main.run_watcher")
    @patch("assignment_watcher.main.load_config")
    def test_unexpected_error(self, mock_load_config, mock_run, mock_setup_logging):
        """Test that unexpected errors map to a failure exit code."""
        mock_run.side_effect = RuntimeError("boom")

        assert main() == EXIT_FAILURE

    @patch("assignment_watcher.main.setup_logging")
    @patch("assignment_watcher.main.run_watcher")
    @patch("assignment_watcher.main.load_config")
    def test_dry_run_from_env(self, mock_load_config, mock_run, mock_setup_logging, monkeypatch):
        """Test that DRY_RUN is passed through."""
        monkeypatch.setenv("DRY_RUN", "true")
        mock_run.return_value = EXIT_SUCCESS

        assert main() == EXIT_SUCCESS
        mock_run.assert_called_once_with(mock_load_config.return_value, dry_run=True)
