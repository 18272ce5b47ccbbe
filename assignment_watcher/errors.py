"""
Error types for the Assignment Watcher.

Startup errors (configuration, extraction, login) are fatal. Errors raised
inside the polling loop (network, notification) are logged and the loop
moves on to the next cycle.
"""

from typing import Optional


class WatcherError(Exception):
    """Base exception for all Assignment Watcher errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigError(WatcherError):
    """Raised when configuration is missing, unreadable or invalid."""


class ExtractionError(WatcherError):
    """Raised when an expected markup pattern is not present in a page."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class LoginFailure(WatcherError):
    """Raised when the login POST does not answer with a redirect."""


class NetworkError(WatcherError):
    """Raised on transport-level failures and timeouts."""


class NotificationError(WatcherError):
    """Raised when the push endpoint rejects a notification."""
