#!/usr/bin/env python3
"""
Main entry point for the Assignment Watcher.

Loads configuration, logs in to the portal once, then polls the course
page until the process is terminated:
login → (fetch → extract → compare → notify → sleep)*

Configuration and login errors are fatal; everything that goes wrong
inside the polling loop is logged and the loop carries on.
"""

import os
import sys
from typing import Optional

from assignment_watcher.config import WatcherConfig, load_config
from assignment_watcher.errors import ConfigError, ExtractionError, LoginFailure, NetworkError
from assignment_watcher.monitor import PollLoop
from assignment_watcher.notify import Notifier
from assignment_watcher.session import Credentials, PortalSession
from assignment_watcher.utils import get_logger, is_truthy, setup_logging


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def login(config: WatcherConfig) -> PortalSession:
    """
    Create a portal session and log in with the configured credentials.

    Args:
        config: Loaded watcher configuration.

    Returns:
        Authenticated PortalSession.

    Raises:
        NetworkError, ExtractionError, LoginFailure: If login cannot complete.
    """
    session = PortalSession(base_url=config.base_url, protected_url=config.glearn_url)

    credentials = Credentials(username=config.username, password=config.password)
    try:
        session.login(credentials)
    except Exception:
        session.close()
        raise

    return session


def run_watcher(
    config: WatcherConfig,
    dry_run: bool = False,
    max_cycles: Optional[int] = None
) -> int:
    """
    Log in and run the polling loop.

    Args:
        config: Loaded watcher configuration.
        dry_run: If True, log notifications instead of sending them.
        max_cycles: Stop after this many cycles. None runs indefinitely.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    logger = get_logger("main")

    try:
        session = login(config)
    except ExtractionError as e:
        logger.error(f"Login failed: extracting form values: {e}")
        return EXIT_FAILURE
    except (LoginFailure, NetworkError) as e:
        logger.error(f"Login failed: {e}")
        return EXIT_FAILURE

    logger.info("Logged in successfully. Starting periodic checks...")

    notifier = Notifier(config.ntfy_url, dry_run=dry_run)
    loop = PollLoop(session, notifier, interval_seconds=config.check_delay)

    try:
        loop.run_forever(max_cycles=max_cycles)
    finally:
        notifier.close()
        session.close()

    return EXIT_SUCCESS


def main() -> int:
    """
    Main entry point for the Assignment Watcher.

    Sets up logging and runs the watcher with proper error handling.

    Returns:
        Exit code for the process.
    """
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    setup_logging(log_level)
    logger = get_logger("main")

    dry_run = is_truthy(os.environ.get("DRY_RUN"))

    if dry_run:
        logger.info("Running in DRY RUN mode - notifications will be skipped")

    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"Error loading configuration: {e}")
        return EXIT_CONFIG_ERROR

    try:
        return run_watcher(config, dry_run=dry_run)

    except KeyboardInterrupt:
        logger.warning("Watcher interrupted by user")
        return EXIT_SUCCESS

    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
