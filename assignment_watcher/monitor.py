"""
Polling loop for the Assignment Watcher.

One cycle is: fetch the course page → extract fragments → compare with
the fragments seen last time → notify on change → remember what was seen.
The loop repeats forever, sleeping a fixed interval after each cycle.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from assignment_watcher.compare import get_change_summary, have_changed
from assignment_watcher.errors import NetworkError, NotificationError
from assignment_watcher.notify import Notifier, format_assignments_message
from assignment_watcher.parse import extract_fragments, looks_like_login_page
from assignment_watcher.session import PortalSession
from assignment_watcher.utils import get_logger


# Module logger
logger = get_logger("monitor")


@dataclass
class CycleResult:
    """
    Outcome of a single poll cycle.

    Attributes:
        fetched: Whether the page was fetched.
        changed: Whether the fragments differed from the retained ones.
        notified: Whether a notification was delivered.
        fragments: Fragments extracted this cycle (empty if not fetched).
        error: Description of the error that interrupted the cycle, if any.
    """
    fetched: bool
    changed: bool = False
    notified: bool = False
    fragments: List[str] = field(default_factory=list)
    error: Optional[str] = None


class PollLoop:
    """
    Owns the last-seen fragment state and runs poll cycles.

    last_fragments is a "last observed" cache: it is replaced after every
    successful fetch, whether or not the notification went through.
    """

    def __init__(
        self,
        session: PortalSession,
        notifier: Notifier,
        interval_seconds: float,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.session = session
        self.notifier = notifier
        self.interval_seconds = interval_seconds
        self.sleep = sleep
        self.last_fragments: List[str] = []

    def run_cycle(self) -> CycleResult:
        """
        Run one fetch → extract → compare → notify cycle.

        Returns:
            CycleResult describing what happened.
        """
        try:
            html = self.session.fetch_authenticated_page()
        except NetworkError as e:
            logger.warning(f"Error fetching course page, skipping cycle: {e}")
            return CycleResult(fetched=False, error=str(e))

        fragments = extract_fragments(html)

        if not fragments and looks_like_login_page(html):
            logger.warning("Course page returned the login form; the session may have expired")

        changed = have_changed(self.last_fragments, fragments)
        notified = False
        error = None

        if changed:
            summary = get_change_summary(self.last_fragments, fragments)
            logger.info(
                f"New or updated assignments found: {summary['current']} fragment(s) "
                f"({summary['added']} added, {summary['removed']} removed)"
            )
            try:
                self.notifier.send(format_assignments_message(fragments))
                notified = True
            except (NotificationError, NetworkError) as e:
                logger.error(f"Error sending notification: {e}")
                error = str(e)
        else:
            logger.info("No updates in assignments.")

        self.last_fragments = fragments

        return CycleResult(
            fetched=True,
            changed=changed,
            notified=notified,
            fragments=fragments,
            error=error
        )

    def run_forever(self, max_cycles: Optional[int] = None) -> int:
        """
        Poll until the process is terminated.

        The interval is measured from the end of each cycle.

        Args:
            max_cycles: Stop after this many cycles. None runs indefinitely.

        Returns:
            Number of cycles run.
        """
        logger.info(f"Starting periodic checks every {self.interval_seconds:g}s")

        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            try:
                self.run_cycle()
            except Exception as e:
                logger.exception(f"Unexpected error during poll cycle: {e}")

            cycles += 1
            self.sleep(self.interval_seconds)

        return cycles
