"""
Notify module for the Assignment Watcher.

This module delivers push notifications through ntfy: the message is
POSTed as plain text to a topic URL, and every device subscribed to the
topic receives it. Delivery failures are reported to the caller, which
logs them without stopping the polling loop.
"""

from typing import List, Optional, Sequence

import requests

from assignment_watcher.errors import NetworkError, NotificationError
from assignment_watcher.parse import fragment_to_text
from assignment_watcher.utils import get_logger


# Module logger
logger = get_logger("notify")

DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_TITLE = "GLearn assignments"


def format_assignments_message(fragments: Sequence[str]) -> str:
    """
    Format the notification body for a new fragment set.

    Args:
        fragments: Current scheduled-assignment fragments.

    Returns:
        Plain-text message, one numbered line per fragment.
    """
    if not fragments:
        return "No scheduled assignments."

    lines: List[str] = ["New or updated assignments detected:"]
    for i, fragment in enumerate(fragments, 1):
        text = fragment_to_text(fragment) or fragment
        lines.append(f"{i}. {text}")

    return "\n".join(lines)


def create_notify_session() -> requests.Session:
    """Create a requests session for the push endpoint."""
    session = requests.Session()
    session.headers.update({
        "User-Agent": "AssignmentWatcher/1.0"
    })
    return session


class Notifier:
    """
    Sends plain-text push notifications to an ntfy topic.

    Args:
        url: Topic URL, e.g. https://ntfy.sh/mytopic.
        timeout: Request timeout in seconds.
        title: Notification title sent in the ntfy Title header.
        dry_run: If True, log the message instead of sending it.
        session: Optional requests session to reuse.
    """

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        title: str = DEFAULT_TITLE,
        dry_run: bool = False,
        session: Optional[requests.Session] = None
    ):
        self.url = url
        self.timeout = timeout
        self.title = title
        self.dry_run = dry_run
        self.session = session if session is not None else create_notify_session()

    def send(self, message: str) -> None:
        """
        Send a notification.

        Args:
            message: Plain-text body.

        Raises:
            NotificationError: If the endpoint answers with a non-200 status.
            NetworkError: On transport failure or timeout.
        """
        if self.dry_run:
            logger.info(f"[DRY RUN] Would send notification to {self.url}:\n{message}")
            return

        headers = {
            "Content-Type": "text/plain; charset=utf-8",
            "Title": self.title,
        }

        try:
            response = self.session.post(
                self.url,
                data=message.encode("utf-8"),
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"Request timeout sending notification to {self.url}") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Connection error sending notification: {e}") from e

        if response.status_code != 200:
            raise NotificationError(
                f"Notification failed with status: {response.status_code}",
                status_code=response.status_code
            )

        logger.info(f"Notification sent to {self.url}")

    def close(self) -> None:
        self.session.close()
