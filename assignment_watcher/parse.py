"""
Parse module for the Assignment Watcher.

This module extracts the "Scheduled assignments" card contents from the
course details page and renders them as plain text for notifications.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup

from assignment_watcher.forms import USERNAME_FIELD
from assignment_watcher.utils import get_logger


# Module logger
logger = get_logger("parse")

# Card heading followed by the block listing the scheduled assignments.
# Matches within a single line, the way the portal renders the card.
ASSIGNMENTS_PATTERN = re.compile(
    r'<h5 class="cardTitle">.*?Scheduled assignments.*?</h5>.*?<div>(.*?)</div>'
)


def extract_fragments(html: Optional[str]) -> List[str]:
    """
    Extract every scheduled-assignments block from a page.

    Args:
        html: Raw HTML of the course details page.

    Returns:
        Whitespace-trimmed blocks in document order. Empty when the page has
        no such section, which is a valid state (nothing scheduled).
    """
    if not html:
        logger.warning("Empty HTML content, no fragments extracted")
        return []

    fragments = [match.strip() for match in ASSIGNMENTS_PATTERN.findall(html)]

    logger.debug(f"Extracted {len(fragments)} assignment fragment(s) from {len(html)} bytes")

    return fragments


def fragment_to_text(fragment: str) -> str:
    """
    Render a fragment's markup as readable plain text.

    Args:
        fragment: Raw HTML captured by extract_fragments.

    Returns:
        Text content with whitespace collapsed.
    """
    if not fragment:
        return ""

    soup = BeautifulSoup(fragment, "html.parser")
    return " ".join(soup.get_text(separator=" ").split())


def looks_like_login_page(html: Optional[str]) -> bool:
    """
    Check whether a page is the portal's login form.

    An expired session is answered with the login page (HTTP 200) instead of
    an error, so this is the only hint that the session has lapsed.

    Args:
        html: Raw HTML of a fetched page.

    Returns:
        True if the page carries the login form's view state and username field.
    """
    if not html:
        return False

    soup = BeautifulSoup(html, "html.parser")
    has_view_state = soup.find("input", attrs={"name": "__VIEWSTATE"}) is not None
    has_username = soup.find("input", attrs={"name": USERNAME_FIELD}) is not None

    return has_view_state and has_username
