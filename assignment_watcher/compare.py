"""
Compare module for the Assignment Watcher.

This module decides whether the scheduled-assignments fragments changed
between two polls. Comparison is positional and exact: a reordering, an
edit, an addition or a removal all count as a change.
"""

from typing import Dict, Sequence


def have_changed(previous: Sequence[str], current: Sequence[str]) -> bool:
    """
    Check whether two fragment sequences differ.

    Args:
        previous: Fragments retained from the last poll.
        current: Fragments from this poll.

    Returns:
        True if the lengths differ or any position holds a different string.
    """
    if len(previous) != len(current):
        return True

    return any(old != new for old, new in zip(previous, current))


def get_change_summary(previous: Sequence[str], current: Sequence[str]) -> Dict[str, int]:
    """
    Generate a summary of the difference between two polls.

    Args:
        previous: Fragments retained from the last poll.
        current: Fragments from this poll.

    Returns:
        Dictionary with previous/current counts and added/removed counts.
    """
    previous_set = set(previous)
    current_set = set(current)

    return {
        "previous": len(previous),
        "current": len(current),
        "added": len(current_set - previous_set),
        "removed": len(previous_set - current_set),
    }
