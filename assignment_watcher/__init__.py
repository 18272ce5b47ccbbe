"""
Assignment Watcher - Course portal assignment monitor.

This package provides functionality to:
- Log in to an ASP.NET course portal using its anti-forgery form tokens
- Fetch the protected course page with the authenticated session
- Extract the scheduled-assignments section from the page
- Compare it with the previous poll to detect changes
- Notify via ntfy push messages when the assignments change
"""

__version__ = "1.0.0"
__author__ = "Assignment Watcher Team"
