"""
Login form extraction for the Assignment Watcher.

The portal login page is an ASP.NET WebForms page: every submission must
echo back the hidden anti-forgery fields served with the page. This module
pulls those values out of the raw HTML and builds the POST payload.
"""

import re
from dataclasses import dataclass
from typing import Dict, TYPE_CHECKING

from assignment_watcher.errors import ExtractionError
from assignment_watcher.utils import get_logger

if TYPE_CHECKING:
    from assignment_watcher.session import Credentials


# Module logger
logger = get_logger("forms")

# Hidden field patterns; update these when the login page markup changes
VIEWSTATE_PATTERN = re.compile(r'id="__VIEWSTATE" value="(.*?)"')
EVENTVALIDATION_PATTERN = re.compile(r'id="__EVENTVALIDATION" value="(.*?)"')

# The portal serves a constant generator token, so it is not extracted
DEFAULT_VIEWSTATE_GENERATOR = "C2EE9ABB"

# Form field names expected by the login endpoint
USERNAME_FIELD = "txtusername"
PASSWORD_FIELD = "password"
SUBMIT_FIELD = "Submit"
SUBMIT_LABEL = "Login"


@dataclass(frozen=True)
class LoginForm:
    """
    Anti-forgery tokens from one login page load.

    Valid for a single submission; fetch the page again for a new attempt.
    """
    view_state: str
    event_validation: str
    view_state_generator: str = DEFAULT_VIEWSTATE_GENERATOR


def _extract_field(html: str, pattern: "re.Pattern[str]", field: str) -> str:
    match = pattern.search(html)
    if match is None:
        raise ExtractionError(f"Could not find pattern: {pattern.pattern}", field=field)
    if not match.group(1):
        raise ExtractionError(f"Empty value for hidden field {field}", field=field)
    return match.group(1)


def extract_form_values(html: str) -> LoginForm:
    """
    Extract the hidden form tokens from a login page.

    Args:
        html: Raw HTML of the login page.

    Returns:
        LoginForm with view state, event validation and the fixed generator.

    Raises:
        ExtractionError: If either hidden field is missing from the page or
                         carries an empty value.
    """
    html = html or ""

    view_state = _extract_field(html, VIEWSTATE_PATTERN, "__VIEWSTATE")
    event_validation = _extract_field(html, EVENTVALIDATION_PATTERN, "__EVENTVALIDATION")

    logger.debug(
        f"Extracted form tokens (viewstate {len(view_state)} chars, "
        f"eventvalidation {len(event_validation)} chars)"
    )

    return LoginForm(view_state=view_state, event_validation=event_validation)


def build_login_payload(form: LoginForm, credentials: "Credentials") -> Dict[str, str]:
    """
    Build the URL-encodable login submission.

    Args:
        form: Tokens extracted from the freshly fetched login page.
        credentials: Username and password to submit.

    Returns:
        Ordered mapping of form field names to values.
    """
    return {
        "__EVENTTARGET": "",
        "__EVENTARGUMENT": "",
        "__VIEWSTATE": form.view_state,
        "__VIEWSTATEGENERATOR": form.view_state_generator,
        "__EVENTVALIDATION": form.event_validation,
        USERNAME_FIELD: credentials.username,
        PASSWORD_FIELD: credentials.password,
        SUBMIT_FIELD: SUBMIT_LABEL,
    }
