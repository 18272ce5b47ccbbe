"""
Session client for the Assignment Watcher.

This module owns the cookie-persisting HTTP session used to log in to the
portal and to fetch the protected course page. The login and every later
fetch must go through the same requests.Session, since the session cookies
set during login are what keeps the client authenticated.
"""

from dataclasses import dataclass, field
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from assignment_watcher.errors import LoginFailure, NetworkError
from assignment_watcher.forms import build_login_payload, extract_form_values
from assignment_watcher.utils import get_logger


# Module logger
logger = get_logger("session")

# Default configuration
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 1.0  # exponential backoff multiplier
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Portal paths
LOGIN_PATH = "/Login.aspx"
COURSE_DETAILS_PATH = "/Student/std_course_details"

# A successful login answers with a redirect to the logged-in area
LOGIN_SUCCESS_STATUS = 302


@dataclass(frozen=True)
class Credentials:
    """Portal login credentials, supplied once at startup."""
    username: str
    password: str = field(repr=False)


def create_session(
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
) -> requests.Session:
    """
    Create a requests session with retry configuration.

    Only idempotent requests (GET, HEAD) are retried, and only on transient
    server error statuses. Connect and read timeouts are not retried, so a
    request never waits longer than one timeout. The login POST is never
    retried.

    Args:
        max_retries: Maximum number of retry attempts.
        backoff_factor: Multiplier for exponential backoff between retries.
                       Sleep time = backoff_factor * (2 ** retry_number)

    Returns:
        Configured requests.Session instance.
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=max_retries,
        connect=0,
        read=False,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET", "HEAD"],
        raise_on_status=False
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Connection": "keep-alive",
    })

    return session


class PortalSession:
    """
    Authenticated client for the course portal.

    Wraps a single requests.Session whose cookie jar carries the login
    across every subsequent request for the life of the process.
    """

    def __init__(
        self,
        base_url: str,
        protected_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.protected_url = protected_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else create_session()
        self.is_authenticated = False

    @property
    def login_url(self) -> str:
        return self.base_url + LOGIN_PATH

    @property
    def course_details_url(self) -> str:
        return self.protected_url + COURSE_DETAILS_PATH

    def _get(self, url: str, what: str) -> requests.Response:
        try:
            return self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(f"Timeout fetching {what} from {url}")
            raise NetworkError(f"Request timeout fetching {what}: {url}") from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Connection error fetching {what} from {url}: {e}")
            raise NetworkError(f"Connection error fetching {what}: {e}") from e

    def login(self, credentials: Credentials) -> requests.Response:
        """
        Log in to the portal.

        Fetches the login page, echoes its anti-forgery tokens back together
        with the credentials, and checks for the redirect the portal issues
        on success. Redirects are not followed: the 302 itself is the signal.

        Args:
            credentials: Username and password.

        Returns:
            The raw 302 response of the login POST.

        Raises:
            NetworkError: If the portal cannot be reached or times out.
            ExtractionError: If the login page no longer carries the tokens.
            LoginFailure: If the POST answers with anything but 302.
        """
        logger.info(f"Fetching login page: {self.login_url}")
        page = self._get(self.login_url, "login page")

        form = extract_form_values(page.text)
        payload = build_login_payload(form, credentials)

        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Referer": self.login_url,
            "User-Agent": DEFAULT_USER_AGENT,
        }

        logger.info(f"Submitting login form for user '{credentials.username}'")
        try:
            response = self.session.post(
                self.login_url,
                data=payload,
                headers=headers,
                timeout=self.timeout,
                allow_redirects=False
            )
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"Request timeout performing login: {self.login_url}") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Connection error performing login: {e}") from e

        if response.status_code != LOGIN_SUCCESS_STATUS:
            logger.error(f"Login failed with status: {response.status_code}")
            raise LoginFailure(
                f"Login failed with status: {response.status_code}",
                status_code=response.status_code
            )

        self.is_authenticated = True
        logger.info(f"Login successful (redirect to {response.headers.get('Location', 'N/A')})")
        return response

    def fetch_authenticated_page(self, url: Optional[str] = None) -> str:
        """
        Fetch a page using the logged-in session.

        The status code is not checked: an expired session comes back as a
        200 login page rather than an HTTP error.

        Args:
            url: Page to fetch. Defaults to the course details page.

        Returns:
            Raw response body.

        Raises:
            NetworkError: On transport failure or timeout.
        """
        url = url or self.course_details_url
        response = self._get(url, "course page")
        logger.debug(f"Fetched {url} (HTTP {response.status_code}, {len(response.text)} bytes)")
        return response.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "PortalSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
