"""
Version resolution for DNSControl releases.

Turns a user supplied version token into a bare version string. The
'latest' alias is resolved against GitHub with one of two interchangeable
strategies:

- GitHubApiStrategy: the REST "get latest release" endpoint, optionally
  authenticated, reading the 'tag_name' field.
- RedirectStrategy: the unauthenticated /releases/latest page, reading the
  tag from the Location header of the unfollowed redirect.
"""

import logging
from typing import Optional, Protocol
from urllib.parse import urlparse

import requests
from requests.exceptions import RequestException

from dnscontrolkit.core.exceptions import ConfigurationError, ResolutionError

logger = logging.getLogger(__name__)

LATEST = "latest"

DEFAULT_OWNER = "StackExchange"
DEFAULT_REPO = "dnscontrol"
GITHUB_API_URL = "https://api.github.com"
GITHUB_URL = "https://github.com"

# /{owner}/{repo}/releases/tag/{tag}
REDIRECT_MIN_SEGMENTS = 5
REDIRECT_TAG_INDEX = 4

STRATEGIES = ("auto", "api", "redirect")


def normalize_version(token: str) -> str:
    """
    Strip surrounding whitespace and a single leading 'v'/'V'.

    Example:
        >>> normalize_version("v3.16.0")
        '3.16.0'
        >>> normalize_version("3.16.0")
        '3.16.0'
    """
    token = (token or "").strip()
    if token[:1] in ("v", "V"):
        return token[1:]
    return token


def is_latest(token: str) -> bool:
    return (token or "").strip().lower() == LATEST


class ReleaseStrategy(Protocol):
    """Source of the most recent release tag."""

    def latest_tag(self) -> str:
        ...


class GitHubApiStrategy:
    """Resolve the latest release through the GitHub REST API."""

    def __init__(
        self,
        owner: str = DEFAULT_OWNER,
        repo: str = DEFAULT_REPO,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        api_url: str = GITHUB_API_URL,
        timeout: float = 30,
    ):
        self.owner = owner
        self.repo = repo
        self.token = token
        self.session = session or requests.Session()
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/releases/latest"

    def latest_tag(self) -> str:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.debug(f"Requesting latest release from {self.url}")

        try:
            response = self.session.get(self.url, headers=headers, timeout=self.timeout)
        except RequestException as e:
            raise ResolutionError(f"Failed to query latest release: {e}") from e

        if not 200 <= response.status_code < 300:
            raise ResolutionError(
                f"Unexpected status {response.status_code} from {self.url}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ResolutionError(f"Malformed latest release response: {e}") from e

        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str) or not tag.strip():
            raise ResolutionError("Latest release response has no tag_name")

        return tag.strip()


class RedirectStrategy:
    """
    Resolve the latest release from the /releases/latest redirect.

    The redirect is not followed: the first response must be a 3xx whose
    Location path is /{owner}/{repo}/releases/tag/{tag}.
    """

    def __init__(
        self,
        owner: str = DEFAULT_OWNER,
        repo: str = DEFAULT_REPO,
        session: Optional[requests.Session] = None,
        base_url: str = GITHUB_URL,
        timeout: float = 30,
    ):
        self.owner = owner
        self.repo = repo
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.owner}/{self.repo}/releases/latest"

    def latest_tag(self) -> str:
        logger.debug(f"Requesting latest release redirect from {self.url}")

        try:
            response = self.session.get(
                self.url, allow_redirects=False, timeout=self.timeout
            )
        except RequestException as e:
            raise ResolutionError(f"Failed to query latest release: {e}") from e

        if not 300 <= response.status_code < 400:
            raise ResolutionError(
                f"Expected a redirect from {self.url}, got status {response.status_code}"
            )

        location = response.headers.get("Location")
        if not location:
            raise ResolutionError(f"Redirect from {self.url} has no Location header")

        return tag_from_location(location)


def tag_from_location(location: str) -> str:
    """
    Extract the release tag from a /releases/tag/{tag} location.

    Example:
        >>> tag_from_location("https://github.com/Org/tool/releases/tag/v4.2.0")
        'v4.2.0'

    Raises:
        ResolutionError: If the path has fewer segments than expected
    """
    segments = [s for s in urlparse(location).path.split("/") if s]
    if len(segments) < REDIRECT_MIN_SEGMENTS:
        raise ResolutionError(
            f"Cannot parse release tag from redirect location: {location}"
        )
    return segments[REDIRECT_TAG_INDEX]


def build_strategy(
    strategy: str,
    token: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: float = 30,
) -> ReleaseStrategy:
    """
    Create the 'latest' resolution strategy.

    Args:
        strategy: 'api', 'redirect', or 'auto' (API when a token is given)
        token: Optional GitHub token for the API strategy
        session: Optional shared requests session
        timeout: Request timeout in seconds

    Raises:
        ConfigurationError: If the strategy name is unknown
    """
    if strategy not in STRATEGIES:
        raise ConfigurationError(
            f"Unknown resolve strategy '{strategy}'. Use one of: {', '.join(STRATEGIES)}"
        )

    if strategy == "api" or (strategy == "auto" and token):
        return GitHubApiStrategy(token=token, session=session, timeout=timeout)
    return RedirectStrategy(session=session, timeout=timeout)


class VersionResolver:
    """Resolve a version token to a bare version string."""

    def __init__(self, strategy: ReleaseStrategy):
        self.strategy = strategy

    def resolve(self, token: str) -> str:
        """
        Resolve token.

        Explicit versions are normalized without any network access.

        Raises:
            ResolutionError: If 'latest' cannot be resolved
            ConfigurationError: If the token is empty
        """
        if not is_latest(token):
            version = normalize_version(token)
            if not version:
                raise ConfigurationError(f"Invalid version: '{token}'")
            return version

        logger.debug("Requesting latest DNSControl version...")
        version = normalize_version(self.strategy.latest_tag())
        if not version:
            raise ResolutionError("Latest release tag is empty")

        logger.debug(f"Latest version: {version}")
        return version
