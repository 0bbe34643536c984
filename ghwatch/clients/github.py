"""
github.py - GitHub REST implementation of RepoClient
"""

import logging
import os
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

import requests

from ..core.errors import RepoClientError, RepoNotFoundError
from .base import Branch, RepoClient, Tag, parse_repository

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TOKEN_ENV = ("GITHUB_AUTH_TOKEN", "GITHUB_TOKEN")
DEFAULT_TIMEOUT = 30
DEFAULT_PER_PAGE = 100

# Compare statuses meaning the head commit is already in the base ref.
CONTAINED_STATUSES = {"behind", "identical"}


def get_token(env_vars: Iterable[str] = DEFAULT_TOKEN_ENV) -> Optional[str]:
    """Return the first non-empty token found in the given environment variables"""
    for name in env_vars:
        value = os.environ.get(name)
        if value:
            return value
    return None


def _short_ref(ref: str) -> str:
    for prefix in ("refs/heads/", "refs/tags/"):
        if ref.startswith(prefix):
            return ref[len(prefix) :]
    return ref


class GitHubRepoClient(RepoClient):
    """Client for one GitHub repository"""

    def __init__(
        self,
        repository: Optional[str] = None,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        per_page: int = DEFAULT_PER_PAGE,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client

        Args:
            repository: 'owner/repo', or None for a client that is only used
                to open clients for other repositories
            token: API token; unauthenticated requests are heavily rate limited
            api_url: Base URL of the REST API
            timeout: Per-request timeout in seconds
            per_page: Page size for listings
            session: Shared HTTP session
        """
        self.owner: Optional[str] = None
        self.repo: Optional[str] = None
        if repository is not None:
            self.owner, self.repo = parse_repository(repository)

        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.per_page = per_page
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/vnd.github+json")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_config(
        cls, config: Dict[str, Any], repository: Optional[str] = None
    ) -> "GitHubRepoClient":
        """Build a client from the 'github' section of a ghwatch config"""
        github = config.get("github", {})
        return cls(
            repository=repository,
            token=get_token(github.get("token_env", DEFAULT_TOKEN_ENV)),
            api_url=github.get("api_url", DEFAULT_API_URL),
            timeout=github.get("timeout", DEFAULT_TIMEOUT),
            per_page=github.get("per_page", DEFAULT_PER_PAGE),
        )

    @property
    def full_name(self) -> str:
        if self.owner is None or self.repo is None:
            raise RepoClientError("client is not scoped to a repository")
        return f"{self.owner}/{self.repo}"

    def new_client(self, repository: str) -> "GitHubRepoClient":
        return GitHubRepoClient(
            repository=repository,
            token=self.token,
            api_url=self.api_url,
            timeout=self.timeout,
            per_page=self.per_page,
            session=self.session,
        )

    def _request(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RepoClientError(f"request to {url} failed: {e}")
        return response

    def _raise_for_status(self, response: requests.Response, what: str) -> None:
        if response.status_code == 404:
            raise RepoNotFoundError(f"{what}: not found", status_code=404)
        if response.status_code >= 400:
            raise RepoClientError(
                f"{what}: HTTP {response.status_code}", status_code=response.status_code
            )

    def _paginate(self, path: str, what: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        url: Optional[str] = f"{self.api_url}/repos/{self.full_name}/{path}"
        params: Optional[Dict[str, Any]] = {"per_page": self.per_page}

        while url:
            response = self._request(url, params)
            self._raise_for_status(response, f"{what} for {self.full_name}")
            items.extend(response.json())
            url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            params = None

        return items

    def list_branches(self) -> List[Branch]:
        return [Branch(name=item["name"]) for item in self._paginate("branches", "listing branches")]

    def list_tags(self) -> List[Tag]:
        return [Tag(name=item["name"]) for item in self._paginate("tags", "listing tags")]

    def contains_revision(self, ref: str, sha: str) -> bool:
        base = quote(_short_ref(ref), safe="/")
        head = quote(sha, safe="")
        url = f"{self.api_url}/repos/{self.full_name}/compare/{base}...{head}"

        response = self._request(url)
        # unknown commit, or no shared history with the ref
        if response.status_code in (404, 422):
            return False
        self._raise_for_status(response, f"comparing {ref}...{sha} in {self.full_name}")

        status = response.json().get("status")
        return status in CONTAINED_STATUSES
