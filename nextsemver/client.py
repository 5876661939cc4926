"""Read-only access to a Bitbucket Server repository."""

import logging

from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests


@dataclass
class Page:
    """One page of a paginated REST response."""

    values: list = field(default_factory=list)
    is_last_page: bool = True
    next_page_start: Optional[int] = None

    @classmethod
    def from_json(cls, data: dict) -> "Page":
        """Build a Page from the JSON body returned by Bitbucket."""
        return cls(
            values=list(data.get("values") or []),
            is_last_page=bool(data.get("isLastPage", True)),
            next_page_start=data.get("nextPageStart"),
        )

    @property
    def exhausted(self) -> bool:
        """True if there is nothing more to fetch after this page."""
        return self.is_last_page or self.next_page_start is None


class HostingService(Protocol):
    """The three queries needed from the hosting service."""

    def list_tags(self, start: int, limit: int) -> Page:
        """Return tags, newest first."""

    def list_pull_requests(
        self, branch_ref: str, state: str, start: int, limit: int
    ) -> Page:
        """Return pull requests into `branch_ref`, most recently updated first."""

    def get_commit(self, commit_hash: str) -> dict:
        """Return the commit, including `message` and `authorTimestamp`."""


class BitbucketClient:
    """
    HTTP client for the Bitbucket Server repository REST API.

    `base_url` is the repository endpoint, e.g.
    https://bitbucket.example.com/rest/api/1.0/projects/FOO/repos/bar
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.auth = (username, password)
        self.session.headers.update({"accept": "application/json"})

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        url = f"{self.base_url}{path}"
        logging.getLogger(__name__).debug("GET %s %s", url, params or "")

        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def list_tags(self, start: int, limit: int) -> Page:
        return Page.from_json(self._get("/tags", {"start": start, "limit": limit}))

    def list_pull_requests(
        self, branch_ref: str, state: str, start: int, limit: int
    ) -> Page:
        return Page.from_json(
            self._get(
                "/pull-requests",
                {
                    "state": state,
                    "order": "NEWEST",
                    "at": branch_ref,
                    "start": start,
                    "limit": limit,
                },
            )
        )

    def get_commit(self, commit_hash: str) -> dict:
        return self._get(f"/commits/{commit_hash}")
