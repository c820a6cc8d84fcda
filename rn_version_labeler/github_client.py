# rn_version_labeler/github_client.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

import requests

from rn_version_labeler.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TrackerError(RuntimeError):
    """
    Error raised when an issue-tracker request fails.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class NotFoundError(TrackerError):
    """The issue, repository or label does not exist (HTTP 404)."""


class TransientError(TrackerError):
    """Network failure or an unexpected response; may succeed if re-run."""


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------


@dataclass
class Issue:
    number: int
    state: str
    body: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.state == "closed"


class IssueTracker(Protocol):
    """
    Operations reconciliation needs from an issue tracker.

    Each may raise NotFoundError or TransientError.
    """

    def get_issue(self, owner: str, repo: str, number: int) -> Issue: ...

    def list_labels(self, owner: str, repo: str, number: int) -> List[str]: ...

    def label_exists(self, owner: str, repo: str, name: str) -> bool: ...

    def add_label(self, owner: str, repo: str, number: int, name: str) -> None: ...

    def remove_label(self, owner: str, repo: str, number: int, name: str) -> None: ...


# ---------------------------------------------------------------------------
# GitHub REST implementation
# ---------------------------------------------------------------------------


@dataclass
class GitHubClientConfig:
    """
    Configuration for talking to the GitHub REST API.
    """

    token: str
    base_url: str = "https://api.github.com"
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GitHubClientConfig":
        settings = settings or get_settings()
        token = settings.github_token.get_secret_value() if settings.github_token else ""
        return cls(
            token=token,
            base_url=settings.api_url.rstrip("/"),
            timeout=settings.request_timeout,
        )


class GitHubClient:
    """
    Minimal GitHub issues/labels client implementing IssueTracker.

    One requests.Session is shared by all calls; it is safe to issue label
    removals from several threads since each call is a single request.
    """

    PER_PAGE = 100

    def __init__(
        self,
        config: Optional[GitHubClientConfig] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        if config is None:
            config = GitHubClientConfig.from_settings()

        self.config = config
        self.base_url: str = config.base_url.rstrip("/")
        self.timeout: float = config.timeout

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if config.token:
            self.session.headers.update({"Authorization": f"Bearer {config.token}"})

    # ------------------------------------------------------------------
    # Low-level request helper
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as exc:
            raise TransientError(
                f"Error contacting GitHub at {url}: {exc}",
                url=url,
            ) from exc

        if resp.status_code == 404:
            raise NotFoundError(
                f"GitHub returned 404 for {method} {url}",
                status_code=404,
                url=url,
            )
        if not resp.ok:
            raise TransientError(
                f"GitHub returned HTTP {resp.status_code} for {method} {url}: {resp.text[:200]}",
                status_code=resp.status_code,
                url=url,
            )
        return resp

    @staticmethod
    def _issue_path(owner: str, repo: str, number: int) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/issues/{number}"

    # ------------------------------------------------------------------
    # IssueTracker
    # ------------------------------------------------------------------
    def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        data: Dict[str, Any] = self._request("GET", self._issue_path(owner, repo, number)).json()
        return Issue(
            number=data.get("number", number),
            state=data.get("state", "open"),
            body=data.get("body"),
        )

    def list_labels(self, owner: str, repo: str, number: int) -> List[str]:
        """
        Return every label name on the issue, following pagination.
        """
        path = f"{self._issue_path(owner, repo, number)}/labels"
        names: List[str] = []
        page = 1
        while True:
            batch = self._request(
                "GET", path, params={"per_page": self.PER_PAGE, "page": page}
            ).json()
            names.extend(item["name"] for item in batch)
            if len(batch) < self.PER_PAGE:
                break
            page += 1
        return names

    def label_exists(self, owner: str, repo: str, name: str) -> bool:
        path = f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/labels/{quote(name, safe='')}"
        try:
            self._request("GET", path)
        except NotFoundError:
            return False
        return True

    def add_label(self, owner: str, repo: str, number: int, name: str) -> None:
        path = f"{self._issue_path(owner, repo, number)}/labels"
        self._request("POST", path, json={"labels": [name]})
        logger.info("Added label %r to %s/%s#%s", name, owner, repo, number)

    def remove_label(self, owner: str, repo: str, number: int, name: str) -> None:
        path = f"{self._issue_path(owner, repo, number)}/labels/{quote(name, safe='')}"
        self._request("DELETE", path)
        logger.info("Removed label %r from %s/%s#%s", name, owner, repo, number)
