# tests/conftest.py

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Set, Tuple

import pytest

import rn_version_labeler.config.settings as settings_mod
from rn_version_labeler.github_client import Issue, NotFoundError, TransientError

_ENV_VARS = (
    "INPUT_GITHUB-TOKEN",
    "INPUT_REQUIRED-LABEL",
    "GITHUB_TOKEN",
    "GITHUB_API_URL",
    "GITHUB_REPOSITORY",
    "GITHUB_EVENT_PATH",
    "RN_LABELER_GITHUB_TOKEN",
    "RN_LABELER_REQUIRED_LABEL",
    "RN_LABELER_API_URL",
    "RN_LABELER_MAX_WORKERS",
    "RN_LABELER_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """
    Keep the developer's / CI's GitHub variables out of the tests and make
    sure each test reads settings fresh.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Settings also reads .env from the working directory.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings_mod, "_settings", None)


class FakeTracker:
    """
    In-memory IssueTracker that records every call.

    `fail_removals` / `fail_add` make the matching mutations raise.
    """

    def __init__(
        self,
        *,
        body: Optional[str] = "",
        state: str = "open",
        labels: Optional[List[str]] = None,
        repo_labels: Optional[Set[str]] = None,
        fail_removals: Optional[Set[str]] = None,
        fail_add: bool = False,
    ) -> None:
        self.body = body
        self.state = state
        self.labels: List[str] = list(labels or [])
        self.repo_labels: Set[str] = set(repo_labels or [])
        self.fail_removals: Set[str] = set(fail_removals or [])
        self.fail_add = fail_add
        self.calls: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def _record(self, op: str, arg: str = "") -> None:
        with self._lock:
            self.calls.append((op, arg))

    @property
    def mutations(self) -> List[Tuple[str, str]]:
        return [c for c in self.calls if c[0] in ("add_label", "remove_label")]

    def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        self._record("get_issue")
        return Issue(number=number, state=self.state, body=self.body)

    def list_labels(self, owner: str, repo: str, number: int) -> List[str]:
        self._record("list_labels")
        return list(self.labels)

    def label_exists(self, owner: str, repo: str, name: str) -> bool:
        self._record("label_exists", name)
        return name in self.repo_labels

    def add_label(self, owner: str, repo: str, number: int, name: str) -> None:
        self._record("add_label", name)
        if self.fail_add:
            raise TransientError("boom", status_code=500)
        with self._lock:
            if name not in self.labels:
                self.labels.append(name)

    def remove_label(self, owner: str, repo: str, number: int, name: str) -> None:
        self._record("remove_label", name)
        if name in self.fail_removals:
            raise TransientError(f"cannot remove {name}", status_code=502)
        with self._lock:
            if name not in self.labels:
                raise NotFoundError(f"{name} not on issue", status_code=404)
            self.labels.remove(name)


@pytest.fixture
def fake_tracker_factory():
    return FakeTracker
