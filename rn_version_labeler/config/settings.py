# rn_version_labeler/config/settings.py

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """
    Raised when required configuration is missing or unusable.

    This is fatal for a run and is raised before the tracker is contacted.
    """


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="RN_LABELER_",
        populate_by_name=True,
    )

    # ------------------------------------------------------------------
    # Action inputs
    # ------------------------------------------------------------------
    # GitHub Actions exposes `with:` inputs as INPUT_<NAME>, keeping dashes.
    github_token: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices(
            "INPUT_GITHUB-TOKEN",
            "RN_LABELER_GITHUB_TOKEN",
            "GITHUB_TOKEN",
        ),
        description="Token used to read the issue and edit its labels.",
    )

    required_label: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "INPUT_REQUIRED-LABEL",
            "RN_LABELER_REQUIRED_LABEL",
        ),
        description="Only issues carrying this label are reconciled.",
    )

    # ------------------------------------------------------------------
    # API / runtime knobs
    # ------------------------------------------------------------------
    api_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("RN_LABELER_API_URL", "GITHUB_API_URL"),
        description="Base URL of the GitHub REST API (differs on GHES).",
    )

    request_timeout: float = Field(
        default=30.0,
        description="Per-request timeout in seconds for GitHub API calls.",
    )

    max_workers: int = Field(
        default=4,
        ge=1,
        description="Upper bound on label removals issued in parallel.",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level used by the CLI.",
    )

    def require_credentials(self) -> Tuple[str, str]:
        """
        Return (token, required_label), or raise ConfigurationError naming
        whatever is missing.
        """
        token = self.github_token.get_secret_value() if self.github_token else ""
        missing = []
        if not token:
            missing.append("github-token")
        if not self.required_label:
            missing.append("required-label")
        if missing:
            raise ConfigurationError(
                f"Missing required input(s): {', '.join(missing)}"
            )
        return token, self.required_label  # type: ignore[return-value]


_settings: Optional[Settings] = None


def get_settings(reload: bool = False) -> Settings:
    """
    Singleton-style accessor; pass reload=True to re-read the environment.
    """
    global _settings
    if _settings is None or reload:
        _settings = Settings()
    return _settings


# ---------------------------------------------------------------------------
# Workflow event context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IssueContext:
    """
    Which issue the current workflow run is about.
    """

    owner: str
    repo: str
    number: int

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "IssueContext":
        """
        Build the context from the variables GitHub Actions sets:

        - GITHUB_REPOSITORY: "owner/repo"
        - GITHUB_EVENT_PATH: JSON payload of the triggering event; the issue
          number comes from issue.number, pull_request.number or number.
        """
        env = os.environ if environ is None else environ

        repository = env.get("GITHUB_REPOSITORY", "")
        owner, sep, repo = repository.partition("/")
        if not (sep and owner and repo):
            raise ConfigurationError(
                f"GITHUB_REPOSITORY must look like 'owner/repo', got {repository!r}"
            )

        event_path = env.get("GITHUB_EVENT_PATH")
        if not event_path:
            raise ConfigurationError("GITHUB_EVENT_PATH is not set")

        try:
            payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(
                f"Could not read event payload at {event_path}: {exc}"
            ) from exc

        number = (
            (payload.get("issue") or {}).get("number")
            or (payload.get("pull_request") or {}).get("number")
            or payload.get("number")
        )
        if not isinstance(number, int):
            raise ConfigurationError("Event payload does not reference an issue")

        return cls(owner=owner, repo=repo, number=number)
