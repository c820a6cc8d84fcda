# tests/test_settings.py

import json

import pytest

from rn_version_labeler.config.settings import (
    ConfigurationError,
    IssueContext,
    Settings,
    get_settings,
)


def test_defaults():
    settings = Settings()

    assert settings.github_token is None
    assert settings.required_label is None
    assert settings.api_url == "https://api.github.com"
    assert settings.max_workers == 4


def test_action_inputs_are_read(monkeypatch):
    monkeypatch.setenv("INPUT_GITHUB-TOKEN", "from-input")
    monkeypatch.setenv("INPUT_REQUIRED-LABEL", "Needs: Triage")

    settings = Settings()

    assert settings.require_credentials() == ("from-input", "Needs: Triage")


def test_prefixed_env_override(monkeypatch):
    monkeypatch.setenv("RN_LABELER_GITHUB_TOKEN", "abc")
    monkeypatch.setenv("RN_LABELER_REQUIRED_LABEL", "Needs: Triage")
    monkeypatch.setenv("RN_LABELER_MAX_WORKERS", "8")
    monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3")

    settings = get_settings(reload=True)

    assert settings.github_token.get_secret_value() == "abc"
    assert settings.max_workers == 8
    assert settings.api_url == "https://ghe.example.com/api/v3"


def test_token_is_not_leaked_in_repr(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "super-secret")

    assert "super-secret" not in repr(Settings())


def test_missing_inputs_raise(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "abc")

    with pytest.raises(ConfigurationError, match="required-label"):
        Settings().require_credentials()


def _event(tmp_path, payload):
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_issue_context_from_issue_event(tmp_path):
    env = {
        "GITHUB_REPOSITORY": "facebook/react-native",
        "GITHUB_EVENT_PATH": _event(tmp_path, {"action": "labeled", "issue": {"number": 1234}}),
    }

    assert IssueContext.from_env(env) == IssueContext("facebook", "react-native", 1234)


def test_issue_context_from_pull_request_event(tmp_path):
    env = {
        "GITHUB_REPOSITORY": "o/r",
        "GITHUB_EVENT_PATH": _event(tmp_path, {"pull_request": {"number": 5}}),
    }

    assert IssueContext.from_env(env).number == 5


@pytest.mark.parametrize(
    "env",
    [
        {},
        {"GITHUB_REPOSITORY": "no-slash", "GITHUB_EVENT_PATH": "x"},
        {"GITHUB_REPOSITORY": "o/r"},
        {"GITHUB_REPOSITORY": "o/r", "GITHUB_EVENT_PATH": "/does/not/exist.json"},
    ],
)
def test_issue_context_errors(env):
    with pytest.raises(ConfigurationError):
        IssueContext.from_env(env)


def test_issue_context_event_without_issue(tmp_path):
    env = {"GITHUB_REPOSITORY": "o/r", "GITHUB_EVENT_PATH": _event(tmp_path, {"ref": "main"})}

    with pytest.raises(ConfigurationError, match="does not reference an issue"):
        IssueContext.from_env(env)
