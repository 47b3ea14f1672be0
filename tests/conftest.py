"""Pytest configuration and shared fixtures."""

import pytest
import structlog

from git_credential_taskcluster.credentials.message import HelperMessage

TASKCLUSTER_ENV_VARS = (
    "TASKCLUSTER_GIT_SECRET",
    "TASKCLUSTER_PROXY_URL",
    "TASKCLUSTER_ROOT_URL",
    "TASKCLUSTER_CLIENT_ID",
    "TASKCLUSTER_ACCESS_TOKEN",
    "TASKCLUSTER_CERTIFICATE",
    "TASKCLUSTER_GIT_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_taskcluster_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host's Taskcluster environment out of every test."""
    for name in TASKCLUSTER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def request_message() -> HelperMessage:
    """A typical retrieve request sent by git."""
    return HelperMessage(protocol="https", host="github.com", path="org/repo.git")


@pytest.fixture
def secret_payload() -> dict:
    """Secret contents as stored in the Taskcluster secrets service."""
    return {
        "hosts": {
            "github.com": {"username": "ci-bot", "password": "ghp_secret123"},
            "gitlab.example.com": {"username": "deploy", "password": "glpat-xyz"},
        }
    }


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging so no test logs into another test's streams."""
    yield
    structlog.reset_defaults()
