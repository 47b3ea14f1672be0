"""
Configuration using pydantic-settings for type-safe settings management.

Settings are read from ``TASKCLUSTER_*`` environment variables, matching the
variables Taskcluster injects into tasks, and may be overridden by CLI
options. The resulting value is built once per process and handed to the
backend; nothing here is global.

Environment variables:
    TASKCLUSTER_GIT_SECRET    Secret holding the per-host credentials
    TASKCLUSTER_PROXY_URL     Taskcluster proxy URL (takes precedence)
    TASKCLUSTER_ROOT_URL      Taskcluster deployment root URL
    TASKCLUSTER_CLIENT_ID     Client ID for direct access
    TASKCLUSTER_ACCESS_TOKEN  Access token for direct access
    TASKCLUSTER_CERTIFICATE   Certificate for temporary credentials
    TASKCLUSTER_GIT_TIMEOUT   HTTP timeout in seconds
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from git_credential_taskcluster.exceptions import ConfigurationError

DEFAULT_SECRET_NAME = "shared/git"


class HelperSettings(BaseSettings):
    """Settings for the Taskcluster credential helper."""

    model_config = SettingsConfigDict(
        env_prefix="TASKCLUSTER_",
        case_sensitive=False,
        extra="ignore",
    )

    git_secret: str = Field(
        default=DEFAULT_SECRET_NAME,
        min_length=1,
        description="The Taskcluster secret to read credentials from",
    )
    proxy_url: str | None = Field(default=None, description="A URL to a Taskcluster proxy to use")
    root_url: str | None = Field(default=None, description="The Taskcluster instance root URL")
    client_id: str | None = Field(default=None, description="The Taskcluster client ID")
    access_token: SecretStr | None = Field(default=None, description="The Taskcluster access token")
    certificate: str | None = Field(default=None, description="The Taskcluster certificate")
    git_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    @field_validator("proxy_url", "root_url", "client_id", "access_token", "certificate", mode="before")
    @classmethod
    def empty_as_unset(cls, v: Any) -> Any:
        """Treat empty environment values as not set."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("proxy_url", "root_url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Require an http(s) URL and strip any trailing slash."""
        if v is None:
            return v
        if not (v.startswith("http://") or v.startswith("https://")):
            raise ValueError(f"URL must start with http:// or https://, got: {v}")
        return v.rstrip("/")

    @field_validator("certificate")
    @classmethod
    def validate_certificate(cls, v: str | None) -> str | None:
        """Ensure the certificate is a JSON document."""
        if v is None:
            return v
        try:
            json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"certificate is not valid JSON: {e.msg}") from e
        return v

    @model_validator(mode="after")
    def validate_endpoint(self) -> HelperSettings:
        """Require an endpoint and complete credentials."""
        if self.proxy_url is None and self.root_url is None:
            raise ValueError("either proxy_url or root_url must be set")
        if (self.client_id is None) != (self.access_token is None):
            raise ValueError("client_id and access_token must be set together")
        return self

    @property
    def use_proxy(self) -> bool:
        """True when requests go through a Taskcluster proxy."""
        return self.proxy_url is not None

    @property
    def base_url(self) -> str:
        """URL requests are sent to: the proxy if configured, else the root URL."""
        return self.proxy_url or self.root_url or ""

    @classmethod
    def load(cls, **overrides: Any) -> HelperSettings:
        """Build settings from the environment plus explicit overrides.

        Overrides that are ``None`` are dropped so the environment (or the
        default) applies.

        Raises:
            ConfigurationError: If the resulting settings are invalid
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            details = "; ".join(_format_error(err) for err in e.errors())
            raise ConfigurationError(f"Invalid configuration: {details}") from e


def _format_error(err: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in err.get("loc", ()))
    message = err.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
