"""Taskcluster secrets backend for CI tasks.

Reads git credentials from a Taskcluster secret shaped like::

    {
        "hosts": {
            "github.com": {"username": "bot", "password": "ghp_..."},
            "gitlab.example.com": {"username": "ci", "password": "..."}
        }
    }

The secret is fetched either through the Taskcluster proxy available inside
tasks (which signs requests itself) or directly from the deployment's root
URL with Hawk-signed client credentials.

Only ``retrieve`` does any work; ``store`` and ``erase`` are explicit no-ops
because the secret is managed outside of git.

Example:
    >>> helper = TaskclusterHelper(base_url="http://taskcluster", secret_name="project/ci/git")
    >>> creds = asyncio.run(helper.retrieve(HelperMessage(protocol="https", host="github.com")))
    >>> creds.username
    'bot'
"""

from __future__ import annotations

import base64
import json
from typing import Any
from urllib.parse import quote

import httpx
import mohawk
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from git_credential_taskcluster.config.settings import DEFAULT_SECRET_NAME, HelperSettings
from git_credential_taskcluster.credentials.message import HelperMessage
from git_credential_taskcluster.exceptions import (
    ConfigurationError,
    SecretFetchError,
    SecretFormatError,
    UnknownHostError,
)
from git_credential_taskcluster.utils.retry import async_retry

log = structlog.get_logger(__name__)

SECRETS_API_PATH = "/api/secrets/v1/secret"


class HostSecret(BaseModel):
    """Credential for one host."""

    model_config = ConfigDict(extra="ignore")

    username: str = ""
    password: str = ""


class SecretContents(BaseModel):
    """Payload of the git credentials secret."""

    model_config = ConfigDict(extra="ignore")

    hosts: dict[str, HostSecret | None] = Field(default_factory=dict)


def _parse_certificate(certificate: str | None) -> Any:
    """Decode a temporary-credential certificate, or None when not given."""
    if not certificate:
        return None
    try:
        return json.loads(certificate)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"certificate is not valid JSON: {e.msg}") from e


def _is_transient(error: Exception) -> bool:
    """Network failures and server errors are worth retrying; client errors are not."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return isinstance(error, httpx.TransportError)


class TaskclusterHelper:
    """Read-only credential helper backed by a Taskcluster secret."""

    def __init__(
        self,
        base_url: str,
        secret_name: str = DEFAULT_SECRET_NAME,
        client_id: str | None = None,
        access_token: str | None = None,
        certificate: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize Taskcluster helper.

        Args:
            base_url: Taskcluster root URL, or proxy URL inside a task
            secret_name: Name of the secret holding per-host credentials
            client_id: Client ID for Hawk signing (omit when using the proxy)
            access_token: Access token for Hawk signing
            certificate: JSON certificate of temporary credentials
            timeout: HTTP timeout in seconds
            client: Optional pre-built HTTP client; the caller owns its lifecycle

        Raises:
            ConfigurationError: If the certificate is not a JSON document
        """
        self.base_url = base_url.rstrip("/")
        self.secret_name = secret_name
        self.client_id = client_id
        self.access_token = access_token
        self.certificate = certificate
        self._certificate_data = _parse_certificate(certificate)
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: HelperSettings, client: httpx.AsyncClient | None = None) -> TaskclusterHelper:
        """Build a helper from settings.

        When a proxy URL is configured, requests go through the proxy and
        client credentials are not used.
        """
        if settings.use_proxy:
            return cls(
                base_url=settings.base_url,
                secret_name=settings.git_secret,
                timeout=settings.git_timeout,
                client=client,
            )

        return cls(
            base_url=settings.base_url,
            secret_name=settings.git_secret,
            client_id=settings.client_id,
            access_token=settings.access_token.get_secret_value() if settings.access_token else None,
            certificate=settings.certificate,
            timeout=settings.git_timeout,
            client=client,
        )

    @property
    def name(self) -> str:
        """Backend identifier."""
        return "taskcluster"

    @property
    def secret_url(self) -> str:
        """Secrets API URL of the configured secret."""
        return f"{self.base_url}{SECRETS_API_PATH}/{quote(self.secret_name, safe='')}"

    async def retrieve(self, message: HelperMessage) -> HelperMessage:
        """Look up the credential for ``message.host`` in the secret.

        Returns:
            Message carrying only username and password

        Raises:
            SecretFetchError: If the secret cannot be fetched
            SecretFormatError: If the secret has an unexpected shape
            UnknownHostError: If the secret has no entry for the host
        """
        secret = await self._get_secret()
        contents = self._parse_contents(secret)

        log.info("fetching_credentials", host=message.host, secret_name=self.secret_name)

        host = contents.hosts.get(message.host)
        if host is None:
            raise UnknownHostError(message.host)

        return HelperMessage(username=host.username, password=host.password)

    async def store(self, message: HelperMessage) -> None:
        """Ignore the stored credential; git never writes the secret."""
        log.debug("store_ignored", backend=self.name, host=message.host)

    async def erase(self, message: HelperMessage) -> None:
        """Ignore the erased credential; git never writes the secret."""
        log.debug("erase_ignored", backend=self.name, host=message.host)

    async def _get_secret(self) -> Any:
        """Fetch the secret and return its ``secret`` payload."""
        try:
            response = await self._request_secret()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                message = f"secret not found: {self.secret_name}"
            else:
                message = f"failed to fetch secret {self.secret_name}"
            raise SecretFetchError(message, status_code=status, secret_name=self.secret_name) from e
        except httpx.HTTPError as e:
            raise SecretFetchError(
                f"failed to fetch secret {self.secret_name}: {e}",
                secret_name=self.secret_name,
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise SecretFormatError(f"secret response is not valid JSON: {self.secret_name}") from e

        if not isinstance(body, dict) or "secret" not in body:
            raise SecretFormatError(f"secret response has no 'secret' field: {self.secret_name}")

        return body["secret"]

    @async_retry(max_attempts=3, backoff_factor=2.0, exceptions=(httpx.HTTPError,), retry_if=_is_transient)
    async def _request_secret(self) -> httpx.Response:
        url = self.secret_url
        headers = {"Accept": "application/json"}

        authorization = self._authorization_header(url)
        if authorization:
            headers["Authorization"] = authorization

        log.debug("secret_request", url=url, signed=authorization is not None)

        if self._client is not None:
            response = await self._client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=headers)

        response.raise_for_status()
        return response

    def _parse_contents(self, secret: Any) -> SecretContents:
        try:
            return SecretContents.model_validate(secret)
        except ValidationError as e:
            raise SecretFormatError(f"secret {self.secret_name} does not match the expected format") from e

    def _authorization_header(self, url: str) -> str | None:
        """Hawk header for a GET of ``url``, or None when unauthenticated."""
        if not self.client_id or not self.access_token:
            return None

        sender = mohawk.Sender(
            credentials={
                "id": self.client_id,
                "key": self.access_token,
                "algorithm": "sha256",
            },
            url=url,
            method="GET",
            content="",
            content_type="",
            ext=self._hawk_ext(),
        )
        return sender.request_header

    def _hawk_ext(self) -> str | None:
        """Encode temporary-credential certificate into Hawk ``ext``."""
        if not self.certificate:
            return None

        ext = {"certificate": self._certificate_data}
        return base64.urlsafe_b64encode(json.dumps(ext).encode("utf-8")).decode("ascii")
