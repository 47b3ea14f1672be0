"""Custom exception hierarchy for git-credential-taskcluster.

This module defines a structured exception hierarchy so the CLI can tell
protocol errors, configuration errors and backend failures apart without
inspecting messages.

Exception Hierarchy:
    GitCredentialError (base)
    ├── ConfigurationError
    ├── MessageFormatError
    ├── UnsupportedCommandError
    └── BackendError
        ├── UnknownHostError
        ├── SecretFetchError
        └── SecretFormatError

Example Usage:
    >>> from git_credential_taskcluster.exceptions import MessageFormatError
    >>> try:
    ...     parse_message("foo\\n")
    ... except MessageFormatError as e:
    ...     print(e.message)
    invalid credential line: foo
"""


class GitCredentialError(Exception):
    """Base exception for all git-credential-taskcluster errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(GitCredentialError):
    """Configuration-related errors.

    Raised when settings are missing or inconsistent, e.g. neither a root URL
    nor a proxy URL was given.
    """

    pass


class MessageFormatError(GitCredentialError):
    """Malformed credential helper input.

    Raised when a request line has no ``=`` separator or uses a key outside
    the credential protocol vocabulary.

    Attributes:
        line: The offending line, if the error is about line structure
        key: The offending key, if the error is about an unknown key
    """

    def __init__(
        self,
        message: str,
        line: str | None = None,
        key: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            line: Offending input line
            key: Offending key
        """
        self.line = line
        self.key = key
        super().__init__(message)


class UnsupportedCommandError(GitCredentialError):
    """Command name is not one of the helper operations.

    Attributes:
        command: The rejected command name
    """

    def __init__(self, command: str) -> None:
        """Initialize exception.

        Args:
            command: The rejected command name
        """
        self.command = command
        super().__init__(f"invalid command specified: {command}")


class BackendError(GitCredentialError):
    """Base class for failures surfaced by a credential backend.

    The dispatcher propagates these unchanged. Retrying, if any, happens
    inside the backend before the error is raised.
    """

    pass


class UnknownHostError(BackendError):
    """The secret holds no credential for the requested host.

    Attributes:
        host: The host that was looked up
    """

    def __init__(self, host: str) -> None:
        """Initialize exception.

        Args:
            host: The host that was looked up
        """
        self.host = host
        super().__init__(f"unknown host: {host}")


class SecretFetchError(BackendError):
    """Fetching the secret from the secrets service failed.

    Attributes:
        status_code: HTTP status code (if a response was received)
        secret_name: Name of the secret that was requested
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        secret_name: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            secret_name: Name of the requested secret
        """
        self.status_code = status_code
        self.secret_name = secret_name

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)
        # Preserve original message
        self.message = message


class SecretFormatError(BackendError):
    """The secret payload does not have the expected structure."""

    pass
