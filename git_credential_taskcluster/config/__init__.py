"""Configuration for the credential helper."""

from git_credential_taskcluster.config.settings import DEFAULT_SECRET_NAME, HelperSettings

__all__ = ["DEFAULT_SECRET_NAME", "HelperSettings"]
