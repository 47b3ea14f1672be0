"""Credential helper protocol, dispatcher and backends.

Example:
    >>> import asyncio, sys
    >>> from git_credential_taskcluster.credentials import NullHelper, run_helper
    >>> asyncio.run(run_helper(NullHelper(), "retrieve", sys.stdin.buffer, sys.stdout.buffer))
"""

from git_credential_taskcluster.credentials.backend import Helper
from git_credential_taskcluster.credentials.message import (
    FIELD_ORDER,
    HelperMessage,
    format_message,
    parse_message,
    parse_raw_message,
)
from git_credential_taskcluster.credentials.null_backend import NullHelper
from git_credential_taskcluster.credentials.runner import SUPPORTED_COMMANDS, run_helper
from git_credential_taskcluster.credentials.taskcluster_backend import TaskclusterHelper

__all__ = [
    # Message codec
    "FIELD_ORDER",
    "HelperMessage",
    "format_message",
    "parse_message",
    "parse_raw_message",
    # Backends
    "Helper",
    "NullHelper",
    "TaskclusterHelper",
    # Dispatcher
    "SUPPORTED_COMMANDS",
    "run_helper",
]
