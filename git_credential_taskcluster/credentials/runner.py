"""Dispatch one credential helper command to a backend.

:func:`run_helper` is the whole protocol loop: read the request, decode it,
call the backend, and for ``retrieve`` write the response. Every call is
independent; nothing is cached between invocations.

Example:
    >>> import io
    >>> out = io.BytesIO()
    >>> asyncio.run(run_helper(NullHelper(), "retrieve", io.BytesIO(b"host=a\\n"), out))
    >>> out.getvalue()
    b'host=a\\n'
"""

import asyncio
import io
from typing import IO, AnyStr

import structlog

from git_credential_taskcluster.credentials.backend import Helper
from git_credential_taskcluster.credentials.message import HelperMessage, parse_message
from git_credential_taskcluster.exceptions import UnsupportedCommandError

log = structlog.get_logger(__name__)

SUPPORTED_COMMANDS: tuple[str, ...] = ("retrieve", "store", "erase")


async def run_helper(
    helper: Helper,
    command: str,
    in_stream: IO[AnyStr],
    out_stream: IO[AnyStr],
) -> None:
    """Run a single credential helper command.

    The input is read to the end before decoding. Decode errors abort before
    the backend is called, and a failed ``retrieve`` writes nothing. Errors
    are raised unchanged; reporting them is the caller's job.

    ``erase`` calls ``helper.erase``. Earlier releases routed it to
    ``helper.store``.

    Args:
        helper: Backend implementing retrieve/store/erase
        command: One of :data:`SUPPORTED_COMMANDS` (case-sensitive)
        in_stream: Request stream, binary or text
        out_stream: Response stream, binary or text

    Raises:
        MessageFormatError: If the request is malformed
        UnsupportedCommandError: If the command is not supported
        BackendError: If the backend fails
        OSError: If reading or writing a stream fails
    """
    data = await asyncio.to_thread(in_stream.read)
    message = parse_message(data)

    log.debug("helper_command", command=command, host=message.host, protocol=message.protocol)

    if command == "retrieve":
        result = await helper.retrieve(message)
        _write_message(out_stream, result)
    elif command == "store":
        await helper.store(message)
    elif command == "erase":
        await helper.erase(message)
    else:
        raise UnsupportedCommandError(command)


def _write_message(out_stream: IO, message: HelperMessage) -> None:
    """Write a message to a binary or text stream and flush it.

    Writers whose ``mode`` has no ``b`` get ``str`` even when they are not
    :class:`io.TextIOBase` subclasses. Writers without a ``mode`` get bytes.
    """
    payload: str | bytes
    if _is_text_stream(out_stream):
        payload = message.to_wire()
    else:
        payload = message.to_bytes()

    out_stream.write(payload)
    out_stream.flush()


def _is_text_stream(stream: IO) -> bool:
    if isinstance(stream, io.TextIOBase):
        return True
    return "b" not in getattr(stream, "mode", "b")

