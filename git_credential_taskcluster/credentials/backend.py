"""Protocol defining the credential helper backend interface."""

from typing import Protocol, runtime_checkable

from git_credential_taskcluster.credentials.message import HelperMessage


@runtime_checkable
class Helper(Protocol):
    """Interface a backend implements to act as a git credential helper.

    The three methods correspond to the ``retrieve``, ``store`` and ``erase``
    helper commands. Every backend defines all three; read-only backends
    make ``store`` and ``erase`` explicit no-ops.

    Cancellation arrives as ``asyncio.CancelledError`` in the awaiting task;
    backends that block on I/O are expected to let it through.
    """

    async def retrieve(self, message: HelperMessage) -> HelperMessage:
        """Look up a credential.

        Args:
            message: Request with protocol/host/path filled in

        Returns:
            Message with username and password populated

        Raises:
            BackendError: If no credential exists for the request
        """
        ...

    async def store(self, message: HelperMessage) -> None:
        """Record that a credential was accepted.

        Args:
            message: The credential git used successfully
        """
        ...

    async def erase(self, message: HelperMessage) -> None:
        """Forget a credential.

        Args:
            message: The credential git rejected
        """
        ...
