"""No-op credential helper backend."""

import structlog

from git_credential_taskcluster.credentials.message import HelperMessage

log = structlog.get_logger(__name__)


class NullHelper:
    """Helper implementation with no-op methods.

    ``retrieve`` returns its input unchanged; ``store`` and ``erase`` do
    nothing. A stub backend for checking git configuration without a secrets
    service.

    Example:
        >>> helper = NullHelper()
        >>> msg = HelperMessage(host="example.com")
        >>> asyncio.run(helper.retrieve(msg)) == msg
        True
    """

    @property
    def name(self) -> str:
        """Backend identifier."""
        return "null"

    async def retrieve(self, message: HelperMessage) -> HelperMessage:
        """Return the request unchanged."""
        return message

    async def store(self, message: HelperMessage) -> None:
        """Ignore the stored credential."""
        log.debug("store_ignored", backend=self.name, host=message.host)

    async def erase(self, message: HelperMessage) -> None:
        """Ignore the erased credential."""
        log.debug("erase_ignored", backend=self.name, host=message.host)
