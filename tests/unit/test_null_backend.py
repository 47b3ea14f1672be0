"""Unit tests for the Helper protocol and NullHelper."""

import pytest

from git_credential_taskcluster.credentials.backend import Helper
from git_credential_taskcluster.credentials.message import HelperMessage
from git_credential_taskcluster.credentials.null_backend import NullHelper
from git_credential_taskcluster.credentials.taskcluster_backend import TaskclusterHelper


class TestHelperProtocol:
    """Tests for structural conformance to Helper."""

    @pytest.mark.parametrize(
        "backend",
        [
            NullHelper(),
            TaskclusterHelper(base_url="http://taskcluster"),
        ],
    )
    def test_backends_satisfy_protocol(self, backend) -> None:
        """Every shipped backend implements retrieve/store/erase."""
        assert isinstance(backend, Helper)

    def test_incomplete_object_rejected(self) -> None:
        """An object missing erase is not a Helper."""

        class RetrieveOnly:
            async def retrieve(self, message):
                return message

            async def store(self, message):
                return None

        assert not isinstance(RetrieveOnly(), Helper)

    def test_taskcluster_helper_stands_alone(self) -> None:
        """TaskclusterHelper defines every method itself rather than inheriting no-ops."""
        assert not issubclass(TaskclusterHelper, NullHelper)
        for method in ("retrieve", "store", "erase"):
            assert method in vars(TaskclusterHelper)


class TestNullHelper:
    """Tests for the no-op backend."""

    def test_name(self) -> None:
        """Should identify itself as 'null'."""
        assert NullHelper().name == "null"

    @pytest.mark.asyncio
    async def test_retrieve_is_identity(self, request_message: HelperMessage) -> None:
        """retrieve returns its input unchanged."""
        result = await NullHelper().retrieve(request_message)

        assert result == request_message

    @pytest.mark.asyncio
    async def test_retrieve_empty(self) -> None:
        """An empty request comes back empty."""
        assert await NullHelper().retrieve(HelperMessage()) == HelperMessage()

    @pytest.mark.asyncio
    async def test_store_is_noop(self, request_message: HelperMessage) -> None:
        """store succeeds and returns nothing."""
        assert await NullHelper().store(request_message) is None

    @pytest.mark.asyncio
    async def test_erase_is_noop(self, request_message: HelperMessage) -> None:
        """erase succeeds and returns nothing."""
        assert await NullHelper().erase(request_message) is None
