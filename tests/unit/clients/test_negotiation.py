"""Unit tests for capability variant negotiation."""

from __future__ import annotations

import pytest

from vaultdav.clients.capability import Variant, negotiate
from vaultdav.errors import CapabilityNotSupportedError
from tests.fakes import FakeCapability, ListOnlyCapability, StreamOnlyCapability


class BothVariants(FakeCapability):
    async def read_file_stream(self, path):
        raise AssertionError("stream variant must not be used")
        yield b""  # pragma: no cover

    async def write_file_stream(self, path, chunks):
        raise AssertionError("stream variant must not be used")


class MixedVariants(StreamOnlyCapability):
    """Buffered write, streaming read."""

    async def write_file(self, path, content):
        self.files[path] = content.encode("utf-8")


class TestNegotiate:
    def test_buffered_only(self):
        bound = negotiate(FakeCapability())
        assert bound.read_variant == Variant.BUFFERED
        assert bound.write_variant == Variant.BUFFERED

    def test_stream_only(self):
        bound = negotiate(StreamOnlyCapability())
        assert bound.read_variant == Variant.STREAM
        assert bound.write_variant == Variant.STREAM

    def test_buffered_wins_when_both_present(self):
        bound = negotiate(BothVariants())
        assert bound.read_variant == Variant.BUFFERED
        assert bound.write_variant == Variant.BUFFERED

    def test_pairs_resolved_independently(self):
        bound = negotiate(MixedVariants())
        assert bound.read_variant == Variant.STREAM
        assert bound.write_variant == Variant.BUFFERED

    def test_missing_read_and_write(self):
        with pytest.raises(CapabilityNotSupportedError) as exc_info:
            negotiate(ListOnlyCapability())

        assert exc_info.value.details["operation"] == "read"
        assert exc_info.value.details["available"] == []

    def test_missing_listing(self):
        class NoListing:
            async def read_file(self, path):
                return ""

            async def write_file(self, path, content):
                return None

        with pytest.raises(CapabilityNotSupportedError) as exc_info:
            negotiate(NoListing())

        assert exc_info.value.message == "Capability does not support operation: list_entries"

    async def test_bound_dispatch_uses_resolved_variant(self):
        bound = negotiate(BothVariants(files={"/x.md": "buffered"}))

        assert await bound.read("/x.md") == "buffered"
        await bound.write("/y.md", "new")
        assert bound.capability.files["/y.md"] == "new"

    async def test_bytes_from_buffered_read_are_decoded(self):
        class BytesCapability(FakeCapability):
            async def read_file(self, path):
                return "ünïcode".encode("utf-8")

        assert await negotiate(BytesCapability()).read("/a") == "ünïcode"
