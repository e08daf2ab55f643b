"""
Tests for the engine boundary: constants, protocol conformance of the fake,
and loading engine factories.
"""
from __future__ import annotations

import errno

import pytest

from casync_http.engine import (
    CHUNK_HEADER_SIZE,
    MAX_CHUNK_PAYLOAD,
    PROTOCOL_SIZE_MAX,
    AbortReason,
    FeatureFlags,
    RemoteEngine,
    load_engine_factory,
)
from casync_http.errors import ConfigurationError
from tests.fakes.fake_engine import FakeRemoteEngine


class TestConstants:
    """Test protocol limits and flag values."""

    def test_max_chunk_payload(self):
        assert CHUNK_HEADER_SIZE == 56
        assert MAX_CHUNK_PAYLOAD == PROTOCOL_SIZE_MAX - CHUNK_HEADER_SIZE

    def test_feature_flags_combine(self):
        flags = FeatureFlags.READABLE_STORE | FeatureFlags.READABLE_INDEX
        assert FeatureFlags.READABLE_STORE in flags
        assert FeatureFlags.READABLE_INDEX in flags
        assert FeatureFlags.READABLE_STORE not in FeatureFlags.READABLE_INDEX

    @pytest.mark.skipif(not hasattr(errno, "ENOMEDIUM"), reason="Linux errno values")
    def test_abort_reasons_are_errno_values(self):
        assert AbortReason.NO_MEDIUM == errno.ENOMEDIUM
        assert AbortReason.BAD_RESPONSE == errno.EBADR


class TestFakeConformance:
    """Test the fake satisfies the engine protocol."""

    def test_fake_is_remote_engine(self):
        assert isinstance(FakeRemoteEngine(), RemoteEngine)


class TestLoadEngineFactory:
    """Test load_engine_factory()."""

    def test_loads_class(self):
        factory = load_engine_factory("tests.fakes.fake_engine:FakeRemoteEngine")
        assert factory is FakeRemoteEngine
        assert isinstance(factory(), RemoteEngine)

    def test_dotted_attribute(self):
        factory = load_engine_factory("tests.fakes:fake_engine.FakeRemoteEngine")
        assert factory is FakeRemoteEngine

    @pytest.mark.parametrize("path", ["no_colon", ":Attr", "module:"])
    def test_malformed_path(self, path):
        with pytest.raises(ConfigurationError, match="module:attribute"):
            load_engine_factory(path)

    def test_missing_module(self):
        with pytest.raises(ConfigurationError, match="Cannot import engine module"):
            load_engine_factory("casync_http_no_such_module:Engine")

    def test_missing_attribute(self):
        with pytest.raises(ConfigurationError, match="not found"):
            load_engine_factory("tests.fakes.fake_engine:NoSuchEngine")

    def test_not_callable(self):
        with pytest.raises(ConfigurationError, match="not callable"):
            load_engine_factory("casync_http.engine:PROTOCOL_SIZE_MAX")
