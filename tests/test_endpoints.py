"""
Tests for endpoint parsing and validation.
"""
from __future__ import annotations

import pytest

from casync_http.endpoints import EndpointSet, empty_or_dash_to_none
from casync_http.errors import ConfigurationError, UnsupportedOperation


class TestMarkers:
    """Test "not configured" markers."""

    @pytest.mark.parametrize("value", ["", "-", None])
    def test_markers_map_to_none(self, value):
        assert empty_or_dash_to_none(value) is None

    def test_url_kept(self):
        assert empty_or_dash_to_none("http://h/x.caidx") == "http://h/x.caidx"


class TestEndpointSet:
    """Test EndpointSet construction and check()."""

    def test_from_argv(self):
        """Test positional arguments are normalized."""
        endpoints = EndpointSet.from_argv("-", "", "http://h/x.caidx", "-", ["http://m1/s", "http://m2/s"])
        assert endpoints.base_url is None
        assert endpoints.archive_url is None
        assert endpoints.index_url == "http://h/x.caidx"
        assert endpoints.wstore_url is None
        assert endpoints.store_urls == ["http://m1/s", "http://m2/s"]
        assert endpoints.n_stores == 2
        endpoints.check()

    def test_store_count_includes_writable_store(self):
        """Test the writable store counts as a store."""
        endpoints = EndpointSet.from_argv("-", "-", "-", "http://w/s", ["http://m1/s"])
        assert endpoints.n_stores == 2
        assert endpoints.has_stores
        endpoints.check()

    def test_index_only_is_valid(self):
        endpoints = EndpointSet.from_argv("-", "-", "http://h/x.caidx", "-")
        assert not endpoints.has_stores
        endpoints.check()

    def test_nothing_to_do(self):
        """Test neither index nor store is a configuration error."""
        endpoints = EndpointSet.from_argv("-", "-", "-", "-")
        with pytest.raises(ConfigurationError, match="Nothing to do"):
            endpoints.check()

    @pytest.mark.parametrize("base,archive", [("http://h/base", "-"), ("-", "http://h/x.catar")])
    def test_base_or_archive_unsupported(self, base, archive):
        """Test base and archive URLs are rejected even with a store present."""
        endpoints = EndpointSet.from_argv(base, archive, "-", "http://w/s")
        with pytest.raises(UnsupportedOperation, match="not yet supported"):
            endpoints.check()
