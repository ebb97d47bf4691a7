# tests/unit/cache/test_unit_cache_factory.py — v3
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

import pytest

from figmadump.cache.cache_factory import create_cache_store
from figmadump.cache.file_store import FileCacheStore


class TestCreateCacheStore:
    def test_csv_default(self, tmp_path):
        store = create_cache_store(tmp_path)
        assert isinstance(store, FileCacheStore)
        assert store.codec.format_name == "csv"

    def test_json(self, tmp_path):
        store = create_cache_store(str(tmp_path), "json")
        assert store.codec.extension == "json"

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError):
            create_cache_store(tmp_path, "yaml")
