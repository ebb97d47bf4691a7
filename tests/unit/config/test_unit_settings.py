# tests/unit/config/test_unit_settings.py — v3
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from figmadump.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FIGMA_API_PAT", raising=False)
        s = Settings(_env_file=None)
        assert s.figma_api_pat == ""
        assert s.figma_api_base_url == "https://api.figma.com"
        assert s.fetch_concurrency == 1
        assert s.fetch_timeout_seconds is None
        assert s.cache_policy == "all"
        assert s.output_dir == Path("./out")
        assert s.output_format == "csv"
        assert s.log_level == "INFO"
        assert s.has_token is False

    def test_token_from_env(self, monkeypatch):
        monkeypatch.setenv("FIGMA_API_PAT", "figd_abc")
        assert Settings(_env_file=None).has_token is True

    def test_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("FIGMADUMP_FETCH_CONCURRENCY", "4")
        monkeypatch.setenv("FIGMADUMP_OUTPUT_FORMAT", "json")
        s = Settings(_env_file=None)
        assert s.fetch_concurrency == 4
        assert s.output_format == "json"

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("FIGMA_API_PAT=from-file\nFIGMADUMP_CACHE_POLICY=per_scope\n")
        s = Settings(_env_file=env)
        assert s.figma_api_pat == "from-file"
        assert s.cache_policy == "per_scope"


class TestSettingsValidation:
    def test_concurrency_below_one(self):
        with pytest.raises(ValidationError, match="fetch_concurrency"):
            Settings(_env_file=None, fetch_concurrency=0)

    def test_negative_retries(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, rate_limit_retries=-1)

    def test_non_positive_fetch_timeout(self):
        with pytest.raises(ConfigurationError, match="FETCH_TIMEOUT"):
            Settings(_env_file=None, fetch_timeout_seconds=0)

    def test_non_http_base_url(self):
        with pytest.raises(ConfigurationError, match="FIGMA_API_BASE_URL"):
            Settings(_env_file=None, figma_api_base_url="ftp://figma")

    def test_bad_log_rotation(self):
        with pytest.raises(ConfigurationError, match="LOG_ROTATION"):
            Settings(_env_file=None, log_rotation="ten megs")

    def test_log_rotation_zero_allowed(self):
        assert Settings(_env_file=None, log_rotation="0").log_rotation == "0"

    def test_unknown_format_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output_format="xml")


class TestLoadSettings:
    def test_overrides(self):
        s = load_settings(fetch_concurrency=8, cache_policy="per_scope")
        assert s.fetch_concurrency == 8
        assert s.cache_policy == "per_scope"
