# tests/unit/api/test_unit_facade.py — v2
"""Tests for api/facade.py — download() wiring."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from figmadump.api.facade import download
from figmadump.config.settings import ConfigurationError, Settings
from figmadump.core.models import Arguments


class TestDownload:
    @pytest.mark.asyncio
    async def test_uses_given_client_and_leaves_it_open(self, fake_client, settings, output_dir):
        result = await download(
            Arguments(file="FA", output=output_dir), settings=settings, client=fake_client,
        )
        assert list(result.documents) == ["FA"]
        assert fake_client.closed is False

    @pytest.mark.asyncio
    async def test_creates_and_closes_own_client(self, fake_client, settings, output_dir):
        with patch("figmadump.client.client_factory.create_client", return_value=fake_client):
            await download(Arguments(file="FA", output=output_dir), settings=settings)
        assert fake_client.closed is True

    @pytest.mark.asyncio
    async def test_no_identifier_needs_no_token(self, tmp_path):
        out = tmp_path / "fresh"
        result = await download(
            Arguments(output=out), settings=Settings(_env_file=None, figma_api_pat=""),
        )
        assert result.network_calls == 0
        assert out.is_dir()

    @pytest.mark.asyncio
    async def test_identifier_without_token(self, output_dir):
        with pytest.raises(ConfigurationError):
            await download(
                Arguments(team="T1", output=output_dir),
                settings=Settings(_env_file=None, figma_api_pat=""),
            )

    @pytest.mark.asyncio
    async def test_settings_drive_queue(self, fake_client, output_dir):
        settings = Settings(_env_file=None, figma_api_pat="x", fetch_concurrency=2)
        fake_client.delay = 0.01
        await download(Arguments(team="T1", output=output_dir), settings=settings, client=fake_client)
        assert fake_client.max_in_flight == 2

    @pytest.mark.asyncio
    async def test_format_selects_codec(self, fake_client, settings, output_dir):
        await download(
            Arguments(file="FA", output=output_dir, format="json"),
            settings=settings, client=fake_client,
        )
        assert (output_dir / "file_by_file_FA.json").is_file()
