# src/client/client_factory.py — v1
"""Factory: instantiate the Figma client from settings."""

from __future__ import annotations

from figmadump.client.base_client import BaseFigmaClient
from figmadump.client.retry import RetryConfig
from figmadump.config.settings import ConfigurationError, Settings


def create_client(settings: Settings) -> BaseFigmaClient:
    """Create a FigmaClient configured from settings.

    Raises:
        ConfigurationError: If FIGMA_API_PAT is not set.
    """
    from figmadump.client.figma_client import FigmaClient

    if not settings.has_token:
        raise ConfigurationError("FIGMA_API_PAT must be set to call the Figma API")

    return FigmaClient(
        token=settings.figma_api_pat,
        base_url=settings.figma_api_base_url,
        timeout_s=settings.http_timeout_seconds,
        retry_config=RetryConfig(
            max_retries=settings.rate_limit_retries,
            base_delay_s=settings.rate_limit_base_delay_seconds,
        ),
    )
