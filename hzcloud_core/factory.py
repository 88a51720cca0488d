"""Factory helpers for constructing clients from configuration."""

from __future__ import annotations

from requests import Session

from hzcloud import Client

from .config import AppConfig, ConfigurationError


def build_client(config: AppConfig, *, session: Session | None = None) -> Client:
    """Instantiate a Hetzner Cloud client matching application configuration."""

    if not config.hetzner_api_token:
        raise ConfigurationError("Hetzner API token not configured")
    return Client(
        token=config.hetzner_api_token,
        base_url=config.base_url,
        timeout=config.timeout,
        verify_ssl=config.verify_ssl,
        session=session,
        poll_interval=config.poll_interval,
    )
