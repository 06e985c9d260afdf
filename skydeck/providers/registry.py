"""Adapter construction from provider configuration objects."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from loguru import logger

from skydeck.infra.http import HttpClient

if TYPE_CHECKING:
    from .aws.config import AWS
    from .base import ProviderAdapter
    from .gcp.config import GCP
    from .proxmox.config import Proxmox

log = logger.bind(component="registry")

type ProviderConfig = AWS | GCP | Proxmox


def create_adapter(config: ProviderConfig, http: HttpClient) -> ProviderAdapter:
    from .aws.config import AWS
    from .gcp.config import GCP
    from .proxmox.config import Proxmox

    log.debug("Creating adapter for config={config_type}", config_type=type(config).__name__)

    match config:
        case AWS() | GCP() | Proxmox():
            return config.create_adapter(http)
        case _:
            raise ValueError(
                f"No adapter registered for {type(config).__name__}. "
                f"Available providers: Proxmox, GCP, AWS"
            )


def create_adapters(
    configs: Iterable[ProviderConfig], http: HttpClient,
) -> dict[str, ProviderAdapter]:
    return {config.type: create_adapter(config, http) for config in configs}
