"""GCP provider configuration."""

from __future__ import annotations

import typing
from dataclasses import dataclass

if typing.TYPE_CHECKING:
    from skydeck.infra.http import HttpClient
    from skydeck.providers.gcp.adapter import GCPAdapter


@dataclass(frozen=True, slots=True)
class GCP:
    """GCP Compute Engine, reached through the console backend.

    Example:
        >>> from skydeck.providers.gcp import GCP
        >>> config = GCP(zone="europe-west1-b")

    Args:
        zone: Default zone for listing and creating instances.
        disk_size_gb: Boot disk size used when a create request has none.
    """

    zone: str = "us-central1-a"
    disk_size_gb: int = 10

    @property
    def type(self) -> str: return "gcp"

    def create_adapter(self, http: HttpClient) -> GCPAdapter:
        from skydeck.providers.gcp.adapter import GCPAdapter
        return GCPAdapter(http, self)
