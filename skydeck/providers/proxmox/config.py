"""Proxmox provider configuration."""

from __future__ import annotations

import typing
from dataclasses import dataclass

if typing.TYPE_CHECKING:
    from skydeck.infra.http import HttpClient
    from skydeck.providers.proxmox.adapter import ProxmoxAdapter


@dataclass(frozen=True, slots=True)
class Proxmox:
    """Private Proxmox VE platform, reached through the console backend.

    Args:
        node: Target node for new guests. Backend picks one if None.
        storage: Storage pool for guest disks. Backend default if None.
        bridge: Network bridge for guest NICs. Backend default if None.
        force_delete: Stop running guests before deleting them.
    """

    node: str | None = None
    storage: str | None = None
    bridge: str | None = None
    force_delete: bool = True

    @property
    def type(self) -> str: return "proxmox"

    def create_adapter(self, http: HttpClient) -> ProxmoxAdapter:
        from skydeck.providers.proxmox.adapter import ProxmoxAdapter
        return ProxmoxAdapter(http, self)
