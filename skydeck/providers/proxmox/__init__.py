"""Proxmox VE provider (VMs and LXC containers on the private platform)."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .adapter import ProxmoxAdapter

from .config import Proxmox

__all__ = ["Proxmox"]
