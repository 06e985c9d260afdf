"""Provider adapters for the hypervisor platform and the two public clouds.

Each adapter normalizes create/list/start/stop/delete into one backend's
request shape and maps its responses into ``skydeck.api.Instance``.
"""

from .aws import AWS
from .base import BaseAdapter, ProviderAdapter, ProviderConfig
from .catalog import InstanceTypeCatalog, InstanceTypeOption
from .gcp import GCP
from .proxmox import Proxmox
from .registry import create_adapter, create_adapters

__all__ = [
    "AWS",
    "GCP",
    "BaseAdapter",
    "InstanceTypeCatalog",
    "InstanceTypeOption",
    "Proxmox",
    "ProviderAdapter",
    "ProviderConfig",
    "create_adapter",
    "create_adapters",
]
