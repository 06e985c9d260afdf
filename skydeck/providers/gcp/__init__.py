"""GCP Compute Engine provider.

Only the config class is imported at package level. For the adapter:

    from skydeck.providers.gcp.adapter import GCPAdapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .adapter import GCPAdapter

from .config import GCP

__all__ = ["GCP"]
