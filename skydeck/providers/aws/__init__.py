"""AWS EC2 provider.

Only the config class is imported at package level. For the adapter:

    from skydeck.providers.aws.adapter import AWSAdapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .adapter import AWSAdapter

from .config import AWS

__all__ = ["AWS"]
