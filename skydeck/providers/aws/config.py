"""AWS provider configuration."""

from __future__ import annotations

import typing
from dataclasses import dataclass

if typing.TYPE_CHECKING:
    from skydeck.infra.http import HttpClient
    from skydeck.providers.aws.adapter import AWSAdapter


@dataclass(frozen=True, slots=True)
class AWS:
    """AWS EC2, reached through the console backend.

    Example:
        >>> from skydeck.providers.aws import AWS
        >>> config = AWS(region="eu-west-1")

    Args:
        region: Default region for listing, creating and instance actions.
    """

    region: str = "us-east-1"

    @property
    def type(self) -> str: return "aws"

    def create_adapter(self, http: HttpClient) -> AWSAdapter:
        from skydeck.providers.aws.adapter import AWSAdapter
        return AWSAdapter(http, self)
