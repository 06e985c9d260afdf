"""SSH credentials lookup (``GET /credentials``)."""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from skydeck.infra.http import HttpClient, HttpError

log = logger.bind(component="credentials")


class Credentials(BaseModel):
    """Login details the backend recorded when an instance was created."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str = Field(description="SSH login user")
    password: str = Field(description="SSH login password")
    ip: str = Field(description="Public address of the instance")
    provider: str | None = Field(default=None, description="Provider the instance lives on")
    zone: str | None = Field(default=None, description="GCP zone, when applicable")
    region: str | None = Field(default=None, description="AWS region, when applicable")
    node: str | None = Field(default=None, description="Proxmox node, when applicable")

    @property
    def ssh_command(self) -> str:
        return f"ssh {self.username}@{self.ip}"


class CredentialsClient:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def lookup(self, instance_name: str) -> Credentials | None:
        """Credentials for one instance, or None when the backend has none or fails."""
        try:
            data: Any = await self._http.get(
                "/credentials", params={"instance_name": instance_name},
            )
        except HttpError as e:
            log.error("Credentials lookup failed for {name}: {error}", name=instance_name, error=e.detail)
            return None

        if not isinstance(data, dict) or not data.get("success"):
            log.bind(instance_id=instance_name).info("No credentials recorded")
            return None
        try:
            return Credentials.model_validate(data.get("credentials") or {})
        except ValidationError as e:
            log.warning("Malformed credentials for {name}: {error}", name=instance_name, error=str(e))
            return None
