"""Instance type catalog (``/instance-types/{gcp,aws}``)."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from loguru import logger

from skydeck.infra.http import HttpClient

log = logger.bind(component="catalog")

type CloudName = Literal["gcp", "aws"]

_LOCATION_PARAM: dict[CloudName, str] = {"gcp": "zone", "aws": "region"}


@dataclass(frozen=True, slots=True)
class InstanceTypeOption:
    name: str
    vcpus: float
    memory_gb: float
    price_per_hour: float | None = None

    @classmethod
    def parse(cls, raw: Any) -> InstanceTypeOption | None:
        if isinstance(raw, str):
            return cls(name=raw, vcpus=0, memory_gb=0)
        if not isinstance(raw, Mapping):
            return None
        name = raw.get("name") or raw.get("machine_type") or raw.get("instance_type")
        if not name:
            return None
        price = raw.get("price") or raw.get("price_per_hour")
        return cls(
            name=str(name),
            vcpus=float(raw.get("cpu") or raw.get("vcpus") or 0),
            memory_gb=float(raw.get("ram") or raw.get("memory_gb") or 0),
            price_per_hour=float(price) if price is not None else None,
        )


class InstanceTypeCatalog:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def lookup(
        self,
        provider: CloudName,
        *,
        location: str | None = None,
        cpu: int | None = None,
        ram: float | None = None,
    ) -> list[InstanceTypeOption]:
        """Instance types matching the filters. Raises HttpError on transport failure."""
        params = {_LOCATION_PARAM[provider]: location, "cpu": cpu, "ram": ram}
        data = await self._http.get(f"/instance-types/{provider}", params=params)
        raw = data.get("instance_types") if isinstance(data, Mapping) else None
        options = (InstanceTypeOption.parse(item) for item in raw or ())
        return [o for o in options if o is not None]

    async def lookup_all(
        self,
        *,
        zone: str | None = None,
        region: str | None = None,
        cpu: int | None = None,
        ram: float | None = None,
    ) -> dict[CloudName, list[InstanceTypeOption]]:
        """Both clouds concurrently; if either lookup fails both come back empty."""
        try:
            gcp, aws = await asyncio.gather(
                self.lookup("gcp", location=zone, cpu=cpu, ram=ram),
                self.lookup("aws", location=region, cpu=cpu, ram=ram),
            )
        except Exception as e:
            log.error("Instance type lookup failed: {error}", error=str(e))
            return {"gcp": [], "aws": []}
        return {"gcp": gcp, "aws": aws}
