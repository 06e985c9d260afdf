from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from skydeck.api.model import ActionResult, CreateResult, Instance, InstanceStatus, SizingSpec
from skydeck.infra.http import HttpClient
from skydeck.providers.base import BaseAdapter

from .config import AWS
from .instance_types import instance_resources, pick_instance_type, region_of
from .types import ActionRequest, CreateRequest


def _status(raw: Any) -> InstanceStatus:
    match str(raw or "").lower():
        case "running":
            return "running"
        case "stopped" | "stopping" | "terminated" | "shutting-down":
            return "stopped"
        case _:
            return "unknown"


def _name(raw: Mapping[str, Any]) -> str:
    if name := raw.get("Name") or raw.get("name"):
        return name
    for tag in raw.get("Tags") or ():
        if isinstance(tag, Mapping) and tag.get("Key") == "Name" and tag.get("Value"):
            return tag["Value"]
    return raw.get("InstanceId") or "unknown"


def to_instance(raw: Mapping[str, Any], default_region: str = "") -> Instance:
    itype = raw.get("InstanceType") or ""
    res = instance_resources(itype) if itype else None
    state = raw.get("State")
    state_name = state.get("Name") if isinstance(state, Mapping) else state
    placement = raw.get("Placement")
    az = placement.get("AvailabilityZone", "") if isinstance(placement, Mapping) else ""
    ip = raw.get("PublicIpAddress")
    return Instance(
        id=raw.get("InstanceId") or _name(raw),
        name=_name(raw),
        provider="aws",
        status=_status(state_name),
        location=region_of(az) if az else default_region,
        cpu=float(raw.get("cpu") or (res.vcpus if res else 0)),
        ram_gb=float(raw.get("ram") or (res.memory_gb if res else 0)),
        public_ips=(ip,) if ip else (),
    )


class AWSAdapter(BaseAdapter):
    name = "aws"

    def __init__(self, http: HttpClient, config: AWS | None = None) -> None:
        super().__init__(http)
        self.config = config or AWS()

    def build_create_payload(self, spec: SizingSpec) -> CreateRequest:
        payload: CreateRequest = {
            "name": spec.name,
            "instance_type": spec.machine_type or pick_instance_type(spec.cores, spec.memory_mb),
            "region": spec.location or self.config.region,
            "count": spec.count,
            "volume_size": spec.disk_gb,
        }
        if spec.cluster_type:
            payload["cluster_type"] = spec.cluster_type
        if spec.password:
            payload["password"] = spec.password
        return payload

    def _target(self, instance_id: str, location: str | None) -> ActionRequest:
        return {"provider": self.name, "id": instance_id, "region": location or self.config.region}

    async def create(self, spec: SizingSpec) -> CreateResult:
        return await self._create("/aws/create", self.build_create_payload(spec))

    async def list(self) -> list[Instance]:
        raw = await self._list("/aws/list", "instances", params={"region": self.config.region})
        return [to_instance(r, self.config.region) for r in raw]

    async def start(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action("/action/start", self._target(instance_id, location))

    async def stop(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action("/action/stop", self._target(instance_id, location))

    async def delete(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action("/aws/delete", self._target(instance_id, location))
