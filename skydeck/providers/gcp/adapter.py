"""GCP Compute Engine adapter.

Instances are addressed by name plus zone. Sizes come from the backend's
``cpu``/``ram`` fields when present, otherwise from the machine type.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from skydeck.api.model import ActionResult, CreateResult, Instance, InstanceStatus, SizingSpec
from skydeck.infra.http import HttpClient
from skydeck.providers.base import BaseAdapter

from .config import GCP
from .machine_types import parse_machine_type, pick_machine_type, short_name
from .types import ActionRequest, CreateRequest


def _status(raw: Any) -> InstanceStatus:
    match str(raw or "").upper():
        case "RUNNING":
            return "running"
        case "TERMINATED" | "STOPPED" | "SUSPENDED" | "STOPPING" | "SUSPENDING":
            return "stopped"
        case _:
            return "unknown"


def to_instance(raw: Mapping[str, Any], default_zone: str = "") -> Instance:
    name = raw.get("name") or "unknown"
    machine_type = raw.get("machine_type") or ""
    size = parse_machine_type(machine_type) if machine_type else None
    cpu = raw.get("cpu") or (size.vcpus if size else 0)
    ram = raw.get("ram") or (size.memory_gb if size else 0)
    zone = raw.get("zone")
    return Instance(
        id=name,
        name=name,
        provider="gcp",
        status=_status(raw.get("status")),
        location=short_name(zone) if zone else default_zone,
        cpu=float(cpu),
        ram_gb=float(ram),
        public_ips=tuple(ip for ip in raw.get("external_ips") or () if ip),
    )


class GCPAdapter(BaseAdapter):
    name = "gcp"

    def __init__(self, http: HttpClient, config: GCP | None = None) -> None:
        super().__init__(http)
        self.config = config or GCP()

    def build_create_payload(self, spec: SizingSpec) -> CreateRequest:
        payload: CreateRequest = {
            "name": spec.name,
            "machine_type": spec.machine_type or pick_machine_type(spec.cores, spec.memory_mb),
            "zone": spec.location or self.config.zone,
            "count": spec.count,
            "disk_size_gb": spec.disk_gb or self.config.disk_size_gb,
        }
        if spec.cluster_type:
            payload["cluster_type"] = spec.cluster_type
        if spec.password:
            payload["password"] = spec.password
        return payload

    def _target(self, instance_id: str, location: str | None) -> ActionRequest:
        return {"provider": self.name, "id": instance_id, "zone": location or self.config.zone}

    async def create(self, spec: SizingSpec) -> CreateResult:
        return await self._create("/create", self.build_create_payload(spec))

    async def list(self) -> list[Instance]:
        raw = await self._list("/list", "instances", params={"zone": self.config.zone})
        return [to_instance(r, self.config.zone) for r in raw]

    async def start(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action("/action/start", self._target(instance_id, location))

    async def stop(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action("/action/stop", self._target(instance_id, location))

    async def delete(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action("/delete", self._target(instance_id, location))
