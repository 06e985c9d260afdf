"""Proxmox VE adapter.

Guests are addressed by name on the backend, so ``Instance.id`` is the
guest name rather than the numeric vmid.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from skydeck.api.model import ActionResult, CreateResult, Instance, InstanceStatus, SizingSpec
from skydeck.infra.http import HttpClient
from skydeck.providers.base import BaseAdapter

from .config import Proxmox
from .types import CreateRequest, NodeGroup, SwarmRequest, WorkerGroup


def _status(raw: Any) -> InstanceStatus:
    match str(raw or "").lower():
        case "running":
            return "running"
        case "stopped" | "paused" | "suspended":
            return "stopped"
        case _:
            return "unknown"


def to_instance(vm: Mapping[str, Any]) -> Instance:
    name = vm.get("name") or str(vm.get("vmid", ""))
    ip = vm.get("ip")
    return Instance(
        id=name,
        name=name,
        provider="proxmox",
        status=_status(vm.get("status")),
        location=vm.get("node") or "",
        cpu=float(vm.get("cpu") or 0),
        ram_gb=round(float(vm.get("memory") or 0) / 1024, 2),
        public_ips=(ip,) if ip else (),
    )


class ProxmoxAdapter(BaseAdapter):
    name = "proxmox"

    def __init__(self, http: HttpClient, config: Proxmox | None = None) -> None:
        super().__init__(http)
        self.config = config or Proxmox()

    def build_create_payload(self, spec: SizingSpec) -> CreateRequest:
        payload: CreateRequest = {
            "name": spec.name,
            "vm_type": spec.vm_type,
            "cores": spec.cores,
            "memory": spec.memory_mb,
            "disk_size": spec.disk_gb,
            "count": spec.count,
            "start": spec.start,
        }
        if spec.password:
            payload["password"] = spec.password
        if spec.cluster_type:
            payload["cluster_type"] = spec.cluster_type
        if self.config.node:
            payload["node"] = self.config.node
        if self.config.storage:
            payload["storage"] = self.config.storage
        if self.config.bridge:
            payload["bridge"] = self.config.bridge
        return payload

    async def create(self, spec: SizingSpec) -> CreateResult:
        return await self._create("/proxmox/create", self.build_create_payload(spec))

    async def create_swarm(self, name: str, spec: SizingSpec, nodes: int) -> CreateResult:
        """Docker Swarm cluster: ``{name}-manager`` plus ``nodes - 1`` ``{name}-worker`` guests."""
        if nodes < 1:
            raise ValueError("A swarm needs at least one node")
        group: NodeGroup = {
            "name": f"{name}-manager",
            "vm_type": spec.vm_type,
            "cores": spec.cores,
            "memory": spec.memory_mb,
            "disk_size": spec.disk_gb,
        }
        workers: WorkerGroup = {**group, "name": f"{name}-worker", "count": nodes - 1}
        payload: SwarmRequest = {"manager": group, "workers": [workers]}
        return await self._create("/cluster/create", payload)

    async def list(self) -> list[Instance]:
        vms = await self._list("/proxmox/list", "vms")
        return [to_instance(vm) for vm in vms if not vm.get("template")]

    async def start(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action("/proxmox/start", {"name": instance_id})

    async def stop(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action("/proxmox/stop", {"name": instance_id})

    async def restart(self, instance_id: str) -> ActionResult:
        return await self._action("/proxmox/restart", {"name": instance_id})

    async def delete(self, instance_id: str, location: str | None = None) -> ActionResult:
        return await self._action(
            "/proxmox/delete", {"name": instance_id, "force": self.config.force_delete},
        )
