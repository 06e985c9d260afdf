from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

type ProviderName = Literal["proxmox", "gcp", "aws"]

type InstanceStatus = Literal["running", "stopped", "unknown"]

type ClusterStatus = Literal["active", "mixed", "stopped"]

type VmType = Literal["qemu", "lxc"]


@dataclass(frozen=True, slots=True)
class Instance:
    """Provider-agnostic view of a VM, container or cloud instance."""

    id: str
    name: str
    provider: ProviderName
    status: InstanceStatus = "unknown"
    location: str = ""
    cpu: float = 0
    ram_gb: float = 0
    public_ips: tuple[str, ...] = ()

    @property
    def ip(self) -> str | None:
        return self.public_ips[0] if self.public_ips else None


@dataclass(frozen=True, slots=True)
class Cluster:
    """Display-time grouping of instances sharing a base name.

    ``status`` is always "active"; it is not computed from the members.
    ``derived_status`` reports what the members actually say.
    """

    base_name: str
    provider: ProviderName
    instances: tuple[Instance, ...]
    cpu_total: float
    ram_total: float
    status: ClusterStatus = "active"

    @property
    def key(self) -> tuple[ProviderName, str]:
        return self.provider, self.base_name

    @property
    def size(self) -> int:
        return len(self.instances)

    @property
    def derived_status(self) -> ClusterStatus:
        states = {i.status for i in self.instances}
        if states == {"running"}:
            return "active"
        if "running" in states:
            return "mixed"
        return "stopped"


@dataclass(frozen=True, slots=True)
class SizingSpec:
    """Provider-agnostic create request.

    Args:
        name: Instance name (or name prefix when count > 1).
        cores: vCPUs per instance.
        memory_mb: Memory per instance in MB.
        disk_gb: Boot disk size in GB.
        count: Number of instances.
        cluster_type: Optional software stack tag (docker-swarm, kubernetes, ...).
        password: Login password. Generated by the backend when omitted.
        vm_type: Hypervisor virtualization type (qemu VM or lxc container).
        machine_type: Explicit cloud machine type; derived from cores/memory if None.
        location: Zone (GCP) or region (AWS); provider default if None.
        start: Start the instances after creation (hypervisor only).
    """

    name: str
    cores: int = 2
    memory_mb: int = 2048
    disk_gb: int = 10
    count: int = 1
    cluster_type: str | None = None
    password: str | None = None
    vm_type: VmType = "qemu"
    machine_type: str | None = None
    location: str | None = None
    start: bool = True


@dataclass(frozen=True, slots=True)
class CreateResult:
    success: bool
    error: str | None = None
    created: tuple[str, ...] = ()
    password: str | None = None
    raw: Any = None


@dataclass(frozen=True, slots=True)
class ActionResult:
    success: bool
    error: str | None = None
    raw: Any = None


@dataclass(frozen=True, slots=True)
class HybridCreateResult:
    """Both halves of a hybrid create, never merged."""

    gcp: CreateResult
    aws: CreateResult

    @property
    def any_success(self) -> bool:
        return self.gcp.success or self.aws.success


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    success: bool
    explanation: str | None = None
    error: str | None = None
    raw: Any = field(default=None, compare=False)

    @classmethod
    def from_response(cls, data: Any) -> ExecutionResult:
        if not isinstance(data, dict):
            return cls(success=False, error="Malformed execution response", raw=data)
        return cls(
            success=bool(data.get("success")),
            explanation=data.get("explanation") or None,
            error=data.get("error") or None,
            raw=data,
        )
