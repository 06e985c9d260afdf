"""GCP machine type sizing.

Resolves vCPU and memory for Compute Engine machine type names without
calling GCP, and picks the smallest predefined type for a requested size.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_SHARED_CORE: dict[str, tuple[float, float]] = {
    "e2-micro": (2, 1),
    "e2-small": (2, 2),
    "e2-medium": (2, 4),
    "f1-micro": (1, 0.6),
    "g1-small": (1, 1.7),
}

# GB of memory per vCPU by (family, class); n1 has its own ratios
_MEMORY_PER_VCPU: dict[str, dict[str, float]] = {
    "n1": {"standard": 3.75, "highmem": 6.5, "highcpu": 0.9},
    "default": {"standard": 4, "highmem": 8, "highcpu": 1},
}

_PREDEFINED_RE = re.compile(r"^(?P<family>[a-z]\d[a-z]?)-(?P<cls>standard|highmem|highcpu)-(?P<n>\d+)$")
_CUSTOM_RE = re.compile(r"^(?:(?P<family>[a-z]\d[a-z]?)-)?custom-(?P<n>\d+)-(?P<mb>\d+)(?:-ext)?$")

_PICK_ORDER: tuple[str, ...] = (
    "e2-micro", "e2-small", "e2-medium",
    "e2-standard-2", "e2-highmem-2",
    "e2-standard-4", "e2-highmem-4",
    "e2-standard-8", "e2-highmem-8",
    "e2-standard-16", "e2-highmem-16",
    "e2-standard-32",
)


@dataclass(frozen=True, slots=True)
class MachineSize:
    machine_type: str
    vcpus: float
    memory_gb: float


def short_name(value: str) -> str:
    """Last path segment of a GCP resource URL (zones/x/machineTypes/e2-medium -> e2-medium)."""
    return value.rstrip("/").rsplit("/", 1)[-1]


def parse_machine_type(machine_type: str) -> MachineSize | None:
    """Resolve vCPUs and memory for a machine type name or URL.

    Returns None for names that are not recognized.
    """
    name = short_name(machine_type).lower()

    if name in _SHARED_CORE:
        vcpus, mem = _SHARED_CORE[name]
        return MachineSize(name, vcpus, mem)

    if m := _CUSTOM_RE.match(name):
        return MachineSize(name, int(m["n"]), round(int(m["mb"]) / 1024, 2))

    if m := _PREDEFINED_RE.match(name):
        ratios = _MEMORY_PER_VCPU.get(m["family"], _MEMORY_PER_VCPU["default"])
        n = int(m["n"])
        return MachineSize(name, n, n * ratios[m["cls"]])

    return None


def pick_machine_type(cores: int, memory_mb: int) -> str:
    """Smallest predefined E2 type with at least ``cores`` vCPUs and ``memory_mb`` memory.

    Falls back to an E2 custom type when nothing predefined is large enough.
    """
    need_gb = memory_mb / 1024
    for name in _PICK_ORDER:
        size = parse_machine_type(name)
        if size and size.vcpus >= cores and size.memory_gb >= need_gb:
            return name
    mb = max(memory_mb, 1024)
    return f"e2-custom-{cores}-{mb - mb % 256}"
