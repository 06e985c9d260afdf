from __future__ import annotations

import re
from dataclasses import dataclass

_BURSTABLE: dict[str, tuple[int, float]] = {
    "nano": (2, 0.5),
    "micro": (2, 1),
    "small": (2, 2),
    "medium": (2, 4),
    "large": (2, 8),
    "xlarge": (4, 16),
    "2xlarge": (8, 32),
}

_MEMORY_PER_VCPU: dict[str, float] = {"m": 4, "c": 2, "r": 8, "x": 16}

_TYPE_RE = re.compile(r"^(?P<family>[a-z]+)(?P<gen>\d+)(?P<attrs>[a-z]*)\.(?P<size>[a-z0-9]+)$")
_SIZE_RE = re.compile(r"^(?P<mult>\d*)xlarge$")

_PICK_ORDER: tuple[str, ...] = (
    "t3.nano", "t3.micro", "t3.small", "t3.medium", "t3.large",
    "t3.xlarge", "t3.2xlarge", "m5.4xlarge", "m5.8xlarge",
)


@dataclass(frozen=True, slots=True)
class InstanceResources:
    instance_type: str
    vcpus: int
    memory_gb: float


def _size_vcpus(size: str) -> int | None:
    if size == "large":
        return 2
    if m := _SIZE_RE.match(size):
        return 4 * int(m["mult"] or 1)
    return None


def instance_resources(instance_type: str) -> InstanceResources | None:
    """vCPUs and memory for common EC2 families (t, m, c, r, x).

    Returns None when the type is not recognized.
    """
    m = _TYPE_RE.match(instance_type.lower())
    if m is None:
        return None

    family, size = m["family"], m["size"]
    if family == "t":
        if size not in _BURSTABLE:
            return None
        vcpus, mem = _BURSTABLE[size]
        return InstanceResources(instance_type, vcpus, mem)

    ratio = _MEMORY_PER_VCPU.get(family[0])
    vcpus = _size_vcpus(size)
    if ratio is None or vcpus is None:
        return None
    return InstanceResources(instance_type, vcpus, vcpus * ratio)


def pick_instance_type(cores: int, memory_mb: int) -> str:
    need_gb = memory_mb / 1024
    for name in _PICK_ORDER:
        res = instance_resources(name)
        if res and res.vcpus >= cores and res.memory_gb >= need_gb:
            return name
    return _PICK_ORDER[-1]


def region_of(availability_zone: str) -> str:
    """us-east-1a -> us-east-1; values that are already regions pass through."""
    if availability_zone and availability_zone[-1].isalpha():
        return availability_zone[:-1]
    return availability_zone
