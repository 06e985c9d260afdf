"""Proxmox backend payloads.

TypedDicts for requests and responses - no conversion needed.
"""

from __future__ import annotations

from typing import Literal, NotRequired, TypedDict


class ProxmoxVM(TypedDict):
    """VM or LXC container from ``/proxmox/list``."""

    vmid: int
    name: str
    node: NotRequired[str]
    type: NotRequired[Literal["qemu", "lxc"]]
    status: NotRequired[str]
    cpu: NotRequired[float]
    memory: NotRequired[float]  # MB
    disk: NotRequired[float]  # GB
    uptime: NotRequired[int]
    ip: NotRequired[str | None]
    template: NotRequired[bool]


class ListResponse(TypedDict):
    success: bool
    count: NotRequired[int]
    vms: NotRequired[list[ProxmoxVM]]
    message: NotRequired[str]


class CreateRequest(TypedDict, total=False):
    name: str
    vm_type: Literal["qemu", "lxc"]
    cores: int
    memory: int
    disk_size: int
    node: str
    storage: str
    bridge: str
    cluster_type: str
    count: int
    password: str
    start: bool


class CreateResponse(TypedDict):
    success: bool
    vmid: NotRequired[int]
    name: NotRequired[str]
    ip: NotRequired[str]
    password: NotRequired[str]
    created: NotRequired[list[dict | str]]
    error: NotRequired[str]


class NodeGroup(TypedDict):
    name: str
    vm_type: Literal["qemu", "lxc"]
    cores: int
    memory: int
    disk_size: int


class WorkerGroup(NodeGroup):
    count: int


class SwarmRequest(TypedDict):
    """``/cluster/create``: one manager plus a worker group."""

    manager: NodeGroup
    workers: list[WorkerGroup]
