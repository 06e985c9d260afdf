"""GCP backend payloads."""

from __future__ import annotations

from typing import NotRequired, TypedDict


class GCPInstance(TypedDict):
    """Instance from ``/list``. ``zone`` and ``machine_type`` may be full resource URLs."""

    name: str
    id: NotRequired[str | int]
    zone: NotRequired[str]
    status: NotRequired[str]  # RUNNING, TERMINATED, STOPPING, ...
    machine_type: NotRequired[str]
    external_ips: NotRequired[list[str]]
    internal_ips: NotRequired[list[str]]
    cpu: NotRequired[float]
    ram: NotRequired[float]


class ListResponse(TypedDict):
    success: bool
    count: NotRequired[int]
    instances: NotRequired[list[GCPInstance]]
    error: NotRequired[str]


class CreateRequest(TypedDict, total=False):
    name: str
    machine_type: str
    zone: str
    count: int
    disk_size_gb: int
    cluster_type: str
    password: str


class ActionRequest(TypedDict):
    provider: str
    id: str
    zone: str | None
