"""AWS backend payloads (EC2 field names are passed through by the backend)."""

from __future__ import annotations

from typing import NotRequired, TypedDict


class InstanceState(TypedDict):
    Name: str  # pending, running, stopping, stopped, shutting-down, terminated
    Code: NotRequired[int]


class Placement(TypedDict, total=False):
    AvailabilityZone: str


class Tag(TypedDict):
    Key: str
    Value: str


class EC2Instance(TypedDict):
    InstanceId: str
    Name: NotRequired[str]
    Tags: NotRequired[list[Tag]]
    State: NotRequired[InstanceState]
    InstanceType: NotRequired[str]
    PublicIpAddress: NotRequired[str | None]
    PrivateIpAddress: NotRequired[str | None]
    Placement: NotRequired[Placement]
    cpu: NotRequired[float]
    ram: NotRequired[float]


class ListResponse(TypedDict):
    success: bool
    count: NotRequired[int]
    instances: NotRequired[list[EC2Instance]]
    error: NotRequired[str]


class CreateRequest(TypedDict, total=False):
    name: str
    instance_type: str
    region: str
    count: int
    volume_size: int
    cluster_type: str
    password: str


class ActionRequest(TypedDict):
    provider: str
    id: str
    region: str | None
