"""Commands proposed by the assistant.

The assistant answers with either free text or a command record such as::

    {"command": "create_cluster",
     "explanation": "3 e2-medium nodes in europe-west1-b",
     "parameters": {"gcp": {"machine_type": "e2-medium", "zone": "europe-west1-b", "count": 3}}}

Only the kinds in ``CommandKind`` are actionable. Anything else carrying a
``command`` field is informational and can never be executed.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class CommandKind(StrEnum):
    CREATE_CLUSTER = "create_cluster"
    DELETE_CLUSTER = "delete_cluster"
    DELETE_INSTANCE = "delete_instance"
    START_CLUSTER = "start_cluster"
    STOP_CLUSTER = "stop_cluster"


ACTIONABLE_COMMANDS: frozenset[str] = frozenset(k.value for k in CommandKind)


def is_actionable(kind: object) -> bool:
    return isinstance(kind, str) and kind in ACTIONABLE_COMMANDS


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True, slots=True)
class ProviderParameters:
    """Sizing parameters for one provider inside a command."""

    machine_type: str | None = None
    location: str | None = None
    count: int = 1
    cluster_type: str | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def parse(cls, raw: Any) -> ProviderParameters:
        if not isinstance(raw, Mapping):
            return cls()
        data = dict(raw)
        machine_types = [data.pop(k, None) for k in ("machine_type", "instance_type")]
        locations = [data.pop(k, None) for k in ("zone", "region", "location")]
        machine_type = next((m for m in machine_types if m), None)
        location = next((loc for loc in locations if loc), None)
        # AWS proposals size the group with min_count/max_count
        min_count = data.pop("min_count", None)
        data.pop("max_count", None)
        count = _as_int(data.pop("count", min_count), 1)
        cluster_type = data.pop("cluster_type", None)
        return cls(
            machine_type=machine_type,
            location=location,
            count=count,
            cluster_type=cluster_type,
            extra=MappingProxyType(data),
        )


@dataclass(frozen=True, slots=True)
class Command:
    kind: str
    explanation: str | None
    parameters: Mapping[str, ProviderParameters]
    payload: Mapping[str, Any]
    cluster_type: str | None = None

    @property
    def is_actionable(self) -> bool:
        return is_actionable(self.kind)

    @property
    def providers(self) -> tuple[str, ...]:
        return tuple(self.parameters)

    def parameters_for(self, provider: str) -> ProviderParameters | None:
        return self.parameters.get(provider)

    def to_payload(self) -> dict[str, Any]:
        return dict(self.payload)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Command:
        raw_params = record.get("parameters")
        params: dict[str, ProviderParameters] = {}
        if isinstance(raw_params, Mapping):
            params = {
                str(provider): ProviderParameters.parse(sizing)
                for provider, sizing in raw_params.items()
                if isinstance(sizing, Mapping)
            }
        cluster_type = raw_params.get("cluster_type") if isinstance(raw_params, Mapping) else None
        explanation = record.get("explanation")
        return cls(
            kind=str(record.get("command", "")),
            explanation=explanation if isinstance(explanation, str) else None,
            parameters=MappingProxyType(params),
            payload=MappingProxyType(dict(record)),
            cluster_type=cluster_type if isinstance(cluster_type, str) and cluster_type else None,
        )


# ─── Assistant responses ─────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TextResponse:
    text: str


@dataclass(frozen=True, slots=True)
class StructuredResponse:
    record: Mapping[str, Any]
    source_text: str | None = None


type AssistantResponse = TextResponse | StructuredResponse


def parse_response(value: Any) -> AssistantResponse | None:
    """Resolve a raw ``response`` value into text or a structured record.

    Returns None when the value is neither a string nor a mapping.
    """
    match value:
        case str() as text:
            try:
                parsed = json.loads(text)
            except ValueError:
                return TextResponse(text)
            if isinstance(parsed, dict):
                return StructuredResponse(parsed, source_text=text)
            return TextResponse(text)
        case Mapping() as record:
            return StructuredResponse(record)
        case _:
            return None
