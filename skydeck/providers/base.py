"""Provider adapter contract and shared response handling.

Adapters normalize one provider's wire format into the common ``Instance``
shape and report failures as results. Only ``list`` raises, and only when the
backend cannot be reached; a backend that answers ``success: false`` yields an
empty list.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from skydeck.api.model import ActionResult, CreateResult, Instance, ProviderName, SizingSpec
from skydeck.core.exceptions import ProviderError
from skydeck.infra.http import HttpClient, HttpError


@runtime_checkable
class ProviderAdapter(Protocol):
    name: ProviderName

    async def create(self, spec: SizingSpec) -> CreateResult: ...

    async def list(self) -> list[Instance]: ...

    async def start(self, instance_id: str, location: str | None = None) -> ActionResult: ...

    async def stop(self, instance_id: str, location: str | None = None) -> ActionResult: ...

    async def delete(self, instance_id: str, location: str | None = None) -> ActionResult: ...


@runtime_checkable
class ProviderConfig[A](Protocol):
    @property
    def type(self) -> str: ...

    def create_adapter(self, http: HttpClient) -> A: ...


def _created_names(data: Mapping[str, Any]) -> tuple[str, ...]:
    names: list[str] = []
    for item in data.get("created") or ():
        match item:
            case str() as name:
                names.append(name)
            case {"name": str() as name}:
                names.append(name)
            case {"InstanceId": str() as iid}:
                names.append(iid)
    if not names and isinstance(data.get("name"), str):
        names.append(data["name"])
    return tuple(names)


class BaseAdapter:
    name: ProviderName

    def __init__(self, http: HttpClient) -> None:
        self._http = http
        self._log = logger.bind(provider=self.name)

    def parse_create(self, data: Any) -> CreateResult:
        if not isinstance(data, Mapping):
            return CreateResult(success=False, error="Malformed create response", raw=data)
        success = bool(data.get("success"))
        return CreateResult(
            success=success,
            error=None if success else str(data.get("error") or "Create failed"),
            created=_created_names(data),
            password=data.get("password"),
            raw=data,
        )

    def _parse_action(self, data: Any) -> ActionResult:
        if not isinstance(data, Mapping):
            return ActionResult(success=False, error="Malformed response", raw=data)
        success = bool(data.get("success"))
        return ActionResult(
            success=success,
            error=None if success else str(data.get("error") or "Operation failed"),
            raw=data,
        )

    async def _create(self, path: str, payload: Mapping[str, Any]) -> CreateResult:
        self._log.info("Creating {name}", name=payload.get("name"))
        try:
            data = await self._http.post(path, json=dict(payload))
        except HttpError as e:
            self._log.error("Create failed: {error}", error=e.detail)
            return CreateResult(success=False, error=e.detail)
        result = self.parse_create(data)
        if not result.success:
            self._log.warning("Create rejected: {error}", error=result.error)
        return result

    async def _action(self, path: str, payload: Mapping[str, Any]) -> ActionResult:
        self._log.debug("POST {path} {payload}", path=path, payload=dict(payload))
        try:
            data = await self._http.post(path, json=dict(payload))
        except HttpError as e:
            self._log.error("{path} failed: {error}", path=path, error=e.detail)
            return ActionResult(success=False, error=e.detail)
        return self._parse_action(data)

    async def _list(self, path: str, key: str, params: dict[str, Any] | None = None) -> list[Any]:
        try:
            data = await self._http.get(path, params=params)
        except HttpError as e:
            raise ProviderError(self.name, e.detail) from e
        if not isinstance(data, Mapping) or not data.get("success"):
            error = data.get("error") if isinstance(data, Mapping) else "malformed response"
            self._log.warning("Listing reported failure: {error}", error=error)
            return []
        return [raw for raw in data.get(key) or () if isinstance(raw, Mapping)]
