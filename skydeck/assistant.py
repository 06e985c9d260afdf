"""Client for the assistant backend (``/ai/ask`` and ``/ai/execute``)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from loguru import logger

from skydeck.api.model import ExecutionResult
from skydeck.core.exceptions import AssistantError
from skydeck.infra.http import HttpClient, HttpError

log = logger.bind(component="assistant")


class AssistantClient:
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def ask(self, prompt: str) -> Any:
        """Send a prompt and return the raw ``response`` value (text or record)."""
        data = await self._http.post("/ai/ask", json={"prompt": prompt})
        if not isinstance(data, dict):
            raise AssistantError(f"Unexpected envelope from /ai/ask: {type(data).__name__}")
        log.debug("Assistant answered with {kind}", kind=type(data.get("response")).__name__)
        return data.get("response")

    async def execute(self, payload: Mapping[str, Any]) -> ExecutionResult:
        """Dispatch a confirmed command object to the execution backend."""
        log.info("Executing command {kind}", kind=payload.get("command"))
        try:
            data = await self._http.post("/ai/execute", json=dict(payload))
        except HttpError as e:
            log.error("Execution rejected: {error}", error=e.detail)
            return ExecutionResult(success=False, error=e.detail, raw=e.body)
        return ExecutionResult.from_response(data)
