"""Hybrid mode: one logical request provisioned on GCP and AWS at once.

Results are never merged. Each half succeeds or fails on its own and the
caller inspects both.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Any

from loguru import logger

from skydeck.api.model import CreateResult, HybridCreateResult, SizingSpec
from skydeck.infra.http import HttpClient, HttpError

from .aws.adapter import AWSAdapter
from .gcp.adapter import GCPAdapter

log = logger.bind(component="hybrid")


def _as_result(outcome: CreateResult | BaseException) -> CreateResult:
    match outcome:
        case CreateResult():
            return outcome
        case _:
            return CreateResult(success=False, error=str(outcome) or type(outcome).__name__)


class HybridProvisioner:
    def __init__(self, gcp: GCPAdapter, aws: AWSAdapter, http: HttpClient) -> None:
        self._gcp = gcp
        self._aws = aws
        self._http = http

    @staticmethod
    def _split(gcp_spec: SizingSpec, aws_spec: SizingSpec | None) -> tuple[SizingSpec, SizingSpec]:
        # GCP zones and machine types are meaningless to AWS
        return gcp_spec, aws_spec or replace(gcp_spec, location=None, machine_type=None)

    async def create_all(
        self, gcp_spec: SizingSpec, aws_spec: SizingSpec | None = None,
    ) -> HybridCreateResult:
        """Create on both clouds concurrently and return both results verbatim."""
        gcp_spec, aws_spec = self._split(gcp_spec, aws_spec)
        gcp_out, aws_out = await asyncio.gather(
            self._gcp.create(gcp_spec),
            self._aws.create(aws_spec),
            return_exceptions=True,
        )
        result = HybridCreateResult(gcp=_as_result(gcp_out), aws=_as_result(aws_out))
        log.info(
            "Hybrid create finished gcp={gcp} aws={aws}",
            gcp=result.gcp.success, aws=result.aws.success,
        )
        return result

    async def create_all_remote(
        self,
        gcp_spec: SizingSpec | None,
        aws_spec: SizingSpec | None,
        *,
        cluster_type: str | None = None,
    ) -> HybridCreateResult:
        """Let the backend fan out via ``/all/create``; sub-results are returned per provider."""
        payload: dict[str, Any] = {}
        if gcp_spec is not None:
            payload["gcp"] = self._gcp.build_create_payload(gcp_spec)
        if aws_spec is not None:
            payload["aws"] = self._aws.build_create_payload(aws_spec)
        if cluster_type:
            payload["cluster_type"] = cluster_type

        try:
            data = await self._http.post("/all/create", json=payload)
        except HttpError as e:
            log.error("Hybrid create failed: {error}", error=e.detail)
            failed = CreateResult(success=False, error=e.detail)
            return HybridCreateResult(gcp=failed, aws=failed)

        if not isinstance(data, dict):
            log.error("Malformed /all/create response: {kind}", kind=type(data).__name__)
            data = {}

        def half(key: str, adapter: GCPAdapter | AWSAdapter, spec: SizingSpec | None) -> CreateResult:
            if spec is None:
                return CreateResult(success=False, error="Not requested")
            if key not in data:
                return CreateResult(success=False, error="Malformed response")
            return adapter.parse_create(data[key])

        return HybridCreateResult(
            gcp=half("gcp", self._gcp, gcp_spec),
            aws=half("aws", self._aws, aws_spec),
        )
