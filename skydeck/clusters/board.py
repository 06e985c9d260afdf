"""Cluster list state for the management view.

Every refresh lists all providers concurrently and rebuilds the cluster list
wholesale. Concurrent refreshes are not deduplicated: whichever resolves last
commits last.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Literal

from loguru import logger

from skydeck.api.model import ActionResult, Cluster, Instance
from skydeck.providers.base import ProviderAdapter

from .aggregator import group

log = logger.bind(component="clusters")

type InstanceAction = Literal["start", "stop", "delete"]


class ClusterBoard:
    def __init__(self, adapters: Mapping[str, ProviderAdapter]) -> None:
        self._adapters = dict(adapters)
        self._clusters: tuple[Cluster, ...] = ()
        self._selected: Cluster | None = None
        self._in_flight = 0

    @property
    def clusters(self) -> tuple[Cluster, ...]:
        return self._clusters

    @property
    def selected(self) -> Cluster | None:
        return self._selected

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def select(self, cluster: Cluster | None) -> None:
        self._selected = cluster

    def find(self, provider: str, base_name: str) -> Cluster | None:
        return next((c for c in self._clusters if c.key == (provider, base_name)), None)

    async def _collect(self) -> list[Cluster]:
        names = list(self._adapters)
        try:
            listings = await asyncio.gather(*(self._adapters[n].list() for n in names))
        except Exception as e:
            log.error("Failed to load clusters: {error}", error=str(e))
            return []
        return [
            cluster
            for name, instances in zip(names, listings, strict=True)
            for cluster in group(instances, self._adapters[name].name)
        ]

    def _commit(self, clusters: list[Cluster]) -> None:
        self._clusters = tuple(clusters)
        if self._selected is not None:
            self._selected = self.find(*self._selected.key)

    async def refresh(self) -> tuple[Cluster, ...]:
        self._in_flight += 1
        try:
            clusters = await self._collect()
            self._commit(clusters)
        finally:
            self._in_flight -= 1
        log.debug("Loaded {n} clusters", n=len(self._clusters))
        return self._clusters

    def _adapter_for(self, instance: Instance) -> ProviderAdapter:
        try:
            return self._adapters[instance.provider]
        except KeyError:
            raise ValueError(f"No adapter configured for provider '{instance.provider}'") from None

    async def instance_action(self, instance: Instance, action: InstanceAction) -> ActionResult:
        adapter = self._adapter_for(instance)
        match action:
            case "start":
                result = await adapter.start(instance.id, instance.location)
            case "stop":
                result = await adapter.stop(instance.id, instance.location)
            case "delete":
                result = await adapter.delete(instance.id, instance.location)
        await self.refresh()
        return result

    async def delete_cluster(self, cluster: Cluster) -> list[ActionResult]:
        """Delete every member concurrently, then refresh and clear the selection."""
        log.bind(cluster=cluster.base_name).info(
            "Deleting cluster ({n} nodes)", n=cluster.size,
        )
        results = await asyncio.gather(*(
            self._adapter_for(inst).delete(inst.id, inst.location) for inst in cluster.instances
        ))
        await self.refresh()
        self._selected = None
        return list(results)
