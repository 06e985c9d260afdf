from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from skydeck.api.model import ActionResult, Instance
from skydeck.clusters.board import ClusterBoard
from skydeck.core.exceptions import ProviderError

pytestmark = [pytest.mark.unit]


def inst(name: str, provider: str, location: str = "") -> Instance:
    return Instance(id=f"id-{name}", name=name, provider=provider, status="running", location=location, cpu=2, ram_gb=4)


def adapter(name: str, *instances: Instance) -> AsyncMock:
    mock = AsyncMock()
    mock.name = name
    mock.list.return_value = list(instances)
    mock.delete.return_value = ActionResult(success=True)
    mock.start.return_value = ActionResult(success=True)
    mock.stop.return_value = ActionResult(success=True)
    return mock


@pytest.fixture
def gcp() -> AsyncMock:
    return adapter("gcp", inst("web-1", "gcp", "us-central1-a"), inst("web-2", "gcp", "us-central1-a"))


@pytest.fixture
def aws() -> AsyncMock:
    return adapter("aws", inst("db", "aws", "us-east-1"))


@pytest.fixture
def board(gcp: AsyncMock, aws: AsyncMock) -> ClusterBoard:
    return ClusterBoard({"gcp": gcp, "aws": aws})


class TestRefresh:
    async def test_merges_providers(self, board: ClusterBoard):
        clusters = await board.refresh()
        assert [c.key for c in clusters] == [("gcp", "web"), ("aws", "db")]
        assert board.clusters == clusters
        assert board.loading is False

    async def test_selection_survives_refresh(self, board: ClusterBoard, gcp: AsyncMock):
        await board.refresh()
        board.select(board.clusters[0])
        gcp.list.return_value = [inst("web-1", "gcp"), inst("web-2", "gcp"), inst("web-3", "gcp")]

        await board.refresh()

        assert board.selected is not None
        assert board.selected.key == ("gcp", "web")
        assert board.selected.size == 3

    async def test_selection_cleared_when_cluster_disappears(self, board: ClusterBoard, gcp: AsyncMock):
        await board.refresh()
        board.select(board.clusters[0])
        gcp.list.return_value = []

        await board.refresh()

        assert board.selected is None

    async def test_any_failure_empties_everything(self, board: ClusterBoard, gcp: AsyncMock):
        await board.refresh()
        gcp.list.side_effect = ProviderError("gcp", "connection refused")

        clusters = await board.refresh()

        assert clusters == ()
        assert board.selected is None
        assert board.loading is False

    async def test_backend_reporting_failure_only_empties_that_provider(
        self, board: ClusterBoard, gcp: AsyncMock,
    ):
        gcp.list.return_value = []
        clusters = await board.refresh()
        assert [c.key for c in clusters] == [("aws", "db")]

    async def test_last_resolved_refresh_wins(self, board: ClusterBoard, gcp: AsyncMock):
        release_first = asyncio.Event()
        calls = 0

        async def slow_then_fast():
            nonlocal calls
            calls += 1
            if calls == 1:
                await release_first.wait()
                return [inst("old-1", "gcp")]
            return [inst("new-1", "gcp")]

        gcp.list.side_effect = slow_then_fast
        first = asyncio.create_task(board.refresh())
        await asyncio.sleep(0)
        await board.refresh()
        assert board.loading is True
        release_first.set()
        await first

        assert [c.base_name for c in board.clusters] == ["old", "db"]
        assert board.loading is False


class TestActions:
    async def test_delete_cluster_deletes_every_member(self, board: ClusterBoard, gcp: AsyncMock):
        await board.refresh()
        cluster = board.find("gcp", "web")
        board.select(cluster)

        results = await board.delete_cluster(cluster)

        assert [r.success for r in results] == [True, True]
        deleted = sorted(call.args for call in gcp.delete.await_args_list)
        assert deleted == [("id-web-1", "us-central1-a"), ("id-web-2", "us-central1-a")]
        assert gcp.list.await_count == 2
        assert board.selected is None

    async def test_delete_cluster_reports_partial_failure(self, board: ClusterBoard, gcp: AsyncMock):
        await board.refresh()
        gcp.delete.side_effect = [ActionResult(success=True), ActionResult(success=False, error="busy")]
        results = await board.delete_cluster(board.find("gcp", "web"))
        assert [r.success for r in results] == [True, False]

    async def test_instance_action_routes_to_provider(self, board: ClusterBoard, aws: AsyncMock):
        await board.refresh()
        db = board.find("aws", "db").instances[0]

        result = await board.instance_action(db, "stop")

        assert result.success
        aws.stop.assert_awaited_once_with("id-db", "us-east-1")
        assert aws.list.await_count == 2

    async def test_unknown_provider(self, board: ClusterBoard):
        with pytest.raises(ValueError):
            await board.instance_action(inst("vm-1", "proxmox"), "start")
