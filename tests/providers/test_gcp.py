from __future__ import annotations

import pytest

from skydeck.api.model import SizingSpec
from skydeck.core.exceptions import ProviderError
from skydeck.infra.http import HttpClient
from skydeck.providers.gcp import GCP
from skydeck.providers.gcp.adapter import GCPAdapter, to_instance
from skydeck.providers.gcp.machine_types import parse_machine_type, pick_machine_type, short_name

pytestmark = [pytest.mark.unit]


@pytest.fixture
def adapter(http: HttpClient) -> GCPAdapter:
    return GCP(zone="europe-west1-b").create_adapter(http)


class TestMachineTypes:
    @pytest.mark.parametrize("machine_type,vcpus,memory_gb", [
        ("e2-medium", 2, 4),
        ("e2-standard-4", 4, 16),
        ("n2-highmem-8", 8, 64),
        ("n1-standard-2", 2, 7.5),
        ("n2-custom-6-24576", 6, 24),
        ("zones/us-central1-a/machineTypes/e2-highcpu-16", 16, 16),
    ])
    def test_parse(self, machine_type: str, vcpus: float, memory_gb: float):
        size = parse_machine_type(machine_type)
        assert size is not None
        assert (size.vcpus, size.memory_gb) == (vcpus, memory_gb)

    def test_unknown(self):
        assert parse_machine_type("a2-ultragpu-1g-foo") is None

    @pytest.mark.parametrize("cores,memory_mb,expected", [
        (1, 512, "e2-micro"),
        (2, 2048, "e2-small"),
        (2, 4096, "e2-medium"),
        (2, 8192, "e2-standard-2"),
        (4, 8192, "e2-standard-4"),
        (64, 65536, "e2-custom-64-65536"),
    ])
    def test_pick(self, cores: int, memory_mb: int, expected: str):
        assert pick_machine_type(cores, memory_mb) == expected

    def test_short_name(self):
        assert short_name("https://x/zones/europe-west1-b") == "europe-west1-b"


class TestToInstance:
    def test_sizes_from_machine_type(self):
        inst = to_instance({
            "name": "web-1", "status": "RUNNING", "zone": "projects/p/zones/europe-west1-b",
            "machine_type": "e2-standard-2", "external_ips": ["34.1.2.3", None],
        })
        assert inst.id == "web-1"
        assert inst.status == "running"
        assert inst.location == "europe-west1-b"
        assert (inst.cpu, inst.ram_gb) == (2, 8)
        assert inst.public_ips == ("34.1.2.3",)

    def test_backend_sizes_win(self):
        inst = to_instance({"name": "x", "machine_type": "e2-micro", "cpu": 4, "ram": 3})
        assert (inst.cpu, inst.ram_gb) == (4, 3)

    def test_default_zone(self):
        assert to_instance({"name": "x", "status": "TERMINATED"}, "us-east1-b").location == "us-east1-b"

    def test_terminated_is_stopped(self):
        assert to_instance({"name": "x", "status": "TERMINATED"}).status == "stopped"


class TestCreate:
    def test_payload_picks_machine_type(self, adapter: GCPAdapter):
        payload = adapter.build_create_payload(SizingSpec(name="web", cores=2, memory_mb=4096, count=3))
        assert payload == {
            "name": "web", "machine_type": "e2-medium", "zone": "europe-west1-b",
            "count": 3, "disk_size_gb": 10,
        }

    def test_explicit_machine_type_and_zone(self, adapter: GCPAdapter):
        payload = adapter.build_create_payload(
            SizingSpec(name="web", machine_type="n2-standard-8", location="us-west1-a", cluster_type="kubernetes"),
        )
        assert payload["machine_type"] == "n2-standard-8"
        assert payload["zone"] == "us-west1-a"
        assert payload["cluster_type"] == "kubernetes"

    async def test_create(self, adapter: GCPAdapter, backend):
        backend.reply("POST", "/create", {"success": True, "created": ["web-1", "web-2"]})
        result = await adapter.create(SizingSpec(name="web", count=2))
        assert result.success
        assert result.created == ("web-1", "web-2")

    async def test_malformed_response(self, adapter: GCPAdapter, backend):
        backend.reply("POST", "/create", ["unexpected"])
        result = await adapter.create(SizingSpec(name="web"))
        assert not result.success


class TestList:
    async def test_list(self, adapter: GCPAdapter, backend):
        backend.reply("GET", "/list", {"success": True, "instances": [
            {"name": "web-1", "status": "RUNNING", "zone": "europe-west1-b", "machine_type": "e2-small"},
            "garbage",
        ]})
        instances = await adapter.list()
        assert [i.name for i in instances] == ["web-1"]
        assert backend.calls("/list")[0].query == {"zone": "europe-west1-b"}

    async def test_backend_failure_is_empty(self, adapter: GCPAdapter, backend):
        backend.reply("GET", "/list", {"success": False, "error": "credentials missing"})
        assert await adapter.list() == []

    async def test_transport_failure_raises(self, adapter: GCPAdapter, backend):
        backend.reply("GET", "/list", {"error": "down"}, status=502)
        with pytest.raises(ProviderError, match="gcp: down"):
            await adapter.list()


class TestActions:
    @pytest.mark.parametrize("method,path", [
        ("start", "/action/start"),
        ("stop", "/action/stop"),
        ("delete", "/delete"),
    ])
    async def test_targets(self, adapter: GCPAdapter, backend, method: str, path: str):
        backend.reply("POST", path, {"success": True})
        result = await getattr(adapter, method)("web-1", "us-central1-a")
        assert result.success
        assert backend.calls(path)[0].body == {"provider": "gcp", "id": "web-1", "zone": "us-central1-a"}

    async def test_default_zone(self, adapter: GCPAdapter, backend):
        backend.reply("POST", "/delete", {"success": True})
        await adapter.delete("web-1")
        assert backend.calls("/delete")[0].body["zone"] == "europe-west1-b"

    async def test_transport_failure_is_a_result(self, adapter: GCPAdapter, backend):
        backend.reply("POST", "/action/stop", {"error": "instance busy"}, status=409)
        result = await adapter.stop("web-1")
        assert not result.success
        assert result.error == "instance busy"


class TestTimeouts:
    @pytest.fixture
    async def slow_adapter(self, base_url: str):
        client = HttpClient(base_url, timeout=0.05)
        yield GCP().create_adapter(client)
        await client.close()

    async def test_create_times_out_as_result(self, slow_adapter: GCPAdapter, backend):
        backend.reply("POST", "/create", {"success": True}, delay=0.5)
        result = await slow_adapter.create(SizingSpec(name="web"))
        assert not result.success
        assert result.error == "request timed out"

    @pytest.mark.parametrize("method", ["start", "stop", "delete"])
    async def test_action_times_out_as_result(self, slow_adapter: GCPAdapter, backend, method: str):
        path = "/delete" if method == "delete" else f"/action/{method}"
        backend.reply("POST", path, {"success": True}, delay=0.5)
        result = await getattr(slow_adapter, method)("web-1")
        assert not result.success
        assert result.error == "request timed out"

    async def test_list_times_out_as_provider_error(self, slow_adapter: GCPAdapter, backend):
        backend.reply("GET", "/list", {"success": True, "instances": []}, delay=0.5)
        with pytest.raises(ProviderError, match="request timed out"):
            await slow_adapter.list()
