from __future__ import annotations

import pytest

from skydeck.api.model import Cluster, Instance
from skydeck.clusters.aggregator import derive_base_name, flatten, group

pytestmark = [pytest.mark.unit]


def inst(name: str, provider: str = "gcp", *, status: str = "running", cpu: float = 2, ram: float = 4) -> Instance:
    return Instance(id=name, name=name, provider=provider, status=status, cpu=cpu, ram_gb=ram)


class TestDeriveBaseName:
    @pytest.mark.parametrize("name,expected", [
        ("web-1", "web"),
        ("web-12", "web"),
        ("node7", "node"),
        ("db", "db"),
        ("my-app-3", "my-app"),
        ("k8s-worker", "k8s-worker"),
        ("web-1-2", "web-1"),
        ("swarm-manager", "swarm-manager"),
    ])
    def test_strips_numeric_suffix(self, name: str, expected: str):
        assert derive_base_name(name) == expected

    def test_dash_rule_takes_precedence(self):
        assert derive_base_name("node2-10") == "node2"

    @pytest.mark.parametrize("name", [None, "", "123"])
    def test_degenerate_names(self, name):
        assert derive_base_name(name) == "unknown"


class TestGroup:
    def test_groups_by_base_name(self):
        clusters = group([inst("web-1"), inst("web-2"), inst("db")], "gcp")
        assert [(c.base_name, c.size) for c in clusters] == [("web", 2), ("db", 1)]

    def test_totals(self):
        clusters = group([inst("web-1", cpu=2, ram=4), inst("web-2", cpu=4, ram=16)], "gcp")
        assert clusters[0].cpu_total == 6
        assert clusters[0].ram_total == 20

    def test_first_seen_order(self):
        clusters = group([inst("db"), inst("web-1"), inst("db2"), inst("web-2")], "aws")
        assert [c.base_name for c in clusters] == ["db", "web"]
        assert [i.name for i in clusters[0].instances] == ["db", "db2"]

    def test_every_instance_in_exactly_one_cluster(self):
        instances = [inst(n) for n in ("a-1", "a-2", "b", "c3", "c-4", "x")]
        clusters = group(instances, "gcp")
        assert sorted(i.name for i in flatten(clusters)) == sorted(i.name for i in instances)

    def test_idempotent(self):
        instances = [inst("web-1"), inst("web-2"), inst("db")]
        assert group(instances, "gcp") == group(instances, "gcp")

    def test_regrouping_flattened_output(self):
        clusters = group([inst("web-1"), inst("web-2"), inst("db")], "gcp")
        assert group(flatten(clusters), "gcp") == clusters

    def test_status_is_always_active(self):
        clusters = group([inst("web-1", status="stopped"), inst("web-2", status="stopped")], "gcp")
        assert clusters[0].status == "active"
        assert clusters[0].derived_status == "stopped"

    def test_empty(self):
        assert group([], "gcp") == []

    def test_provider_is_stamped(self):
        (cluster,) = group([inst("web-1", provider="aws")], "aws")
        assert cluster.provider == "aws"
        assert cluster.key == ("aws", "web")


class TestDerivedStatus:
    @pytest.mark.parametrize("states,expected", [
        (("running", "running"), "active"),
        (("running", "stopped"), "mixed"),
        (("stopped", "unknown"), "stopped"),
    ])
    def test_derived_status(self, states, expected):
        members = tuple(inst(f"web-{i}", status=s) for i, s in enumerate(states))
        cluster = Cluster("web", "gcp", members, cpu_total=0, ram_total=0)
        assert cluster.derived_status == expected
