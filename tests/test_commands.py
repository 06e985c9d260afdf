from __future__ import annotations

import pytest

from skydeck.conversation.commands import Command, ProviderParameters

pytestmark = [pytest.mark.unit]


class TestProviderParameters:
    def test_gcp_fields(self):
        params = ProviderParameters.parse({"machine_type": "e2-medium", "zone": "europe-west1-b", "count": 3})
        assert (params.machine_type, params.location, params.count) == ("e2-medium", "europe-west1-b", 3)

    def test_aws_min_count_is_the_node_count(self):
        params = ProviderParameters.parse({
            "instance_type": "t3.small", "region": "us-east-1", "min_count": 2, "max_count": 4,
        })
        assert (params.machine_type, params.location, params.count) == ("t3.small", "us-east-1", 2)
        assert dict(params.extra) == {}

    def test_explicit_count_wins_over_min_count(self):
        assert ProviderParameters.parse({"count": 5, "min_count": 2}).count == 5

    @pytest.mark.parametrize("raw", [{}, {"min_count": "many"}, None])
    def test_count_defaults_to_one(self, raw):
        assert ProviderParameters.parse(raw).count == 1

    def test_unknown_keys_are_kept(self):
        params = ProviderParameters.parse({"disk_size_gb": 50})
        assert params.extra["disk_size_gb"] == 50


class TestCommand:
    def test_top_level_cluster_type(self):
        command = Command.from_record({
            "command": "create_cluster",
            "parameters": {
                "gcp": {"machine_type": "e2-medium", "zone": "us-central1-a", "count": 2},
                "aws": {"instance_type": "t3.small", "region": "us-east-1", "min_count": 1},
                "cluster_type": "docker-swarm",
            },
        })
        assert command.cluster_type == "docker-swarm"
        assert command.providers == ("gcp", "aws")
        assert command.parameters_for("aws").count == 1

    @pytest.mark.parametrize("parameters", [{}, {"cluster_type": ""}, {"cluster_type": 3}, "docker-swarm"])
    def test_cluster_type_absent(self, parameters):
        command = Command.from_record({"command": "create_cluster", "parameters": parameters})
        assert command.cluster_type is None
