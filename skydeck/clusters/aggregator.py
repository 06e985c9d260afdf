"""Name-based cluster inference.

Instances created together are named ``<base>-<n>`` (or ``<base><n>``), so a
cluster is rebuilt by stripping that suffix. The heuristic is lossy: unrelated
instances whose names collide after stripping are merged, and members whose
names do not follow the pattern are split off.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from skydeck.api.model import Cluster, Instance, ProviderName

_DASH_DIGITS = re.compile(r"-\d+$")
_DIGITS = re.compile(r"\d+$")

UNKNOWN_NAME = "unknown"


def derive_base_name(name: str | None) -> str:
    """web-1 -> web, node7 -> node, db -> db."""
    if not name:
        return UNKNOWN_NAME
    stripped, n = _DASH_DIGITS.subn("", name)
    if n == 0:
        stripped = _DIGITS.sub("", name)
    return stripped or UNKNOWN_NAME


def group(instances: Iterable[Instance], provider: ProviderName) -> list[Cluster]:
    """Group one provider's instances into clusters, in first-seen order."""
    groups: dict[str, list[Instance]] = {}
    for inst in instances:
        groups.setdefault(derive_base_name(inst.name), []).append(inst)

    return [
        Cluster(
            base_name=base,
            provider=provider,
            instances=tuple(members),
            cpu_total=sum(i.cpu or 0 for i in members),
            ram_total=sum(i.ram_gb or 0 for i in members),
        )
        for base, members in groups.items()
    ]


def flatten(clusters: Iterable[Cluster]) -> list[Instance]:
    return [inst for cluster in clusters for inst in cluster.instances]
