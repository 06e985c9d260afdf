from .aggregator import derive_base_name, flatten, group
from .board import ClusterBoard

__all__ = ["ClusterBoard", "derive_base_name", "flatten", "group"]
