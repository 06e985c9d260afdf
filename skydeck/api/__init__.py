"""Provider-agnostic domain types."""

from .model import ActionResult as ActionResult
from .model import Cluster as Cluster
from .model import ClusterStatus as ClusterStatus
from .model import CreateResult as CreateResult
from .model import ExecutionResult as ExecutionResult
from .model import HybridCreateResult as HybridCreateResult
from .model import Instance as Instance
from .model import InstanceStatus as InstanceStatus
from .model import ProviderName as ProviderName
from .model import SizingSpec as SizingSpec
from .model import VmType as VmType
