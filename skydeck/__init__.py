"""Skydeck - one console for a Proxmox platform, GCP and AWS.

Example:

    from skydeck import AssistantClient, AssistantSession, ConversationState, HttpClient

    async with HttpClient("http://localhost:8000/api") as http:
        conversation = ConversationState.with_greeting()
        session = AssistantSession(AssistantClient(http), conversation)
        reply = await session.send("Create a cluster with 3 machines")
        if reply and reply.is_actionable:
            ...
"""

from skydeck.api import (
    ActionResult,
    Cluster,
    CreateResult,
    ExecutionResult,
    HybridCreateResult,
    Instance,
    SizingSpec,
)
from skydeck.assistant import AssistantClient
from skydeck.clusters import ClusterBoard, derive_base_name, group
from skydeck.config import Settings, load_config, resolve_settings
from skydeck.conversation import (
    AssistantSession,
    Command,
    CommandExecutor,
    CommandKind,
    ConversationState,
    Message,
    Proposal,
    ProposalState,
    ResponseClassifier,
)
from skydeck.core import (
    AssistantError,
    ConfigurationError,
    ConsoleBusyError,
    InvalidTransitionError,
    NotActionableError,
    ProviderError,
    SkydeckError,
)
from skydeck.credentials import Credentials, CredentialsClient
from skydeck.infra import BearerAuth, HttpClient, HttpError
from skydeck.observability import LogConfig, setup_logging, teardown_logging
from skydeck.preferences import PreferenceStore
from skydeck.providers import AWS, GCP, InstanceTypeCatalog, Proxmox, create_adapter, create_adapters
from skydeck.providers.hybrid import HybridProvisioner

__all__ = [
    "AWS",
    "GCP",
    "ActionResult",
    "AssistantClient",
    "AssistantError",
    "AssistantSession",
    "BearerAuth",
    "Cluster",
    "ClusterBoard",
    "Command",
    "CommandExecutor",
    "CommandKind",
    "ConfigurationError",
    "ConsoleBusyError",
    "ConversationState",
    "CreateResult",
    "Credentials",
    "CredentialsClient",
    "ExecutionResult",
    "HttpClient",
    "HttpError",
    "HybridCreateResult",
    "HybridProvisioner",
    "Instance",
    "InstanceTypeCatalog",
    "InvalidTransitionError",
    "LogConfig",
    "Message",
    "NotActionableError",
    "PreferenceStore",
    "Proposal",
    "ProposalState",
    "Proxmox",
    "ProviderError",
    "ResponseClassifier",
    "Settings",
    "SizingSpec",
    "SkydeckError",
    "create_adapter",
    "create_adapters",
    "derive_base_name",
    "group",
    "load_config",
    "resolve_settings",
    "setup_logging",
    "teardown_logging",
]
