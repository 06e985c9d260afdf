from .exceptions import (
    AssistantError,
    ConfigurationError,
    ConsoleBusyError,
    InvalidTransitionError,
    NotActionableError,
    ProviderError,
    SkydeckError,
)

__all__ = [
    "AssistantError",
    "ConfigurationError",
    "ConsoleBusyError",
    "InvalidTransitionError",
    "NotActionableError",
    "ProviderError",
    "SkydeckError",
]
