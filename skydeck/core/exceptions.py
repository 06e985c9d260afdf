"""Exception hierarchy for skydeck.

All skydeck-specific exceptions inherit from SkydeckError. Most provider
and assistant failures never surface as exceptions: they are turned into
result objects or conversation messages. The errors below are the ones that
do propagate.
"""

from __future__ import annotations


class SkydeckError(Exception):
    """Base exception for all skydeck errors."""


class ConfigurationError(SkydeckError):
    """Raised for invalid configuration or missing required settings."""


class ProviderError(SkydeckError):
    """Raised when a provider backend cannot be reached."""

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class AssistantError(SkydeckError):
    """Raised when the assistant backend returns an unusable envelope."""


class NotActionableError(SkydeckError):
    """Raised when a non-actionable command is offered for execution."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Command '{kind}' is not actionable")


class InvalidTransitionError(SkydeckError):
    """Raised on an illegal proposal state transition."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move proposal from {current} to {target}")


class ConsoleBusyError(SkydeckError):
    """Raised when a command is submitted while another one is executing."""

    def __init__(self) -> None:
        super().__init__("Another operation is in progress")
