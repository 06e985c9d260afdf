"""Conversational front-end: classify assistant replies, confirm and execute commands."""

from .classifier import AssistantSession, ResponseClassifier
from .commands import (
    ACTIONABLE_COMMANDS,
    AssistantResponse,
    Command,
    CommandKind,
    ProviderParameters,
    StructuredResponse,
    TextResponse,
    is_actionable,
    parse_response,
)
from .executor import CommandExecutor, Proposal, ProposalState
from .state import ConversationState, Message, Role

__all__ = [
    "ACTIONABLE_COMMANDS",
    "AssistantResponse",
    "AssistantSession",
    "Command",
    "CommandExecutor",
    "CommandKind",
    "ConversationState",
    "Message",
    "Proposal",
    "ProposalState",
    "ProviderParameters",
    "ResponseClassifier",
    "Role",
    "StructuredResponse",
    "TextResponse",
    "is_actionable",
    "parse_response",
]
