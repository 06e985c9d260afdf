"""Turns assistant responses into conversation messages.

Classification never raises: an unparseable string is shown as plain text,
and anything unexpected collapses into a fixed error message.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

from .commands import Command, StructuredResponse, TextResponse, is_actionable, parse_response
from .state import ConversationState, Message

if TYPE_CHECKING:
    from skydeck.assistant import AssistantClient

log = logger.bind(component="classifier")

PROPOSAL_PREFIX = "📋 "
DEFAULT_PROPOSAL_TEXT = "I've prepared a proposal for you based on your request."
FALLBACK_TEXT = "Sorry, I couldn't understand the server's response."
ERROR_TEXT = "Sorry, something went wrong while contacting the assistant."


def _informational_text(record: Mapping[str, Any], source_text: str | None) -> str:
    if explanation := record.get("explanation"):
        return explanation if isinstance(explanation, str) else json.dumps(explanation, indent=2)
    if result := record.get("result"):
        return result if isinstance(result, str) else json.dumps(result, indent=2)
    return source_text or FALLBACK_TEXT


class ResponseClassifier:
    def classify(self, value: Any) -> Message:
        try:
            return self._classify(value)
        except Exception:
            log.exception("Failed to classify assistant response")
            return Message("assistant", ERROR_TEXT)

    def _classify(self, value: Any) -> Message:
        match parse_response(value):
            case TextResponse(text=text):
                return Message("assistant", text)
            case StructuredResponse(record=record) if is_actionable(
                record.get("command")
            ):
                command = Command.from_record(record)
                log.debug("Actionable command {kind}", kind=command.kind)
                return Message(
                    "assistant",
                    PROPOSAL_PREFIX + (command.explanation or DEFAULT_PROPOSAL_TEXT),
                    command=command,
                )
            case StructuredResponse(record=record, source_text=source):
                if "command" in record:
                    log.debug("Ignoring non-actionable command {kind}", kind=record.get("command"))
                return Message("assistant", _informational_text(record, source))
            case _:
                return Message("assistant", FALLBACK_TEXT)


class AssistantSession:
    """One user round trip: prompt in, classified assistant message out."""

    def __init__(
        self,
        assistant: AssistantClient,
        conversation: ConversationState,
        classifier: ResponseClassifier | None = None,
    ) -> None:
        self._assistant = assistant
        self._conversation = conversation
        self._classifier = classifier or ResponseClassifier()

    @property
    def conversation(self) -> ConversationState:
        return self._conversation

    async def send(self, prompt: str) -> Message | None:
        if not prompt.strip():
            return None

        self._conversation.append(Message("user", prompt))
        self._conversation.loading = True
        try:
            response = await self._assistant.ask(prompt)
            reply = self._classifier.classify(response)
        except Exception as e:
            log.error("Assistant request failed: {error}", error=str(e))
            reply = Message("assistant", ERROR_TEXT)
        finally:
            self._conversation.loading = False
        return self._conversation.append(reply)
