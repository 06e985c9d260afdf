"""Conversation log shared by the classifier and the executor."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

from skydeck.api.model import ExecutionResult

from .commands import Command

type Role = Literal["user", "assistant"]

GREETING: tuple[str, ...] = (
    "Hi! I'm your cloud infrastructure assistant. How can I help you today?",
    'You can ask me to create a cluster or a virtual machine, e.g. "Create a cluster '
    'with 3 machines" or "Create a VM with 2 vCPUs and 4 GB of RAM".',
    "I currently work with AWS and Google Cloud Platform.",
)


@dataclass(frozen=True, slots=True)
class Message:
    role: Role
    text: str
    command: Command | None = None
    result: ExecutionResult | None = None

    @property
    def is_actionable(self) -> bool:
        return self.command is not None and self.command.is_actionable


class ConversationState:
    """Ordered, append-only message log plus the console's loading flag."""

    def __init__(self, messages: tuple[Message, ...] = ()) -> None:
        self._messages: list[Message] = list(messages)
        self.loading = False

    @classmethod
    def with_greeting(cls) -> ConversationState:
        return cls(tuple(Message("assistant", line) for line in GREETING))

    def append(self, message: Message) -> Message:
        self._messages.append(message)
        return message

    def say(self, text: str, *, result: ExecutionResult | None = None) -> Message:
        return self.append(Message("assistant", text, result=result))

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
