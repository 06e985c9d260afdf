"""Confirm-then-execute protocol for actionable commands.

A proposal tells this story: proposed → confirmed → executing → succeeded
or failed. Nothing leaves ``PROPOSED`` without an explicit ``confirm()``
(or ``decline()``), so the decision point is testable without a UI.

Model:      frozen ``Proposal`` + ``advance`` transition
Controller: ``CommandExecutor`` appends placeholder and outcome messages
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum, auto

from loguru import logger

from skydeck.api.model import ExecutionResult
from skydeck.assistant import AssistantClient
from skydeck.core.exceptions import ConsoleBusyError, InvalidTransitionError, NotActionableError

from .commands import Command, CommandKind
from .state import ConversationState, Message

log = logger.bind(component="executor")

PLACEHOLDER_TEXT = "⚙️ Executing operation..."
DEFAULT_SUCCESS_TEXT = "Operation completed successfully!"
DEFAULT_FAILURE_TEXT = "The operation could not be executed"
REDIRECT_TEXT = "Redirecting to the management page..."

DEFAULT_MANAGEMENT_PATH = "/gestio"
DEFAULT_REDIRECT_DELAY = 1.5

type Navigator = Callable[[str], object]


class ProposalState(Enum):
    PROPOSED = auto()
    CONFIRMED = auto()
    DECLINED = auto()
    EXECUTING = auto()
    SUCCEEDED = auto()
    FAILED = auto()


_TRANSITIONS: dict[ProposalState, frozenset[ProposalState]] = {
    ProposalState.PROPOSED: frozenset({ProposalState.CONFIRMED, ProposalState.DECLINED}),
    ProposalState.CONFIRMED: frozenset({ProposalState.EXECUTING}),
    ProposalState.EXECUTING: frozenset({ProposalState.SUCCEEDED, ProposalState.FAILED}),
}


@dataclass(frozen=True, slots=True)
class Proposal:
    command: Command
    state: ProposalState = ProposalState.PROPOSED
    result: ExecutionResult | None = None

    def __post_init__(self) -> None:
        if not self.command.is_actionable:
            raise NotActionableError(self.command.kind)

    @classmethod
    def from_message(cls, message: Message) -> Proposal:
        if message.command is None:
            raise NotActionableError("<none>")
        return cls(message.command)

    @property
    def is_final(self) -> bool:
        return self.state not in _TRANSITIONS

    def advance(self, target: ProposalState) -> Proposal:
        if target not in _TRANSITIONS.get(self.state, frozenset()):
            raise InvalidTransitionError(self.state.name, target.name)
        return replace(self, state=target)

    def confirm(self) -> Proposal:
        return self.advance(ProposalState.CONFIRMED)

    def decline(self) -> Proposal:
        return self.advance(ProposalState.DECLINED)


class CommandExecutor:
    def __init__(
        self,
        assistant: AssistantClient,
        conversation: ConversationState,
        *,
        navigator: Navigator | None = None,
        management_path: str = DEFAULT_MANAGEMENT_PATH,
        redirect_delay: float = DEFAULT_REDIRECT_DELAY,
    ) -> None:
        self._assistant = assistant
        self._conversation = conversation
        self._navigator = navigator
        self._management_path = management_path
        self._redirect_delay = redirect_delay
        self._redirect: asyncio.TimerHandle | None = None

    @property
    def pending_redirect(self) -> asyncio.TimerHandle | None:
        return self._redirect

    async def run(self, proposal: Proposal) -> Proposal:
        """Execute a confirmed proposal and return it in its final state."""
        if proposal.state is not ProposalState.CONFIRMED:
            raise InvalidTransitionError(proposal.state.name, ProposalState.EXECUTING.name)
        if self._conversation.loading:
            raise ConsoleBusyError()

        executing = proposal.advance(ProposalState.EXECUTING)
        result = await self.execute(proposal.command)
        final = ProposalState.SUCCEEDED if result.success else ProposalState.FAILED
        return replace(executing.advance(final), result=result)

    async def execute(self, command: Command) -> ExecutionResult:
        """Run one command: placeholder, backend call, exactly one outcome message."""
        if not command.is_actionable:
            raise NotActionableError(command.kind)
        if self._conversation.loading:
            raise ConsoleBusyError()

        cmd_log = log.bind(command=command.kind)
        self._conversation.loading = True
        try:
            self._conversation.say(PLACEHOLDER_TEXT)
            try:
                result = await self._assistant.execute(command.to_payload())
            except Exception as e:
                cmd_log.error("Execution failed: {error}", error=str(e))
                result = ExecutionResult(success=False, error=str(e) or type(e).__name__)
            self._report(command, result)
        finally:
            self._conversation.loading = False
        return result

    def _report(self, command: Command, result: ExecutionResult) -> None:
        if not result.success:
            log.bind(command=command.kind).warning(
                "Backend rejected command: {error}", error=result.error,
            )
            self._conversation.say(
                f"❌ Error: {result.error or DEFAULT_FAILURE_TEXT}", result=result,
            )
            return

        self._conversation.say(f"✅ {result.explanation or DEFAULT_SUCCESS_TEXT}", result=result)
        if command.kind == CommandKind.CREATE_CLUSTER:
            self._conversation.say(REDIRECT_TEXT)
            self._schedule_redirect()

    def _schedule_redirect(self) -> None:
        if self._navigator is None:
            return
        loop = asyncio.get_running_loop()
        self._redirect = loop.call_later(
            self._redirect_delay, self._navigator, self._management_path,
        )
