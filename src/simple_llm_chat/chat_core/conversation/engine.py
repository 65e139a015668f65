"""The per-turn orchestration loop: model request, tool execution, repeat."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..config import ChatConfig
from ..logger import get_logger
from ..messages import AssistantMessage, BaseMessage, SystemMessage, ToolMessage, UserMessage
from ..streaming import CompletionResult
from ..tools.execution import ApprovalCallback, ToolInvoker
from ..tools.registry import ToolRegistry
from .console import ChatConsole, NullConsole
from .transport import ChatRequest, CompletionTransport

logger = get_logger(__name__)


class ConversationEngine:
    """
    Owns the history of one conversation and drives it turn by turn.

    A turn starts with a user message and ends with an assistant message that
    carries no tool calls. In between, every round of tool calls is recorded as
    an assistant message holding the calls, followed by one tool message per
    call in the order the model issued them.
    """

    def __init__(
        self,
        config: ChatConfig,
        transport: CompletionTransport,
        registry: ToolRegistry,
        invoker: Optional[ToolInvoker] = None,
        approval_callback: Optional[ApprovalCallback] = None,
        console: Optional[ChatConsole] = None,
        max_tool_rounds: Optional[int] = None,
    ) -> None:
        """
        Initializes the engine.

        Args:
            config: Runtime configuration (model, system prompt, tool lists).
            transport: Sends requests and decodes streamed replies.
            registry: Tools that may be advertised and executed.
            invoker: Executes tool calls. Defaults to an invoker over ``registry``.
            approval_callback: Asked before running approval-gated tools.
            console: Receives progress notifications. Defaults to NullConsole.
            max_tool_rounds: Cap on tool round-trips per turn. Falls back to
                ``config.max_tool_rounds``; None means unbounded.
        """
        self.config = config
        self.transport = transport
        self.registry = registry
        self.invoker = invoker or ToolInvoker(registry)
        self.approval_callback = approval_callback
        self.console: ChatConsole = console or NullConsole()
        self.max_tool_rounds = max_tool_rounds if max_tool_rounds is not None else config.max_tool_rounds
        self._history: List[BaseMessage] = []

    @property
    def history(self) -> Tuple[BaseMessage, ...]:
        """Read-only snapshot of the conversation so far."""
        return tuple(self._history)

    def clear(self) -> None:
        """Forget the whole conversation. Calling it again is a no-op."""
        self._history.clear()
        logger.debug("Conversation history cleared.")

    def build_payload(self) -> ChatRequest:
        """Assemble the next request: system prompt, full history and advertised tools."""
        messages: List[BaseMessage] = [SystemMessage(content=self.config.system_prompt)]
        messages.extend(self._history)
        return ChatRequest(
            model=self.config.model,
            messages=messages,
            tools=self.registry.tool_object(self.config.tools),
        )

    async def submit(self, text: str, image: Optional[str] = None) -> CompletionResult:
        """
        Run one turn for the given user input.

        Args:
            text: The user's message.
            image: Optional base64 encoded image attached to the message.

        Returns:
            The CompletionResult of the last model request of the turn.
        """
        self._history.append(UserMessage(content=text, image=image))
        enabled = frozenset(self.config.tools)
        approval = frozenset(self.config.tools_requiring_approval)
        rounds = 0

        while True:
            self.console.on_model_start()
            result = await self.transport.complete(self.build_payload(), self.console.on_content)

            if result.failed:
                logger.error("Request to the model failed; ending the turn.")
                self.console.on_error("Error sending request to the model.")
                self._history.append(AssistantMessage(content=""))
                return result

            if not result.tool_calls:
                self._history.append(AssistantMessage(content=result.content))
                return result

            if self.max_tool_rounds is not None and rounds >= self.max_tool_rounds:
                logger.warning(
                    "Max tool rounds (%d) reached; ignoring %d further tool call(s).",
                    self.max_tool_rounds,
                    len(result.tool_calls),
                )
                self._history.append(AssistantMessage(content=result.content))
                return result

            rounds += 1
            logger.info("Tool round %d: processing %d tool call(s).", rounds, len(result.tool_calls))
            self._history.append(AssistantMessage(content="", tool_calls=list(result.tool_calls)))

            for call in result.tool_calls:
                self.console.on_tool_request(call)
                tool_result = await self.invoker.invoke(call, enabled, approval, self.approval_callback)
                self._history.append(ToolMessage(content=tool_result.text, tool_call_id=call.id))
                self.console.on_tool_result(call, tool_result)
