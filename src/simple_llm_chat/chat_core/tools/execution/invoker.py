"""Validation, approval gating and execution of a single tool call."""

from __future__ import annotations

import asyncio
import inspect
from typing import AbstractSet, Any, Awaitable, Callable, Dict, Optional, Tuple, Union

from ...logger import get_logger
from ..models import ToolCall, ToolDefinition, ToolResult, format_command_result
from ..registry import ToolRegistry
from .arguments import ToolArguments

logger = get_logger(__name__)

ApprovalCallback = Callable[[str, str], Union[bool, Awaitable[bool]]]


class ToolInvoker:
    """Turns a ToolCall into a ToolResult.

    The invoker owns no state besides the registry it dispatches into. It never
    raises on the turn path: disabled, refused, unknown and failing tools all
    come back as a ToolResult so the model can see what happened and adapt.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        """Initialize the invoker.

        Args:
            registry: Registry used to resolve tool collaborators.
        """
        self._registry = registry

    async def invoke(
        self,
        call: ToolCall,
        enabled_tools: AbstractSet[str],
        approval_tools: AbstractSet[str] = frozenset(),
        approval_callback: Optional[ApprovalCallback] = None,
    ) -> ToolResult:
        """Validate, optionally gate and execute a tool call.

        Args:
            call: The finalized tool call from the model.
            enabled_tools: Names allowed by configuration.
            approval_tools: Names that need explicit confirmation before running.
            approval_callback: Asked ``(name, arguments)`` for approval-gated tools.
                A missing callback refuses every gated call.

        Returns:
            The normalized result envelope.
        """
        logger.debug("Handling tool call: %s (ID: %s)", call.name, call.id)

        if call.name not in enabled_tools:
            logger.warning("Tool '%s' requested but disabled by configuration.", call.name)
            return ToolResult(
                text=f"error: tool '{call.name}' is disabled by configuration.",
                exit_code=-1,
                handled=True,
            )

        if call.name in approval_tools:
            approved = await self._ask_approval(call, approval_callback)
            if not approved:
                logger.info("Tool '%s' was not approved.", call.name)
                return ToolResult(
                    text=f"error: tool '{call.name}' was cancelled by the user.",
                    exit_code=-1,
                    handled=True,
                )

        tool = self._registry.get(call.name)
        if tool is None:
            logger.warning("Tool '%s' not found in registry.", call.name)
            return ToolResult(text=f"error: unknown tool '{call.name}'.", exit_code=-1, handled=False)

        lookup = ToolArguments.parse(call.arguments).extract(tool.required, tool.optional)
        if not lookup.ok:
            logger.warning("Argument extraction failed for '%s': %s", call.name, lookup.error)
            return ToolResult(text=f"error: {lookup.error}", exit_code=1, handled=True)

        try:
            logger.info("Executing tool '%s'...", call.name)
            output, exit_code = await self._execute(tool, lookup.values)
        except Exception as exc:
            logger.warning("Tool '%s' failed: %s (%s)", call.name, exc, type(exc).__name__)
            return ToolResult(text=f"error: {exc}", exit_code=-1, handled=True)

        logger.info("Tool '%s' finished with exit code %s.", call.name, exit_code)
        return ToolResult(
            text=format_command_result(tool.label(lookup.values), output, exit_code),
            exit_code=exit_code,
            handled=True,
        )

    @staticmethod
    async def _ask_approval(call: ToolCall, approval_callback: Optional[ApprovalCallback]) -> bool:
        if approval_callback is None:
            logger.warning("Tool '%s' requires approval but no approval callback is configured.", call.name)
            return False
        try:
            answer: Any = approval_callback(call.name, call.arguments)
            if inspect.isawaitable(answer):
                answer = await answer
        except Exception as exc:
            logger.warning("Approval callback for '%s' failed: %s", call.name, exc)
            return False
        return bool(answer)

    @staticmethod
    async def _execute(tool: ToolDefinition, values: Dict[str, str]) -> Tuple[str, int]:
        """Run the collaborator, in a worker thread unless it is a coroutine function."""
        if inspect.iscoroutinefunction(tool.func):
            return await tool.func(values)
        return await asyncio.to_thread(tool.func, values)
