"""Reconstruction of a completion from OpenAI-compatible server-sent event lines."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, AsyncIterable, Callable, Dict, List, Optional

from ..logger import get_logger
from ..tools.models import ToolCall
from .models import CompletionResult

logger = get_logger(__name__)

DATA_PREFIX = "data: "
DONE_MARKER = "[DONE]"

ContentSink = Callable[[str], None]


@dataclass
class _PendingCall:
    id: str = ""
    name: str = ""
    arguments: str = ""


class ToolCallAccumulator:
    """Merges streamed tool-call fragments keyed by their ``index``.

    ``id`` and ``function.name`` overwrite when non-empty, ``function.arguments``
    is appended. Finalized calls keep the order in which each index first appeared.
    """

    def __init__(self) -> None:
        self._calls: Dict[int, _PendingCall] = {}

    def merge(self, fragment: Dict[str, Any]) -> None:
        index = fragment.get("index")
        if not isinstance(index, int):
            index = 0
        pending = self._calls.setdefault(index, _PendingCall())

        call_id = fragment.get("id")
        if isinstance(call_id, str) and call_id:
            pending.id = call_id

        function = fragment.get("function")
        if isinstance(function, dict):
            name = function.get("name")
            if isinstance(name, str) and name:
                pending.name = name
            arguments = function.get("arguments")
            if isinstance(arguments, str) and arguments:
                pending.arguments += arguments

    def finalize(self) -> List[ToolCall]:
        return [ToolCall(id=p.id, name=p.name, arguments=p.arguments) for p in self._calls.values()]

    def __len__(self) -> int:
        return len(self._calls)


class StreamDecoder:
    """
    Incremental decoder for a streamed chat completion body.

    Feed it one line at a time. Only ``data: `` lines are considered, a
    ``[DONE]`` payload ends the stream and a chunk that is not valid JSON is
    skipped without affecting the rest of the stream. Content deltas are
    forwarded to ``sink`` as soon as they are decoded.
    """

    def __init__(self, sink: Optional[ContentSink] = None) -> None:
        """Initialize the decoder.

        Args:
            sink: Optional callable receiving each content delta as it arrives.
        """
        self._sink = sink
        self._content: List[str] = []
        self._finish_reason = ""
        self._tool_calls = ToolCallAccumulator()
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def feed(self, line: str) -> bool:
        """Process one line of the response body.

        Args:
            line: A single line, with or without its trailing newline.

        Returns:
            False once the ``[DONE]`` marker has been seen; further lines are ignored.
        """
        if self._done:
            return False

        line = line.rstrip("\r\n")
        if not line.startswith(DATA_PREFIX):
            return True

        payload = line[len(DATA_PREFIX):].strip()
        if payload == DONE_MARKER:
            self._done = True
            return False

        try:
            chunk = json.loads(payload)
        except json.JSONDecodeError as exc:
            logger.debug("Skipping malformed stream chunk (%s): %r", exc, payload)
            return True

        if not isinstance(chunk, dict):
            return True
        choices = chunk.get("choices")
        if not isinstance(choices, list):
            return True

        for choice in choices:
            if isinstance(choice, dict):
                self._apply_choice(choice)
        return True

    def _apply_choice(self, choice: Dict[str, Any]) -> None:
        delta = choice.get("delta")
        if isinstance(delta, dict):
            content = delta.get("content")
            if isinstance(content, str) and content:
                self._content.append(content)
                if self._sink is not None:
                    self._sink(content)

            fragments = delta.get("tool_calls")
            if isinstance(fragments, list):
                for fragment in fragments:
                    if isinstance(fragment, dict):
                        self._tool_calls.merge(fragment)

        finish_reason = choice.get("finish_reason")
        if isinstance(finish_reason, str) and finish_reason:
            self._finish_reason = finish_reason

    def finish(self) -> CompletionResult:
        """Build the result from everything fed so far."""
        result = CompletionResult(
            content="".join(self._content),
            tool_calls=self._tool_calls.finalize(),
            finish_reason=self._finish_reason,
        )
        logger.debug(
            "Stream decoded: %d chars, %d tool call(s), finish_reason=%r",
            len(result.content),
            len(result.tool_calls),
            result.finish_reason,
        )
        return result

    async def decode(self, lines: AsyncIterable[str]) -> CompletionResult:
        """Feed every line of an async iterable and return the finished result."""
        async for line in lines:
            if not self.feed(line):
                break
        return self.finish()
