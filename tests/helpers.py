"""Builders for streamed replies and a scripted transport shared by the tests."""

import json
from typing import Any, Dict, List, Optional, Sequence, Union

from simple_llm_chat.chat_core.conversation import ChatRequest
from simple_llm_chat.chat_core.streaming import CompletionResult, ContentSink, StreamDecoder
from simple_llm_chat.chat_core.tools.models import ToolCall

Script = Union[CompletionResult, Sequence[str]]


def sse(*chunks: Dict[str, Any], done: bool = True) -> List[str]:
    """Render delta chunks as ``data:`` lines, optionally terminated by ``[DONE]``."""
    lines = [f"data: {json.dumps(chunk, ensure_ascii=False)}" for chunk in chunks]
    if done:
        lines.append("data: [DONE]")
    return lines


def content_chunk(text: str, finish_reason: Optional[str] = None) -> Dict[str, Any]:
    return {"choices": [{"index": 0, "delta": {"content": text}, "finish_reason": finish_reason}]}


def tool_chunk(
    index: int = 0,
    call_id: str = "",
    name: str = "",
    arguments: str = "",
    finish_reason: Optional[str] = None,
) -> Dict[str, Any]:
    fragment: Dict[str, Any] = {"index": index, "function": {}}
    if call_id:
        fragment["id"] = call_id
        fragment["type"] = "function"
    if name:
        fragment["function"]["name"] = name
    if arguments:
        fragment["function"]["arguments"] = arguments
    return {"choices": [{"index": 0, "delta": {"tool_calls": [fragment]}, "finish_reason": finish_reason}]}


class ScriptedTransport:
    """Replays one scripted reply per request and records every request it receives.

    A script entry is either a ready CompletionResult or the raw event lines
    of a streamed body, which are run through a StreamDecoder.
    """

    def __init__(self, replies: Sequence[Script]) -> None:
        self.replies = list(replies)
        self.requests: List[ChatRequest] = []

    async def complete(self, request: ChatRequest, sink: Optional[ContentSink] = None) -> CompletionResult:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError("Transport called more often than scripted.")
        reply = self.replies.pop(0)
        if isinstance(reply, CompletionResult):
            if sink is not None and reply.content:
                sink(reply.content)
            return reply
        decoder = StreamDecoder(sink)
        for line in reply:
            if not decoder.feed(line):
                break
        return decoder.finish()


def tool_calls_result(*calls: ToolCall) -> CompletionResult:
    return CompletionResult(content="", tool_calls=list(calls), finish_reason="tool_calls")
