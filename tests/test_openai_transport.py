import json
from typing import Any, AsyncIterator, Callable, Dict, List

import httpx
import pytest

from simple_llm_chat.chat_core.conversation import ChatRequest
from simple_llm_chat.chat_core.messages import AssistantMessage, SystemMessage, ToolMessage, UserMessage
from simple_llm_chat.chat_core.tools.models import ToolCall
from simple_llm_chat.chat_impl.openai_api import OpenAIStreamTransport, convert_message
from helpers import content_chunk, sse, tool_chunk

Handler = Callable[[httpx.Request], httpx.Response]


def make_transport(make_config, handler: Handler) -> OpenAIStreamTransport:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIStreamTransport.from_config(make_config(), http_client=http_client)


def stream_response(lines: List[str]) -> httpx.Response:
    body = "".join(line + "\n\n" for line in lines).encode("utf-8")
    return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=body)


def simple_request() -> ChatRequest:
    return ChatRequest(
        model="test-model",
        messages=[SystemMessage(content="sys"), UserMessage(content="hi")],
        tools=[{"type": "function", "function": {"name": "read_file", "description": "", "parameters": {}}}],
    )


@pytest.mark.asyncio
async def test_streams_content_and_tool_calls(make_config) -> None:
    captured: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return stream_response(
            sse(
                content_chunk("Let me check. "),
                tool_chunk(index=0, call_id="call_9", name="read_file", arguments='{"filename":'),
                tool_chunk(index=0, arguments=' "a.txt"}', finish_reason="tool_calls"),
            )
        )

    transport = make_transport(make_config, handler)
    received: List[str] = []

    result = await transport.complete(simple_request(), received.append)
    await transport.close()

    assert received == ["Let me check. "]
    assert result.content == "Let me check. "
    assert result.finish_reason == "tool_calls"
    assert result.tool_calls == [ToolCall(id="call_9", name="read_file", arguments='{"filename": "a.txt"}')]

    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "http://llm.test/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer test-key"
    body: Dict[str, Any] = json.loads(request.content)
    assert body["model"] == "test-model"
    assert body["stream"] is True
    assert body["messages"] == [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}]
    assert body["tools"][0]["function"]["name"] == "read_file"


@pytest.mark.asyncio
async def test_tools_are_omitted_when_none_are_advertised(make_config) -> None:
    bodies: List[Dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return stream_response(sse(content_chunk("ok")))

    transport = make_transport(make_config, handler)
    await transport.complete(ChatRequest(model="m", messages=[UserMessage(content="hi")]))

    assert "tools" not in bodies[0]


class ChunkedBody(httpx.AsyncByteStream):
    """Response body delivered in caller-chosen byte chunks."""

    def __init__(self, chunks: List[bytes]) -> None:
        self.chunks = chunks

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self.chunks:
            yield chunk


@pytest.mark.asyncio
async def test_result_does_not_depend_on_how_the_body_is_fragmented(make_config) -> None:
    lines = sse(
        content_chunk("Héllo "),
        content_chunk("wörld ✓"),
        tool_chunk(index=0, call_id="call_1", name="read_file", arguments='{"file'),
        tool_chunk(index=0, arguments='name": "notes.txt"}'),
        tool_chunk(index=1, call_id="call_2", name="list_directory", arguments='{"directory_path": "~"}'),
        {"choices": [{"index": 0, "delta": {}, "finish_reason": "tool_calls"}]},
    )
    body = "".join(line + "\n\n" for line in lines).encode("utf-8")
    chunks: List[bytes] = [body]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"content-type": "text/event-stream"}, stream=ChunkedBody(chunks))

    transport = make_transport(make_config, handler)
    expected = await transport.complete(simple_request())
    assert expected.content == "Héllo wörld ✓"
    assert [call.id for call in expected.tool_calls] == ["call_1", "call_2"]

    # Every offset, including ones inside multi-byte characters.
    for cut in range(1, len(body)):
        chunks[:] = [body[:cut], body[cut:]]
        assert await transport.complete(simple_request()) == expected

    chunks[:] = [body[i : i + 1] for i in range(len(body))]
    assert await transport.complete(simple_request()) == expected
    await transport.close()


@pytest.mark.asyncio
async def test_server_error_is_request_failed(make_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "boom"}})

    result = await make_transport(make_config, handler).complete(simple_request())

    assert result.failed
    assert result.content == ""
    assert result.tool_calls == []


@pytest.mark.asyncio
async def test_connection_error_is_request_failed(make_config) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await make_transport(make_config, handler).complete(simple_request())

    assert result.finish_reason == "request_failed"


def test_plain_messages_use_string_content() -> None:
    assert convert_message(UserMessage(content="hello")) == {"role": "user", "content": "hello"}
    assert convert_message(AssistantMessage(content="reply")) == {"role": "assistant", "content": "reply"}


def test_assistant_tool_calls_and_tool_messages() -> None:
    call = ToolCall(id="c1", name="read_file", arguments='{"filename": "a"}')

    assert convert_message(AssistantMessage(tool_calls=[call])) == {
        "role": "assistant",
        "content": "",
        "tool_calls": [
            {"id": "c1", "type": "function", "function": {"name": "read_file", "arguments": '{"filename": "a"}'}}
        ],
    }
    assert convert_message(ToolMessage(content="out", tool_call_id="c1")) == {
        "role": "tool",
        "content": "out",
        "tool_call_id": "c1",
    }


def test_image_without_text_and_empty_image() -> None:
    assert convert_message(UserMessage(content="", image="QUJD")) == {
        "role": "user",
        "content": [{"type": "image_url", "image_url": {"url": "data:image/png;base64,QUJD"}}],
    }
    assert convert_message(UserMessage(content="", image="")) == {
        "role": "user",
        "content": [{"type": "text", "text": ""}],
    }
