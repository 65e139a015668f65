"""Streaming transport to an OpenAI-compatible ``/v1/chat/completions`` endpoint."""

from __future__ import annotations

from typing import Any, Iterable, Optional, cast

import httpx
import openai
from openai import NOT_GIVEN, AsyncOpenAI

from simple_llm_chat.chat_core.config import ChatConfig
from simple_llm_chat.chat_core.conversation import ChatRequest
from simple_llm_chat.chat_core.logger import get_logger
from simple_llm_chat.chat_core.streaming import CompletionResult, ContentSink, StreamDecoder
from .adapter import convert_messages

logger = get_logger(__name__)


class OpenAIStreamTransport:
    """
    Sends chat requests with ``stream=True`` and decodes the raw event lines.

    The SDK only handles the HTTP exchange; the body is read line by line and
    handed to a StreamDecoder so content reaches the sink as it arrives. No
    retries are attempted and no timeout is imposed on the model call.
    """

    def __init__(self, client: AsyncOpenAI) -> None:
        """
        Initializes the transport.

        Args:
            client: The initialized AsyncOpenAI client.
        """
        self.client = client

    @classmethod
    def from_config(cls, config: ChatConfig, http_client: Optional[httpx.AsyncClient] = None) -> "OpenAIStreamTransport":
        """
        Builds a transport for the configured server.

        Args:
            config: Supplies the server base URL and the bearer token.
            http_client: Optional custom httpx client, e.g. with a mock transport.

        Returns:
            The transport.
        """
        client = AsyncOpenAI(
            base_url=f"{config.llm_server}/v1",
            api_key=config.api_key,
            max_retries=0,
            timeout=None,
            http_client=http_client,
        )
        return cls(client)

    async def complete(self, request: ChatRequest, sink: Optional[ContentSink] = None) -> CompletionResult:
        """
        Runs one streamed chat completion.

        Args:
            request: The model, messages and advertised tools.
            sink: Receives content deltas as they are decoded.

        Returns:
            The decoded result, or a ``request_failed`` result if the exchange
            could not be completed.
        """
        decoder = StreamDecoder(sink)
        messages = convert_messages(request.messages)
        logger.debug("Sending %d message(s) to model %s.", len(messages), request.model)

        try:
            # Messages are plain dicts that are structurally compatible with the SDK's param types.
            async with self.client.chat.completions.with_streaming_response.create(
                model=request.model,
                messages=cast(Iterable[Any], messages),
                tools=cast(Any, request.tools) if request.tools else NOT_GIVEN,
                stream=True,
            ) as response:
                async for line in response.iter_lines():
                    if not decoder.feed(line):
                        break
        except openai.APIError as exc:
            logger.error("Error sending request: %s", exc)
            return CompletionResult.request_failed()
        except httpx.HTTPError as exc:
            logger.error("Error reading response: %s", exc)
            return CompletionResult.request_failed()

        return decoder.finish()

    async def close(self) -> None:
        """Closes the underlying HTTP client."""
        await self.client.close()
