from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from ..messages import BaseMessage
from ..streaming import CompletionResult, ContentSink


class ChatRequest(BaseModel):
    """
    A provider-agnostic chat completion request.

    Attributes:
        model: Model identifier.
        messages: System message followed by the whole history.
        tools: Advertised tools in the OpenAI ``tools`` array form, or None.
    """

    model: str
    messages: List[BaseMessage] = Field(default_factory=list)
    tools: Optional[List[Dict[str, Any]]] = None


class CompletionTransport(Protocol):
    """
    Sends a request to the model endpoint and decodes the streamed reply.

    Implementations must not raise for transport failures; they return
    ``CompletionResult.request_failed()`` instead.
    """

    async def complete(self, request: ChatRequest, sink: Optional[ContentSink] = None) -> CompletionResult:
        ...
