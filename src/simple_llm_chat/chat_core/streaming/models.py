from typing import List

from pydantic import BaseModel, Field

from ..tools.models import ToolCall

REQUEST_FAILED = "request_failed"


class CompletionResult(BaseModel):
    """
    The reconstructed outcome of one streamed request.

    Attributes:
        content: Concatenated assistant text.
        tool_calls: Finalized tool calls, ordered by the first appearance of their index.
        finish_reason: Last non-empty finish reason, or ``request_failed`` when the
                       transport could not complete the exchange.
    """

    content: str = ""
    tool_calls: List[ToolCall] = Field(default_factory=list)
    finish_reason: str = ""

    @classmethod
    def request_failed(cls) -> "CompletionResult":
        return cls(content="", tool_calls=[], finish_reason=REQUEST_FAILED)

    @property
    def failed(self) -> bool:
        """True when the request never produced a usable response."""
        return self.finish_reason == REQUEST_FAILED
