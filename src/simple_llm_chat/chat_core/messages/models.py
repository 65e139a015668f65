from abc import ABC
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..tools.models import ToolCall


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class BaseMessage(ABC, BaseModel):
    """One entry of the conversation history. Messages never change once appended."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = ""


class SystemMessage(BaseMessage):
    role: Role = Role.SYSTEM


class UserMessage(BaseMessage):
    """
    A user turn.

    Attributes:
        image: Optional base64 encoded image attached to the text.
    """

    role: Role = Role.USER
    image: Optional[str] = None


class AssistantMessage(BaseMessage):
    """
    A model reply. Carries either final content or the tool calls of one round.

    Attributes:
        tool_calls: Calls requested by the model; content is empty when present.
    """

    role: Role = Role.ASSISTANT
    tool_calls: List[ToolCall] = Field(default_factory=list)


class ToolMessage(BaseMessage):
    """
    The output of one tool call, fed back to the model.

    Attributes:
        tool_call_id: Id of the call this message answers.
    """

    role: Role = Role.TOOL
    tool_call_id: str = ""
