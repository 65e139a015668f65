"""Public exports for the provider-agnostic chat core."""

from .config import ChatConfig, load_config
from .conversation import ChatConsole, ChatRequest, CompletionTransport, ConversationEngine, NullConsole, TerminalConsole
from .exceptions import BridgeError, ChatError, ImageLoadError, ToolError, ToolNotFoundError, ToolRegistrationError
from .images import load_image_base64
from .logger import get_logger, setup_logging
from .messages import AssistantMessage, BaseMessage, Role, SystemMessage, ToolMessage, UserMessage
from .streaming import CompletionResult, StreamDecoder
from .tools import (
    ToolCall,
    ToolDefinition,
    ToolInvoker,
    ToolParameter,
    ToolRegistry,
    ToolResult,
    build_default_registry,
)

__all__ = [
    "ChatConfig",
    "load_config",
    "ChatConsole",
    "ChatRequest",
    "CompletionTransport",
    "ConversationEngine",
    "NullConsole",
    "TerminalConsole",
    "BridgeError",
    "ChatError",
    "ImageLoadError",
    "ToolError",
    "ToolNotFoundError",
    "ToolRegistrationError",
    "load_image_base64",
    "get_logger",
    "setup_logging",
    "AssistantMessage",
    "BaseMessage",
    "Role",
    "SystemMessage",
    "ToolMessage",
    "UserMessage",
    "CompletionResult",
    "StreamDecoder",
    "ToolCall",
    "ToolDefinition",
    "ToolInvoker",
    "ToolParameter",
    "ToolRegistry",
    "ToolResult",
    "build_default_registry",
]
