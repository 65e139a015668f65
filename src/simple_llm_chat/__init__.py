"""Simple LLM Chat - a streaming, tool-calling chat client for OpenAI-compatible servers."""

from .chat_core import (
    ChatConfig,
    CompletionResult,
    ConversationEngine,
    ToolRegistry,
    build_default_registry,
    load_config,
)
from .chat_core.bridge import ChatProcess
from .chat_impl import OpenAIStreamTransport

__version__ = "0.1.0"

__all__ = [
    "ChatConfig",
    "CompletionResult",
    "ConversationEngine",
    "ToolRegistry",
    "build_default_registry",
    "load_config",
    "ChatProcess",
    "OpenAIStreamTransport",
]
