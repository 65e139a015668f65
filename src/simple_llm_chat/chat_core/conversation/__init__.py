from .console import ChatConsole, NullConsole, TerminalConsole
from .engine import ConversationEngine
from .transport import ChatRequest, CompletionTransport

__all__ = [
    "ChatConsole",
    "NullConsole",
    "TerminalConsole",
    "ConversationEngine",
    "ChatRequest",
    "CompletionTransport",
]
