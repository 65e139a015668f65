"""
Custom exception classes for the chat client.

Only a handful of situations raise: programming errors while building the tool
registry, images that cannot be attached and front-end commands for a child
process that cannot be built or started. Everything that happens during a turn (transport
failures, malformed stream chunks, tool failures) is converted to data instead.
"""


class ChatError(Exception):
    """Base exception for all chat client errors."""

    pass


class ToolError(ChatError):
    """Base exception for tool registry errors."""

    pass


class ToolRegistrationError(ToolError):
    """Raised when a tool cannot be registered, e.g. a duplicate name."""

    pass


class ToolNotFoundError(ToolError):
    """Raised when a requested tool is not found in the registry."""

    pass


class ImageLoadError(ChatError):
    """Raised when an image attachment cannot be read."""

    pass


class BridgeError(ChatError):
    """Raised when the child chat process cannot be started or a command for it cannot be built."""

    pass
