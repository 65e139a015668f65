"""Export the exception hierarchy used by the registry, the CLI and the subprocess bridge."""

from .exceptions import ChatError, ToolError, ToolRegistrationError, ToolNotFoundError, ImageLoadError, BridgeError

__all__ = ["ChatError", "ToolError", "ToolRegistrationError", "ToolNotFoundError", "ImageLoadError", "BridgeError"]
