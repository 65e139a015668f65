"""Expose the OpenAI-compatible streaming transport and its message conversion."""

from .adapter import convert_message, convert_messages, image_data_url
from .transport import OpenAIStreamTransport

__all__ = ["convert_message", "convert_messages", "image_data_url", "OpenAIStreamTransport"]
