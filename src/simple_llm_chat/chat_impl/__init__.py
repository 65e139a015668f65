"""Collect concrete transports to model providers."""

from .openai_api import OpenAIStreamTransport

__all__ = ["OpenAIStreamTransport"]
