"""Expose tool invocation primitives."""

from .arguments import ArgumentLookup, ToolArguments
from .invoker import ApprovalCallback, ToolInvoker

__all__ = ["ArgumentLookup", "ToolArguments", "ApprovalCallback", "ToolInvoker"]
