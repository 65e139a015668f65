from .decoder import DATA_PREFIX, DONE_MARKER, ContentSink, StreamDecoder, ToolCallAccumulator
from .models import REQUEST_FAILED, CompletionResult

__all__ = [
    "DATA_PREFIX",
    "DONE_MARKER",
    "ContentSink",
    "StreamDecoder",
    "ToolCallAccumulator",
    "REQUEST_FAILED",
    "CompletionResult",
]
