"""Turn detection on the output stream of a chat CLI child process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .protocol import PROMPT_MARKER


@dataclass(frozen=True)
class FrameEvent:
    """Either a piece of output text or the end of a turn."""

    text: str = ""
    turn_complete: bool = False


def _partial_marker_length(text: str) -> int:
    """Length of the longest suffix of ``text`` that is a proper prefix of the marker."""
    for size in range(min(len(PROMPT_MARKER) - 1, len(text)), 0, -1):
        if PROMPT_MARKER.startswith(text[-size:]):
            return size
    return 0


class PromptFramer:
    """
    Splits decoded output into transcript text and turn boundaries.

    A turn is complete when the re-prompt marker ``You:`` is followed by
    whitespace. The marker and the spaces or tabs after it are removed from
    the output. Text that could still grow into the marker, up to and
    including a bare ``You:`` at the end of the buffer, is held back until
    the next chunk decides it.
    """

    def __init__(self) -> None:
        self._pending = ""

    @property
    def pending(self) -> str:
        """Text currently held back."""
        return self._pending

    def reset(self) -> None:
        self._pending = ""

    def feed(self, text: str) -> List[FrameEvent]:
        """
        Processes the next chunk of decoded output.

        Args:
            text: Newly decoded output.

        Returns:
            Output and turn-complete events in stream order.
        """
        events: List[FrameEvent] = []
        buffer = self._pending + text
        self._pending = ""
        marker_length = len(PROMPT_MARKER)

        while buffer:
            index = buffer.find(PROMPT_MARKER)
            if index == -1:
                held = _partial_marker_length(buffer)
                self._emit(events, buffer[: len(buffer) - held])
                self._pending = buffer[len(buffer) - held:]
                break

            end = index + marker_length
            if end >= len(buffer):
                self._emit(events, buffer[:index])
                self._pending = buffer[index:]
                break

            if buffer[end].isspace():
                self._emit(events, buffer[:index])
                events.append(FrameEvent(turn_complete=True))
                buffer = buffer[end:].lstrip(" \t")
            else:
                # Marker text inside ordinary output.
                self._emit(events, buffer[:end])
                buffer = buffer[end:]

        return events

    def flush(self) -> List[FrameEvent]:
        """Releases any held-back text, e.g. when the stream ends."""
        events: List[FrameEvent] = []
        self._emit(events, self._pending)
        self._pending = ""
        return events

    @staticmethod
    def _emit(events: List[FrameEvent], text: str) -> None:
        if not text:
            return
        if events and not events[-1].turn_complete:
            events[-1] = FrameEvent(text=events[-1].text + text)
        else:
            events.append(FrameEvent(text=text))
