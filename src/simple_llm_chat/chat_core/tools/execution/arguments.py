"""Lazy, case-insensitive extraction of tool arguments from the raw JSON string."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from ...logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ArgumentLookup:
    """Outcome of extracting one or more arguments.

    Exactly one of ``values`` (on success) or ``error`` is meaningful.
    """

    values: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ToolArguments:
    """A parsed argument bag.

    The model sends arguments as a JSON object encoded in a string. Keys are
    matched case-insensitively (an exact match wins), non-string values are
    rendered back to JSON text and every value is stripped. Anything that is
    not a JSON object is treated as an empty bag so that the missing-argument
    path reports the problem to the model.
    """

    def __init__(self, values: Dict[str, Any]) -> None:
        self._values = values

    @classmethod
    def parse(cls, raw: Optional[str]) -> "ToolArguments":
        """Parse the raw argument string.

        Args:
            raw: JSON-encoded arguments as streamed by the model.

        Returns:
            The argument bag, empty if ``raw`` is blank or not a JSON object.
        """
        if not raw or not raw.strip():
            return cls({})
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.debug("Tool arguments are not valid JSON (%s): %r", exc, raw)
            return cls({})
        if not isinstance(parsed, dict):
            logger.debug("Tool arguments do not decode to an object: %r", raw)
            return cls({})
        return cls(parsed)

    def get(self, key: str) -> str:
        """Return the stripped string value for ``key``, or an empty string."""
        if key in self._values:
            value = self._values[key]
        else:
            lowered = key.lower()
            value = None
            for name, candidate in self._values.items():
                if name.lower() == lowered:
                    value = candidate
                    break

        if value is None:
            return ""
        if not isinstance(value, str):
            value = json.dumps(value, ensure_ascii=False)
        return value.strip()

    def extract(self, required: Iterable[str], optional: Iterable[str] = ()) -> ArgumentLookup:
        """Extract the named arguments.

        Args:
            required: Names that must be present and non-empty.
            optional: Names returned when present; empty string otherwise.

        Returns:
            An ArgumentLookup carrying either all values or the first missing-argument error.
        """
        values: Dict[str, str] = {}
        for name in required:
            value = self.get(name)
            if not value:
                return ArgumentLookup(error=f"missing '{name}' argument.")
            values[name] = value
        for name in optional:
            values[name] = self.get(name)
        return ArgumentLookup(values=values)
