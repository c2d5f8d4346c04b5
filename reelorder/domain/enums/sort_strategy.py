from __future__ import annotations
from enum import StrEnum
from typing import Optional


class SortStrategy(StrEnum):
    none = "none"
    quality = "quality"
    name = "name"
    duration = "duration"
    size = "size"

    @classmethod
    def parse(cls, value: Optional[str | "SortStrategy"]) -> "SortStrategy":
        """Case-insensitive lookup; empty or None means no requested ordering."""
        if isinstance(value, cls):
            return value
        s = (value or "").strip().lower()
        if not s:
            return cls.none
        try:
            return cls(s)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown sort strategy {value!r} (expected one of: {allowed})") from None
