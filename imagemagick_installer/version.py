from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Tuple

_SEGMENT_SPLIT = re.compile(r"[.\-]")


@total_ordering
@dataclass(frozen=True)
class Version:
    """Numeric version with a total order.

    ``7.1.0-0`` and ``7.1.0.0`` compare equal; missing trailing segments count
    as zero, so ``3.0`` == ``3.0.0`` and ``3.0.1`` > ``3.0``.
    """

    segments: Tuple[int, ...]
    text: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> "Version":
        raw = (text or "").strip()
        stripped = raw[1:] if raw[:1] in {"v", "V"} else raw
        if not stripped:
            raise ValueError(f"Not a version string: {text!r}")

        segments: list[int] = []
        for part in _SEGMENT_SPLIT.split(stripped):
            m = re.match(r"\d+", part)
            if not m:
                raise ValueError(f"Not a version string: {text!r}")
            segments.append(int(m.group(0)))
        return cls(segments=tuple(segments), text=stripped)

    def _padded(self, width: int) -> Tuple[int, ...]:
        return self.segments + (0,) * (width - len(self.segments))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        width = max(len(self.segments), len(other.segments))
        return self._padded(width) == other._padded(width)

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        width = max(len(self.segments), len(other.segments))
        return self._padded(width) < other._padded(width)

    def __hash__(self) -> int:
        trimmed = list(self.segments)
        while trimmed and trimmed[-1] == 0:
            trimmed.pop()
        return hash(tuple(trimmed))

    def __str__(self) -> str:
        return self.text or ".".join(str(s) for s in self.segments)


def strip_v(tag: str) -> str:
    tag = (tag or "").strip()
    return tag[1:] if tag[:1] in {"v", "V"} else tag
