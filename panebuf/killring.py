"""Kill ring and line kill helpers operating on plain strings."""
from __future__ import annotations

from collections import deque


class KillRing:
    """Bounded history of killed text, newest first."""

    def __init__(self, max_size: int = 60) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._entries: deque[str] = deque(maxlen=max_size)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def max_size(self) -> int:
        return self._entries.maxlen or 0

    def entries(self) -> list[str]:
        return list(self._entries)

    def push(self, text: str, *, append: bool = False) -> None:
        """Add ``text`` as the newest entry.

        With ``append`` the text extends the newest entry instead, which is
        how consecutive kills accumulate.
        """

        if not text:
            return
        if append and self._entries:
            self._entries[0] = self._entries[0] + text
            return
        self._entries.appendleft(text)

    def yank(self) -> str | None:
        return self._entries[0] if self._entries else None

    def rotate(self, n: int = 1) -> str | None:
        """Cycle the ring ``n`` steps towards older entries and yank."""

        if not self._entries:
            return None
        self._entries.rotate(-n)
        return self._entries[0]


def line_bounds(text: str, offset: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the line at ``offset``; ``end`` excludes ``\\n``."""

    offset = max(0, min(offset, len(text)))
    start = text.rfind("\n", 0, offset) + 1
    end = text.find("\n", offset)
    if end == -1:
        end = len(text)
    return start, end


def kill_line(text: str, offset: int) -> tuple[str, str]:
    """Kill from ``offset`` to end of line, or the newline when already there.

    Returns the new text and the killed text (empty at end of buffer).
    """

    offset = max(0, min(offset, len(text)))
    if offset >= len(text):
        return text, ""
    _start, end = line_bounds(text, offset)
    if end == offset:
        end += 1
    return text[:offset] + text[end:], text[offset:end]


def copy_line(text: str, offset: int) -> str:
    start, end = line_bounds(text, offset)
    if end < len(text):
        end += 1
    return text[start:end]
