"""Host editor capabilities consumed by the matcher, navigator and commands.

The concrete editor (the Tk app in :mod:`panebuf.app`, or an in-memory fake
in tests) fills in a :class:`HostAdapter`. Nothing here caches host state;
callers snapshot it on every operation.
"""
from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass

PaneHandle = Hashable


class HostUnavailable(RuntimeError):
    """Raised when a host primitive fails, e.g. for a stale pane handle."""


@dataclass(frozen=True)
class Document:
    name: str
    path: str | None = None


@dataclass(frozen=True)
class BoundingBox:
    left: int
    top: int
    right: int
    bottom: int

    def contains(self, x: int, y: int) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom


@dataclass
class HostAdapter:
    """Bridges the editor core to a concrete host implementation."""

    list_documents: Callable[[], Sequence[Document]]
    delete_document: Callable[[Document], None]
    show_document: Callable[[Document], None]
    active_pane: Callable[[], PaneHandle]
    set_active_pane: Callable[[PaneHandle], None]
    pane_box: Callable[[PaneHandle], BoundingBox]
    cursor_offset: Callable[[PaneHandle], tuple[int, int]]
    frame_size: Callable[[], tuple[int, int]]
    pane_at: Callable[[int, int], PaneHandle | None]


def snapshot_documents(adapter: HostAdapter) -> list[Document]:
    """Return a fresh, ordered copy of the host's open documents."""

    return list(adapter.list_documents())
