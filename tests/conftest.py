from __future__ import annotations

import pytest

from panebuf.host import BoundingBox, Document, HostAdapter, HostUnavailable


class FakeHost:
    def __init__(
        self,
        documents: list[Document] | None = None,
        panes: dict[str, BoundingBox] | None = None,
        frame: tuple[int, int] = (1000, 800),
    ) -> None:
        self.documents = list(documents or [])
        self.panes = dict(panes or {})
        self.frame = frame
        self.active = next(iter(self.panes), None)
        self.cursors: dict[str, tuple[int, int]] = {}
        self.shown: list[str] = []
        self.deleted: list[str] = []
        self.probes: list[tuple[int, int]] = []
        self.stale = False

    def _check(self) -> None:
        if self.stale:
            raise HostUnavailable("pane handle is stale")

    def list_documents(self) -> list[Document]:
        self._check()
        return list(self.documents)

    def delete_document(self, doc: Document) -> None:
        self._check()
        self.documents.remove(doc)
        self.deleted.append(doc.name)

    def show_document(self, doc: Document) -> None:
        self._check()
        self.shown.append(doc.name)

    def active_pane(self) -> str:
        self._check()
        return self.active

    def set_active_pane(self, pane: str) -> None:
        self.active = pane

    def pane_box(self, pane: str) -> BoundingBox:
        self._check()
        return self.panes[pane]

    def cursor_offset(self, pane: str) -> tuple[int, int]:
        return self.cursors.get(pane, (0, 0))

    def frame_size(self) -> tuple[int, int]:
        return self.frame

    def pane_at(self, x: int, y: int) -> str | None:
        self.probes.append((x, y))
        for pane, box in self.panes.items():
            if box.contains(x, y):
                return pane
        return None

    def make_adapter(self) -> HostAdapter:
        return HostAdapter(
            list_documents=self.list_documents,
            delete_document=self.delete_document,
            show_document=self.show_document,
            active_pane=self.active_pane,
            set_active_pane=self.set_active_pane,
            pane_box=self.pane_box,
            cursor_offset=self.cursor_offset,
            frame_size=self.frame_size,
            pane_at=self.pane_at,
        )


@pytest.fixture
def grid_host() -> FakeHost:
    """Four panes tiling a 1000x800 frame as a 2x2 grid."""

    return FakeHost(
        panes={
            "top_left": BoundingBox(0, 0, 500, 400),
            "top_right": BoundingBox(500, 0, 1000, 400),
            "bottom_left": BoundingBox(0, 400, 500, 800),
            "bottom_right": BoundingBox(500, 400, 1000, 800),
        },
    )


@pytest.fixture
def fake_host_cls():
    return FakeHost
