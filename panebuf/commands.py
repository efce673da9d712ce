"""Editor commands bound to a host adapter.

Commands snapshot host state on every call. Pattern and host errors are
reported through ``on_error`` and the command returns a neutral value;
"nothing found" is reported as a plain status message.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TypeVar

from .config import DEFAULTS
from .host import Document, HostAdapter, HostUnavailable, snapshot_documents
from .killring import KillRing, copy_line, kill_line
from .matcher import DocumentMatcher, PatternError
from .navigator import DOWN, LEFT, RIGHT, UP, PaneNavigator
from .region import deindent_block, indent_block, toggle_comment

T = TypeVar("T")

StatusCallback = Callable[[str], None]
ErrorCallback = Callable[..., None]


class EditorCommands:
    def __init__(
        self,
        adapter: HostAdapter,
        cfg: dict | None = None,
        *,
        on_status: StatusCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.adapter = adapter
        self.cfg = cfg if cfg is not None else dict(DEFAULTS)
        self.on_status = on_status
        self.on_error = on_error
        self.ignored = frozenset(self.cfg.get("ignored_buffers", DEFAULTS["ignored_buffers"]))
        self.matcher = DocumentMatcher(adapter, self.ignored)
        self.navigator = PaneNavigator(adapter)
        self.kill_ring = KillRing(int(self.cfg.get("kill_ring_max", DEFAULTS["kill_ring_max"])))
        self.messages: list[str] = []

    # ---------- Messages ----------

    def _log(self, line: str) -> None:
        timestamp = datetime.now().isoformat(timespec="seconds")
        self.messages.append(f"[{timestamp}] {line}")
        self._apply_log_retention()

    def _apply_log_retention(self) -> bool:
        limit = int(self.cfg.get("log_entries_kept", DEFAULTS["log_entries_kept"]))
        limit = max(0, min(9999, limit))
        if limit == 0:
            if self.messages:
                self.messages.clear()
                return True
            return False

        if len(self.messages) > limit:
            del self.messages[: len(self.messages) - limit]
            return True
        return False

    def render_messages(self) -> str:
        if not self.messages:
            return "No messages.\n"
        return "\n".join(self.messages) + "\n"

    def status(self, message: str) -> None:
        self._log(message)
        if self.on_status is not None:
            self.on_status(message)

    def _report_error(self, title: str, message: str, exc: Exception) -> None:
        self._log(f"{title}: {message} ({exc})")
        if self.on_error is not None:
            self.on_error(title, message, detail=str(exc))

    def _guarded(self, action: Callable[[], T], default: T) -> T:
        try:
            return action()
        except PatternError as exc:
            self._report_error("Pattern Error", "Invalid buffer pattern.", exc)
        except HostUnavailable as exc:
            self._report_error("Editor Error", "The editor could not complete the command.", exc)
        return default

    # ---------- Buffers ----------

    def switch_to_buffer(self, pattern: str) -> Document | None:
        def run() -> Document | None:
            doc = self.matcher.best_match(pattern)
            if doc is None:
                self.status(f"No buffer matches {pattern!r}")
                return None
            self.adapter.show_document(doc)
            self.status(f"Switched to {doc.name}")
            return doc

        return self._guarded(run, None)

    def list_buffers(self, pattern: str, partial: bool = True) -> list[str]:
        return self._guarded(lambda: self.matcher.list_matching(pattern, partial), [])

    def list_file_buffers(self, pattern: str, partial: bool = True) -> list[str]:
        return self._guarded(lambda: self.matcher.list_files_matching(pattern, partial), [])

    def _delete_documents(self, docs: Sequence[Document]) -> int:
        for doc in docs:
            self.adapter.delete_document(doc)
        return len(docs)

    def kill_matching_buffers(
        self, pattern: str, partial: bool = True, *, files: bool = False
    ) -> int:
        def run() -> int:
            if files:
                names = self.matcher.list_files_matching(pattern, partial)
            else:
                names = self.matcher.list_matching(pattern, partial)
            killed = self._delete_documents(self.matcher.documents_named(names))
            self.status(f"Killed {killed} buffer(s) matching {pattern!r}")
            return killed

        return self._guarded(run, 0)

    def kill_other_buffers(self, keep: Document) -> int:
        def run() -> int:
            victims = [
                doc
                for doc in snapshot_documents(self.adapter)
                if doc.name != keep.name and doc.name not in self.ignored
            ]
            killed = self._delete_documents(victims)
            self.status(f"Killed {killed} other buffer(s)")
            return killed

        return self._guarded(run, 0)

    # ---------- Windows ----------

    def switch_window(self, dx: int, dy: int) -> bool:
        return self._guarded(lambda: self.navigator.switch_direction(dx, dy), False)

    def window_left(self) -> bool:
        return self.switch_window(*LEFT)

    def window_right(self) -> bool:
        return self.switch_window(*RIGHT)

    def window_up(self) -> bool:
        return self.switch_window(*UP)

    def window_down(self) -> bool:
        return self.switch_window(*DOWN)

    # ---------- Region ----------

    def _indent_size(self) -> int:
        return int(self.cfg.get("indent_size", DEFAULTS["indent_size"]))

    def indent_region(self, lines: Sequence[str]) -> list[str]:
        return indent_block(lines, self._indent_size())

    def deindent_region(self, lines: Sequence[str]) -> list[str]:
        return deindent_block(lines, self._indent_size())

    def toggle_comment(self, lines: Sequence[str]) -> list[str]:
        prefix = self.cfg.get("comment_prefix") or DEFAULTS["comment_prefix"]
        return toggle_comment(lines, prefix)

    # ---------- Kill ring ----------

    def kill_line(self, text: str, offset: int, *, append: bool = False) -> tuple[str, str]:
        new_text, killed = kill_line(text, offset)
        self.kill_ring.push(killed, append=append)
        return new_text, killed

    def copy_line(self, text: str, offset: int) -> str:
        line = copy_line(text, offset)
        self.kill_ring.push(line)
        return line

    def yank(self) -> str | None:
        text = self.kill_ring.yank()
        if text is None:
            self.status("Kill ring is empty")
        return text

    def yank_pop(self) -> str | None:
        text = self.kill_ring.rotate()
        if text is None:
            self.status("Kill ring is empty")
        return text
