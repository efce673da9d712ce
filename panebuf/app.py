#!/usr/bin/env python3
"""
panebuf: Tkinter editor with a grid of panes, buffer matching,
directional pane switching, region tools and a kill ring.
"""

import contextlib
import os
import sys
import tkinter as tk
import tkinter.font as tkfont
from collections.abc import Callable, Iterable, Sequence
from tkinter import simpledialog, ttk

from .commands import EditorCommands
from .config import CONFIG_PATH, DEFAULTS, MESSAGES_BUFFER, ConfigSaveError, load_config, save_config
from .host import BoundingBox, Document, HostAdapter, HostUnavailable
from .utils import offset_to_tkindex, region_line_span

SCRATCH_BUFFER = "*scratch*"
BUFFER_LIST_BUFFER = "*Buffer List*"

TEXT_COMMANDS = frozenset(
    {
        "indent_region",
        "deindent_region",
        "toggle_comment",
        "kill_line",
        "copy_line",
        "yank",
        "yank_pop",
    }
)

MODIFIER_KEYSYMS = frozenset(
    {
        "Shift_L",
        "Shift_R",
        "Control_L",
        "Control_R",
        "Alt_L",
        "Alt_R",
        "Meta_L",
        "Meta_R",
        "Super_L",
        "Super_R",
        "Caps_Lock",
        "ISO_Level3_Shift",
    }
)


def _cursor_offset_from_text_widget(text) -> int | None:
    try:
        return len(text.get("1.0", tk.INSERT))
    except Exception:
        return None


class PaneBufPad(tk.Tk):
    def __init__(self):
        super().__init__()
        self.title("panebuf")
        self.geometry("1100x750")

        self.cfg = load_config()
        self.app_font = tkfont.Font(family=self.cfg["font_family"], size=self.cfg["font_size"])

        try:
            self.style = ttk.Style(self)
            if "clam" in self.style.theme_names():
                self.style.theme_use("clam")
        except tk.TclError:
            pass

        self.documents: dict[str, dict] = {}
        self._doc_order: list[str] = []
        self.panes: list[tk.Text] = []
        self._pane_docs: dict[tk.Text, str] = {}
        self._active_pane: tk.Text | None = None
        self._last_command: str | None = None
        self._previous_command: str | None = None
        self._shortcut_bindings: list[tuple[str, Callable[[tk.Event], str | None]]] = []

        self.host = self._make_host_adapter()
        self.commands = EditorCommands(
            self.host,
            self.cfg,
            on_status=self._set_status,
            on_error=self._show_error,
        )

        self._new_document(SCRATCH_BUFFER)
        self._new_document(MESSAGES_BUFFER)
        self._touch(SCRATCH_BUFFER)

        self._register_shortcuts()
        self._build_panes()
        self._build_status_bar()

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # ---------- Layout ----------

    def _build_panes(self) -> None:
        rows = max(1, int(self.cfg.get("pane_rows", DEFAULTS["pane_rows"])))
        cols = max(1, int(self.cfg.get("pane_columns", DEFAULTS["pane_columns"])))

        self.pane_area = tk.Frame(self, bg=self.cfg["fg"], borderwidth=0, highlightthickness=0)
        self.pane_area.pack(fill=tk.BOTH, expand=True)
        for r in range(rows):
            self.pane_area.grid_rowconfigure(r, weight=1, uniform="pane_rows")
        for c in range(cols):
            self.pane_area.grid_columnconfigure(c, weight=1, uniform="pane_cols")

        for r in range(rows):
            for c in range(cols):
                text = tk.Text(
                    self.pane_area,
                    undo=True,
                    maxundo=-1,
                    wrap=tk.NONE,
                    highlightthickness=0,
                    borderwidth=0,
                    relief=tk.FLAT,
                    font=self.app_font,
                    fg=self.cfg["fg"],
                    bg=self.cfg["bg"],
                )
                text.grid(row=r, column=c, sticky="nsew", padx=(0, 1), pady=(0, 1))
                text.bind("<FocusIn>", lambda _e, t=text: self._on_pane_focus(t), add="+")
                text.bind("<Key>", self._on_pane_input, add="+")
                text.bind("<Button>", self._on_pane_input, add="+")
                self._bind_shortcuts_to_text(text)
                self.panes.append(text)
                self._pane_docs[text] = SCRATCH_BUFFER
                self._load_into_pane(text, SCRATCH_BUFFER)

        self._active_pane = self.panes[0]
        self.after_idle(self._active_pane.focus_set)

    def _build_status_bar(self) -> None:
        self.status_var = tk.StringVar(value="")
        status = ttk.Label(self, textvariable=self.status_var, anchor="w", padding=(6, 2))
        status.pack(fill=tk.X, side=tk.BOTTOM)

    def _set_status(self, message: str) -> None:
        self.status_var.set(message)
        self._refresh_special_buffer(MESSAGES_BUFFER, self.commands.render_messages())

    def _update_title(self) -> None:
        name = self._pane_docs.get(self._active_pane) if self._active_pane else None
        self.title(f"panebuf - {name}" if name else "panebuf")

    # ---------- Shortcuts ----------

    def _make_shortcut_handler(
        self, callback: Callable[[], None], *, require_text_focus: bool = False
    ) -> Callable[[tk.Event], str | None]:
        def handler(_event: tk.Event | None = None) -> str | None:
            if require_text_focus and self.focus_get() is not self._current_text_widget():
                return None
            callback()
            return "break"

        return handler

    def _command_table(self) -> dict[str, Callable[[], None]]:
        return {
            "switch_to_buffer": self._prompt_switch_to_buffer,
            "list_buffers": self._show_buffer_list,
            "kill_matching_buffers": self._prompt_kill_matching_buffers,
            "kill_other_buffers": self._kill_other_buffers,
            "window_left": self.commands.window_left,
            "window_right": self.commands.window_right,
            "window_up": self.commands.window_up,
            "window_down": self.commands.window_down,
            "indent_region": lambda: self._transform_region(self.commands.indent_region),
            "deindent_region": lambda: self._transform_region(self.commands.deindent_region),
            "toggle_comment": lambda: self._transform_region(self.commands.toggle_comment),
            "kill_line": self._kill_line,
            "copy_line": self._copy_line,
            "yank": self._yank,
            "yank_pop": self._yank_pop,
            "show_messages": self._show_messages,
            "save_buffer": self._save_current,
        }

    def _run_command(self, name: str, callback: Callable[[], object]) -> None:
        self._previous_command = self._last_command
        self._last_command = name
        callback()

    def _on_pane_input(self, event: tk.Event | None = None) -> None:
        # Command keys hit their own, more specific binding and never get here.
        if getattr(event, "keysym", "") not in MODIFIER_KEYSYMS:
            self._last_command = None

    def _register_shortcuts(self) -> None:
        self._shortcut_bindings.clear()
        bindings = dict(DEFAULTS["keybindings"])
        bindings.update(self.cfg.get("keybindings") or {})

        table = self._command_table()
        for name, sequence in bindings.items():
            callback = table.get(name)
            if callback is None or not sequence:
                continue
            handler = self._make_shortcut_handler(
                lambda n=name, cb=callback: self._run_command(n, cb),
                require_text_focus=name in TEXT_COMMANDS,
            )
            try:
                self.bind_all(sequence, handler, add="+")
            except tk.TclError as exc:
                self._set_status_later(f"Bad key sequence for {name}: {exc}")
                continue
            self._shortcut_bindings.append((sequence, handler))

    def _set_status_later(self, message: str) -> None:
        self.after_idle(lambda: self.commands.status(message))

    def _bind_shortcuts_to_text(self, text: tk.Text) -> None:
        for sequence, handler in self._shortcut_bindings:
            text.bind(sequence, handler)

    # ---------- Documents ----------

    def _unique_name(self, base: str) -> str:
        if base not in self.documents:
            return base
        n = 2
        while f"{base}<{n}>" in self.documents:
            n += 1
        return f"{base}<{n}>"

    def _new_document(self, name: str, content: str = "", path: str | None = None) -> Document:
        doc = Document(name=self._unique_name(name), path=path)
        self.documents[doc.name] = {"doc": doc, "content": content, "dirty": False}
        self._doc_order.append(doc.name)
        return doc

    def _touch(self, name: str) -> None:
        if name in self._doc_order:
            self._doc_order.remove(name)
        self._doc_order.insert(0, name)

    def _store_pane(self, pane: tk.Text) -> None:
        name = self._pane_docs.get(pane)
        st = self.documents.get(name or "")
        if st is None:
            return
        content = pane.get("1.0", "end-1c")
        if content == st["content"]:
            return
        st["content"] = content
        st["dirty"] = True
        for other, other_name in self._pane_docs.items():
            if other is not pane and other_name == name:
                self._load_into_pane(other, name)

    def _load_into_pane(self, pane: tk.Text, name: str) -> None:
        content = self.documents[name]["content"]
        pane.delete("1.0", tk.END)
        pane.insert("1.0", content)
        pane.mark_set(tk.INSERT, "1.0")
        pane.edit_reset()

    def _refresh_special_buffer(self, name: str, body: str) -> Document:
        st = self.documents.get(name)
        if st is None:
            doc = self._new_document(name, body)
            return doc
        st["content"] = body
        for pane, pane_name in self._pane_docs.items():
            if pane_name == name:
                self._load_into_pane(pane, name)
        return st["doc"]

    def open_files(self, paths: Iterable[str]) -> None:
        path_list = [os.path.abspath(os.path.expanduser(p)) for p in paths if p]
        opened: Document | None = None
        for path in path_list:
            try:
                with open(path, encoding="utf-8") as f:
                    data = f.read()
            except Exception as e:
                self._show_error("Open Error", "Could not open the file.", detail=str(e))
                continue
            doc = self._new_document(os.path.basename(path), data, path)
            if opened is None:
                opened = doc
        if opened is not None:
            self._host_show_document(opened)

    def _save_current(self) -> None:
        pane = self._active_pane
        if pane is None:
            return
        self._store_pane(pane)
        st = self.documents.get(self._pane_docs.get(pane, ""))
        if not st or not st["doc"].path:
            self.commands.status("Buffer has no backing file")
            return
        try:
            with open(st["doc"].path, "w", encoding="utf-8") as f:
                f.write(st["content"])
            st["dirty"] = False
            self.commands.status(f"Wrote {st['doc'].path}")
        except Exception as e:
            self._show_error("Save Error", "Could not save the file.", detail=str(e))

    # ---------- Host adapter ----------

    def _make_host_adapter(self) -> HostAdapter:
        return HostAdapter(
            list_documents=self._host_list_documents,
            delete_document=self._host_delete_document,
            show_document=self._host_show_document,
            active_pane=self._host_active_pane,
            set_active_pane=self._host_set_active_pane,
            pane_box=self._host_pane_box,
            cursor_offset=self._host_cursor_offset,
            frame_size=self._host_frame_size,
            pane_at=self._host_pane_at,
        )

    @staticmethod
    def _tk_call(func: Callable[..., object], *args: object):
        try:
            return func(*args)
        except tk.TclError as exc:
            raise HostUnavailable(str(exc)) from exc

    def _host_list_documents(self) -> list[Document]:
        return [self.documents[name]["doc"] for name in self._doc_order]

    def _host_show_document(self, doc: Document) -> None:
        if doc.name not in self.documents:
            raise HostUnavailable(f"No such buffer: {doc.name}")
        pane = self._host_active_pane()
        if self._pane_docs.get(pane) != doc.name:
            self._tk_call(self._store_pane, pane)
            self._pane_docs[pane] = doc.name
        self._tk_call(self._load_into_pane, pane, doc.name)
        self._touch(doc.name)
        self._update_title()

    def _host_delete_document(self, doc: Document) -> None:
        if doc.name not in self.documents:
            raise HostUnavailable(f"No such buffer: {doc.name}")
        for pane in self.panes:
            self._tk_call(self._store_pane, pane)
        self.documents.pop(doc.name)
        self._doc_order.remove(doc.name)
        if not self._doc_order:
            self._new_document(SCRATCH_BUFFER)
        replacement = self._doc_order[0]
        for pane, name in list(self._pane_docs.items()):
            if name == doc.name:
                self._pane_docs[pane] = replacement
                self._tk_call(self._load_into_pane, pane, replacement)
        self._update_title()

    def _host_active_pane(self) -> tk.Text:
        if self._active_pane is None:
            raise HostUnavailable("No active pane")
        return self._active_pane

    def _host_set_active_pane(self, pane: tk.Text) -> None:
        if pane not in self._pane_docs:
            raise HostUnavailable(f"Unknown pane: {pane}")
        self._tk_call(pane.focus_set)
        self._on_pane_focus(pane)

    def _on_pane_focus(self, pane: tk.Text) -> None:
        previous = self._active_pane
        if previous is not None and previous is not pane:
            with contextlib.suppress(tk.TclError):
                self._store_pane(previous)
        self._active_pane = pane
        self._update_title()

    def _host_pane_box(self, pane: tk.Text) -> BoundingBox:
        left = self._tk_call(pane.winfo_rootx) - self._tk_call(self.pane_area.winfo_rootx)
        top = self._tk_call(pane.winfo_rooty) - self._tk_call(self.pane_area.winfo_rooty)
        width = self._tk_call(pane.winfo_width)
        height = self._tk_call(pane.winfo_height)
        return BoundingBox(left, top, left + width, top + height)

    def _host_cursor_offset(self, pane: tk.Text) -> tuple[int, int]:
        bbox = self._tk_call(pane.bbox, tk.INSERT)
        if not bbox:
            return 0, 0
        return bbox[0], bbox[1]

    def _host_frame_size(self) -> tuple[int, int]:
        return (
            self._tk_call(self.pane_area.winfo_width),
            self._tk_call(self.pane_area.winfo_height),
        )

    def _host_pane_at(self, x: int, y: int) -> tk.Text | None:
        root_x = self._tk_call(self.pane_area.winfo_rootx) + x
        root_y = self._tk_call(self.pane_area.winfo_rooty) + y
        widget = self._tk_call(self.winfo_containing, root_x, root_y)
        while widget is not None:
            if widget in self._pane_docs:
                return widget
            widget = widget.master
        return None

    # ---------- Buffer commands ----------

    def _current_text_widget(self) -> tk.Text | None:
        return self._active_pane

    def _current_document(self) -> Document | None:
        name = self._pane_docs.get(self._active_pane) if self._active_pane else None
        st = self.documents.get(name or "")
        return st["doc"] if st else None

    def _prompt_switch_to_buffer(self) -> None:
        pattern = simpledialog.askstring("Switch to Buffer", "Buffer name or pattern:", parent=self)
        if pattern:
            self.commands.switch_to_buffer(pattern)

    def _show_buffer_list(self) -> None:
        names = self.commands.list_buffers("")
        lines = []
        for name in names:
            st = self.documents.get(name)
            path = st["doc"].path if st else None
            marker = "*" if st and st["dirty"] else " "
            lines.append(f"{marker} {name:<30} {path or ''}".rstrip())
        doc = self._refresh_special_buffer(BUFFER_LIST_BUFFER, "\n".join(lines) + "\n")
        self._host_show_document(doc)

    def _prompt_kill_matching_buffers(self) -> None:
        pattern = simpledialog.askstring("Kill Buffers", "Kill buffers matching:", parent=self)
        if pattern:
            self.commands.kill_matching_buffers(pattern)

    def _kill_other_buffers(self) -> None:
        doc = self._current_document()
        if doc is not None:
            self.commands.kill_other_buffers(doc)

    def _show_messages(self) -> None:
        doc = self._refresh_special_buffer(MESSAGES_BUFFER, self.commands.render_messages())
        self._host_show_document(doc)

    # ---------- Text commands ----------

    def _transform_region(self, transform: Callable[[Sequence[str]], list[str]]) -> None:
        text = self._current_text_widget()
        if text is None:
            return
        try:
            first, last = text.index("sel.first"), text.index("sel.last")
        except tk.TclError:
            first = last = text.index(tk.INSERT)
        first_line, last_line = region_line_span(first, last)
        start, end = f"{first_line}.0", f"{last_line}.end"
        lines = text.get(start, end).split("\n")
        try:
            new_lines = transform(lines)
        except ValueError as exc:
            self._show_error("Region Error", "Could not transform the region.", detail=str(exc))
            return
        text.edit_separator()
        text.delete(start, end)
        text.insert(start, "\n".join(new_lines))
        text.edit_separator()
        text.tag_remove("sel", "1.0", tk.END)
        text.tag_add("sel", start, f"{first_line + len(new_lines) - 1}.end")

    def _kill_line(self) -> None:
        text = self._current_text_widget()
        if text is None:
            return
        offset = _cursor_offset_from_text_widget(text)
        if offset is None:
            return
        content = text.get("1.0", "end-1c")
        append = self._previous_command == "kill_line"
        _new_content, killed = self.commands.kill_line(content, offset, append=append)
        if killed:
            text.delete(
                offset_to_tkindex(content, offset),
                offset_to_tkindex(content, offset + len(killed)),
            )

    def _copy_line(self) -> None:
        text = self._current_text_widget()
        if text is None:
            return
        offset = _cursor_offset_from_text_widget(text)
        if offset is None:
            return
        line = self.commands.copy_line(text.get("1.0", "end-1c"), offset)
        self.commands.status(f"Copied {len(line)} character(s)")

    def _insert_yank(self, text: tk.Text, value: str) -> None:
        start = text.index(tk.INSERT)
        text.insert(tk.INSERT, value)
        text.mark_set("yank_start", start)
        text.mark_gravity("yank_start", tk.LEFT)
        text.mark_set("yank_end", tk.INSERT)

    def _yank(self) -> None:
        text = self._current_text_widget()
        value = self.commands.yank()
        if text is None or value is None:
            return
        self._insert_yank(text, value)

    def _yank_pop(self) -> None:
        text = self._current_text_widget()
        if text is None:
            return
        if self._previous_command not in ("yank", "yank_pop"):
            self.commands.status("Previous command was not a yank")
            return
        value = self.commands.yank_pop()
        if value is None:
            return
        try:
            text.delete("yank_start", "yank_end")
            text.mark_set(tk.INSERT, "yank_start")
        except tk.TclError:
            return
        self._insert_yank(text, value)

    # ---------- Dialogs ----------

    def _show_error(
        self,
        title: str,
        message: str,
        detail: str | None = None,
    ) -> None:
        dialog = tk.Toplevel(self)
        dialog.title(title)
        dialog.resizable(False, False)
        dialog.transient(self)

        frame = ttk.Frame(dialog, padding=12)
        frame.grid(row=0, column=0, sticky="nsew")
        dialog.columnconfigure(0, weight=1)

        ttk.Label(frame, text=message, justify="left", wraplength=480).grid(
            row=0, column=0, sticky="w"
        )
        row = 1
        if detail:
            ttk.Label(frame, text=f"Details: {detail}", justify="left", wraplength=480).grid(
                row=row, column=0, sticky="w", pady=(10, 0)
            )
            row += 1

        ok_btn = ttk.Button(frame, text="OK", command=dialog.destroy)
        ok_btn.grid(row=row, column=0, pady=(12, 0), sticky="e")
        ok_btn.focus_set()

        dialog.protocol("WM_DELETE_WINDOW", dialog.destroy)
        with contextlib.suppress(tk.TclError):
            dialog.grab_set()
        self.wait_window(dialog)

    # ---------- Close / Quit ----------

    def _persist_config(self) -> None:
        try:
            save_config(self.cfg)
        except ConfigSaveError as exc:
            self._show_error(
                "Config Save Failed",
                f"Could not save settings to {CONFIG_PATH}.",
                detail=str(exc),
            )

    def _on_close(self):
        self._persist_config()
        self.destroy()


def main(
    argv: Sequence[str] | None = None,
    app_factory: Callable[[], PaneBufPad] = PaneBufPad,
) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    app = app_factory()
    if args:
        open_files = getattr(app, "open_files", None)
        if callable(open_files):
            open_files(args)
    app.mainloop()


if __name__ == "__main__":
    main()
