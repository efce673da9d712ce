from __future__ import annotations

from panebuf.commands import EditorCommands
from panebuf.config import DEFAULTS
from panebuf.host import Document


def _make_commands(host, **cfg_overrides):
    cfg = dict(DEFAULTS)
    cfg.update(cfg_overrides)
    statuses: list[str] = []
    errors: list[tuple[str, str, str | None]] = []
    commands = EditorCommands(
        host.make_adapter(),
        cfg,
        on_status=statuses.append,
        on_error=lambda title, message, detail=None: errors.append((title, message, detail)),
    )
    return commands, statuses, errors


def _docs(*names):
    return [Document(name) for name in names]


def test_switch_to_buffer_shows_best_match(fake_host_cls):
    host = fake_host_cls(documents=_docs("*Messages*", "messages.py", "main.py"))
    commands, statuses, errors = _make_commands(host)

    assert commands.switch_to_buffer("essages") == Document("messages.py")
    assert host.shown == ["messages.py"]
    assert statuses == ["Switched to messages.py"]
    assert errors == []


def test_switch_to_buffer_without_match_is_silent(fake_host_cls):
    host = fake_host_cls(documents=_docs("*Help*"))
    commands, statuses, errors = _make_commands(host, ignored_buffers=["*Help*"])

    assert commands.switch_to_buffer("Help") is None
    assert host.shown == []
    assert errors == []
    assert statuses == ["No buffer matches 'Help'"]


def test_pattern_errors_are_reported_not_raised(fake_host_cls):
    host = fake_host_cls(documents=_docs("a.txt"))
    commands, _statuses, errors = _make_commands(host)

    assert commands.switch_to_buffer("a(") is None
    assert commands.list_buffers("[") == []
    assert [title for title, _message, _detail in errors] == ["Pattern Error", "Pattern Error"]
    assert errors[0][2]


def test_host_errors_are_reported(fake_host_cls, grid_host):
    grid_host.stale = True
    commands, _statuses, errors = _make_commands(grid_host)

    assert commands.window_right() is False
    assert errors[0][0] == "Editor Error"
    assert "stale" in errors[0][2]


def test_list_buffers_and_file_buffers(fake_host_cls):
    host = fake_host_cls(
        documents=[
            Document("notes.md", "/home/user/notes.md"),
            Document("*Messages*"),
            Document("todo.md"),
        ]
    )
    commands, _statuses, _errors = _make_commands(host)

    assert commands.list_buffers("md") == ["notes.md", "todo.md"]
    assert commands.list_buffers("Messages") == ["*Messages*"]
    assert commands.list_file_buffers("user") == ["notes.md"]
    assert commands.list_buffers("", partial=True) == ["notes.md", "*Messages*", "todo.md"]


def test_kill_matching_buffers_deletes_every_match(fake_host_cls):
    host = fake_host_cls(documents=_docs("a.log", "b.txt", "c.log"))
    commands, statuses, _errors = _make_commands(host)

    assert commands.kill_matching_buffers(r"\.log$", partial=False) == 2
    assert host.deleted == ["a.log", "c.log"]
    assert [doc.name for doc in host.documents] == ["b.txt"]
    assert statuses[-1] == "Killed 2 buffer(s) matching '\\\\.log$'"


def test_kill_matching_buffers_by_file_path(fake_host_cls):
    host = fake_host_cls(
        documents=[
            Document("a", "/tmp/a.txt"),
            Document("b"),
            Document("c", "/srv/c.txt"),
        ]
    )
    commands, _statuses, _errors = _make_commands(host)

    assert commands.kill_matching_buffers("/tmp/", files=True) == 1
    assert host.deleted == ["a"]


def test_kill_other_buffers_keeps_current_and_ignored(fake_host_cls):
    host = fake_host_cls(documents=_docs("keep.py", "*Messages*", "other.py", "more.py"))
    commands, _statuses, _errors = _make_commands(host)

    assert commands.kill_other_buffers(Document("keep.py")) == 2
    assert host.deleted == ["other.py", "more.py"]


def test_window_commands_move_between_panes(grid_host):
    grid_host.active = "bottom_left"
    commands, _statuses, errors = _make_commands(grid_host)

    assert commands.window_right() is True
    assert grid_host.active == "bottom_right"
    assert commands.window_up() is True
    assert grid_host.active == "top_right"
    assert commands.window_left() is True
    assert grid_host.active == "top_left"
    assert commands.window_down() is True
    assert grid_host.active == "bottom_left"
    assert errors == []


def test_region_commands_use_config(fake_host_cls):
    commands, _statuses, _errors = _make_commands(
        fake_host_cls(), indent_size=2, comment_prefix="//"
    )

    assert commands.indent_region(["a", "b"]) == ["  a", "  b"]
    assert commands.deindent_region(["  a", "b"]) == ["a", "b"]
    assert commands.toggle_comment(["a"]) == ["// a"]
    assert commands.toggle_comment(["// a"]) == ["a"]


def test_kill_line_feeds_kill_ring(fake_host_cls):
    commands, statuses, _errors = _make_commands(fake_host_cls())

    assert commands.yank() is None
    assert statuses == ["Kill ring is empty"]

    text, killed = commands.kill_line("one\ntwo", 0)
    assert (text, killed) == ("\ntwo", "one")
    text, killed = commands.kill_line(text, 0, append=True)
    assert (text, killed) == ("two", "\n")
    assert commands.yank() == "one\n"

    assert commands.copy_line("two", 1) == "two"
    assert commands.yank() == "two"
    assert commands.yank_pop() == "one\n"


def test_message_log_retention(fake_host_cls):
    commands, _statuses, _errors = _make_commands(fake_host_cls(), log_entries_kept=2)

    assert commands.render_messages() == "No messages.\n"
    for idx in range(3):
        commands.status(f"message {idx}")

    assert len(commands.messages) == 2
    assert commands.messages[0].endswith("message 1")
    assert commands.render_messages().endswith("message 2\n")


def test_message_log_disabled(fake_host_cls):
    commands, statuses, _errors = _make_commands(fake_host_cls(), log_entries_kept=0)

    commands.status("hello")
    assert commands.messages == []
    assert statuses == ["hello"]
