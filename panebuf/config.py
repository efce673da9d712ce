# panebuf/config.py
from __future__ import annotations

import contextlib
import json
import os
import shutil
import tempfile
from datetime import datetime

APP_DIR = os.path.expanduser("~/.panebuf")
CONFIG_PATH = os.path.join(APP_DIR, "config.json")

MESSAGES_BUFFER = "*Messages*"

DEFAULTS = {
    "ignored_buffers": [MESSAGES_BUFFER, "*Help*", "*Completions*", "*Buffer List*"],
    "indent_size": 4,
    "comment_prefix": "#",
    "kill_ring_max": 60,
    "log_entries_kept": 200,
    "pane_rows": 2,
    "pane_columns": 2,
    "font_family": "TkFixedFont",
    "font_size": 12,
    "fg": "#141414",
    "bg": "#d8d8d8",
    "keybindings": {
        "switch_to_buffer": "<Alt-b>",
        "list_buffers": "<Alt-l>",
        "kill_matching_buffers": "<Alt-k>",
        "kill_other_buffers": "<Alt-o>",
        "window_left": "<Shift-Left>",
        "window_right": "<Shift-Right>",
        "window_up": "<Shift-Up>",
        "window_down": "<Shift-Down>",
        "indent_region": "<Control-bracketright>",
        "deindent_region": "<Control-bracketleft>",
        "toggle_comment": "<Control-semicolon>",
        "kill_line": "<Control-k>",
        "copy_line": "<Alt-w>",
        "yank": "<Control-y>",
        "yank_pop": "<Alt-y>",
        "show_messages": "<Alt-m>",
        "save_buffer": "<Control-s>",
    },
}


class ConfigSaveError(Exception):
    """Raised when the configuration cannot be written to disk."""


def _backup_corrupt_config() -> None:
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    with contextlib.suppress(OSError):
        shutil.copyfile(CONFIG_PATH, f"{CONFIG_PATH}.corrupt-{stamp}")


def _fresh_defaults() -> dict:
    return json.loads(json.dumps(DEFAULTS))


def load_config() -> dict:
    deprecated_keys = {"probe_offset_px"}
    try:
        if not os.path.exists(CONFIG_PATH):
            with contextlib.suppress(ConfigSaveError):
                save_config(DEFAULTS)
            return _fresh_defaults()
        with open(CONFIG_PATH, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("config root must be a JSON object")
    except (OSError, ValueError):
        if os.path.exists(CONFIG_PATH):
            _backup_corrupt_config()
        with contextlib.suppress(ConfigSaveError):
            save_config(DEFAULTS)
        return _fresh_defaults()

    changed = False
    for k in list(data):
        if k in deprecated_keys:
            data.pop(k, None)
            changed = True
    for k, v in DEFAULTS.items():
        if k not in data:
            data[k] = json.loads(json.dumps(v))
            changed = True
    if isinstance(data.get("keybindings"), dict):
        for name, seq in DEFAULTS["keybindings"].items():
            if name not in data["keybindings"]:
                data["keybindings"][name] = seq
                changed = True
    if changed:
        with contextlib.suppress(ConfigSaveError):
            save_config(data)
    return data


def save_config(cfg: dict) -> None:
    tmp_path: str | None = None
    try:
        os.makedirs(APP_DIR, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix="config.", suffix=".tmp", dir=APP_DIR)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(cfg, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, CONFIG_PATH)
    except Exception as exc:
        if tmp_path is not None:
            with contextlib.suppress(Exception):
                os.unlink(tmp_path)
        raise ConfigSaveError(f"Failed to save config to {CONFIG_PATH}: {exc}") from exc
