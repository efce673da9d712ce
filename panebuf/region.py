import re
from collections.abc import Sequence

_LEADING_WS_RE = re.compile(r"[ \t]*")


def leading_whitespace(text: str) -> str:
    match = _LEADING_WS_RE.match(text)
    return match.group(0) if match else ""


def _clamp_indent(indent_size: int) -> int:
    return max(1, min(indent_size, 8))


def indent_unit(lines: Sequence[str], indent_size: int) -> str:
    prefixes = [leading_whitespace(line) for line in lines]
    non_empty = [prefix for prefix in prefixes if prefix]
    if non_empty and all(set(prefix) <= {"\t"} for prefix in non_empty):
        return "\t"
    return " " * _clamp_indent(indent_size)


def indent_block(lines: Sequence[str], indent_size: int) -> list[str]:
    unit = indent_unit(lines, indent_size)
    return [f"{unit}{line}" if line.strip() else line for line in lines]


def deindent_block(lines: Sequence[str], indent_size: int) -> list[str]:
    unit = indent_unit(lines, indent_size)
    result: list[str] = []
    for line in lines:
        if unit == "\t":
            result.append(line[1:] if line.startswith("\t") else line)
            continue
        space_count = len(line) - len(line.lstrip(" "))
        result.append(line[min(space_count, len(unit)) :])
    return result


def _is_commented(line: str, prefix: str) -> bool:
    return line[len(leading_whitespace(line)) :].startswith(prefix)


def toggle_comment(lines: Sequence[str], prefix: str) -> list[str]:
    """Comment out ``lines``, or uncomment them if all are already commented.

    Blank lines are left alone and do not count when deciding the direction.
    """

    if not prefix:
        raise ValueError("comment prefix must not be empty")

    code_lines = [line for line in lines if line.strip()]
    if not code_lines:
        return list(lines)

    if all(_is_commented(line, prefix) for line in code_lines):
        result: list[str] = []
        for line in lines:
            if not line.strip():
                result.append(line)
                continue
            ws = leading_whitespace(line)
            body = line[len(ws) + len(prefix) :]
            if body.startswith(" "):
                body = body[1:]
            result.append(ws + body)
        return result

    column = min(len(leading_whitespace(line)) for line in code_lines)
    return [
        f"{line[:column]}{prefix} {line[column:]}" if line.strip() else line
        for line in lines
    ]
