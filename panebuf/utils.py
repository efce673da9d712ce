from __future__ import annotations


def offset_to_tkindex(content: str, offset: int) -> str:
    """Convert a Python-string offset to a Tk index using UTF-16 code units."""

    if offset <= 0:
        return "1.0"

    prefix = content[:offset]
    line_no = prefix.count("\n") + 1
    last_newline = prefix.rfind("\n")
    col_text = prefix if last_newline == -1 else prefix[last_newline + 1 :]

    col_units = len(col_text.encode("utf-16-le")) // 2
    return f"{line_no}.{col_units}"


def region_line_span(first: str, last: str) -> tuple[int, int]:
    """Return the inclusive line numbers covered by Tk indices ``first``..``last``.

    A region ending at column 0 of a later line does not include that line.
    """

    first_line = int(first.split(".", 1)[0])
    last_line, last_col = (int(part) for part in last.split(".", 1))
    if last_line > first_line and last_col == 0:
        last_line -= 1
    return first_line, last_line
