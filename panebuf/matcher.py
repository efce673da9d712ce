"""Find open documents by name or backing-file path.

Matching is a linear scan in host enumeration order; that order is the
ranking signal. ``best_match`` prefers an exact name over any substring hit
and skips ignored helper documents on the substring pass only.
"""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence

from .host import Document, HostAdapter, snapshot_documents


class PatternError(ValueError):
    """Raised when a match pattern is not a valid regular expression."""


def contains_pattern(pattern: str) -> str:
    return f"^.*{pattern}.*$"


def compile_pattern(pattern: str, *, partial: bool) -> re.Pattern[str]:
    source = contains_pattern(pattern) if partial else pattern
    try:
        return re.compile(source)
    except re.error as exc:
        raise PatternError(f"Invalid pattern {pattern!r}: {exc}") from exc


def best_match(
    documents: Sequence[Document], pattern: str, ignored: Iterable[str] = ()
) -> Document | None:
    for doc in documents:
        if doc.name == pattern:
            return doc

    regex = compile_pattern(pattern, partial=True)
    ignored_names = set(ignored)
    for doc in documents:
        if not regex.search(doc.name):
            continue
        if doc.name in ignored_names:
            continue
        return doc
    return None


def _collect_names(
    documents: Sequence[Document],
    pattern: str,
    partial: bool,
    key: Callable[[Document], str | None],
) -> list[str]:
    regex = compile_pattern(pattern, partial=partial)
    names: list[str] = []
    seen: set[str] = set()
    for doc in documents:
        value = key(doc)
        if value is None or not regex.search(value):
            continue
        if doc.name in seen:
            continue
        seen.add(doc.name)
        names.append(doc.name)
    return names


def list_matching(
    documents: Sequence[Document], pattern: str, partial: bool = False
) -> list[str]:
    """Return names of documents whose name matches ``pattern``.

    With ``partial`` the pattern is wrapped to match anywhere in the name.
    The ignore list does not apply here.
    """

    return _collect_names(documents, pattern, partial, lambda doc: doc.name)


def list_files_matching(
    documents: Sequence[Document], pattern: str, partial: bool = False
) -> list[str]:
    """Like :func:`list_matching` but matched against backing-file paths.

    Documents without a backing file are skipped; display names are returned.
    """

    return _collect_names(documents, pattern, partial, lambda doc: doc.path)


class DocumentMatcher:
    """Runs the match functions against a fresh snapshot of the host."""

    def __init__(self, adapter: HostAdapter, ignored: Iterable[str] = ()) -> None:
        self.adapter = adapter
        self.ignored = frozenset(ignored)

    def best_match(self, pattern: str) -> Document | None:
        return best_match(snapshot_documents(self.adapter), pattern, self.ignored)

    def list_matching(self, pattern: str, partial: bool = False) -> list[str]:
        return list_matching(snapshot_documents(self.adapter), pattern, partial)

    def list_files_matching(self, pattern: str, partial: bool = False) -> list[str]:
        return list_files_matching(snapshot_documents(self.adapter), pattern, partial)

    def documents_named(self, names: Iterable[str]) -> list[Document]:
        wanted = set(names)
        return [doc for doc in snapshot_documents(self.adapter) if doc.name in wanted]
