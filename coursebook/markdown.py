"""Markdown helpers: relative links, durations and tables."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable, Iterator, Sequence


def _ancestors(path: PurePosixPath) -> Iterator[tuple[str, ...]]:
    parts = path.parts
    lowest = 1 if path.is_absolute() else 0
    for length in range(len(parts), lowest - 1, -1):
        yield parts[:length]


def relative_link(doc_path: str | PurePosixPath, target_path: str | PurePosixPath) -> str:
    """Return a link to ``target_path`` relative to the document at ``doc_path``."""
    doc = PurePosixPath(doc_path)
    target = PurePosixPath(target_path)

    dotdot = -1
    for ancestor in _ancestors(doc):
        if target.parts[: len(ancestor)] == ancestor:
            break
        dotdot += 1
    if dotdot > 0:
        return "../" * dotdot + str(target)
    return f"./{target}"


def duration(minutes: int) -> str:
    """Describe a duration readably, rounding anything over 5 minutes up to 5."""
    if minutes > 5:
        minutes += 4
        minutes -= minutes % 5

    hours, minutes = divmod(minutes, 60)
    if hours == 0:
        return "1 minute" if minutes == 1 else f"{minutes} minutes"
    hour_text = "1 hour" if hours == 1 else f"{hours} hours"
    if minutes == 0:
        return hour_text
    return f"{hour_text} and {minutes} minutes"


class Table:
    """A table with a fixed number of columns that renders as GFM Markdown."""

    def __init__(self, header: Sequence[str]) -> None:
        self.header = tuple(header)
        self.rows: list[tuple[str, ...]] = []

    def add_row(self, row: Sequence[str]) -> None:
        """Append a row; it must have as many cells as the header."""
        row = tuple(row)
        if len(row) != len(self.header):
            raise ValueError(
                f"row has {len(row)} cells but the table has {len(self.header)} columns"
            )
        self.rows.append(row)

    @staticmethod
    def _format_row(cells: Iterable[str]) -> str:
        return "|" + "".join(f" {cell} |" for cell in cells) + "\n"

    def __str__(self) -> str:
        lines = [
            self._format_row(self.header),
            self._format_row("-" for _ in self.header),
            *(self._format_row(row) for row in self.rows),
        ]
        return "".join(lines)