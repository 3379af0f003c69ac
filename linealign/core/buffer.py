"""
Line-addressable text views.

The core never owns editor buffers. It reads lines from a ``TextSnapshot``
and edits the base text only through a ``TextMutator``. ``LineBuffer`` is an
in-memory mutator for hosts without an editor (the CLI, tests, workers).
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from linealign.core.errors import InputError

_buffer_ids = itertools.count(1)


def split_lines(text: str) -> list[str]:
    """
    Split text into rows.

    Rows are separated by ``\\n``; a trailing newline yields a final empty
    row, the way an editor shows it. The empty string has no rows.
    """
    if not text:
        return []
    return text.split("\n")


def join_lines(lines: Sequence[str]) -> str:
    """Inverse of ``split_lines``."""
    return "\n".join(lines)


@dataclass(frozen=True)
class TextSnapshot:
    """Immutable view of a buffer at one revision."""
    buffer_id: int
    revision: int
    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str, buffer_id: int = 0, revision: int = 0) -> TextSnapshot:
        return cls(buffer_id, revision, tuple(split_lines(text)))

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def text(self) -> str:
        return join_lines(self.lines)

    def line(self, row: int) -> str:
        return self.lines[row]


class TextMutator(Protocol):
    """Mutation callback the core uses to edit the base buffer."""

    def line_count(self) -> int:
        ...

    def replace_lines(self, start: int, end: int, lines: Sequence[str]) -> None:
        ...


class EditableText(TextMutator, Protocol):
    """A mutable base buffer that can also hand out snapshots."""

    def snapshot(self) -> TextSnapshot:
        ...


class LineBuffer:
    """
    Mutable list-of-lines buffer.

    Every edit bumps the revision so snapshots taken before it can be told
    apart from ones taken after.
    """

    def __init__(self, lines: Sequence[str] = ()):
        self.buffer_id = next(_buffer_ids)
        self._lines: list[str] = list(lines)
        self._revision = 0

    @classmethod
    def from_text(cls, text: str) -> LineBuffer:
        return cls(split_lines(text))

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def lines(self) -> list[str]:
        """Copy of the current lines."""
        return list(self._lines)

    @property
    def text(self) -> str:
        return join_lines(self._lines)

    def line_count(self) -> int:
        return len(self._lines)

    def snapshot(self) -> TextSnapshot:
        return TextSnapshot(self.buffer_id, self._revision, tuple(self._lines))

    def replace_lines(self, start: int, end: int, lines: Sequence[str]) -> None:
        """Replace rows ``[start, end)`` with ``lines``."""
        if start < 0 or start > end or end > len(self._lines):
            raise InputError(
                f"Cannot replace rows [{start}, {end}) in a buffer of {len(self._lines)} lines",
                {"start": start, "end": end, "line_count": len(self._lines)},
            )
        self._lines[start:end] = list(lines)
        self._revision += 1
        logging.debug(
            f"LineBuffer - Buffer {self.buffer_id} rows [{start}, {end}) replaced by "
            f"{len(lines)} lines (revision {self._revision})"
        )

    def __len__(self) -> int:
        return len(self._lines)
