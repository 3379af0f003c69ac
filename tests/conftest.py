"""Shared fixtures and helpers for linealign tests."""

import pytest
from typing import Optional, Sequence

from linealign.core.buffer import LineBuffer
from linealign.core.diff.line_differ import LineDiffer
from linealign.core.models import ChangeKind, Hunk, HunkStatus, RowRange, Side


class HunkFactory:
    """Builds hunks without going through the differ."""

    @staticmethod
    def added(base_row: int, source: tuple[int, int], side: Optional[Side] = None) -> Hunk:
        start, end = source
        return Hunk(
            kind=ChangeKind.ADDED,
            source_rows=RowRange(start, end),
            base_rows=RowRange.empty_at(base_row),
            lines=tuple(f"+{i}" for i in range(start, end)),
            side=side,
        )

    @staticmethod
    def deleted(base: tuple[int, int], source_row: int, side: Optional[Side] = None) -> Hunk:
        return Hunk(
            kind=ChangeKind.DELETED,
            source_rows=RowRange.empty_at(source_row),
            base_rows=RowRange(*base),
            side=side,
        )

    @staticmethod
    def modified(
        base: tuple[int, int],
        source: tuple[int, int],
        side: Optional[Side] = None,
        status: HunkStatus = HunkStatus.PENDING
    ) -> Hunk:
        start, end = source
        return Hunk(
            kind=ChangeKind.MODIFIED,
            source_rows=RowRange(start, end),
            base_rows=RowRange(*base),
            lines=tuple(f"~{i}" for i in range(start, end)),
            side=side,
            status=status,
        )


class Helpers:
    """Small text helpers shared by tests."""

    @staticmethod
    def lines(text: str) -> list[str]:
        return text.split("\n") if text else []

    @staticmethod
    def buffer(lines: Sequence[str]) -> LineBuffer:
        return LineBuffer(lines)


@pytest.fixture
def differ():
    """A differ with default options."""
    return LineDiffer()


@pytest.fixture
def hunks():
    """Factory for hand-built hunks."""
    return HunkFactory()


@pytest.fixture
def helpers():
    """Text helpers."""
    return Helpers()


@pytest.fixture
def scenario_c():
    """Base, theirs and ours texts where each side changes a different spot."""
    return ("1\n2\n3", "1\nT\n3", "1\n2\n3\nO")
