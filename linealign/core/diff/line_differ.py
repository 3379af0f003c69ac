"""
Line diff engine.

Produces an ordered, deterministic list of edit operations that turns an old
line sequence into a new one. Supports:
- Myers shortest edit script (default)
- Patience diff (unique-line anchors)
- Ratcliff/Obershelp matching via difflib
- Whitespace, case and line-ending normalization for comparison
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from linealign.core.errors import CapacityError
from linealign.core.models import EditOperation, OpTag, RowRange


class DiffAlgorithm(Enum):
    """Available diff algorithms."""
    MYERS = auto()          # Shortest edit script, O((N+M)D)
    PATIENCE = auto()       # Anchors on lines unique to both sides
    RATCLIFF = auto()       # difflib.SequenceMatcher without autojunk


class WhitespaceMode(Enum):
    """Whitespace handling modes."""
    EXACT = auto()          # Compare whitespace exactly
    IGNORE_TRAILING = auto()  # Ignore trailing whitespace
    IGNORE_LEADING = auto()   # Ignore leading whitespace
    IGNORE_ALL = auto()       # Ignore all whitespace
    NORMALIZE = auto()        # Collapse runs of whitespace to one space


DEFAULT_MAX_LINE_COUNT = 200_000


@dataclass
class DiffOptions:
    """Options for line comparison."""
    algorithm: DiffAlgorithm = DiffAlgorithm.MYERS
    ignore_case: bool = False
    whitespace_mode: WhitespaceMode = WhitespaceMode.EXACT
    ignore_line_endings: bool = True
    max_line_count: int = DEFAULT_MAX_LINE_COUNT

    def normalize_line(self, line: str) -> str:
        """Normalize a line according to options."""
        result = line

        if self.ignore_line_endings:
            result = result.rstrip('\r')

        if self.whitespace_mode == WhitespaceMode.IGNORE_TRAILING:
            result = result.rstrip()
        elif self.whitespace_mode == WhitespaceMode.IGNORE_LEADING:
            result = result.lstrip()
        elif self.whitespace_mode == WhitespaceMode.IGNORE_ALL:
            result = ''.join(result.split())
        elif self.whitespace_mode == WhitespaceMode.NORMALIZE:
            result = ' '.join(result.split())

        if self.ignore_case:
            result = result.lower()

        return result


# (tag, old_start, old_end, new_start, new_end), the difflib opcode shape
Opcode = tuple[str, int, int, int, int]


class LineDiffer:
    """
    Side-agnostic two-way line differ.

    Identical inputs always produce identical operation lists: every
    algorithm here breaks ties the same way on every call.
    """

    def __init__(self, options: DiffOptions | None = None):
        self.options = options or DiffOptions()

    def diff(self, old_lines: Sequence[str], new_lines: Sequence[str]) -> list[EditOperation]:
        """
        Compare two line sequences.

        Args:
            old_lines: Lines of the base/old text
            new_lines: Lines of the source/new text

        Returns:
            Operations covering both inputs end to end, in order
        """
        self._check_capacity(old_lines, new_lines)

        old = [self.options.normalize_line(line) for line in old_lines]
        new = [self.options.normalize_line(line) for line in new_lines]

        opcodes = self._get_opcodes(old, new)
        operations = [self._to_operation(op) for op in self._coalesce(opcodes)]

        logging.debug(
            f"LineDiffer - {len(old)} vs {len(new)} lines with "
            f"{self.options.algorithm.name}: {sum(1 for op in operations if op.is_change)} changes"
        )
        return operations

    def _check_capacity(self, old_lines: Sequence[str], new_lines: Sequence[str]) -> None:
        limit = self.options.max_line_count
        for label, lines in (("old", old_lines), ("new", new_lines)):
            if len(lines) > limit:
                raise CapacityError(
                    f"The {label} text has {len(lines)} lines, more than the limit of {limit}",
                    {"side": label, "line_count": len(lines), "limit": limit},
                )

    def _get_opcodes(self, old: list[str], new: list[str]) -> list[Opcode]:
        """Get diff opcodes using the configured algorithm."""
        if self.options.algorithm == DiffAlgorithm.PATIENCE:
            return self._patience_diff(old, new)
        elif self.options.algorithm == DiffAlgorithm.RATCLIFF:
            matcher = difflib.SequenceMatcher(None, old, new, autojunk=False)
            return matcher.get_opcodes()
        else:
            return self._myers_diff(old, new, 0, 0)

    # -------------------------------------------------------------------------
    # Myers
    # -------------------------------------------------------------------------

    def _myers_diff(
        self,
        old: list[str],
        new: list[str],
        old_base: int,
        new_base: int
    ) -> list[Opcode]:
        """
        Myers shortest edit script.

        Common prefix and suffix are trimmed first; the middle is solved by
        the greedy forward search with one frontier snapshot per edit
        distance, then back-tracked into single-line steps.
        """
        prefix = 0
        while prefix < len(old) and prefix < len(new) and old[prefix] == new[prefix]:
            prefix += 1

        suffix = 0
        while (suffix < len(old) - prefix and suffix < len(new) - prefix
               and old[-1 - suffix] == new[-1 - suffix]):
            suffix += 1

        a = old[prefix:len(old) - suffix]
        b = new[prefix:len(new) - suffix]

        steps: list[str] = ['equal'] * prefix
        steps.extend(self._myers_steps(a, b))
        steps.extend(['equal'] * suffix)

        return self._steps_to_opcodes(steps, old_base, new_base)

    @staticmethod
    def _myers_steps(a: list[str], b: list[str]) -> list[str]:
        """Return one tag ('equal', 'delete', 'insert') per step of the edit path."""
        n, m = len(a), len(b)
        if n == 0:
            return ['insert'] * m
        if m == 0:
            return ['delete'] * n

        max_d = n + m
        offset = max_d
        frontier = [0] * (2 * max_d + 2)
        trace: list[list[int]] = []

        for d in range(max_d + 1):
            # Diagonals -d..d as left by round d-1
            trace.append(frontier[offset - d:offset + d + 1])
            done = False
            for k in range(-d, d + 1, 2):
                # Prefer deletions over insertions on ties
                if k == -d or (k != d and frontier[offset + k - 1] < frontier[offset + k + 1]):
                    x = frontier[offset + k + 1]
                else:
                    x = frontier[offset + k - 1] + 1
                y = x - k
                while x < n and y < m and a[x] == b[y]:
                    x += 1
                    y += 1
                frontier[offset + k] = x
                if x >= n and y >= m:
                    done = True
                    break
            if done:
                break

        steps: list[str] = []
        x, y = n, m
        for d in range(len(trace) - 1, 0, -1):
            previous = trace[d]
            k = x - y
            if k == -d or (k != d and previous[d + k - 1] < previous[d + k + 1]):
                prev_k = k + 1
            else:
                prev_k = k - 1
            prev_x = previous[d + prev_k]
            prev_y = prev_x - prev_k

            while x > prev_x and y > prev_y:
                steps.append('equal')
                x -= 1
                y -= 1
            if x == prev_x:
                steps.append('insert')
            else:
                steps.append('delete')
            x, y = prev_x, prev_y

        while x > 0 and y > 0:
            steps.append('equal')
            x -= 1
            y -= 1

        steps.reverse()
        return steps

    @staticmethod
    def _steps_to_opcodes(steps: list[str], old_base: int, new_base: int) -> list[Opcode]:
        """Group single-line steps into range opcodes."""
        opcodes: list[Opcode] = []
        i, j = old_base, new_base
        for step in steps:
            di = 0 if step == 'insert' else 1
            dj = 0 if step == 'delete' else 1
            if opcodes and opcodes[-1][0] == step:
                tag, i1, _, j1, _ = opcodes[-1]
                opcodes[-1] = (tag, i1, i + di, j1, j + dj)
            else:
                opcodes.append((step, i, i + di, j, j + dj))
            i += di
            j += dj
        return opcodes

    # -------------------------------------------------------------------------
    # Patience
    # -------------------------------------------------------------------------

    def _patience_diff(self, old: list[str], new: list[str]) -> list[Opcode]:
        """
        Patience diff algorithm.

        Anchors on lines that occur exactly once on each side, keeps the
        longest run of anchors in increasing order, and fills the gaps
        between anchors with Myers.
        """
        old_unique: dict[str, int | None] = {}
        new_unique: dict[str, int | None] = {}

        for i, line in enumerate(old):
            old_unique[line] = None if line in old_unique else i
        for i, line in enumerate(new):
            new_unique[line] = None if line in new_unique else i

        common = []
        for line, old_idx in old_unique.items():
            new_idx = new_unique.get(line)
            if old_idx is not None and new_idx is not None:
                common.append((old_idx, new_idx))
        common.sort()

        anchors = [common[i] for i in self._find_lis([c[1] for c in common])] if common else []

        opcodes: list[Opcode] = []
        old_pos = 0
        new_pos = 0
        for old_idx, new_idx in anchors + [(len(old), len(new))]:
            opcodes.extend(self._myers_diff(
                old[old_pos:old_idx], new[new_pos:new_idx], old_pos, new_pos
            ))
            if old_idx < len(old):
                opcodes.append(('equal', old_idx, old_idx + 1, new_idx, new_idx + 1))
            old_pos = old_idx + 1
            new_pos = new_idx + 1

        return opcodes

    @staticmethod
    def _find_lis(sequence: list[int]) -> list[int]:
        """Find indices of the Longest Increasing Subsequence."""
        if not sequence:
            return []

        n = len(sequence)
        # tails[i] = smallest ending value of an increasing run of length i+1
        tails: list[int] = []
        tail_indices: list[int] = []
        parent = [-1] * n

        for i, val in enumerate(sequence):
            lo, hi = 0, len(tails)
            while lo < hi:
                mid = (lo + hi) // 2
                if tails[mid] < val:
                    lo = mid + 1
                else:
                    hi = mid

            if lo == len(tails):
                tails.append(val)
                tail_indices.append(i)
            else:
                tails[lo] = val
                tail_indices[lo] = i

            parent[i] = tail_indices[lo - 1] if lo > 0 else -1

        result = []
        idx = tail_indices[-1]
        while idx >= 0:
            result.append(idx)
            idx = parent[idx]

        return list(reversed(result))

    # -------------------------------------------------------------------------
    # Normalization of opcode lists
    # -------------------------------------------------------------------------

    @staticmethod
    def _coalesce(opcodes: list[Opcode]) -> list[Opcode]:
        """
        Merge adjacent opcodes of the same kind and fold every run of
        non-equal opcodes into one delete, insert or replace.
        """
        result: list[Opcode] = []
        for tag, i1, i2, j1, j2 in opcodes:
            if i1 == i2 and j1 == j2:
                continue
            if result:
                prev_tag, pi1, pi2, pj1, pj2 = result[-1]
                both_equal = prev_tag == 'equal' and tag == 'equal'
                both_change = prev_tag != 'equal' and tag != 'equal'
                if both_equal or both_change:
                    old_len = i2 - pi1
                    new_len = j2 - pj1
                    if both_equal:
                        merged_tag = 'equal'
                    elif old_len and new_len:
                        merged_tag = 'replace'
                    elif old_len:
                        merged_tag = 'delete'
                    else:
                        merged_tag = 'insert'
                    result[-1] = (merged_tag, pi1, i2, pj1, j2)
                    continue
            result.append((tag, i1, i2, j1, j2))
        return result

    @staticmethod
    def _to_operation(opcode: Opcode) -> EditOperation:
        tag, i1, i2, j1, j2 = opcode
        return EditOperation(
            tag=OpTag[tag.upper()],
            old_rows=RowRange(i1, i2),
            new_rows=RowRange(j1, j2),
        )
