"""
Diff module for two-way line comparison.

Provides:
- A deterministic line differ (Myers, patience, difflib)
- Classification of edit operations into typed hunks
"""

from linealign.core.diff.line_differ import (
    LineDiffer,
    DiffAlgorithm,
    DiffOptions,
    WhitespaceMode,
)
from linealign.core.diff.hunk_classifier import (
    HunkClassifier,
)

__all__ = [
    'LineDiffer',
    'DiffAlgorithm',
    'DiffOptions',
    'WhitespaceMode',
    'HunkClassifier',
]
