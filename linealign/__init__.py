"""
LineAlign: line diff and three-way merge alignment.

Computes typed hunks between texts, groups three-way hunks into conflict
regions, and plans the blank-line padding that keeps side-by-side panels
aligned.
"""

__version__ = "0.1.0"
