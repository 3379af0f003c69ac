"""
Exceptions raised by the alignment core.

Taxonomy:
- InputError: caller passed malformed row ranges or oversized input
- ApplyError: a hunk could not be applied to the base buffer
- MergeStateError: a merge session was driven out of order
"""

from __future__ import annotations

from typing import Any, Optional


class LineAlignError(Exception):
    """Base exception for all alignment errors."""

    def __init__(self, message: str, error_details: Optional[dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class InputError(LineAlignError):
    """Raised when a row range or line sequence violates the caller contract."""


class CapacityError(InputError):
    """Raised when an input is too large to diff."""


class ApplyError(LineAlignError):
    """Raised when a hunk cannot be applied (not pending, or stale rows)."""


class MergeStateError(LineAlignError):
    """Raised when a merge session operation is not allowed in its current state."""


class ConcurrentMutationError(MergeStateError):
    """Raised when a session operation arrives while another one is running."""


class UnresolvedHunksError(MergeStateError):
    """Raised when marking a merge resolved while hunks are still pending."""
