from __future__ import annotations


class AutoworkError(RuntimeError):
    """Base class for errors raised by autowork."""
