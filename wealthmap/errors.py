"""Exceptions raised by the analytics layer."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when the root input has the wrong shape (e.g. not a list).

    Missing optional fields never raise; they fall back to documented
    defaults instead.
    """

    code = "INVALID_INPUT"


__all__ = ["InvalidInputError"]
