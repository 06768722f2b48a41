# src/typedjson/errors.py
from __future__ import annotations

from typing import Any, List, Optional, Sequence


class TypedJSONError(Exception):
    """Base class for every failure raised by the codec."""


class UnsupportedValueError(TypedJSONError, TypeError):
    """
    A value has no plain-JSON shape and no registered type handler
    (a function, a ``date`` without time, a bytes pattern, ...).
    """

    def __init__(self, path: Sequence[str], value: Any, reason: Optional[str] = None) -> None:
        self.path: List[str] = list(path)
        self.value = value
        detail = reason or f"value of type {type(value).__name__} cannot be encoded"
        super().__init__(f"{detail} at path {self.path!r}")


class MalformedEnvelopeError(TypedJSONError, ValueError):
    """
    An envelope cannot be revived: bad JSON text, a bad annotation list,
    a path that does not resolve, or a stand-in its decoder rejects.
    """

    def __init__(self, message: str, path: Optional[Sequence[str]] = None) -> None:
        self.path: Optional[List[str]] = None if path is None else list(path)
        if self.path is not None:
            message = f"{message} at path {self.path!r}"
        super().__init__(message)


__all__ = ["TypedJSONError", "UnsupportedValueError", "MalformedEnvelopeError"]
