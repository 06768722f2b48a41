# src/typedjson/undefined.py
"""
The absent-value sentinel.

JSON has ``null`` but nothing for "no value at all". ``UNDEFINED`` fills
that role: it is distinct from ``None``, falsy, and a process-wide singleton
so identity checks (``value is UNDEFINED``) are the way to test for it.
"""
from __future__ import annotations


class _Undefined:
    _instance = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        # pickle/copy resolve back to the module global
        return "UNDEFINED"


UNDEFINED = _Undefined()


__all__ = ["UNDEFINED"]
