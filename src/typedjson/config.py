# src/typedjson/config.py
"""
Process-wide codec options.

The defaults reproduce the behaviour every JSON reader agrees on. Change
them once at start-up; the codec reads them at call time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Largest integer an IEEE-754 double (and hence any JSON reader) holds exactly.
DEFAULT_SAFE_INTEGER_MAX: int = 2**53 - 1

_SAFE_INTEGER_MAX: int = DEFAULT_SAFE_INTEGER_MAX
_ENSURE_ASCII: bool = False


@dataclass(frozen=True)
class CodecOptions:
    safe_integer_max: int
    ensure_ascii: bool


def set_codec_options(
    *, safe_integer_max: Optional[int] = None, ensure_ascii: Optional[bool] = None
) -> None:
    """
    Override codec options. Integers with a magnitude above
    ``safe_integer_max`` are annotated as ``bigint``; ``ensure_ascii`` is
    passed to the JSON text encoder.
    """
    global _SAFE_INTEGER_MAX, _ENSURE_ASCII
    if safe_integer_max is not None:
        if isinstance(safe_integer_max, bool) or int(safe_integer_max) < 0:
            raise ValueError("safe_integer_max must be a non-negative integer.")
        _SAFE_INTEGER_MAX = int(safe_integer_max)
    if ensure_ascii is not None:
        _ENSURE_ASCII = bool(ensure_ascii)


def get_codec_options() -> CodecOptions:
    return CodecOptions(safe_integer_max=_SAFE_INTEGER_MAX, ensure_ascii=_ENSURE_ASCII)


def restore_default_options() -> None:
    global _SAFE_INTEGER_MAX, _ENSURE_ASCII
    _SAFE_INTEGER_MAX = DEFAULT_SAFE_INTEGER_MAX
    _ENSURE_ASCII = False


__all__ = [
    "DEFAULT_SAFE_INTEGER_MAX",
    "CodecOptions",
    "set_codec_options",
    "get_codec_options",
    "restore_default_options",
]
