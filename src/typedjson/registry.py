# src/typedjson/registry.py
"""
The type registry: the closed set of non-JSON types the codec can carry.

Each handler owns a detection predicate, an encode transform producing a
JSON-safe stand-in, a decode transform reviving the original value from
that stand-in, and the stable tag written into annotations. The tags are
mutually exclusive, so handler order only affects how quickly a match is
found.

Handlers raise plain ValueError/TypeError on bad input; the annotator and
the reviver attach path context and translate them into the codec's own
exceptions.
"""

from __future__ import annotations

import builtins
import logging
import math
import re
import traceback
from collections import OrderedDict
from collections.abc import Mapping, Set
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union

from . import config
from .json_support import is_plain_object, json_key
from .undefined import UNDEFINED

logger = logging.getLogger(__name__)


class TypeTag(str, Enum):
    DATE = "date"
    ERROR = "error"
    REGEXP = "regexp"
    MAP = "map"
    SET = "set"
    UNDEFINED = "undefined"
    NAN = "nan"
    INFINITY = "infinity"
    NEG_INFINITY = "-infinity"
    BIGINT = "bigint"


# Tags whose stand-in is a container the annotator walks as plain JSON.
COLLECTION_TAGS = frozenset({TypeTag.MAP, TypeTag.SET})


@dataclass(frozen=True)
class TypeHandler:
    tag: TypeTag
    detect: Callable[[Any], bool]
    encode: Callable[[Any], Any]
    decode: Callable[[Any], Any]


class RevivedError(Exception):
    """
    Stand-in for a decoded error whose name is not a builtin exception
    class. Carries the original ``name``; ``stack`` is attached on revival.
    """

    def __init__(self, message: str = "", name: str = "Error") -> None:
        super().__init__(message)
        self.name = name
        self.message = message


# -------------------------
# date
# -------------------------
def _is_date(value: Any) -> bool:
    return isinstance(value, datetime)


def _encode_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _decode_date(value: Any) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"date stand-in must be a string, not {type(value).__name__}")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


# -------------------------
# bigint
# -------------------------
_BIGINT_RE = re.compile(r"-?[0-9]+")


def _is_bigint(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return abs(value) > config.get_codec_options().safe_integer_max


def _encode_bigint(value: int) -> str:
    return int.__repr__(value)


def _decode_bigint(value: Any) -> int:
    if not isinstance(value, str) or _BIGINT_RE.fullmatch(value) is None:
        raise ValueError(f"bigint stand-in must be a decimal string, got {value!r}")
    return int(value)


# -------------------------
# non-finite numbers
# -------------------------
def _is_float(value: Any) -> bool:
    return isinstance(value, float)


def _literal_decoder(literal: str, result: float) -> Callable[[Any], float]:
    def decode(value: Any) -> float:
        if value != literal:
            raise ValueError(f"expected the string {literal!r}, got {value!r}")
        return result
    return decode


# -------------------------
# undefined
# -------------------------
def _decode_undefined(value: Any) -> Any:
    if value is not None:
        raise ValueError(f"undefined stand-in must be null, got {value!r}")
    return UNDEFINED


# -------------------------
# regexp
# -------------------------
_FLAG_LETTERS: Tuple[Tuple[str, int], ...] = (
    ("a", re.ASCII),
    ("i", re.IGNORECASE),
    ("m", re.MULTILINE),
    ("s", re.DOTALL),
    ("x", re.VERBOSE),
)
# Letters JavaScript producers emit that have no bearing on a Python pattern.
_IGNORED_FLAG_LETTERS = frozenset("gyduv")


def _is_regexp(value: Any) -> bool:
    return isinstance(value, re.Pattern) and isinstance(value.pattern, str)


def _encode_regexp(value: "re.Pattern[str]") -> str:
    flags = "".join(letter for letter, bit in _FLAG_LETTERS if value.flags & bit)
    return f"/{value.pattern}/{flags}"


def _decode_regexp(value: Any) -> "re.Pattern[str]":
    if not isinstance(value, str):
        raise TypeError(f"regexp stand-in must be a string, not {type(value).__name__}")
    end = value.rfind("/")
    if not value.startswith("/") or end < 1:
        raise ValueError(f"regexp stand-in must look like /pattern/flags, got {value!r}")
    pattern, letters = value[1:end], value[end + 1:]
    known = dict(_FLAG_LETTERS)
    flags = 0
    for letter in letters:
        if letter in known:
            flags |= known[letter]
        elif letter in _IGNORED_FLAG_LETTERS:
            logger.debug("ignoring regexp flag %r in %r", letter, value)
        else:
            raise ValueError(f"unknown regexp flag {letter!r} in {value!r}")
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise ValueError(f"invalid regexp {value!r}: {exc}") from exc


# -------------------------
# error
# -------------------------
def _is_error(value: Any) -> bool:
    return isinstance(value, BaseException)


def _encode_error(value: BaseException) -> Dict[str, Any]:
    name = value.name if isinstance(value, RevivedError) else type(value).__name__
    stack = getattr(value, "stack", None)
    if not isinstance(stack, str):
        stack = "".join(traceback.format_exception(type(value), value, value.__traceback__))
    if len(value.args) == 1 and isinstance(value.args[0], str):
        # KeyError.__str__ quotes its argument
        message = value.args[0]
    else:
        message = str(value)
    return {"name": name, "message": message, "stack": stack}


def _decode_error(value: Any) -> BaseException:
    if not isinstance(value, Mapping):
        raise TypeError(f"error stand-in must be an object, not {type(value).__name__}")
    name, message, stack = value.get("name"), value.get("message"), value.get("stack")
    if not isinstance(name, str) or not isinstance(message, str):
        raise ValueError("error stand-in needs string 'name' and 'message' members")
    if stack is not None and not isinstance(stack, str):
        raise ValueError("error stand-in 'stack' must be a string or null")

    err: Optional[BaseException] = None
    cls = getattr(builtins, name, None)
    if isinstance(cls, type) and issubclass(cls, Exception):
        try:
            err = cls(message)
        except TypeError:
            # e.g. UnicodeDecodeError wants five arguments
            err = None
    if err is None:
        err = RevivedError(message, name=name)
    err.stack = stack  # type: ignore[attr-defined]
    return err


# -------------------------
# map / set
# -------------------------
def _is_map(value: Any) -> bool:
    return isinstance(value, Mapping) and not is_plain_object(value)


def _encode_map(value: Mapping) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, item in value.items():
        name = json_key(key)
        if name in out:
            raise ValueError(f"map keys collide after string coercion: {name!r}")
        out[name] = item
    return out


def _decode_map(value: Any) -> "OrderedDict[str, Any]":
    if not isinstance(value, dict):
        raise TypeError(f"map stand-in must be an object, not {type(value).__name__}")
    return OrderedDict((str(key), item) for key, item in value.items())


def _is_set(value: Any) -> bool:
    return isinstance(value, Set)


def _decode_set(value: Any) -> set:
    if not isinstance(value, list):
        raise TypeError(f"set stand-in must be an array, not {type(value).__name__}")
    return set(value)


HANDLERS: Tuple[TypeHandler, ...] = (
    TypeHandler(TypeTag.UNDEFINED, lambda v: v is UNDEFINED, lambda v: None, _decode_undefined),
    TypeHandler(TypeTag.NAN, lambda v: _is_float(v) and math.isnan(v),
                lambda v: "NaN", _literal_decoder("NaN", math.nan)),
    TypeHandler(TypeTag.INFINITY, lambda v: _is_float(v) and v == math.inf,
                lambda v: "Infinity", _literal_decoder("Infinity", math.inf)),
    TypeHandler(TypeTag.NEG_INFINITY, lambda v: _is_float(v) and v == -math.inf,
                lambda v: "-Infinity", _literal_decoder("-Infinity", -math.inf)),
    TypeHandler(TypeTag.BIGINT, _is_bigint, _encode_bigint, _decode_bigint),
    TypeHandler(TypeTag.DATE, _is_date, _encode_date, _decode_date),
    TypeHandler(TypeTag.REGEXP, _is_regexp, _encode_regexp, _decode_regexp),
    TypeHandler(TypeTag.ERROR, _is_error, _encode_error, _decode_error),
    TypeHandler(TypeTag.MAP, _is_map, _encode_map, _decode_map),
    TypeHandler(TypeTag.SET, _is_set, list, _decode_set),
)

_BY_TAG: Dict[TypeTag, TypeHandler] = {h.tag: h for h in HANDLERS}


def detect(value: Any) -> Optional[TypeHandler]:
    """Return the handler claiming ``value``, or None for plain JSON / unsupported values."""
    for handler in HANDLERS:
        if handler.detect(value):
            return handler
    return None


def handler_for(tag: Union[TypeTag, str]) -> TypeHandler:
    try:
        return _BY_TAG[TypeTag(tag)]
    except ValueError:
        raise ValueError(f"unknown type tag {tag!r}") from None


def decode(tag: Union[TypeTag, str], value: Any) -> Any:
    return handler_for(tag).decode(value)


__all__ = [
    "TypeTag",
    "TypeHandler",
    "RevivedError",
    "COLLECTION_TAGS",
    "HANDLERS",
    "detect",
    "handler_for",
    "decode",
]
