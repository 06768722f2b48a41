# src/typedjson/__init__.py
"""
typedjson — JSON that keeps dates, big integers, non-finite floats,
UNDEFINED, regexps, errors, maps and sets.

The JSON payload stays ordinary JSON; a sidecar list of ``{path, type}``
annotations records which positions must be revived into which type.
"""
from .codec import Envelope, deserialize, parse, serialize, stringify
from .errors import MalformedEnvelopeError, TypedJSONError, UnsupportedValueError
from .registry import RevivedError, TypeTag
from .undefined import UNDEFINED

__all__ = [
    "Envelope",
    "serialize",
    "deserialize",
    "stringify",
    "parse",
    "TypeTag",
    "RevivedError",
    "UNDEFINED",
    "TypedJSONError",
    "UnsupportedValueError",
    "MalformedEnvelopeError",
]
