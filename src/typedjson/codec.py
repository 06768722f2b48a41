# src/typedjson/codec.py
"""
Public entry points.

    from typedjson.codec import serialize, deserialize, stringify, parse

    env = serialize({"when": datetime.now(timezone.utc), "ids": {1, 2}})
    env.json   # plain JSON text any reader understands
    env.meta   # [{"path": ["when"], "type": "date"}, {"path": ["ids"], "type": "set"}]
    deserialize(env) == original

``stringify``/``parse`` wrap the same pair in a single JSON document.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .annotate import Annotation, annotate
from .config import get_codec_options
from .errors import MalformedEnvelopeError
from .revive import revive, validate_annotations
from .undefined import UNDEFINED


class Envelope(NamedTuple):
    """Compact JSON text plus the annotations needed to revive it (None if there are none)."""
    json: str
    meta: Optional[List[Annotation]] = None


def _dumps(value: Any, indent: Optional[int] = None) -> str:
    opts = get_codec_options()
    if indent:
        return json.dumps(value, indent=indent, ensure_ascii=opts.ensure_ascii, allow_nan=False)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=opts.ensure_ascii, allow_nan=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise MalformedEnvelopeError(f"invalid JSON text: {exc}") from exc


def serialize(value: Any) -> Optional[Envelope]:
    """
    Encode ``value`` into an Envelope. Returns None when ``value`` is
    UNDEFINED: a wholly absent document has no JSON form.
    """
    if value is UNDEFINED:
        return None
    tree, annotations = annotate(value)
    return Envelope(_dumps(tree), annotations or None)


def _unpack(envelope: Any) -> Tuple[Any, Any]:
    if isinstance(envelope, Envelope):
        return envelope.json, envelope.meta
    if isinstance(envelope, Mapping) and "json" in envelope:
        return envelope["json"], envelope.get("meta")
    raise MalformedEnvelopeError(
        f"expected an Envelope or a mapping with a 'json' member, not {type(envelope).__name__}"
    )


def deserialize(envelope: Any) -> Any:
    """
    Inverse of ``serialize``. ``None`` revives to UNDEFINED. The ``json``
    member must be JSON text.
    """
    if envelope is None:
        return UNDEFINED
    text, meta = _unpack(envelope)
    if not isinstance(text, str):
        raise MalformedEnvelopeError(f"json member must be JSON text, not {type(text).__name__}")
    return revive(_loads(text), meta)


def stringify(value: Any, replacer: None = None, indent: Optional[int] = None) -> Optional[str]:
    """
    Render ``serialize(value)`` as one JSON document.

    Without ``indent`` the output is compact and ``json`` stays an encoded
    string. With ``indent`` the plain tree is embedded under ``json`` and the
    whole envelope is pretty-printed, except that a string root stays
    encoded so ``parse`` can always read a string member as JSON text.
    ``meta`` is left out when there are no annotations.
    """
    if replacer is not None:
        raise TypeError("stringify does not support a replacer; pass None")
    if value is UNDEFINED:
        return None
    tree, annotations = annotate(value)
    pretty = bool(indent) and indent > 0
    embed = pretty and not isinstance(tree, str)
    doc: Dict[str, Any] = {"json": tree if embed else _dumps(tree)}
    if annotations:
        doc["meta"] = annotations
    return _dumps(doc, indent=indent if pretty else None)


def read_envelope(text: str, *, embedded: Optional[bool] = None) -> Tuple[Any, Optional[List[Any]]]:
    """
    Split ``stringify`` output into ``(tree, meta)`` without reviving.

    A string ``json`` member is treated as encoded text unless ``embedded``
    says otherwise; ``meta`` is validated and returned as given.
    """
    doc = _loads(text)
    if not isinstance(doc, dict) or "json" not in doc:
        raise MalformedEnvelopeError("document is not an envelope: no 'json' member")
    member, meta = doc["json"], doc.get("meta")
    if embedded is None:
        embedded = not isinstance(member, str)
    if not embedded:
        if not isinstance(member, str):
            raise MalformedEnvelopeError("json member must be JSON text")
        member = _loads(member)
    if meta is not None:
        validate_annotations(meta)
    return member, meta


def parse(text: str, *, embedded: Optional[bool] = None) -> Any:
    """Inverse of ``stringify``."""
    tree, meta = read_envelope(text, embedded=embedded)
    return revive(tree, meta)


__all__ = ["Envelope", "serialize", "deserialize", "stringify", "read_envelope", "parse"]
