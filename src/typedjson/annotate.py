# src/typedjson/annotate.py
"""
Encode side: walk a value, swap every non-JSON value for its JSON-safe
stand-in and record where each swap happened.

Traversal is pre-order depth-first; arrays in index order, objects in
insertion order. The current path is a single segment stack shared by the
whole walk (push before descending, pop after). An annotation takes a copy.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple, TypedDict

from .errors import UnsupportedValueError
from .json_support import is_json_scalar, is_plain_array, is_plain_object, json_key, to_native
from .registry import COLLECTION_TAGS, TypeTag, detect

logger = logging.getLogger(__name__)


class Annotation(TypedDict):
    path: List[str]
    type: str


class _Annotator:
    def __init__(self) -> None:
        self.path: List[str] = []
        self.annotations: List[Annotation] = []

    def walk(self, value: Any) -> Any:
        value = to_native(value)

        if is_plain_array(value):
            items: List[Any] = []
            for index, item in enumerate(value):
                self.path.append(str(index))
                items.append(self.walk(item))
                self.path.pop()
            return items

        if is_plain_object(value):
            obj: Dict[str, Any] = {}
            for key, item in value.items():
                try:
                    name = json_key(key)
                except TypeError as exc:
                    raise UnsupportedValueError(self.path, key, str(exc)) from exc
                if name in obj:
                    raise UnsupportedValueError(
                        self.path, key, f"object keys collide after string coercion: {name!r}"
                    )
                self.path.append(name)
                obj[name] = self.walk(item)
                self.path.pop()
            return obj

        handler = detect(value)
        if handler is not None:
            try:
                encoded = handler.encode(value)
            except (TypeError, ValueError) as exc:
                raise UnsupportedValueError(self.path, value, str(exc)) from exc
            if handler.tag in COLLECTION_TAGS:
                encoded = self._walk_members(encoded, handler.tag.value)
            self.annotations.append(Annotation(path=list(self.path), type=handler.tag.value))
            return encoded

        if is_json_scalar(value):
            return value
        raise UnsupportedValueError(self.path, value)

    def _walk_members(self, encoded: Any, tag: str) -> Any:
        # Members of a map/set must already be plain JSON: no annotations
        # are emitted beneath a collection. Set members must also stay
        # hashable once decoded, so arrays and objects are refused there.
        if tag == TypeTag.SET.value:
            for index, member in enumerate(encoded):
                member = to_native(member)
                if is_plain_array(member) or is_plain_object(member):
                    raise UnsupportedValueError(
                        self.path + [str(index)], member,
                        f"{type(member).__name__} member of a set cannot be revived",
                    )
        mark = len(self.annotations)
        encoded = self.walk(encoded)
        if len(self.annotations) > mark:
            nested = self.annotations[mark]
            raise UnsupportedValueError(
                nested["path"], None,
                f"{nested['type']} value inside a {tag} cannot be encoded",
            )
        return encoded


def annotate(value: Any) -> Tuple[Any, List[Annotation]]:
    """
    Return ``(tree, annotations)``: ``tree`` holds only JSON-native values
    and ``annotations`` lists, in traversal order, each substituted position.

    Raises UnsupportedValueError at the first value that cannot be encoded.
    """
    annotator = _Annotator()
    tree = annotator.walk(value)
    logger.debug("annotated value: %d annotation(s)", len(annotator.annotations))
    return tree, annotator.annotations


__all__ = ["Annotation", "annotate"]
