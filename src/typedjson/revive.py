# src/typedjson/revive.py
"""
Decode side: replay an annotation list over a parsed JSON tree.

Each annotation names a position by its path segments; the stand-in found
there is replaced by the value its tag's decoder rebuilds. No path may be
a prefix of another, so annotations are independent of each other and are
applied in list order.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Tuple

from .errors import MalformedEnvelopeError
from .registry import TypeTag, handler_for

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"0|[1-9][0-9]*")

Step = Tuple[Tuple[str, ...], TypeTag]


def validate_annotations(annotations: Any) -> List[Step]:
    """
    Check the shape of a ``meta`` list and return it as ``(path, tag)`` pairs.

    Rejects non-list input, entries without a list-of-strings ``path`` or a
    known ``type``, and duplicate or prefix-overlapping paths.
    """
    if not isinstance(annotations, list):
        raise MalformedEnvelopeError(
            f"meta must be a list of annotations, not {type(annotations).__name__}"
        )
    steps: List[Step] = []
    for position, entry in enumerate(annotations):
        if not isinstance(entry, Mapping):
            raise MalformedEnvelopeError(f"meta entry {position} is not an object")
        path, tag = entry.get("path"), entry.get("type")
        if not isinstance(path, list) or not all(isinstance(s, str) for s in path):
            raise MalformedEnvelopeError(f"meta entry {position} has no list-of-strings path")
        try:
            steps.append((tuple(path), TypeTag(tag)))
        except ValueError:
            raise MalformedEnvelopeError(f"unknown type tag {tag!r}", path) from None

    seen = set()
    for path, _ in sorted(steps, key=lambda step: len(step[0])):
        if path in seen:
            raise MalformedEnvelopeError("duplicate annotation", path)
        for depth in range(len(path)):
            if path[:depth] in seen:
                raise MalformedEnvelopeError(
                    f"annotation nested under annotated path {list(path[:depth])!r}", path
                )
        seen.add(path)
    return steps


def _child_key(node: Any, segment: str, path: Sequence[str]) -> Any:
    """Resolve one path segment against ``node``; return the list index or dict key."""
    if isinstance(node, list):
        if _INDEX_RE.fullmatch(segment) is not None and int(segment) < len(node):
            return int(segment)
    elif isinstance(node, dict):
        if segment in node:
            return segment
    raise MalformedEnvelopeError("path does not resolve", path)


def _apply(root: Any, path: Tuple[str, ...], tag: TypeTag) -> Any:
    handler = handler_for(tag)
    if not path:
        return _decode(handler, root, path)

    parent = root
    for depth, segment in enumerate(path[:-1]):
        parent = parent[_child_key(parent, segment, path[: depth + 1])]
    key = _child_key(parent, path[-1], path)
    parent[key] = _decode(handler, parent[key], path)
    return root


def _decode(handler, value: Any, path: Sequence[str]) -> Any:
    try:
        return handler.decode(value)
    except (TypeError, ValueError) as exc:
        raise MalformedEnvelopeError(f"cannot decode {handler.tag.value}: {exc}", path) from exc


def revive(tree: Any, annotations: Optional[Any]) -> Any:
    """
    Rebuild the original value from a parsed JSON ``tree`` and its
    annotation list. ``tree`` is revived in place; the result is returned
    because an annotation on the root path replaces the tree itself.

    Raises MalformedEnvelopeError on the first bad annotation; nothing is
    returned in that case.
    """
    if annotations is None:
        return tree
    steps = validate_annotations(annotations)
    for path, tag in steps:
        tree = _apply(tree, path, tag)
    logger.debug("revived %d annotation(s)", len(steps))
    return tree


__all__ = ["validate_annotations", "revive"]
