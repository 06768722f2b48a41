# src/typedjson/json_support.py
"""
Helpers shared by the annotator and the type registry for deciding what
"plain JSON" means for a Python value.

- numpy scalars/arrays are folded into native Python values before
  classification, so ``np.float64('nan')`` is annotated like ``float('nan')``
  and an ``ndarray`` is walked like a list.
- object keys are coerced exactly as the standard ``json`` encoder
  coerces them, so the path segments we record match the keys a reader
  sees after decoding.
"""

from __future__ import annotations
from collections import OrderedDict
import math
from typing import Any

import numpy as np


def to_native(obj: Any) -> Any:
    """
    Convert numpy values to their native Python form:
    - numpy scalars -> Python scalars (``.item()``)
    - numpy arrays -> nested lists
    - anything else is returned unchanged
    """
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


def is_plain_object(obj: Any) -> bool:
    """A ``dict`` that encodes as an ordinary JSON object (``OrderedDict`` is a map)."""
    return isinstance(obj, dict) and not isinstance(obj, OrderedDict)


def is_plain_array(obj: Any) -> bool:
    return isinstance(obj, (list, tuple))


def is_json_scalar(obj: Any) -> bool:
    """str / bool / int / finite float / None."""
    if obj is None or isinstance(obj, (str, bool, int)):
        return True
    return isinstance(obj, float) and math.isfinite(obj)


def json_key(key: Any) -> str:
    """
    Coerce a mapping key to the string the JSON encoder would emit.
    Raises TypeError for keys JSON objects cannot carry.
    """
    key = to_native(key)
    if isinstance(key, str):
        return key
    # bool before int: True is an int
    if key is True:
        return "true"
    if key is False:
        return "false"
    if key is None:
        return "null"
    if isinstance(key, int):
        return int.__repr__(key)
    if isinstance(key, float) and math.isfinite(key):
        return float.__repr__(key)
    raise TypeError(f"keys must be str, int, finite float, bool or None, not {type(key).__name__}")


__all__ = ["to_native", "is_plain_object", "is_plain_array", "is_json_scalar", "json_key"]
