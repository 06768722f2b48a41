# tests/test_typedjson.py
"""
Round trips through serialize/deserialize and the stringify wire format.
"""

import json
import math
import re
from collections import OrderedDict
from datetime import datetime, timezone

from typedjson import UNDEFINED
from typedjson.codec import Envelope, deserialize, serialize, stringify


def _plain(obj):
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def test_objects():
    obj = {"1": 5, "2": {"3": "c"}}
    json_text, meta = serialize(obj)
    assert json_text == _plain(obj)
    assert meta is None
    assert deserialize(Envelope(json_text, meta)) == obj


def test_nested_arrays():
    today = datetime(2021, 6, 5, 14, 30, 1, 250000, tzinfo=timezone.utc)
    obj = {"data": [{"greeting": "hello", "today": today}], "counter": 1}
    env = serialize(obj)
    assert env.json == '{"data":[{"greeting":"hello","today":"2021-06-05T14:30:01.250Z"}],"counter":1}'
    assert env.meta == [{"path": ["data", "0", "today"], "type": "date"}]
    assert deserialize(env) == obj


def test_objects_with_array_like_keys():
    obj = {"0": 3, "1": 5, "2": {"3": "c"}}
    env = serialize(obj)
    assert env.json == _plain(obj)
    assert env.meta is None
    assert deserialize(env) == obj


def test_arrays_with_undefined():
    obj = [1, UNDEFINED, 2]
    env = serialize(obj)
    assert env.json == "[1,null,2]"
    assert env.meta == [{"path": ["1"], "type": "undefined"}]
    result = deserialize(env)
    assert result == obj
    assert result[1] is UNDEFINED


def test_undefined_object_property_keeps_its_key():
    env = serialize({"a": UNDEFINED, "b": None})
    assert env.json == '{"a":null,"b":null}'
    assert env.meta == [{"path": ["a"], "type": "undefined"}]
    result = deserialize(env)
    assert result["a"] is UNDEFINED and result["b"] is None


def test_sets_with_serializable_values():
    obj = {"a": {1, 2, 3}}
    env = serialize(obj)
    assert env.json == '{"a":[1,2,3]}'
    assert env.meta == [{"path": ["a"], "type": "set"}]
    assert deserialize(env) == obj


def test_top_level_set():
    obj = frozenset({"x"})
    env = serialize(obj)
    assert env.json == '["x"]'
    assert env.meta == [{"path": [], "type": "set"}]
    assert deserialize(env) == obj


def test_simple_maps():
    obj = {
        "a": OrderedDict([("key", "value"), ("anotherkey", "b")]),
        "b": OrderedDict([("2", "b")]),
    }
    env = serialize(obj)
    assert env.json == _plain({"a": {"key": "value", "anotherkey": "b"}, "b": {"2": "b"}})
    assert env.meta == [
        {"path": ["a"], "type": "map"},
        {"path": ["b"], "type": "map"},
    ]
    result = deserialize(env)
    assert result == obj
    assert isinstance(result["a"], OrderedDict)
    assert list(result["a"]) == ["key", "anotherkey"]


def test_paths_containing_dots_and_backslashes():
    obj = {"a.1": {"b": {1, 2}}, "a\\.1": {"b": {3}}}
    env = serialize(obj)
    assert env.meta == [
        {"path": ["a.1", "b"], "type": "set"},
        {"path": ["a\\.1", "b"], "type": "set"},
    ]
    assert deserialize(env) == obj


def test_clashing_dot_notation_keys():
    env = serialize({"a": {}, "a.b": math.nan})
    assert env.json == '{"a":{},"a.b":"NaN"}'
    assert env.meta == [{"path": ["a.b"], "type": "nan"}]
    result = deserialize(env)
    assert result["a"] == {}
    assert math.isnan(result["a.b"])


def test_dates():
    obj = {"meeting": {"date": datetime(2020, 2, 1, tzinfo=timezone.utc)}}
    env = serialize(obj)
    assert env.json == '{"meeting":{"date":"2020-02-01T00:00:00.000Z"}}'
    assert env.meta == [{"path": ["meeting", "date"], "type": "date"}]
    assert deserialize(env) == obj


def test_errors():
    err = ValueError("epic fail")
    env = serialize({"e": err})
    assert env.json == _plain(
        {"e": {"name": "ValueError", "message": "epic fail", "stack": "ValueError: epic fail\n"}}
    )
    assert env.meta == [{"path": ["e"], "type": "error"}]
    result = deserialize(env)["e"]
    assert type(result) is ValueError
    assert str(result) == "epic fail"
    assert result.stack == "ValueError: epic fail\n"


def test_raised_errors_carry_their_traceback():
    try:
        raise KeyError("missing")
    except KeyError as exc:
        caught = exc
    env = serialize(caught)
    stack = json.loads(env.json)["stack"]
    assert stack.startswith("Traceback (most recent call last):")
    assert deserialize(env).stack == stack


def test_regex():
    obj = {"a": re.compile("hello", re.IGNORECASE)}
    env = serialize(obj)
    assert env.json == '{"a":"/hello/i"}'
    assert env.meta == [{"path": ["a"], "type": "regexp"}]
    assert deserialize(env) == obj


def test_infinity():
    env = serialize({"a": math.inf})
    assert env.json == '{"a":"Infinity"}'
    assert env.meta == [{"path": ["a"], "type": "infinity"}]
    assert deserialize(env) == {"a": math.inf}


def test_negative_infinity():
    env = serialize({"a": -math.inf})
    assert env.json == '{"a":"-Infinity"}'
    assert env.meta == [{"path": ["a"], "type": "-infinity"}]
    assert deserialize(env) == {"a": -math.inf}


def test_nan():
    env = serialize({"a": math.nan})
    assert env.json == '{"a":"NaN"}'
    assert env.meta == [{"path": ["a"], "type": "nan"}]
    assert math.isnan(deserialize(env)["a"])


def test_bigint():
    obj = {"a": 1021312312412312312313}
    env = serialize(obj)
    assert env.json == '{"a":"1021312312412312312313"}'
    assert env.meta == [{"path": ["a"], "type": "bigint"}]
    assert deserialize(env) == obj


def test_safe_integers_stay_numbers():
    obj = {"max": 2**53 - 1, "min": -(2**53 - 1), "flag": True}
    env = serialize(obj)
    assert env.json == _plain(obj)
    assert env.meta is None


def test_undefined_root():
    assert serialize(UNDEFINED) is None
    assert deserialize(serialize(UNDEFINED)) is UNDEFINED
    assert stringify(UNDEFINED) is None


def test_none_root_is_not_undefined():
    env = serialize(None)
    assert env.json == "null" and env.meta is None
    assert deserialize(env) is None


def test_deserialize_accepts_plain_mappings():
    env = serialize({"a": {1}})
    assert deserialize({"json": env.json, "meta": env.meta}) == {"a": {1}}


def test_unicode_is_kept_readable():
    env = serialize({"name": "Zoë"})
    assert env.json == '{"name":"Zoë"}'


_STRINGIFY_INPUT = {
    "bi": 1021312312412312312313,
    "nan": math.nan,
    "inf": {"P": math.inf, "N": -math.inf},
    "d": datetime(1979, 1, 10, tzinfo=timezone.utc),
}


def test_stringify_compact():
    assert stringify(_STRINGIFY_INPUT) == (
        '{"json":"{\\"bi\\":\\"1021312312412312312313\\",\\"nan\\":\\"NaN\\",'
        '\\"inf\\":{\\"P\\":\\"Infinity\\",\\"N\\":\\"-Infinity\\"},'
        '\\"d\\":\\"1979-01-10T00:00:00.000Z\\"}",'
        '"meta":[{"path":["bi"],"type":"bigint"},{"path":["nan"],"type":"nan"},'
        '{"path":["inf","P"],"type":"infinity"},{"path":["inf","N"],"type":"-infinity"},'
        '{"path":["d"],"type":"date"}]}'
    )


def test_stringify_indented():
    expected = """{
  "json": {
    "bi": "1021312312412312312313",
    "nan": "NaN",
    "inf": {
      "P": "Infinity",
      "N": "-Infinity"
    },
    "d": "1979-01-10T00:00:00.000Z"
  },
  "meta": [
    {
      "path": [
        "bi"
      ],
      "type": "bigint"
    },
    {
      "path": [
        "nan"
      ],
      "type": "nan"
    },
    {
      "path": [
        "inf",
        "P"
      ],
      "type": "infinity"
    },
    {
      "path": [
        "inf",
        "N"
      ],
      "type": "-infinity"
    },
    {
      "path": [
        "d"
      ],
      "type": "date"
    }
  ]
}"""
    assert stringify(_STRINGIFY_INPUT, None, 2) == expected


def test_stringify_without_annotations_omits_meta():
    assert stringify({"a": [1, 2]}) == '{"json":"{\\"a\\":[1,2]}"}'
    assert stringify({"a": [1, 2]}, indent=2) == '{\n  "json": {\n    "a": [\n      1,\n      2\n    ]\n  }\n}'
