"""Conversion between script tables and JSON text.

A *table* is a ``dict`` whose keys are all strings (a JSON object), a
``dict`` whose keys are all numbers (a JSON array, in iteration order),
or a ``list``/``tuple`` (a JSON array). Values may be strings, numbers,
booleans or nested tables. Empty nested tables are left out of the
output, and an empty top-level table yields ``None``.
"""

from __future__ import annotations

import json
import math
from typing import Any

__all__ = ["JsonConversionError", "table_to_json", "json_to_table"]

_TO_JSON = "'server.table_to_json(table)'"
_TO_TABLE = "'server.json_to_table(jsonstr)'"
_DATATYPE_ERROR = "server.table_to_json(table): datatype inconsistency"
_MIXED_KEYS = f"{_TO_JSON}: Cannot mix int and strings as key"
_BAD_KEY = f"{_TO_JSON}: Cannot convert key to JSON object field"


class JsonConversionError(ValueError):
    """A table could not be turned into JSON, or JSON into a table."""


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _convert_number(value: int | float) -> int | float:
    if isinstance(value, int):
        return value
    if not math.isfinite(value):
        raise JsonConversionError(_DATATYPE_ERROR)
    return int(value) if value.is_integer() else value


def _convert_value(value: object) -> Any:
    """Return the JSON-ready form of *value*, or ``None`` if it is dropped."""
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return _convert_number(value)  # type: ignore[arg-type]
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        return _convert_table(value)
    raise JsonConversionError(_DATATYPE_ERROR)


def _items(table: dict | list | tuple):
    if isinstance(table, dict):
        return table.items()
    return enumerate(table, start=1)


def _convert_table(table: dict | list | tuple) -> dict | list | None:
    obj: dict[str, Any] | None = None
    arr: list[Any] | None = None
    for key, value in _items(table):
        if isinstance(key, str):
            if arr is not None:
                raise JsonConversionError(_MIXED_KEYS)
            if obj is None:
                obj = {}
        elif _is_number(key):
            if obj is not None:
                raise JsonConversionError(_MIXED_KEYS)
            if arr is None:
                arr = []
        else:
            raise JsonConversionError(_BAD_KEY)

        converted = _convert_value(value)
        if converted is None:
            continue
        if obj is not None:
            obj[key] = converted
        else:
            arr.append(converted)  # type: ignore[union-attr]
    return obj if obj is not None else arr


def table_to_json(table: dict | list | tuple) -> str | None:
    """Serialise *table* as JSON indented by three spaces.

    Integral floats are written as integers. Returns ``None`` for an empty
    table. Raises :class:`TypeError` if *table* is not a table and
    :class:`JsonConversionError` for mixed keys or unsupported values.
    """
    if not isinstance(table, (dict, list, tuple)):
        raise TypeError(f"{_TO_JSON}: table is not a lua-table")
    root = _convert_table(table)
    if root is None:
        return None
    return json.dumps(root, indent=3, ensure_ascii=False)


class _DuplicateKey(Exception):
    pass


def _reject_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateKey(key)
        result[key] = value
    return result


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid token '{name}'")


def _strip_nulls(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _strip_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_strip_nulls(item) for item in value]
    return value


def json_to_table(jsonstr: str | bytes) -> dict | list:
    """Parse *jsonstr*, whose top level must be an object or an array.

    Objects become dicts without their ``null`` members; arrays become lists
    in which ``null`` stays ``None`` so that positions are kept. Duplicate
    object keys are rejected.
    """
    if isinstance(jsonstr, (bytes, bytearray)):
        jsonstr = bytes(jsonstr).decode("utf-8")
    if not isinstance(jsonstr, str):
        raise TypeError(f"{_TO_TABLE}: jsonstr is not a string")
    try:
        data = json.loads(
            jsonstr,
            object_pairs_hook=_reject_duplicates,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise JsonConversionError(
            f"{_TO_TABLE}: Error parsing JSON: {exc.msg}\n"
            f"JSON-source: <string>\n"
            f"Line: {exc.lineno} Column: {exc.colno} Pos: {exc.pos}\n"
        ) from exc
    except _DuplicateKey as exc:
        raise JsonConversionError(
            f"{_TO_TABLE}: Error parsing JSON: duplicate object key near '{exc.args[0]}'\n"
        ) from None
    except ValueError as exc:
        raise JsonConversionError(f"{_TO_TABLE}: Error parsing JSON: {exc}\n") from exc

    if not isinstance(data, (dict, list)):
        raise JsonConversionError(f"{_TO_TABLE}: Not a valid json string")
    return _strip_nulls(data)