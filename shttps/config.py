"""Typed access to server configuration tables.

A configuration is a mapping of global names to values, as a configuration
script would define them. Most settings live in a named table, for example
``{"sipi": {"port": 1024, "hostname": "localhost"}}``. A table is a ``dict``
or, for array-like tables, a ``list``/``tuple``.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

__all__ = ["ConfigError", "HttpMethod", "Route", "Config", "load_config"]


class ConfigError(ValueError):
    """A configuration value has the wrong type or shape."""


class HttpMethod(str, Enum):
    """HTTP request methods known to the server."""

    OPTIONS = "OPTIONS"
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    TRACE = "TRACE"
    CONNECT = "CONNECT"
    OTHER = "OTHER"


# Methods that may be named in a route definition.
_ROUTE_METHODS = {
    name: HttpMethod[name]
    for name in ("GET", "PUT", "POST", "DELETE", "OPTIONS", "CONNECT", "HEAD", "OTHER")
}

_ROUTE_FIELDS = ("method", "route", "script")


@dataclass(frozen=True)
class Route:
    """A route binding an HTTP method and path to a script."""

    method: HttpMethod
    route: str
    script: str


class _Missing:
    pass


_MISSING = _Missing()


def _is_table(value: object) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_stringish(value: object) -> bool:
    """Strings and numbers count as strings, numbers being converted."""
    return isinstance(value, str) or _is_number(value)


def _sequence(table: Any) -> Iterator[Any]:
    """Yield the array part of *table*: items 1, 2, ... up to the first missing one."""
    if isinstance(table, (list, tuple)):
        for item in table:
            if item is None:
                return
            yield item
        return
    index = 1
    while (item := table.get(index)) is not None:
        yield item
        index += 1


class Config:
    """Read typed settings from configuration data."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        if not isinstance(data, Mapping):
            raise TypeError("configuration data must be a mapping")
        self._data = data

    def _lookup(self, table: str, variable: str) -> Any:
        """Return the value of ``table.variable``, or ``_MISSING`` if unset."""
        glob = self._data.get(table)
        if not isinstance(glob, Mapping):
            return _MISSING
        value = glob.get(variable)
        return _MISSING if value is None else value

    def config_string(self, table: str, variable: str, default: str) -> str:
        """Return ``table.variable`` as a string, or *default* if it is unset."""
        value = self._lookup(table, variable)
        if value is _MISSING:
            return default
        if not _is_stringish(value):
            raise ConfigError(f"String expected for {table}.{variable}")
        return str(value)

    def config_boolean(self, table: str, variable: str, default: bool) -> bool:
        """Return ``table.variable`` as a boolean, or *default* if it is unset."""
        value = self._lookup(table, variable)
        if value is _MISSING:
            return default
        if not isinstance(value, bool):
            raise ConfigError(f"Boolean expected for {table}.{variable}")
        return value

    def config_integer(self, table: str, variable: str, default: int) -> int:
        """Return ``table.variable`` as an integer, or *default* if it is unset."""
        value = self._lookup(table, variable)
        if value is _MISSING:
            return default
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigError(f"Integer expected for {table}.{variable}")
        return value

    def config_float(self, table: str, variable: str, default: float) -> float:
        """Return ``table.variable`` as a float, or *default* if it is unset.

        Numeric strings are accepted and converted.
        """
        value = self._lookup(table, variable)
        if value is _MISSING:
            return default
        if _is_number(value):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                pass
        raise ConfigError(f"Number expected for {table}.{variable}")

    def config_string_list(self, table: str, variable: str) -> list[str]:
        """Return the string items of the array ``table.variable``.

        Items that are neither strings nor numbers are skipped; an unset
        value gives an empty list.
        """
        value = self._lookup(table, variable)
        if value is _MISSING:
            return []
        if not _is_table(value):
            raise ConfigError(f"Value '{variable}' in config file must be a table")
        return [str(item) for item in _sequence(value) if _is_stringish(item)]

    def config_string_table(
        self, table: str, variable: str, default: Mapping[str, str]
    ) -> dict[str, str]:
        """Return the key/value pairs of ``table.variable``, sorted by key.

        Returns a copy of *default* if the value is unset.
        """
        value = self._lookup(table, variable)
        if value is _MISSING:
            return dict(default)
        if not _is_table(value):
            raise ConfigError(f"Value '{variable}' in config file must be a table")
        items = value.items() if isinstance(value, Mapping) else enumerate(value, start=1)
        result: dict[str, str] = {}
        for key, item in items:
            if not _is_stringish(key):
                raise ConfigError(
                    f"Key element of '{variable}' in config file must be a string"
                )
            if not _is_stringish(item):
                raise ConfigError(
                    f"Value element of '{variable}' in config file must be a string"
                )
            result[str(key)] = str(item)
        return dict(sorted(result.items()))

    def config_route(self, routetable: str) -> list[Route]:
        """Return the routes listed in the global array *routetable*."""
        routes_value = self._data.get(routetable)
        if not _is_table(routes_value):
            raise ConfigError(f"Value '{routetable}' in config file must be a table")

        routes: list[Route] = []
        for position, entry in enumerate(_sequence(routes_value), start=1):
            if not isinstance(entry, Mapping):
                raise ConfigError(
                    f"Route {position} in '{routetable}' must be a table"
                )
            fields: dict[str, str] = {}
            for name in _ROUTE_FIELDS:
                field = entry.get(name)
                if not isinstance(field, str):
                    raise ConfigError(
                        f"Field '{name}' of route {position} in '{routetable}' "
                        "must be a string"
                    )
                fields[name] = field
            method = _ROUTE_METHODS.get(fields["method"])
            if method is None:
                raise ConfigError(f"Unknown HTTP method {fields['method']}")
            routes.append(Route(method=method, route=fields["route"], script=fields["script"]))
        return routes


def load_config(path: str | os.PathLike) -> Config:
    """Load a configuration file: JSON if it ends in ``.json``, TOML otherwise."""
    filename = os.fspath(path)
    try:
        with open(filename, "rb") as handle:
            if filename.lower().endswith(".json"):
                data = json.load(handle)
            else:
                data = tomllib.load(handle)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Could not parse config file {filename}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file {filename} must hold a table at top level")
    return Config(data)