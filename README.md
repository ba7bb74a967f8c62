# shttps

Helpers for the scripts of a small HTTP server. The package provides file system
access, conversion between nested tables and JSON text, typed reading of
configuration data, and a GET-only HTTP client. It uses only the standard library.

## Installation

```
pip install .
```

## Modules

### `shttps.fsutils`

File system helpers. Failed operations raise `FsError`, which carries a
`message` and the `errno` value. Arguments of the wrong type raise `TypeError`.

- `ftype(path)` returns a `FileType` member (`FILE`, `DIRECTORY`, `CHARDEV`,
  `BLOCKDEV`, `LINK`, `FIFO`, `SOCKET` or `UNKNOWN`). Symbolic links are followed.
- `modtime(path)` returns the modification time in whole seconds since the epoch.
- `readdir(path)` lists a directory. Names that start with a dot are left out.
- `is_readable`, `is_writeable`, `is_executable` and `exists` check access to a
  path.
- `unlink(path)`, `mkdir(dirname, mode)` and `rmdir(dirname)` delete a file,
  create a directory and remove an empty directory.
- `getcwd()` returns the working directory. `chdir(dirname)` changes it and
  returns the previous one.
- `copy_file(source, target)` copies the contents of a file and replaces the
  target.
- `move_file(source, target)` renames a file. A move across file systems is
  refused.

### `shttps.jsonconv`

- `table_to_json(table)` serialises a table as JSON indented by three spaces. A
  table is a dict with string keys (a JSON object), a dict with numeric keys, or
  a list/tuple (both JSON arrays). Floats with an integral value are written as
  integers. Empty nested tables are left out. An empty top-level table gives
  `None`.
- `json_to_table(jsonstr)` parses JSON whose top level is an object or an array.
  Object members that are `null` are dropped. Inside arrays, `null` stays `None`.
  Duplicate keys are rejected.

Conversion errors raise `JsonConversionError`, a subclass of `ValueError`.

```python
from shttps.jsonconv import json_to_table, table_to_json

assert json_to_table('{"a": 1, "b": null}') == {"a": 1}
assert table_to_json({"n": 2.0}) == '{\n   "n": 2\n}'
```

### `shttps.config`

`Config` wraps a mapping of global names to tables and reads typed values from it:

- `config_string`
- `config_boolean`
- `config_integer`
- `config_float`
- `config_string_list`
- `config_string_table`
- `config_route`

If a value is not set, the given default is returned. If a value has the wrong
type, `ConfigError` is raised.

`config_route` returns `Route` objects. Each has an `HttpMethod`, a route and a
script.

`load_config(path)` reads a JSON file when the name ends in `.json`, and TOML
otherwise.

```python
from shttps.config import Config, HttpMethod

cfg = Config({
    "sipi": {"port": 1024},
    "routes": [{"method": "GET", "route": "/test", "script": "test.lua"}],
})
assert cfg.config_integer("sipi", "port", 80) == 1024
assert cfg.config_string("sipi", "hostname", "localhost") == "localhost"
assert cfg.config_route("routes")[0].method is HttpMethod.GET
```

### `shttps.httpclient`

`http_request(method, url, headers=None, timeout=2000)` performs a GET request.
The timeout is given in milliseconds. Redirects are followed.

The result is an `HttpResponse` with these fields:

- `status_code`
- `body` (bytes)
- `duration` (milliseconds)
- `header` (dict)

A response with an error status is returned like any other response. An
unsupported method or a failed request raises `HttpError`.

## What the package does not do

The package does not include the HTTP server itself, the embedded script
interpreter, or the per-request objects through which a script sees a request
and builds its response. It also has no command-line program. These helpers are
meant to be called from code that supplies those parts.

## Tests

```
pip install .[test]
pytest
```