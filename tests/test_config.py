import json

import pytest

from shttps.config import Config, ConfigError, HttpMethod, Route, load_config


@pytest.fixture
def cfg():
    return Config(
        {
            "sipi": {
                "hostname": "localhost",
                "port": 1024,
                "ratio": 2.5,
                "ratio_str": "0.75",
                "ssl": True,
                "flag_text": "yes",
                "nested": {"a": 1},
                "dirs": ["a", "b", 3, True, "c"],
                "dirs_gap": ["x", None, "y"],
                "dirs_map": {1: "one", 2: "two", 4: "four"},
                "mimes": {"b": "B", "a": "A", 3: 4},
                "bad_keys": {(1, 2): "v"},
                "bad_values": {"k": [1]},
            },
            "arraytab": ["first"],
            "routes": [
                {"method": "GET", "route": "/api", "script": "api.lua"},
                {"method": "POST", "route": "/upload", "script": "upload.lua"},
            ],
            "notatable": 5,
        }
    )


def test_config_string_value_and_default(cfg):
    assert cfg.config_string("sipi", "hostname", "x") == "localhost"
    assert cfg.config_string("sipi", "missing", "fallback") == "fallback"
    assert cfg.config_string("nosuch", "hostname", "fallback") == "fallback"
    assert cfg.config_string("arraytab", "hostname", "fallback") == "fallback"


def test_config_string_converts_numbers(cfg):
    assert cfg.config_string("sipi", "port", "") == "1024"


def test_config_string_rejects_other_types(cfg):
    with pytest.raises(ConfigError, match="String expected for sipi.ssl"):
        cfg.config_string("sipi", "ssl", "")
    with pytest.raises(ConfigError):
        cfg.config_string("sipi", "nested", "")


def test_config_boolean(cfg):
    assert cfg.config_boolean("sipi", "ssl", False) is True
    assert cfg.config_boolean("sipi", "missing", True) is True
    with pytest.raises(ConfigError):
        cfg.config_boolean("sipi", "flag_text", False)


def test_config_integer(cfg):
    assert cfg.config_integer("sipi", "port", 0) == 1024
    assert cfg.config_integer("sipi", "missing", 7) == 7
    with pytest.raises(ConfigError, match="Integer expected for sipi.ratio"):
        cfg.config_integer("sipi", "ratio", 0)
    with pytest.raises(ConfigError):
        cfg.config_integer("sipi", "ssl", 0)


def test_config_float(cfg):
    assert cfg.config_float("sipi", "ratio", 0.0) == 2.5
    assert cfg.config_float("sipi", "port", 0.0) == 1024.0
    assert cfg.config_float("sipi", "ratio_str", 0.0) == 0.75
    assert cfg.config_float("sipi", "missing", 1.5) == 1.5
    with pytest.raises(ConfigError, match="Number expected"):
        cfg.config_float("sipi", "hostname", 0.0)


def test_config_string_list(cfg):
    assert cfg.config_string_list("sipi", "dirs") == ["a", "b", "3", "c"]
    assert cfg.config_string_list("sipi", "dirs_gap") == ["x"]
    assert cfg.config_string_list("sipi", "dirs_map") == ["one", "two"]
    assert cfg.config_string_list("sipi", "missing") == []
    with pytest.raises(ConfigError, match="'hostname'"):
        cfg.config_string_list("sipi", "hostname")


def test_config_string_table(cfg):
    result = cfg.config_string_table("sipi", "mimes", {})
    assert result == {"3": "4", "a": "A", "b": "B"}
    assert list(result) == sorted(result)


def test_config_string_table_default_and_errors(cfg):
    default = {"k": "v"}
    assert cfg.config_string_table("sipi", "missing", default) == default
    assert cfg.config_string_table("nosuch", "mimes", default) == default
    with pytest.raises(ConfigError):
        cfg.config_string_table("sipi", "hostname", {})
    with pytest.raises(ConfigError, match="Key element"):
        cfg.config_string_table("sipi", "bad_keys", {})
    with pytest.raises(ConfigError, match="Value element"):
        cfg.config_string_table("sipi", "bad_values", {})


def test_config_route(cfg):
    routes = cfg.config_route("routes")
    assert routes == [
        Route(HttpMethod.GET, "/api", "api.lua"),
        Route(HttpMethod.POST, "/upload", "upload.lua"),
    ]


@pytest.mark.parametrize(
    "data, table",
    [
        ({"r": [{"method": "TRACE", "route": "/", "script": "s"}]}, "r"),
        ({"r": [{"method": "GET", "route": "/"}]}, "r"),
        ({"r": [{"method": "GET", "route": 1, "script": "s"}]}, "r"),
        ({"r": ["notatable"]}, "r"),
        ({"r": 5}, "r"),
        ({}, "r"),
    ],
)
def test_config_route_errors(data, table):
    with pytest.raises(ConfigError):
        Config(data).config_route(table)


def test_config_route_stops_at_gap():
    routes = Config(
        {"r": {1: {"method": "PUT", "route": "/p", "script": "p.lua"}, 3: {}}}
    ).config_route("r")
    assert routes == [Route(HttpMethod.PUT, "/p", "p.lua")]


def test_config_requires_mapping():
    with pytest.raises(TypeError):
        Config(["not", "a", "mapping"])


def test_load_config_toml(tmp_path):
    path = tmp_path / "server.toml"
    path.write_text(
        '[sipi]\nhostname = "localhost"\nport = 1024\n\n'
        '[[routes]]\nmethod = "DELETE"\nroute = "/x"\nscript = "x.lua"\n',
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.config_string("sipi", "hostname", "") == "localhost"
    assert cfg.config_integer("sipi", "port", 0) == 1024
    assert cfg.config_route("routes") == [Route(HttpMethod.DELETE, "/x", "x.lua")]


def test_load_config_json(tmp_path):
    path = tmp_path / "server.json"
    path.write_text(json.dumps({"sipi": {"ssl": False}}), encoding="utf-8")
    assert load_config(path).config_boolean("sipi", "ssl", True) is False


def test_load_config_invalid(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("this is = = not toml", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)
    json_path = tmp_path / "list.json"
    json_path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(json_path)