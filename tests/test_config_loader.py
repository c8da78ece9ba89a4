# tests/test_config_loader.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

from loginbench.config.loader import load_config, parse_credential
from loginbench.config.types import (
    ConfigError,
    RunConfig,
    UnsupportedConfigFormatError,
)
from loginbench.credentials.types import Credential


# -------------------------
# Helpers
# -------------------------


def write_text(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def write_json(path: Path, obj: object) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


# -------------------------
# Basic file/path errors
# -------------------------


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")


def test_path_is_dir_raises_config_error(tmp_path: Path) -> None:
    d = tmp_path / "dir"
    d.mkdir()
    with pytest.raises(ConfigError):
        load_config(d)


def test_unsupported_extension_raises_unsupported_format(tmp_path: Path) -> None:
    p = write_text(tmp_path / "config.txt", "logins: 3")
    with pytest.raises(UnsupportedConfigFormatError):
        load_config(p)


# -------------------------
# Parse errors are wrapped
# -------------------------


@pytest.mark.parametrize(
    "name, content",
    [
        ("config.yaml", "users: [\n"),
        ("config.toml", "users = ["),
        ("config.json", '{"users": '),
    ],
)
def test_invalid_file_is_wrapped_as_config_error(
    tmp_path: Path, name: str, content: str
) -> None:
    p = write_text(tmp_path / name, content)
    with pytest.raises(ConfigError):
        load_config(p)


@pytest.mark.parametrize(
    "ext, content",
    [
        (".yaml", "[]\n"),
        (".yaml", "null\n"),
        (".json", "[]"),
        (".json", "null"),
    ],
)
def test_top_level_not_mapping_raises(tmp_path: Path, ext: str, content: str) -> None:
    p = write_text(tmp_path / f"config{ext}", content)
    with pytest.raises(ConfigError):
        load_config(p)


# -------------------------
# Loading each format
# -------------------------


def test_yaml_config_is_loaded(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "run.yml",
        "start_url: https://rp.example.com\n"
        "logins: 10\n"
        "concurrency: 4\n"
        "users:\n"
        "  - alice:secret\n"
        "  - username: bob\n"
        "    password: hunter2\n"
        "output: out\n"
        "screenshot: true\n"
        "seed: 7\n"
        "grace_period: 2.5\n",
    )

    config = load_config(p)

    assert config == RunConfig(
        start_url="https://rp.example.com",
        logins=10,
        concurrency=4,
        users=(Credential("alice", "secret"), Credential("bob", "hunter2")),
        output="out",
        screenshot=True,
        seed=7,
        grace_period=2.5,
    )


def test_toml_config_is_loaded(tmp_path: Path) -> None:
    p = write_text(
        tmp_path / "run.toml",
        'start_url = "https://rp.example.com"\nlogins = 3\nusers = ["a:b"]\n',
    )

    config = load_config(p)

    assert config.start_url == "https://rp.example.com"
    assert config.logins == 3
    assert config.users == (Credential("a", "b"),)


def test_json_missing_keys_keep_defaults(tmp_path: Path) -> None:
    p = write_json(tmp_path / "run.json", {"users": ["a:b"]})

    config = load_config(p)

    assert config.logins == 40
    assert config.concurrency == 2
    assert config.output is None
    assert config.screenshot is False
    assert config.grace_period == 5.0


# -------------------------
# Field validation
# -------------------------


def test_unknown_key_raises(tmp_path: Path) -> None:
    p = write_json(tmp_path / "run.json", {"retries": 3})
    with pytest.raises(ConfigError):
        load_config(p)


@pytest.mark.parametrize(
    "obj",
    [
        {"logins": 0},
        {"logins": -1},
        {"logins": "10"},
        {"logins": True},
        {"concurrency": 0},
        {"concurrency": 1.5},
        {"users": "a:b"},
        {"users": ["nocolon"]},
        {"users": [":password"]},
        {"users": [{"username": "a"}]},
        {"users": [42]},
        {"start_url": ""},
        {"start_url": 12},
        {"output": "  "},
        {"screenshot": "yes"},
        {"seed": "1"},
        {"grace_period": 0},
        {"grace_period": "5"},
    ],
)
def test_invalid_field_raises(tmp_path: Path, obj: dict) -> None:
    p = write_json(tmp_path / "run.json", obj)
    with pytest.raises(ConfigError):
        load_config(p)


# -------------------------
# Credentials
# -------------------------


def test_password_may_contain_colons() -> None:
    assert parse_credential("alice:pa:ss") == Credential("alice", "pa:ss")


def test_empty_password_is_allowed() -> None:
    assert parse_credential("alice:") == Credential("alice", "")


def test_credential_repr_hides_password() -> None:
    assert "secret" not in repr(Credential("alice", "secret"))


# -------------------------
# Merging and validation
# -------------------------


def test_merged_ignores_none_overrides() -> None:
    base = RunConfig(logins=10, users=(Credential("a", "b"),))

    merged = base.merged(logins=None, concurrency=5, output=None)

    assert merged.logins == 10
    assert merged.concurrency == 5
    assert merged.users == base.users


@pytest.mark.parametrize(
    "config",
    [
        RunConfig(users=()),
        RunConfig(start_url="", users=(Credential("a", "b"),)),
        RunConfig(logins=0, users=(Credential("a", "b"),)),
        RunConfig(concurrency=0, users=(Credential("a", "b"),)),
        RunConfig(grace_period=0, users=(Credential("a", "b"),)),
    ],
)
def test_validate_rejects_fatal_config(config: RunConfig) -> None:
    with pytest.raises(ConfigError):
        config.validate()


def test_validate_returns_config() -> None:
    config = RunConfig(users=(Credential("a", "b"),))
    assert config.validate() is config
