import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from loginbench.credentials.types import Credential

from .types import ConfigError, RunConfig, UnsupportedConfigFormatError


def load_config(path: str | Path) -> RunConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    return _build_run_config(raw_file)


def parse_credential(value: object) -> Credential:
    """
    Build a Credential from either ``"username:password"`` or a mapping with
    ``username`` and ``password`` keys. Only the first colon separates the two,
    so passwords may contain colons.
    """
    if isinstance(value, str):
        index = value.find(":")
        if index < 0:
            raise ConfigError(f"User must be given as username:password, got {value!r}")
        username, password = value[:index], value[index + 1 :]
    elif isinstance(value, Mapping):
        for key in ("username", "password"):
            if key not in value:
                raise ConfigError(f"User entry is missing '{key}'")
            if not isinstance(value[key], str):
                raise ConfigError(f"User '{key}' should be a string")
        username, password = value["username"], value["password"]
    else:
        raise ConfigError(
            f"User should be a string or a mapping, got {type(value)}"
        )

    if len(username.strip()) < 1:
        raise ConfigError("A username can't be empty")

    return Credential(username.strip(), password)


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: YAML parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    return raw_file


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: JSON parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_run_config(raw: Mapping[str, Any]) -> RunConfig:
    keys = {
        "start_url",
        "logins",
        "concurrency",
        "users",
        "output",
        "screenshot",
        "seed",
        "grace_period",
    }
    fields: dict[str, Any] = {}

    for field in raw.keys():
        if field not in keys:
            raise ConfigError(f"Can't process: {field}")

    if "start_url" in raw:
        if not isinstance(raw["start_url"], str):
            raise ConfigError("The start_url should be a string")
        if len(raw["start_url"].strip()) < 1:
            raise ConfigError("Please provide a start_url or remove this field")
        fields["start_url"] = raw["start_url"].strip()

    for name in ("logins", "concurrency"):
        if name in raw:
            fields[name] = _positive_int(name, raw[name])

    if "seed" in raw:
        # bool is an int subclass
        if not isinstance(raw["seed"], int) or isinstance(raw["seed"], bool):
            raise ConfigError("The seed should be an integer")
        fields["seed"] = raw["seed"]

    if "users" in raw:
        if not isinstance(raw["users"], list):
            raise ConfigError("Users should be in a list.")
        fields["users"] = tuple(parse_credential(item) for item in raw["users"])

    if "output" in raw:
        if not isinstance(raw["output"], str):
            raise ConfigError("The output should be a string")
        if len(raw["output"].strip()) < 1:
            raise ConfigError("Please provide an output path or remove this field")
        fields["output"] = raw["output"].strip()

    if "screenshot" in raw:
        if not isinstance(raw["screenshot"], bool):
            raise ConfigError("The screenshot flag should be a boolean")
        fields["screenshot"] = raw["screenshot"]

    if "grace_period" in raw:
        value = raw["grace_period"]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError("The grace_period should be a number")
        if value <= 0:
            raise ConfigError("The grace_period should be positive")
        fields["grace_period"] = float(value)

    return RunConfig(**fields)


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{name}' should be an integer, got {type(value)}")

    if value < 1:
        raise ConfigError(f"'{name}' must be at least 1, got {value}")

    return value
