from collections.abc import Mapping
from typing import Any

import toml


class ConfigNotFound(Exception):
    pass


class SecretNotFound(Exception):
    pass


def load(configfile: str) -> dict[str, Any]:
    try:
        return toml.load(configfile)
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigNotFound(f"unable to load config file {configfile}: {e!s}") from e


def read(config: Mapping[str, Any], secret: Mapping[str, str]) -> Any:
    path = secret["path"]
    field = secret["field"]
    try:
        for t in path.split("/"):
            config = config[t]
        return config[field]
    except Exception as e:
        raise SecretNotFound(f"key not found in config file {path}: {e!s}") from None


def read_optional(
    config: Mapping[str, Any] | None, secret: Mapping[str, str], default: Any = None
) -> Any:
    if config is None:
        return default
    try:
        return read(config, secret)
    except SecretNotFound:
        return default
