from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from gogapic.exceptions import ConfigError, GeneratorError

from .models import GeneratorConfig

__all__ = ["CONFIG_ENV", "load_config", "load_config_from_env"]

CONFIG_ENV = "GOGAPIC_CONFIG"
_ROOT_SECTION = "gogapic"

_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")


def load_config(path: str | Path) -> GeneratorConfig:
    """Load a YAML config file into GeneratorConfig."""
    data = _load_config_mapping(path)
    try:
        return GeneratorConfig.from_dict(data)
    except GeneratorError:
        raise
    except Exception as exc:
        raise ConfigError(message=f"Failed to build config from {path}", cause=exc) from exc


def load_config_from_env(environ: Mapping[str, str] | None = None) -> GeneratorConfig:
    """Load the file named by ``GOGAPIC_CONFIG``; defaults when it is unset."""
    env = os.environ if environ is None else environ
    path = env.get(CONFIG_ENV, "").strip()
    if not path:
        return GeneratorConfig()
    return load_config(path)


def _load_config_mapping(path: str | Path) -> dict[str, Any]:
    config_path = Path(path).expanduser()
    if config_path.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(message=f"Unsupported config file type: {config_path.suffix}")
    if not config_path.is_file():
        raise ConfigError(message=f"Config file not found: {config_path}")
    try:
        content = config_path.read_text(encoding="utf-8")
        parsed = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(message=f"Failed to load config file: {config_path}", cause=exc) from exc
    if not isinstance(parsed, Mapping):
        raise ConfigError(message="Configuration must be a mapping")
    return _normalize_config_root(_expand_env_in_data(parsed))


def _expand_env_in_data(value: Any) -> Any:
    if isinstance(value, str):
        return _expand_env_value(value)
    if isinstance(value, Mapping):
        return {key: _expand_env_in_data(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_expand_env_in_data(item) for item in value]
    return value


def _expand_env_value(value: str) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        default = match.group(2)
        env_value = os.getenv(name)
        if env_value is None or env_value == "":
            if default is None:
                raise ConfigError(
                    message=f"Environment variable '{name}' is not set and no default provided"
                )
            return default
        return env_value

    return _ENV_PATTERN.sub(replace, value)


def _normalize_config_root(data: Mapping[str, Any]) -> dict[str, Any]:
    if _ROOT_SECTION not in data:
        return dict(data)
    nested = data[_ROOT_SECTION]
    if not isinstance(nested, Mapping):
        raise ConfigError(message=f"{_ROOT_SECTION} section must be a mapping")
    merged = dict(nested)
    for key, value in data.items():
        if key != _ROOT_SECTION:
            merged[key] = value
    return merged
