"""Configuration helpers."""

from .loader import CONFIG_ENV, load_config, load_config_from_env
from .models import GeneratorConfig, RetrySettings

__all__ = [
    "CONFIG_ENV",
    "GeneratorConfig",
    "RetrySettings",
    "load_config",
    "load_config_from_env",
]
