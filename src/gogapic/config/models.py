from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, cast

from gogapic.codegen.naming import is_go_package_name
from gogapic.exceptions import ConfigError

__all__ = ["GeneratorConfig", "RetrySettings"]

FieldSpec = tuple[str, Callable[[Any, str], Any], str]

_GO_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _ensure_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(message=f"{field_name} must be a mapping")
    return cast(Mapping[str, Any], value)


def _coerce_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(message=f"{field_name} must be an int")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ConfigError(message=f"{field_name} must be an int", cause=exc) from exc
    raise ConfigError(message=f"{field_name} must be an int")


def _coerce_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(message=f"{field_name} must be a float")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise ConfigError(message=f"{field_name} must be a float", cause=exc) from exc
    raise ConfigError(message=f"{field_name} must be a float")


def _coerce_str(value: Any, field_name: str) -> str:
    if value is None:
        raise ConfigError(message=f"{field_name} must not be null")
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_str_list(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Sequence):
        return [_coerce_str(item, field_name) for item in value]
    raise ConfigError(message=f"{field_name} must be a list of strings")


def _optional(coerce: Callable[[Any, str], Any]) -> Callable[[Any, str], Any]:
    def _wrapped(value: Any, field_name: str) -> Any:
        if value is None:
            return None
        return coerce(value, field_name)

    return _wrapped


def _extract_fields(payload: Mapping[str, Any], specs: Sequence[FieldSpec]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for name, coerce, label in specs:
        if name in payload:
            kwargs[name] = coerce(payload[name], label)
    return kwargs


def _apply_field_specs(target: Any, specs: Sequence[FieldSpec]) -> None:
    for name, coerce, label in specs:
        setattr(target, name, coerce(getattr(target, name), label))


def _reject_unknown(payload: Mapping[str, Any], known: set[str], section: str) -> None:
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ConfigError(
            message=f"Unknown {section} option(s): {', '.join(unknown)}",
            data={"unknown": unknown},
        )


_RETRY_FIELD_SPECS: tuple[FieldSpec, ...] = (
    ("codes", _coerce_str_list, "retry.codes"),
    ("initial_backoff_ms", _coerce_int, "retry.initial_backoff_ms"),
    ("max_backoff_ms", _coerce_int, "retry.max_backoff_ms"),
    ("multiplier", _coerce_float, "retry.multiplier"),
)


@dataclass
class RetrySettings:
    """Retry behaviour baked into the generated default call options.

    ``codes`` are gRPC status code names (``Unavailable``,
    ``DeadlineExceeded``...). With no codes the generated clients do not
    retry.
    """

    codes: list[str] = field(default_factory=list)
    initial_backoff_ms: int = 100
    max_backoff_ms: int = 60000
    multiplier: float = 1.3

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> RetrySettings:
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        payload = _ensure_mapping(data, "retry")
        _reject_unknown(payload, {name for name, _, _ in _RETRY_FIELD_SPECS}, "retry")
        return cls(**_extract_fields(payload, _RETRY_FIELD_SPECS))

    def __post_init__(self) -> None:
        _apply_field_specs(self, _RETRY_FIELD_SPECS)
        for code in self.codes:
            if not _GO_IDENTIFIER.match(code):
                raise ConfigError(message=f"retry.codes contains an invalid code name: {code!r}")
        if self.initial_backoff_ms <= 0:
            raise ConfigError(message="retry.initial_backoff_ms must be > 0")
        if self.max_backoff_ms < self.initial_backoff_ms:
            raise ConfigError(message="retry.max_backoff_ms must be >= retry.initial_backoff_ms")
        if self.multiplier < 1.0:
            raise ConfigError(message="retry.multiplier must be >= 1")


_GENERATOR_FIELD_SPECS: tuple[FieldSpec, ...] = (
    ("package_name", _optional(_coerce_str), "package_name"),
    ("copyright_holder", _coerce_str, "copyright_holder"),
    ("lro_output_type", _coerce_str, "lro_output_type"),
    ("log_level", _coerce_str, "log_level"),
)


@dataclass
class GeneratorConfig:
    package_name: str | None = None
    copyright_holder: str = "Google LLC"
    lro_output_type: str = ".google.longrunning.Operation"
    retry: RetrySettings = field(default_factory=RetrySettings)
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> GeneratorConfig:
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        payload = _ensure_mapping(data, "config")
        known = {name for name, _, _ in _GENERATOR_FIELD_SPECS} | {"retry"}
        _reject_unknown(payload, known, "config")
        kwargs = _extract_fields(payload, _GENERATOR_FIELD_SPECS)
        if "retry" in payload:
            kwargs["retry"] = RetrySettings.from_dict(payload["retry"])
        return cls(**kwargs)

    def __post_init__(self) -> None:
        _apply_field_specs(self, _GENERATOR_FIELD_SPECS)
        if not isinstance(self.retry, RetrySettings):
            self.retry = RetrySettings.from_dict(self.retry)  # type: ignore[arg-type]
        if self.package_name is not None and not is_go_package_name(self.package_name):
            raise ConfigError(
                message=f"package_name is not a usable Go package name: {self.package_name!r}"
            )
        if not self.lro_output_type.startswith("."):
            raise ConfigError(message="lro_output_type must be fully-qualified (leading '.')")
        self.log_level = self.log_level.strip().upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError(message=f"log_level must be one of {', '.join(sorted(_LOG_LEVELS))}")
