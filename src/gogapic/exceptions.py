from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GeneratorError(Exception):
    """Base class for generator failures with a canonical error shape."""

    code: int
    message: str
    data: Any | None = None
    cause: Exception | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (self.message,))
        if self.cause is not None:
            object.__setattr__(self, "__cause__", self.cause)
            object.__setattr__(self, "__suppress_context__", True)

    def to_error_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class RequestReadError(GeneratorError):
    """Raised when the serialized request cannot be read."""

    code: int = 1000
    message: str = "Failed to read request"


@dataclass(frozen=True)
class RequestDecodeError(GeneratorError):
    """Raised when the request bytes are not a valid CodeGeneratorRequest."""

    code: int = 1001
    message: str = "Failed to decode request"


@dataclass(frozen=True)
class ResponseEncodeError(GeneratorError):
    """Raised when the response cannot be serialized."""

    code: int = 1002
    message: str = "Failed to encode response"


@dataclass(frozen=True)
class ResponseWriteError(GeneratorError):
    """Raised when the serialized response cannot be written."""

    code: int = 1003
    message: str = "Failed to write response"


@dataclass(frozen=True)
class IndexAlreadyBuiltError(GeneratorError):
    """Raised when a descriptor index is built a second time."""

    code: int = 2000
    message: str = "Descriptor index already built"


@dataclass(frozen=True)
class MissingDescriptorsError(GeneratorError):
    """Raised when a descriptor index is built without any file list."""

    code: int = 2001
    message: str = "No file descriptors supplied"


@dataclass(frozen=True)
class UnresolvedTypeError(GeneratorError):
    """Raised when a method references a type absent from the request."""

    code: int = 3000
    message: str = "Unresolved type"


@dataclass(frozen=True)
class MissingGoPackageError(GeneratorError):
    """Raised when a referenced file declares no go_package option."""

    code: int = 3001
    message: str = "Missing go_package option"


@dataclass(frozen=True)
class ConfigError(GeneratorError):
    """Raised when configuration loading or validation fails."""

    code: int = 4000
    message: str = "Invalid configuration"


_EXCEPTIONS_BY_CODE: dict[int, type[GeneratorError]] = {
    cls.code: cls  # type: ignore[misc]
    for cls in (
        RequestReadError,
        RequestDecodeError,
        ResponseEncodeError,
        ResponseWriteError,
        IndexAlreadyBuiltError,
        MissingDescriptorsError,
        UnresolvedTypeError,
        MissingGoPackageError,
        ConfigError,
    )
}


def exception_from_code(code: int, message: str | None = None, data: Any | None = None) -> GeneratorError:
    """Build the exception registered for ``code``, falling back to the base class."""
    cls = _EXCEPTIONS_BY_CODE.get(code)
    if cls is None:
        return GeneratorError(code=code, message=message or "Generator error", data=data)
    if message is None:
        return cls(data=data)
    return cls(message=message, data=data)


__all__ = [
    "ConfigError",
    "GeneratorError",
    "IndexAlreadyBuiltError",
    "MissingDescriptorsError",
    "MissingGoPackageError",
    "RequestDecodeError",
    "RequestReadError",
    "ResponseEncodeError",
    "ResponseWriteError",
    "UnresolvedTypeError",
    "exception_from_code",
]
