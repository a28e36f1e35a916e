from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from gogapic.exceptions import (
    ConfigError,
    GeneratorError,
    IndexAlreadyBuiltError,
    MissingDescriptorsError,
    MissingGoPackageError,
    RequestDecodeError,
    RequestReadError,
    ResponseEncodeError,
    ResponseWriteError,
    UnresolvedTypeError,
    exception_from_code,
)


EXCEPTION_DEFAULTS = [
    (RequestReadError, 1000, "Failed to read request"),
    (RequestDecodeError, 1001, "Failed to decode request"),
    (ResponseEncodeError, 1002, "Failed to encode response"),
    (ResponseWriteError, 1003, "Failed to write response"),
    (IndexAlreadyBuiltError, 2000, "Descriptor index already built"),
    (MissingDescriptorsError, 2001, "No file descriptors supplied"),
    (UnresolvedTypeError, 3000, "Unresolved type"),
    (MissingGoPackageError, 3001, "Missing go_package option"),
    (ConfigError, 4000, "Invalid configuration"),
]


@pytest.mark.parametrize("exc_class, expected_code, expected_message", EXCEPTION_DEFAULTS)
def test_exception_defaults(exc_class, expected_code, expected_message):
    """Every exception class carries its own code and message."""
    exc = exc_class()
    assert exc.code == expected_code
    assert exc.message == expected_message
    assert exc.args == (expected_message,)
    assert isinstance(exc, GeneratorError)


@pytest.mark.parametrize("exc_class, expected_code, expected_message", EXCEPTION_DEFAULTS)
def test_exception_can_override_message_and_data(exc_class, expected_code, expected_message):
    exc = exc_class(message="custom message", data={"file": "a.proto"})
    assert exc.code == expected_code
    assert exc.message == "custom message"
    assert exc.data == {"file": "a.proto"}
    assert str(exc) == "custom message"


@pytest.mark.parametrize(
    "exc_class, range_start, range_end",
    [
        (RequestReadError, 1000, 2000),
        (RequestDecodeError, 1000, 2000),
        (ResponseEncodeError, 1000, 2000),
        (ResponseWriteError, 1000, 2000),
        (IndexAlreadyBuiltError, 2000, 3000),
        (MissingDescriptorsError, 2000, 3000),
        (UnresolvedTypeError, 3000, 4000),
        (MissingGoPackageError, 3000, 4000),
        (ConfigError, 4000, 5000),
    ],
)
def test_exception_codes_match_ranges(exc_class, range_start, range_end):
    """Codes are grouped by stage: I/O, index, resolution, configuration."""
    assert range_start <= exc_class().code < range_end


def test_generator_error_is_immutable():
    exc = GeneratorError(code=9000, message="immutable")
    with pytest.raises(FrozenInstanceError):
        exc.message = "mutated"


def test_to_error_dict():
    exc = GeneratorError(code=9000, message="oops", data={"info": 1})
    assert exc.to_error_dict() == {"code": 9000, "message": "oops", "data": {"info": 1}}


def test_cause_is_chained():
    cause = KeyError(".pkg.Missing")
    exc = UnresolvedTypeError(cause=cause)
    assert exc.cause is cause
    assert exc.__cause__ is cause
    assert exc.__suppress_context__ is True


def test_raise_from_keeps_cause():
    with pytest.raises(RequestDecodeError) as exc_info:
        try:
            raise ValueError("bad bytes")
        except ValueError as exc:
            raise RequestDecodeError(cause=exc) from exc
    assert isinstance(exc_info.value.__cause__, ValueError)


@pytest.mark.parametrize("exc_class, expected_code, expected_message", EXCEPTION_DEFAULTS)
def test_exception_from_code(exc_class, expected_code, expected_message):
    exc = exception_from_code(expected_code)
    assert type(exc) is exc_class
    assert exc.message == expected_message


def test_exception_from_code_overrides():
    exc = exception_from_code(3001, message="a.proto has no go_package", data={"file": "a.proto"})
    assert isinstance(exc, MissingGoPackageError)
    assert exc.message == "a.proto has no go_package"
    assert exc.data == {"file": "a.proto"}


def test_exception_from_unknown_code():
    exc = exception_from_code(9999)
    assert type(exc) is GeneratorError
    assert exc.code == 9999
    assert exc.message == "Generator error"
