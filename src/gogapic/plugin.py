"""protoc plugin entry point: CodeGeneratorRequest in, CodeGeneratorResponse out."""

from __future__ import annotations

import sys
from typing import BinaryIO

from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError, EncodeError

from gogapic.codegen.assembler import ResponseAssembler
from gogapic.codegen.generators.service import LongRunningPredicate, generate_service, long_running_predicate
from gogapic.codegen.index import DescriptorIndex
from gogapic.config import GeneratorConfig, load_config_from_env
from gogapic.exceptions import (
    GeneratorError,
    RequestDecodeError,
    RequestReadError,
    ResponseEncodeError,
    ResponseWriteError,
)
from gogapic.observability import LogContext, get_logger

__all__ = [
    "decode_request",
    "encode_response",
    "generate",
    "main",
    "run",
]

logger = get_logger(__name__)


def decode_request(data: bytes) -> plugin_pb2.CodeGeneratorRequest:
    try:
        return plugin_pb2.CodeGeneratorRequest.FromString(data)
    except DecodeError as exc:
        raise RequestDecodeError(message=f"Failed to decode request: {exc}", cause=exc) from exc


def encode_response(response: plugin_pb2.CodeGeneratorResponse) -> bytes:
    try:
        return response.SerializeToString()
    except EncodeError as exc:
        raise ResponseEncodeError(message=f"Failed to encode response: {exc}", cause=exc) from exc


def generate(
    request: plugin_pb2.CodeGeneratorRequest,
    config: GeneratorConfig | None = None,
    *,
    out_dir: str | None = None,
    year: int | None = None,
    is_long_running: LongRunningPredicate | None = None,
) -> plugin_pb2.CodeGeneratorResponse:
    """Generate a client for every service of every requested file.

    ``out_dir`` overrides the request parameter, which is otherwise used
    verbatim as the directory of every output file.
    """
    config = config or GeneratorConfig()
    is_long_running = is_long_running or long_running_predicate(config.lro_output_type)
    index = DescriptorIndex.from_files(request.proto_file)
    assembler = ResponseAssembler(
        request.parameter if out_dir is None else out_dir,
        package_name=config.package_name,
        copyright_holder=config.copyright_holder,
        year=year,
    )

    wanted = set(request.file_to_generate)
    for file in request.proto_file:
        if file.name not in wanted:
            continue
        for service in file.service:
            with LogContext(proto_file=file.name, service=service.name):
                output = generate_service(
                    index,
                    file,
                    service,
                    is_long_running=is_long_running,
                    retry=config.retry,
                )
                header, _ = assembler.commit(service.name, output)
                logger.debug(
                    "Generated %s (%d methods, %d long-running)",
                    header.name,
                    len(service.method),
                    len(output.long_running_methods),
                )

    logger.info(
        "Generated %d file(s) from %d requested proto file(s)",
        len(assembler.files) // 2,
        len(wanted),
    )
    return assembler.to_response()


def run(
    stdin: BinaryIO,
    stdout: BinaryIO,
    config: GeneratorConfig | None = None,
    *,
    out_dir: str | None = None,
) -> None:
    """Read a request from ``stdin`` and write the response to ``stdout``.

    Nothing is written unless the whole run succeeds.
    """
    try:
        data = stdin.read()
    except OSError as exc:
        raise RequestReadError(message=f"Failed to read request: {exc}", cause=exc) from exc

    request = decode_request(data)
    payload = encode_response(generate(request, config, out_dir=out_dir))

    try:
        stdout.write(payload)
        stdout.flush()
    except OSError as exc:
        raise ResponseWriteError(message=f"Failed to write response: {exc}", cause=exc) from exc


def main() -> int:
    try:
        config = load_config_from_env()
        logger.setLevel(config.log_level)
        run(sys.stdin.buffer, sys.stdout.buffer, config)
    except GeneratorError as exc:
        logger.error("protoc-gen-gogapic: %s (code %d)", exc.message, exc.code)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
