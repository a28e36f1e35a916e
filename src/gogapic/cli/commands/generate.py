"""Generate command for the gogapic CLI.

Runs the generator on a serialized CodeGeneratorRequest saved to disk, which
is handy for reproducing a protoc invocation without protoc.
"""
from __future__ import annotations

import argparse
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import IO, ContextManager, Final

from gogapic.config import GeneratorConfig, load_config, load_config_from_env
from gogapic.exceptions import GeneratorError
from gogapic.observability import get_logger
from gogapic.plugin import decode_request, encode_response, generate, run

__all__ = ["register_parser", "run_generate"]

EXIT_SUCCESS: Final = 0
EXIT_ERROR: Final = 1

logger = get_logger("gogapic.cli")


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the generate command subparser.

    Args:
        subparsers: The argparse subparsers action to add to.
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate Go clients from a serialized CodeGeneratorRequest.",
        description="Generate Go clients from a serialized CodeGeneratorRequest.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gogapic generate --request request.bin --output response.bin
  gogapic generate --request request.bin --parameter cloud/foo --dry-run
  protoc ... | gogapic generate --config gogapic.yaml > response.bin
        """,
    )
    parser.add_argument(
        "--request",
        type=Path,
        help="Path to the serialized request (default: stdin).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Path for the serialized response (default: stdout).",
    )
    parser.add_argument(
        "--parameter",
        help="Output directory prefix, overriding the request parameter.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a YAML configuration file (default: $GOGAPIC_CONFIG).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be generated instead of writing the response.",
    )
    parser.set_defaults(handler=run_generate)


def _load(args: argparse.Namespace) -> GeneratorConfig:
    if args.config is not None:
        return load_config(args.config)
    return load_config_from_env()


def _open_input(path: Path | None) -> ContextManager[IO[bytes]]:
    if path is None:
        return nullcontext(sys.stdin.buffer)
    return path.open("rb")


def _apply_log_level(level: int | str) -> None:
    for name in ("gogapic.plugin", "gogapic.cli"):
        get_logger(name, level=level)


def _dry_run(args: argparse.Namespace, config: GeneratorConfig) -> None:
    with _open_input(args.request) as stdin:
        request = decode_request(stdin.read())
    response = generate(request, config, out_dir=args.parameter)
    encode_response(response)
    for entry in response.file:
        if entry.name:
            print(entry.name)


def run_generate(args: argparse.Namespace) -> int:
    try:
        config = _load(args)
        _apply_log_level(args.log_level or config.log_level)
        if args.dry_run:
            _dry_run(args, config)
            return EXIT_SUCCESS
        with _open_input(args.request) as stdin:
            if args.output is None:
                run(stdin, sys.stdout.buffer, config, out_dir=args.parameter)
            else:
                # No file is created unless generation succeeds.
                request = decode_request(stdin.read())
                payload = encode_response(generate(request, config, out_dir=args.parameter))
                args.output.write_bytes(payload)
    except GeneratorError as exc:
        logger.error("generate failed: %s (code %d)", exc.message, exc.code)
        return EXIT_ERROR
    except OSError as exc:
        logger.error("generate failed: %s", exc)
        return EXIT_ERROR
    return EXIT_SUCCESS
