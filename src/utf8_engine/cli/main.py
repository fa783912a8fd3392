"""Main CLI entry point for the utf8-engine command-line tool.

Provides decode, encode, validate and benchmark commands. Text arguments are
converted back to the raw bytes the shell passed in, so malformed UTF-8
reaches the codec unchanged.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from utf8_engine import __version__
from utf8_engine.codec import Utf8Codec
from utf8_engine.shared import (
    ConfigError,
    EngineConfig,
    ErrorPolicy,
    InvalidSequenceError,
    Utf8Error,
    configure_logging,
    get_logger,
)
from utf8_engine.text import length_in_codepoints

logger = get_logger(__name__, component="cli")


def load_config(config_path: Optional[Path]) -> EngineConfig:
    """Load an engine configuration from a JSON file, defaults if no path.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings
    """
    if config_path is None:
        return EngineConfig()
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e
    return EngineConfig.from_json(content)


def argument_bytes(text: str) -> bytes:
    """Recover the raw bytes of a command-line argument."""
    return os.fsencode(text)


def format_codepoints(codepoints: List[int]) -> str:
    """Lowercase hex values separated by spaces."""
    return " ".join(f"{cp:x}" for cp in codepoints)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="utf8-engine",
        description="Strict UTF-8 decoding, encoding and validation"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Decode command
    decode_parser = subparsers.add_parser(
        "decode", help="Decode an argument and print its codepoints"
    )
    decode_parser.add_argument("text", help="Text to decode")
    decode_parser.add_argument(
        "--replace",
        action="store_true",
        help="Substitute U+FFFD for malformed sequences instead of failing"
    )
    decode_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )

    # Encode command
    encode_parser = subparsers.add_parser(
        "encode", help="Encode hex codepoints to UTF-8"
    )
    encode_parser.add_argument(
        "codepoints",
        nargs="+",
        help="Codepoints in hex, e.g. 41 1f600"
    )
    encode_parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the encoded text instead of hex bytes"
    )

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate", help="Check arguments for well-formed UTF-8"
    )
    validate_parser.add_argument("texts", nargs="+", help="Texts to validate")
    validate_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )

    # Benchmark command
    bench_parser = subparsers.add_parser("bench", help="Run performance benchmarks")
    bench_parser.add_argument(
        "--iterations", "-n",
        type=int,
        help="Iterations per operation (default: $UTF8_ENGINE_BENCH_ITERS or 10000)"
    )
    bench_parser.add_argument(
        "--operation",
        action="append",
        dest="operations",
        help="Operation to run; repeat for several (default: all)"
    )
    bench_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def cmd_decode(args: argparse.Namespace, config: EngineConfig) -> int:
    """Handle decode command."""
    data = argument_bytes(args.text)
    codec = Utf8Codec(config)
    policy = ErrorPolicy.REPLACE if args.replace else codec.error_policy

    if policy is ErrorPolicy.REPLACE:
        result = codec.decode_with_diagnostics(data)
        positions = [entry.position for entry in result.diagnostics]
        return _print_decoded(args, data, result.codepoints, positions)

    try:
        codepoints = codec.decode(data, ErrorPolicy.REJECT)
    except InvalidSequenceError as e:
        print(f"Error: invalid UTF-8: {e}", file=sys.stderr)
        return 1
    return _print_decoded(args, data, codepoints, [])


def _print_decoded(
    args: argparse.Namespace,
    data: bytes,
    codepoints: List[int],
    replaced_at: List[Optional[int]],
) -> int:
    text = data.decode("utf-8", errors="replace")
    if args.format == "json":
        payload: Dict[str, Any] = {
            "input": text,
            "codepoints": codepoints,
            "replacements": replaced_at,
        }
        print(json.dumps(payload, indent=2))
    else:
        print(text)
        print(format_codepoints(codepoints))
    return 0


def cmd_encode(args: argparse.Namespace, config: EngineConfig) -> int:
    """Handle encode command."""
    try:
        codepoints = [int(value, 16) for value in args.codepoints]
    except ValueError as e:
        print(f"Error: not a hex codepoint: {e}", file=sys.stderr)
        return 1

    codec = Utf8Codec(config)
    try:
        encoded = codec.encode(codepoints)
    except InvalidSequenceError as e:
        print(f"Error: cannot encode: {e}", file=sys.stderr)
        return 1

    if args.raw:
        print(encoded.decode("utf-8"))
    else:
        print(" ".join(f"{byte:02x}" for byte in encoded))
    return 0


def cmd_validate(args: argparse.Namespace, config: EngineConfig) -> int:
    """Handle validate command."""
    results = []
    for text in args.texts:
        data = argument_bytes(text)
        try:
            count = length_in_codepoints(data)
            results.append({
                "input": text,
                "valid": True,
                "codepoints": count,
                "bytes": len(data),
            })
        except InvalidSequenceError as e:
            results.append({
                "input": data.decode("utf-8", errors="replace"),
                "valid": False,
                "error": str(e),
                "position": e.position,
            })

    valid_count = sum(1 for r in results if r["valid"])

    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        print(f"Validated {len(results)} inputs, {valid_count} valid")
        print("-" * 50)
        for result in results:
            if result["valid"]:
                print(f"✓ {result['input']} "
                      f"({result['codepoints']} codepoints, {result['bytes']} bytes)")
            else:
                print(f"✗ {result['input']}")
                print(f"   Error: {result['error']}")

    return 0 if valid_count == len(results) else 1


def cmd_bench(args: argparse.Namespace, config: EngineConfig) -> int:
    """Handle bench command."""
    from utf8_engine.tools.benchmark import CodecBenchmark, format_report

    try:
        benchmark = CodecBenchmark(
            iterations=args.iterations,
            correlation_id=config.global_.correlation_id,
            config=config,
        )
        suite = benchmark.run_benchmark(args.operations)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(suite.generate_report(), indent=2))
    else:
        print(format_report(suite))

    return 0 if all(r.success for r in suite.results) else 1


COMMANDS = {
    "decode": cmd_decode,
    "encode": cmd_encode,
    "validate": cmd_validate,
    "bench": cmd_bench,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    try:
        return COMMANDS[args.command](args, config)
    except Utf8Error as e:
        logger.error(f"{args.command} failed", extra={"error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
