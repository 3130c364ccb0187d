"""
DrapeKit CLI — Command-line interface for tutorial extraction.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from drapekit import __version__
from drapekit.core.context import TransformRequest
from drapekit.core.engine import Engine, setup_default_pipeline
from drapekit.domain.loader import get_domain, list_domains
from drapekit.ir.schema import TransformResult
from drapekit.ir.serialization import to_json
from drapekit.output.response import build_response
from drapekit.prefill import reattach_prefill


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="drapekit",
        description="Extract draping tutorials from untrusted model output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"drapekit {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Extract command
    extract_parser = subparsers.add_parser("extract", help="Extract a tutorial from model output")
    extract_parser.add_argument(
        "input",
        type=str,
        help="Model output text or path to file (use - for stdin)",
    )
    extract_parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file path (default: stdout)",
    )
    extract_parser.add_argument(
        "--format",
        choices=["json", "result", "summary"],
        default="json",
        help="Output format: json (response body, default), result (full result with trace), summary",
    )
    extract_parser.add_argument(
        "--pipeline",
        type=str,
        choices=["default", "strict"],
        default="default",
        help="Pipeline to use; 'strict' disables structural salvage",
    )
    extract_parser.add_argument(
        "--domain",
        type=str,
        default=None,
        help="Domain config ID (default: draping, or DRAPEKIT_DOMAIN env var)",
    )
    extract_parser.add_argument(
        "--prefill",
        type=str,
        default=None,
        help="Prefix the assistant turn was primed with (e.g. '{')",
    )

    # Logging configuration
    extract_parser.add_argument(
        "--log-level",
        type=str,
        choices=["silent", "info", "verbose", "debug"],
        default=None,
        help="Log verbosity level (default: info, or DRAPEKIT_LOG_LEVEL env var)",
    )
    extract_parser.add_argument(
        "--log-channel",
        type=str,
        default=None,
        help="Comma-separated log channels to show (pipeline,decode,validate,classify,system). Default: all",
    )

    subparsers.add_parser("domains", help="List bundled domain configs")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "extract":
        return run_extract(args)

    if args.command == "domains":
        for domain_id in list_domains():
            print(domain_id)
        return 0

    return 0


def read_input(value: str) -> str:
    """Resolve INPUT as stdin, a file path, or literal text."""
    if value == "-":
        return sys.stdin.read()
    # Only check as path if it's short enough to be a valid path
    if len(value) < 256 and "\n" not in value and Path(value).is_file():
        return Path(value).read_text(encoding="utf-8")
    return value


def run_extract(args: argparse.Namespace) -> int:
    """Run extraction command."""
    # Configure logging first
    from drapekit.core.logging import configure_logging

    channels = None
    if args.log_channel:
        channels = [ch.strip() for ch in args.log_channel.split(",")]

    configure_logging(
        level=args.log_level,
        channels=channels,
        force=True,
    )

    try:
        domain = get_domain(args.domain)
    except FileNotFoundError as e:
        print(f"drapekit: {e}", file=sys.stderr)
        return 1

    text = read_input(args.input)
    if args.prefill:
        text = reattach_prefill(args.prefill, text)

    engine = Engine(domain)
    setup_default_pipeline(engine)

    request = TransformRequest(text=text, metadata={"source": "cli"})
    result = engine.transform(request, args.pipeline)

    if args.format == "result":
        output = to_json(result)
    elif args.format == "summary":
        output = format_summary(result)
    else:
        response = build_response(result)
        output = json.dumps(response.body, ensure_ascii=False, indent=2)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
    else:
        print(output)

    return 0 if result.ok else 1


def format_summary(result: TransformResult) -> str:
    """Human-readable summary of one extraction."""
    lines = [f"Status: {result.status.value}"]
    if result.decode_tier is not None:
        lines.append(f"Decode tier: {result.decode_tier}" + (" (salvaged)" if result.salvaged else ""))

    doc = result.document
    if doc is not None:
        lines.append(f"Design: {doc.design_name} (difficulty {doc.difficulty})")
        lines.append(f"Materials: {len(doc.materials)}  Tools: {len(doc.tools)}  Steps: {len(doc.steps)}")
        for i, step in enumerate(doc.steps, 1):
            lines.append(f"  {i}. [{step.icon.value}/{step.area.value}] {step.title}")
    elif result.error is not None:
        lines.append(f"Error: {result.error.code}: {result.error.message}")

    if result.diagnostics:
        lines.append("")
        lines.append("--- Diagnostics ---")
        for diag in result.diagnostics:
            lines.append(f"[{diag.level.value}] {diag.code}: {diag.message}")

    return "\n".join(lines)


if __name__ == "__main__":
    sys.exit(main())
