"""Main CLI entry point for the simplexml command-line tool.

Provides strict reformatting, well-formedness validation and element search
over XML files.
"""

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from simplexml import __version__
from simplexml.api import XMLParser
from simplexml.search import (
    WILDCARD,
    Matcher,
    and_,
    attr,
    content_re,
    find_all,
    find_first,
    tag,
)
from simplexml.shared import (
    ConfigError,
    EncoderConfig,
    ParseError,
    SimpleXMLConfig,
    get_logger,
)


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self, config: Optional[SimpleXMLConfig] = None):
        self.config = config or SimpleXMLConfig(encoder=EncoderConfig.pretty())
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file holds a :class:`SimpleXMLConfig` mapping plus an optional
        ``output_format`` key.

        Raises:
            ConfigError: If the file cannot be read or holds invalid settings
        """
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Could not read config file {config_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must hold a JSON object")

        output_format = data.pop("output_format", None)
        data.setdefault("encoder", {"indentation": EncoderConfig.pretty().indentation})
        config = cls(SimpleXMLConfig.from_dict(data))
        if output_format is not None:
            if output_format not in ("text", "json"):
                raise ConfigError(f"Unsupported output_format: {output_format!r}")
            config.output_format = output_format
        return config


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="simplexml",
        description="Strict XML reformatting, validation and search"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Format command
    format_parser = subparsers.add_parser("format", help="Parse and re-encode XML files")
    format_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to format"
    )
    format_parser.add_argument(
        "--indent", "-i",
        type=int,
        help="Spaces per nesting level (default: from config, else 2)"
    )
    format_parser.add_argument(
        "--tabs",
        action="store_true",
        help="Indent with one tab per nesting level"
    )
    format_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check XML files are well-formed")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to validate"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        help="Output format (default: text)"
    )
    validate_parser.add_argument(
        "--fragment",
        action="store_true",
        help="Allow several top-level elements"
    )

    # Search command
    search_parser = subparsers.add_parser("search", help="Print elements matching a query")
    search_parser.add_argument(
        "path",
        type=Path,
        help="XML file to search"
    )
    search_parser.add_argument(
        "--tag", "-t",
        default=WILDCARD,
        help="Local name to match (default: any)"
    )
    search_parser.add_argument(
        "--namespace", "-n",
        default=WILDCARD,
        help="Namespace URI to match; empty string for none (default: any)"
    )
    search_parser.add_argument(
        "--attr", "-a",
        action="append",
        default=[],
        metavar="NAME[=VALUE]",
        help="Require an attribute, optionally with a value (repeatable)"
    )
    search_parser.add_argument(
        "--content", "-c",
        metavar="REGEX",
        help="Require content matching a regular expression"
    )
    search_parser.add_argument(
        "--first",
        action="store_true",
        help="Print only the first match"
    )

    # Global options
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON configuration file"
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


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format validation results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No results to display."

    valid_count = sum(1 for r in results if r.get("valid", False))
    lines = [f"Validated {len(results)} files, {valid_count} valid", "-" * 50]
    for result in results:
        status = "✓" if result.get("valid", False) else "✗"
        lines.append(f"{status} {result['file']}")
        if result.get("valid", False):
            lines.append(
                f"   Elements: {result.get('element_count', 0)}, "
                f"Time: {result.get('processing_time_ms', 0):.1f}ms"
            )
        elif "error" in result:
            lines.append(f"   Error: {result['error']}")
    return "\n".join(lines)


def _indentation(args: argparse.Namespace, config: CLIConfig) -> str:
    if args.tabs:
        return "\t"
    if args.indent is not None:
        if args.indent < 0:
            raise ValueError("--indent must not be negative")
        return " " * args.indent
    return config.config.encoder.indentation


def cmd_format(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle format command."""
    logger = get_logger(__name__, config.config.correlation_id, "cli_format")
    parser = XMLParser(config.config)
    try:
        indentation = _indentation(args, config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    outputs = []
    failures = 0
    for path in args.paths:
        try:
            document = parser.parse(path)
        except (OSError, ParseError) as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            failures += 1
            continue
        outputs.append(document.to_bytes(indentation).decode("utf-8"))
        logger.debug("Formatted file", extra={"file": str(path)})

    formatted_output = "".join(outputs)
    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(formatted_output)

    return 0 if failures == 0 else 1


def cmd_validate(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle validate command."""
    parser = XMLParser(config.config)
    results = []

    for path in args.paths:
        try:
            result = parser.check(path, fragment=args.fragment)
        except OSError as e:
            results.append({
                "file": str(path),
                "valid": False,
                "error": f"Cannot read file: {e.strerror or e}",
            })
            continue

        entry: Dict[str, Any] = {
            "file": str(path),
            "valid": result.success,
            "root_count": len(result.elements),
            "element_count": result.element_count,
            "processing_time_ms": result.processing_time_ms,
        }
        if result.error is not None:
            entry["error"] = str(result.error)
            entry["error_type"] = type(result.error).__name__
        results.append(entry)

    print(format_results(results, args.format or config.output_format))

    valid_count = sum(1 for r in results if r["valid"])
    return 0 if valid_count == len(results) else 1


def _build_query(args: argparse.Namespace) -> Matcher:
    matchers = [tag(args.tag, args.namespace)]
    for option in args.attr:
        name, sep, value = option.partition("=")
        matchers.append(attr(name, "", value if sep else WILDCARD))
    if args.content is not None:
        matchers.append(content_re(args.content))
    return and_(*matchers)


def cmd_search(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle search command."""
    parser = XMLParser(config.config)
    try:
        document = parser.parse(args.path)
    except (OSError, ParseError) as e:
        print(f"Error: {args.path}: {e}", file=sys.stderr)
        return 1

    try:
        query = _build_query(args)
    except re.error as e:
        print(f"Error: invalid query: {e}", file=sys.stderr)
        return 1

    if args.first:
        first = find_first(query, document.all())
        matches = [first] if first is not None else []
    else:
        matches = find_all(query, document.all())

    for element in matches:
        sys.stdout.write(str(element))
    return 0 if matches else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        config = CLIConfig.from_file(args.config) if args.config else CLIConfig()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Route to appropriate command handler
    try:
        if args.command == "format":
            return cmd_format(args, config)
        elif args.command == "validate":
            return cmd_validate(args, config)
        elif args.command == "search":
            return cmd_search(args, config)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
