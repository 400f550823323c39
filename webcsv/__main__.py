"""CLI entry point for WebCSV.

Usage:
    python -m webcsv parse "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int"
    python -m webcsv validate people.csv --schema "ver:1.0,hdr:false,del:,; LastName,Age:int"
    python -m webcsv validate people.csv --schema-file schemas.yaml --name people --strict
    python -m webcsv compare "<reference schema>" "<candidate schema>"
    python -m webcsv serve --port 8000
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from webcsv.lib.config_loader import load_schema_file
from webcsv.lib.env import load_env_file
from webcsv.lib.errors import FieldValidationError, WebCSVError
from webcsv.lib.logging import setup_logging
from webcsv.lib.parser import parse_schema
from webcsv.lib.printer import format_column, print_schema
from webcsv.lib.schema import SchemaSpec
from webcsv.lib.settings import WebCSVSettings

logger = logging.getLogger(__name__)


def parse_command(text: str) -> int:
    """Print the normalized form and the columns of a schema description."""
    schema = parse_schema(text)
    print(print_schema(schema))
    print()
    print(f"  version:   {schema.version}")
    print(f"  header:    {'yes' if schema.with_header else 'no'}")
    print(f"  delimiter: {schema.delimiter!r}")
    print(f"  columns:   {len(schema.columns)}")
    for index, column in enumerate(schema.columns):
        marker = "" if column.known_type else "  (unrecognized type)"
        print(f"    [{index}] {format_column(column)}{marker}")
    return 0


def _resolve_schema(args: argparse.Namespace) -> SchemaSpec:
    if args.schema:
        return parse_schema(args.schema)
    schemas = load_schema_file(args.schema_file)
    if args.name not in schemas:
        available = ", ".join(sorted(schemas)) or "none"
        raise WebCSVError(
            f"Schema '{args.name}' not found in {args.schema_file}",
            suggestion=f"Available schemas: {available}",
        )
    return schemas[args.name]


def validate_command(args: argparse.Namespace, settings: WebCSVSettings) -> int:
    """Validate a CSV file against a schema."""
    schema = _resolve_schema(args)
    payload = Path(args.csv_file).read_bytes()
    strict = args.strict or settings.strict_types

    try:
        records = schema.validate_records(payload, strict=strict)
    except FieldValidationError as e:
        print(f"INVALID: {args.csv_file}")
        print(str(e))
        return 1

    print(f"OK: {len(records)} records in {args.csv_file} match the schema")
    return 0


def compare_command(reference: str, candidate: str) -> int:
    """Compare two schema descriptions."""
    mismatch = parse_schema(reference).find_mismatch(parse_schema(candidate))
    if mismatch is not None:
        print(f"INVALID: {mismatch}")
        return 1
    print("VALID: schemas match")
    return 0


def serve_command(settings: WebCSVSettings) -> int:
    """Run the reference people service."""
    import uvicorn

    from webcsv.server.app import create_app

    logger.info("Listening at %s:%d...", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webcsv",
        description="Parse, compare and validate against WebCSV schemas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Show how a schema description is understood
    python -m webcsv parse "ver:1.0,hdr:false,del:,; LastName:string(50),Height:decimal(13,3)"

    # Validate a CSV file
    python -m webcsv validate people.csv --schema "ver:1.0,hdr:false,del:,; LastName,Age:int"

    # Validate using a schema from a YAML registry
    python -m webcsv validate people.csv --schema-file schemas.yaml --name people

    # Check a schema against a reference
    python -m webcsv compare "ver:1.0,hdr:false,del:,; A:int" "ver:1.0,hdr:false,del:,; a:int"

    # Run the reference service
    python -m webcsv serve --port 8000
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--json-log",
        action="store_true",
        help="Output logs in JSON format (for log aggregation systems)",
    )
    parser.add_argument("--log-file", help="Write logs to a file in addition to console")

    commands = parser.add_subparsers(dest="command", metavar="command")

    parse_parser = commands.add_parser("parse", help="Parse and print a schema description")
    parse_parser.add_argument("text", help="Schema description")

    validate_parser = commands.add_parser("validate", help="Validate a CSV file against a schema")
    validate_parser.add_argument("csv_file", help="CSV file to validate")
    source = validate_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--schema", help="Schema description")
    source.add_argument("--schema-file", help="YAML schema registry")
    validate_parser.add_argument("--name", help="Schema name in --schema-file")
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject columns whose type is not recognized",
    )

    compare_parser = commands.add_parser("compare", help="Compare two schema descriptions")
    compare_parser.add_argument("reference", help="Expected schema description")
    compare_parser.add_argument("candidate", help="Supplied schema description")

    serve_parser = commands.add_parser("serve", help="Run the reference people service")
    serve_parser.add_argument("--host", help="Bind address (default from WEBCSV_HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (default from WEBCSV_PORT)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_env_file()
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "validate" and args.schema_file and not args.name:
        parser.error("--name is required with --schema-file")

    settings = WebCSVSettings()
    if args.command == "serve":
        overrides = {k: v for k, v in (("host", args.host), ("port", args.port)) if v}
        if overrides:
            settings = settings.model_copy(update=overrides)

    setup_logging(
        verbose=args.verbose,
        json_format=args.json_log or settings.log_format == "json",
        log_file=args.log_file or settings.log_file,
        level=settings.log_level,
        static_fields={"command": args.command},
    )

    try:
        if args.command == "parse":
            return parse_command(args.text)
        if args.command == "validate":
            return validate_command(args, settings)
        if args.command == "compare":
            return compare_command(args.reference, args.candidate)
        return serve_command(settings)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130

    except (WebCSVError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"\nError: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
