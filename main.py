"""
Main entry point for the batch ledger application.

Usage:
    # Parse a file and print the balances as JSON
    batch-ledger parse batch.txt

    # Read from stdin and write to a file
    cat batch.txt | batch-ledger parse -o balances.json

    # Start the HTTP API
    batch-ledger serve --port 8000
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

# Load environment variables before settings are read
_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from core.config import Settings, get_settings
from core.exceptions import BatchLedgerException, ConfigurationError, ParsingError
from core.exporters import export_to_json, result_to_json
from core.logger import set_log_level, setup_logger
from services.batch_service import BatchService

logger = setup_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARSE_ERROR = 2


def load_settings() -> Settings:
    """
    Load settings, reporting invalid environment values as a ConfigurationError.

    Raises:
        ConfigurationError: If any setting fails validation
    """
    try:
        return get_settings()
    except PydanticValidationError as e:
        raise ConfigurationError(
            "Invalid configuration",
            details={"error_count": e.error_count(), "error": str(e)}
        )


def run_parse(args: argparse.Namespace) -> int:
    """Parse a batch file (or stdin) and emit its balances."""
    settings = get_settings()
    indent = settings.output_indent if args.indent is None else args.indent
    service = BatchService(strict_types=args.strict_types or None)

    try:
        if args.input_path and args.input_path != "-":
            result = service.process_file(args.input_path)
        else:
            logger.info("Reading batch from stdin")
            result = service.process_stream(sys.stdin)

        if args.output:
            export_to_json(result, args.output, indent)
        else:
            sys.stdout.write(result_to_json(result, indent) + "\n")

    except ParsingError as e:
        logger.error(f"Invalid batch file: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        return EXIT_PARSE_ERROR

    except BatchLedgerException as e:
        logger.error(f"Processing failed: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        return EXIT_ERROR

    stats = service.build_statistics(result)
    logger.info(
        f"Batch {result.batch}: {stats['account_count']} accounts, "
        f"credits {stats['total_credits']}, debits {stats['total_debits']}"
    )
    return EXIT_OK


def run_serve(args: argparse.Namespace) -> int:
    """Start the HTTP API."""
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port

    import uvicorn
    from app.api import app

    logger.info(f"Starting {settings.app_name}")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Strict transaction types: {settings.strict_transaction_type}")
    logger.info(f"Starting server on {host}:{port}")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.log_level.lower()
    )
    return EXIT_OK


def build_arg_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="batch-ledger",
        description="Parse batch transaction files into consolidated account balances",
        epilog="Example: batch-ledger parse batch.txt -o balances.json",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse a batch file")
    parse_cmd.add_argument(
        "input_path",
        nargs="?",
        help="Path to the batch file. Reads stdin if omitted or '-'.",
    )
    parse_cmd.add_argument(
        "-o",
        "--output",
        dest="output",
        help="Write JSON to this file instead of stdout",
    )
    parse_cmd.add_argument(
        "--indent",
        type=int,
        help="JSON indentation (0 for compact output)",
    )
    parse_cmd.add_argument(
        "--strict-types",
        dest="strict_types",
        action="store_true",
        help="Reject Type values other than Credit and Debit",
    )
    parse_cmd.set_defaults(handler=run_parse)

    serve_cmd = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_cmd.add_argument("--host", help="Bind address (default: HOST setting)")
    serve_cmd.add_argument("--port", type=int, help="Bind port (default: PORT setting)")
    serve_cmd.set_defaults(handler=run_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_arg_parser().parse_args(argv)

    if args.log_level:
        set_log_level(args.log_level)

    try:
        load_settings()
        return args.handler(args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        if e.details:
            logger.error(f"Details: {e.details}")
        return EXIT_ERROR
    except Exception as e:
        logger.error(f"Failed to run {args.command}: {e}", exc_info=True)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
