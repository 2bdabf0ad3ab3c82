"""
Command Line Interface for the Account Service
==============================================

Usage:
------
    # Run the API server
    python cli.py serve --host 0.0.0.0 --port 5000

    # Create MongoDB indexes (unique email) without starting the server
    python cli.py init-db

Exit codes: 0 on success, 1 on error, 130 when interrupted.
"""

import argparse
import asyncio
import sys
import logging
from typing import Optional

from config import get_settings
from exceptions import AccountServiceError


# ANSI colors for terminal output
class Colors:
    """ANSI color codes for pretty terminal output."""
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'


def colorize(text: str, color: str) -> str:
    """Add color to text if terminal supports it."""
    if sys.stdout.isatty():
        return f"{color}{text}{Colors.ENDC}"
    return text


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="accounts",
        description="User account service (register, login, profile)",
        epilog="Example: python cli.py serve --port 8000",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output with debug info"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument(
        "--host",
        type=str,
        help="Interface to bind (overrides config)"
    )
    serve.add_argument(
        "--port", "-p",
        type=int,
        help="Port to listen on (overrides config)"
    )
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development only)"
    )

    subparsers.add_parser("init-db", help="Create MongoDB indexes")

    return parser


def setup_logging_for_cli(verbose: bool) -> None:
    """Configure logging based on CLI flags."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s"
    )


async def init_db() -> None:
    """Ensure indexes exist, failing if MongoDB is unreachable."""
    from api.services.account_repository import MongoAccountRepository, create_client, ping

    settings = get_settings()
    client = create_client(settings)
    try:
        await ping(client, settings)
        await MongoAccountRepository.from_client(client, settings).ensure_indexes()
    finally:
        client.close()


def serve(host: Optional[str], port: Optional[int], reload: bool) -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload or settings.api_debug,
        log_level=settings.log_level.lower(),
    )


def main(args: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    setup_logging_for_cli(parsed_args.verbose)

    try:
        if parsed_args.command == "init-db":
            asyncio.run(init_db())
            print(colorize("Indexes created", Colors.GREEN))
        else:
            serve(parsed_args.host, parsed_args.port, parsed_args.reload)
        return 0

    except AccountServiceError as e:
        print(colorize(f"Error: {e.message}", Colors.RED))
        if parsed_args.verbose and e.details:
            print(colorize(f"   Details: {e.details}", Colors.YELLOW))
        return 1

    except KeyboardInterrupt:
        print(colorize("\nInterrupted by user", Colors.YELLOW))
        return 130


if __name__ == "__main__":
    sys.exit(main())
