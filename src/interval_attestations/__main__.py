"""
Aggregate interval attestation store CLI entry point.

Open the store and serve the read-only query API until interrupted.

Usage::

    python -m interval_attestations
    python -m interval_attestations --db ./attestations.db --port 5054
    python -m interval_attestations --in-memory -v

Options:
    --db          Path to the SQLite database file
    --in-memory   Use a throwaway in-memory store instead of SQLite
    --host        Address the API binds to
    --port        Port the API listens on
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from interval_attestations.api import ApiServer, ApiServerConfig
from interval_attestations.config import API_HOST, API_PORT, DB_PATH, DB_TIMEOUT
from interval_attestations.storage import AttestationDatabase, StoreConfig, open_database
from interval_attestations.types import StoreUnavailableError

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        return f"{colored_time} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure root logging with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="interval-attestations",
        description="Aggregate interval attestation store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=Path(DB_PATH),
        help=f"Path to the SQLite database file (default: {DB_PATH})",
    )
    parser.add_argument(
        "--db-timeout",
        type=float,
        default=DB_TIMEOUT,
        help=f"Seconds to wait on a locked database file (default: {DB_TIMEOUT})",
    )
    parser.add_argument(
        "--in-memory",
        action="store_true",
        help="Use a throwaway in-memory store instead of SQLite",
    )
    parser.add_argument(
        "--host",
        default=API_HOST,
        help=f"Address the API binds to (default: {API_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=API_PORT,
        help=f"Port the API listens on (default: {API_PORT})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    return parser


async def serve(store: AttestationDatabase, config: ApiServerConfig) -> None:
    """Serve the query API over `store` until the task is cancelled."""
    server = ApiServer(config=config, store_getter=lambda: store)
    logger.info(f"Serving {store.count()} stored aggregates")
    await server.run()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    store_config = StoreConfig(path=args.db, timeout=args.db_timeout, in_memory=args.in_memory)
    try:
        store = open_database(store_config)
    except StoreUnavailableError as e:
        logger.error("Cannot open attestation store: %s", e.message)
        return 1

    try:
        asyncio.run(serve(store, ApiServerConfig(host=args.host, port=args.port)))
    except KeyboardInterrupt:
        # asyncio.run() handles task cancellation, but we log for clarity.
        logger.info("Shutting down...")
    finally:
        store.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
