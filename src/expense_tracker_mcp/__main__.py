"""
CLI entry point for the expense tracker MCP server.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from expense_tracker_mcp.config import Settings, get_settings
from expense_tracker_mcp.core.exceptions import ExpenseTrackerError
from expense_tracker_mcp.core.ledger import Ledger
from expense_tracker_mcp.server import run_server

logger = logging.getLogger("expense_tracker_mcp")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expense-tracker-mcp",
        description="Serve expense tracker statistics over the Model Context Protocol",
    )
    parser.add_argument(
        "--ledger-path",
        type=Path,
        help="Path to the JSON ledger (default: EXPENSE_TRACKER_LEDGER_PATH or "
        "~/.expense-tracker/ledger.json)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Decode the ledger, report what it holds and exit",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log at DEBUG level",
    )
    return parser


def configure_logging(settings: Settings, verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(settings.log_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    # stdout carries the protocol
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def check_ledger(ledger_path: Optional[Path], settings: Settings) -> int:
    """Load the ledger once and log a short inventory. Returns an exit code."""
    ledger = Ledger(ledger_path or settings.ledger_path)
    try:
        users = ledger.get_users()
        items = ledger.get_items()
        workflow = ledger.workflow
    except ExpenseTrackerError as e:
        logger.error("Ledger check failed: %s", e)
        return 1

    logger.info(
        "%s: %d users, %d categories, %d items, %d requests, %d relationships",
        ledger.ledger_path,
        len(users),
        len(ledger.get_categories()),
        len(items),
        len(workflow.requests),
        len(workflow.relationships),
    )
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings, args.verbose)

    if args.check:
        sys.exit(check_ledger(args.ledger_path, settings))

    try:
        asyncio.run(run_server(ledger_path=args.ledger_path, settings=settings))
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
