"""Entry point for the front-desk Textual terminal."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from frontdesk.config import SERVER_URL, setup_logging
from frontdesk.data import SCREEN_CONFIGS, SCREEN_NAMES, screen_config
from frontdesk.gateway import SocketIOGateway
from frontdesk.records import RecordsClient
from frontdesk.records_app import RECORDS_TITLE, RecordsApp
from frontdesk.terminal_app import FrontDeskApp

log = logging.getLogger(__name__)

# Not a capture screen: browses what the capture screens submitted.
RECORDS_SCREEN = "registros"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="frontdesk", description="Capture service timers for open rows.")
    parser.add_argument("screen", nargs="?", choices=[*SCREEN_NAMES, RECORDS_SCREEN], help="screen to run")
    parser.add_argument("--server", default=SERVER_URL, help=f"backend URL (default: {SERVER_URL})")
    parser.add_argument("--log-file", default=None, help="debug log path")
    parser.add_argument("--list", action="store_true", help="list the available screens and exit")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Textual application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        for name in SCREEN_NAMES:
            sys.stdout.write(f"{name}\t{SCREEN_CONFIGS[name].title}\n")
        sys.stdout.write(f"{RECORDS_SCREEN}\t{RECORDS_TITLE}\n")
        return 0
    if args.screen is None:
        parser.error("a screen is required (see --list)")

    setup_logging(args.log_file)
    log.info("starting screen=%s server=%s", args.screen, args.server)
    if args.screen == RECORDS_SCREEN:
        RecordsApp(RecordsClient(args.server)).run()
        return 0
    FrontDeskApp(screen_config(args.screen), SocketIOGateway(args.server)).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
