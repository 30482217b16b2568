"""CLI entry point for the trello2focalboard importer.

Usage:
    # Convert a board exported from Trello ("Print and export > Export as JSON")
    trello2focalboard -i board.json -u users.json -o board.boardarchive

    # Attach the board to a team / channel
    trello2focalboard -i board.json -u users.json -t <team-id> -c <channel-id>

    # Fetch the board from the Trello API instead of an export file
    export TRELLO_API_KEY="your-key"
    export TRELLO_TOKEN="your-token"
    trello2focalboard --board https://trello.com/b/Bm0nnz1R/my-board -u users.json

The user mapping file is a JSON array mapping Trello members to target users:
    [{"id": "<user-id>", "idTrello": "<trello-member-id>", "username": "jane"}]

Exit codes: 0 success, 1 usage or conversion error, 2 input file not found.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from trello2focalboard.archive import write_block_archive
from trello2focalboard.converter import TrelloToFocalboardConverter
from trello2focalboard.exceptions import (
    ConversionInputError,
    InputFileNotFoundError,
    TrelloAPIError,
)
from trello2focalboard.loaders import UserDirectory, load_trello_export, load_user_mapping
from trello2focalboard.logging_config import resolve_level, setup_logging
from trello2focalboard.trello_client import TrelloReader
from trello2focalboard.trello_models import TrelloExport

logger = logging.getLogger("trello2focalboard.cli")

DEFAULT_OUTPUT = "archive.boardarchive"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trello2focalboard",
        description="Convert a Trello board export into a Focalboard archive",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-i", dest="input", metavar="INPUT", help="Trello JSON export file")
    parser.add_argument(
        "-o",
        dest="output",
        metavar="OUTPUT",
        default=DEFAULT_OUTPUT,
        help=f"Output archive path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument("-u", dest="users", metavar="USERS", help="User mapping JSON file")
    parser.add_argument("-t", dest="team_id", metavar="TEAM_ID", default="", help="Team ID")
    parser.add_argument(
        "-c", dest="channel_id", metavar="CHANNEL_ID", default="", help="Channel ID"
    )
    parser.add_argument(
        "-b",
        "--board",
        metavar="ID_OR_URL",
        help="Fetch the board from the Trello API instead of reading -i",
    )
    parser.add_argument(
        "--no-verify-ssl", action="store_true", help="Disable SSL verification for the Trello API"
    )

    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    log_group.add_argument("-q", "--quiet", action="store_true", help="Errors only")
    log_group.add_argument("--log-level", metavar="LEVEL", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-file", metavar="PATH", help="Also write the log to PATH")
    return parser


def load_env_file() -> None:
    """Seed os.environ from a .env file without overriding existing variables"""
    env_file = os.getenv("TRELLO_ENV_FILE", ".env")
    if not Path(env_file).exists():
        return
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                if key not in os.environ:
                    os.environ[key] = value


def fetch_export(board_reference: str, verify_ssl: bool = True) -> TrelloExport:
    load_env_file()
    api_key = os.getenv("TRELLO_API_KEY")
    token = os.getenv("TRELLO_TOKEN")
    if not api_key or not token:
        logger.error("❌ Error: Missing required Trello credentials")
        logger.error("\nRequired environment variables:")
        logger.error("  TRELLO_API_KEY     - Your Trello API key")
        logger.error("  TRELLO_TOKEN       - Your Trello API token")
        logger.error("\nOr export the board as JSON from Trello and pass it with -i")
        sys.exit(1)

    try:
        reader = TrelloReader.from_board_reference(
            api_key, token, board_reference, verify_ssl=verify_ssl
        )
        return reader.get_export()
    except ValueError as e:
        logger.error(f"❌ Error: {e}")
        sys.exit(1)
    except TrelloAPIError as e:
        logger.error(f"❌ Trello API error: {e}")
        sys.exit(1)


def load_inputs(args: argparse.Namespace) -> tuple[TrelloExport, UserDirectory]:
    try:
        if args.board:
            export = fetch_export(args.board, verify_ssl=not args.no_verify_ssl)
        else:
            export = load_trello_export(args.input)

        if args.users:
            users = load_user_mapping(args.users)
            logger.info(f"👥 Loaded {len(users)} user mapping(s) from {args.users}")
        else:
            logger.warning(
                "No user mapping (-u) given: assignees and comment authors won't be mapped"
            )
            users = UserDirectory()
    except InputFileNotFoundError as e:
        logger.error(f"❌ {e}")
        sys.exit(2)
    except ConversionInputError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    return export, users


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(resolve_level(args.verbose, args.quiet, args.log_level), args.log_file)

    if not args.input and not args.board:
        parser.print_usage()
        sys.exit(1)

    export, users = load_inputs(args)

    converter = TrelloToFocalboardConverter(
        team_id=args.team_id, channel_id=args.channel_id, users=users
    )
    boards, blocks = converter.convert(export)

    try:
        write_block_archive(args.output, boards, blocks)
    except OSError as e:
        logger.error(f"❌ Could not write {args.output}: {e}")
        sys.exit(1)

    logger.info(f"✅ Exported to {args.output}")


if __name__ == "__main__":
    main()
