"""
Command line entry point for the Minesweeper server.

Usage:
    minesweeper-server [--debug | --no-debug] [--port N]
                       [--file PATH | --size COLS,ROWS] [--host ADDR]
"""
import argparse
import logging
import sys
from typing import List, Optional, Tuple

from game import BadBoardFileError

from .config import DEFAULT_PORT, DEFAULT_SIZE, ServerConfig, create_board
from .listener import MinesweeperServer


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def parse_size(text: str) -> Tuple[int, int]:
    """Parse a ``COLS,ROWS`` board size."""
    try:
        cols, rows = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"size must be COLS,ROWS, got {text!r}"
        ) from None
    if cols < 1 or rows < 1:
        raise argparse.ArgumentTypeError("size must be positive")
    return cols, rows


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Multiplayer Minesweeper server"
    )
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Keep players connected after they dig a bomb",
    )
    parser.add_argument(
        "--port", type=int, default=DEFAULT_PORT, help="TCP port to listen on"
    )
    parser.add_argument(
        "--host", type=str, default="", help="Bind address (default: all)"
    )
    board_group = parser.add_mutually_exclusive_group()
    board_group.add_argument(
        "--file", type=str, default=None, help="Board file to load"
    )
    board_group.add_argument(
        "--size",
        type=parse_size,
        default=(DEFAULT_SIZE, DEFAULT_SIZE),
        help="Random board size as COLS,ROWS",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging verbosity",
    )
    return parser


def config_from_args(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> ServerConfig:
    """Turn parsed arguments into a validated configuration."""
    cols, rows = args.size
    try:
        return ServerConfig(
            port=args.port,
            host=args.host,
            debug=args.debug,
            board_file=args.file,
            cols=cols,
            rows=rows,
        )
    except ValueError as exc:
        parser.error(str(exc))


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, build the board and serve until interrupted."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)
    config = config_from_args(parser, args)

    try:
        board = create_board(config)
    except BadBoardFileError as exc:
        logger.error("%s: %s", exc.code, exc)
        sys.exit(1)

    try:
        with MinesweeperServer(
            board, config.port, config.host, config.debug
        ) as server:
            server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except OSError as exc:
        logger.error("Server failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
