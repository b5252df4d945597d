"""
Board file parsing.

A board file starts with a ``COLS ROWS`` header followed by ``ROWS`` lines
of ``COLS`` space-separated tokens, ``1`` for a bomb and ``0`` for none.
"""
import re
from pathlib import Path
from typing import List, Tuple, Union

from .board import Board


HEADER_PATTERN = re.compile(r"([0-9]+) ([0-9]+)")
BOMB_TOKEN = "1"
EMPTY_TOKEN = "0"


class BadBoardFileError(ValueError):
    """Raised when a board file cannot be turned into a Board."""

    code = "BAD_BOARD_FILE"


def parse_board(text: str) -> Board:
    """
    Build a board from the contents of a board file.

    Args:
        text: Full file contents.

    Returns:
        A board with the file's bombs and every cell untouched.

    Raises:
        BadBoardFileError: If the text is not a well-formed board.
    """
    lines = [line.rstrip() for line in text.splitlines()]
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        raise BadBoardFileError("Board file is empty")

    cols, rows = _parse_header(lines[0])
    body = lines[1:]
    if len(body) != rows:
        raise BadBoardFileError(
            f"Expected {rows} rows but found {len(body)}"
        )

    bombs: List[Tuple[int, int]] = []
    for y, line in enumerate(body):
        tokens = line.split(" ")
        if len(tokens) != cols:
            raise BadBoardFileError(
                f"Row {y} has {len(tokens)} cells, expected {cols}"
            )
        for x, token in enumerate(tokens):
            if token == BOMB_TOKEN:
                bombs.append((x, y))
            elif token != EMPTY_TOKEN:
                raise BadBoardFileError(
                    f"Invalid cell {token!r} at ({x}, {y})"
                )

    return Board(cols, rows, bombs)


def _parse_header(line: str) -> Tuple[int, int]:
    """Read the column and row counts from the first line."""
    match = HEADER_PATTERN.fullmatch(line)
    if match is None:
        raise BadBoardFileError(f"Malformed board header {line!r}")
    cols, rows = int(match.group(1)), int(match.group(2))
    if cols < 1 or rows < 1:
        raise BadBoardFileError("Board dimensions must be positive")
    return cols, rows


def load_board(path: Union[str, Path]) -> Board:
    """
    Read and parse a board file.

    Raises:
        BadBoardFileError: If the file is unreadable or malformed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise BadBoardFileError(f"Cannot read board file {path}: {exc}") from exc
    return parse_board(text)
