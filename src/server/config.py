"""
Server configuration.

Holds the validated settings the command line produces and turns them
into the initial board.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from game import Board, BOMB_PROBABILITY, load_board


DEFAULT_PORT = 4444
DEFAULT_SIZE = 10
MAX_PORT = 65535


@dataclass
class ServerConfig:
    """
    Configuration for a Minesweeper server.

    Attributes:
        port: TCP port to listen on (0 picks a free port).
        host: Interface to bind; empty string means all interfaces.
        debug: Keep players connected after they dig a bomb.
        board_file: Board file to load; a random board is used when None.
        cols: Columns of a random board.
        rows: Rows of a random board.
        bomb_probability: Per-cell bomb chance for a random board.
    """

    port: int = DEFAULT_PORT
    host: str = ""
    debug: bool = False
    board_file: Optional[Path] = None
    cols: int = DEFAULT_SIZE
    rows: int = DEFAULT_SIZE
    bomb_probability: float = BOMB_PROBABILITY

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.board_file is not None:
            self.board_file = Path(self.board_file)
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if not 0 <= self.port <= MAX_PORT:
            raise ValueError(f"Port must be between 0 and {MAX_PORT}")
        if self.cols < 1 or self.rows < 1:
            raise ValueError("Board dimensions must be positive")
        if not 0.0 <= self.bomb_probability <= 1.0:
            raise ValueError("Bomb probability must be between 0 and 1")


def create_board(config: ServerConfig) -> Board:
    """
    Build the shared board described by a configuration.

    Raises:
        BadBoardFileError: If the configured board file is malformed.
    """
    if config.board_file is not None:
        return load_board(config.board_file)
    return Board.generate(config.cols, config.rows, config.bomb_probability)
