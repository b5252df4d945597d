"""
Minesweeper game module.

Provides the shared board engine, cell state and board-file loading.
"""
from .cell import Cell, CellState
from .board import Board, DigOutcome, BOMB_PROBABILITY
from .board_file import BadBoardFileError, load_board, parse_board

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "DigOutcome",
    "BOMB_PROBABILITY",
    "BadBoardFileError",
    "load_board",
    "parse_board",
]
