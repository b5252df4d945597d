"""
Board module for Minesweeper game.

Implements the single shared game board: bomb placement, digging with
cascade, flagging and rendering. Every public operation runs under one
board-wide lock so concurrent players observe a linearizable history.
"""
import random
import threading
from collections import deque
from dataclasses import InitVar, dataclass, field, replace
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellState


# ============================================================================
# Constants
# ============================================================================

BOMB_PROBABILITY = 0.25

NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (delta_x, delta_y)
    for delta_y in (-1, 0, 1)
    for delta_x in (-1, 0, 1)
    if (delta_x, delta_y) != (0, 0)
)


class DigOutcome(Enum):
    """Result of digging a cell."""

    OK = auto()
    BOOM = auto()


# ============================================================================
# Board Class
# ============================================================================

@dataclass(eq=False)
class Board:
    """
    Shared Minesweeper game board.

    The grid is ``cols`` wide and ``rows`` tall; ``(0, 0)`` is the top-left
    corner, ``x`` grows to the right and ``y`` grows down. Coordinates
    outside the grid are accepted by every operation and ignored.

    Args:
        cols: Number of columns.
        rows: Number of rows.
        bombs: (x, y) positions that start with a bomb.
    """

    cols: int
    rows: int
    bombs: InitVar[Iterable[Tuple[int, int]]] = ()
    _grid: List[List[Cell]] = field(
        default_factory=list, init=False, repr=False, compare=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self, bombs: Iterable[Tuple[int, int]]) -> None:
        """Build the grid, place bombs and compute neighbor counts."""
        if self.cols < 1 or self.rows < 1:
            raise ValueError("Board dimensions must be positive")
        self._init_grid()
        self._place_bombs(bombs)
        self._recount_neighbor_bombs()
        self._check_rep()

    @classmethod
    def generate(
        cls,
        cols: int,
        rows: int,
        probability: float = BOMB_PROBABILITY,
        rng: Optional[random.Random] = None,
    ) -> "Board":
        """
        Create a board where each cell independently holds a bomb.

        Args:
            cols: Number of columns.
            rows: Number of rows.
            probability: Chance that any one cell carries a bomb.
            rng: Random source, mainly for reproducible tests.

        Returns:
            A new board with every cell untouched.
        """
        if not 0.0 <= probability <= 1.0:
            raise ValueError("Bomb probability must be between 0 and 1")
        rng = rng or random.Random()
        bombs = [
            (x, y)
            for y in range(rows)
            for x in range(cols)
            if rng.random() < probability
        ]
        return cls(cols, rows, bombs)

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create grid of untouched, bomb-free cells."""
        self._grid = [
            [Cell() for _ in range(self.cols)]
            for _ in range(self.rows)
        ]

    def _place_bombs(self, bombs: Iterable[Tuple[int, int]]) -> None:
        """Put a bomb on each listed position."""
        for x, y in bombs:
            if not self.is_valid_position(x, y):
                raise ValueError(f"Bomb position ({x}, {y}) is off the board")
            self._grid[y][x].has_bomb = True

    def _bomb_mask(self) -> np.ndarray:
        """Return a (rows, cols) array with 1 where a cell has a bomb."""
        return np.array(
            [[cell.has_bomb for cell in row] for row in self._grid],
            dtype=np.int8,
        ).reshape(self.rows, self.cols)

    def _neighbor_counts(self) -> np.ndarray:
        """Compute the neighbor-bomb count of every cell from scratch."""
        padded = np.pad(self._bomb_mask(), 1)
        counts = np.zeros((self.rows, self.cols), dtype=np.int8)
        for delta_x, delta_y in NEIGHBOR_OFFSETS:
            counts += padded[
                1 + delta_y:1 + delta_y + self.rows,
                1 + delta_x:1 + delta_x + self.cols,
            ]
        return counts

    def _recount_neighbor_bombs(self) -> None:
        """Refresh the cached neighbor-bomb count of every cell."""
        counts = self._neighbor_counts()
        for y, row in enumerate(self._grid):
            for x, cell in enumerate(row):
                cell.neighbor_bombs = int(counts[y, x])

    def _check_rep(self) -> None:
        """Assert the representation invariants; skipped under python -O."""
        if not __debug__:
            return
        assert len(self._grid) == self.rows
        assert all(len(row) == self.cols for row in self._grid)
        counts = self._neighbor_counts()
        for y, row in enumerate(self._grid):
            for x, cell in enumerate(row):
                assert cell.neighbor_bombs == counts[y, x]
                assert not (cell.is_dug and cell.has_bomb)

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        Get valid neighboring cell positions.

        Args:
            x: Column index of center cell.
            y: Row index of center cell.

        Returns:
            List of (x, y) tuples for the at most 8 in-range neighbors.
        """
        neighbors = []
        for delta_x, delta_y in NEIGHBOR_OFFSETS:
            new_x = x + delta_x
            new_y = y + delta_y
            if self.is_valid_position(new_x, new_y):
                neighbors.append((new_x, new_y))
        return neighbors

    def is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.cols and 0 <= y < self.rows

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def dig(self, x: int, y: int) -> DigOutcome:
        """
        Dig the cell at the given position.

        Digging a bomb removes it and refreshes every neighbor count. If the
        dug cell ends up with no neighboring bombs the cascade digs outward
        through untouched, bomb-free cells. The whole operation, cascade
        included, happens under the board lock.

        Args:
            x: Column index to dig.
            y: Row index to dig.

        Returns:
            DigOutcome.BOOM if an untouched bomb was dug, DigOutcome.OK
            otherwise (including out-of-range, flagged or dug targets).
        """
        with self._lock:
            if not self.is_valid_position(x, y):
                return DigOutcome.OK
            cell = self._grid[y][x]
            had_bomb = cell.has_bomb
            if not cell.dig():
                return DigOutcome.OK

            if had_bomb:
                self._recount_neighbor_bombs()
            if cell.neighbor_bombs == 0:
                self._cascade(x, y)

            self._check_rep()
            return DigOutcome.BOOM if had_bomb else DigOutcome.OK

    def _cascade(self, x: int, y: int) -> None:
        """Dig outward from an empty cell using an explicit worklist."""
        pending = deque([(x, y)])
        while pending:
            center_x, center_y = pending.popleft()
            for neighbor_x, neighbor_y in self._get_neighbors(center_x, center_y):
                neighbor = self._grid[neighbor_y][neighbor_x]
                if neighbor.has_bomb or not neighbor.dig():
                    continue
                if neighbor.neighbor_bombs == 0:
                    pending.append((neighbor_x, neighbor_y))

    def flag(self, x: int, y: int) -> bool:
        """
        Flag an untouched cell.

        Returns:
            True if the cell changed, False otherwise.
        """
        with self._lock:
            if not self.is_valid_position(x, y):
                return False
            return self._grid[y][x].flag()

    def deflag(self, x: int, y: int) -> bool:
        """
        Remove the flag from a flagged cell.

        Returns:
            True if the cell changed, False otherwise.
        """
        with self._lock:
            if not self.is_valid_position(x, y):
                return False
            return self._grid[y][x].deflag()

    unflag = deflag

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    def render(self) -> str:
        """
        Render the board as text.

        Returns:
            One line per row, each cell symbol separated by a single space
            and every line terminated by a newline.
        """
        with self._lock:
            return "".join(
                " ".join(cell.to_symbol() for cell in row) + "\n"
                for row in self._grid
            )

    look = render

    def __str__(self) -> str:
        return self.render()

    def dimensions(self) -> Tuple[int, int]:
        """Get board size as (cols, rows)."""
        return self.cols, self.rows

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """
        Get a copy of the cell at position, or None if invalid.

        The copy is taken under the board lock; changing it does not
        affect the board.
        """
        if not self.is_valid_position(x, y):
            return None
        with self._lock:
            return replace(self._grid[y][x])

    def bomb_count(self) -> int:
        """Count the bombs still on the board."""
        with self._lock:
            return int(self._bomb_mask().sum())

    def get_untouched_cells(self) -> List[Tuple[int, int]]:
        """
        Get positions that can still be dug.

        Returns:
            List of (x, y) positions of untouched cells.
        """
        with self._lock:
            return [
                (x, y)
                for y, row in enumerate(self._grid)
                for x, cell in enumerate(row)
                if cell.state == CellState.UNTOUCHED
            ]
