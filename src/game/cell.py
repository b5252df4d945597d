"""
Cell module for Minesweeper game.

Represents individual squares on the shared board with their state
(untouched/flagged/dug), bomb bit and cached neighbor-bomb count.
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    UNTOUCHED = auto()
    FLAGGED = auto()
    DUG = auto()


UNTOUCHED_SYMBOL = "-"
FLAGGED_SYMBOL = "F"
EMPTY_SYMBOL = " "


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single square in the Minesweeper grid.

    Attributes:
        has_bomb: Whether this cell currently carries a bomb.
        neighbor_bombs: Count of bombs in neighboring cells (0-8).
        state: Current visual state (untouched, flagged or dug).
    """

    has_bomb: bool = False
    neighbor_bombs: int = 0
    state: CellState = CellState.UNTOUCHED

    def dig(self) -> bool:
        """
        Dig this cell, clearing any bomb it carried.

        Returns:
            True if the cell was untouched and is now dug, False if it
            was already dug or flagged.
        """
        if self.state != CellState.UNTOUCHED:
            return False
        self.state = CellState.DUG
        self.has_bomb = False
        return True

    def flag(self) -> bool:
        """
        Flag this cell.

        Returns:
            True if the cell went from untouched to flagged.
        """
        if self.state != CellState.UNTOUCHED:
            return False
        self.state = CellState.FLAGGED
        return True

    def deflag(self) -> bool:
        """
        Remove the flag from this cell.

        Returns:
            True if the cell went from flagged back to untouched.
        """
        if self.state != CellState.FLAGGED:
            return False
        self.state = CellState.UNTOUCHED
        return True

    @property
    def is_untouched(self) -> bool:
        """Check if cell is untouched."""
        return self.state == CellState.UNTOUCHED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_dug(self) -> bool:
        """Check if cell is dug."""
        return self.state == CellState.DUG

    def to_symbol(self) -> str:
        """
        Convert cell to its single-character board rendering.

        Returns:
            '-' for untouched, 'F' for flagged, ' ' for a dug cell with
            no neighboring bombs, or the digit '1'-'8' otherwise.
        """
        if self.state == CellState.UNTOUCHED:
            return UNTOUCHED_SYMBOL
        if self.state == CellState.FLAGGED:
            return FLAGGED_SYMBOL
        if self.neighbor_bombs == 0:
            return EMPTY_SYMBOL
        return str(self.neighbor_bombs)
