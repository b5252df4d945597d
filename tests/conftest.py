"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
import threading
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from game import Board, Cell, load_board
from server import MinesweeperServer


FIXTURES = Path(__file__).parent / "fixtures"


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the board files used by the tests."""
    return FIXTURES


@pytest.fixture
def simple_board() -> Board:
    """2 columns by 3 rows with one bomb at column 1, row 2."""
    return load_board(FIXTURES / "simple_board.txt")


@pytest.fixture
def large_board() -> Board:
    """4 columns by 3 rows with bombs at (1, 2) and (3, 2)."""
    return load_board(FIXTURES / "large_board.txt")


@pytest.fixture
def published_board() -> Board:
    """7x7 board with bombs at (4, 1) and (0, 6)."""
    return load_board(FIXTURES / "board_file_5")


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no bombs for cascade testing."""
    return Board(5, 5)


@pytest.fixture
def bomb_field() -> Board:
    """3x3 board with a bomb in every cell."""
    return Board(3, 3, [(x, y) for x in range(3) for y in range(3)])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def untouched_cell() -> Cell:
    """Create an untouched cell."""
    return Cell()


@pytest.fixture
def bomb_cell() -> Cell:
    """Create a cell carrying a bomb."""
    return Cell(has_bomb=True)


# ============================================================================
# Server Fixtures
# ============================================================================

def _run_server(board: Board, debug: bool):
    server = MinesweeperServer(board, port=0, host="127.0.0.1", debug=debug)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server, thread


@pytest.fixture
def debug_server(published_board: Board):
    """Server in debug mode on the published 7x7 board."""
    server, thread = _run_server(published_board, debug=True)
    yield server
    server.shutdown()
    thread.join(timeout=5)


@pytest.fixture
def strict_server(published_board: Board):
    """Server that disconnects players who dig a bomb."""
    server, thread = _run_server(published_board, debug=False)
    yield server
    server.shutdown()
    thread.join(timeout=5)
