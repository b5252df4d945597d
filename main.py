#!/usr/bin/env python3
"""
Multiplayer Minesweeper server - Main entry point.

Usage:
    python main.py [--debug | --no-debug] [--port N] [--file PATH | --size COLS,ROWS]
"""
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from server.cli import main  # noqa: E402


if __name__ == "__main__":
    main()
