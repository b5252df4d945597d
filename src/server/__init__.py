"""
Minesweeper server module.

Provides the text protocol, the TCP listener and the configuration that
ties them to the shared game board.
"""
from .config import ServerConfig, create_board
from .protocol import (
    BOOM_MESSAGE,
    HELP_MESSAGE,
    ClientHandler,
    Command,
    CommandType,
    Reply,
    SessionState,
    execute,
    hello_message,
    parse_command,
)
from .listener import MinesweeperServer, PlayerRegistry

__all__ = [
    "ServerConfig",
    "create_board",
    "BOOM_MESSAGE",
    "HELP_MESSAGE",
    "ClientHandler",
    "Command",
    "CommandType",
    "Reply",
    "SessionState",
    "execute",
    "hello_message",
    "parse_command",
    "MinesweeperServer",
    "PlayerRegistry",
]
