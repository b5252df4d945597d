"""
Text protocol spoken between the Minesweeper server and its players.

Each connection is served by one ClientHandler that greets the player,
then reads newline-terminated commands, applies them to the shared board
and writes back the reply.
"""
import logging
import re
import socket
from dataclasses import dataclass
from enum import Enum, auto
from typing import BinaryIO, Optional, Tuple

from game import Board, DigOutcome


logger = logging.getLogger(__name__)


# ============================================================================
# Messages
# ============================================================================

HELLO_TEMPLATE = (
    "Welcome to Minesweeper. Board: {cols} columns by {rows} rows. "
    "Players: {players} including you. Type 'help' for help."
)
HELP_MESSAGE = "HELP: look | dig X Y | flag X Y | deflag X Y | help | bye"
BOOM_MESSAGE = "BOOM!"

ENCODING = "ascii"


def hello_message(board: Board, players: int) -> str:
    """Build the greeting sent once to each new connection."""
    cols, rows = board.dimensions()
    return HELLO_TEMPLATE.format(cols=cols, rows=rows, players=players)


# ============================================================================
# Commands
# ============================================================================

class CommandType(Enum):
    """Commands a player can send."""

    LOOK = auto()
    DIG = auto()
    FLAG = auto()
    DEFLAG = auto()
    HELP = auto()
    BYE = auto()


COMMAND_PATTERN = re.compile(
    r"(?P<simple>look|help|bye)"
    r"|(?P<action>dig|flag|deflag) (?P<x>[0-9]+) (?P<y>[0-9]+)"
)

# Coordinates with more significant digits than this lie off every board.
MAX_COORDINATE_DIGITS = 18
OFF_BOARD = -1


@dataclass(frozen=True)
class Command:
    """A parsed player command with its target position, if any."""

    kind: CommandType
    x: int = 0
    y: int = 0


def parse_command(line: str) -> Optional[Command]:
    """
    Parse one protocol line.

    Args:
        line: The command without its line terminator.

    Returns:
        The parsed command, or None if the line is malformed.
    """
    match = COMMAND_PATTERN.fullmatch(line)
    if match is None:
        return None
    if match.group("simple"):
        return Command(CommandType[match.group("simple").upper()])
    return Command(
        CommandType[match.group("action").upper()],
        _coordinate(match.group("x")),
        _coordinate(match.group("y")),
    )


def _coordinate(digits: str) -> int:
    """Convert a decimal coordinate, mapping huge values to OFF_BOARD."""
    significant = digits.lstrip("0")
    if len(significant) > MAX_COORDINATE_DIGITS:
        return OFF_BOARD
    return int(significant or "0")


@dataclass(frozen=True)
class Reply:
    """
    What to send back for one command.

    Attributes:
        text: Bytes-ready text including line terminators, or None.
        disconnect: Whether the connection ends after this reply.
        boom: Whether the command dug a bomb.
    """

    text: Optional[str]
    disconnect: bool = False
    boom: bool = False


def _line(message: str) -> str:
    return message + "\n"


def execute(board: Board, command: Optional[Command], debug: bool) -> Reply:
    """
    Apply a command to the board and decide the reply.

    Args:
        board: The shared board.
        command: Parsed command, or None for a malformed line.
        debug: When True a BOOM leaves the connection open.

    Returns:
        The reply to write to this player.
    """
    if command is None or command.kind == CommandType.HELP:
        return Reply(_line(HELP_MESSAGE))
    if command.kind == CommandType.BYE:
        return Reply(None, disconnect=True)
    if command.kind == CommandType.DIG:
        if board.dig(command.x, command.y) == DigOutcome.BOOM:
            return Reply(_line(BOOM_MESSAGE), disconnect=not debug, boom=True)
    elif command.kind == CommandType.FLAG:
        board.flag(command.x, command.y)
    elif command.kind == CommandType.DEFLAG:
        board.deflag(command.x, command.y)
    return Reply(board.render())


# ============================================================================
# Connection Handler
# ============================================================================

class SessionState(Enum):
    """Lifecycle of one player connection."""

    GREETING = auto()
    READY = auto()
    TERMINATED = auto()


class ClientHandler:
    """
    Serves one player connection until it ends.

    The handler owns the socket it is given and always closes it before
    ``run`` returns, whether the player said ``bye``, stepped on a bomb
    outside debug mode, or the connection failed.
    """

    def __init__(
        self,
        board: Board,
        conn: socket.socket,
        debug: bool = False,
        address: Optional[Tuple[str, int]] = None,
    ) -> None:
        self.board = board
        self.conn = conn
        self.debug = debug
        self.address = address
        self.state = SessionState.GREETING
        self._reader: BinaryIO = conn.makefile("rb")
        self._writer: BinaryIO = conn.makefile("wb")

    def run(self, players: int = 1) -> None:
        """
        Greet the player and process commands until the session ends.

        Args:
            players: Connected players including this one.
        """
        try:
            self._send(_line(hello_message(self.board, players)))
            self.state = SessionState.READY
            while self.state == SessionState.READY:
                self._step()
        except OSError as exc:
            logger.info("Connection %s failed: %s", self.address, exc)
        finally:
            self.state = SessionState.TERMINATED
            self._close()

    def _step(self) -> None:
        """Handle one command line."""
        line = self._read_line()
        if line is None:
            logger.debug("Connection %s reached end of input", self.address)
            self.state = SessionState.TERMINATED
            return

        logger.debug("Command from %s: %r", self.address, line)
        command = parse_command(line)
        reply = execute(self.board, command, self.debug)
        if reply.boom:
            logger.info("Player %s dug a bomb", self.address)
        if reply.text is not None:
            self._send(reply.text)
        if reply.disconnect:
            self.state = SessionState.TERMINATED

    def _read_line(self) -> Optional[str]:
        """Read one line without its terminator, or None at end of input."""
        raw = self._reader.readline()
        if not raw:
            return None
        line = raw.decode(ENCODING, errors="replace")
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return line

    def _send(self, text: str) -> None:
        self._writer.write(text.encode(ENCODING))
        self._writer.flush()

    def _close(self) -> None:
        """Release the file objects and the socket."""
        for stream in (self._writer, self._reader):
            try:
                stream.close()
            except OSError as exc:
                logger.debug("Error closing stream for %s: %s", self.address, exc)
        try:
            self.conn.close()
        except OSError as exc:
            logger.debug("Error closing socket for %s: %s", self.address, exc)
