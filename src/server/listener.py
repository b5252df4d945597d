"""
TCP listener for the Minesweeper server.

Accepts player connections and runs one ClientHandler thread per
connection, all sharing the same board.
"""
import logging
import socket
import threading
from typing import Tuple

from game import Board

from .protocol import ClientHandler


logger = logging.getLogger(__name__)

LISTEN_BACKLOG = 16


class PlayerRegistry:
    """Thread-safe count of connected players."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0

    def join(self) -> int:
        """Register a player and return the count including them."""
        with self._lock:
            self._count += 1
            return self._count

    def leave(self) -> int:
        """Unregister a player and return the remaining count."""
        with self._lock:
            self._count -= 1
            return self._count

    @property
    def count(self) -> int:
        with self._lock:
            return self._count


def open_server(host: str, port: int) -> socket.socket:
    """Create a listening TCP socket bound to (host, port)."""
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        srv.bind((host, port))
        srv.listen(LISTEN_BACKLOG)
    except OSError:
        srv.close()
        raise
    return srv


class MinesweeperServer:
    """
    Accept loop serving the one shared board.

    The listening socket is bound on construction, so ``address`` is
    usable (and a port of 0 resolved) before ``serve_forever`` starts.
    """

    def __init__(
        self,
        board: Board,
        port: int,
        host: str = "",
        debug: bool = False,
    ) -> None:
        self.board = board
        self.debug = debug
        self.players = PlayerRegistry()
        self._stopped = threading.Event()
        self._srv = open_server(host, port)

    @property
    def address(self) -> Tuple[str, int]:
        """The (host, port) the server is listening on."""
        return self._srv.getsockname()[:2]

    def serve_forever(self) -> None:
        """
        Accept connections until ``shutdown`` is called.

        Raises:
            OSError: If accepting fails for any other reason.
        """
        cols, rows = self.board.dimensions()
        logger.info(
            "Listening on %s:%d (%dx%d board, debug=%s)",
            *self.address, cols, rows, self.debug,
        )
        while not self._stopped.is_set():
            try:
                conn, addr = self._srv.accept()
            except OSError:
                if self._stopped.is_set():
                    break
                raise
            threading.Thread(
                target=self._serve_client,
                args=(conn, addr),
                name=f"client-{addr[0]}:{addr[1]}",
                daemon=True,
            ).start()

    def _serve_client(self, conn: socket.socket, addr: Tuple[str, int]) -> None:
        players = self.players.join()
        logger.info("Player %s connected (%d online)", addr, players)
        try:
            ClientHandler(self.board, conn, self.debug, addr).run(players)
        finally:
            remaining = self.players.leave()
            logger.info("Player %s disconnected (%d online)", addr, remaining)

    def shutdown(self) -> None:
        """Stop accepting connections and close the listening socket."""
        self._stopped.set()
        try:
            self._srv.shutdown(socket.SHUT_RDWR)
        except OSError:
            # some platforms refuse shutdown on a listening socket
            pass
        self._srv.close()

    def __enter__(self) -> "MinesweeperServer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

