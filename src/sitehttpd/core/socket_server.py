"""
=============================================================================
LISTENING SOCKET AND ACCEPT LOOP
=============================================================================

The listener: binds the server address once, then accepts connections
until told to stop, handing each one off without waiting for it.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a socket file descriptor
    2. bind()      Associate the socket with an IP:PORT     ┐ bind()
    3. listen()    Mark socket as a "listening" socket      ┘
    4. accept()    Wait for and accept an incoming connection ┐ serve_forever()
                   └─ Returns a NEW socket just for that client┘
    5. close()     Release the socket resources

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    │   (Server Socket)     │     Bound to 127.0.0.1:8080
                    └───────────┬───────────┘     Never sends/receives data
                                │
        ┌───────────────────────┼───────────────────────┐
        │ accept()              │ accept()              │ accept()
        ▼                       ▼                       ▼
    ┌─────────┐            ┌─────────┐            ┌─────────┐
    │Client 1 │            │Client 2 │            │Client 3 │
    │ Socket  │            │ Socket  │            │ Socket  │
    └─────────┘            └─────────┘            └─────────┘
        │                       │                       │
        └──────── handed to the thread pool ────────────┘

Binding is split from serving so the caller can treat a bind failure as a
startup error (fatal) while accept errors stay non-fatal.

=============================================================================
"""

import socket
import threading
import logging
from typing import Callable, Optional, Tuple

from .connection import Connection
from ..config import ServerConfig

logger = logging.getLogger(__name__)


class SocketServer:
    """
    TCP socket server that accepts connections.

    Usage:
        def handle_connection(conn: Connection):
            pool.submit(handler.handle, args=(conn,))

        server = SocketServer(config)
        server.bind()                          # May raise OSError
        server.serve_forever(handle_connection)  # Blocks until shutdown()
    """

    # How often accept() wakes up to check for shutdown
    ACCEPT_POLL_INTERVAL = 1.0

    def __init__(self, config: ServerConfig):
        """
        Prepare the server; nothing is bound yet.

        Args:
            config: Supplies host, port, backlog, buffer_size and timeout.

        Note: This does NOT create the socket. That happens in bind().
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._stop_requested = False  # shutdown() may arrive before serve_forever()

        # Set once the socket is listening; tests and callers wait on it
        self._ready_event = threading.Event()

    @property
    def address(self) -> Tuple[str, int]:
        """
        Get the server's bound address (IP, port).

        After bind() this is the real address, so port 0 in the config
        shows up as the port the OS picked.
        """
        if self._socket is not None:
            host, port = self._socket.getsockname()[:2]
            return (host, port)
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """
        New IPv4 TCP socket with SO_REUSEADDR and the accept poll timeout.

        Returns:
            Unbound socket.
        """
        # AF_INET = IPv4, SOCK_STREAM = TCP
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # SO_REUSEADDR: restart without "Address already in use" while the
        # old socket sits in TIME_WAIT.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # accept() wakes up periodically so shutdown() takes effect.
        sock.settimeout(self.ACCEPT_POLL_INTERVAL)

        return sock

    def bind(self):
        """
        Bind and listen on the configured address.

        Raises:
            OSError: If the address cannot be bound (in use, permission).
        """
        sock = self._create_socket()

        try:
            sock.bind((self.config.host, self.config.port))
            sock.listen(self.config.backlog)
        except OSError as e:
            sock.close()
            logger.error(f"bind({self.config.host}:{self.config.port}) failed: {e}")
            raise

        self._socket = sock
        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")

    def serve_forever(self, connection_handler: Callable[[Connection], None]):
        """
        Accept connections until shutdown() is called.

        Binds first if bind() was not called yet.

        Args:
            connection_handler: Called with every new Connection. Must not
                                block on the connection's completion.
        """
        if self._socket is None:
            self.bind()

        self._running = not self._stop_requested
        self._ready_event.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Accept until shutdown(), handing each client to connection_handler.

        ┌─────────────────────────────────────────────────────────────────┐
        │                     Accept Loop Flow                             │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   while self._running:                                           │
        │       │                                                          │
        │       ├──► accept()       (timeout → loop, check _running)      │
        │       │                                                          │
        │       ├──► Connection(client_socket, address)                   │
        │       │                                                          │
        │       └──► connection_handler(conn)                              │
        │               └── SiteServer submits to the thread pool         │
        │                                                                  │
        │   accept error  → log, keep looping                              │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘
        """
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                # Normal: lets us notice shutdown() within a second.
                continue
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"accept() failed, continuing: {e}")
                continue

            logger.debug(f"Connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )

            try:
                connection_handler(conn)
            except Exception as e:
                # The handoff failed (pool gone); don't leak the socket.
                logger.exception(f"[{conn.id}] Could not dispatch connection: {e}")
                conn.close()

    def shutdown(self):
        """
        Stop the accept loop.

        Safe to call from any thread, and more than once.
        """
        if self._running:
            logger.info("Accept loop stopping")
        self._stop_requested = True
        self._running = False

    def _cleanup(self):
        """Close the listening socket."""
        self._running = False
        self._ready_event.clear()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass  # Already closed
            self._socket = None

        logger.info("Listening socket closed")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Wait until the accept loop is running. False on timeout."""
        return self._ready_event.wait(timeout)
