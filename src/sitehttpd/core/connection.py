"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket for the single request it will carry.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                 Connection Lifecycle (no keep-alive)                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Client                                Server                      │
    │     │                                     │                          │
    │     │ ───── TCP handshake ──────────────► │  accept() → Connection  │
    │     │                                     │                          │
    │     │ ───── GET /about HTTP/1.1 ────────► │  READING                │
    │     │ ───── headers, empty line ────────► │                          │
    │     │                                     │  PROCESSING             │
    │     │ ◄──── HTTP/1.1 200 OK ... ───────── │  WRITING                │
    │     │                                     │                          │
    │     │ ◄──── FIN ───────────────────────── │  CLOSING → CLOSED       │
    │     │                                     │                          │
    └─────────────────────────────────────────────────────────────────────┘

There is no second request. Whatever happens, the connection is closed
once the response (or error page) has been written.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED
              │              │                        ▲
              └──────────────┴───── error page ───────┘

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    Tracked for logging and debugging; nothing branches on them.
    """

    NEW = "new"                # Just accepted, haven't read anything yet
    READING = "reading"        # Reading the request head
    PROCESSING = "processing"  # Resolving the requested file
    WRITING = "writing"        # Sending response data
    CLOSING = "closing"        # About to close (shutdown sequence)
    CLOSED = "closed"          # Connection closed, socket released


@dataclass
class Connection:
    """
    One accepted client socket, good for a single request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    What a Connection does                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  1. LINE READING                                                     │
    │     └── reader: a buffered binary stream over the socket            │
    │     └── The request parser reads it line by line                    │
    │                                                                      │
    │  2. BEST-EFFORT WRITING                                              │
    │     └── send() uses sendall() and never raises                      │
    │     └── A client that went away just gets nothing                   │
    │                                                                      │
    │  3. PHASE TRACKING                                                   │
    │     └── state shows where a stuck connection is stuck               │
    │                                                                      │
    │  4. GRACEFUL CLOSE                                                   │
    │     └── FIN first, drain, then release the file descriptor          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Attributes:
        socket: Accepted client socket.
        address: Peer address as returned by accept().
        id: Short random id that tags every log line.
        state: Where in the pipeline the connection is.
        created_at: time.time() at accept.
    """

    # Required parameters
    socket: socket.socket
    address: tuple

    # Filled in on creation
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # From ServerConfig
    buffer_size: int = 8192
    timeout: Optional[float] = None

    # Lazily created, kept out of repr
    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        """Configure the socket after initialization."""
        # Blocking mode, with an optional timeout. settimeout(None) is
        # plain blocking mode.
        self.socket.settimeout(self.timeout)

    # =========================================================================
    # IDENTITY
    # =========================================================================

    @property
    def client_ip(self) -> str:
        """Peer IP as a string, "-" when the address has none."""
        if isinstance(self.address, tuple) and self.address:
            return str(self.address[0])
        return "-"

    @property
    def age(self) -> float:
        """Seconds since accept."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    @property
    def reader(self) -> BinaryIO:
        """
        Buffered binary stream over the socket.

        Created on first use; readline() on it blocks until a full line
        (or end of stream) arrives.
        """
        if self._reader is None:
            self.state = ConnectionState.READING
            self._reader = self.socket.makefile("rb", buffering=self.buffer_size)
        return self._reader

    # =========================================================================
    # WRITING
    # =========================================================================

    def send(self, data: bytes) -> bool:
        """
        Send data to the client.

        sendall() loops until every byte is handed to the kernel.

        Args:
            data: Bytes to send.

        Returns:
            True if send succeeded, False if the connection is gone.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            # Client disconnected (reset, broken pipe, timeout)
            logger.warning(f"[{self.id}] Write to {self.client_ip} failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection, letting the client read everything first.

        1. shutdown(SHUT_WR): Tell client we're done sending (FIN)
        2. Drain remaining data the client sent
        3. close(): release the file descriptor
        """
        if self.state is ConnectionState.CLOSED:
            return  # Already closed

        self.state = ConnectionState.CLOSING

        if self._reader is not None:
            try:
                self._reader.close()
            except OSError:
                pass
            self._reader = None

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            # Unread bytes in the kernel buffer would turn our FIN into
            # a RST and the client could lose the response.
            self.socket.settimeout(0.5)
            while self.socket.recv(self.buffer_size):
                pass
        except OSError:
            pass  # Includes socket.timeout; we're closing anyway

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                request = parser.parse(conn.reader)
                conn.send(response_bytes)
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Close on the way out, whatever happened inside."""
        self.close()
        return False
