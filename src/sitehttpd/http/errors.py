"""
=============================================================================
CONNECTION ERRORS
=============================================================================

Every way a single connection can fail, as a small closed set.

    ┌─────────────────────────────────────────────────────────────────────┐
    │  ErrorKind          Raised by              Client sees              │
    ├─────────────────────────────────────────────────────────────────────┤
    │  READ_FAILED        RequestParser          400 BAD REQUEST          │
    │  NOT_FOUND          ContentResolver        404 NOT FOUND (+ page)   │
    │  INTERNAL_ERROR     ContentResolver /      500 Internal Server      │
    │                     ConnectionHandler      Error (+ page)           │
    └─────────────────────────────────────────────────────────────────────┘

The parser and resolver only RAISE these. Turning a kind into bytes is the
job of ErrorPages (http/error_pages.py), which is built once at startup.

StartupError is different: it is fatal to the whole process and never
reaches a connection.
=============================================================================
"""

from enum import Enum

from .status_codes import HTTPStatus


class ErrorKind(Enum):
    """Closed set of per-connection failure kinds."""

    READ_FAILED = "read_failed"
    NOT_FOUND = "not_found"
    INTERNAL_ERROR = "internal_error"

    @property
    def status(self) -> HTTPStatus:
        """HTTP status reported to the client for this kind."""
        return _KIND_STATUS[self]


_KIND_STATUS = {
    ErrorKind.READ_FAILED: HTTPStatus.BAD_REQUEST,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.INTERNAL_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
}


class ConnectionFailure(Exception):
    """
    Base class for failures handled inside one connection.

    Attributes:
        kind: Which error page to send back.
    """

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.status.phrase)


class RequestReadError(ConnectionFailure):
    """The request line could not be read or has no path."""

    kind = ErrorKind.READ_FAILED


class ResourceNotFound(ConnectionFailure):
    """The requested file does not exist or cannot be opened."""

    kind = ErrorKind.NOT_FOUND


class ResolverError(ConnectionFailure):
    """Unexpected I/O fault while reading an existing file."""

    kind = ErrorKind.INTERNAL_ERROR


class StartupError(Exception):
    """The server cannot start (missing content root, bind failure)."""
