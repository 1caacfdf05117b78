"""
=============================================================================
CONNECTION HANDLER
=============================================================================

Runs the whole request pipeline for ONE connection, on a worker thread.

=============================================================================
PIPELINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Connection                                                         │
    │       │                                                              │
    │       ▼                                                              │
    │   RequestParser.parse(conn.reader) ──── RequestReadError ──┐        │
    │       │  HTTPRequest(path)                                  │        │
    │       ▼                                                     │        │
    │   ContentResolver.resolve(path) ─── ResourceNotFound ──────┤        │
    │       │  Resource                   ResolverError ─────────┤        │
    │       ▼                             (anything else) ───────┤        │
    │   HTTPResponse.with_payload(...)                            │        │
    │       │                                                     ▼        │
    │       ▼                                     ErrorPages.payload(kind) │
    │   write_to(conn)                                    │                │
    │       │                                             │                │
    │       └──────────────────┬──────────────────────────┘                │
    │                          ▼                                           │
    │                     conn.close()                                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Rules:
- Exactly one write sequence per connection: the response OR the error
  payload, never both.
- No retries. A failed write is logged by the Connection and dropped.
- Nothing escapes handle(): each connection is its own failure domain.

=============================================================================
"""

import logging
import time
from typing import Optional

from ..access_log import AccessLog
from ..core.connection import Connection, ConnectionState
from ..http.error_pages import ErrorPages
from ..http.errors import ConnectionFailure, ErrorKind
from ..http.request import HTTPRequest, RequestParser
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus
from .static import ContentResolver

logger = logging.getLogger(__name__)


class ConnectionHandler:
    """
    Parser → Resolver → Encoder for a single connection.

    All collaborators are injected and shared read-only between workers:

        handler = ConnectionHandler(
            resolver=ContentResolver("website"),
            error_pages=ErrorPages.load("website"),
        )
        pool.submit(handler.handle, args=(conn,))
    """

    def __init__(
        self,
        resolver: ContentResolver,
        error_pages: ErrorPages,
        parser: Optional[RequestParser] = None,
        access_log: Optional[AccessLog] = None,
    ):
        self.resolver = resolver
        self.error_pages = error_pages
        self.parser = parser or RequestParser()
        self.access_log = access_log or AccessLog()

    def handle(self, conn: Connection) -> None:
        """
        Serve one request on the connection, then close it.

        Never raises.
        """
        started_at = time.time()
        request: Optional[HTTPRequest] = None

        with conn:
            try:
                request = self.parser.parse(conn.reader)

                conn.state = ConnectionState.PROCESSING
                resource = self.resolver.resolve(request.path)

                response = HTTPResponse.with_payload(
                    resource.content_type,
                    resource.payload,
                    binary=resource.is_binary,
                )
                sent = response.write_to(conn)

                status = HTTPStatus.OK
                length = len(response.head_bytes()) + len(response.body) if sent else 0

            except ConnectionFailure as e:
                logger.debug(f"[{conn.id}] {e.kind.name}: {e}")
                status, length = self._write_error(conn, e.kind)

            except Exception as e:
                logger.exception(f"[{conn.id}] Unexpected error handling connection: {e}")
                status, length = self._write_error(conn, ErrorKind.INTERNAL_ERROR)

        self.access_log.record(
            connection_id=conn.id,
            client_ip=conn.client_ip,
            method=request.method if request else "-",
            path=request.path if request else "-",
            status_code=int(status),
            bytes_sent=length,
            started_at=started_at,
        )

    def _write_error(self, conn: Connection, kind: ErrorKind) -> tuple:
        """Write the pre-rendered payload for kind; return (status, bytes sent)."""
        payload = self.error_pages.payload(kind)
        sent = conn.send(payload)
        return kind.status, len(payload) if sent else 0
