"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes this server ever sends, with the exact reason
phrases written on the wire.

=============================================================================
WIRE FORMAT
=============================================================================

    HTTP/1.1 404 NOT FOUND
             ─── ─────────
              │      │
              │      └── Reason phrase (from _STATUS_PHRASES)
              └───────── Status code (the IntEnum value)

Per RFC 7230, reason phrases are purely informational and may be ignored
by clients. We keep the phrases the site has always sent (upper-case for
the 4xx codes) so existing clients and log parsers see the same lines.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the static site server.

    IntEnum, so the members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'NOT FOUND'
    """

    OK = 200                        # File found and served
    BAD_REQUEST = 400               # Request line missing or malformed
    NOT_FOUND = 404                 # No such file under the content root
    INTERNAL_SERVER_ERROR = 500     # Unexpected fault while resolving

    @property
    def phrase(self) -> str:
        """Reason phrase written after the code in the status line."""
        return _STATUS_PHRASES[self]

    @property
    def is_error(self) -> bool:
        """Check if this is an error status code (4xx or 5xx)."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "BAD REQUEST",
    HTTPStatus.NOT_FOUND: "NOT FOUND",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
