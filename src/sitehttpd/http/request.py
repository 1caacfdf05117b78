"""
=============================================================================
HTTP REQUEST LINE PARSER
=============================================================================

Reads the head of an HTTP request from a connection stream and keeps the
one thing the static site needs: the path.

=============================================================================
WHAT WE READ
=============================================================================

    GET /css/site.css HTTP/1.1\r\n     ← request line (fields split on whitespace)
    Host: localhost:8080\r\n           ┐
    User-Agent: curl/8.5.0\r\n         ├ read and discarded
    Accept: */*\r\n                    ┘
    \r\n                               ← empty line: stop here

The path is field index 1 of the request line. The method and version are
kept only so the access log can print them; handling is method-agnostic.
No body is read, whatever the method.

=============================================================================
BEST-EFFORT LINE DECODING
=============================================================================

Each line is decoded independently:

    readline() raised OSError       ─┐
    line is not valid UTF-8          ├──► treated as an EMPTY line
    stream ended (b"")              ─┘    (end of header block)

So a broken stream simply ends the header block early. If that happens
before the request line, there is nothing to serve and the parser raises
RequestReadError (400 BAD REQUEST).

=============================================================================
"""

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from .errors import RequestReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPRequest:
    """
    The parts of a request line the server keeps.

    Attributes:
        path: Requested path, always starting with "/".
        method: Request method as sent ("GET", "HEAD", ...).
        version: Protocol version as sent, "" if the client sent none.
    """

    path: str
    method: str = "GET"
    version: str = ""


class RequestParser:
    """
    Parses the head of an HTTP request from a binary stream.

    The stream is anything with a ``readline()`` returning bytes: the
    buffered reader of a Connection in production, ``io.BytesIO`` in tests.

    Usage:
        parser = RequestParser()
        request = parser.parse(conn.reader)
        request.path   # "/css/site.css"
    """

    def parse(self, stream: BinaryIO) -> HTTPRequest:
        """
        Read the request head and return the request line's fields.

        Args:
            stream: Binary stream positioned at the start of a request.

        Returns:
            HTTPRequest with the requested path.

        Raises:
            RequestReadError: No request line, fewer than two fields, or a
                              path that does not start with "/".
        """
        lines = self.iter_head_lines(stream)

        # ─────────────────────────────────────────────────────────────────
        # REQUEST LINE
        # ─────────────────────────────────────────────────────────────────
        request_line = next(lines, None)
        if request_line is None:
            raise RequestReadError("No request line received")

        fields = request_line.split()
        if len(fields) < 2:
            raise RequestReadError(f"Malformed request line: {request_line!r}")

        method, path = fields[0], fields[1]
        version = fields[2] if len(fields) > 2 else ""

        if not path.startswith("/"):
            raise RequestReadError(f"Path must start with '/': {path!r}")

        # ─────────────────────────────────────────────────────────────────
        # DISCARD HEADERS
        # ─────────────────────────────────────────────────────────────────
        # Consume the rest of the head so the client is not reset when we
        # close with unread data in the kernel buffer.
        for _ in lines:
            pass

        return HTTPRequest(path=path, method=method, version=version)

    def iter_head_lines(self, stream: BinaryIO) -> Iterator[str]:
        """
        Yield decoded header lines until the first empty line.

        Line endings (CRLF or bare LF) are stripped. Read errors and
        undecodable lines count as empty lines.
        """
        while True:
            try:
                raw = stream.readline()
            except OSError as e:
                logger.debug(f"Read failed while reading request head: {e}")
                return

            if not raw:
                return  # End of stream

            try:
                line = raw.decode("utf-8").rstrip("\r\n")
            except UnicodeDecodeError:
                logger.debug("Undecodable request line, ending header block")
                return

            if not line:
                return  # End of header block

            yield line


def parse_request(data: bytes) -> HTTPRequest:
    """
    Parse a request head from raw bytes.

    Convenience wrapper used mostly in tests and tools:

        >>> parse_request(b"GET /about HTTP/1.1\\r\\n\\r\\n").path
        '/about'
    """
    return RequestParser().parse(io.BytesIO(data))
