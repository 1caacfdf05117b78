"""
=============================================================================
HTTP RESPONSE ENCODING
=============================================================================

Builds the exact bytes written back to the client.

=============================================================================
RESPONSE ANATOMY
=============================================================================

    HTTP/1.1 200 OK\r\n                  ← Status line
    Content-Type: text/html\r\n          ┐ Header lines, joined by \r\n
    Content-Length: 11                   ┘
    \r\n\r\n                             ← End of header block
    <h1>Hi</h1>                          ← Payload (exactly Content-Length bytes)

A response with no headers (a bare error status) is just:

    HTTP/1.1 404 NOT FOUND\r\n\r\n

=============================================================================
TEXT VS BINARY WRITES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  Text payload (HTML, CSS)         Binary payload (PNG, ICO)         │
    │  ─────────────────────────        ─────────────────────────         │
    │                                                                      │
    │  send(head + body)                send(head)                        │
    │       one write                   send(body)                        │
    │                                        two writes                   │
    └─────────────────────────────────────────────────────────────────────┘

Image bytes go to the socket untouched, never through a text step.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Protocol

from .status_codes import HTTPStatus


class ResponseWriter(Protocol):
    """Anything a response can be written to (a Connection, in practice)."""

    def send(self, data: bytes) -> bool:
        ...


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be written to a connection.

    Attributes:
        status: HTTP status code.
        headers: Header lines in the order they are written.
        body: Payload bytes.
        binary: Write head and body separately (image payloads).
        version: HTTP version in the status line.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    binary: bool = False
    version: str = "HTTP/1.1"

    @classmethod
    def with_payload(
        cls,
        content_type: str,
        payload: bytes,
        status: HTTPStatus = HTTPStatus.OK,
        binary: bool = False,
    ) -> "HTTPResponse":
        """
        Build a response carrying a payload.

        Sets Content-Type and Content-Length (in that order). The length is
        the payload's byte count, not its character count.
        """
        return cls(
            status=status,
            headers={
                "Content-Type": content_type,
                "Content-Length": str(len(payload)),
            },
            body=payload,
            binary=binary,
        )

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 404 NOT FOUND"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def head_bytes(self) -> bytes:
        """Status line and header block, terminated by the empty line."""
        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")

    def to_bytes(self) -> bytes:
        """Serialize the full response (head + body)."""
        return self.head_bytes() + self.body

    def write_to(self, writer: ResponseWriter) -> bool:
        """
        Write the response to a connection.

        Returns:
            True if every write succeeded.
        """
        if self.binary:
            if not writer.send(self.head_bytes()):
                return False
            return writer.send(self.body)
        return writer.send(self.to_bytes())
