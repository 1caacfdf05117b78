"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The protocol side of the static site server: everything that knows what
bytes look like on the wire, and nothing about sockets or threads.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST (request.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Reads the request head from a stream, keeps the path                │
    │                                                                      │
    │ b"GET /about HTTP/1.1\r\n..."  →  HTTPRequest(path="/about")        │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py)                                              │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Frames status line, headers and payload into bytes                  │
    │ Binary payloads are written in two separate writes                  │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ CONTENT TYPES (content_types.py)                                    │
    │ ─────────────────────────────────────────────────────────────────── │
    │ ResourceKind: CSS / PNG / ICO / HTML, chosen from the path          │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ ERRORS (errors.py, error_pages.py)                                  │
    │ ─────────────────────────────────────────────────────────────────── │
    │ ErrorKind → 400 / 404 / 500                                         │
    │ ErrorPages: responses rendered once at startup                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .content_types import ResourceKind
from .error_pages import ErrorPages
from .errors import (
    ConnectionFailure,
    ErrorKind,
    RequestReadError,
    ResolverError,
    ResourceNotFound,
    StartupError,
)
from .request import HTTPRequest, RequestParser, parse_request
from .response import HTTPResponse
from .status_codes import HTTPStatus

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "parse_request",

    # Response encoding
    "HTTPResponse",

    # Status codes and content types
    "HTTPStatus",
    "ResourceKind",

    # Errors
    "ErrorKind",
    "ErrorPages",
    "ConnectionFailure",
    "RequestReadError",
    "ResourceNotFound",
    "ResolverError",
    "StartupError",
]
