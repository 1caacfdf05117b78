"""
=============================================================================
SITEHTTPD - Minimal Static Site HTTP Server
=============================================================================

Serves a small static website (HTML pages, CSS, PNG images and a favicon)
straight from a directory, over raw sockets and a fixed pool of worker
threads. One request per connection, then close.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    sitehttpd/
    ├── __init__.py              # This file - package exports
    ├── __main__.py              # CLI entry point (python -m sitehttpd)
    ├── server.py                # SiteServer: wires everything together
    ├── config.py                # ServerConfig dataclass
    ├── access_log.py            # One access-log record per connection
    ├── core/                    # Sockets and threads
    │   ├── socket_server.py     # Bind + accept loop
    │   ├── connection.py        # Client socket wrapper
    │   ├── thread_pool.py       # Fixed worker pool
    │   └── console.py           # "stop" command monitor
    ├── http/                    # Wire format
    │   ├── request.py           # Request line parser
    │   ├── response.py          # Response encoder
    │   ├── status_codes.py      # 200 / 400 / 404 / 500
    │   ├── content_types.py     # HTML / CSS / PNG / ICO
    │   ├── errors.py            # ErrorKind + exceptions
    │   └── error_pages.py       # Pre-rendered error responses
    └── handlers/
        ├── static.py            # ContentResolver
        └── connection_handler.py  # Parse → resolve → write

=============================================================================
QUICK START
=============================================================================

    # Serve ./website on 127.0.0.1:8080
    python -m sitehttpd

    # In code
    from sitehttpd import SiteServer, ServerConfig

    server = SiteServer(ServerConfig(content_root="public", port=3000))
    server.run()   # type "stop" to shut down

=============================================================================
"""

from .config import ServerConfig
from .server import SiteServer, run_in_thread
from .handlers import ConnectionHandler, ContentResolver, Resource
from .http import (
    ErrorKind,
    ErrorPages,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    RequestParser,
    ResourceKind,
    StartupError,
)

__version__ = "1.0.0"

__all__ = [
    # Server
    "SiteServer",
    "ServerConfig",
    "run_in_thread",

    # Pipeline pieces
    "ConnectionHandler",
    "ContentResolver",
    "Resource",
    "RequestParser",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "ResourceKind",
    "ErrorKind",
    "ErrorPages",
    "StartupError",
]
