"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the static site server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m sitehttpd --port 3000                           │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── SITE_PORT=3000 python -m sitehttpd                        │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The config is validated once, at startup. A bad value stops the server
before it binds a port, not hours later on the first unlucky request.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the static site server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    SITE CONTENT
    - content_root, home_page, not_found_page, internal_error_page,
      allow_path_traversal

    THREADING SETTINGS
    - workers, queue_size

    LOGGING
    - log_level, log_format

    CONSOLE
    - console_command

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (default)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port
    (handy in tests; read the real port from SiteServer.address).
    """

    backlog: int = 128
    """Maximum number of queued connections in the kernel accept queue."""

    buffer_size: int = 8192
    """Read buffer size for each connection's stream, in bytes."""

    timeout: Optional[float] = None
    """
    Per-connection socket timeout in seconds.
    None = no timeout: a client that never finishes its request head
    keeps its worker busy indefinitely. Set a value to bound that.
    """

    # ─────────────────────────────────────────────────────────────────────
    # SITE CONTENT
    # ─────────────────────────────────────────────────────────────────────

    content_root: str = "website"
    """Directory holding the site. The server refuses to start without it."""

    home_page: str = "/home"
    """Path served for a bare "/" request (".html" is appended on disk)."""

    not_found_page: Optional[str] = "404.html"
    """Page sent with 404 responses, relative to content_root."""

    internal_error_page: Optional[str] = "500.html"
    """Page sent with 500 responses, relative to content_root."""

    allow_path_traversal: bool = False
    """
    Serve paths that resolve outside content_root ("/../secret").
    Off by default; such requests get a 404.
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    workers: int = 9
    """Number of worker threads. Each handles one connection at a time."""

    queue_size: int = 0
    """
    Bound on connections waiting for a worker.
    0 = unbounded: the accept loop never blocks on a busy pool.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'text' (Apache-like) or 'json'."""

    # ─────────────────────────────────────────────────────────────────────
    # CONSOLE
    # ─────────────────────────────────────────────────────────────────────

    console_command: str = "stop"
    """Console line that shuts the server down."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        SITE_HOST        Server host (default: 127.0.0.1)
        SITE_PORT        Server port (default: 8080)
        SITE_ROOT        Content root directory (default: website)
        SITE_WORKERS     Worker threads (default: 9)
        SITE_QUEUE_SIZE  Pending connection bound, 0 = unbounded (default: 0)
        SITE_TIMEOUT     Per-connection timeout in seconds (default: none)
        SITE_LOG_LEVEL   Logging level (default: INFO)
        SITE_LOG_FORMAT  Access log format (default: text)

        =====================================================================
        """
        timeout = os.getenv("SITE_TIMEOUT")
        return cls(
            host=os.getenv("SITE_HOST", "127.0.0.1"),
            port=int(os.getenv("SITE_PORT", "8080")),
            content_root=os.getenv("SITE_ROOT", "website"),
            workers=int(os.getenv("SITE_WORKERS", "9")),
            queue_size=int(os.getenv("SITE_QUEUE_SIZE", "0")),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("SITE_LOG_LEVEL", "INFO"),
            log_format=os.getenv("SITE_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.workers < 1:
            raise ValueError("workers must be >= 1")

        if self.queue_size < 0:
            raise ValueError("queue_size must be >= 0")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.home_page.startswith("/"):
            raise ValueError(f"home_page must start with '/': {self.home_page!r}")

        if self.log_format not in ("text", "json"):
            raise ValueError(f"log_format must be 'text' or 'json', got {self.log_format!r}")
