"""
=============================================================================
STATIC SITE SERVER
=============================================================================

Wires the components together and runs them.

=============================================================================
STARTUP SEQUENCE
=============================================================================

    SiteServer(config)
        │
        ├── config.validate()                     ValueError → fatal
        │
    run()
        │
        ├── setup logging
        ├── content root exists?                  no → StartupError (fatal)
        ├── ErrorPages.load(root)                 404/500 pages, rendered once
        ├── ConnectionHandler(resolver, pages)
        ├── SocketServer.bind()                   OSError → StartupError (fatal)
        ├── ThreadPool.start()                    N workers
        ├── ConsoleMonitor.start()                waits for "stop"
        │
        └── SocketServer.serve_forever(...)       blocks here
                 │
                 └── each connection → ThreadPool.submit(handler.handle, conn)

=============================================================================
SHUTDOWN
=============================================================================

"stop" on the console calls SiteServer.stop(). The accept loop exits
within a second, the pool is shut down WITHOUT waiting, and run()
returns. In-flight connections are not drained; worker threads are
daemons and end with the process.

=============================================================================
"""

import logging
import threading
from pathlib import Path
from typing import Optional, TextIO, Tuple

from .access_log import AccessLog
from .config import ServerConfig
from .core import Connection, ConsoleMonitor, SocketServer, ThreadPool
from .handlers import ConnectionHandler, ContentResolver
from .http import ErrorPages, StartupError

logger = logging.getLogger(__name__)


class SiteServer:
    """
    Static site HTTP server.

    Usage:
        server = SiteServer(ServerConfig(content_root="website"))
        server.run()        # Blocks until "stop" is typed on the console

    In tests, run it on a thread without the console and stop it directly:

        server = SiteServer(ServerConfig(port=0, content_root=str(site)))
        thread = threading.Thread(
            target=server.run, kwargs={"console": False}, daemon=True
        )
        thread.start()
        server.wait_until_ready(5)
        ...
        server.stop()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Initialize the server.

        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            workers=self.config.workers,
            queue_size=self.config.queue_size,
        )

        # Built in run(), once the content root has been checked
        self._handler: Optional[ConnectionHandler] = None
        self._console: Optional[ConsoleMonitor] = None

        self._running = False

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once the server is listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def thread_pool(self) -> ThreadPool:
        return self._thread_pool

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self, console: bool = True, console_stream: Optional[TextIO] = None):
        """
        Start the server (blocking).

        Args:
            console: Watch the console for the stop command.
            console_stream: Read commands from this stream instead of stdin.

        Raises:
            StartupError: Content root missing or address can't be bound.
        """
        self._setup_logging()

        self._handler = self._build_handler()

        try:
            self._socket_server.bind()
        except OSError as e:
            host, port = self.config.host, self.config.port
            raise StartupError(f"Unable to bind to {host}:{port}: {e}") from e

        self._thread_pool.start()
        self._running = True

        if console:
            self._console = ConsoleMonitor(
                on_stop=self.stop,
                stream=console_stream,
                command=self.config.console_command,
            )
            self._console.start()

        self._print_startup_banner()

        try:
            self._socket_server.serve_forever(self._handle_connection)
        finally:
            self._shutdown()

    def stop(self):
        """Stop accepting connections; run() returns shortly after."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server accepts connections. False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def _build_handler(self) -> ConnectionHandler:
        """Load the site and build the per-connection handler."""
        root = Path(self.config.content_root)
        if not root.is_dir():
            raise StartupError(
                f"Unable to find the website! Expected a directory at {root.resolve()}"
            )

        error_pages = ErrorPages.load(
            root,
            not_found_page=self.config.not_found_page,
            internal_error_page=self.config.internal_error_page,
        )
        resolver = ContentResolver(
            root,
            home_page=self.config.home_page,
            allow_path_traversal=self.config.allow_path_traversal,
        )

        if self.config.allow_path_traversal:
            logger.warning("Path traversal check disabled: files outside the content root can be served")

        return ConnectionHandler(
            resolver=resolver,
            error_pages=error_pages,
            access_log=AccessLog(log_format=self.config.log_format),
        )

    def _print_startup_banner(self):
        """Print server startup information."""
        host, port = self.address
        print(f"Successfully started! Listening on: {host}:{port}...")
        print(f"  Serving: {Path(self.config.content_root).resolve()}")
        print(f"  Workers: {self.config.workers} threads")
        if self._console is not None:
            print(f"  Type '{self.config.console_command}' to stop the server")

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("sitehttpd").setLevel(level)

    def _shutdown(self):
        """Abrupt shutdown: no waiting for in-flight connections."""
        logger.info("Stopping the web server...")
        self._running = False
        tasks = self._thread_pool.stats["tasks"]
        self._thread_pool.shutdown(wait=False)
        logger.info(
            f"Server stopped: {tasks['completed']} connections handled, "
            f"{tasks['failed']} failed, {tasks['queued']} dropped"
        )

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Queue a connection for a worker.

        Called on the accept thread; returns as soon as the connection is
        queued. With a bounded queue this blocks while the queue is full.
        """
        self._thread_pool.submit(self._handler.handle, args=(conn,))


def run_in_thread(server: SiteServer, timeout: float = 5.0) -> threading.Thread:
    """
    Run a server on a daemon thread without the console monitor.

    Returns once the server accepts connections.

    Raises:
        RuntimeError: If the server didn't come up within timeout.
    """
    thread = threading.Thread(
        target=server.run,
        kwargs={"console": False},
        name="SiteServer",
        daemon=True,
    )
    thread.start()

    if not server.wait_until_ready(timeout):
        raise RuntimeError("Server failed to start")

    return thread
