"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sitehttpd import SiteServer, ServerConfig, run_in_thread


HOME_HTML = b"<h1>Hi</h1>"
ABOUT_HTML = "<p>Café ☕</p>".encode("utf-8")
STYLE_CSS = b"body { color: #333; }\n"
NOT_FOUND_HTML = b"<h1>Nothing here</h1>"

# PNG signature followed by bytes that are not valid UTF-8
LOGO_PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe\x80\x81" + bytes(range(256))
FAVICON_ICO = b"\x00\x00\x01\x00\x01\x00\x10\x10\xff\xd8\x00"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request as a browser would send it."""
    return (
        b"GET /about HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """A small website with pages, a stylesheet, images and a 404 page."""
    root = tmp_path / "website"
    (root / "css").mkdir(parents=True)
    (root / "img").mkdir()

    (root / "home.html").write_bytes(HOME_HTML)
    (root / "about.html").write_bytes(ABOUT_HTML)
    (root / "css" / "style.css").write_bytes(STYLE_CSS)
    (root / "img" / "logo.png").write_bytes(LOGO_PNG)
    (root / "favicon.ico").write_bytes(FAVICON_ICO)
    (root / "404.html").write_bytes(NOT_FOUND_HTML)

    # Outside the content root
    (tmp_path / "secret.css").write_bytes(b"secret { }")

    return root


@pytest.fixture
def bare_site_dir(tmp_path: Path) -> Path:
    """A website with a home page and no error pages."""
    root = tmp_path / "bare"
    root.mkdir()
    (root / "home.html").write_bytes(HOME_HTML)
    return root


@pytest.fixture
def config(site_dir: Path) -> ServerConfig:
    """Test server configuration serving site_dir."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        content_root=str(site_dir),
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class

    def __init__(self, server: SiteServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread and wait until it listens."""
        self._thread = run_in_thread(self.server)

    def stop(self):
        """Stop the server."""
        self.server.stop()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes) -> bytes:
        """Send raw bytes and return everything the server sends back."""
        return http_request(self.port, raw)

    def get(self, path: str) -> bytes:
        return self.request(f"GET {path} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode())


def http_request(port: int, raw: bytes, timeout: float = 5.0) -> bytes:
    """Open a connection, send raw, read until the server closes."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        s.sendall(raw)
        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


def split_response(data: bytes):
    """Split a raw response into (status_line, headers, body)."""
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return lines[0], headers, body


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server over site_dir."""
    test_srv = TestServer(SiteServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
