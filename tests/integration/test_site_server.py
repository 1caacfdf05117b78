"""
Integration tests: a real SiteServer on a free port, driven over TCP.
"""

import socket
import threading
import time
from pathlib import Path

import pytest

from conftest import (
    ABOUT_HTML,
    FAVICON_ICO,
    HOME_HTML,
    LOGO_PNG,
    NOT_FOUND_HTML,
    STYLE_CSS,
    TestServer,
    split_response,
)
from sitehttpd import ServerConfig, SiteServer, StartupError


@pytest.fixture
def bare_server(bare_site_dir: Path):
    """A running server over a site with no error pages."""
    test_srv = TestServer(SiteServer(ServerConfig(
        port=0,
        content_root=str(bare_site_dir),
        log_level="WARNING",
    )))
    test_srv.start()
    yield test_srv
    test_srv.stop()


class TestServing:
    """Requests for files that exist."""

    def test_home_page_bytes(self, test_server: TestServer):
        """GET / on an 11-byte home page, byte for byte."""
        assert test_server.get("/") == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 11\r\n"
            b"\r\n"
        ) + HOME_HTML

    def test_root_equals_home(self, test_server: TestServer):
        assert test_server.get("/") == test_server.get("/home")

    def test_html_page(self, test_server: TestServer):
        status, headers, body = split_response(test_server.get("/about"))

        assert status == "HTTP/1.1 200 OK"
        assert headers["Content-Length"] == str(len(ABOUT_HTML))
        assert body == ABOUT_HTML

    def test_css(self, test_server: TestServer):
        status, headers, body = split_response(test_server.get("/css/style.css"))

        assert status == "HTTP/1.1 200 OK"
        assert headers["Content-Type"] == "text/css"
        assert body == STYLE_CSS

    def test_png_is_byte_identical(self, test_server: TestServer):
        status, headers, body = split_response(test_server.get("/img/logo.png"))

        assert status == "HTTP/1.1 200 OK"
        assert headers["Content-Type"] == "image/png"
        assert headers["Content-Length"] == str(len(LOGO_PNG))
        assert body == LOGO_PNG

    def test_favicon(self, test_server: TestServer):
        _, headers, body = split_response(test_server.get("/favicon.ico"))

        assert headers["Content-Type"] == "image/vnd.microsoft.icon"
        assert body == FAVICON_ICO

    def test_any_method_is_served(self, test_server: TestServer):
        data = test_server.request(b"POST /home HTTP/1.1\r\n\r\n")
        assert data.endswith(HOME_HTML)


class TestErrors:
    """Requests that end in an error status."""

    @pytest.mark.parametrize("path", ["/missing", "/missing.css", "/missing.png", "/missing.ico"])
    def test_missing_gets_404_page(self, test_server: TestServer, path: str):
        status, headers, body = split_response(test_server.get(path))

        assert status == "HTTP/1.1 404 NOT FOUND"
        assert headers["Content-Type"] == "text/html"
        assert body == NOT_FOUND_HTML

    def test_name_too_long_is_404(self, test_server: TestServer):
        """Overlong names are a client mistake, not a 500."""
        status, _, body = split_response(test_server.get("/" + "a" * 300 + ".css"))

        assert status == "HTTP/1.1 404 NOT FOUND"
        assert body == NOT_FOUND_HTML

    def test_bare_404_without_page(self, bare_server: TestServer):
        assert bare_server.get("/missing") == b"HTTP/1.1 404 NOT FOUND\r\n\r\n"

    def test_one_field_request_line(self, test_server: TestServer):
        assert test_server.request(b"GET\r\n\r\n") == b"HTTP/1.1 400 BAD REQUEST\r\n\r\n"

    def test_client_closes_without_request(self, test_server: TestServer):
        with socket.create_connection(("127.0.0.1", test_server.port), timeout=5) as s:
            s.shutdown(socket.SHUT_WR)
            assert s.recv(1024) == b"HTTP/1.1 400 BAD REQUEST\r\n\r\n"

    def test_path_traversal_refused(self, test_server: TestServer):
        status, _, body = split_response(test_server.get("/../secret.css"))

        assert status == "HTTP/1.1 404 NOT FOUND"
        assert b"secret" not in body


class TestConcurrency:
    """Many clients, a fixed pool of nine workers."""

    def test_twenty_simultaneous_clients(self, test_server: TestServer):
        results = [None] * 20

        def client(i):
            results[i] = test_server.get("/about")

        threads = [threading.Thread(target=client, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)

        expected = test_server.get("/about")
        assert all(r == expected for r in results)
        assert test_server.server.thread_pool.stats["workers"]["total"] == 9

    def test_idle_clients_do_not_block_others(self, test_server: TestServer):
        """Three silent connections hold three workers; the rest still serve."""
        idle = [
            socket.create_connection(("127.0.0.1", test_server.port), timeout=5)
            for _ in range(3)
        ]
        try:
            assert test_server.get("/home").endswith(HOME_HTML)
        finally:
            for s in idle:
                s.close()


class TestLifecycle:
    """Startup failures and stopping."""

    def test_missing_content_root(self, tmp_path: Path):
        server = SiteServer(ServerConfig(port=0, content_root=str(tmp_path / "nope")))

        with pytest.raises(StartupError, match="Unable to find the website"):
            server.run(console=False)

    def test_port_in_use(self, site_dir: Path):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
            taken.bind(("127.0.0.1", 0))
            taken.listen(1)
            port = taken.getsockname()[1]

            server = SiteServer(ServerConfig(port=port, content_root=str(site_dir)))
            with pytest.raises(StartupError, match="Unable to bind"):
                server.run(console=False)

    def test_invalid_config(self, site_dir: Path):
        with pytest.raises(ValueError):
            SiteServer(ServerConfig(workers=0, content_root=str(site_dir)))

    def test_stop(self, config: ServerConfig):
        test_srv = TestServer(SiteServer(config))
        test_srv.start()
        port = test_srv.port
        assert test_srv.server.is_running

        begin = time.time()
        test_srv.stop()

        assert time.time() - begin < 3.0
        assert not test_srv.server.is_running
        with pytest.raises(OSError):
            socket.create_connection(("127.0.0.1", port), timeout=1)
