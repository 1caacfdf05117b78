"""
Unit tests for HTTP response encoding.
"""

from sitehttpd.http.response import HTTPResponse
from sitehttpd.http.status_codes import HTTPStatus


class RecordingWriter:
    """Collects every send() call."""

    def __init__(self, fail_after: int = -1):
        self.writes = []
        self.fail_after = fail_after

    def send(self, data: bytes) -> bool:
        if len(self.writes) == self.fail_after:
            return False
        self.writes.append(data)
        return True


class TestHTTPStatus:
    """Tests for status codes and reason phrases."""

    def test_phrases(self):
        """The exact phrases written on the wire."""
        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.BAD_REQUEST.phrase == "BAD REQUEST"
        assert HTTPStatus.NOT_FOUND.phrase == "NOT FOUND"
        assert HTTPStatus.INTERNAL_SERVER_ERROR.phrase == "Internal Server Error"

    def test_is_error(self):
        assert not HTTPStatus.OK.is_error
        assert HTTPStatus.NOT_FOUND.is_error
        assert HTTPStatus.INTERNAL_SERVER_ERROR.is_error


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_html_response_bytes(self):
        """The documented 11-byte home page response, byte for byte."""
        response = HTTPResponse.with_payload("text/html", b"<h1>Hi</h1>")

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/html\r\n"
            b"Content-Length: 11\r\n"
            b"\r\n"
            b"<h1>Hi</h1>"
        )

    def test_content_length_counts_bytes(self):
        """Multi-byte UTF-8 characters count as several bytes."""
        payload = "é☕".encode("utf-8")
        response = HTTPResponse.with_payload("text/html", payload)

        assert response.headers["Content-Length"] == "5"

    def test_header_order(self):
        """Content-Type is written before Content-Length."""
        response = HTTPResponse.with_payload("text/css", b"a{}")
        head = response.head_bytes().decode()

        assert head.index("Content-Type") < head.index("Content-Length")

    def test_bare_status_response(self):
        """No headers and no body: status line plus the empty line."""
        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)

        assert response.to_bytes() == b"HTTP/1.1 404 NOT FOUND\r\n\r\n"

    def test_status_line(self):
        response = HTTPResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR)
        assert response.status_line == "HTTP/1.1 500 Internal Server Error"

    def test_empty_payload(self):
        """A zero-byte file still gets both headers."""
        response = HTTPResponse.with_payload("text/css", b"")

        assert response.to_bytes() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/css\r\n"
            b"Content-Length: 0\r\n"
            b"\r\n"
        )


class TestWriteTo:
    """Tests for the text and binary write sequences."""

    def test_text_is_one_write(self):
        response = HTTPResponse.with_payload("text/html", b"<p>x</p>")
        writer = RecordingWriter()

        assert response.write_to(writer) is True
        assert writer.writes == [response.to_bytes()]

    def test_binary_is_two_writes(self):
        """Head first, then the untouched image bytes."""
        payload = b"\x89PNG\xff\xfe\x00"
        response = HTTPResponse.with_payload("image/png", payload, binary=True)
        writer = RecordingWriter()

        assert response.write_to(writer) is True
        assert writer.writes == [response.head_bytes(), payload]
        assert writer.writes[0].endswith(b"Content-Length: 7\r\n\r\n")

    def test_binary_stops_after_failed_head(self):
        """The body is not attempted once the head write failed."""
        response = HTTPResponse.with_payload("image/png", b"\x89PNG", binary=True)
        writer = RecordingWriter(fail_after=0)

        assert response.write_to(writer) is False
        assert writer.writes == []
