"""
Unit tests for request reading.
"""

import dataclasses
import io
import logging

import pytest

from webworker.http.mime_types import ContentType
from webworker.http.request import (
    MAX_LINE_LENGTH,
    ParsedRequest,
    RequestLineError,
    RequestReader,
    extract_resource_name,
)


class TestExtractResourceName:
    """Tests for the position-based file name extraction."""

    @pytest.mark.parametrize("name", [
        "index.html",
        "photo.gif",
        "my-page_2.HTML",
        "a.png.gif",
    ])
    def test_name_round_trips(self, name):
        """Test GET /<name> HTTP/1.1 yields <name> exactly."""
        assert extract_resource_name(f"GET /{name} HTTP/1.1") == name

    def test_http_1_0(self):
        """Test the version number does not matter."""
        assert extract_resource_name("GET /index.html HTTP/1.0") == "index.html"

    def test_only_last_segment_kept(self):
        """Test that directories in the path are dropped."""
        assert extract_resource_name("GET /docs/img/logo.png HTTP/1.1") == "logo.png"

    def test_root_path_is_empty(self):
        """Test that / extracts an empty name."""
        assert extract_resource_name("GET / HTTP/1.1") == ""

    def test_missing_leading_slash(self):
        """Test the quirk when the path has no leading slash."""
        assert extract_resource_name("GET index.html HTTP/1.1") == "GET index.html"

    def test_no_http_token_raises(self):
        """Test that a line without HTTP/x.y cannot be cut."""
        with pytest.raises(RequestLineError):
            extract_resource_name("GET /index.html")

    def test_no_slash_raises(self):
        """Test that a line without any '/' cannot be cut."""
        with pytest.raises(RequestLineError):
            extract_resource_name("GET index.html")

    def test_error_is_value_error(self):
        """Test the exception hierarchy."""
        assert issubclass(RequestLineError, ValueError)


class TestRequestReader:
    """Tests for RequestReader.read()."""

    def test_read_simple_request(self):
        """Test a typical request."""
        stream = io.BytesIO(
            b"GET /index.html HTTP/1.1\r\n"
            b"Host: localhost\r\n"
            b"\r\n"
        )
        request = RequestReader(stream).read()

        assert request.resource_name == "index.html"
        assert request.content_type is ContentType.HTML
        assert request.is_resolved

    def test_image_request(self):
        """Test the content type follows the file name."""
        stream = io.BytesIO(b"GET /logo.PNG HTTP/1.1\r\n\r\n")
        request = RequestReader(stream).read()

        assert request.resource_name == "logo.PNG"
        assert request.content_type is ContentType.PNG

    def test_bare_newlines(self):
        """Test LF-only line endings."""
        stream = io.BytesIO(b"GET /photo.gif HTTP/1.1\nHost: x\n\n")
        request = RequestReader(stream).read()

        assert request.resource_name == "photo.gif"
        assert request.content_type is ContentType.GIF

    def test_stops_at_blank_line(self):
        """Test that nothing after the blank line is consumed."""
        stream = io.BytesIO(b"GET /a.html HTTP/1.1\r\n\r\nBODY BYTES")
        RequestReader(stream).read()

        assert stream.read() == b"BODY BYTES"

    def test_no_retrieval_line(self):
        """Test a request with no GET line."""
        stream = io.BytesIO(b"POST /form HTTP/1.1\r\nHost: x\r\n\r\n")
        request = RequestReader(stream).read()

        assert request.resource_name is None
        assert request.content_type is ContentType.HTML
        assert not request.is_resolved

    def test_later_get_line_wins(self):
        """Test that any later line containing GET re-parses the name."""
        stream = io.BytesIO(
            b"GET /a.png HTTP/1.1\r\n"
            b"X-Replay: GET /b.gif HTTP/1.1\r\n"
            b"\r\n"
        )
        request = RequestReader(stream).read()

        assert request.resource_name == "b.gif"
        assert request.content_type is ContentType.GIF

    def test_non_get_line_keeps_type(self):
        """Test that ordinary headers do not change the inferred type."""
        stream = io.BytesIO(
            b"GET /a.png HTTP/1.1\r\n"
            b"Referer: http://example.com/page.gif\r\n"
            b"\r\n"
        )
        request = RequestReader(stream).read()

        assert request.resource_name == "a.png"
        assert request.content_type is ContentType.PNG

    def test_malformed_line_stops_reading(self, caplog):
        """Test that an extraction failure ends the loop, keeping prior state."""
        stream = io.BytesIO(
            b"GET /a.png HTTP/1.1\r\n"
            b"X-Note: GET it\r\n"
            b"Host: x\r\n"
            b"\r\n"
        )
        with caplog.at_level(logging.WARNING):
            request = RequestReader(stream).read()

        assert request.resource_name == "a.png"
        assert request.content_type is ContentType.PNG
        assert "Request error" in caplog.text
        assert stream.read() == b"Host: x\r\n\r\n"

    def test_malformed_first_line(self):
        """Test that a broken retrieval line leaves the name unresolved."""
        stream = io.BytesIO(b"GET /index.html\r\nHost: x\r\n\r\n")
        request = RequestReader(stream).read()

        assert request.resource_name is None
        assert request.content_type is ContentType.HTML

    def test_end_of_stream_without_blank_line(self):
        """Test that a closed stream ends reading normally."""
        stream = io.BytesIO(b"GET /pic.jpeg HTTP/1.1\r\nHost: x\r\n")
        request = RequestReader(stream).read()

        assert request.resource_name == "pic.jpeg"
        assert request.content_type is ContentType.JPEG

    def test_empty_stream(self):
        """Test a client that sends nothing."""
        request = RequestReader(io.BytesIO(b"")).read()
        assert request == ParsedRequest()

    def test_io_error_is_absorbed(self, caplog):
        """Test that a failing stream is logged, not raised."""
        class BrokenStream:
            def readline(self, limit=-1):
                raise ConnectionResetError("peer reset")

        with caplog.at_level(logging.WARNING):
            request = RequestReader(BrokenStream()).read()

        assert request.resource_name is None
        assert "peer reset" in caplog.text

    def test_overlong_line(self):
        """Test that a huge line ends reading."""
        stream = io.BytesIO(b"GET /" + b"a" * MAX_LINE_LENGTH + b" HTTP/1.1\r\n\r\n")
        request = RequestReader(stream).read()

        assert request.resource_name is None

    def test_undecodable_bytes_replaced(self):
        """Test that invalid UTF-8 does not abort reading."""
        stream = io.BytesIO(b"GET /caf\xe9.html HTTP/1.1\r\n\r\n")
        request = RequestReader(stream).read()

        assert request.resource_name == "caf\ufffd.html"

    def test_request_lines_logged(self, caplog):
        """Test that every line is logged at DEBUG."""
        stream = io.BytesIO(b"GET /a.html HTTP/1.1\r\nHost: x\r\n\r\n")
        with caplog.at_level(logging.DEBUG, logger="webworker"):
            RequestReader(stream).read()

        assert "Request line: (GET /a.html HTTP/1.1)" in caplog.text
        assert "Request line: (Host: x)" in caplog.text


class TestParsedRequest:
    """Tests for the ParsedRequest record."""

    def test_defaults(self):
        """Test the unresolved default."""
        request = ParsedRequest()
        assert request.resource_name is None
        assert request.content_type is ContentType.HTML

    def test_immutable(self):
        """Test that the record cannot be changed after reading."""
        request = ParsedRequest("a.html", ContentType.HTML)
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.resource_name = "b.html"
