"""
pytest configuration and fixtures.
"""

import logging
import socket
import threading
from dataclasses import dataclass, field
from typing import Callable, Generator, List, Optional, Tuple
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webworker import HTTPServer, ServerConfig, WebWorker
from webworker.core.connection import Connection


INDEX_HTML = (
    "<html>\n"
    "<body>\n"
    "<p>Built on <cs371date> by <cs371server></p>\n"
    "</body>\n"
    "</html>\n"
)

PLAIN_HTML = "line one\nline two\nline three\n"

GIF_BYTES = b"GIF89a" + bytes(range(256)) + b"\x00\r\n\x3b"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(reversed(range(256))) * 3
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00\x10JFIF\n\n" * 50 + b"\xff\xd9"


def make_request(path: str, version: str = "HTTP/1.1") -> bytes:
    """Build a typical browser-style request for a path."""
    return (
        f"GET {path} {version}\r\n"
        "Host: localhost:8080\r\n"
        "User-Agent: pytest\r\n"
        "Accept: */*\r\n"
        "\r\n"
    ).encode()


@dataclass
class RawResponse:
    """A response split into status line, ordered headers and body."""

    status_line: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    @classmethod
    def parse(cls, data: bytes) -> "RawResponse":
        head, sep, body = data.partition(b"\r\n\r\n")
        assert sep, f"No end of headers in response: {data!r}"

        lines = head.decode("utf-8").split("\r\n")
        headers = []
        for line in lines[1:]:
            name, _, value = line.partition(": ")
            headers.append((name, value))
        return cls(status_line=lines[0], headers=headers, body=body)

    @property
    def header_names(self) -> List[str]:
        return [name for name, _ in self.headers]

    def header(self, name: str) -> Optional[str]:
        for header_name, value in self.headers:
            if header_name.lower() == name.lower():
                return value
        return None


def read_until_closed(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Document root with one file of each kind."""
    (tmp_path / "index.html").write_text(INDEX_HTML)
    (tmp_path / "plain.html").write_text(PLAIN_HTML)
    (tmp_path / "photo.gif").write_bytes(GIF_BYTES)
    (tmp_path / "logo.png").write_bytes(PNG_BYTES)
    (tmp_path / "pic.jpeg").write_bytes(JPEG_BYTES)
    (tmp_path / "docs").mkdir()
    return tmp_path


@pytest.fixture
def config(site_root: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        document_root=str(site_root),
        timeout=5.0,
        log_level="DEBUG",
    )


@pytest.fixture
def serve(config: ServerConfig) -> Callable[..., bytes]:
    """
    Run one WebWorker over a socketpair and return the raw response bytes.

    The client half-closes after sending, so a request without a blank
    line ends in end-of-stream instead of blocking the worker.
    """
    def _serve(raw_request: bytes, cfg: Optional[ServerConfig] = None) -> bytes:
        server_sock, client_sock = socket.socketpair()
        conn = Connection(socket=server_sock, address=("127.0.0.1", 50000), timeout=5.0)
        worker = WebWorker(conn, cfg or config)

        thread = threading.Thread(target=worker.run, daemon=True)
        thread.start()

        try:
            client_sock.settimeout(5.0)
            client_sock.sendall(raw_request)
            client_sock.shutdown(socket.SHUT_WR)
            data = read_until_closed(client_sock)
        finally:
            client_sock.close()

        thread.join(timeout=5.0)
        assert not thread.is_alive(), "worker did not finish"
        assert conn.closed
        return data

    return _serve


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def live_server(site_root: Path, free_port: int) -> Generator[HTTPServer, None, None]:
    """A real HTTPServer running in a background thread."""
    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        document_root=str(site_root),
        timeout=5.0,
        log_level="WARNING",
    ))

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    if not server.wait_until_ready(5.0):
        raise RuntimeError("Server failed to start")

    yield server

    server.shutdown()
    thread.join(timeout=5.0)

    # run() set the package logger level; don't leak it into other tests
    logging.getLogger("webworker").setLevel(logging.NOTSET)
