"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps an accepted client socket as the duplex byte stream the worker
pipeline reads from and writes to.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

TCP does NOT preserve message boundaries. A request sent as

    GET /index.html HTTP/1.1\r\n
    Host: localhost\r\n
    \r\n

may arrive in any number of recv() chunks. The request reader works in
LINES, so the socket is wrapped in a buffered file object
(socket.makefile) whose readline() keeps calling recv() until it has a
whole line:

    ┌─────────────────────────────────────────────────────────────────┐
    │                                                                  │
    │   socket.recv()  →  "GET /ind"  ┐                               │
    │   socket.recv()  →  "ex.html H" ├──►  rfile.readline()          │
    │   socket.recv()  →  "TTP/1.1\r\n"┘     → b"GET /index.html ..." │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

Writes go through a buffered wfile and reach the socket on flush/close.

=============================================================================
ONE REQUEST, THEN CLOSE
=============================================================================

Every response carries "Connection: close" and no Content-Length. The
client learns the body is complete only when we close, so close() must
run exactly once, after the last byte:

    NEW ──────► READING ──────► WRITING ──────► CLOSING ──────► CLOSED
     │             │                                ▲
     └─────────────┴──── (any failure) ─────────────┘

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional
import uuid


logger = logging.getLogger(__name__)

# Upper bound on discarding client bytes after the response is sent
DRAIN_TIMEOUT = 0.5


class ConnectionState(Enum):
    """Connection lifecycle states, used for logging and close()."""
    NEW = "new"              # Just accepted
    READING = "reading"      # Request lines being read
    WRITING = "writing"      # Response being written
    CLOSING = "closing"      # Shutdown sequence running
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents one client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
        timeout: Socket timeout in seconds; None blocks forever.
    """

    socket: socket.socket
    address: tuple = ("", 0)

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    timeout: Optional[float] = None

    _rfile: Optional[BinaryIO] = field(default=None, repr=False)
    _wfile: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # settimeout(None) puts the socket in plain blocking mode
        self.socket.settimeout(self.timeout)

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # STREAMS
    # =========================================================================

    @property
    def rfile(self) -> BinaryIO:
        """
        Buffered binary reader over the socket.

        Reading moves the connection to READING.
        """
        if self._rfile is None:
            self._rfile = self.socket.makefile("rb")
        self.state = ConnectionState.READING
        return self._rfile

    @property
    def wfile(self) -> BinaryIO:
        """
        Buffered binary writer over the socket.

        Writing moves the connection to WRITING. Data is only guaranteed
        to reach the socket after flush() or close().
        """
        if self._wfile is None:
            self._wfile = self.socket.makefile("wb")
        self.state = ConnectionState.WRITING
        return self._wfile

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Safe to call more than once.

        ┌─────────────────────────────────────────────────────────────────┐
        │                    Close Sequence                                │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │   1. flush wfile          push buffered response bytes          │
        │   2. close rfile/wfile    release makefile() references         │
        │   3. shutdown(SHUT_WR)    send FIN: "response is complete"      │
        │   4. drain                discard input, at most 0.5s           │
        │   5. close()              release the file descriptor           │
        │                                                                  │
        └─────────────────────────────────────────────────────────────────┘
        """
        if self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return

        self.state = ConnectionState.CLOSING

        for stream in (self._wfile, self._rfile):
            if stream is None:
                continue
            try:
                stream.close()  # flushes wfile first
            except OSError as e:
                # Peer is gone; nothing left to deliver
                logger.debug(f"[{self.id}] Stream close failed: {e}")

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        # A peer that keeps sending cannot hold close() past the deadline
        deadline = time.monotonic() + DRAIN_TIMEOUT
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                if not self.socket.recv(1024):
                    break
        except OSError:
            pass  # socket.timeout is an OSError

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows:

            with conn:
                ...
            # conn closed here, even if the block raised
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
