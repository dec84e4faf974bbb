"""
Unit tests for the client connection wrapper.
"""

import socket
import threading

from webworker.core.connection import DRAIN_TIMEOUT, Connection, ConnectionState


class TestConnectionClose:
    """Tests for Connection.close()."""

    def test_close_is_idempotent(self):
        """Test closing twice leaves the connection closed."""
        server_sock, client_sock = socket.socketpair()
        try:
            conn = Connection(socket=server_sock)
            conn.close()
            conn.close()

            assert conn.state is ConnectionState.CLOSED
            assert conn.closed
        finally:
            client_sock.close()

    def test_response_flushed_before_close(self):
        """Test buffered response bytes reach the peer, followed by EOF."""
        server_sock, client_sock = socket.socketpair()
        client_sock.settimeout(5.0)
        try:
            conn = Connection(socket=server_sock)
            conn.wfile.write(b"HTTP/1.1 200 OK\r\n\r\n")
            conn.close()

            received = b""
            while True:
                chunk = client_sock.recv(1024)
                if not chunk:
                    break
                received += chunk

            assert received == b"HTTP/1.1 200 OK\r\n\r\n"
        finally:
            client_sock.close()

    def test_close_returns_while_peer_keeps_sending(self):
        """Test a peer that never stops sending cannot hold close() open."""
        server_sock, client_sock = socket.socketpair()
        conn = Connection(socket=server_sock)
        stop = threading.Event()
        done = threading.Event()

        def chatter():
            while not stop.is_set():
                try:
                    client_sock.sendall(b"0123456789")
                except OSError:
                    return
                stop.wait(0.1)

        def closer():
            conn.close()
            done.set()

        sender = threading.Thread(target=chatter, daemon=True)
        sender.start()
        try:
            threading.Thread(target=closer, daemon=True).start()

            assert done.wait(DRAIN_TIMEOUT + 2.5)
            assert conn.state is ConnectionState.CLOSED
        finally:
            stop.set()
            sender.join(timeout=2.0)
            client_sock.close()
