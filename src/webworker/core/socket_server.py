"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

Listens for incoming connections and hands each accepted client socket,
wrapped in a Connection, to a callback. It knows nothing about HTTP.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a TCP socket
    2. bind()      Associate it with host:port
    3. listen()    Start queueing incoming connections (backlog)
    4. accept()    Wait for a client; returns a NEW socket for it
    5. close()     Release the listening socket on shutdown

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    └───────────┬───────────┘     Never sends/receives data
                                │
        ┌───────────────────────┼───────────────────────┐
        ▼                       ▼                       ▼
    ┌───────────┐         ┌───────────┐         ┌───────────┐
    │ Client 1  │         │ Client 2  │         │ Client 3  │
    └───────────┘         └───────────┘         └───────────┘
    Each accept() creates a new socket for that specific client

=============================================================================
SHUTDOWN
=============================================================================

accept() is given a 1 second timeout so the loop can notice shutdown()
without needing a connection to arrive. SIGINT (Ctrl+C) and SIGTERM
trigger shutdown() when the server runs on the main thread; signal
handlers cannot be installed from any other thread.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Low-level TCP socket server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    start(callback)                                                   │
    │        ├──► _create_socket()   socket() + setsockopt()               │
    │        ├──► bind() / listen()                                        │
    │        ├──► _setup_signals()   main thread only                      │
    │        └──► _accept_loop()     blocks here                           │
    │                 └──► accept() → Connection() → callback(conn)        │
    │                                                                      │
    │    shutdown()        _running = False; loop exits in <= 1s           │
    │    _cleanup()        restore signals, close listening socket         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Usage:
        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration (host, port, backlog, timeout).
        """
        self.config = config

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._bound_address: Optional[Tuple[str, int]] = None

        # Set once the socket is listening
        self._ready_event = threading.Event()

        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        """Check if server is running."""
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        Get the server's address (IP, port).

        After bind this is the real address, so port=0 reports the port
        the OS picked.
        """
        if self._bound_address is not None:
            return self._bound_address
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Avoid "Address already in use" while old sockets sit in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Small header writes should leave immediately
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        # Lets the accept loop check _running once a second
        sock.settimeout(1.0)

        return sock

    def _setup_signals(self):
        """Install SIGTERM/SIGINT handlers that trigger shutdown()."""
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on main thread, skipping signal handlers")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Start accepting connections. Blocks until shutdown() is called.

        Args:
            connection_handler: Called with each accepted Connection. It
                                must return quickly; the HTTP server hands
                                the connection to a new thread.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self._setup_signals()
        self._ready_event.set()

        host, port = self.address
        logger.info(f"Server listening on {host}:{port}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Accept connections until shutdown.

        No admission limit: every accepted client is handed on.
        """
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue  # Check _running again
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                timeout=self.config.timeout,
            )
            connection_handler(conn)

    def shutdown(self):
        """
        Initiate shutdown. Safe to call multiple times and from any thread.
        """
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Clean up resources on shutdown."""
        self._restore_signals()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None

        self._running = False
        self._ready_event.clear()
        logger.info("Socket server stopped")

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the server to start listening.

        Returns:
            True once listening, False on timeout.
        """
        return self._ready_event.wait(timeout)
