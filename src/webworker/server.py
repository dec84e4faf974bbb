"""
=============================================================================
MAIN HTTP SERVER
=============================================================================

Ties the accept loop to the per-connection worker.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │                                 ▼                                    │
    │                        ┌─────────────────┐                          │
    │                        │  SocketServer   │   accept loop            │
    │                        └────────┬────────┘                          │
    │                                 │ one Connection per client          │
    │              ┌──────────────────┼──────────────────┐                │
    │              ▼                  ▼                  ▼                │
    │      ┌──────────────┐   ┌──────────────┐   ┌──────────────┐        │
    │      │  WebWorker   │   │  WebWorker   │   │  WebWorker   │        │
    │      │  (thread)    │   │  (thread)    │   │  (thread)    │        │
    │      └──────────────┘   └──────────────┘   └──────────────┘        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. SocketServer accepts a TCP connection
    2. HTTPServer starts a daemon thread with a fresh WebWorker
    3. The worker reads the request, writes header and body
    4. The worker closes the connection; the thread ends

Threads are never pooled or reused, and nothing limits how many run at
once. Workers share no mutable state.

=============================================================================
"""

import logging
import threading
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection
from .worker import WebWorker


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Thread-per-connection web server.

    Usage:
        server = HTTPServer(ServerConfig(port=8080, document_root="./www"))
        server.run()  # Blocks until Ctrl+C
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)

    @property
    def address(self):
        """The (host, port) being served; the real port once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def run(self):
        """
        Start the server (blocking).

        Returns after shutdown() is called or SIGINT/SIGTERM is received.

        Raises:
            OSError: If the listening socket cannot be bound.
        """
        self._setup_logging()
        logger.info(
            f"Starting {self.config.server_name} on {self.config.host}:{self.config.port}, "
            f"serving {self.config.document_root}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. Workers already running finish on their own."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is bound (for tests and embedding)."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("webworker").setLevel(level)

    def _handle_connection(self, conn: Connection):
        """
        Start a worker thread for an accepted connection.

        Called on the accept loop's thread, so it only spawns and returns.
        """
        worker = WebWorker(conn, self.config)
        thread = threading.Thread(
            target=worker.run,
            name=f"webworker-{conn.id}",
            daemon=True,
        )
        thread.start()

