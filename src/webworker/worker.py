"""
=============================================================================
WEB WORKER
=============================================================================

Handles exactly one client connection: read the request, write the
header, write the body, close.

=============================================================================
PER-CONNECTION PIPELINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   with conn:                                                         │
    │       │                                                              │
    │       ├──► RequestReader.read()      → ParsedRequest                 │
    │       │        (never raises)                                        │
    │       │                                                              │
    │       ├──► HeaderWriter.write()      → Resource                      │
    │       │                                                              │
    │       ├──► BodyWriter.write()                                        │
    │       │                                                              │
    │       └──► flush                                                     │
    │                                                                      │
    │   (connection closed here, whatever happened above)                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILURES
=============================================================================

Request-reading faults are absorbed inside RequestReader and turn into
"proceed with what was parsed". Anything raised while writing (file read
error, client hung up) is caught once, here, and logged. There is no
retry and no attempt to repair a half-written response; the client sees
a truncated body followed by the close.

=============================================================================
"""

import logging

from .config import ServerConfig
from .core.connection import Connection
from .http.request import RequestReader
from .http.response import HeaderWriter
from .http.body import BodyWriter


logger = logging.getLogger(__name__)


class WebWorker:
    """
    Serves one request on one connection.

    A worker is used once: create it with the accepted connection, call
    run(), drop it.

    Usage:
        threading.Thread(target=WebWorker(conn, config).run).start()
    """

    def __init__(self, conn: Connection, config: ServerConfig):
        self.conn = conn
        self.config = config

        self._reader = RequestReader(conn.rfile, encoding=config.encoding)
        self._header_writer = HeaderWriter(
            server_name=config.server_name,
            document_root=config.document_root,
            strict_content_type=config.strict_content_type,
        )
        self._body_writer = BodyWriter(
            server_name=config.server_name,
            encoding=config.encoding,
        )

    def run(self):
        """
        Worker thread entry point.

        Never raises: write failures are logged and the connection is
        closed regardless.
        """
        logger.info(f"[{self.conn.id}] Handling connection...")

        with self.conn:
            try:
                request = self._reader.read()

                stream = self.conn.wfile
                resource = self._header_writer.write(stream, request)
                self._body_writer.write(stream, request, resource)
                stream.flush()

            except Exception as e:
                logger.error(f"[{self.conn.id}] Output error: {e}")

        logger.info(f"[{self.conn.id}] Done handling connection.")
