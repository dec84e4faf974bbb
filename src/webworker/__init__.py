"""
=============================================================================
WEBWORKER - One Request Per Connection HTTP File Server
=============================================================================

A deliberately small HTTP responder built on raw Python sockets. Each
accepted connection gets its own thread, which reads one request, serves
one file and closes.

=============================================================================
WHAT IT SERVES
=============================================================================

    GET /index.html HTTP/1.1   → 200, text/html, template-expanded lines
    GET /photo.gif HTTP/1.1    → 200, image/gif, raw file bytes
    GET /missing.png HTTP/1.1  → 404, fixed HTML "404 Not Found" page

HTML files may contain two template tags, expanded on every request:

    <cs371date>    current date and time
    <cs371server>  the server name

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    webworker/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m webworker)
    ├── server.py            # HTTPServer: accept loop + worker threads
    ├── worker.py            # WebWorker: per-connection pipeline
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── socket_server.py # TCP accept loop
    │   └── connection.py    # Connection wrapper (rfile/wfile/close)
    └── http/
        ├── request.py       # RequestReader, ParsedRequest
        ├── response.py      # HeaderWriter, Resource
        ├── body.py          # BodyWriter, template expansion
        ├── status_codes.py  # 200 / 404
        └── mime_types.py    # Content-Type inference

=============================================================================
QUICK START
=============================================================================

    from webworker import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(port=8080, document_root="./www"))
    server.run()

=============================================================================
WHAT IT DOES NOT DO
=============================================================================

Only GET-style retrieval. No keep-alive, request bodies, query strings,
caching, TLS, Content-Length, or path sanitization.

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig
from .worker import WebWorker

__all__ = ["HTTPServer", "ServerConfig", "WebWorker", "__version__"]
