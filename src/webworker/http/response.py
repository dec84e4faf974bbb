"""
=============================================================================
HEADER WRITER
=============================================================================

Resolves the requested file and writes the status line and header block.

=============================================================================
HEADER BLOCK FORMAT
=============================================================================

Both statuses write the same fields in the same order; only the status
line differs:

    HTTP/1.1 200 OK\r\n                     ← or: HTTP/1.1 404 Not Found
    Date: Mon, 19 Oct 2026 09:34:00 GMT\r\n
    Server: WebWorker/1.0\r\n
    Connection: close\r\n                   ← one request per connection
    Content-Type: text/html\r\n             ← inferred from the file name
    \r\n                                    ← end of headers

There is deliberately NO Content-Length. The body ends when the server
closes the connection, which is why "Connection: close" is always sent.

=============================================================================
THE 404 CONTENT-TYPE MISMATCH
=============================================================================

The Content-Type comes from the file name, not from what is actually
sent. For a missing image:

    GET /missing.png HTTP/1.1
        → HTTP/1.1 404 Not Found
          Content-Type: image/png          ← declared
          <html>...404 Not Found...</html> ← sent

This is the default behavior. HeaderWriter(strict_content_type=True)
declares text/html on 404 responses instead.

=============================================================================
RESOURCE RESOLUTION
=============================================================================

The header stage is where the file is looked up, ONCE. The resulting
Resource record (exists + size) is handed to the body stage unchanged,
so the status line and the body variant can never disagree:

    ParsedRequest ──► HeaderWriter.write() ──► Resource ──► BodyWriter.write()
                           │
                           └── stat() happens here, and only here

=============================================================================
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Optional

from .mime_types import ContentType
from .request import ParsedRequest
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


HTTP_VERSION = "HTTP/1.1"
CRLF = "\r\n"


@dataclass(frozen=True)
class Resource:
    """
    A requested file, looked up once.

    Attributes:
        name: The extracted file name (None if none was parsed).
        path: Where the name resolves to, or None.
        exists: Whether path is an existing regular file.
        size: File size in bytes (0 when absent).
    """

    name: Optional[str]
    path: Optional[Path]
    exists: bool
    size: int = 0

    @property
    def status(self) -> HTTPStatus:
        return HTTPStatus.for_existence(self.exists)

    @classmethod
    def resolve(cls, name: Optional[str], document_root: str | Path = ".") -> "Resource":
        """
        Join a file name onto the document root and check it exists.

        The name is used exactly as extracted: no sanitization, no
        canonicalization. Directories do not count as existing.

        Args:
            name: Extracted file name, or None.
            document_root: Directory names are resolved against.

        Returns:
            A Resource carrying the existence flag and size.
        """
        if name is None:
            return cls(name=None, path=None, exists=False)

        path = Path(document_root) / name
        try:
            if path.is_file():
                return cls(name=name, path=path, exists=True, size=path.stat().st_size)
        except OSError as e:
            # e.g. name too long for the filesystem
            logger.debug(f"Cannot stat {path}: {e}")

        return cls(name=name, path=path, exists=False)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date.

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Mon, 19 Oct 2026 09:34:00 GMT

    Built from fixed English names, so the result does not depend on the
    process locale.

    Args:
        dt: Datetime to format. Aware datetimes are converted to UTC;
            naive ones are assumed to be UTC already.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


class HeaderWriter:
    """
    Writes the status line and header block for one response.

    Usage:
        writer = HeaderWriter(server_name="WebWorker/1.0", document_root="./www")
        resource = writer.write(conn.wfile, request)
        # resource.exists decides the body variant
    """

    def __init__(
        self,
        server_name: str = "WebWorker/1.0",
        document_root: str | Path = ".",
        strict_content_type: bool = False,
    ):
        """
        Args:
            server_name: Value of the Server header.
            document_root: Directory file names are resolved against.
            strict_content_type: Declare text/html on 404 instead of the
                                 inferred type.
        """
        self.server_name = server_name
        self.document_root = document_root
        self.strict_content_type = strict_content_type

    def write(self, stream: BinaryIO, request: ParsedRequest) -> Resource:
        """
        Resolve the requested file, then write the header block.

        Args:
            stream: Writable binary stream (the connection).
            request: Output of the request reader.

        Returns:
            The Resource looked up for this request.

        Raises:
            OSError: If writing to the connection fails.
        """
        resource = Resource.resolve(request.resource_name, self.document_root)
        stream.write(self.build(resource, request.content_type))
        logger.info(f"{resource.status.value} {resource.status.phrase}: {resource.name}")
        return resource

    def build(self, resource: Resource, content_type: ContentType) -> bytes:
        """
        Build the header block bytes for a resolved resource.

        Args:
            resource: The looked-up file.
            content_type: The hint inferred from the file name.

        Returns:
            Status line + headers + blank line, CRLF-terminated.
        """
        status = resource.status

        if not resource.exists and self.strict_content_type:
            content_type = ContentType.HTML

        lines = [
            f"{HTTP_VERSION} {status.value} {status.phrase}",
            f"Date: {format_http_date(datetime.now(timezone.utc))}",
            f"Server: {self.server_name}",
            "Connection: close",
            f"Content-Type: {content_type.value}",
            "",  # Empty line ends the header block
        ]
        return (CRLF.join(lines) + CRLF).encode("utf-8")
