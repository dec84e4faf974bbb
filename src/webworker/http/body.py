"""
=============================================================================
BODY WRITER
=============================================================================

Writes the response body. Exactly one of three variants is sent:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      BODY VARIANT SELECTION                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   resource.exists?                                                   │
    │        │                                                             │
    │        ├── no  ──────────────────────────► 3. NOT-FOUND PAGE        │
    │        │                                     (hint ignored)          │
    │        │                                                             │
    │        └── yes ── content type?                                      │
    │                      │                                               │
    │                      ├── text/html ───────► 1. TEMPLATE BODY        │
    │                      │                                               │
    │                      └── image/* ─────────► 2. BINARY BODY          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
1. TEMPLATE BODY
=============================================================================

The file is read line by line as text. Two tags are expanded, each on its
own, every occurrence:

    <cs371date>    → current date/time, e.g. "Mon Oct 19 09:34:00 UTC 2026"
    <cs371server>  → the configured server name

Every line, tagged or not, is written followed by "<br>". Line
terminators are dropped, so the page arrives as one long line:

    file:   Hello\n                 wire:  Hello<br>Built on Mon Oct ...<br>
            Built on <cs371date>\n

=============================================================================
2. BINARY BODY
=============================================================================

The whole file is read into memory in one read sized by the Resource
record and written verbatim. No chunking.

=============================================================================
3. NOT-FOUND PAGE
=============================================================================

A fixed minimal HTML document. It is sent even when the header declared
an image type (see response.py for the strict_content_type switch).

=============================================================================
"""

import logging
from datetime import datetime
from typing import BinaryIO, Callable, Optional

from .request import ParsedRequest
from .response import Resource


logger = logging.getLogger(__name__)


DATE_TAG = "<cs371date>"
SERVER_TAG = "<cs371server>"
LINE_BREAK = "<br>"

NOT_FOUND_PAGE = (
    b"<html><head></head><body>\n"
    b"<h3>404 Not Found</h3>\n"
    b"</body></html>\n"
)


def format_default_date(dt: Optional[datetime] = None) -> str:
    """
    Format a datetime in the default textual form used for <cs371date>.

    Format: Day Mon DD HH:MM:SS ZONE YYYY
    Example: Mon Oct 19 09:34:00 UTC 2026

    Args:
        dt: Datetime to format (default: now). Naive datetimes are taken
            as local time.
    """
    if dt is None:
        dt = datetime.now()
    if dt.tzinfo is None:
        dt = dt.astimezone()

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]} {months[dt.month - 1]} {dt.day:02d} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} "
        f"{dt.tzname()} {dt.year}"
    )


def expand_placeholders(line: str, date_text: str, server_text: str) -> str:
    """
    Replace the template tags in one line of text.

    Each tag is checked and replaced on its own, date first, so a line
    holding both is rewritten twice.

    Args:
        line: One line of the template file.
        date_text: Replacement for <cs371date>.
        server_text: Replacement for <cs371server>.

    Returns:
        The line with every tag occurrence replaced.

    Example:
        >>> expand_placeholders("by <cs371server>", "today", "WebWorker/1.0")
        'by WebWorker/1.0'
    """
    if DATE_TAG in line:
        line = line.replace(DATE_TAG, date_text)
    if SERVER_TAG in line:
        line = line.replace(SERVER_TAG, server_text)
    return line


class BodyWriter:
    """
    Writes one of the three body variants for a resolved resource.

    Usage:
        BodyWriter(server_name="WebWorker/1.0").write(conn.wfile, request, resource)
    """

    def __init__(
        self,
        server_name: str = "WebWorker/1.0",
        encoding: str = "utf-8",
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            server_name: Replacement text for <cs371server>.
            encoding: Encoding of template files and of the text written.
            clock: Source of the time used for <cs371date>.
        """
        self.server_name = server_name
        self.encoding = encoding
        self._clock = clock

    def write(self, stream: BinaryIO, request: ParsedRequest, resource: Resource) -> None:
        """
        Write the body selected by existence and content type.

        Args:
            stream: Writable binary stream (the connection).
            request: Carries the content-type hint.
            resource: The record produced by the header stage. Not
                      re-checked here.

        Raises:
            OSError: If the file cannot be read or the connection fails.
                     Whatever was already written stays written.
        """
        if not resource.exists:
            stream.write(NOT_FOUND_PAGE)
        elif request.content_type.is_image:
            self._write_binary(stream, resource)
        else:
            self._write_template(stream, resource)

    def _write_template(self, stream: BinaryIO, resource: Resource) -> None:
        lines = 0
        with open(resource.path, "r", encoding=self.encoding, errors="surrogateescape") as f:
            for line in f:
                if line.endswith("\n"):
                    line = line[:-1]

                date_text = format_default_date(self._clock()) if DATE_TAG in line else ""
                line = expand_placeholders(line, date_text, self.server_name)

                stream.write((line + LINE_BREAK).encode(self.encoding, errors="surrogateescape"))
                lines += 1

        logger.debug(f"Served {resource.name} as template ({lines} lines)")

    def _write_binary(self, stream: BinaryIO, resource: Resource) -> None:
        with open(resource.path, "rb") as f:
            data = f.read(resource.size)

        stream.write(data)
        logger.debug(f"Served {resource.name} as binary ({len(data)} bytes)")
