"""
=============================================================================
REQUEST READER
=============================================================================

Reads the request header block from a client connection and pulls out the
one thing the worker cares about: the name of the requested file.

=============================================================================
WHAT WE READ
=============================================================================

    GET /index.html HTTP/1.1\r\n       ← retrieval line: file name taken here
    Host: localhost:8080\r\n           ← read and logged, otherwise ignored
    User-Agent: curl/8.0\r\n           ← read and logged, otherwise ignored
    \r\n                               ← blank line: stop reading

Every line is read and logged. Any line containing the literal "GET" is
treated as the retrieval line and re-parsed; the last one that parses
wins. Request bodies are never read.

=============================================================================
POSITION-BASED EXTRACTION
=============================================================================

The file name is cut out by character positions, not by a URL parser.
It assumes the exact shape  GET /path/to/name HTTP/1.1 :

    line  = "GET /docs/index.html HTTP/1.1"
                                      │
            1. cut at the LAST '/' ───┘   (the one inside "HTTP/1.1")

    head  = "GET /docs/index.html HTTP"
                     │          │
            2. start after the LAST '/' in head
            3. end one char before the FIRST "HTTP" in head

    name  = "index.html"

Consequences worth knowing:

    GET /docs/index.html HTTP/1.1   → "index.html"   (directories dropped)
    GET / HTTP/1.1                  → ""             (served as 404)
    GET index.html HTTP/1.1         → "GET index.html" (no leading '/')
    GET /index.html                 → RequestLineError (no "HTTP" token)
    GET index.html                  → RequestLineError (no '/' at all)

No percent-decoding, no query strings, no normalization. A line that does
not fit the shape raises RequestLineError, which stops the read loop.

=============================================================================
ERROR POLICY
=============================================================================

Read faults never escape RequestReader.read():

    ┌─────────────────────────────────────────────────────────────────────┐
    │  blank line            → stop, normal end of headers               │
    │  end of stream         → stop                                       │
    │  RequestLineError      → log "Request error", stop                  │
    │  OSError / timeout     → log "Request error", stop                  │
    └─────────────────────────────────────────────────────────────────────┘

In every case the reader returns a ParsedRequest built from whatever had
been parsed so far. A request with no usable retrieval line comes back
with resource_name=None and is answered with a 404.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

from .mime_types import ContentType, infer_content_type


logger = logging.getLogger(__name__)


RETRIEVAL_MARKER = "GET"

# Longest header line accepted before the read is abandoned
MAX_LINE_LENGTH = 64 * 1024


class RequestLineError(ValueError):
    """Raised when a retrieval line does not fit the expected shape."""


@dataclass(frozen=True)
class ParsedRequest:
    """
    What the request reader learned from one connection.

    Attributes:
        resource_name: Extracted file name, or None when no retrieval line
                       was parsed before reading stopped.
        content_type: Hint inferred from resource_name (HTML by default).
    """

    resource_name: Optional[str] = None
    content_type: ContentType = ContentType.HTML

    @property
    def is_resolved(self) -> bool:
        """True when a file name was extracted."""
        return self.resource_name is not None


def extract_resource_name(line: str) -> str:
    """
    Cut the requested file name out of a retrieval line.

    Args:
        line: A request line such as "GET /index.html HTTP/1.1"
              (line terminator already removed).

    Returns:
        The final path segment, e.g. "index.html".

    Raises:
        RequestLineError: If the line has no '/', no "HTTP" token before
                          its last '/', or the cut positions cross.

    Examples:
        >>> extract_resource_name("GET /index.html HTTP/1.1")
        'index.html'
        >>> extract_resource_name("GET /img/logo.png HTTP/1.0")
        'logo.png'
    """
    last_slash = line.rfind("/")
    if last_slash < 0:
        raise RequestLineError(f"No '/' in request line: {line!r}")

    head = line[:last_slash]
    start = head.rfind("/") + 1
    end = head.find("HTTP") - 1

    # find() returning -1 puts end at -2, which also lands here
    if end < start:
        raise RequestLineError(f"Malformed request line: {line!r}")

    return head[start:end]


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


class RequestReader:
    """
    Reads one request header block from a binary stream.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        read() loop                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   while True:                                                        │
    │       line = readline()            ← blocks until a line arrives    │
    │       log "Request line: (...)"                                     │
    │       if "GET" in line:                                             │
    │           name = extract(line)     ← may raise → stop               │
    │       hint = infer(name)                                            │
    │       if line == "": stop          ← end of headers                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Usage:
        request = RequestReader(conn.rfile).read()
    """

    def __init__(self, stream: BinaryIO, encoding: str = "utf-8"):
        """
        Args:
            stream: Readable binary stream with readline() (socket file,
                    BytesIO in tests).
            encoding: Encoding used to decode header lines. Undecodable
                      bytes are replaced, never raised.
        """
        self._stream = stream
        self.encoding = encoding

    def read(self) -> ParsedRequest:
        """
        Read header lines until the blank line, end of stream, or a fault.

        Returns:
            The ParsedRequest established when reading stopped. Never raises
            for malformed input or I/O failures.
        """
        resource_name: Optional[str] = None
        content_type = ContentType.HTML

        while True:
            try:
                line = self._read_line()
                if line is None:
                    logger.debug("Connection closed before end of headers")
                    break

                logger.debug(f"Request line: ({line})")

                if RETRIEVAL_MARKER in line:
                    resource_name = extract_resource_name(line)
                    logger.info(f"Extracted file name from request path: {resource_name}")

                content_type = infer_content_type(resource_name)

                if len(line) == 0:
                    break

            except (ValueError, OSError) as e:
                logger.warning(f"Request error: {e}")
                break

        return ParsedRequest(resource_name=resource_name, content_type=content_type)

    def _read_line(self) -> Optional[str]:
        """
        Read and decode one line.

        Returns:
            The line without its terminator, or None at end of stream.
        """
        raw = self._stream.readline(MAX_LINE_LENGTH + 1)
        if not raw:
            return None

        if len(raw) > MAX_LINE_LENGTH:
            raise RequestLineError(f"Request line exceeds {MAX_LINE_LENGTH} bytes")

        return _strip_terminator(raw.decode(self.encoding, errors="replace"))
