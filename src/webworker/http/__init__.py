"""
=============================================================================
HTTP PIPELINE STAGES
=============================================================================

The three stages every connection runs through, in order:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST READER (request.py)                                         │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Reads header lines until the blank line, extracts the file name    │
    │ from the GET line, infers a Content-Type from it                   │
    │                                                                      │
    │ Output: ParsedRequest(resource_name, content_type)                  │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │ HEADER WRITER (response.py)                                         │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Looks the file up once, writes status line + headers               │
    │                                                                      │
    │ Output: Resource(name, path, exists, size)                          │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │ BODY WRITER (body.py)                                               │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Template-expanded HTML, raw image bytes, or the fixed 404 page     │
    └─────────────────────────────────────────────────────────────────────┘

Stages share nothing but the two immutable records passed between them.

=============================================================================
"""

from .request import ParsedRequest, RequestReader, RequestLineError, extract_resource_name
from .response import HeaderWriter, Resource, format_http_date
from .body import BodyWriter, expand_placeholders, format_default_date, NOT_FOUND_PAGE
from .status_codes import HTTPStatus
from .mime_types import ContentType, infer_content_type

__all__ = [
    # Request reading
    "ParsedRequest",
    "RequestReader",
    "RequestLineError",
    "extract_resource_name",

    # Header writing
    "HeaderWriter",
    "Resource",
    "format_http_date",

    # Body writing
    "BodyWriter",
    "expand_placeholders",
    "format_default_date",
    "NOT_FOUND_PAGE",

    # Status codes
    "HTTPStatus",

    # Content types
    "ContentType",
    "infer_content_type",
]
