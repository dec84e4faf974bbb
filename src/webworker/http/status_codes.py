"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The worker answers with exactly two statuses:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  200   │ OK         - the requested file exists and is served      │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  404   │ Not Found  - no such file, or no file name was parsed     │
    └────────┴───────────────────────────────────────────────────────────┘

Anything the worker cannot handle (malformed input, I/O failure) ends in
a closed connection rather than a different status code.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200          # Resource exists
    NOT_FOUND = 404   # Resource absent

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └────────── Status code
        """
        return _STATUS_PHRASES[self]

    @classmethod
    def for_existence(cls, exists: bool) -> "HTTPStatus":
        """Map a resource existence check to the response status."""
        return cls.OK if exists else cls.NOT_FOUND


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
