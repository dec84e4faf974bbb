"""
=============================================================================
CONTENT-TYPE INFERENCE
=============================================================================

Maps a requested file name to the Content-Type the worker declares.

Only four types are recognized:

    ┌────────────────────────────────────────────────────────────────────┐
    │  name contains   │  Content-Type   │  body served as              │
    ├──────────────────┼─────────────────┼──────────────────────────────┤
    │  ".gif"          │  image/gif      │  raw bytes                   │
    │  ".jpeg"         │  image/jpeg     │  raw bytes                   │
    │  ".png"          │  image/png      │  raw bytes                   │
    │  anything else   │  text/html      │  template-expanded text      │
    └────────────────────────────────────────────────────────────────────┘

=============================================================================
MATCHING RULES
=============================================================================

This is NOT extension lookup. The checks are case-insensitive SUBSTRING
tests, run in the fixed order of the table above, first match wins:

    infer_content_type("logo.PNG")          → image/png
    infer_content_type("a.gif.png")         → image/gif   (gif checked first)
    infer_content_type("x.png.html")        → image/png   (substring match)
    infer_content_type("photo.jpg")         → text/html   (.jpg is not .jpeg)

=============================================================================
"""

from enum import Enum
from typing import Optional


class ContentType(str, Enum):
    """
    Content-type hint inferred from the requested file name.

    Subclasses str so a member can be written straight into a header:

        >>> f"Content-Type: {ContentType.PNG.value}"
        'Content-Type: image/png'
    """

    HTML = "text/html"
    GIF = "image/gif"
    JPEG = "image/jpeg"
    PNG = "image/png"

    @property
    def is_image(self) -> bool:
        """True for the binary image types, False for HTML."""
        return self is not ContentType.HTML


# Checked in order; the first marker found in the name wins.
_MARKERS = (
    (".gif", ContentType.GIF),
    (".jpeg", ContentType.JPEG),
    (".png", ContentType.PNG),
)


def infer_content_type(name: Optional[str]) -> ContentType:
    """
    Infer the Content-Type for a requested file name.

    Args:
        name: The extracted file name. None (nothing parsed yet) maps
              to the HTML default.

    Returns:
        The first ContentType whose marker occurs in the lowercased name,
        or ContentType.HTML.
    """
    if not name:
        return ContentType.HTML

    lowered = name.lower()
    for marker, content_type in _MARKERS:
        if marker in lowered:
            return content_type
    return ContentType.HTML
