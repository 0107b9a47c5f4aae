"""
=============================================================================
CONTENT-TYPE INFERENCE
=============================================================================

Maps a static asset's file name to the Content-Type it is served with.

=============================================================================
HOW THE MATCH WORKS
=============================================================================

The rules are checked in a fixed order and the first hit wins:

    ┌──────────────────────────┬─────────────────┐
    │ File name contains       │ Content-Type    │
    ├──────────────────────────┼─────────────────┤
    │ .htm   (also .html)      │ text/html       │
    │ .txt                     │ text/plain      │
    │ .css                     │ text/css        │
    │ .png  .jpg  .ico         │ image/avif      │
    │ (anything else)          │ text/html       │
    └──────────────────────────┴─────────────────┘

Two things to keep in mind:

1. CONTAINMENT, NOT SUFFIX:
   The check is "does the name contain the extension", so
   "notes.txt.bak" is text/plain and "page.html" matches the ".htm" rule.

2. CASE-INSENSITIVE:
   The name is lowercased first, so "LOGO.PNG" is an image, not the
   text/html fallback.

The function is total: every string, including "", yields exactly one
ContentType.

=============================================================================
"""

from enum import Enum
from pathlib import PurePath
from typing import Union


class ContentType(Enum):
    """Content types the responder knows how to label."""

    HTML = "text/html"
    PLAIN_TEXT = "text/plain"
    CSS = "text/css"
    AVIF_IMAGE = "image/avif"

    def __str__(self) -> str:
        return self.value


# Ordered: earlier rules shadow later ones.
CONTENT_TYPE_RULES = (
    ((".htm",), ContentType.HTML),
    ((".txt",), ContentType.PLAIN_TEXT),
    ((".css",), ContentType.CSS),
    ((".png", ".jpg", ".ico"), ContentType.AVIF_IMAGE),
)

DEFAULT_CONTENT_TYPE = ContentType.HTML


def infer_content_type(name: Union[str, PurePath]) -> ContentType:
    """
    Infer the Content-Type for a file name.

    Args:
        name: File name or relative path of the asset.

    Returns:
        The first matching ContentType, or text/html if nothing matches.

    Examples:
        >>> infer_content_type("style.css")
        <ContentType.CSS: 'text/css'>

        >>> infer_content_type("favicon.ICO")
        <ContentType.AVIF_IMAGE: 'image/avif'>

        >>> infer_content_type("README")
        <ContentType.HTML: 'text/html'>
    """
    lowered = str(name).lower()

    for markers, content_type in CONTENT_TYPE_RULES:
        if any(marker in lowered for marker in markers):
            return content_type

    return DEFAULT_CONTENT_TYPE
