"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds the bytes every handler writes back to the client.

=============================================================================
WIRE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    HTTP/1.1 200 OK\r\n                  ← status line               │
    │    Content-Type: text/html\r\n          ← headers, in the order     │
    │    Content-Length: 10\r\n                 they were set             │
    │    \r\n                                 ← empty line                │
    │    Index Page                           ← body bytes                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

No Date or Server header is added. Two responses built the same way are
byte-for-byte identical, which is what makes Index and NotFound
idempotent.

=============================================================================
CONTENT-LENGTH
=============================================================================

Content-Length is the number of BYTES in the body, not characters:

    body "héllo"  →  6 bytes in UTF-8  →  Content-Length: 6

ResponseBuilder.build() always recomputes Content-Length from the final
body, so a response with a body can never advertise the wrong length.

=============================================================================
BUILDER PATTERN
=============================================================================

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .content_type(ContentType.HTML)
        .body("Index Page")
        .build())

    Each method returns the builder, build() returns the HTTPResponse.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .content_types import ContentType
from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    An HTTP response ready to be serialized.

    Headers are an insertion-ordered dict: setting the same name twice
    keeps the first position and the last value.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE

        Example: "HTTP/1.1 404 Not Found"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize to the exact bytes sent on the wire.

        Returns:
            Status line, headers, blank line, then the body (if any).
        """
        lines = [self.status_line]

        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        # Empty line separates headers from body
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return header_bytes + (self.body or b"")


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Usage:

        # 200 with an HTML body
        ResponseBuilder().content_type(ContentType.HTML).body("hi").build()

        # 404
        (ResponseBuilder()
            .status(HTTPStatus.NOT_FOUND)
            .content_type(ContentType.HTML)
            .body("404 Not Found!")
            .build())

        # File bytes with an explicit type
        ResponseBuilder().content_type("text/css").body(css_bytes).build()
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: Optional[bytes] = None

    # =========================================================================
    # STATUS / HEADERS
    # =========================================================================

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Set a header. A later call with the same name overwrites it."""
        self._headers[name] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "ResponseBuilder":
        self._headers.update(headers)
        return self

    def content_type(self, content_type: Union[ContentType, str]) -> "ResponseBuilder":
        return self.header("Content-Type", str(content_type))

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """
        Set the body and its Content-Length.

        Strings are encoded as UTF-8 first, so the length is in bytes.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")

        self._body = bytes(body)
        self._headers["Content-Length"] = str(len(self._body))
        return self

    # =========================================================================
    # BUILD
    # =========================================================================

    def build(self) -> HTTPResponse:
        headers = dict(self._headers)

        # Keep Content-Length honest even if header() overwrote it
        if self._body is not None:
            headers["Content-Length"] = str(len(self._body))
        else:
            headers.pop("Content-Length", None)

        return HTTPResponse(
            status=self._status,
            headers=headers,
            body=self._body,
        )

    def to_bytes(self) -> bytes:
        """Build and serialize in one step."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def html(body: Union[str, bytes], status: HTTPStatus = HTTPStatus.OK) -> HTTPResponse:
    """
    One-liner for the text/html responses most handlers send.

        html("Index Page")
        html("404 Not Found!", HTTPStatus.NOT_FOUND)
    """
    return (ResponseBuilder()
        .status(status)
        .content_type(ContentType.HTML)
        .body(body)
        .build())
