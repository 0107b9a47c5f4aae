"""
=============================================================================
REQUEST VIEW
=============================================================================

A read-only interpretation of the raw bytes of one HTTP request.

=============================================================================
WHAT WE LOOK AT
=============================================================================

    GET /echo?content=hello HTTP/1.1\r\n      ← request line
    Host: localhost:8080\r\n                 ← headers
    User-Agent: curl/8.0\r\n
    \r\n

    request_line  "GET /echo?content=hello HTTP/1.1"
    method        "GET"
    target        "/echo?content=hello"
    path          "/echo"
    query_string  "content=hello"
    query_params  {"content": "hello"}
    headers       {"host": "localhost:8080", "user-agent": "curl/8.0"}

=============================================================================
TOTAL PARSING
=============================================================================

Nothing in this module raises on bad input. A request we can't make sense
of simply has empty parts:

    b""                    → method "", path "", query_params {}
    b"\xff\xfe garbage"    → method "��", path "garbage", ...
    b"GET /echo?&&= HTTP/1.1"  → query_params {}

The router turns "nothing recognizable" into a 404, so handlers never
see a parse error.

Request bodies are not read or interpreted.

=============================================================================
"""

from functools import cached_property
from typing import Dict
from urllib.parse import parse_qs, unquote


class RequestView:
    """
    Lazily parsed view over raw request bytes.

    Every property is computed on first access and cached; the underlying
    buffer is never modified.
    """

    def __init__(self, raw: bytes):
        self.raw = bytes(raw)

    def __repr__(self) -> str:
        return f"RequestView({self.request_line!r})"

    @cached_property
    def text(self) -> str:
        """The buffer decoded as UTF-8, undecodable bytes replaced."""
        return self.raw.decode("utf-8", errors="replace")

    @cached_property
    def _head_lines(self) -> list[str]:
        head = self.text.split("\r\n\r\n", 1)[0]
        return head.split("\r\n")

    @cached_property
    def request_line(self) -> str:
        return self._head_lines[0].strip()

    @cached_property
    def _request_line_parts(self) -> list[str]:
        return self.request_line.split()

    @property
    def method(self) -> str:
        parts = self._request_line_parts
        return parts[0] if parts else ""

    @property
    def target(self) -> str:
        """The request-target as sent, query string included."""
        parts = self._request_line_parts
        return parts[1] if len(parts) > 1 else ""

    @property
    def version(self) -> str:
        parts = self._request_line_parts
        return parts[2] if len(parts) > 2 else ""

    @property
    def path(self) -> str:
        """Target without query string or fragment (not percent-decoded)."""
        return self.target.split("#", 1)[0].split("?", 1)[0]

    @property
    def query_string(self) -> str:
        target = self.target.split("#", 1)[0]
        if "?" not in target:
            return ""
        return target.split("?", 1)[1]

    @cached_property
    def query_params(self) -> Dict[str, str]:
        """
        Query parameters as name → value.

        Values are percent-decoded ("+" becomes a space). When a name
        repeats, the first value wins. Blank values are kept, so
        "?content=" yields {"content": ""}.
        """
        parsed = parse_qs(self.query_string, keep_blank_values=True)
        return {name: values[0] for name, values in parsed.items() if values}

    @cached_property
    def headers(self) -> Dict[str, str]:
        """
        Request headers with lowercase names.

        Lines without a colon are skipped. Repeated headers are joined
        with ", " as RFC 7230 allows.
        """
        headers: Dict[str, str] = {}

        for line in self._head_lines[1:]:
            name, sep, value = line.partition(":")
            if not sep or not name.strip():
                continue  # Lenient: skip malformed lines

            name = name.strip().lower()
            value = value.strip()

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers

    def get_query(self, name: str, default: str = "") -> str:
        return self.query_params.get(name, default)

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


def decode_path(path: str) -> str:
    """Percent-decode a URL path segment (``%20`` → space)."""
    return unquote(path)
