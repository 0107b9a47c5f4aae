"""
Small handlers that build their response from a fixed string, the visit
counter, or the query string.

    Index       GET /          200  "Index Page"
    VisitCount  GET /count     200  "<n> Times!"
    Echo        GET /echo      200  value of ?content=, or "Need some arguments"
    NotFound    (fallback)     404  "404 Not Found!"
"""

from ..core.connection import Connection
from ..http.request import RequestView
from ..http.response import html
from ..http.status_codes import HTTPStatus
from ..state import SharedState
from .base import Handler


INDEX_BODY = "Index Page"
NOT_FOUND_BODY = "404 Not Found!"
ECHO_FALLBACK_BODY = "Need some arguments"
ECHO_QUERY_KEY = "content"


class Index(Handler):
    """Landing page. Ignores the request and the shared state."""

    async def handle(self, conn: Connection, state: SharedState) -> None:
        await conn.send_response(html(INDEX_BODY))


class NotFound(Handler):
    """
    The 404 response.

    Used by the router for anything it doesn't recognize, and by
    StaticFile when the requested asset can't be served.
    """

    async def handle(self, conn: Connection, state: SharedState) -> None:
        await conn.send_response(html(NOT_FOUND_BODY, HTTPStatus.NOT_FOUND))


class VisitCount(Handler):
    """
    Counts visits to itself.

    The increment and the read-back happen in one locked call, so the
    number in the body is always the one this request produced. The lock
    is released before anything is written to the socket.
    """

    async def handle(self, conn: Connection, state: SharedState) -> None:
        visits = state.record_visit()
        await conn.send_response(html(f"{visits} Times!"))


class Echo(Handler):
    """Echoes the ``content`` query parameter back as the body."""

    def __init__(self, raw: bytes):
        self.raw = raw

    async def handle(self, conn: Connection, state: SharedState) -> None:
        request = RequestView(self.raw)
        body = request.query_params.get(ECHO_QUERY_KEY, ECHO_FALLBACK_BODY)
        await conn.send_response(html(body))
