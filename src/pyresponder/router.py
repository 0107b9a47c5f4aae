"""
=============================================================================
ROUTER
=============================================================================

Picks the handler for a raw request.

=============================================================================
ROUTE TABLE
=============================================================================

    ┌────────┬──────────────────┬─────────────┐
    │ Method │ Path             │ Handler     │
    ├────────┼──────────────────┼─────────────┤
    │ GET    │ /                │ Index       │
    │ GET    │ /count           │ VisitCount  │
    │ GET    │ /echo            │ Echo        │
    │ GET    │ /static/...      │ StaticFile  │
    │ *      │ anything else    │ NotFound    │
    └────────┴──────────────────┴─────────────┘

Routes are tried in the order they were added; the first match wins.
Matching looks at the method and the path only. "/echo?content=hi"
matches "/echo".

=============================================================================
HANDLER FACTORIES
=============================================================================

A route stores a factory, not a handler instance. The factory is called
with the raw request bytes and returns a fresh handler:

    router.add_route("/", lambda raw: Index())
    router.add_route("/echo", Echo)                     # Echo(raw)
    router.add_route("/static/", partial(StaticFile, root_dir="public"),
                     prefix=True)

=============================================================================
"""

from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Union

from .handlers import Echo, Handler, Index, NotFound, StaticFile, VisitCount
from .handlers.static import STATIC_PREFIX
from .http.request import RequestView


HandlerFactory = Callable[[bytes], Handler]


@dataclass
class Route:
    """
    A single route.

    Attributes:
        path: Exact path, or the required prefix when ``prefix`` is set.
        factory: Builds the handler from the raw request bytes.
        method: HTTP method to match.
        prefix: Match any path starting with ``path``.
    """

    path: str
    factory: HandlerFactory
    method: str = "GET"
    prefix: bool = False

    def matches(self, method: str, path: str) -> bool:
        if method != self.method:
            return False
        if self.prefix:
            return path.startswith(self.path)
        return path == self.path


class Router:
    """Ordered route table with a NotFound fallback."""

    def __init__(self):
        self._routes: List[Route] = []

    def add_route(
        self,
        path: str,
        factory: HandlerFactory,
        method: str = "GET",
        prefix: bool = False,
    ) -> "Router":
        self._routes.append(Route(path, factory, method.upper(), prefix))
        return self

    @property
    def routes(self) -> List[Route]:
        return list(self._routes)

    def match(self, request: RequestView) -> Optional[Route]:
        for route in self._routes:
            if route.matches(request.method, request.path):
                return route
        return None

    def select(self, raw: bytes) -> Handler:
        """
        Build the handler for a raw request.

        Never fails: unparseable or unmatched requests get NotFound.
        """
        route = self.match(RequestView(raw))
        if route is None:
            return NotFound()
        return route.factory(raw)


def default_router(static_dir: Union[str, Path] = "static") -> Router:
    """Router with the responder's standard routes."""
    return (Router()
        .add_route("/", lambda raw: Index())
        .add_route("/count", lambda raw: VisitCount())
        .add_route("/echo", Echo)
        .add_route(STATIC_PREFIX, partial(StaticFile, root_dir=static_dir), prefix=True))
