"""
=============================================================================
PYRESPONDER
=============================================================================

A minimal asyncio HTTP responder with a fixed set of handlers.

    GET /                 → "Index Page"
    GET /count            → "<n> Times!"       (shared visit counter)
    GET /echo?content=hi  → "hi"
    GET /static/<file>    → file from the static directory
    anything else         → 404 "404 Not Found!"

=============================================================================
QUICK START
=============================================================================

    # From the command line
    python -m pyresponder --port 8080 --static ./static

    # From code
    from pyresponder import ResponderServer, ServerConfig

    ResponderServer(ServerConfig(port=8080)).run()

=============================================================================
PACKAGE LAYOUT
=============================================================================

    pyresponder/
    ├── __init__.py          ← you are here
    ├── __main__.py          ← CLI (python -m pyresponder)
    ├── config.py            ← ServerConfig
    ├── server.py            ← ResponderServer (accept loop)
    ├── router.py            ← request → handler
    ├── state.py             ← SharedState (visit counter)
    ├── core/
    │   └── connection.py    ← per-client stream wrapper
    ├── handlers/
    │   ├── base.py          ← Handler contract
    │   ├── pages.py         ← Index, VisitCount, Echo, NotFound
    │   └── static.py        ← StaticFile
    └── http/
        ├── request.py       ← RequestView
        ├── response.py      ← HTTPResponse, ResponseBuilder
        ├── status_codes.py  ← HTTPStatus
        └── content_types.py ← ContentType inference

=============================================================================
"""

from .config import ServerConfig
from .router import Router, default_router
from .server import ResponderServer
from .state import SharedState

__version__ = "1.0.0"

__all__ = [
    "ResponderServer",
    "ServerConfig",
    "SharedState",
    "Router",
    "default_router",
    "__version__",
]
