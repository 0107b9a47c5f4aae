"""
=============================================================================
HANDLERS MODULE
=============================================================================

The five request handlers and the contract they share.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Handler      │ Response                                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │ Index        │ 200 "Index Page"                                     │
    │ VisitCount   │ 200 "<n> Times!" (increments the shared counter)     │
    │ Echo         │ 200 value of ?content=, else "Need some arguments"   │
    │ StaticFile   │ 200 file bytes from the static root, else 404        │
    │ NotFound     │ 404 "404 Not Found!"                                 │
    └─────────────────────────────────────────────────────────────────────┘

    # Every handler is awaited the same way
    await handler.handle(conn, state)

=============================================================================
"""

from .base import Handler
from .pages import Echo, Index, NotFound, VisitCount
from .static import StaticFile

__all__ = [
    "Handler",
    "Index",
    "VisitCount",
    "Echo",
    "StaticFile",
    "NotFound",
]
