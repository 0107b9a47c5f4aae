"""
=============================================================================
HANDLER CONTRACT
=============================================================================

Every handler does one thing: given a connection and the shared state,
write exactly one complete HTTP response and flush it.

    ┌────────────┐        ┌─────────────┐        ┌──────────────────┐
    │ Connection │ ─────► │   Handler   │ ─────► │ response bytes   │
    │ SharedState│        │  .handle()  │        │ written + drained│
    └────────────┘        └─────────────┘        └──────────────────┘

Handlers are built fresh for each request and carry no mutable state of
their own. The ones that need the request (Echo, StaticFile) are built
with its raw bytes.

If writing fails the exception propagates; the server treats it as fatal
for that connection only.

=============================================================================
"""

from abc import ABC, abstractmethod

from ..core.connection import Connection
from ..state import SharedState


class Handler(ABC):
    """Base class for the responder's request handlers."""

    @abstractmethod
    async def handle(self, conn: Connection, state: SharedState) -> None:
        """
        Write one complete response to ``conn``.

        Args:
            conn: The client connection. Written to and drained.
            state: Process-wide shared state.

        Raises:
            ConnectionError / OSError: If the response can't be written.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
