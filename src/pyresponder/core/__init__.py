"""
Networking core: the per-client Connection wrapper.

The accept loop itself lives in pyresponder.server and is built on
asyncio.start_server.
"""

from .connection import Connection, ConnectionState

__all__ = [
    "Connection",
    "ConnectionState",
]
