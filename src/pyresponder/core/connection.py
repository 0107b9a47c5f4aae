"""
=============================================================================
CONNECTION
=============================================================================

Wraps the asyncio stream pair for one accepted client.

=============================================================================
LIFECYCLE
=============================================================================

    ┌─────────┐  read_request()  ┌──────────┐  send_response()  ┌─────────┐
    │   NEW   │ ───────────────► │ READING  │ ────────────────► │ WRITING │
    └─────────┘                  └──────────┘                   └────┬────┘
                                                                     │
                                                     close()         ▼
                                                               ┌─────────┐
                                                               │ CLOSED  │
                                                               └─────────┘

One connection carries exactly one request. There is no keep-alive: once
the handler has written its response the server closes the connection.

=============================================================================
READ-THEN-DISPATCH
=============================================================================

read_request() returns only once the request head is complete (or the
client stopped sending, or the size cap was hit). The server picks a
handler only after that, so handlers never race the socket for the bytes
they need.

    TCP chunks:   "GET /ec"  "ho?content=hi HT"  "TP/1.1\r\n\r\n"
                     │            │                    │
                     └────────────┴────── buffered ────┘
                                  │
                                  ▼
                  b"GET /echo?content=hi HTTP/1.1\r\n\r\n"

=============================================================================
WRITE FAILURES
=============================================================================

send_response() writes every byte and drains the transport. If the peer
is gone, ConnectionError (or another OSError) propagates to the caller.
That is fatal for this connection only; the server logs it and moves on.

=============================================================================
"""

import asyncio
import logging
import time
import uuid
from enum import Enum
from typing import Optional

from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus


logger = logging.getLogger(__name__)

HEADER_TERMINATOR = b"\r\n\r\n"


class ConnectionState(Enum):
    NEW = "new"
    READING = "reading"
    WRITING = "writing"
    CLOSED = "closed"


class Connection:
    """
    One client connection.

    Attributes:
        reader: asyncio StreamReader for the client.
        writer: asyncio StreamWriter for the client.
        address: Client's (ip, port), ("", 0) if unknown.
        id: Short random id used to correlate log lines.
        state: Current ConnectionState.
        bytes_sent: Total response bytes written.
        status: Status of the last response sent, None before that.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        buffer_size: int = 1024,
        max_request_size: int = 64 * 1024,
    ):
        self.reader = reader
        self.writer = writer
        self.buffer_size = buffer_size
        self.max_request_size = max_request_size

        peer = writer.get_extra_info("peername")
        self.address: tuple = tuple(peer[:2]) if peer else ("", 0)

        self.id = str(uuid.uuid4())[:8]
        self.state = ConnectionState.NEW
        self.created_at = time.monotonic()
        self.bytes_sent = 0
        self.status: Optional[HTTPStatus] = None

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r}, address={self.address!r}, state={self.state.value})"

    @property
    def client_ip(self) -> str:
        return str(self.address[0])

    @property
    def age_ms(self) -> float:
        return (time.monotonic() - self.created_at) * 1000

    # =========================================================================
    # READING
    # =========================================================================

    async def read_request(self) -> bytes:
        """
        Read the raw bytes of one request.

        Stops at the first of:
            - the \\r\\n\\r\\n header terminator
            - EOF from the client
            - max_request_size bytes

        Returns:
            Everything read so far. Empty bytes if the client sent nothing.
        """
        self.state = ConnectionState.READING
        buffer = b""

        while HEADER_TERMINATOR not in buffer and len(buffer) < self.max_request_size:
            try:
                chunk = await self.reader.read(self.buffer_size)
            except (ConnectionResetError, BrokenPipeError):
                # Client disconnected abruptly; work with what we have
                break

            if not chunk:
                break  # EOF

            buffer += chunk

        return buffer[:self.max_request_size]

    # =========================================================================
    # WRITING
    # =========================================================================

    async def send(self, data: bytes) -> None:
        """
        Write all bytes and flush them to the transport.

        Raises:
            ConnectionError / OSError: If the client is gone.
        """
        self.state = ConnectionState.WRITING
        self.writer.write(data)
        await self.writer.drain()
        self.bytes_sent += len(data)

    async def send_response(self, response: HTTPResponse) -> None:
        """Serialize and send a response, remembering its status for logging."""
        await self.send(response.to_bytes())
        self.status = response.status

    # =========================================================================
    # CLOSING
    # =========================================================================

    async def close(self) -> None:
        """
        Close the connection. Safe to call more than once.

        Errors while closing are logged at DEBUG and otherwise ignored:
        the peer may already have gone away, and there is nothing left to
        tell it.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSED
        self.writer.close()

        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"[{self.id}] Error while closing: {e}")

    async def __aenter__(self) -> "Connection":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False  # Don't suppress exceptions
