"""
=============================================================================
RESPONDER SERVER
=============================================================================

Accepts connections and hands each one to a request handler.

=============================================================================
REQUEST FLOW
=============================================================================

    1. ACCEPT
       └── asyncio.start_server spawns one task per client

    2. READ
       └── Connection.read_request() buffers the request head

    3. ROUTE
       └── Router.select(raw) builds the handler for this request

    4. HANDLE
       └── handler.handle(conn, state) writes and drains one response

    5. LOG + CLOSE
       └── Access log line, then the connection is closed

There is no keep-alive: every connection carries one request.

=============================================================================
CONCURRENCY
=============================================================================

All connection tasks run on one event loop and interleave at their await
points (socket reads, drains, file reads). Nothing is ordered between
different connections.

The only state they share is the visit counter in SharedState. Its lock
covers the increment and read-back and nothing else.

=============================================================================
FAILURES
=============================================================================

    ┌──────────────────────────────┬───────────────────────────────────────┐
    │ What went wrong              │ What happens                          │
    ├──────────────────────────────┼───────────────────────────────────────┤
    │ Client sent nothing          │ DEBUG log, connection closed          │
    │ Write/drain failed           │ WARNING log, connection closed        │
    │ Handler raised anything else │ Traceback logged, connection closed   │
    └──────────────────────────────┴───────────────────────────────────────┘

Each of these only affects the connection it happened on.

=============================================================================
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

from .config import ServerConfig
from .core import Connection
from .http.request import RequestView
from .router import Router, default_router
from .state import SharedState


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("pyresponder.access")


class ResponderServer:
    """
    The responder's accept loop.

    Usage:

        # Blocking, with logging configured from the config
        ResponderServer(ServerConfig(port=3000)).run()

        # Inside an existing event loop
        server = ResponderServer(ServerConfig(port=0))
        await server.start()
        print(server.port)
        ...
        await server.close()
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        state: Optional[SharedState] = None,
        router: Optional[Router] = None,
    ):
        """
        Args:
            config: Server configuration. Validated here (fail-fast).
            state: Shared state; a fresh counter starting at 0 if omitted.
            router: Route table; default_router(config.static_dir) if omitted.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self.state = state or SharedState()
        self.router = router or default_router(self.config.static_dir)

        self._server: Optional[asyncio.AbstractServer] = None

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def is_serving(self) -> bool:
        return self._server is not None and self._server.is_serving()

    @property
    def port(self) -> int:
        """The bound port. Useful when the config asked for port 0."""
        if self._server is None or not self._server.sockets:
            return self.config.port
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        """Bind the listening socket and start accepting connections."""
        self._server = await asyncio.start_server(
            self.handle_client,
            self.config.host,
            self.config.port,
            backlog=self.config.backlog,
        )

        logger.info(f"Listening on http://{self.config.host}:{self.port}")

        static_root = Path(self.config.static_dir)
        if not static_root.is_dir():
            logger.warning(
                f"Static directory {str(static_root)!r} does not exist; "
                f"/static/ requests will get 404"
            )

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()

        async with self._server:
            await self._server.serve_forever()

    async def close(self) -> None:
        """Stop accepting connections and wait for the listener to close."""
        if self._server is None:
            return

        self._server.close()
        await self._server.wait_closed()
        self._server = None

    def run(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """
        Start the server and block until Ctrl+C.

        Args:
            host: Override config host.
            port: Override config port.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()

        try:
            asyncio.run(self.serve_forever())
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def _setup_logging(self) -> None:
        """Configure logging based on config."""
        level = self.config.log_level_value

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("pyresponder").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    async def handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """
        Serve one client connection (one task per connection).

        The request is read in full before a handler is chosen.
        """
        conn = Connection(
            reader,
            writer,
            buffer_size=self.config.buffer_size,
            max_request_size=self.config.max_request_size,
        )

        async with conn:
            raw = await conn.read_request()
            if not raw:
                logger.debug(f"[{conn.id}] Client closed without sending a request")
                return

            handler = self.router.select(raw)
            logger.debug(f"[{conn.id}] Dispatching to {handler!r}")

            try:
                await handler.handle(conn, self.state)
            except OSError as e:
                # ConnectionResetError, BrokenPipeError, ...
                logger.warning(f"[{conn.id}] Failed to write response: {e}")
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error: {e}")

            if self.config.access_log:
                self._log_access(conn, raw)

    def _log_access(self, conn: Connection, raw: bytes) -> None:
        status = int(conn.status) if conn.status is not None else "-"
        access_logger.info(
            f'{conn.client_ip} "{RequestView(raw).request_line}" '
            f"{status} {conn.bytes_sent} {conn.age_ms:.2f}ms"
        )
