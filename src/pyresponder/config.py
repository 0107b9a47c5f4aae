"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything the server needs to know before it starts: where to listen,
how much of a request to read, where static assets live, and how chatty
to be.

=============================================================================
PRECEDENCE
=============================================================================

    CLI flag  >  environment variable  >  default below

    HTTP_PORT=3000 python -m pyresponder             # port 3000
    HTTP_PORT=3000 python -m pyresponder -p 9000     # port 9000

Values are validated once at startup; a bad value stops the server with
a ValueError instead of failing on the first request.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the responder.

    Development:
        ServerConfig(log_level="DEBUG")

    Containers:
        ServerConfig(host="0.0.0.0", static_dir="/srv/static")
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All interfaces
    """

    port: int = 8080
    """Port to listen on. 0 lets the OS pick a free one (used by tests)."""

    backlog: int = 128
    """Maximum number of queued, not-yet-accepted connections."""

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST READING
    # ─────────────────────────────────────────────────────────────────────

    buffer_size: int = 1024
    """Bytes requested from the socket per read."""

    max_request_size: int = 64 * 1024
    """
    Upper bound on the request head we buffer before dispatching.
    Request bodies are never read, so this only needs to cover the
    request line and headers.
    """

    # ─────────────────────────────────────────────────────────────────────
    # STATIC FILES
    # ─────────────────────────────────────────────────────────────────────

    static_dir: str = "static"
    """
    Static asset root, served under /static/.
    Relative paths are relative to the working directory.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    access_log: bool = True
    """Emit one line per request on the pyresponder.access logger."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        HTTP_HOST        Server host (default: 127.0.0.1)
        HTTP_PORT        Server port (default: 8080)
        HTTP_STATIC_DIR  Static asset root (default: static)
        HTTP_LOG_LEVEL   Logging level (default: INFO)
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "8080")),
            static_dir=os.getenv("HTTP_STATIC_DIR", "static"),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 64:
            raise ValueError("buffer_size must be >= 64")

        if self.max_request_size < self.buffer_size:
            raise ValueError("max_request_size must be >= buffer_size")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
