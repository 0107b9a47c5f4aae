"""
=============================================================================
COMMAND-LINE INTERFACE
=============================================================================

Run the responder from the command line:

    python -m pyresponder [options]

    # or, once installed
    pyresponder [options]

Flags override environment variables (HTTP_HOST, HTTP_PORT,
HTTP_STATIC_DIR, HTTP_LOG_LEVEL), which override the defaults.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .server import ResponderServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyresponder",
        description="Minimal asyncio HTTP responder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m pyresponder                      # Run with defaults
  python -m pyresponder --port 3000          # Custom port
  python -m pyresponder --host 0.0.0.0       # Listen on all interfaces
  python -m pyresponder --static ./public    # Serve /static/ from ./public
        """
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 8080)"
    )

    parser.add_argument(
        "--static", "-s",
        default=None,
        help="Directory served under /static/ (default: ./static)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"pyresponder {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment-based config with any CLI flags applied on top."""
    config = ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.static is not None:
        config.static_dir = args.static
    if args.log_level is not None:
        config.log_level = args.log_level

    return config


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        server = ResponderServer(config_from_args(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        server.run()
    except OSError as e:
        # Typically "address already in use"
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
