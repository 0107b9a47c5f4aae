"""
pytest configuration and fixtures.
"""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional, Tuple
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pyresponder.core import Connection
from pyresponder.handlers import Handler
from pyresponder.state import SharedState


class RecordingWriter:
    """Stand-in for asyncio.StreamWriter that keeps everything written."""

    def __init__(self, peer=("127.0.0.1", 54321), fail_on_drain: bool = False):
        self.data = b""
        self.drains = 0
        self.closed = False
        self._peer = peer
        self._fail_on_drain = fail_on_drain

    def write(self, data: bytes) -> None:
        self.data += data

    async def drain(self) -> None:
        if self._fail_on_drain:
            raise ConnectionResetError("peer went away")
        self.drains += 1

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        return None

    def get_extra_info(self, name: str, default=None):
        if name == "peername":
            return self._peer
        return default


def make_reader(raw: bytes) -> asyncio.StreamReader:
    """StreamReader pre-loaded with ``raw``. Call inside a running loop."""
    reader = asyncio.StreamReader()
    reader.feed_data(raw)
    reader.feed_eof()
    return reader


def split_response(data: bytes) -> Tuple[str, Dict[str, str], bytes]:
    """Split raw response bytes into (status line, headers, body)."""
    head, _, body = data.partition(b"\r\n\r\n")
    lines = head.decode("utf-8").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


@pytest.fixture
def run_handler() -> Callable[..., Awaitable[bytes]]:
    """Await a handler against a recording connection; return the bytes written."""

    async def _run(handler: Handler, state: Optional[SharedState] = None, raw: bytes = b"") -> bytes:
        writer = RecordingWriter()
        conn = Connection(make_reader(raw), writer)
        await handler.handle(conn, state or SharedState())
        return writer.data

    return _run


@pytest.fixture
def parse_response() -> Callable[[bytes], Tuple[str, Dict[str, str], bytes]]:
    return split_response


@pytest.fixture
def recording_writer() -> type:
    return RecordingWriter


@pytest.fixture
def reader_for() -> Callable[[bytes], asyncio.StreamReader]:
    return make_reader


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request for the index page."""
    return (
        b"GET / HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def echo_request() -> bytes:
    """Echo request with a percent-encoded content parameter."""
    return (
        b"GET /echo?content=hello%20world&other=1 HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"\r\n"
    )


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    """
    A static directory with a few assets, plus a secret file next to it:

        tmp_path/
        ├── secret.txt
        └── static/
            ├── index.html
            ├── notes.txt
            ├── style.css
            ├── logo.png          (binary)
            └── docs/
                └── guide.txt
    """
    (tmp_path / "secret.txt").write_text("top secret")

    root = tmp_path / "static"
    root.mkdir()
    (root / "index.html").write_text("<h1>Hello</h1>")
    (root / "notes.txt").write_text("héllo notes", encoding="utf-8")
    (root / "style.css").write_text("body { color: red; }")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x01\x02\xff")
    (root / "docs").mkdir()
    (root / "docs" / "guide.txt").write_text("guide")
    return root
