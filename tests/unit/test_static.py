"""
Unit tests for the StaticFile handler.
"""

import asyncio
import os
from pathlib import Path

import pytest

from pyresponder.handlers import NotFound, StaticFile


def get(path: str) -> bytes:
    """Raw GET request for ``path``."""
    return f"GET {path} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode()


class TestServeFile:
    """Tests for serving existing assets."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name, content_type", [
        ("index.html", "text/html"),
        ("notes.txt", "text/plain"),
        ("style.css", "text/css"),
        ("logo.png", "image/avif"),
    ])
    async def test_serves_file(self, static_root: Path, run_handler, parse_response, name, content_type):
        """Test status, type, exact length and exact bytes."""
        expected = (static_root / name).read_bytes()

        data = await run_handler(StaticFile(get(f"/static/{name}"), static_root))
        status_line, headers, body = parse_response(data)

        assert status_line == "HTTP/1.1 200 OK"
        assert headers["Content-Type"] == content_type
        assert headers["Content-Length"] == str(len(expected))
        assert body == expected

    @pytest.mark.asyncio
    async def test_length_is_bytes(self, static_root: Path, run_handler, parse_response):
        """Test Content-Length for a file with multi-byte characters."""
        data = await run_handler(StaticFile(get("/static/notes.txt"), static_root))
        _, headers, body = parse_response(data)

        assert headers["Content-Length"] == str(os.path.getsize(static_root / "notes.txt"))
        assert body.decode("utf-8") == "héllo notes"

    @pytest.mark.asyncio
    async def test_nested_path(self, static_root: Path, run_handler, parse_response):
        """Test assets in subdirectories."""
        data = await run_handler(StaticFile(get("/static/docs/guide.txt"), static_root))
        assert parse_response(data)[2] == b"guide"

    @pytest.mark.asyncio
    async def test_type_from_file_name_not_directory(self, static_root: Path, run_handler, parse_response):
        """Test a directory name with an extension doesn't decide the type."""
        theme = static_root / "theme.css.d"
        theme.mkdir()
        (theme / "logo.png").write_bytes(b"\x89PNG")

        data = await run_handler(StaticFile(get("/static/theme.css.d/logo.png"), static_root))
        _, headers, body = parse_response(data)

        assert headers["Content-Type"] == "image/avif"
        assert body == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_query_string_ignored(self, static_root: Path, run_handler, parse_response):
        """Test that ?v=... cache busters don't break the lookup."""
        data = await run_handler(StaticFile(get("/static/style.css?v=3#x"), static_root))
        assert parse_response(data)[0] == "HTTP/1.1 200 OK"

    @pytest.mark.asyncio
    async def test_percent_encoded_name(self, static_root: Path, run_handler, parse_response):
        """Test that %20 in the URL maps to a space in the file name."""
        (static_root / "my file.txt").write_text("spaced")

        data = await run_handler(StaticFile(get("/static/my%20file.txt"), static_root))
        assert parse_response(data)[2] == b"spaced"

    @pytest.mark.asyncio
    async def test_content_type_case_insensitive(self, static_root: Path, run_handler, parse_response):
        """Test an upper-case extension is still an image."""
        (static_root / "PHOTO.PNG").write_bytes(b"\x00\x01")

        data = await run_handler(StaticFile(get("/static/PHOTO.PNG"), static_root))
        assert parse_response(data)[1]["Content-Type"] == "image/avif"


class TestNotFoundFallback:
    """Anything that can't be served is the plain NotFound response."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/static/missing.txt",
        "/static/docs",
        "/static/docs/",
        "/static/",
    ])
    async def test_unservable(self, static_root: Path, run_handler, path: str):
        """Test missing files and directories give the same bytes as NotFound."""
        assert await run_handler(StaticFile(get(path), static_root)) == await run_handler(NotFound())

    @pytest.mark.asyncio
    async def test_missing_root(self, tmp_path: Path, run_handler):
        """Test a static root that doesn't exist."""
        handler = StaticFile(get("/static/index.html"), tmp_path / "nope")
        assert await run_handler(handler) == await run_handler(NotFound())

    @pytest.mark.asyncio
    async def test_no_static_token(self, static_root: Path, run_handler):
        """Test a request without any /static/ path."""
        assert await run_handler(StaticFile(get("/other"), static_root)) == await run_handler(NotFound())

    @pytest.mark.asyncio
    async def test_marker_must_be_prefix(self, static_root: Path, run_handler):
        """Test that /static/ in the middle of a token doesn't count."""
        raw = get("/assets/static/index.html")
        assert await run_handler(StaticFile(raw, static_root)) == await run_handler(NotFound())

    @pytest.mark.asyncio
    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
    async def test_unreadable_file(self, static_root: Path, run_handler):
        """Test that permission errors collapse to 404."""
        locked = static_root / "locked.txt"
        locked.write_text("no")
        locked.chmod(0)
        try:
            data = await run_handler(StaticFile(get("/static/locked.txt"), static_root))
            assert data == await run_handler(NotFound())
        finally:
            locked.chmod(0o644)

    @pytest.mark.asyncio
    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs POSIX FIFOs")
    async def test_fifo_is_not_read(self, static_root: Path, run_handler):
        """Test a named pipe is a 404 and never blocks the handler."""
        os.mkfifo(static_root / "pipe.txt")

        data = await asyncio.wait_for(
            run_handler(StaticFile(get("/static/pipe.txt"), static_root)),
            timeout=5,
        )

        assert data == await run_handler(NotFound())


class TestConfinement:
    """Requests must never read outside the static root."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/static/../secret.txt",
        "/static/docs/../../secret.txt",
        "/static/%2e%2e/secret.txt",
        "/static/..%2fsecret.txt",
        "/static/%2E%2E%2Fsecret.txt",
    ])
    async def test_traversal(self, static_root: Path, run_handler, path: str):
        """Test .. escapes, plain and percent-encoded, give 404."""
        data = await run_handler(StaticFile(get(path), static_root))

        assert data == await run_handler(NotFound())
        assert b"top secret" not in data

    @pytest.mark.asyncio
    async def test_absolute_name(self, static_root: Path, run_handler):
        """Test an absolute path after the marker gives 404."""
        secret = static_root.parent / "secret.txt"
        data = await run_handler(StaticFile(get(f"/static/{secret}"), static_root))

        assert data == await run_handler(NotFound())

    @pytest.mark.asyncio
    @pytest.mark.skipif(not hasattr(os, "symlink") or os.name != "posix", reason="needs symlinks")
    async def test_symlink_escape(self, static_root: Path, run_handler):
        """Test a symlink inside the root pointing outside gives 404."""
        (static_root / "link.txt").symlink_to(static_root.parent / "secret.txt")

        data = await run_handler(StaticFile(get("/static/link.txt"), static_root))
        assert data == await run_handler(NotFound())

    @pytest.mark.asyncio
    async def test_nul_byte(self, static_root: Path, run_handler):
        """Test an embedded NUL byte gives 404 instead of raising."""
        data = await run_handler(StaticFile(get("/static/index.html%00.txt"), static_root))
        assert data == await run_handler(NotFound())

    @pytest.mark.asyncio
    async def test_traversal_logged(self, static_root: Path, run_handler, caplog):
        """Test escape attempts are logged as warnings."""
        with caplog.at_level("WARNING", logger="pyresponder.handlers.static"):
            await run_handler(StaticFile(get("/static/../secret.txt"), static_root))

        assert "Path traversal attempt" in caplog.text


class TestMultipleMatches:
    """Only the first /static/ token is served."""

    @pytest.mark.asyncio
    async def test_one_response(self, static_root: Path, run_handler, parse_response):
        """Test two matching tokens still yield a single response."""
        raw = (
            b"GET /static/index.html HTTP/1.1\r\n"
            b"X-Also: /static/style.css\r\n"
            b"\r\n"
        )
        data = await run_handler(StaticFile(raw, static_root))

        assert data.count(b"HTTP/1.1 ") == 1
        assert parse_response(data)[2] == b"<h1>Hello</h1>"

    @pytest.mark.asyncio
    async def test_first_match_missing(self, static_root: Path, run_handler):
        """Test that a missing first match is a 404 even if a later one exists."""
        raw = (
            b"GET /static/missing.css HTTP/1.1\r\n"
            b"X-Also: /static/style.css\r\n"
            b"\r\n"
        )
        assert await run_handler(StaticFile(raw, static_root)) == await run_handler(NotFound())


class TestAssetName:
    """Tests for name extraction."""

    def test_asset_name(self, static_root: Path):
        """Test the relative name after the marker."""
        assert StaticFile(get("/static/a/b.css?x=1"), static_root).asset_name() == "a/b.css"

    def test_no_match(self, static_root: Path):
        """Test None when no token matches."""
        assert StaticFile(get("/"), static_root).asset_name() is None

    def test_resolve_rejects_root(self, static_root: Path):
        """Test that the root itself is not a servable asset."""
        assert StaticFile(b"", static_root).resolve(".") is None
        assert StaticFile(b"", static_root).resolve("") is None

    def test_resolve_regular_files_only(self, static_root: Path):
        """Test directories are rejected and files inside the root accepted."""
        handler = StaticFile(b"", static_root)

        assert handler.resolve("docs") is None
        assert handler.resolve("docs/guide.txt") == (static_root / "docs" / "guide.txt").resolve()

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs POSIX FIFOs")
    def test_resolve_rejects_fifo(self, static_root: Path):
        """Test a named pipe is not a servable asset."""
        os.mkfifo(static_root / "pipe.txt")
        assert StaticFile(b"", static_root).resolve("pipe.txt") is None
