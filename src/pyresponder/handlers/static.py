"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves files from the static asset root for requests under /static/.

=============================================================================
FLOW
=============================================================================

    Request: GET /static/css/style.css?v=3 HTTP/1.1

    1. Split the raw request on whitespace
           ["GET", "/static/css/style.css?v=3", "HTTP/1.1", ...]

    2. Take the FIRST token that starts with /static/
           "/static/css/style.css?v=3"

    3. Strip the marker, the query string and the fragment,
       then percent-decode
           "css/style.css"

    4. Resolve under the static root and make sure it stays there
           /srv/app/static/css/style.css   ✓ inside root

    5. Read the file
           found     → 200, Content-Type from the file name, exact length
           not found → NotFound handler (404)

Only the first matching token is served. A request that happens to carry
"/static/..." in several places still gets exactly one response.

=============================================================================
SECURITY: PATH CONFINEMENT
=============================================================================

The asset name comes straight from the client, so it must not be able to
name anything outside the static root:

    /static/../secret.txt          → resolves above root     → 404
    /static/%2e%2e/secret.txt      → same after decoding     → 404
    /static//etc/passwd            → absolute name           → 404
    /static/link-to-outside        → symlink resolved first  → 404

Path.resolve() normalizes ".." and follows symlinks; relative_to() then
fails for anything that ended up outside the root. Escapes are logged
but the client only ever sees the ordinary 404. Every other way a read
can fail (missing file, permission denied, directory, FIFO) is a 404 too.

=============================================================================
"""

import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Union

import aiofiles

from ..core.connection import Connection
from ..http.content_types import infer_content_type
from ..http.request import decode_path
from ..http.response import ResponseBuilder
from ..http.status_codes import HTTPStatus
from ..state import SharedState
from .base import Handler
from .pages import NotFound


logger = logging.getLogger(__name__)

STATIC_PREFIX = "/static/"


class StaticFile(Handler):
    """
    Handler for static asset requests.

    Args:
        raw: Raw request bytes.
        root_dir: Static asset root. A missing root just means every
                  request for an asset is a 404.
        url_prefix: Marker a path must start with.
    """

    def __init__(
        self,
        raw: bytes,
        root_dir: Union[str, Path] = "static",
        url_prefix: str = STATIC_PREFIX,
    ):
        self.raw = raw
        self.root_dir = Path(root_dir)
        self.url_prefix = url_prefix

    def __repr__(self) -> str:
        return f"StaticFile(root_dir={str(self.root_dir)!r})"

    async def handle(self, conn: Connection, state: SharedState) -> None:
        name = self.asset_name()
        path = self.resolve(name) if name is not None else None

        if path is None:
            await NotFound().handle(conn, state)
            return

        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
        except (OSError, ValueError) as e:
            logger.debug(f"[{conn.id}] Can't read static asset {name!r}: {e}")
            await NotFound().handle(conn, state)
            return

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .content_type(infer_content_type(PurePosixPath(name).name))
            .body(content)
            .build())

        await conn.send_response(response)

    def asset_name(self) -> Optional[str]:
        """
        Extract the requested asset's name relative to the static root.

        Returns:
            The decoded relative name, or None if no token starts with
            the static prefix.
        """
        text = self.raw.decode("utf-8", errors="replace")

        for token in text.split():
            if not token.startswith(self.url_prefix):
                continue

            name = token[len(self.url_prefix):]
            name = name.split("#", 1)[0].split("?", 1)[0]
            return decode_path(name)

        return None

    def resolve(self, name: str) -> Optional[Path]:
        """
        Map a relative asset name to a filesystem path inside the root.

        Returns:
            The resolved path, or None if the name is empty, escapes
            the root, or is not a regular file.
        """
        if not name:
            return None

        try:
            root = self.root_dir.resolve()
            full_path = (root / name).resolve()
        except (OSError, RuntimeError, ValueError):
            # Symlink loops, embedded NUL bytes and the like
            return None

        try:
            full_path.relative_to(root)
        except ValueError:
            logger.warning(f"Path traversal attempt: {name!r}")
            return None

        # Regular files only: directories, FIFOs, sockets and devices are 404
        if not full_path.is_file():
            return None

        return full_path
