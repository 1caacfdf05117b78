"""
=============================================================================
CONTENT RESOLVER
=============================================================================

Maps a request path to a file under the content root and reads it.

=============================================================================
PATH → FILE
=============================================================================

    Request path          Kind    File read                   Content-Type
    ────────────          ────    ─────────                   ────────────
    /                     HTML    website/home.html           text/html
    /about                HTML    website/about.html          text/html
    /css/site.css         CSS     website/css/site.css        text/css
    /img/logo.png         PNG     website/img/logo.png        image/png
    /favicon.ico          ICO     website/favicon.ico         image/vnd.microsoft.icon

Only HTML paths get ".html" appended; CSS and images must name the file
exactly. Only a bare "/" is rewritten to the home page.

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

Joining the root and a client-supplied path naively lets a request walk
out of the site:

    GET /../../etc/passwd.css   →   website/../../etc/passwd.css

So every target is resolved (following .. and symlinks) and must still be
inside the content root. Anything outside is answered like a missing file,
404, so the response doesn't reveal what exists elsewhere on disk.

The check can be turned off with allow_path_traversal=True to reproduce
the old behaviour; don't do that on a network-facing server.

=============================================================================
ERRORS
=============================================================================

    FileNotFoundError, IsADirectoryError,       ┐
    NotADirectoryError, PermissionError,        ├──►  ResourceNotFound (404)
    invalid UTF-8 in a text file,               │
    path the OS rejects (NUL byte, name too     │
    long, symlink loop), traversal              ┘

    any other OSError while reading             ───►  ResolverError (500)

=============================================================================
"""

import errno
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..http.content_types import ResourceKind
from ..http.errors import ResolverError, ResourceNotFound

logger = logging.getLogger(__name__)

# Path the client asked for can never be opened
_UNOPENABLE = frozenset({errno.ENAMETOOLONG, errno.ELOOP})


@dataclass(frozen=True)
class Resource:
    """
    A resolved file, ready to be framed into a response.

    Attributes:
        content_type: Value for the Content-Type header.
        payload: The file's bytes, exactly as stored.
        is_binary: Payload must be written without any text step.
    """

    content_type: str
    payload: bytes
    is_binary: bool = False


class ContentResolver:
    """
    Resolves request paths to Resources under a content root.

    The resolver holds no per-request state and is shared by all workers.

    Usage:
        resolver = ContentResolver("website")
        resource = resolver.resolve("/about")    # reads website/about.html
        resource.content_type                    # "text/html"
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        home_page: str = "/home",
        allow_path_traversal: bool = False,
    ):
        """
        Initialize the resolver.

        Args:
            root_dir: Directory all served files live under.
            home_page: Path used for a bare "/" request.
            allow_path_traversal: Skip the stay-inside-the-root check.
        """
        self.root_dir = Path(root_dir)
        self.home_page = home_page
        self.allow_path_traversal = allow_path_traversal

        # Resolved once; compared against every target
        self._resolved_root = self.root_dir.resolve()

    def resolve(self, path: str) -> Resource:
        """
        Resolve a request path and read the file behind it.

        Args:
            path: Request path as sent by the client, starting with "/".

        Returns:
            The Resource to serve.

        Raises:
            ResourceNotFound: No servable file for this path.
            ResolverError: The file exists but reading it failed unexpectedly.
        """
        kind = ResourceKind.from_path(path)

        if kind.appends_extension:
            if path == "/":
                path = self.home_page
            target = self._locate(path + ".html")
        else:
            target = self._locate(path)

        payload = self._read(target, kind)
        return Resource(
            content_type=kind.content_type,
            payload=payload,
            is_binary=kind.is_binary,
        )

    def _locate(self, relative: str) -> Path:
        """
        Turn "<path>" into "<root><path>", refusing paths outside the root.
        """
        target = self.root_dir / relative.lstrip("/")

        if self.allow_path_traversal:
            return target

        try:
            target.resolve().relative_to(self._resolved_root)
        except ValueError:
            # Outside the root, or a path the OS can't represent
            logger.warning(f"Refused path outside content root: {relative!r}")
            raise ResourceNotFound(relative)
        except RuntimeError as e:
            # Symlink loop (pathlib before 3.13)
            logger.debug(f"Not found: {relative!r} ({e})")
            raise ResourceNotFound(relative) from e

        return target

    def _read(self, target: Path, kind: ResourceKind) -> bytes:
        """Read the target as raw bytes (binary kinds) or validated UTF-8."""
        try:
            data = target.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError) as e:
            logger.debug(f"Not found: {target} ({e.__class__.__name__})")
            raise ResourceNotFound(str(target)) from e
        except ValueError as e:
            # e.g. "embedded null byte"
            raise ResourceNotFound(str(target)) from e
        except OSError as e:
            if e.errno in _UNOPENABLE:
                logger.debug(f"Not found: {target} ({errno.errorcode[e.errno]})")
                raise ResourceNotFound(str(target)) from e
            logger.error(f"I/O error reading {target}: {e}")
            raise ResolverError(str(target)) from e

        if not kind.is_binary:
            try:
                data.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.warning(f"Not valid UTF-8, refusing to serve as {kind.content_type}: {target}")
                raise ResourceNotFound(str(target)) from e

        return data
