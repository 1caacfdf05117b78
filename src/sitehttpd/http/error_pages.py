"""
=============================================================================
PRE-RENDERED ERROR PAGES
=============================================================================

Error responses are rendered ONCE when the server starts and then shared,
read-only, by every worker thread.

    startup                               per connection
    ───────                               ──────────────
    ErrorPages.load(root)                 error_pages.payload(kind)
      │                                     │
      ├── 400: always a bare status         └── same bytes object every
      ├── 404: root/404.html if present         time, no locking needed
      └── 500: root/500.html if present

When a page file is missing (or unreadable) the kind falls back to a bare
status line with no headers and no body:

    HTTP/1.1 404 NOT FOUND\r\n\r\n

When it is present the page is served like any HTML resource:

    HTTP/1.1 404 NOT FOUND\r\n
    Content-Type: text/html\r\n
    Content-Length: 1234\r\n
    \r\n
    <!DOCTYPE html>...

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Union

from .content_types import ResourceKind
from .errors import ErrorKind
from .response import HTTPResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorPages:
    """
    Immutable map from ErrorKind to the bytes sent for it.

    Build it with ErrorPages.load() at startup, or ErrorPages.bare() when
    no custom pages are wanted.
    """

    payloads: Mapping[ErrorKind, bytes]

    def payload(self, kind: ErrorKind) -> bytes:
        """Bytes to write for a failed connection of this kind."""
        return self.payloads[kind]

    def has_page(self, kind: ErrorKind) -> bool:
        """True if a custom HTML page was loaded for this kind."""
        return self.payloads[kind] != _bare(kind)

    @classmethod
    def bare(cls) -> "ErrorPages":
        """Status-line-only responses for every kind."""
        return cls(MappingProxyType({kind: _bare(kind) for kind in ErrorKind}))

    @classmethod
    def load(
        cls,
        root_dir: Union[str, Path],
        not_found_page: Optional[str] = "404.html",
        internal_error_page: Optional[str] = "500.html",
    ) -> "ErrorPages":
        """
        Read the site's error pages from the content root.

        Args:
            root_dir: Content root directory.
            not_found_page: File name of the 404 page (None to disable).
            internal_error_page: File name of the 500 page (None to disable).

        Returns:
            Fully rendered ErrorPages.
        """
        root = Path(root_dir)
        pages = {
            ErrorKind.READ_FAILED: None,
            ErrorKind.NOT_FOUND: not_found_page,
            ErrorKind.INTERNAL_ERROR: internal_error_page,
        }

        payloads = {}
        for kind, filename in pages.items():
            page = _read_page(root / filename) if filename else None
            if page is None:
                payloads[kind] = _bare(kind)
            else:
                logger.info(f"Loaded {kind.status.value} page from {filename}")
                payloads[kind] = HTTPResponse.with_payload(
                    ResourceKind.HTML.content_type, page, status=kind.status
                ).to_bytes()

        return cls(MappingProxyType(payloads))


def _bare(kind: ErrorKind) -> bytes:
    return HTTPResponse(status=kind.status).to_bytes()


def _read_page(path: Path) -> Optional[bytes]:
    """Read an HTML page as validated UTF-8, or None if it can't be used."""
    try:
        data = path.read_bytes()
        data.decode("utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring error page {path}: {e}")
        return None
    return data
