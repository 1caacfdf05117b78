"""
=============================================================================
RESOURCE KINDS AND CONTENT TYPES
=============================================================================

The site only serves four kinds of files. The kind decides three things:

    ┌──────────┬────────────────────────────┬─────────┬───────────────────┐
    │ Kind     │ Content-Type               │ Binary? │ File on disk      │
    ├──────────┼────────────────────────────┼─────────┼───────────────────┤
    │ CSS      │ text/css                   │ no      │ <root><path>      │
    │ PNG      │ image/png                  │ yes     │ <root><path>      │
    │ ICO      │ image/vnd.microsoft.icon   │ yes     │ <root><path>      │
    │ HTML     │ text/html                  │ no      │ <root><path>.html │
    └──────────┴────────────────────────────┴─────────┴───────────────────┘

=============================================================================
CLASSIFICATION ORDER
=============================================================================

Paths are matched by substring, in this fixed order:

    ".css"  →  ".png"  →  ".ico"  →  anything else is HTML

So "/theme.css" is CSS, "/logo.png" is PNG, and "/about" is HTML
(served from about.html). A path like "/a.css/b.png" is CSS because
".css" is checked first.

Binary kinds must never go through a text decode: PNG and ICO files are
not valid UTF-8 and would be corrupted.
=============================================================================
"""

from enum import Enum


class ResourceKind(Enum):
    """
    Kind of resource a request path points at.

    Each member's value is (content_type, is_binary).
    """

    CSS = ("text/css", False)
    PNG = ("image/png", True)
    ICO = ("image/vnd.microsoft.icon", True)
    HTML = ("text/html", False)

    @property
    def content_type(self) -> str:
        return self.value[0]

    @property
    def is_binary(self) -> bool:
        return self.value[1]

    @property
    def appends_extension(self) -> bool:
        """HTML paths are extensionless in URLs; ".html" is added on disk."""
        return self is ResourceKind.HTML

    @classmethod
    def from_path(cls, path: str) -> "ResourceKind":
        """
        Classify a request path.

        Examples:
            >>> ResourceKind.from_path("/style.css")
            <ResourceKind.CSS: ('text/css', False)>
            >>> ResourceKind.from_path("/favicon.ico").content_type
            'image/vnd.microsoft.icon'
            >>> ResourceKind.from_path("/")
            <ResourceKind.HTML: ('text/html', False)>
        """
        for marker, kind in _MATCH_ORDER:
            if marker in path:
                return kind
        return cls.HTML


_MATCH_ORDER = (
    (".css", ResourceKind.CSS),
    (".png", ResourceKind.PNG),
    (".ico", ResourceKind.ICO),
)
