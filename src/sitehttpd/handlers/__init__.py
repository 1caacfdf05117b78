"""
=============================================================================
HANDLERS MODULE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Class               │ Job                                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │ ContentResolver     │ Request path → Resource (file under the root) │
    │ ConnectionHandler   │ Parse → resolve → write, for one connection   │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .static import ContentResolver, Resource
from .connection_handler import ConnectionHandler

__all__ = [
    "ContentResolver",
    "Resource",
    "ConnectionHandler",
]
