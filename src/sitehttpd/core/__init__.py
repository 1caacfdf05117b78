"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking and threading plumbing underneath the static site server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Binds the listening socket once at startup                       │
    │  • Runs the accept() loop on the main thread                        │
    │  • Wraps each client socket in a Connection                         │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ Hands off new connections
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Fixed number of worker threads (default 9)                       │
    │  • Workers pull connections from a shared queue                     │
    │  • A failing connection never kills its worker                      │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ Worker processes connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Buffered reader over the client socket                           │
    │  • Best-effort writes, graceful close                               │
    │  • Exactly one request, then closed                                 │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        CONSOLE MONITOR                               │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Reads stdin on its own thread                                    │
    │  • "stop" shuts the server down                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState
from .thread_pool import ThreadPool
from .console import ConsoleMonitor

__all__ = [
    "SocketServer",     # Listening socket + accept loop
    "Connection",       # One client socket, one request
    "ConnectionState",  # NEW → ... → CLOSED
    "ThreadPool",       # Fixed worker threads for concurrency
    "ConsoleMonitor",   # Console "stop" command watcher
]
