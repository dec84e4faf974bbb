"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer          accepts TCP connections                     │
    │        │                                                             │
    │        ▼                                                             │
    │   Connection            one accepted client: rfile / wfile / close  │
    │        │                                                             │
    │        ▼                                                             │
    │   WebWorker thread      (webworker.worker) one per connection       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

THREAD-PER-CONNECTION: every accepted connection gets its own thread.
Threads share no mutable state, so there are no locks. There is also no
admission limit: a burst of clients means a burst of threads.

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # Accepts connections
    "Connection",       # Wrapper for one client socket
    "ConnectionState",  # Connection lifecycle states
]
