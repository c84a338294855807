"""
=============================================================================
ROFIS - Read-Only FIle Server
=============================================================================

A small HTTP/1.1 file server built directly on sockets. It serves a
directory tree read-only, and finds files even when the client only knows
the TAIL of their directory path.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         ROFIS AT A GLANCE                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. SUFFIX RESOLUTION                                              │
    │      GET /guide/intro.html finds <root>/docs/v2/guide/intro.html    │
    │      as long as only one indexed directory ends with "guide"        │
    │                                                                      │
    │   2. REBUILD ON MISS                                                │
    │      Directories created after startup are picked up on the first   │
    │      request that misses                                             │
    │                                                                      │
    │   3. WATCH                                                          │
    │      WATCH /notes.md answers only once notes.md changes on disk     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    rofis/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m rofis)
    ├── server.py            # FileServer: accept → parse → resolve → respond
    ├── config.py            # ServerConfig dataclass
    ├── core/
    │   ├── suffix_index.py  # Reversed-path trie over the directory tree
    │   ├── socket_server.py # TCP accept loop
    │   └── connection.py    # Client socket wrapper
    ├── http/
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # Response framing
    │   ├── status_codes.py  # The status codes we send
    │   └── mime_types.py    # Content-Type guessing
    └── handlers/
        ├── static.py        # Path resolution and GET/HEAD responses
        └── watch.py         # WATCH long-poll sessions

=============================================================================
QUICK START
=============================================================================

    from rofis import FileServer, ServerConfig

    FileServer(ServerConfig(port=8080, root_dir="./site")).run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import FileServer
from .config import ServerConfig
from .core import SuffixIndex

__all__ = ["FileServer", "ServerConfig", "SuffixIndex", "__version__"]
