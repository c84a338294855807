"""
=============================================================================
WATCH: LONG-POLL UNTIL A FILE CHANGES
=============================================================================

``WATCH /path HTTP/1.1`` resolves like GET, but the response is held back
until the file's modification time changes. A page can use it to reload
itself whenever its source is saved:

    Browser                         Server
       │  WATCH /notes/today.md        │
       │ ─────────────────────────────►│  baseline = mtime(today.md)
       │                               │  (connection handed to a thread,
       │            ... silence ...    │   server goes back to accept())
       │                               │
       │                               │  editor saves today.md
       │   HTTP/1.1 200 OK + contents  │  mtime != baseline
       │ ◄─────────────────────────────│
       │                               │  close

=============================================================================
SESSION STATE MACHINE
=============================================================================

    ARMED(path, baseline)
       │
       ├── every ``interval`` seconds: stat(path)
       │       │
       │       ├── mtime == baseline  → stay ARMED
       │       ├── mtime != baseline  → CHANGED   → 200 (GET semantics)
       │       └── stat fails         → UNREADABLE → 500
       │
       └── CLOSED after exactly one response

There is no cancellation and no deadline. A client that gives up is only
noticed when the final response fails to send.

=============================================================================
"""

import logging
import os
import threading
import time
from pathlib import Path

from ..core.connection import Connection, ConnectionState
from ..http.request import HTTPMethod
from ..http.response import HTTPResponse, internal_server_error
from .static import ResolvedTarget, StaticFileHandler


logger = logging.getLogger(__name__)


def read_mtime(path: Path) -> int:
    """Modification time in nanoseconds. Raises OSError if unreadable."""
    return os.stat(path).st_mtime_ns


class WatchSession(threading.Thread):
    """
    Background thread that owns one connection until its file changes.

    Once ``start()`` is called the session is the only code that touches
    ``conn``; the thread closes it after writing its single response.
    Daemon thread: it dies with the process.
    """

    def __init__(
        self,
        conn: Connection,
        target: ResolvedTarget,
        baseline_mtime: int,
        handler: StaticFileHandler,
        interval: float = 0.1,
    ):
        super().__init__(name=f"watch-{conn.id}", daemon=True)
        self.conn = conn
        self.target = target
        self.baseline_mtime = baseline_mtime
        self.handler = handler
        self.interval = interval

    def run(self):
        self.conn.state = ConnectionState.WATCHING
        try:
            response = self._wait_for_change()
            if not self.conn.send_response(response.to_bytes()):
                logger.warning(f"[{self.conn.id}] Watch response for {self.target.path} was not delivered")
        finally:
            self.conn.close()

    def _wait_for_change(self) -> HTTPResponse:
        path = self.target.path
        while True:
            time.sleep(self.interval)
            try:
                mtime = read_mtime(path)
            except OSError as e:
                logger.warning(f"[{self.conn.id}] Watched file became unreadable: {path}: {e}")
                return internal_server_error()

            if mtime != self.baseline_mtime:
                logger.info(f"[{self.conn.id}] Change detected: {path}")
                return self.handler.serve(self.target, HTTPMethod.GET)


def start_watch(
    conn: Connection,
    target: ResolvedTarget,
    handler: StaticFileHandler,
    interval: float = 0.1,
) -> WatchSession | None:
    """
    Arm a watch on ``target`` and hand ``conn`` over to it.

    Returns:
        The running session, or None if the file's mtime could not be read.
        In that case the caller still owns ``conn`` and should answer 500.
    """
    try:
        baseline = read_mtime(target.path)
    except OSError as e:
        logger.error(f"[{conn.id}] Cannot watch {target.path}: {e}")
        return None

    session = WatchSession(conn, target, baseline, handler, interval)
    session.start()
    logger.debug(f"[{conn.id}] Watching {target.path} (every {interval}s)")
    return session
