"""
=============================================================================
FILE SERVER
=============================================================================

Ties the pieces together:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          FileServer                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   run()                                                              │
    │     ├──► configure logging                                          │
    │     ├──► SuffixIndex.build(root)      (failure here is fatal)       │
    │     └──► SocketServer.start(_handle_connection)                      │
    │                                                                      │
    │   _handle_connection(conn)            (one client at a time)        │
    │     ├──► RequestParser.read(conn)                                    │
    │     ├──► PathResolver.resolve(index, path)                           │
    │     │       └── 404? rebuild index ONCE, resolve again              │
    │     ├──► GET / HEAD ──► StaticFileHandler.serve() ──► send          │
    │     └──► WATCH ───────► WatchSession owns conn from here on         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ONE REQUEST AT A TIME
=============================================================================

Requests are handled on the accepting thread, one after another. Only
this thread reads or replaces the index, so it needs no lock. WATCH
sessions run on their own threads but read the filesystem directly and
never see the index.

=============================================================================
REBUILD ON MISS
=============================================================================

The index is a snapshot taken at startup. A directory created later is
invisible until the index is rebuilt, so every 404 triggers one full
rescan followed by one more resolution attempt. A second 404 is final.

=============================================================================
"""

import logging
from typing import Optional

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState, SuffixIndex
from .http import HTTPRequest, HTTPParseError, HTTPResponse, RequestParser, internal_server_error
from .handlers import (
    PathResolver,
    StaticFileHandler,
    ResolvedTarget,
    ResolutionError,
    NotFoundError,
    start_watch,
)


logger = logging.getLogger(__name__)


class FileServer:
    """
    Read-only HTTP file server with suffix path resolution.

    Usage:
        server = FileServer(ServerConfig(port=8080, root_dir="./site"))
        server.run()   # Blocks until Ctrl+C
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults serve the current
                    directory on 127.0.0.1:8080.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(max_request_size=self.config.max_request_size)
        self._resolver = PathResolver(index_file=self.config.index_file)
        self._static = StaticFileHandler()

        # Built in run(); replaced wholesale by _rebuild_index()
        self._index: Optional[SuffixIndex] = None

    @property
    def index(self) -> Optional[SuffixIndex]:
        return self._index

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Build the index and serve until shutdown() or a signal.

        Raises:
            OSError: The root directory could not be indexed or the port
                     could not be bound.
        """
        self._setup_logging()

        try:
            self._index = SuffixIndex.build(self.config.root_dir)
        except OSError as e:
            logger.critical(f"Cannot index {self.config.root_dir}: {e}")
            raise
        logger.info(f"Serving {self._index.root} ({len(self._index)} directories indexed)")

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            logger.info("Server stopped")

    def shutdown(self):
        """Ask the accept loop to stop. Running WATCH sessions are left alone."""
        self._socket_server.shutdown()

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_listening(timeout)

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("rofis").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Serve one connection to completion, unless it is handed to a watch.

        Transport errors abandon this connection only; the loop continues.
        """
        handed_off = False
        try:
            handed_off = self._process_connection(conn)
        except TimeoutError:
            logger.warning(f"[{conn.id}] Timed out reading request from {conn.client}")
        except (ConnectionError, ValueError) as e:
            logger.warning(f"[{conn.id}] Dropping connection from {conn.client}: {e}")
        except OSError as e:
            logger.error(f"[{conn.id}] I/O error on connection from {conn.client}: {e}")
        except Exception as e:
            logger.exception(f"[{conn.id}] Unexpected error: {e}")
        finally:
            if not handed_off:
                conn.close()

    def _process_connection(self, conn: Connection) -> bool:
        """
        Parse, resolve and answer one request.

        Returns:
            True if ``conn`` now belongs to a WatchSession.
        """
        try:
            request = self._parser.read(conn)
        except HTTPParseError as e:
            logger.info(f"[{conn.id}] {e.status_code.line}: {e}")
            self._send(conn, e.to_response())
            return False

        conn.state = ConnectionState.PROCESSING
        logger.info(f"[{conn.id}] {request.method.value} {request.path!r}")

        try:
            target = self._resolve(request)
        except ResolutionError as e:
            logger.info(f"[{conn.id}] {e.status_code.line}: {e}")
            self._send(conn, e.to_response())
            return False

        if request.is_watch:
            return self._watch(conn, target)

        self._send(conn, self._static.serve(target, request.method))
        return False

    def _resolve(self, request: HTTPRequest) -> ResolvedTarget:
        """
        Resolve with one rebuild-and-retry on a miss.

        Raises:
            ResolutionError: Still unresolved after the rebuild, or the
                             rebuild itself failed (500).
        """
        try:
            return self._resolver.resolve(self._index, request.path)
        except NotFoundError:
            logger.debug(f"Miss for {request.path!r}, rebuilding index")

        self._rebuild_index()
        return self._resolver.resolve(self._index, request.path)

    def _rebuild_index(self):
        """Replace the index with a fresh scan; keep the old one on failure."""
        try:
            index = SuffixIndex.build(self.config.root_dir)
        except OSError as e:
            logger.error(f"Index rebuild failed, keeping previous index: {e}")
            raise ResolutionError(f"Index rebuild failed: {e}") from e

        logger.debug(f"Index rebuilt: {len(self._index)} -> {len(index)} directories")
        self._index = index

    def _watch(self, conn: Connection, target: ResolvedTarget) -> bool:
        session = start_watch(conn, target, self._static, self.config.watch_interval)
        if session is None:
            self._send(conn, internal_server_error())
            return False
        return True

    def _send(self, conn: Connection, response: HTTPResponse):
        logger.debug(f"[{conn.id}] -> {response.status.line} ({response.length} bytes)")
        conn.send_response(response.to_bytes())

