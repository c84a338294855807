"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables in one dataclass.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── rofis --port 3000 --root ./site                            │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── ROFIS_PORT=3000 rofis                                      │
    │                                                                      │
    │   3. Defaults below                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Configuration is validated once, at startup. A typo in the root directory
should stop the server before it binds a port, not on the first request.

=============================================================================
"""

import os
from dataclasses import dataclass


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    REQUEST SETTINGS
    - max_request_size

    CONTENT SETTINGS
    - root_dir, index_file, watch_interval

    LOGGING
    - log_level
    """

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """The port number to listen on. 0 lets the OS pick one."""

    backlog: int = 128
    """Maximum number of queued, not yet accepted connections."""

    buffer_size: int = 8192
    """Bytes requested per recv() call."""

    timeout: float | None = None
    """
    Per-connection read timeout in seconds. None = wait forever.
    Requests are served one at a time, so a stalled client keeps everyone
    else waiting until it sends or disconnects. Set this to bound that.
    """

    max_request_size: int = 64 * 1024
    """Upper bound on request line plus headers. There is never a body."""

    root_dir: str = "."
    """Directory tree to serve. Defaults to the current working directory."""

    index_file: str = "index.html"
    """File served for paths ending in "/"."""

    watch_interval: float = 0.1
    """Seconds between mtime checks in a WATCH session."""

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        ROFIS_HOST            Server host (default: 127.0.0.1)
        ROFIS_PORT            Server port (default: 8080)
        ROFIS_ROOT            Directory to serve (default: .)
        ROFIS_WATCH_INTERVAL  WATCH poll interval in seconds (default: 0.1)
        ROFIS_LOG_LEVEL       Logging level (default: INFO)
        """
        return cls(
            host=os.getenv("ROFIS_HOST", "127.0.0.1"),
            port=int(os.getenv("ROFIS_PORT", "8080")),
            root_dir=os.getenv("ROFIS_ROOT", "."),
            watch_interval=float(os.getenv("ROFIS_WATCH_INTERVAL", "0.1")),
            log_level=os.getenv("ROFIS_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_request_size < 1024:
            raise ValueError("max_request_size must be >= 1024")

        if self.watch_interval <= 0:
            raise ValueError("watch_interval must be > 0")

        if not self.index_file or "/" in self.index_file:
            raise ValueError(f"index_file must be a plain file name: {self.index_file!r}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if not os.path.isdir(self.root_dir):
            raise ValueError(f"Root directory does not exist: {self.root_dir}")
