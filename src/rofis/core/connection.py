"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket with the small API the server needs:
buffered line reading, whole-response writing and an orderly close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

A request line can arrive split over several recv() calls, and one recv()
can return the request line AND some headers at once:

    recv() → b"GET /docs/gui"
    recv() → b"de/ HTTP/1.1\r\nHost: local"
    recv() → b"host\r\n\r\n"

``readline()`` hides this: it keeps whatever was received past the end of
the current line in ``_buffer`` and hands it out on the next call.

=============================================================================
CONNECTION STATES
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED
                             │                        ▲
                             └──► WATCHING ───────────┘
                                  (owned by a watch thread until the
                                   watched file changes)

One request per connection: there is no keep-alive state.

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, used for logging and sanity checks."""

    NEW = "new"                # Just accepted
    READING = "reading"        # Reading the request head
    PROCESSING = "processing"  # Resolving the path
    WATCHING = "watching"      # Handed to a watch session
    WRITING = "writing"        # Sending the response
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 8192
    timeout: float | None = None

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        # Accepted sockets may inherit the listener's accept timeout;
        # reset to blocking and apply our own read timeout instead.
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client(self) -> str:
        """Client address as "ip:port"."""
        return f"{self.address[0]}:{self.address[1]}"

    @property
    def age(self) -> float:
        """Connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def readline(self, limit: int = -1) -> bytes:
        """
        Read one line, up to and including b"\\n".

        Mirrors ``io.BufferedReader.readline``: returns at most ``limit``
        bytes when ``limit`` is positive, and returns a short line without
        b"\\n" if the client closed the connection first.

        Raises:
            socket.timeout: The client sent nothing for ``timeout`` seconds.
            OSError: The socket failed.
        """
        self.state = ConnectionState.READING

        while True:
            newline = self._buffer.find(b"\n")
            if newline != -1:
                end = newline + 1
                if 0 < limit < end:
                    end = limit
                break
            if 0 < limit <= len(self._buffer):
                end = limit
                break

            chunk = self.socket.recv(self.buffer_size)
            if not chunk:
                end = len(self._buffer)   # EOF: hand back what we have
                break
            self._buffer += chunk

        line, self._buffer = self._buffer[:end], self._buffer[end:]
        return line

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send a complete response.

        Uses sendall() so a partially filled send buffer is not mistaken
        for success. Nothing is retried.

        Returns:
            True if every byte was handed to the kernel, False if the client
            went away (the failure is logged here).
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send to {self.client} failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) first so the client sees a clean FIN after the
        response, then release the descriptor. Safe to call twice.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")
