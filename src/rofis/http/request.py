"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Reads exactly one HTTP/1.1 request head from a byte stream.

The server only cares about two things in a request: the METHOD and the
PATH. Everything else is read and thrown away.

    ┌─────────────────────────────────────────────────────────────────┐
    │  GET /docs/guide/ HTTP/1.1\r\n     ← Request line (parsed)      │
    │  Host: localhost:8080\r\n          ← Header (discarded)         │
    │  User-Agent: curl/8.5.0\r\n        ← Header (discarded)         │
    │  \r\n                              ← Blank line: stop reading   │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
TWO KINDS OF FAILURE
=============================================================================

    RECOGNIZED MALFORMED INPUT              TRANSPORT FAILURE
    ──────────────────────────              ─────────────────
    Bad protocol token, unknown method,     Client hung up mid-request,
    path not starting with "/".             socket error, oversized head.

    → HTTPParseError(status_code)           → ConnectionError / OSError /
    → server answers 400 or 405               ValueError
                                            → server logs and abandons
                                              the connection

=============================================================================
PATH NORMALIZATION
=============================================================================

The raw path is resolved against "http://localhost/" so the usual URL
rules apply uniformly:

    /a/./b/../c.txt?x=1#top   →   /a/c.txt
    /my%20docs/               →   /my docs/
    /../../etc/passwd         →   /etc/passwd

Dot segments can never climb above "/", and the query string and fragment
are dropped.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Protocol
from urllib.parse import unquote, urljoin, urlsplit

from .response import HTTPResponse, error_response
from .status_codes import HTTPStatus


class HTTPMethod(Enum):
    """Methods understood by the server."""

    GET = "GET"
    HEAD = "HEAD"
    WATCH = "WATCH"     # Non-standard: long-poll until the file changes


class HTTPParseError(Exception):
    """
    Raised for a recognized malformed request.

    Carries the status the client should receive, so the server can answer
    instead of just dropping the connection.
    """

    def __init__(self, message: str, status_code: HTTPStatus = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code

    def to_response(self) -> HTTPResponse:
        return error_response(self.status_code)


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed request.

    Attributes:
        method: GET, HEAD or WATCH.
        path:   Normalized, percent-decoded path. Always starts with "/".
    """

    method: HTTPMethod
    path: str

    @property
    def is_head(self) -> bool:
        return self.method is HTTPMethod.HEAD

    @property
    def is_watch(self) -> bool:
        return self.method is HTTPMethod.WATCH


class LineReader(Protocol):
    """Anything with a file-like ``readline(limit)``: a Connection or BytesIO."""

    def readline(self, limit: int = -1) -> bytes: ...


class RequestParser:
    """
    Reads one request head from a stream.

    Usage:
        parser = RequestParser()
        try:
            request = parser.read(conn)
        except HTTPParseError as e:
            conn.send_response(e.to_response().to_bytes())
    """

    PROTOCOL_SUFFIX = " HTTP/1.1\r\n"
    BASE_URL = "http://localhost/"

    def __init__(self, max_request_size: int = 64 * 1024):
        """
        Args:
            max_request_size: Upper bound on request line plus headers, in
                              bytes. Larger heads raise ValueError.
        """
        self.max_request_size = max_request_size

    def read(self, stream: LineReader) -> HTTPRequest:
        """
        Read the request line and headers from ``stream``.

        The headers are only consumed once the request line is known to be
        good; a bad request line is answered without waiting for the rest.

        Raises:
            HTTPParseError: Request line is malformed (400) or uses an
                            unsupported method (405).
            ConnectionError: Stream ended before the blank line.
            ValueError: Request head exceeds ``max_request_size``.
        """
        budget = self.max_request_size
        line = self._read_line(stream, budget)
        budget -= len(line)

        try:
            text = line.decode("utf-8")
        except UnicodeDecodeError:
            raise HTTPParseError("Request line is not valid UTF-8")

        method, path = self._parse_request_line(text)

        # Headers are irrelevant to a static file server: skip to the blank line
        while True:
            header = self._read_line(stream, budget)
            budget -= len(header)
            if header == b"\r\n":
                break

        return HTTPRequest(method=method, path=path)

    def parse(self, data: bytes) -> HTTPRequest:
        """Parse a complete request head held in memory."""
        return self.read(BytesIO(data))

    def _read_line(self, stream: LineReader, budget: int) -> bytes:
        if budget <= 0:
            raise ValueError(f"Request head exceeds {self.max_request_size} bytes")

        line = stream.readline(budget)
        if line.endswith(b"\n"):
            return line
        if len(line) >= budget:
            raise ValueError(f"Request head exceeds {self.max_request_size} bytes")
        raise ConnectionError("Connection closed before end of request head")

    def _parse_request_line(self, line: str) -> tuple[HTTPMethod, str]:
        """
        Split "METHOD /path HTTP/1.1\\r\\n" into method and normalized path.

        The checks run in a fixed order: protocol token first, then method,
        then path. A POST with a bad protocol is therefore a 400, not a 405.
        """
        if not line.endswith(self.PROTOCOL_SUFFIX):
            raise HTTPParseError(f"Unsupported protocol in request line: {line!r}")

        method_token, sep, rest = line.partition(" ")
        try:
            method = HTTPMethod(method_token) if sep else None
        except ValueError:
            method = None
        if method is None:
            raise HTTPParseError(
                f"Method not allowed: {method_token!r}",
                status_code=HTTPStatus.METHOD_NOT_ALLOWED,
            )

        if not rest.startswith("/"):
            raise HTTPParseError(f"Request target must start with '/': {rest!r}")

        raw_path = rest[:rest.find(" HTTP/1.1\r\n")]
        return method, self._normalize_path(raw_path)

    def _normalize_path(self, raw_path: str) -> str:
        try:
            path = urlsplit(urljoin(self.BASE_URL, raw_path)).path
        except ValueError as e:
            raise HTTPParseError(f"Invalid request target {raw_path!r}: {e}")

        # Escaped bytes that are not UTF-8 survive as surrogates, which
        # os.fsencode() turns back into the same bytes on disk.
        path = unquote(path, errors="surrogateescape") or "/"
        if "\x00" in path:
            raise HTTPParseError("Request path contains a NUL byte")
        return path


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(data: bytes, max_size: int = 64 * 1024) -> HTTPRequest:
    """Parse a request head from bytes in one call."""
    return RequestParser(max_request_size=max_size).parse(data)
