"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Builds the bytes written back to the client.

Every response this server produces has the same shape:

    HTTP/1.1 200 OK\r\n                 ← Status line
    Content-Length: 1234\r\n            ← Always present, always exact
    Connection: close\r\n               ← Always present (no keep-alive)
    Content-Type: text/html; ...\r\n    ← Response-specific headers
    \r\n                                ← End of headers
    <body bytes>                        ← Omitted for HEAD

=============================================================================
HEAD RESPONSES
=============================================================================

A HEAD response must announce the size the GET body WOULD have, without
sending it. Rather than reading the file and throwing the bytes away, the
response carries an explicit ``content_length`` and an empty body:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                  GET                    HEAD                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │  body             file bytes            b""                         │
    │  content_length   None                  file size                   │
    │  Content-Length   len(body)             content_length              │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Headers are kept as an ordered list of (name, value) pairs so they are
    written in the order they were added. Content-Length and Connection are
    not stored here; ``to_bytes()`` always writes them itself.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: bytes = b""
    content_length: Optional[int] = None   # Set only for bodiless HEAD replies
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Status line without the trailing CRLF, e.g. "HTTP/1.1 200 OK"."""
        return f"{self.version} {self.status.line}"

    @property
    def length(self) -> int:
        """Value of the Content-Length header."""
        if self.content_length is not None:
            return self.content_length
        return len(self.body)

    @property
    def is_not_found(self) -> bool:
        return self.status == HTTPStatus.NOT_FOUND

    def add_header(self, name: str, value: str) -> "HTTPResponse":
        """Append a header. Returns self for chaining."""
        self.headers.append((name, value))
        return self

    def get_header(self, name: str) -> Optional[str]:
        """First value of a header (case-insensitive), or None."""
        wanted = name.lower()
        for header_name, value in self.headers:
            if header_name.lower() == wanted:
                return value
        return None

    def to_bytes(self) -> bytes:
        """
        Serialize the response for ``socket.sendall()``.

        Returns:
            Status line, framing headers, response headers, blank line and
            the body (if any) as one bytes object.
        """
        lines = [
            self.status_line,
            f"Content-Length: {self.length}",
            "Connection: close",
        ]
        for name, value in self.headers:
            lines.append(f"{name}: {value}")

        head = "\r\n".join(lines).encode("utf-8") + b"\r\n\r\n"
        return head + self.body

    def __repr__(self) -> str:
        return f"HTTPResponse(status={self.status.line!r}, body={self.length} bytes)"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
# One factory per response the server knows how to send. Error bodies are
# the bare reason phrase so they read well in curl and browser tabs.


def ok(content_type: str, body: bytes) -> HTTPResponse:
    """200 OK carrying file contents."""
    return HTTPResponse(
        status=HTTPStatus.OK,
        headers=[("Content-Type", content_type)],
        body=body,
    )


def ok_head(content_type: str, length: int) -> HTTPResponse:
    """200 OK announcing ``length`` body bytes without sending them."""
    return HTTPResponse(
        status=HTTPStatus.OK,
        headers=[("Content-Type", content_type)],
        content_length=length,
    )


def bad_request() -> HTTPResponse:
    """400 Bad Request."""
    return _plain(HTTPStatus.BAD_REQUEST)


def not_found() -> HTTPResponse:
    """404 Not Found."""
    return _plain(HTTPStatus.NOT_FOUND)


def method_not_allowed() -> HTTPResponse:
    """405 Method Not Allowed, advertising the standard methods."""
    return _plain(HTTPStatus.METHOD_NOT_ALLOWED).add_header("Allow", "GET, HEAD")


def multiple_choices(candidates: int) -> HTTPResponse:
    """303 Multiple Choices, reporting how many files matched."""
    return HTTPResponse(
        status=HTTPStatus.MULTIPLE_CHOICES,
        body=f"Multiple Choices: {candidates} candidates".encode("utf-8"),
    )


def internal_server_error() -> HTTPResponse:
    """500 Internal Server Error."""
    return _plain(HTTPStatus.INTERNAL_SERVER_ERROR)


def error_response(status: HTTPStatus) -> HTTPResponse:
    """Build the canned error response for ``status``."""
    if status == HTTPStatus.METHOD_NOT_ALLOWED:
        return method_not_allowed()
    return _plain(status)


def _plain(status: HTTPStatus) -> HTTPResponse:
    return HTTPResponse(status=status, body=status.phrase.encode("utf-8"))
