"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The handful of status codes a read-only file server ever needs to send.

    ┌─────────────────────────────────────────────────────────────────────┐
    │  CODE  │  WHEN                                                      │
    ├────────┼────────────────────────────────────────────────────────────┤
    │  200   │  Exactly one file matched the requested path               │
    │  303   │  More than one directory could hold the requested file     │
    │  400   │  Request line is malformed or not HTTP/1.1                 │
    │  404   │  No indexed directory holds the requested file             │
    │  405   │  Method other than GET, HEAD or WATCH                      │
    │  500   │  The file could not be stat'ed or read                     │
    └────────┴────────────────────────────────────────────────────────────┘

NOTE ON 303:
────────────
Ambiguous suffix matches are answered with the status line
"303 Multiple Choices". The code and the phrase do not agree with the
registry (300 is Multiple Choices, 303 is See Other), but clients of this
server already look for exactly that line, so it is kept as-is.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the file server.

    Being an IntEnum, members compare equal to their integer code:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    MULTIPLE_CHOICES = 303     # Several candidates; see module docstring
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    INTERNAL_SERVER_ERROR = 500

    @property
    def phrase(self) -> str:
        """Reason phrase that follows the code on the status line."""
        return _PHRASES[self]

    @property
    def line(self) -> str:
        """Code and phrase as they appear after "HTTP/1.1 "."""
        return f"{int(self)} {self.phrase}"


_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.MULTIPLE_CHOICES: "Multiple Choices",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
}
