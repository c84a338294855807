"""
HTTP protocol components: request parsing, response framing, status codes
and content-type guessing.
"""

from .status_codes import HTTPStatus
from .request import HTTPMethod, HTTPRequest, HTTPParseError, RequestParser, parse_request
from .response import (
    HTTPResponse,
    ok,
    ok_head,
    bad_request,
    not_found,
    method_not_allowed,
    multiple_choices,
    internal_server_error,
    error_response,
)
from .mime_types import get_content_type, get_mime_type

__all__ = [
    "HTTPStatus",
    "HTTPMethod",
    "HTTPRequest",
    "HTTPParseError",
    "RequestParser",
    "parse_request",
    "HTTPResponse",
    "ok",
    "ok_head",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "multiple_choices",
    "internal_server_error",
    "error_response",
    "get_content_type",
    "get_mime_type",
]
