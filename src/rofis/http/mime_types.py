"""
=============================================================================
CONTENT-TYPE GUESSING
=============================================================================

Maps a file path to the Content-Type header value sent with it.

The server only looks at the file name, never at the bytes:

    get_content_type("docs/index.html")  →  "text/html; charset=utf-8"
    get_content_type("img/logo.png")     →  "image/png"
    get_content_type("notes.unknown")    →  "application/octet-stream"

LOOKUP ORDER:
─────────────
    1. Our own table below (web formats we want pinned, e.g. .js and .wasm,
       whose platform registrations differ between operating systems)
    2. The platform's mimetypes registry (/etc/mime.types and friends)
    3. application/octet-stream

=============================================================================
"""

import mimetypes
from pathlib import Path


MIME_TYPES = {
    # Text
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",
    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    # Web runtime
    ".wasm": "application/wasm",
    ".map": "application/json",
    # Documents and archives
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".gz": "application/gzip",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# application/* types that are really text and deserve a charset
_TEXTUAL_APPLICATION_TYPES = {
    "application/json",
    "application/xml",
    "application/javascript",
    "image/svg+xml",
}


def get_mime_type(path: str | Path) -> str:
    """
    Guess the bare MIME type of ``path`` from its extension.

    Examples:
        >>> get_mime_type("style.CSS")
        'text/css'
        >>> get_mime_type("archive.unknownext")
        'application/octet-stream'
    """
    path = Path(path)
    known = MIME_TYPES.get(path.suffix.lower())
    if known:
        return known

    guessed, _encoding = mimetypes.guess_type(path.name, strict=False)
    return guessed or DEFAULT_MIME_TYPE


def is_text_type(mime_type: str) -> bool:
    """Check if a MIME type names textual content."""
    return mime_type.startswith("text/") or mime_type in _TEXTUAL_APPLICATION_TYPES


def get_content_type(path: str | Path, charset: str = "utf-8") -> str:
    """
    Full Content-Type header value for ``path``.

    Text types get a charset parameter, binary types are returned bare.
    """
    mime_type = get_mime_type(path)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type
