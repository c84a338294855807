"""
=============================================================================
STATIC FILE RESOLUTION AND SERVING
=============================================================================

Turns a request path into exactly one file on disk, then into a response.

=============================================================================
RESOLUTION BY SUFFIX
=============================================================================

The request path is NOT joined onto the root directory. It is split into
a directory suffix and a file name, and the suffix is looked up in the
SuffixIndex:

    Request path            Suffix              File name
    ────────────            ──────              ─────────
    /guide/intro.html       "guide"             "intro.html"
    /v2/guide/              "v2/guide"          "index.html"
    /README.md              ""                  "README.md"

Every matching directory that really contains a regular file with that
name is a candidate:

    ┌─────────────────────────────────────────────────────────────────┐
    │   candidates == 0   →  NotFoundError         (404)              │
    │   candidates == 1   →  ResolvedTarget                           │
    │   candidates  > 1   →  MultipleChoicesError  (303, no guessing) │
    └─────────────────────────────────────────────────────────────────┘

Because only indexed directories can match, a request can never reach a
file outside the root, nor one inside a hidden (".name") directory.

The root directory is not an index entry. It is the one candidate that
does not come from the index: it is added only for an empty suffix, so
"/README.md" still finds <root>/README.md (and reports ambiguity if a
subdirectory has a README.md too). Without it, files directly in the root
could never be served.

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from ..core.suffix_index import SuffixIndex
from ..http.request import HTTPMethod
from ..http.response import (
    HTTPResponse,
    ok,
    ok_head,
    not_found,
    multiple_choices,
    internal_server_error,
)
from ..http.status_codes import HTTPStatus
from ..http.mime_types import get_content_type


logger = logging.getLogger(__name__)


class ResolutionError(Exception):
    """A request path that does not identify exactly one file."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def to_response(self) -> HTTPResponse:
        return internal_server_error()


class NotFoundError(ResolutionError):
    """No candidate directory holds the requested file."""

    status_code = HTTPStatus.NOT_FOUND

    def to_response(self) -> HTTPResponse:
        return not_found()


class MultipleChoicesError(ResolutionError):
    """Several candidate directories hold the requested file."""

    status_code = HTTPStatus.MULTIPLE_CHOICES

    def __init__(self, message: str, candidates: int):
        super().__init__(message)
        self.candidates = candidates

    def to_response(self) -> HTTPResponse:
        return multiple_choices(self.candidates)


@dataclass(frozen=True)
class ResolvedTarget:
    """The single regular file a request resolved to."""

    path: Path


def split_request_path(path: str, index_file: str = "index.html") -> Tuple[str, str]:
    """
    Split a request path into (directory suffix, file name).

    Examples:
        >>> split_request_path("/a/b/")
        ('a/b', 'index.html')
        >>> split_request_path("/a/b/c.txt")
        ('a/b', 'c.txt')
        >>> split_request_path("/c.txt")
        ('', 'c.txt')
    """
    if path.endswith("/"):
        return path.strip("/"), index_file

    directory, _, file_name = path.rpartition("/")
    return directory.strip("/"), file_name


class PathResolver:
    """
    Maps request paths to files through a SuffixIndex.

    The resolver only checks existence and uniqueness; it never opens a
    file. It holds no index of its own, so the caller can swap in a
    rebuilt index between calls.

    Usage:
        resolver = PathResolver()
        try:
            target = resolver.resolve(index, "/guide/")
        except ResolutionError as e:
            response = e.to_response()
    """

    def __init__(self, index_file: str = "index.html"):
        self.index_file = index_file

    def candidates(self, index: SuffixIndex, path: str) -> List[Path]:
        """Every existing regular file the request path could refer to."""
        suffix, file_name = split_request_path(path, self.index_file)

        directories = index.find_by_suffix(suffix)
        if not suffix:
            directories.append(index.root)

        # Directories or dangling symlinks with the right name are
        # silently dropped, not reported.
        return [d / file_name for d in directories if (d / file_name).is_file()]

    def resolve(self, index: SuffixIndex, path: str) -> ResolvedTarget:
        """
        Resolve ``path`` to a single file.

        Raises:
            NotFoundError: No candidate exists.
            MultipleChoicesError: More than one candidate exists.
        """
        found = self.candidates(index, path)

        if not found:
            raise NotFoundError(f"No file matches {path!r}")
        if len(found) > 1:
            logger.debug(f"{path!r} is ambiguous: {[str(p) for p in found]}")
            raise MultipleChoicesError(f"{len(found)} files match {path!r}", len(found))

        return ResolvedTarget(found[0])


class StaticFileHandler:
    """
    Builds GET and HEAD responses for a resolved file.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   GET   read the whole file   → 200, Content-Type, file bytes       │
    │   HEAD  stat the file only    → 200, Content-Type, size, no bytes   │
    │                                                                      │
    │   file vanished since resolution   → 404                             │
    │   any other read/stat failure      → 500                             │
    └─────────────────────────────────────────────────────────────────────┘

    File contents are read per request; nothing is cached between
    requests.
    """

    def serve(self, target: ResolvedTarget, method: HTTPMethod = HTTPMethod.GET) -> HTTPResponse:
        path = target.path
        content_type = get_content_type(path)

        try:
            if method is HTTPMethod.HEAD:
                return ok_head(content_type, path.stat().st_size)
            return ok(content_type, path.read_bytes())
        except FileNotFoundError:
            logger.info(f"File disappeared before it could be served: {path}")
            return not_found()
        except OSError as e:
            logger.error(f"Error serving file {path}: {e}")
            return internal_server_error()
