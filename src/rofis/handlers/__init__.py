"""
Request handlers: path resolution, static file responses and WATCH
long-poll sessions.
"""

from .static import (
    ResolutionError,
    NotFoundError,
    MultipleChoicesError,
    ResolvedTarget,
    PathResolver,
    StaticFileHandler,
    split_request_path,
)
from .watch import WatchSession, start_watch

__all__ = [
    "ResolutionError",
    "NotFoundError",
    "MultipleChoicesError",
    "ResolvedTarget",
    "PathResolver",
    "StaticFileHandler",
    "split_request_path",
    "WatchSession",
    "start_watch",
]
