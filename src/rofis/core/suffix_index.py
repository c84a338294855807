"""
=============================================================================
DIRECTORY SUFFIX INDEX
=============================================================================

Finds directories under the document root by the TAIL of their path.

A client asking for ``/guide/intro.html`` does not have to know that the
file lives in ``docs/v2/guide/``. Any indexed directory whose relative path
ends with ``guide`` is a candidate.

=============================================================================
WHY A TRIE OVER REVERSED PATHS?
=============================================================================

"Which paths end with X?" is awkward for most data structures. Reverse
every path, though, and it becomes "which strings START with reversed(X)?",
which is exactly what a prefix trie answers natively:

    Relative directory          Stored key (reversed bytes)
    ──────────────────          ───────────────────────────
    docs/v2/guide               ediug/2v/scod
    blog/guide                  ediug/golb
    src/lib                     bil/crs

    find_by_suffix("guide")  →  walk "ediug" from the root of the trie
                                 └─ collect everything below that node
                                 →  docs/v2/guide, blog/guide

A lookup costs one step per byte of the suffix, plus one step per node in
the matching subtree. No scan of every directory per request.

=============================================================================
BYTE SUFFIX, NOT SEGMENT SUFFIX
=============================================================================

Matching is done on raw bytes. ``find_by_suffix("ib")`` therefore matches
``src/lib`` as well as a directory literally named ``ib``. Callers that
need segment-aligned matches must pass segment-aligned suffixes.

=============================================================================
"""

import logging
import os
from pathlib import Path, PurePath
from typing import Dict, Iterator, List, Optional


logger = logging.getLogger(__name__)


class _Node:
    """One trie node: children keyed by byte value, plus an optional entry."""

    __slots__ = ("children", "entry")

    def __init__(self):
        self.children: Dict[int, "_Node"] = {}
        self.entry: Optional[str] = None   # Relative path ending here, if any


class SuffixIndex:
    """
    Immutable index of every non-hidden directory under a root.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       SuffixIndex Lifecycle                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SuffixIndex.build(root)   Full walk of the tree (explicit stack)  │
    │        │                                                             │
    │        ▼                                                             │
    │   find_by_suffix(...)       Read-only queries, any number of times  │
    │        │                                                             │
    │        ▼                                                             │
    │   (filesystem changed)      Build a NEW index and swap it in.        │
    │                             Existing instances are never mutated.    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    The root itself is not an entry; only directories strictly below it
    are indexed. Names starting with "." are skipped together with their
    whole subtree, and symlinks to directories are not followed.

    Usage:
        index = SuffixIndex.build("/srv/www")
        len(index)                      # number of directories
        index.find_by_suffix("guide")   # [Path("/srv/www/docs/guide"), ...]
    """

    def __init__(self, root: Path):
        """
        Create an empty index for ``root``.

        Use ``build()`` instead; this constructor does not scan anything.
        """
        self._root = root
        self._trie = _Node()
        self._size = 0

    @classmethod
    def build(cls, root: str | os.PathLike) -> "SuffixIndex":
        """
        Scan ``root`` and index every non-hidden directory beneath it.

        Raises:
            OSError: ``root`` cannot be resolved, or any directory in the
                     tree cannot be listed or stat'ed. Nothing is returned
                     in that case, so a half-built index is never visible.
        """
        root = Path(root).resolve(strict=True)
        index = cls(root)

        # Depth-first walk with an explicit stack: deep trees cannot hit
        # the recursion limit.
        stack: List[Path] = [root]
        while stack:
            directory = stack.pop()
            with os.scandir(directory) as entries:
                for entry in entries:
                    if not entry.is_dir(follow_symlinks=False):
                        continue
                    if entry.name.startswith("."):
                        continue
                    path = Path(entry.path)
                    index._insert(path.relative_to(root).as_posix())
                    stack.append(path)

        logger.debug(f"Indexed {index._size} directories under {root}")
        return index

    @property
    def root(self) -> Path:
        """Absolute, canonical root directory."""
        return self._root

    def __len__(self) -> int:
        return self._size

    def __contains__(self, relative: object) -> bool:
        if not isinstance(relative, (str, PurePath)):
            return False
        node = self._walk(_key(PurePath(relative).as_posix()))
        return node is not None and node.entry is not None

    def __repr__(self) -> str:
        return f"SuffixIndex(root={str(self._root)!r}, dirs={self._size})"

    def find_by_suffix(self, suffix: str) -> List[Path]:
        """
        Every indexed directory whose relative path ends with ``suffix``.

        Args:
            suffix: Tail of a relative path, e.g. "guide" or "v2/guide".
                    The empty string matches every indexed directory.

        Returns:
            Absolute paths (root-prefixed). The order is unspecified.
        """
        node = self._walk(_key(suffix))
        if node is None:
            return []
        return [self._root / relative for relative in _entries_below(node)]

    # =========================================================================
    # TRIE INTERNALS
    # =========================================================================

    def _insert(self, relative: str) -> None:
        node = self._trie
        for byte in _key(relative):
            child = node.children.get(byte)
            if child is None:
                child = node.children[byte] = _Node()
            node = child
        if node.entry is None:
            self._size += 1
        node.entry = relative

    def _walk(self, key: bytes) -> Optional[_Node]:
        node = self._trie
        for byte in key:
            node = node.children.get(byte)
            if node is None:
                return None
        return node


def _key(path: str) -> bytes:
    """Reversed filesystem bytes of ``path``."""
    return os.fsencode(path)[::-1]


def _entries_below(node: _Node) -> Iterator[str]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.entry is not None:
            yield current.entry
        stack.extend(current.children.values())
