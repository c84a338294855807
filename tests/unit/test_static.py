"""
Unit tests for path resolution and static file responses.
"""

import os
from pathlib import Path

import pytest

from rofis.core.suffix_index import SuffixIndex
from rofis.handlers.static import (
    PathResolver,
    StaticFileHandler,
    ResolvedTarget,
    NotFoundError,
    MultipleChoicesError,
    split_request_path,
)
from rofis.http.request import HTTPMethod, parse_request
from rofis.http.status_codes import HTTPStatus
from conftest import make_tree


class TestSplitRequestPath:
    """Tests for split_request_path()."""

    @pytest.mark.parametrize("path,expected", [
        ("/", ("", "index.html")),
        ("/a/b/", ("a/b", "index.html")),
        ("/a/b/c.txt", ("a/b", "c.txt")),
        ("/c.txt", ("", "c.txt")),
        ("/a//b/", ("a//b", "index.html")),
    ])
    def test_split(self, path, expected):
        assert split_request_path(path) == expected

    def test_custom_index_file(self):
        assert split_request_path("/a/", "default.htm") == ("a", "default.htm")


class TestPathResolver:
    """Tests for PathResolver.resolve()."""

    def test_unique_index_html(self, site: Path):
        index = SuffixIndex.build(site)
        target = PathResolver().resolve(index, "/v2/guide/")

        assert target == ResolvedTarget(site.resolve() / "docs/v2/guide/index.html")

    def test_ambiguous_index_html(self, site: Path):
        """index.html exists in both docs/v1/guide and docs/v2/guide."""
        index = SuffixIndex.build(site)

        with pytest.raises(MultipleChoicesError) as exc_info:
            PathResolver().resolve(index, "/guide/")

        assert exc_info.value.candidates == 2
        response = exc_info.value.to_response()
        assert response.status == HTTPStatus.MULTIPLE_CHOICES
        assert response.body == b"Multiple Choices: 2 candidates"

    def test_file_existing_in_only_one_matching_directory(self, site: Path):
        """Both guide directories match, but only v2 holds intro.html."""
        index = SuffixIndex.build(site)
        target = PathResolver().resolve(index, "/guide/intro.html")

        assert target.path == site.resolve() / "docs/v2/guide/intro.html"

    def test_partial_suffix(self, site: Path):
        index = SuffixIndex.build(site)
        target = PathResolver().resolve(index, "/2024/post.txt")

        assert target.path.name == "post.txt"

    def test_full_path(self, site: Path):
        index = SuffixIndex.build(site)
        target = PathResolver().resolve(index, "/src/lib/util.js")

        assert target.path == site.resolve() / "src/lib/util.js"

    def test_file_in_root(self, site: Path):
        index = SuffixIndex.build(site)
        target = PathResolver().resolve(index, "/README.md")

        assert target.path == site.resolve() / "README.md"

    def test_missing_file(self, site: Path):
        index = SuffixIndex.build(site)

        with pytest.raises(NotFoundError) as exc_info:
            PathResolver().resolve(index, "/guide/missing.html")

        assert exc_info.value.to_response().status == HTTPStatus.NOT_FOUND

    def test_unknown_directory(self, site: Path):
        index = SuffixIndex.build(site)

        with pytest.raises(NotFoundError):
            PathResolver().resolve(index, "/nowhere/index.html")

    def test_directory_with_file_name_is_filtered(self, site: Path):
        """A directory named like the requested file is not a candidate."""
        index = SuffixIndex.build(site)

        with pytest.raises(NotFoundError):
            PathResolver().resolve(index, "/docs/v2")

    def test_hidden_directory_unreachable(self, site: Path):
        index = SuffixIndex.build(site)

        with pytest.raises(NotFoundError):
            PathResolver().resolve(index, "/.git/objects/secret.txt")

    def test_byte_suffix_quirk(self, site: Path):
        """"/ib/util.js" finds src/lib/util.js because "ib" ends "src/lib"."""
        index = SuffixIndex.build(site)
        target = PathResolver().resolve(index, "/ib/util.js")

        assert target.path == site.resolve() / "src/lib/util.js"

    def test_stale_index_misses_new_directory(self, tmp_path: Path):
        index = SuffixIndex.build(tmp_path)
        make_tree(tmp_path, {"new/page.html": b"new"})

        with pytest.raises(NotFoundError):
            PathResolver().resolve(index, "/new/page.html")

        target = PathResolver().resolve(SuffixIndex.build(tmp_path), "/new/page.html")
        assert target.path.read_bytes() == b"new"

    def test_custom_index_file(self, tmp_path: Path):
        make_tree(tmp_path, {"a/default.htm": b"hi"})
        index = SuffixIndex.build(tmp_path)

        target = PathResolver(index_file="default.htm").resolve(index, "/a/")
        assert target.path.name == "default.htm"

    def test_non_utf8_file_name(self, tmp_path: Path):
        """A name with raw 0xFF bytes is reachable through its %FF escape."""
        try:
            make_tree(tmp_path, {os.fsdecode(b"d\xff/\xff.txt"): b"raw"})
        except (OSError, UnicodeError):
            pytest.skip("filesystem rejects non-UTF-8 names")

        request = parse_request(b"GET /d%FF/%FF.txt HTTP/1.1\r\n\r\n")
        target = PathResolver().resolve(SuffixIndex.build(tmp_path), request.path)

        assert target.path.read_bytes() == b"raw"

    def test_candidates_lists_every_match(self, site: Path):
        index = SuffixIndex.build(site)
        found = PathResolver().candidates(index, "/guide/")

        assert sorted(p.parent.parent.name for p in found) == ["v1", "v2"]


class TestStaticFileHandler:
    """Tests for StaticFileHandler.serve()."""

    def test_get_returns_content(self, site: Path):
        target = ResolvedTarget(site / "blog/2024/post.txt")
        response = StaticFileHandler().serve(target, HTTPMethod.GET)

        assert response.status == HTTPStatus.OK
        assert response.body == b"x" * 100
        assert response.get_header("Content-Type") == "text/plain; charset=utf-8"

    def test_head_has_length_but_no_body(self, site: Path):
        target = ResolvedTarget(site / "blog/2024/post.txt")
        response = StaticFileHandler().serve(target, HTTPMethod.HEAD)
        data = response.to_bytes()

        assert response.status == HTTPStatus.OK
        assert b"Content-Length: 100\r\n" in data
        assert data.endswith(b"\r\n\r\n")

    def test_content_type_from_extension(self, site: Path):
        response = StaticFileHandler().serve(ResolvedTarget(site / "docs/v2/guide/index.html"))
        assert response.get_header("Content-Type") == "text/html; charset=utf-8"

    def test_vanished_file_is_not_found(self, tmp_path: Path):
        response = StaticFileHandler().serve(ResolvedTarget(tmp_path / "gone.txt"))
        assert response.status == HTTPStatus.NOT_FOUND

    def test_unreadable_target_is_internal_error(self, tmp_path: Path):
        """Reading a directory fails with an OSError other than FileNotFoundError."""
        response = StaticFileHandler().serve(ResolvedTarget(tmp_path))
        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
