"""Tests for writing converted HTML."""

import pytest

from md2hatena.errors import Md2HatenaError
from md2hatena.output import write_result_html


class TestWriteResultHtml:
    def test_writes_file(self, tmp_path):
        dest = write_result_html("<p>hi</p>\n", tmp_path / "post.html")
        assert dest == tmp_path / "post.html"
        assert dest.read_text(encoding="utf-8") == "<p>hi</p>\n"

    def test_creates_parent_dirs(self, tmp_path):
        dest = write_result_html("<p>x</p>", tmp_path / "a" / "b" / "post.html")
        assert dest.is_file()

    def test_overwrites(self, tmp_path):
        path = tmp_path / "post.html"
        path.write_text("old")
        write_result_html("new", path)
        assert path.read_text() == "new"

    def test_non_ascii(self, tmp_path):
        dest = write_result_html("<p>日本語</p>", tmp_path / "post.html")
        assert dest.read_text(encoding="utf-8") == "<p>日本語</p>"

    def test_write_error(self, tmp_path):
        target = tmp_path / "post.html"
        target.mkdir()
        with pytest.raises(Md2HatenaError, match="write"):
            write_result_html("<p>x</p>", target)
