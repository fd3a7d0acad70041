"""CLI tests using typer's CliRunner."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from md2hatena.cli import app
from md2hatena.converter.image import restore_from
from md2hatena.errors import AuthenticationError
from md2hatena.hackmd import HackMD, UserInfo

runner = CliRunner()

NOTE = "# Title\n\n![cap](https://hackmd.io/_uploads/a.png)\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


@pytest.fixture
def note_path(tmp_path):
    path = tmp_path / "note.md"
    path.write_text(NOTE, encoding="utf-8")
    return path


@pytest.fixture
def mock_hackmd():
    hackmd = MagicMock(spec=HackMD)
    hackmd.fetch.return_value = PNG_BYTES
    hackmd.me.return_value = UserInfo(id="u-1", name="Alice", user_path="alice")
    return hackmd


@pytest.fixture
def no_credentials(monkeypatch):
    for name in ("HACKMD_APITOKEN", "HACKMD_COOKIE", "HATENA_ID", "HATENA_API_KEY"):
        monkeypatch.delenv(name, raising=False)


# ── convert ────────────────────────────────────────────────────────


class TestConvertNoResolve:
    def test_stdout(self, note_path):
        result = runner.invoke(app, ["convert", str(note_path), "--no-resolve"])
        assert result.exit_code == 0
        assert "<h1>Title</h1>" in result.output
        assert 'src="https://hackmd.io/_uploads/a.png"' in result.output

    def test_heading_min(self, note_path):
        result = runner.invoke(app, ["convert", str(note_path), "-n", "--heading-min", "3"])
        assert result.exit_code == 0
        assert "<h3>Title</h3>" in result.output

    def test_heading_min_from_config(self, note_path):
        Path("md2hatena.yaml").write_text("heading_min: 2\nresolve: false\n")
        result = runner.invoke(app, ["convert", str(note_path)])
        assert result.exit_code == 0
        assert "<h2>Title</h2>" in result.output

    def test_output_file(self, note_path, tmp_path):
        out = tmp_path / "out" / "note.html"
        result = runner.invoke(app, ["convert", str(note_path), "-n", "-o", str(out)])
        assert result.exit_code == 0
        assert "Output HTML" in result.output
        assert "<h1>Title</h1>" in out.read_text(encoding="utf-8")

    def test_highlightjs(self, tmp_path):
        path = tmp_path / "code.md"
        path.write_text("```main.py\nprint(1)\n```\n", encoding="utf-8")
        result = runner.invoke(app, ["convert", str(path), "-n", "--codeblock", "highlightjs"])
        assert result.exit_code == 0
        assert "highlight.min.js" in result.output
        assert '<code class="language-py">' in result.output

    def test_invalid_heading_min(self, note_path):
        result = runner.invoke(app, ["convert", str(note_path), "-n", "--heading-min", "9"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["convert", str(tmp_path / "nope.md"), "-n"])
        assert result.exit_code == 1
        assert "Failed to read markdown file" in result.output


class TestConvertResolve:
    def test_resolves_and_caches(self, note_path, mock_hackmd, mock_uploader):
        with (
            patch("md2hatena.cli.create_hackmd", return_value=mock_hackmd),
            patch("md2hatena.cli.create_uploader", return_value=mock_uploader),
        ):
            result = runner.invoke(app, ["convert", str(note_path), "-i", "cache.txt"])

        assert result.exit_code == 0, result.output
        assert "<figure" in result.output
        assert 'src="https://cdn.example/20240101000001.png"' in result.output
        assert [i.original_url for i in restore_from("cache.txt")] == [
            "https://hackmd.io/_uploads/a.png"
        ]
        assert Path(".md2hatena-imgs/a.png").is_file()

    def test_download_dir_option(self, note_path, mock_hackmd, mock_uploader):
        with (
            patch("md2hatena.cli.create_hackmd", return_value=mock_hackmd),
            patch("md2hatena.cli.create_uploader", return_value=mock_uploader),
        ):
            result = runner.invoke(app, ["convert", str(note_path), "-d", "imgs"])
        assert result.exit_code == 0, result.output
        assert Path("imgs/a.png").is_file()

    def test_timeout_passed_to_uploader(self, note_path, mock_hackmd, mock_uploader):
        create_uploader = MagicMock(return_value=mock_uploader)
        with (
            patch("md2hatena.cli.create_hackmd", return_value=mock_hackmd),
            patch("md2hatena.cli.create_uploader", create_uploader),
        ):
            runner.invoke(app, ["convert", str(note_path), "-t", "42"])
        assert create_uploader.call_args.kwargs["timeout"] == 42

    def test_missing_credentials(self, note_path, no_credentials):
        result = runner.invoke(app, ["convert", str(note_path)])
        assert result.exit_code == 1
        assert "HACKMD_APITOKEN" in result.output

    def test_no_images_needs_no_credentials(self, tmp_path, no_credentials):
        path = tmp_path / "plain.md"
        path.write_text("# Plain\n", encoding="utf-8")
        result = runner.invoke(app, ["convert", str(path)])
        assert result.exit_code == 0
        assert "<h1>Plain</h1>" in result.output

    def test_upload_failure_writes_no_html(self, note_path, mock_hackmd, mock_uploader, tmp_path):
        mock_uploader.upload.side_effect = AuthenticationError("Hatena", "upload rejected (401)")
        out = tmp_path / "note.html"
        with (
            patch("md2hatena.cli.create_hackmd", return_value=mock_hackmd),
            patch("md2hatena.cli.create_uploader", return_value=mock_uploader),
        ):
            result = runner.invoke(app, ["convert", str(note_path), "-o", str(out)])
        assert result.exit_code == 1
        assert "Hatena authentication" in result.output
        assert not out.exists()

    def test_warm_cache_needs_no_credentials(self, note_path, no_credentials):
        Path("cache.txt").write_text(
            "https://hackmd.io/_uploads/a.png -> https://cdn.example/cached.png\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["convert", str(note_path), "-i", "cache.txt"])
        assert result.exit_code == 0, result.output
        assert 'src="https://cdn.example/cached.png"' in result.output
        assert not Path(".md2hatena-imgs").exists()

    def test_partial_cache_needs_credentials(self, tmp_path, no_credentials):
        path = tmp_path / "two.md"
        path.write_text(
            "![a](https://hackmd.io/_uploads/a.png)\n\n![b](https://hackmd.io/_uploads/b.png)\n",
            encoding="utf-8",
        )
        Path("cache.txt").write_text(
            "https://hackmd.io/_uploads/a.png -> https://cdn.example/cached.png\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["convert", str(path), "-i", "cache.txt"])
        assert result.exit_code == 1
        assert "HACKMD_APITOKEN" in result.output

    def test_token_checked_before_download(self, note_path, mock_hackmd, mock_uploader):
        mock_hackmd.me.side_effect = AuthenticationError("HackMD", "API token is invalid?")
        with (
            patch("md2hatena.cli.create_hackmd", return_value=mock_hackmd),
            patch("md2hatena.cli.create_uploader", return_value=mock_uploader),
        ):
            result = runner.invoke(app, ["convert", str(note_path)])
        assert result.exit_code == 1
        assert "API token is invalid?" in result.output
        mock_hackmd.fetch.assert_not_called()
        mock_uploader.upload.assert_not_called()


# ── global options ─────────────────────────────────────────────────


class TestGlobalOptions:
    def test_bad_config_file(self, note_path, tmp_path):
        bad = tmp_path / "bad.yml"
        bad.write_text("heading_min: 0\n")
        result = runner.invoke(app, ["-c", str(bad), "convert", str(note_path), "-n"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_config_file_option(self, note_path, tmp_path):
        cfg = tmp_path / "custom.yml"
        cfg.write_text("heading_min: 4\n")
        result = runner.invoke(app, ["--config", str(cfg), "convert", str(note_path), "-n"])
        assert result.exit_code == 0
        assert "<h4>Title</h4>" in result.output

    def test_log_level(self, note_path):
        result = runner.invoke(app, ["--log-level", "debug", "convert", str(note_path), "-n"])
        assert result.exit_code == 0

    def test_invalid_log_level(self, note_path):
        result = runner.invoke(app, ["--log-level", "loud", "convert", str(note_path), "-n"])
        assert result.exit_code != 0


# ── config ─────────────────────────────────────────────────────────


class TestConfigCommands:
    def test_init_creates_file(self):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert "heading_min" in Path("md2hatena.yaml").read_text()

    def test_init_refuses_overwrite(self):
        Path("md2hatena.yaml").write_text("heading_min: 2\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert Path("md2hatena.yaml").read_text() == "heading_min: 2\n"

    def test_init_force(self):
        Path("md2hatena.yaml").write_text("heading_min: 2\n")
        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "heading_min: 1" in Path("md2hatena.yaml").read_text()

    def test_show(self):
        Path("md2hatena.yaml").write_text("heading_min: 5\n")
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "heading_min" in result.output
        assert "5" in result.output
