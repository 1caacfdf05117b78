"""
Unit tests for the command-line entry point.
"""

from pathlib import Path

import pytest

from sitehttpd import __version__
from sitehttpd.__main__ import build_parser, main
from sitehttpd.config import ServerConfig


class TestArguments:
    """Tests for argument parsing."""

    def test_defaults_from_config(self):
        args = build_parser(ServerConfig(port=3000, content_root="public")).parse_args([])

        assert args.port == 3000
        assert args.root == "public"
        assert args.workers == 9
        assert args.allow_path_traversal is False
        assert args.pause_on_exit is False

    def test_flags_override(self):
        args = build_parser(ServerConfig()).parse_args(
            ["-p", "9000", "-r", "site", "-w", "2", "--log-format", "json",
             "--allow-path-traversal"]
        )

        assert args.port == 9000
        assert args.root == "site"
        assert args.workers == 2
        assert args.log_format == "json"
        assert args.allow_path_traversal is True

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """Exit codes of main()."""

    def test_missing_root_exits_1(self, tmp_path: Path, capsys):
        code = main(["--root", str(tmp_path / "nope"), "--port", "0"])
        captured = capsys.readouterr()

        assert code == 1
        assert "Starting web server..." in captured.out
        assert "Error! Unable to find the website" in captured.err

    def test_invalid_config_exits_1(self, site_dir: Path, capsys):
        code = main(["--root", str(site_dir), "--workers", "0"])

        assert code == 1
        assert "Error!" in capsys.readouterr().err

    def test_bad_environment_exits_1(self, tmp_path: Path, capsys, monkeypatch):
        monkeypatch.setenv("SITE_PORT", "eighty")

        code = main(["--root", str(tmp_path / "nope")])

        assert code == 1
        assert "Error! Invalid SITE_* environment variable" in capsys.readouterr().err

    def test_pause_on_exit(self, tmp_path: Path, capsys, monkeypatch):
        prompts = []
        monkeypatch.setattr("builtins.input", lambda: prompts.append(True) or "")

        code = main(["--root", str(tmp_path / "nope"), "--pause-on-exit"])

        assert code == 1
        assert prompts == [True]
        assert "Press enter to continue..." in capsys.readouterr().out
