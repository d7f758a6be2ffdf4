"""Tests for the imgix-url command-line entry point."""

from __future__ import annotations

import hashlib

import pytest

from imgix_url import __version__
from imgix_url.cli import build_parser, main, run


@pytest.fixture
def cli_config(monkeypatch, test_config):
    """Point the CLI at the environment-independent test configuration."""
    monkeypatch.setattr("imgix_url.cli.config", test_config)
    return test_config


class TestParser:
    """Argument parsing."""

    def test_params_collected_in_order(self):
        args = build_parser().parse_args(["a.jpg", "-p", "w=100", "--param", "txt=a=b"])

        assert args.params == [("w", "100"), ("txt", "a=b")]

    def test_defaults(self):
        args = build_parser().parse_args(["a.jpg"])

        assert args.host is None
        assert args.sign_key is None
        assert args.params == []
        assert args.srcset is False

    @pytest.mark.parametrize("bad", ["w100", "=100"])
    def test_malformed_param_exits_2(self, bad, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["a.jpg", "-p", bad])

        assert exc_info.value.code == 2
        assert "KEY=VALUE" in capsys.readouterr().err


class TestRun:
    """run() turns parsed arguments into a URL."""

    def test_renders_url(self, test_config):
        args = build_parser().parse_args(
            ["photos/cat.jpg", "--host", "assets.imgix.net", "-p", "w=400", "-p", "fit=crop"]
        )

        assert run(args, test_config) == "https://assets.imgix.net/photos/cat.jpg?fit=crop&w=400"

    def test_later_param_wins(self, test_config):
        args = build_parser().parse_args(
            ["a.jpg", "--host", "x.imgix.net", "-p", "w=1", "-p", "w=2"]
        )

        assert run(args, test_config) == "https://x.imgix.net/a.jpg?w=2"

    def test_host_and_key_from_config(self, signed_config):
        args = build_parser().parse_args(["image.jpg", "-p", "w=100"])

        url = run(args, signed_config)

        expected = hashlib.md5(b"FOO123bar/image.jpg?w=100").hexdigest()
        assert url == f"https://example.com/image.jpg?w=100&s={expected}"

    def test_ixlib_flag(self, test_config):
        args = build_parser().parse_args(["a.jpg", "--host", "x.imgix.net", "--ixlib"])

        assert run(args, test_config) == f"https://x.imgix.net/a.jpg?ixlib=python-{__version__}"


class TestMain:
    """main() exit codes and output streams."""

    def test_success(self, cli_config, capsys):
        code = main(["a b.jpg", "--host", "example.com", "-p", "w=100"])

        out, err = capsys.readouterr()
        assert code == 0
        assert out == "https://example.com/a%20b.jpg?w=100\n"
        assert err == ""

    def test_sign_key_argument(self, cli_config, capsys):
        code = main(["image.jpg", "--host", "example.com", "--sign-key", "FOO123bar"])

        expected = hashlib.md5(b"FOO123bar/image.jpg").hexdigest()
        assert code == 0
        assert capsys.readouterr().out.strip() == f"https://example.com/image.jpg?s={expected}"

    def test_missing_host(self, cli_config, capsys):
        """Without --host or IMGIX_DEFAULT_HOST the build fails."""
        code = main(["image.jpg"])

        out, err = capsys.readouterr()
        assert code == 1
        assert out == ""
        assert err.startswith("error: invalid host")

    def test_unknown_param(self, cli_config, capsys):
        code = main(["image.jpg", "--host", "example.com", "-p", "zoom=2"])

        assert code == 1
        assert "error: zoom: unknown parameter" in capsys.readouterr().err

    def test_conflict(self, cli_config, capsys):
        code = main(["image.jpg", "--host", "example.com", "-p", "crop=faces", "-p", "fit=max"])

        assert code == 1
        assert "conflicting parameters crop, fit" in capsys.readouterr().err

    def test_srcset(self, cli_config, capsys):
        code = main(["image.jpg", "--host", "example.com", "-p", "w=320", "--srcset"])

        lines = capsys.readouterr().out.strip().split(",\n")
        assert code == 0
        assert len(lines) == 5
        assert lines[0] == "https://example.com/image.jpg?dpr=1&q=75&w=320 1x"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out
