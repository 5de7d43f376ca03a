"""Tests for the livewatch command line."""

from pathlib import Path

import pytest

from livewatch.cli import build_overrides, create_parser, run_cli
from livewatch.livereload.server import bind_socket


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        parsed = create_parser().parse_args([])
        assert parsed.root == Path(".")
        assert parsed.config is None
        assert parsed.force is None
        assert parsed.port is None
        assert parsed.verbose == 0

    def test_flags(self):
        parsed = create_parser().parse_args(
            ["--root", "site", "--force", "--port", "4000", "-vv", "--no-beep"]
        )
        assert parsed.root == Path("site")
        assert parsed.force is True
        assert parsed.port == 4000
        assert parsed.verbose == 2
        assert parsed.no_beep is True

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "livewatch" in capsys.readouterr().out


class TestBuildOverrides:
    """Tests for turning flags into config overrides."""

    def test_unset_flags_do_not_override(self):
        overrides = build_overrides(create_parser().parse_args([]))
        assert overrides == {"force": None, "livereload": {"port": None}}

    def test_no_livereload(self):
        overrides = build_overrides(create_parser().parse_args(["--no-livereload"]))
        assert overrides["livereload"]["enabled"] is False

    def test_no_beep(self):
        overrides = build_overrides(create_parser().parse_args(["--no-beep"]))
        assert overrides["beep"] is False

    @pytest.mark.parametrize(("flags", "level"), [(["-v"], 3), (["-vv"], 4), (["-vvvv"], 4)])
    def test_verbosity(self, flags, level):
        overrides = build_overrides(create_parser().parse_args(flags))
        assert overrides["logging"] == {"verbose": level}


class TestRunCli:
    """Tests for run_cli exit codes."""

    def test_missing_config_file(self, tmp_path, capsys):
        code = run_cli(["--root", str(tmp_path), "--config", str(tmp_path / "nope.yaml")])
        assert code == 2
        assert "Config file not found" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        (tmp_path / ".livewatch.yaml").write_text("watch:\n  unlock_try_limit: 0\n")
        assert run_cli(["--root", str(tmp_path)]) == 2

    def test_mistyped_config_value(self, tmp_path, capsys):
        (tmp_path / ".livewatch.yaml").write_text("watch:\n  debounce_delay: fast\n")
        assert run_cli(["--root", str(tmp_path)]) == 2
        assert "watch.debounce_delay must be a number" in capsys.readouterr().err

    def test_port_in_use(self, tmp_path):
        holder = bind_socket("0.0.0.0", 0)
        try:
            port = holder.getsockname()[1]
            assert run_cli(["--root", str(tmp_path), "--port", str(port), "--no-beep"]) == 1
        finally:
            holder.close()
