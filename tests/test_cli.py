"""Tests for command-line parsing and overrides."""

from pathlib import Path
from unittest.mock import patch

import pytest

from build_dmg.arch import Arch
from build_dmg.cli import apply_overrides, get_archs, parse_args, should_use_tui
from build_dmg.config import AppInfo, BuildConfig, DMGOptions, PackagerContext


@pytest.fixture
def config(tmp_path):
    context = PackagerContext(
        app_info=AppInfo("widget", "Widget", "1.0"),
        project_dir=tmp_path,
        build_resources_dir=tmp_path / "build",
    )
    return BuildConfig(context=context, dmg=DMGOptions(), output_dir=tmp_path / "dist")


class TestParseArgs:
    def test_defaults(self):
        args = parse_args(["dist/Widget.app"])
        assert args.app_path == Path("dist/Widget.app")
        assert args.archs is None
        assert args.sign is None
        assert args.no_update_info is False
        assert args.simple is False

    def test_archs_deduplicated(self):
        args = parse_args(["W.app", "--arch", "arm64", "--arch", "x64", "--arch", "arm64"])
        assert get_archs(args) == [Arch.ARM64, Arch.X64]

    @patch("build_dmg.cli.host_arch", return_value=Arch.ARM64)
    def test_host_arch_default(self, _):
        assert get_archs(parse_args(["W.app"])) == [Arch.ARM64]

    def test_unknown_arch_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["W.app", "--arch", "sparc"])

    def test_sign_flags_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["W.app", "--sign", "--no-sign"])


class TestApplyOverrides:
    def test_no_overrides(self, config):
        assert apply_overrides(config, parse_args(["W.app"])) == config

    def test_sign(self, config):
        assert apply_overrides(config, parse_args(["W.app", "--sign"])).dmg.sign is True

    def test_no_sign(self, config):
        signed = BuildConfig(
            context=config.context, dmg=DMGOptions(sign=True), output_dir=config.output_dir
        )
        assert apply_overrides(signed, parse_args(["W.app", "--no-sign"])).dmg.sign is False

    def test_no_update_info(self, config):
        updated = apply_overrides(config, parse_args(["W.app", "--no-update-info"]))
        assert updated.dmg.write_update_info is False
        assert config.dmg.write_update_info is True


class TestShouldUseTui:
    def test_simple_flag(self):
        assert should_use_tui(parse_args(["W.app", "--simple"])) is False

    @patch("build_dmg.cli.sys.stdout")
    def test_not_a_tty(self, stdout):
        stdout.isatty.return_value = False
        assert should_use_tui(parse_args(["W.app"])) is False

    @patch("build_dmg.cli.sys.stdout")
    def test_tty(self, stdout):
        stdout.isatty.return_value = True
        assert should_use_tui(parse_args(["W.app"])) is True
