"""Tests for DMG option resolution."""

from dataclasses import replace

import pytest

from build_dmg.config import Compression, ContentsEntry, DMGFormat, DMGOptions, WindowRect
from build_dmg.errors import InvalidConfigurationError
from build_dmg.options import (
    BUILTIN_BACKGROUND,
    COMPRESSION_LEVEL_ENV,
    DEFAULT_CONTENTS,
    compute_dmg_options,
    select_format,
)


class TestIcon:
    def test_unset_uses_build_resources_icon(self, context, resources_dir):
        icon = resources_dir / "icon.icns"
        icon.write_bytes(b"icns")
        resolved = compute_dmg_options(DMGOptions(), context, env={})
        assert resolved.icon == str(icon)

    def test_unset_without_resources_icon(self, context):
        resolved = compute_dmg_options(DMGOptions(), context, env={})
        assert resolved.icon is None

    @pytest.mark.parametrize("icon", ["", "   ", "\t\n"])
    def test_blank_icon_is_error(self, context, icon):
        with pytest.raises(InvalidConfigurationError, match="dmg.icon"):
            compute_dmg_options(DMGOptions(icon=icon), context, env={})

    def test_explicit_icon_resolved_against_project(self, context, tmp_path):
        resolved = compute_dmg_options(DMGOptions(icon="assets/volume.icns"), context, env={})
        assert resolved.icon == str((tmp_path / "assets" / "volume.icns").resolve())


class TestBackground:
    def test_both_set_is_error(self, context):
        options = DMGOptions(background="bg.png", background_color="#ffffff")
        with pytest.raises(InvalidConfigurationError) as exc_info:
            compute_dmg_options(options, context, env={})
        message = str(exc_info.value)
        assert "dmg.background_color" in message
        assert "dmg.background " in message

    def test_color_only(self, context):
        resolved = compute_dmg_options(DMGOptions(background_color="#336699"), context, env={})
        assert resolved.background_color == "#336699"
        assert resolved.background is None

    def test_relative_background_resolved(self, context, tmp_path):
        resolved = compute_dmg_options(DMGOptions(background="art/bg.png"), context, env={})
        assert resolved.background == str((tmp_path / "art" / "bg.png").resolve())

    def test_default_from_build_resources(self, context, resources_dir):
        (resources_dir / "background.png").write_bytes(b"png")
        (resources_dir / "background.tiff").write_bytes(b"tiff")
        resolved = compute_dmg_options(DMGOptions(), context, env={})
        assert resolved.background == str(resources_dir / "background.tiff")

    def test_default_builtin(self, context):
        resolved = compute_dmg_options(DMGOptions(), context, env={})
        assert resolved.background == BUILTIN_BACKGROUND
        assert resolved.background_color is None


class TestFormat:
    def test_store(self):
        assert select_format(Compression.STORE, {}) == DMGFormat.UDRO

    def test_maximum(self):
        assert select_format(Compression.MAXIMUM, {}) == DMGFormat.UDBZ

    def test_normal(self):
        assert select_format(Compression.NORMAL, {}) == DMGFormat.UDZO

    @pytest.mark.parametrize("compression", list(Compression))
    def test_env_override_forces_zlib(self, compression):
        assert select_format(compression, {COMPRESSION_LEVEL_ENV: "9"}) == DMGFormat.UDZO

    def test_explicit_format_kept(self, context):
        resolved = compute_dmg_options(DMGOptions(format=DMGFormat.ULFO), context, env={})
        assert resolved.format == DMGFormat.ULFO

    def test_context_compression_used(self, context):
        resolved = compute_dmg_options(
            DMGOptions(), replace(context, compression=Compression.STORE), env={}
        )
        assert resolved.format == DMGFormat.UDRO


class TestContents:
    def test_default_layout(self, context):
        resolved = compute_dmg_options(DMGOptions(), context, env={})
        assert resolved.contents == DEFAULT_CONTENTS
        app, link = resolved.contents
        assert (app.x, app.y, app.type, app.path) == (130, 220, None, None)
        assert (link.x, link.y, link.type, link.path) == (410, 220, "link", "/Applications")

    def test_explicit_contents_kept(self, context):
        contents = (ContentsEntry(x=100, y=100),)
        resolved = compute_dmg_options(DMGOptions(contents=contents), context, env={})
        assert resolved.contents == contents


def test_passthrough_fields(context):
    options = DMGOptions(
        title="${productName}",
        sign=True,
        write_update_info=False,
        icon_size=96,
        window=WindowRect(width=600, height=400),
    )
    resolved = compute_dmg_options(options, context, env={})
    assert resolved.title == "${productName}"
    assert resolved.sign is True
    assert resolved.write_update_info is False
    assert resolved.icon_size == 96
    assert resolved.window.width == 600
    # source options are left untouched
    assert options.background is None
