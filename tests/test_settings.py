"""Tests for the dmgbuild settings script shipped in the templates directory."""

import json

from build_dmg.target import get_dmg_templates_path

APP = "/x/Widget.app"

DEFAULT_CONTENTS = [
    {"x": 130, "y": 220},
    {"x": 410, "y": 220, "type": "link", "path": "/Applications"},
]


def load_settings(**defines):
    """Execute settings.py the way dmgbuild does, with ``defines`` injected."""
    defines.setdefault("app", APP)
    if "contents" in defines:
        defines["contents"] = json.dumps(defines["contents"])
    namespace = {"defines": defines}
    script = get_dmg_templates_path() / "settings.py"
    exec(compile(script.read_text(encoding="utf-8"), str(script), "exec"), namespace)
    return namespace


class TestContents:
    def test_default_layout(self):
        settings = load_settings(contents=DEFAULT_CONTENTS)
        assert settings["files"] == [APP]
        assert settings["symlinks"] == {"Applications": "/Applications"}
        assert settings["icon_locations"] == {
            "Widget.app": (130, 220),
            "Applications": (410, 220),
        }

    def test_named_file_entry(self):
        contents = DEFAULT_CONTENTS + [
            {"x": 270, "y": 360, "type": "file", "path": "/tmp/README.txt", "name": "Read Me"},
        ]
        settings = load_settings(contents=contents)
        assert settings["files"] == [APP, ("/tmp/README.txt", "Read Me")]
        assert settings["icon_locations"]["Read Me"] == (270, 360)

    def test_unnamed_file_uses_basename(self):
        contents = [{"x": 100, "y": 100}, {"x": 300, "y": 100, "path": "/tmp/LICENSE"}]
        settings = load_settings(contents=contents)
        assert settings["files"] == [APP, "/tmp/LICENSE"]
        assert settings["icon_locations"]["LICENSE"] == (300, 100)

    def test_named_link_entry(self):
        contents = [
            {"x": 100, "y": 100},
            {"x": 300, "y": 100, "type": "link", "path": "/Applications", "name": "Apps"},
        ]
        settings = load_settings(contents=contents)
        assert settings["symlinks"] == {"Apps": "/Applications"}
        assert settings["files"] == [APP]
        assert settings["icon_locations"] == {"Widget.app": (100, 100), "Apps": (300, 100)}

    def test_named_app_entry(self):
        settings = load_settings(contents=[{"x": 50, "y": 60, "name": "Widget Pro.app"}])
        assert settings["icon_locations"] == {"Widget Pro.app": (50, 60)}


class TestAppearance:
    def test_background_image(self):
        settings = load_settings(contents=[], background="/proj/build/background.png")
        assert settings["background"] == "/proj/build/background.png"

    def test_background_color(self):
        settings = load_settings(contents=[], background_color="#336699")
        assert settings["background"] == "#336699"

    def test_defaults(self):
        settings = load_settings()
        assert settings["icon"] is None
        assert settings["icon_size"] == 80
        assert settings["text_size"] == 12
        assert settings["window_rect"] == ((400, 100), (540, 380))
        assert settings["format"] == "UDZO"
        assert settings["arrange_by"] is None

    def test_window_and_icon_defines(self):
        settings = load_settings(
            icon="/proj/build/icon.icns",
            icon_size="96",
            text_size="14",
            window_x="200",
            window_y="120",
            window_width="640",
            window_height="480",
            format="UDBZ",
        )
        assert settings["icon"] == "/proj/build/icon.icns"
        assert settings["icon_size"] == 96
        assert settings["text_size"] == 14
        assert settings["window_rect"] == ((200, 120), (640, 480))
        assert settings["format"] == "UDBZ"
