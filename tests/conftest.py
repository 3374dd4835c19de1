"""Shared fixtures: a fake process runner and a recording build listener."""

from pathlib import Path

import pytest

from build_dmg.config import AppInfo, PackagerContext
from build_dmg.utils.process import Command

DEVELOPER_ID_HASH = "2" * 40
MAC_DEVELOPER_HASH = "1" * 40

FIND_IDENTITY_OUTPUT = f"""\
  1) {MAC_DEVELOPER_HASH} "Mac Developer: Jane Doe (XYZ9876543)"
  2) {DEVELOPER_ID_HASH} "Developer ID Application: Jane Doe (ABCDE12345)"
     2 valid identities found
"""


class FakeRunner:
    """Records commands instead of spawning them.

    A successful dmgbuild invocation writes a small file at the output path
    so later steps (update info) have something to read.
    """

    def __init__(self, exit_codes=None, outputs=None):
        # keyed by executable, or "dmgbuild" for the image builder
        self.commands: list[Command] = []
        self.exit_codes = exit_codes or {}
        self.outputs = outputs or {}

    async def run(self, command, on_output=None):
        self.commands.append(command)
        is_dmgbuild = command.args[:2] == ("-m", "dmgbuild")
        exit_code = self.exit_codes.get("dmgbuild" if is_dmgbuild else command.executable, 0)
        if exit_code == 0 and is_dmgbuild:
            Path(command.args[-1]).write_bytes(b"dmg")
        return exit_code

    async def capture(self, command):
        self.commands.append(command)
        return self.exit_codes.get(command.executable, 0), self.outputs.get(command.executable, "")

    def executables(self):
        return [command.executable for command in self.commands]


class RecordingListener:
    def __init__(self):
        self.events = []

    async def on_artifact_build_started(self, event):
        self.events.append(("started", event))

    async def on_artifact_build_completed(self, event):
        self.events.append(("completed", event))


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def resources_dir(tmp_path):
    resources = tmp_path / "build"
    resources.mkdir()
    return resources


@pytest.fixture
def context(tmp_path, resources_dir):
    return PackagerContext(
        app_info=AppInfo(name="widget", product_name="Widget", version="1.2.3"),
        project_dir=tmp_path,
        build_resources_dir=resources_dir,
    )


@pytest.fixture
def app_path(tmp_path):
    app = tmp_path / "dist" / "Widget.app"
    app.mkdir(parents=True)
    return app
