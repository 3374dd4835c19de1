"""Notifications sent by targets to the owning build pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from build_dmg.arch import Arch

if TYPE_CHECKING:
    from build_dmg.config import PackagerContext
    from build_dmg.update_info import UpdateInfo


@dataclass(frozen=True)
class ArtifactBuildStarted:
    """Sent before the external builder is spawned."""

    target_name: str
    file_path: Path
    arch: Arch | None


@dataclass(frozen=True)
class ArtifactCreated:
    """Sent once the artifact (and its update info, if any) is ready."""

    file_path: Path
    safe_name: str | None
    target: Any
    arch: Arch | None
    packager: PackagerContext
    update_info_present: bool
    update_info: UpdateInfo | None = None


class BuildListener(Protocol):
    """Pipeline side of the artifact notifications."""

    async def on_artifact_build_started(self, event: ArtifactBuildStarted) -> None:
        ...

    async def on_artifact_build_completed(self, event: ArtifactCreated) -> None:
        ...
