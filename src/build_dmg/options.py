"""DMG option resolution.

Merges the user's [tool.build-dmg.dmg] table with computed defaults
(icon, background, compression format, window contents layout).
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from build_dmg.config import (
    Compression,
    ContentsEntry,
    DMGFormat,
    DMGOptions,
    PackagerContext,
    WindowRect,
)
from build_dmg.errors import InvalidConfigurationError

# Forces zlib compression regardless of the configured compression level
COMPRESSION_LEVEL_ENV = "BUILD_DMG_COMPRESSION_LEVEL"

# dmgbuild draws this background itself when no image is provided
BUILTIN_BACKGROUND = "builtin-arrow"

DEFAULT_CONTENTS = (
    ContentsEntry(x=130, y=220),
    ContentsEntry(x=410, y=220, type="link", path="/Applications"),
)


@dataclass(frozen=True)
class ResolvedDMGOptions:
    """DMG options with every default filled in.

    Exactly one of ``background`` and ``background_color`` is set.
    """

    icon: str | None
    background: str | None
    background_color: str | None
    format: DMGFormat
    contents: tuple[ContentsEntry, ...]
    title: str | None
    artifact_name: str | None
    sign: bool
    write_update_info: bool
    icon_size: int | None = None
    icon_text_size: int | None = None
    window: WindowRect | None = None


def compute_background(context: PackagerContext) -> str:
    """Background image from the build resources, else dmgbuild's built-in one."""
    for name in ("background.tiff", "background.png"):
        candidate = context.build_resources_dir / name
        if candidate.is_file():
            return str(candidate)
    return BUILTIN_BACKGROUND


def select_format(compression: Compression, env: Mapping[str, str]) -> DMGFormat:
    """Pick the image format for a compression level."""
    if env.get(COMPRESSION_LEVEL_ENV) is not None:
        return DMGFormat.UDZO
    if compression == Compression.STORE:
        return DMGFormat.UDRO
    if compression == Compression.MAXIMUM:
        return DMGFormat.UDBZ
    return DMGFormat.UDZO


def _resolve_path(project_dir: Path, value: str) -> str:
    return str((project_dir / value).resolve())


def compute_dmg_options(
    options: DMGOptions,
    context: PackagerContext,
    env: Mapping[str, str] | None = None,
) -> ResolvedDMGOptions:
    """Resolve DMG options against the packager context.

    Args:
        options: User configuration
        context: Packager state (app info, project dir, compression)
        env: Environment to consult (defaults to os.environ)

    Returns:
        New options object with all defaults applied

    Raises:
        InvalidConfigurationError: If icon is blank, or both background
            and background_color are set
    """
    if env is None:
        env = os.environ

    icon = options.icon
    if icon is None:
        icon = context.get_icon_path()
    elif not icon.strip():
        raise InvalidConfigurationError("dmg.icon cannot be specified as empty string")
    else:
        icon = _resolve_path(context.project_dir, icon)

    background = options.background
    if options.background_color is not None:
        if background is not None:
            raise InvalidConfigurationError(
                "Both dmg.background_color and dmg.background are specified - "
                "please set only one"
            )
    elif background is None:
        background = compute_background(context)
    else:
        background = _resolve_path(context.project_dir, background)

    fmt = options.format
    if fmt is None:
        fmt = select_format(context.compression, env)

    contents = options.contents
    if contents is None:
        contents = DEFAULT_CONTENTS

    return ResolvedDMGOptions(
        icon=icon,
        background=background,
        background_color=options.background_color,
        format=fmt,
        contents=contents,
        title=options.title,
        artifact_name=options.artifact_name,
        sign=options.sign,
        write_update_info=options.write_update_info,
        icon_size=options.icon_size,
        icon_text_size=options.icon_text_size,
        window=options.window,
    )
