"""Configuration management for the DMG build tool.

Loads configuration from:
- pyproject.toml: [tool.build-dmg] app metadata, mac and dmg options
- Environment variables: signing identity and keychain (for local .env and CI)

Everything here is immutable once loaded; option resolution produces new
objects rather than updating these.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import tomllib
from dotenv import load_dotenv

from build_dmg.arch import Arch, arch_from_string
from build_dmg.errors import InvalidConfigurationError
from build_dmg.naming import sanitize_file_name


class Compression(Enum):
    """Global compression level of the build."""

    STORE = "store"
    NORMAL = "normal"
    MAXIMUM = "maximum"


class DMGFormat(Enum):
    """Disk image formats understood by hdiutil (see ``hdiutil create -help``)."""

    UDRW = "UDRW"  # read/write
    UDRO = "UDRO"  # read-only, uncompressed
    UDCO = "UDCO"  # ADC compressed
    UDZO = "UDZO"  # zlib compressed
    UDBZ = "UDBZ"  # bzip2 compressed
    ULFO = "ULFO"  # lzfse compressed


class _Unset(Enum):
    TOKEN = "unset"

    def __repr__(self) -> str:
        return "UNSET"


# Identity qualifier was not configured at all (None means "explicitly disabled")
UNSET = _Unset.TOKEN


@dataclass(frozen=True)
class ContentsEntry:
    """Item placed in the DMG window.

    An entry without ``path`` stands for the application bundle itself.
    """

    x: int
    y: int
    type: str | None = None
    path: str | None = None
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"x": self.x, "y": self.y}
        for key in ("type", "path", "name"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class WindowRect:
    """Finder window position and size in points."""

    x: int = 400
    y: int = 100
    width: int = 540
    height: int = 380


@dataclass(frozen=True)
class DMGOptions:
    """Raw [tool.build-dmg.dmg] configuration. Unset fields are None."""

    icon: str | None = None
    background: str | None = None
    background_color: str | None = None
    format: DMGFormat | None = None
    contents: tuple[ContentsEntry, ...] | None = None
    title: str | None = None
    artifact_name: str | None = None
    sign: bool = False
    write_update_info: bool = True
    icon_size: int | None = None
    icon_text_size: int | None = None
    window: WindowRect | None = None

    @classmethod
    def from_table(cls, table: dict[str, Any]) -> "DMGOptions":
        """Build options from a parsed TOML table."""
        fmt = table.get("format")
        contents = table.get("contents")
        window = table.get("window")
        try:
            return cls(
                icon=table.get("icon"),
                background=table.get("background"),
                background_color=table.get("background_color"),
                format=DMGFormat(fmt) if fmt is not None else None,
                contents=(
                    tuple(ContentsEntry(**entry) for entry in contents)
                    if contents is not None
                    else None
                ),
                title=table.get("title"),
                artifact_name=table.get("artifact_name"),
                sign=table.get("sign", False),
                write_update_info=table.get("write_update_info", True),
                icon_size=table.get("icon_size"),
                icon_text_size=table.get("icon_text_size"),
                window=WindowRect(**window) if window is not None else None,
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"Invalid dmg configuration: {e}") from e


@dataclass(frozen=True)
class AppInfo:
    """Application metadata used in artifact and volume names."""

    name: str
    product_name: str
    version: str

    @property
    def product_filename(self) -> str:
        """Product name made safe for use as a file name."""
        return sanitize_file_name(self.product_name)


@dataclass(frozen=True)
class MacOptions:
    """[tool.build-dmg.mac] options shared by all mac targets."""

    bundle_short_version: str | None = None
    default_arch: Arch | None = None
    identity: str | None | _Unset = UNSET
    artifact_name: str | None = None

    @classmethod
    def from_table(cls, table: dict[str, Any]) -> "MacOptions":
        identity = table.get("identity", UNSET)
        # TOML has no null; `identity = false` disables signing
        if identity is False:
            identity = None
        default_arch = table.get("default_arch")
        try:
            return cls(
                bundle_short_version=table.get("bundle_short_version"),
                default_arch=arch_from_string(default_arch) if default_arch else None,
                identity=identity,
                artifact_name=table.get("artifact_name"),
            )
        except ValueError as e:
            raise InvalidConfigurationError(f"Invalid mac configuration: {e}") from e


@dataclass(frozen=True)
class PackagerContext:
    """Packager state a target needs, passed explicitly instead of globals."""

    app_info: AppInfo
    project_dir: Path
    build_resources_dir: Path
    mac: MacOptions = field(default_factory=MacOptions)
    compression: Compression = Compression.NORMAL
    keychain_file: str | None = None

    @property
    def short_version(self) -> str:
        """CFBundleShortVersionString, falling back to the app version."""
        return self.mac.bundle_short_version or self.app_info.version

    def get_icon_path(self) -> str | None:
        """Default application icon from the build resources, if present."""
        icon = self.build_resources_dir / "icon.icns"
        if icon.is_file():
            return str(icon)
        return None


@dataclass(frozen=True)
class BuildConfig:
    """Runtime configuration combining pyproject settings + CLI args."""

    context: PackagerContext
    dmg: DMGOptions
    output_dir: Path
    max_log_files: int = 5

    @property
    def build_description(self) -> str:
        """Human-readable build description."""
        app = self.context.app_info
        signed = "signed" if self.dmg.sign else "unsigned"
        return f"{app.product_name} {self.context.short_version} ({signed})"


def _read_tool_table(project_root: Path) -> tuple[dict[str, Any], dict[str, Any]]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        raise InvalidConfigurationError(f"pyproject.toml not found in {project_root}")
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)

    try:
        tool = data["tool"]["build-dmg"]
    except KeyError as e:
        raise InvalidConfigurationError(
            f"Missing [tool.build-dmg] table in {pyproject_path}"
        ) from e
    return tool, data.get("project", {})


def load_config(project_root: Path) -> BuildConfig:
    """Load all configuration - .env file for local, env vars for CI.

    Args:
        project_root: Directory holding pyproject.toml

    Returns:
        Complete BuildConfig with all settings

    Raises:
        InvalidConfigurationError: If the configuration is missing or malformed
    """
    # Load .env file if it exists (no-op in CI where env vars are set directly)
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    tool, project = _read_tool_table(project_root)

    name = tool.get("name", project.get("name"))
    version = tool.get("version", project.get("version"))
    if not name or not version:
        raise InvalidConfigurationError("Application name and version must be configured")

    try:
        compression = Compression(tool.get("compression", "normal"))
    except ValueError as e:
        raise InvalidConfigurationError(f"Invalid compression: {e}") from e

    context = PackagerContext(
        app_info=AppInfo(
            name=name,
            product_name=tool.get("product_name", name),
            version=version,
        ),
        project_dir=project_root,
        build_resources_dir=project_root / tool.get("build_resources", "build"),
        mac=MacOptions.from_table(tool.get("mac", {})),
        compression=compression,
        keychain_file=os.environ.get("CSC_KEYCHAIN") or None,
    )

    return BuildConfig(
        context=context,
        dmg=DMGOptions.from_table(tool.get("dmg", {})),
        output_dir=project_root / tool.get("output", "dist"),
        max_log_files=tool.get("max_log_files", 5),
    )
