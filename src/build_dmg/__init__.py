"""Package macOS application bundles into DMG disk images."""

from build_dmg.arch import Arch
from build_dmg.config import AppInfo, DMGOptions, MacOptions, PackagerContext
from build_dmg.errors import BuildStepError, InvalidConfigurationError
from build_dmg.options import ResolvedDMGOptions, compute_dmg_options
from build_dmg.target import DMGTarget

__all__ = [
    "AppInfo",
    "Arch",
    "BuildStepError",
    "DMGOptions",
    "DMGTarget",
    "InvalidConfigurationError",
    "MacOptions",
    "PackagerContext",
    "ResolvedDMGOptions",
    "compute_dmg_options",
]
