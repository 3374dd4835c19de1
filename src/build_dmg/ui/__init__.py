"""UI components for the DMG build tool."""

from build_dmg.ui.protocol import BuildUI
from build_dmg.ui.simple import SimpleUI

__all__ = ["BuildUI", "SimpleUI"]
