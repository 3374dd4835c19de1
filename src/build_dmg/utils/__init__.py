"""Utility modules for the DMG build tool."""

from build_dmg.utils.logging import BuildLogger, rotate_logs
from build_dmg.utils.process import Command, CommandRunner, ProcessRunner

__all__ = ["BuildLogger", "Command", "CommandRunner", "ProcessRunner", "rotate_logs"]
