"""Command-line interface for the DMG build tool."""

import argparse
import dataclasses
import sys
from pathlib import Path

from build_dmg.arch import Arch, host_arch
from build_dmg.config import BuildConfig


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse, or None to use sys.argv

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="build_dmg",
        description="Package a macOS application bundle into a DMG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m build_dmg "dist/My App.app"                        DMG for this machine's arch
  python -m build_dmg "dist/My App.app" --arch x64 --arch arm64
  python -m build_dmg "dist/My App.app" --sign                 Sign with Developer ID
  python -m build_dmg "dist/My App.app" --simple               Plain output instead of TUI
        """,
    )

    parser.add_argument("app_path", type=Path, help="Path to the .app bundle")
    parser.add_argument(
        "--arch",
        dest="archs",
        action="append",
        choices=[arch.value for arch in Arch],
        help="Architecture to build (repeatable, default: host architecture)",
    )
    parser.add_argument(
        "--project",
        type=Path,
        default=Path.cwd(),
        help="Directory containing pyproject.toml (default: current directory)",
    )

    # Signing (overrides [tool.build-dmg.dmg] sign)
    sign = parser.add_mutually_exclusive_group()
    sign.add_argument("--sign", dest="sign", action="store_true", default=None, help="Sign the DMG")
    sign.add_argument("--no-sign", dest="sign", action="store_false", help="Do not sign the DMG")

    parser.add_argument(
        "--no-update-info",
        action="store_true",
        help="Skip computing update metadata (size, sha512)",
    )
    parser.add_argument(
        "--simple",
        action="store_true",
        help="Use simple output instead of TUI (colors preserved)",
    )

    return parser.parse_args(args)


def get_archs(args: argparse.Namespace) -> list[Arch]:
    """Requested architectures without duplicates, or the host architecture."""
    if not args.archs:
        return [host_arch()]
    return [Arch(name) for name in dict.fromkeys(args.archs)]


def apply_overrides(config: BuildConfig, args: argparse.Namespace) -> BuildConfig:
    """Return a copy of the config with command-line overrides applied."""
    dmg = config.dmg
    if args.sign is not None:
        dmg = dataclasses.replace(dmg, sign=args.sign)
    if args.no_update_info:
        dmg = dataclasses.replace(dmg, write_update_info=False)
    return dataclasses.replace(config, dmg=dmg)


def should_use_tui(args: argparse.Namespace) -> bool:
    """Determine whether to use Textual TUI.

    Returns False if:
    - User requested simple output (--simple)
    - Not running in a TTY (CI, piped output)
    """
    if args.simple:
        return False
    return sys.stdout.isatty()
