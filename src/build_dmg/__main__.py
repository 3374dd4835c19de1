"""Entry point for the DMG build tool.

Usage:
    python -m build_dmg APP_PATH                 Build DMG for the host arch
    python -m build_dmg APP_PATH --arch arm64    Build DMG for arm64
    python -m build_dmg APP_PATH --sign          Build and sign
    python -m build_dmg APP_PATH --simple        Use simple output instead of TUI
"""

import asyncio
import sys
from pathlib import Path

from build_dmg.arch import Arch
from build_dmg.cli import apply_overrides, get_archs, parse_args, should_use_tui
from build_dmg.config import BuildConfig, load_config
from build_dmg.errors import InvalidConfigurationError
from build_dmg.runner import get_steps, run_build
from build_dmg.utils.logging import BuildLogger


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args()
    project_root = args.project.resolve()

    try:
        config = apply_overrides(load_config(project_root), args)
    except InvalidConfigurationError as e:
        print(f"\033[31mError loading configuration: {e}\033[0m", file=sys.stderr)
        return 1

    app_path = args.app_path.resolve()
    archs = get_archs(args)

    # Rotates previous logs
    logger = BuildLogger(config.output_dir, max_logs=config.max_log_files)

    if should_use_tui(args):
        return run_with_tui(config, app_path, archs, logger)
    return run_with_simple_ui(config, app_path, archs, logger)


def run_with_tui(config: BuildConfig, app_path: Path, archs: list[Arch], logger: BuildLogger) -> int:
    """Run build with Textual TUI."""
    from build_dmg.ui.app import BuildApp

    step_names = [step.name for step in get_steps(app_path, archs)]
    result = {"success": False}
    app: BuildApp | None = None

    logger.start()
    logger.write_line(f"=== Building DMG ({config.build_description}) ===")

    def start_build() -> None:
        asyncio.create_task(do_build())

    async def do_build() -> None:
        if app is None:
            return
        try:
            result["success"] = await run_build(config, app, app_path, archs, use_pty=True)
        except Exception as e:
            app.log_error(f"Build failed: {e}")
            result["success"] = False
        finally:
            app.exit()

    app = BuildApp(
        build_description=config.build_description,
        step_names=step_names,
        on_ready=start_build,
        logger=logger,
    )
    app.run()

    logger.close()
    return 0 if result["success"] else 1


def run_with_simple_ui(config: BuildConfig, app_path: Path, archs: list[Arch], logger: BuildLogger) -> int:
    """Run build with simple colored output."""
    from build_dmg.ui.simple import SimpleUI

    with logger:
        ui = SimpleUI(logger=logger)

        header = f"\033[32m=== Building DMG ({config.build_description}) ===\033[0m"
        print(header)
        logger.write_line(header)

        success = asyncio.run(
            run_build(config, ui, app_path, archs, use_pty=sys.stdout.isatty())
        )

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
