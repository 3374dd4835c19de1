"""DMG target: builds one disk image per architecture with dmgbuild."""

import json
import os
from collections.abc import Mapping
from pathlib import Path

from build_dmg.arch import Arch
from build_dmg.config import UNSET, DMGOptions, PackagerContext
from build_dmg.errors import BuildStepError, InvalidConfigurationError
from build_dmg.events import ArtifactBuildStarted, ArtifactCreated, BuildListener
from build_dmg.naming import (
    compute_safe_artifact_name,
    expand_artifact_name_pattern,
    expand_volume_title,
    get_arch_suffix,
    sanitize_file_name,
)
from build_dmg.options import ResolvedDMGOptions, compute_dmg_options
from build_dmg.signing import (
    DEVELOPER_ID_APPLICATION,
    MAC_DEVELOPER,
    find_identity,
    is_sign_allowed,
)
from build_dmg.update_info import Sha512UpdateInfoBuilder, UpdateInfoBuilder
from build_dmg.utils.process import Command, CommandRunner, OutputCallback

TEMPLATES_DIR = Path(__file__).parent / "templates"

DEFAULT_PYTHON = "/usr/bin/python3"


def get_dmg_templates_path() -> Path:
    """Directory holding the dmgbuild settings script (also its working dir)."""
    return TEMPLATES_DIR


async def _discard_output(text: str) -> None:
    pass


class DMGTarget:
    """Build a styled DMG for an application bundle.

    The target resolves its options on every ``build`` call, spawns
    ``python -m dmgbuild`` with the vendored settings script, optionally
    signs the image and reports the artifact to the listener.
    """

    name = "dmg"
    presentable_name = "DMG"

    def __init__(
        self,
        context: PackagerContext,
        options: DMGOptions,
        out_dir: Path,
        runner: CommandRunner,
        listener: BuildListener,
        update_info_builder: UpdateInfoBuilder | None = None,
        env: Mapping[str, str] | None = None,
        on_output: OutputCallback | None = None,
    ) -> None:
        """Initialize the target.

        Args:
            context: Packager state shared by all targets
            options: Unresolved [tool.build-dmg.dmg] options
            out_dir: Directory receiving the DMG
            runner: Spawns dmgbuild, security and codesign
            listener: Receives artifact notifications
            update_info_builder: Computes update metadata (SHA-512 by default)
            env: Environment to consult (defaults to os.environ)
            on_output: Async callback for progress and command output
        """
        self.context = context
        self.options = options
        self.out_dir = out_dir
        self.runner = runner
        self.listener = listener
        self.update_info_builder = update_info_builder or Sha512UpdateInfoBuilder()
        self.env = env if env is not None else os.environ
        self.on_output = on_output or _discard_output

    def compute_dmg_options(self) -> ResolvedDMGOptions:
        return compute_dmg_options(self.options, self.context, self.env)

    def compute_volume_name(self, arch: Arch, custom: str | None = None) -> str:
        """Volume name shown in Finder, from the optional title template."""
        app_info = self.context.app_info
        short_version = self.context.short_version
        arch_suffix = get_arch_suffix(arch, self.context.mac.default_arch)

        if custom is None:
            return f"{app_info.product_filename} {short_version}{arch_suffix}"

        return expand_volume_title(custom, arch_suffix.lstrip("-"), short_version, app_info)

    def compute_artifact_name(self, options: ResolvedDMGOptions, arch: Arch) -> str:
        mac = self.context.mac
        pattern = options.artifact_name or mac.artifact_name
        if pattern is None:
            version = mac.bundle_short_version or "${version}"
            pattern = "${productName}-" + version + "-${arch}.${ext}"
        return expand_artifact_name_pattern(
            pattern,
            "dmg",
            self.context.app_info,
            arch=arch,
            skip_default_arch=True,
            default_arch=mac.default_arch,
            env=self.env,
        )

    def dmgbuild_command(
        self,
        options: ResolvedDMGOptions,
        app_path: Path,
        volume_name: str,
        artifact_path: Path,
    ) -> Command:
        """Command spawning dmgbuild with the resolved options as defines."""
        templates = get_dmg_templates_path()
        defines = [f"app={app_path}"]
        if options.icon is not None:
            defines.append(f"icon={options.icon}")
        if options.background_color is not None:
            defines.append(f"background_color={options.background_color}")
        else:
            defines.append(f"background={options.background}")
        defines.append(f"format={options.format.value}")
        defines.append(
            "contents=" + json.dumps([entry.to_dict() for entry in options.contents])
        )
        if options.icon_size is not None:
            defines.append(f"icon_size={options.icon_size}")
        if options.icon_text_size is not None:
            defines.append(f"text_size={options.icon_text_size}")
        if options.window is not None:
            window = options.window
            defines.extend([
                f"window_x={window.x}",
                f"window_y={window.y}",
                f"window_width={window.width}",
                f"window_height={window.height}",
            ])

        args = ["-m", "dmgbuild", "-s", str(templates / "settings.py")]
        for define in defines:
            args.extend(["-D", define])
        args.extend([volume_name, str(artifact_path)])

        return Command(
            executable=self.env.get("PYTHON_PATH") or DEFAULT_PYTHON,
            args=tuple(args),
            cwd=templates,
            env={"LC_ALL": "C.UTF-8"},
        )

    async def build(self, app_path: Path, arch: Arch) -> Path:
        """Build the DMG for one architecture.

        Args:
            app_path: The .app bundle to package
            arch: Target architecture

        Returns:
            Path to the created DMG

        Raises:
            InvalidConfigurationError: If the options are contradictory
            BuildStepError: If dmgbuild or codesign fails
        """
        options = self.compute_dmg_options()

        volume_name = sanitize_file_name(self.compute_volume_name(arch, options.title))
        if not volume_name:
            raise InvalidConfigurationError(
                f"dmg.title {options.title!r} produces an empty volume name"
            )

        artifact_name = self.compute_artifact_name(options, arch)
        artifact_path = self.out_dir / artifact_name
        await self.listener.on_artifact_build_started(
            ArtifactBuildStarted(
                target_name=self.presentable_name,
                file_path=artifact_path,
                arch=arch,
            )
        )

        if not app_path.exists():
            raise BuildStepError("Creating DMG", f"App not found: {app_path}")
        self.out_dir.mkdir(parents=True, exist_ok=True)
        if artifact_path.exists():
            artifact_path.unlink()
            await self.on_output(f"Removed existing DMG: {artifact_path}\n")

        await self.on_output(f"App: {app_path}\n")
        await self.on_output(f"Volume: {volume_name}\n")
        await self.on_output(f"Format: {options.format.value}\n")
        await self.on_output(f"Output: {artifact_path}\n")

        command = self.dmgbuild_command(options, app_path, volume_name, artifact_path)
        await self._run("Creating DMG", command, "Failed to create DMG")
        await self.on_output(f"\033[32m✓ DMG created: {artifact_path}\033[0m\n")

        if options.sign is True:
            await self.sign_dmg(artifact_path)

        safe_artifact_name = compute_safe_artifact_name(
            artifact_name,
            "dmg",
            self.context.app_info,
        )
        update_info = None
        if options.write_update_info is not False:
            update_info = await self.update_info_builder.build(artifact_path, safe_artifact_name)

        await self.listener.on_artifact_build_completed(
            ArtifactCreated(
                file_path=artifact_path,
                safe_name=safe_artifact_name,
                target=self,
                arch=arch,
                packager=self.context,
                update_info_present=update_info is not None,
                update_info=update_info,
            )
        )
        return artifact_path

    async def sign_dmg(self, artifact_path: Path) -> None:
        """Sign the DMG with a Developer ID (or Mac Developer) identity.

        Skipped without error when signing is not allowed here, when the
        identity is explicitly disabled, or when no identity is found.

        Raises:
            BuildStepError: If codesign fails
        """
        if not is_sign_allowed(self.env):
            await self.on_output("Signing skipped: not allowed in this environment\n")
            return

        qualifier = self.context.mac.identity
        # explicitly disabled
        if qualifier is None:
            return
        if qualifier is UNSET:
            qualifier = self.env.get("CSC_NAME") or None

        keychain_file = self.context.keychain_file
        identity = await find_identity(
            DEVELOPER_ID_APPLICATION, qualifier, keychain_file, self.runner, self.on_output
        )
        if identity is None:
            identity = await find_identity(
                MAC_DEVELOPER, qualifier, keychain_file, self.runner, self.on_output
            )
            if identity is None:
                await self.on_output("Signing skipped: no valid identity found\n")
                return

        args = ["--sign", identity.hash]
        if keychain_file is not None:
            args.extend(["--keychain", keychain_file])
        args.append(str(artifact_path))

        await self.on_output(f"Signing with {identity.name}\n")
        await self._run("Signing DMG", Command("codesign", tuple(args)), "Failed to sign DMG")
        await self.on_output(f"\033[32m✓ Signed: {artifact_path}\033[0m\n")

    async def _run(self, step_name: str, command: Command, failure: str) -> None:
        await self.on_output(f"$ {command.display()}\n")
        try:
            exit_code = await self.runner.run(command, self.on_output)
        except FileNotFoundError as e:
            raise BuildStepError(step_name, f"{failure}: {e}") from e
        if exit_code != 0:
            raise BuildStepError(step_name, failure, exit_code=exit_code)
