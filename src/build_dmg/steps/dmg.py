"""DMG creation step: one DMGTarget build per architecture."""

from pathlib import Path

from build_dmg.arch import Arch
from build_dmg.config import BuildConfig
from build_dmg.events import BuildListener
from build_dmg.steps.base import BuildStep
from build_dmg.target import DMGTarget
from build_dmg.utils.process import CommandRunner, OutputCallback


class DMGCreateStep(BuildStep):
    """Create (and optionally sign) the DMG for one architecture."""

    def __init__(self, app_path: Path, arch: Arch) -> None:
        """Initialize the DMG creation step.

        Args:
            app_path: The .app bundle to package
            arch: Target architecture
        """
        super().__init__(f"Creating DMG ({arch.value})...")
        self.app_path = app_path
        self.arch = arch
        self.artifact_path: Path | None = None

    async def execute(
        self,
        config: BuildConfig,
        runner: CommandRunner,
        listener: BuildListener,
        on_output: OutputCallback,
    ) -> None:
        """Build the DMG with dmgbuild.

        Raises:
            BuildStepError: If dmgbuild or codesign fails
            InvalidConfigurationError: If the dmg options are contradictory
        """
        target = DMGTarget(
            context=config.context,
            options=config.dmg,
            out_dir=config.output_dir,
            runner=runner,
            listener=listener,
            on_output=on_output,
        )
        self.artifact_path = await target.build(self.app_path, self.arch)
