"""Build runner that orchestrates build steps."""

from pathlib import Path

from build_dmg.arch import Arch
from build_dmg.config import BuildConfig
from build_dmg.errors import BuildStepError, InvalidConfigurationError
from build_dmg.events import ArtifactBuildStarted, ArtifactCreated
from build_dmg.steps.base import BuildStep, StepStatus
from build_dmg.steps.dmg import DMGCreateStep
from build_dmg.ui.protocol import BuildUI
from build_dmg.utils.process import CommandRunner, ProcessRunner


class ArtifactCollector:
    """Build listener that reports artifacts to the UI and keeps them for the summary."""

    def __init__(self, ui: BuildUI) -> None:
        self.ui = ui
        self.artifacts: list[ArtifactCreated] = []

    async def on_artifact_build_started(self, event: ArtifactBuildStarted) -> None:
        self.ui.log_info(f"Building {event.target_name} ({event.arch}): {event.file_path.name}")

    async def on_artifact_build_completed(self, event: ArtifactCreated) -> None:
        self.artifacts.append(event)
        self.ui.log_success(f"{event.file_path.name} ({event.arch})")
        if event.update_info is not None:
            self.ui.log_info(
                f"  size: {event.update_info.size}  sha512: {event.update_info.sha512}"
            )


def get_steps(app_path: Path, archs: list[Arch]) -> list[BuildStep]:
    """Get list of build steps: one DMG per architecture, in order."""
    return [DMGCreateStep(app_path, arch) for arch in archs]


async def run_build(
    config: BuildConfig,
    ui: BuildUI,
    app_path: Path,
    archs: list[Arch],
    use_pty: bool = True,
    runner: CommandRunner | None = None,
) -> bool:
    """Run the complete build process.

    Args:
        config: Build configuration
        ui: UI for output and status updates
        app_path: The .app bundle to package
        archs: Architectures to build, one DMG each
        use_pty: Whether to use PTY for subprocess execution
        runner: Process runner (a ProcessRunner is created if None)

    Returns:
        True if build succeeded, False otherwise
    """
    steps = get_steps(app_path, archs)
    if runner is None:
        runner = ProcessRunner(use_pty=use_pty)
    collector = ArtifactCollector(ui)

    step_results: list[tuple[str, StepStatus]] = []
    current_step = 0
    success = True

    try:
        for i, step in enumerate(steps, 1):
            current_step = i
            step.status = StepStatus.RUNNING

            await ui.log_step(i, len(steps), step.name)
            await ui.update_step_status(i, StepStatus.RUNNING)

            try:
                await step.execute(config, runner, collector, ui.log_output)
                step.status = StepStatus.SUCCESS
                await ui.update_step_status(i, StepStatus.SUCCESS)
                step_results.append((step.name, StepStatus.SUCCESS))

            except (BuildStepError, InvalidConfigurationError) as e:
                step.status = StepStatus.FAILED
                await ui.update_step_status(i, StepStatus.FAILED)
                ui.log_error(str(e))
                step_results.append((step.name, StepStatus.FAILED))
                success = False
                break

        # Steps after a failure were never reached
        for step in steps[current_step:]:
            step_results.append((step.name, StepStatus.PENDING))

    except Exception as e:
        ui.log_error(f"Unexpected error: {e}")
        success = False
        if 0 < current_step <= len(steps):
            failed = steps[current_step - 1]
            failed.status = StepStatus.FAILED
            await ui.update_step_status(current_step, StepStatus.FAILED)
            if len(step_results) < current_step:
                step_results.append((failed.name, StepStatus.FAILED))
            else:
                step_results[current_step - 1] = (failed.name, StepStatus.FAILED)

    ui.print_summary(
        steps=step_results,
        success=success,
        output_paths=[str(a.file_path) for a in collector.artifacts] if success else None,
        build_description=config.build_description,
    )

    return success
