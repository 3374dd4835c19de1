"""Interface shared by the Textual app and the plain console UI."""

from typing import Protocol

from build_dmg.steps.base import StepStatus


class BuildUI(Protocol):
    """What ``run_build`` needs from a front end.

    ``BuildApp`` renders into a Textual screen, ``SimpleUI`` prints to
    stdout; the runner drives both the same way.
    """

    async def log_output(self, text: str) -> None:
        """Forward raw dmgbuild/codesign output, ANSI codes included."""
        ...

    async def log_step(self, step_num: int, total: int, name: str) -> None:
        """Announce step ``step_num`` of ``total`` (1-indexed)."""
        ...

    async def update_step_status(self, step_num: int, status: StepStatus) -> None:
        ...

    def log_success(self, message: str) -> None:
        ...

    def log_error(self, message: str) -> None:
        ...

    def log_info(self, message: str) -> None:
        ...

    def print_summary(
        self,
        steps: list[tuple[str, StepStatus]],
        success: bool,
        output_paths: list[str] | None = None,
        build_description: str | None = None,
    ) -> None:
        """Show per-step results and, on success, the DMG paths.

        Args:
            steps: (step name, final status) per architecture
            success: Whether every DMG was built
            output_paths: Created DMG files, None after a failure
            build_description: e.g. "Widget 1.2.3"
        """
        ...
