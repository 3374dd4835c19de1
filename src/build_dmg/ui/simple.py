"""Simple colored output UI for --simple mode and CI."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from build_dmg.steps.base import StepStatus

if TYPE_CHECKING:
    from build_dmg.utils.logging import BuildLogger


# ANSI color codes
BLUE = "\033[0;34m"
CYAN = "\033[0;36m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
RED = "\033[0;31m"
DIM = "\033[2m"
NC = "\033[0m"  # No color

STATUS_LABELS = {
    StepStatus.SUCCESS: ("[SUCCESS]", GREEN),
    StepStatus.FAILED: ("[FAILED ]", RED),
    StepStatus.RUNNING: ("[RUNNING]", YELLOW),
    StepStatus.PENDING: ("[PENDING]", DIM),
}


def format_status(status: StepStatus, colored: bool = True) -> str:
    """Bracketed status label, optionally wrapped in ANSI color."""
    label, color = STATUS_LABELS[status]
    if not colored:
        return label
    return f"{color}{label}{NC}"


class SimpleUI:
    """Non-TUI output handler with colored step headers.

    Used for:
    - --simple mode (TTY with colors)
    - CI mode (non-TTY, no colors)

    Colors are only output when stdout is a TTY.
    """

    def __init__(self, logger: BuildLogger | None = None) -> None:
        self.is_tty = sys.stdout.isatty()
        self.step_statuses: list[tuple[str, StepStatus]] = []
        self.logger = logger

    def _color(self, code: str) -> str:
        """Return color code if TTY, empty string otherwise."""
        return code if self.is_tty else ""

    def _emit(self, colored: str, plain: str) -> None:
        print(colored)
        if self.logger:
            self.logger.write(plain + "\n")

    async def log_output(self, text: str) -> None:
        """Print output directly to stdout (preserves ANSI from PTY)."""
        print(text, end="", flush=True)
        if self.logger:
            self.logger.write(text)

    async def log_step(self, step_num: int, total: int, name: str) -> None:
        print()
        self._emit(
            f"{self._color(CYAN)}[{step_num}/{total}] {name}{self._color(NC)}",
            f"\n[{step_num}/{total}] {name}",
        )
        self.step_statuses.append((name, StepStatus.RUNNING))

    async def update_step_status(self, step_num: int, status: StepStatus) -> None:
        if 0 < step_num <= len(self.step_statuses):
            name = self.step_statuses[step_num - 1][0]
            self.step_statuses[step_num - 1] = (name, status)

    def log_success(self, message: str) -> None:
        self._emit(f"  {self._color(GREEN)}✓ {message}{self._color(NC)}", f"  ✓ {message}")

    def log_error(self, message: str) -> None:
        self._emit(
            f"  {self._color(RED)}✗ ERROR: {message}{self._color(NC)}",
            f"  ✗ ERROR: {message}",
        )

    def log_info(self, message: str) -> None:
        self._emit(f"{self._color(BLUE)}{message}{self._color(NC)}", message)

    def print_summary(
        self,
        steps: list[tuple[str, StepStatus]],
        success: bool,
        output_paths: list[str] | None = None,
        build_description: str | None = None,
    ) -> None:
        """Print final build summary."""
        print()
        self._emit(f"{self._color(CYAN)}=== Build Summary ==={self._color(NC)}", "\n=== Build Summary ===")

        max_len = max(len(name) for name, _ in steps) if steps else 0
        for i, (name, status) in enumerate(steps, 1):
            self._emit(
                f"{format_status(status, self.is_tty)} [{i}/{len(steps)}] {name:<{max_len}}",
                f"{format_status(status, False)} [{i}/{len(steps)}] {name}",
            )

        print()
        if not success:
            self._emit(f"{self._color(RED)}=== Build Failed ==={self._color(NC)}", "=== Build Failed ===")
            return

        self._emit(f"{self._color(GREEN)}=== Build Complete ==={self._color(NC)}", "=== Build Complete ===")
        for path in output_paths or []:
            self.log_info(f"Output: {path}")
        if build_description:
            self.log_info(f"Build: {build_description}")
