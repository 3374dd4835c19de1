"""Textual TUI application for the DMG build tool.

Shows a table with one row per architecture being packaged and a
scrolling log of dmgbuild/codesign output. On exit the buffered output
is printed to the terminal so it stays in the scrollback.
"""

from __future__ import annotations

from collections.abc import Callable

from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import DataTable, Footer, Header, RichLog, Static

from build_dmg.steps.base import StepStatus
from build_dmg.ui.simple import CYAN, GREEN, NC, RED, format_status
from build_dmg.utils.logging import BuildLogger, strip_ansi

STATUS_MARKUP = {
    StepStatus.SUCCESS: "[green][SUCCESS][/green]",
    StepStatus.FAILED: "[red][FAILED ][/red]",
    StepStatus.RUNNING: "[yellow][RUNNING][/yellow]",
    StepStatus.PENDING: "[dim][PENDING][/dim]",
}


class BuildApp(App):
    """Textual TUI for DMG builds."""

    CSS = """
    #title {
        text-align: center;
        text-style: bold;
        padding: 1;
        background: $primary;
    }

    #steps-table {
        height: auto;
        max-height: 12;
        margin: 0 1;
    }

    #output-container {
        height: 1fr;
        margin: 0 1 1 1;
        border: solid $primary;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("ctrl+c", "quit", "Quit"),
    ]

    def __init__(
        self,
        build_description: str,
        step_names: list[str],
        on_ready: Callable[[], None] | None = None,
        logger: BuildLogger | None = None,
    ) -> None:
        """Initialize the build app.

        Args:
            build_description: Human-readable build description
            step_names: Names of the steps, in order
            on_ready: Callback to invoke after UI is mounted and ready
            logger: Optional build logger for saving output to file
        """
        super().__init__()
        self.build_description = build_description
        self.step_names = step_names
        self._on_ready = on_ready
        self.logger = logger

        # Replayed to the terminal after the TUI exits
        self.output_buffer: list[str] = []
        self._partial_line = ""
        self._mounted = False

        self.build_success = False
        self._summary_lines: list[str] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(f"DMG Build ({self.build_description})", id="title")
        yield DataTable(id="steps-table")
        with Vertical(id="output-container"):
            yield RichLog(id="output-log", highlight=True, markup=False)
        yield Footer()

    def on_mount(self) -> None:
        if self._mounted:
            return
        table = self.query_one("#steps-table", DataTable)
        table.add_column("Status", key="status")
        table.add_column("#", key="index")
        table.add_column("Step", key="step")
        total = len(self.step_names)
        for i, name in enumerate(self.step_names):
            table.add_row(STATUS_MARKUP[StepStatus.PENDING], f"[{i + 1}/{total}]", name, key=str(i))
        self._mounted = True

        if self._on_ready:
            self.set_timer(0.1, self._on_ready)

    def _write_log(self, text: str) -> None:
        if self._mounted:
            # RichLog renders markup, not ANSI escapes
            self.query_one("#output-log", RichLog).write(strip_ansi(text))

    def _buffer(self, colored: str, plain: str) -> None:
        self.output_buffer.append(colored)
        if self.logger:
            self.logger.write(plain)

    async def log_output(self, text: str) -> None:
        """Log command output, emitting completed lines only.

        A carriage return restarts the current line (progress output).
        """
        self._buffer(text, text)
        for char in text.replace("\r\n", "\n"):
            if char == "\n":
                self._write_log(self._partial_line)
                self._partial_line = ""
            elif char == "\r":
                self._partial_line = ""
            else:
                self._partial_line += char

    async def log_step(self, step_num: int, total: int, name: str) -> None:
        self._buffer(f"\n{CYAN}[{step_num}/{total}] {name}{NC}\n", f"\n[{step_num}/{total}] {name}\n")
        await self.update_step_status(step_num, StepStatus.RUNNING)
        self._write_log(f"{CYAN}[{step_num}/{total}] {name}{NC}")

    async def update_step_status(self, step_num: int, status: StepStatus) -> None:
        if not 1 <= step_num <= len(self.step_names) or not self._mounted:
            return
        table = self.query_one("#steps-table", DataTable)
        table.update_cell(str(step_num - 1), "status", STATUS_MARKUP[status])

    def log_success(self, message: str) -> None:
        self._buffer(f"  {GREEN}✓ {message}{NC}\n", f"  ✓ {message}\n")
        self._write_log(f"  {GREEN}✓ {message}{NC}")

    def log_error(self, message: str) -> None:
        self._buffer(f"  {RED}✗ ERROR: {message}{NC}\n", f"  ✗ ERROR: {message}\n")
        self._write_log(f"  {RED}✗ ERROR: {message}{NC}")

    def log_info(self, message: str) -> None:
        self._buffer(f"{message}\n", f"{message}\n")
        self._write_log(message)

    def print_summary(
        self,
        steps: list[tuple[str, StepStatus]],
        success: bool,
        output_paths: list[str] | None = None,
        build_description: str | None = None,
    ) -> None:
        """Store the summary; it is printed to the terminal in on_unmount."""
        self.build_success = success
        lines = [f"\n{CYAN}=== Build Summary ==={NC}\n"]
        for i, (name, status) in enumerate(steps, 1):
            lines.append(f"{format_status(status)} [{i}/{len(steps)}] {name}\n")
        if success:
            lines.append(f"\n{GREEN}=== Build Complete ==={NC}\n")
            lines.extend(f"Output: {path}\n" for path in output_paths or [])
            if build_description:
                lines.append(f"Build: {build_description}\n")
        else:
            lines.append(f"\n{RED}=== Build Failed ==={NC}\n")

        self._summary_lines = lines
        if self.logger:
            for line in lines:
                self.logger.write(line)

    def on_unmount(self) -> None:
        """Replay buffered output and the summary into the real terminal."""
        if self._partial_line:
            self.output_buffer.append("\n")
        for text in self.output_buffer + self._summary_lines:
            print(text, end="")
