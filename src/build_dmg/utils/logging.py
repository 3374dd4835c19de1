"""Build log management with rotation.

Keeps up to N build logs (configurable via max_log_files in
[tool.build-dmg]) in the build output directory:
- log/build.log (current/most recent)
- log/build.log.1 (previous)
- log/build.log.2, log/build.log.3, ... (older)
"""

import re
from pathlib import Path

DEFAULT_MAX_LOGS = 5

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def get_log_dir(output_dir: Path) -> Path:
    """Get the log directory path inside the build output directory."""
    return output_dir / "log"


def get_log_path(output_dir: Path, index: int = 0) -> Path:
    """Get path to a specific log file.

    Args:
        output_dir: Build output directory
        index: Log index (0 = current, 1+ = older)

    Returns:
        Path to the log file
    """
    log_dir = get_log_dir(output_dir)
    if index == 0:
        return log_dir / "build.log"
    return log_dir / f"build.log.{index}"


def rotate_logs(output_dir: Path, max_logs: int = DEFAULT_MAX_LOGS) -> None:
    """Rotate existing logs before starting a new build.

    Renames logs from oldest to newest, deleting the oldest if at limit.
    """
    log_dir = get_log_dir(output_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    oldest = get_log_path(output_dir, max_logs - 1)
    if oldest.exists():
        oldest.unlink()

    for i in range(max_logs - 2, -1, -1):
        current = get_log_path(output_dir, i)
        if current.exists():
            current.rename(get_log_path(output_dir, i + 1))


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return ANSI_ESCAPE.sub("", text)


class BuildLogger:
    """Collects and writes build logs."""

    def __init__(self, output_dir: Path, max_logs: int = DEFAULT_MAX_LOGS) -> None:
        self.output_dir = output_dir
        self.max_logs = max_logs
        self.log_path = get_log_path(output_dir)
        self.buffer: list[str] = []
        self._file_handle = None

    def start(self) -> None:
        """Start logging - rotate logs and open new log file."""
        rotate_logs(self.output_dir, self.max_logs)
        self._file_handle = open(self.log_path, "w", encoding="utf-8")

    def write(self, text: str) -> None:
        """Write text to the log (ANSI codes are stripped in the file)."""
        self.buffer.append(text)
        if self._file_handle:
            self._file_handle.write(strip_ansi(text))
            self._file_handle.flush()

    def write_line(self, text: str) -> None:
        """Write a line to the log (newline added if missing)."""
        if not text.endswith("\n"):
            text = text + "\n"
        self.write(text)

    def close(self) -> None:
        """Close the log file."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self) -> "BuildLogger":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
