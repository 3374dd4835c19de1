"""Asynchronous subprocess execution for the DMG build tool.

External tools (dmgbuild, codesign, security) are described by a
``Command`` value and executed by a ``ProcessRunner``. Tests swap the
runner for a fake that records commands instead of spawning them.

dmgbuild prints colored progress when it thinks it talks to a terminal,
so the runner can attach the child to a pseudo-terminal (PTY).
"""

import asyncio
import fcntl
import os
import pty
import struct
import sys
import termios
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

OutputCallback = Callable[[str], Awaitable[None]]


@dataclass(frozen=True)
class Command:
    """External process invocation.

    ``env`` holds overrides only; they are merged over ``os.environ``
    when the process is spawned.
    """

    executable: str
    args: tuple[str, ...] = ()
    cwd: Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def argv(self) -> list[str]:
        """Full argument vector including the executable."""
        return [self.executable, *self.args]

    def display(self) -> str:
        """Shell-like rendering for log output."""
        return " ".join(self.argv)


class CommandRunner(Protocol):
    """Interface the build target uses to spawn external tools."""

    async def run(self, command: Command, on_output: OutputCallback | None = None) -> int:
        """Run command, streaming output. Returns exit code."""
        ...

    async def capture(self, command: Command) -> tuple[int, str]:
        """Run command and collect its combined output."""
        ...


def _merged_env(overrides: Mapping[str, str]) -> dict[str, str]:
    full_env = os.environ.copy()
    full_env.update(overrides)
    return full_env


class ProcessRunner:
    """Async subprocess runner with optional PTY for color preservation.

    When use_pty=True and running in a TTY, subprocesses are run through a PTY
    so they think they're connected to a real terminal and output colors.

    Raises FileNotFoundError if the executable does not exist.
    """

    def __init__(self, use_pty: bool = True) -> None:
        """Initialize the process runner.

        Args:
            use_pty: Whether to use PTY (only effective if parent is TTY)
        """
        self.use_pty = use_pty and sys.stdout.isatty()

    async def run(self, command: Command, on_output: OutputCallback | None = None) -> int:
        """Run command asynchronously, streaming output via async callback.

        Args:
            command: Command to run
            on_output: Async callback for output chunks

        Returns:
            Process exit code
        """
        if self.use_pty:
            return await self._run_with_pty(command, on_output)
        return await self._run_simple(command, on_output)

    async def capture(self, command: Command) -> tuple[int, str]:
        """Run command without streaming and return (exit code, output)."""
        process = await asyncio.create_subprocess_exec(
            *command.argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=command.cwd,
            env=_merged_env(command.env),
        )
        stdout, _ = await process.communicate()
        return process.returncode or 0, stdout.decode("utf-8", errors="replace")

    async def _run_with_pty(self, command: Command, on_output: OutputCallback | None) -> int:
        """Run with PTY for color preservation."""
        master_fd, slave_fd = pty.openpty()

        # rows, cols, xpixel, ypixel
        size = struct.pack("HHHH", 24, 120, 0, 0)
        fcntl.ioctl(master_fd, termios.TIOCSWINSZ, size)

        try:
            process = await asyncio.create_subprocess_exec(
                *command.argv,
                stdin=slave_fd,
                stdout=slave_fd,
                stderr=slave_fd,
                cwd=command.cwd,
                env=_merged_env(command.env),
            )
        except BaseException:
            os.close(slave_fd)
            os.close(master_fd)
            raise
        os.close(slave_fd)

        await self._read_fd_async(master_fd, on_output)

        os.close(master_fd)
        await process.wait()
        return process.returncode or 0

    async def _run_simple(self, command: Command, on_output: OutputCallback | None) -> int:
        """Non-PTY execution using native asyncio streams."""
        process = await asyncio.create_subprocess_exec(
            *command.argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=command.cwd,
            env=_merged_env(command.env),
        )

        if process.stdout:
            async for line in process.stdout:
                if on_output:
                    await on_output(line.decode("utf-8", errors="replace"))

        await process.wait()
        return process.returncode or 0

    async def _read_fd_async(self, fd: int, on_output: OutputCallback | None) -> None:
        """Read from file descriptor asynchronously using executor.

        File descriptor operations aren't async-native, so we use
        run_in_executor to avoid blocking the event loop.
        """
        loop = asyncio.get_running_loop()
        while True:
            try:
                data = await loop.run_in_executor(None, os.read, fd, 4096)
            except OSError:
                # PTY closed or process ended
                break
            if not data:
                break
            if on_output:
                await on_output(data.decode("utf-8", errors="replace"))
