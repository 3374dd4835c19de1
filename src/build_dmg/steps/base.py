"""Base class for build steps."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from build_dmg.config import BuildConfig
    from build_dmg.events import BuildListener
    from build_dmg.utils.process import CommandRunner, OutputCallback


class StepStatus(Enum):
    """Status of a build step."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class BuildStep(ABC):
    """One unit of work shown as a row in the step list.

    The runner executes steps in order and stops at the first failure.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.status = StepStatus.PENDING

    @abstractmethod
    async def execute(
        self,
        config: "BuildConfig",
        runner: "CommandRunner",
        listener: "BuildListener",
        on_output: "OutputCallback",
    ) -> None:
        """Run the step.

        Args:
            config: Resolved build configuration
            runner: Spawns external tools
            listener: Receives artifact started/created events
            on_output: Async callback for tool output

        Raises:
            BuildStepError: If an external tool fails
            InvalidConfigurationError: If the options cannot be resolved
        """
        ...

