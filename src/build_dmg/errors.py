"""Exceptions shared across the DMG build tool."""


class InvalidConfigurationError(ValueError):
    """Raised when user configuration is contradictory or malformed."""


class BuildStepError(Exception):
    """Exception raised when a build step fails."""

    def __init__(self, step_name: str, message: str, exit_code: int | None = None) -> None:
        """Initialize the error.

        Args:
            step_name: Name of the failed step
            message: Error message
            exit_code: Process exit code (if applicable)
        """
        self.step_name = step_name
        self.exit_code = exit_code
        super().__init__(f"{step_name}: {message}")
