"""Build steps for the DMG build tool."""

from build_dmg.errors import BuildStepError
from build_dmg.steps.base import BuildStep, StepStatus
from build_dmg.steps.dmg import DMGCreateStep

__all__ = [
    "BuildStep",
    "BuildStepError",
    "StepStatus",
    "DMGCreateStep",
]
