"""Target architectures for macOS builds."""

import platform
from enum import Enum


class Arch(Enum):
    """Build architecture. Values are the names used in artifact names."""

    IA32 = "ia32"
    X64 = "x64"
    ARMV7L = "armv7l"
    ARM64 = "arm64"
    UNIVERSAL = "universal"

    def __str__(self) -> str:
        return self.value


DEFAULT_ARCH = Arch.X64


def arch_from_string(name: str | None) -> Arch:
    """Parse an architecture name; ``None`` means the default (x64).

    Raises:
        ValueError: If the name is not a known architecture
    """
    if name is None:
        return DEFAULT_ARCH
    if name == "x86_64":
        return Arch.X64
    if name == "aarch64":
        return Arch.ARM64
    return Arch(name)


def host_arch() -> Arch:
    """Architecture of the machine running the build."""
    try:
        return arch_from_string(platform.machine())
    except ValueError:
        return DEFAULT_ARCH
