"""Artifact and volume naming.

Artifact names come from a pattern such as
``${productName}-${version}-${arch}.${ext}``; volume names shown in Finder
come from an optional title template. Both end up sanitized so they can
be used as file names.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from build_dmg.arch import DEFAULT_ARCH, Arch
from build_dmg.errors import InvalidConfigurationError

if TYPE_CHECKING:
    from build_dmg.config import AppInfo

MACRO = re.compile(r"\$\{([_a-zA-Z./*+]+)\}")

_ILLEGAL = re.compile(r'[/?<>\\:*|"]')
_CONTROL = re.compile(r"[\x00-\x1f\x80-\x9f]")
_RESERVED = re.compile(r"^\.+$")
_WINDOWS_RESERVED = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)
_WINDOWS_TRAILING = re.compile(r"[. ]+$")
_SAFE_GITHUB_NAME = re.compile(r"^[0-9A-Za-z._-]+$")

MAX_FILENAME_BYTES = 255

DEFAULT_SAFE_PATTERN = "${name}-${version}-${arch}.${ext}"


def sanitize_file_name(name: str) -> str:
    """Strip characters that are invalid in file names on any platform.

    Reserved names ("..", "con", ...) sanitize to an empty string.
    """
    sanitized = _ILLEGAL.sub("", name)
    sanitized = _CONTROL.sub("", sanitized)
    sanitized = _RESERVED.sub("", sanitized)
    sanitized = _WINDOWS_RESERVED.sub("", sanitized)
    sanitized = _WINDOWS_TRAILING.sub("", sanitized)
    encoded = sanitized.encode("utf-8")
    if len(encoded) > MAX_FILENAME_BYTES:
        sanitized = encoded[:MAX_FILENAME_BYTES].decode("utf-8", errors="ignore")
    return sanitized


def get_arch_suffix(arch: Arch, default_arch: Arch | None = None) -> str:
    """``-<arch>`` for non-default architectures, empty for the default."""
    if arch == (default_arch or DEFAULT_ARCH):
        return ""
    return f"-{arch.value}"


def expand_artifact_name_pattern(
    pattern: str,
    ext: str,
    app_info: AppInfo,
    arch: Arch | None = None,
    skip_default_arch: bool = True,
    default_arch: Arch | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Expand an artifact file name pattern.

    Supported macros: ``${productName}``, ``${name}``, ``${version}``,
    ``${ext}``, ``${arch}``, ``${os}``, ``${platform}`` and ``${env.NAME}``.
    When no architecture applies, the ``${arch}`` macro is removed together
    with its separator.

    Raises:
        InvalidConfigurationError: If the pattern uses an unknown macro
    """
    if env is None:
        env = os.environ
    if arch is not None and skip_default_arch and arch == (default_arch or DEFAULT_ARCH):
        arch = None

    if arch is None:
        for separator in ("-", " ", "_", "/"):
            pattern = pattern.replace(separator + "${arch}", "")
        pattern = pattern.replace("${arch}-", "")

    values = {
        "productName": app_info.product_filename,
        "name": app_info.name,
        "version": app_info.version,
        "ext": ext,
        "arch": arch.value if arch is not None else "",
        "os": "mac",
        "platform": "darwin",
    }

    def replace(match: re.Match[str]) -> str:
        macro = match.group(1)
        if macro.startswith("env."):
            return env.get(macro[4:], "")
        if macro not in values:
            raise InvalidConfigurationError(f"Macro {macro} is not defined")
        return values[macro]

    return sanitize_file_name(MACRO.sub(replace, pattern))


def expand_volume_title(
    template: str,
    arch_string: str,
    short_version: str,
    app_info: AppInfo,
) -> str:
    """Replace the volume title placeholders; other text is left untouched."""
    return (
        template.replace("${arch}", arch_string)
        .replace("${shortVersion}", short_version)
        .replace("${version}", app_info.version)
        .replace("${name}", app_info.name)
        .replace("${productName}", app_info.product_name)
    )


def is_safe_github_name(name: str) -> bool:
    """GitHub release assets only keep these characters."""
    return bool(_SAFE_GITHUB_NAME.match(name))


def compute_safe_artifact_name(
    suggested_name: str | None,
    ext: str,
    app_info: AppInfo,
    arch: Arch | None = None,
    default_arch: Arch | None = None,
    safe_pattern: str = DEFAULT_SAFE_PATTERN,
) -> str | None:
    """Name usable as an update-metadata key, or None if ``suggested_name`` already is.

    A name that is only unsafe because of spaces keeps its shape with the
    spaces replaced by dashes.
    """
    if suggested_name is not None:
        if is_safe_github_name(suggested_name):
            return None
        dashed = suggested_name.replace(" ", "-")
        if is_safe_github_name(dashed):
            return dashed

    return expand_artifact_name_pattern(
        safe_pattern,
        ext,
        app_info,
        arch=arch,
        default_arch=default_arch,
    )
