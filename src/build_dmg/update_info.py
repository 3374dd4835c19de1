"""Update metadata for built artifacts.

Auto-updaters verify a downloaded DMG against the size and SHA-512
digest recorded at build time.
"""

import asyncio
import base64
import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class UpdateInfo:
    """Size and digest of an artifact as published in update metadata."""

    size: int
    sha512: str
    block_map_size: int | None = None


class UpdateInfoBuilder(Protocol):
    """Computes update metadata for a finished artifact."""

    async def build(self, artifact_path: Path, safe_name: str | None) -> UpdateInfo:
        ...


def sha512_base64(path: Path) -> str:
    """Base64 encoded SHA-512 digest of a file."""
    digest = hashlib.sha512()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return base64.b64encode(digest.digest()).decode("ascii")


class Sha512UpdateInfoBuilder:
    """Default builder: file size plus SHA-512, hashed off the event loop."""

    async def build(self, artifact_path: Path, safe_name: str | None) -> UpdateInfo:
        sha512 = await asyncio.to_thread(sha512_base64, artifact_path)
        return UpdateInfo(size=artifact_path.stat().st_size, sha512=sha512)
