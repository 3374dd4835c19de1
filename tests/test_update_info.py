"""Tests for update metadata."""

import asyncio
import base64
import hashlib

from build_dmg.update_info import CHUNK_SIZE, Sha512UpdateInfoBuilder, sha512_base64


def test_digest_spans_chunks(tmp_path):
    data = b"x" * (CHUNK_SIZE + 17)
    path = tmp_path / "big.dmg"
    path.write_bytes(data)
    assert sha512_base64(path) == base64.b64encode(hashlib.sha512(data).digest()).decode()


def test_builder(tmp_path):
    path = tmp_path / "Widget.dmg"
    path.write_bytes(b"disk image")
    info = asyncio.run(Sha512UpdateInfoBuilder().build(path, None))
    assert info.size == len(b"disk image")
    assert info.sha512 == sha512_base64(path)
    assert info.block_map_size is None
