from __future__ import annotations

"""Built-in codec backed by the ``lz4`` library's frame format."""

import lz4.frame

from ..constants import DEFAULT_CODEC_VERSION, FALLBACK_CODEC_VERSION
from .base import BaseCodec
from .registry import register_codec


class LZ4FrameCodec(BaseCodec):
    """Compresses into a self-describing LZ4 frame."""

    id = "lz4_frame"
    display_name = "LZ4 Frame (python-lz4)"

    def compress(self, data: bytes) -> bytes:
        return lz4.frame.compress(data)

    def decompress(self, data: bytes) -> bytes:
        return lz4.frame.decompress(data)


__all__ = ["LZ4FrameCodec", "BUILTIN_VERSIONS"]

BUILTIN_VERSIONS = (FALLBACK_CODEC_VERSION, DEFAULT_CODEC_VERSION)

# Self-register on import so the known-good versions load without a network.
for _version in BUILTIN_VERSIONS:
    register_codec(
        _version,
        LZ4FrameCodec,
        display_name=LZ4FrameCodec.display_name,
        source="built-in",
    )
