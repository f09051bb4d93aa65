from __future__ import annotations

"""Codec interface, registry, built-in codecs and loading."""

from .base import BaseCodec, ModuleCodec
from .registry import (
    available_codec_versions,
    get_codec_class,
    get_codec_metadata,
    register_codec,
)
from .frame_codec import LZ4FrameCodec

__all__ = [
    "BaseCodec",
    "ModuleCodec",
    "LZ4FrameCodec",
    "register_codec",
    "get_codec_class",
    "available_codec_versions",
    "get_codec_metadata",
]
