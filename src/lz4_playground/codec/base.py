from __future__ import annotations

"""Codec interface consumed by the loader and orchestrator."""

from abc import ABC, abstractmethod
from types import ModuleType
from typing import Callable


class BaseCodec(ABC):
    """A loaded compress/decompress implementation for one version."""

    id = "base"
    display_name = "Base Codec"

    def __init__(self, version: str) -> None:
        self.version = version

    @abstractmethod
    def compress(self, data: bytes) -> bytes:
        """Return the compressed form of ``data``."""

    @abstractmethod
    def decompress(self, data: bytes) -> bytes:
        """Return the decompressed form of ``data``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(version={self.version!r})"


class ModuleCodec(BaseCodec):
    """Adapts a module exposing ``compress``/``decompress`` functions."""

    id = "module"
    display_name = "Module Codec"

    def __init__(self, version: str, module: ModuleType) -> None:
        super().__init__(version)
        self.module = module
        self._compress: Callable[[bytes], bytes] = getattr(module, "compress")
        self._decompress: Callable[[bytes], bytes] = getattr(module, "decompress")

    def compress(self, data: bytes) -> bytes:
        return bytes(self._compress(data))

    def decompress(self, data: bytes) -> bytes:
        return bytes(self._decompress(data))


__all__ = ["BaseCodec", "ModuleCodec"]
