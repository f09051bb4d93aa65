from __future__ import annotations

"""Loads and caches the active codec, falling back to a known-good version."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..constants import FALLBACK_CODEC_VERSION
from ..exceptions import CodecUnavailable
from .base import BaseCodec
from .resolvers import CodecResolver, default_resolver


@dataclass
class CodecLoaderState:
    """The single active codec and the version it was loaded for."""

    version: Optional[str] = None
    codec: Optional[BaseCodec] = None
    ready: bool = False

    def reset(self) -> None:
        self.version = None
        self.codec = None
        self.ready = False


class CodecLoader:
    """
    Resolves codec versions through a :class:`CodecResolver`.

    The loader holds exactly one codec. Asking for another version drops the
    cached codec before anything else happens, so a mismatched version is
    never handed out. When the requested version fails to load, the loader
    tries ``fallback_version`` once; if that fails as well,
    :class:`CodecUnavailable` names the version that was asked for.
    """

    def __init__(
        self,
        resolver: CodecResolver | None = None,
        *,
        fallback_version: str = FALLBACK_CODEC_VERSION,
        state: CodecLoaderState | None = None,
    ) -> None:
        self.resolver = resolver or default_resolver()
        self.fallback_version = fallback_version
        self.state = state or CodecLoaderState()

    @property
    def active_version(self) -> Optional[str]:
        return self.state.version if self.state.ready else None

    def ensure_loaded(self, version: str) -> BaseCodec:
        state = self.state
        if state.codec is not None and state.version != version:
            logging.debug(
                "Discarding codec %s before loading %s", state.version, version
            )
            state.reset()

        if state.ready and state.codec is not None:
            return state.codec

        try:
            codec = self.resolver.resolve(version)
        except Exception as exc:
            logging.warning("Failed to load codec version %s: %s", version, exc)
            if version == self.fallback_version:
                raise CodecUnavailable(version, details={"error": str(exc)}) from exc
            codec = self._load_fallback(version, exc)
            return codec

        self._activate(version, codec)
        return codec

    def _load_fallback(self, requested: str, original: Exception) -> BaseCodec:
        try:
            codec = self.resolver.resolve(self.fallback_version)
        except Exception as exc:
            logging.error(
                "Fallback codec version %s failed to load: %s",
                self.fallback_version,
                exc,
            )
            raise CodecUnavailable(
                requested,
                details={
                    "error": str(original),
                    "fallback_version": self.fallback_version,
                    "fallback_error": str(exc),
                },
            ) from exc
        logging.warning(
            "Using fallback codec version %s instead of %s",
            self.fallback_version,
            requested,
        )
        self._activate(self.fallback_version, codec)
        return codec

    def _activate(self, version: str, codec: BaseCodec) -> None:
        self.state.version = version
        self.state.codec = codec
        self.state.ready = True


__all__ = ["CodecLoader", "CodecLoaderState"]
