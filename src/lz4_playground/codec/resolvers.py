from __future__ import annotations

"""Ways of turning a codec version string into a loaded codec."""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

import httpx
from platformdirs import user_cache_dir

from ..exceptions import CodecLoadError, ConfigurationError
from ..package_utils import load_module_codec
from .base import BaseCodec
from .registry import get_codec_class

DEFAULT_CACHE_DIR = Path(user_cache_dir("lz4_playground", "LZ4Playground")) / "codecs"

_SAFE_VERSION_RE = re.compile(r"^[0-9A-Za-z][0-9A-Za-z.+_-]*$")


class CodecResolver(ABC):
    """Resolves a version string to a ready-to-use codec."""

    @abstractmethod
    def resolve(self, version: str) -> BaseCodec:
        """Return the codec for ``version`` or raise :class:`CodecLoadError`."""


class RegisteredCodecResolver(CodecResolver):
    """Instantiates codecs registered in-process (built-ins and plugins)."""

    def resolve(self, version: str) -> BaseCodec:
        try:
            cls = get_codec_class(version)
        except KeyError:
            raise CodecLoadError(
                f"No codec registered for version {version}",
                details={"version": version},
            ) from None
        try:
            return cls(version)
        except Exception as exc:
            raise CodecLoadError(
                f"Codec class for version {version} failed to initialise",
                details={"version": version, "error": str(exc)},
            ) from exc


class RemoteModuleResolver(CodecResolver):
    """
    Downloads a codec module for ``version`` and imports it.

    ``url_template`` must contain a ``{version}`` placeholder. The fetched
    source is cached under ``cache_dir/<version>/codec.py`` and must define
    module-level ``compress`` and ``decompress`` functions.
    """

    def __init__(
        self,
        url_template: str,
        *,
        cache_dir: Path | None = None,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        if "{version}" not in url_template:
            raise ConfigurationError(
                "codec_url_template must contain a '{version}' placeholder",
                details={"codec_url_template": url_template},
            )
        self.url_template = url_template
        self.cache_dir = Path(cache_dir) if cache_dir is not None else DEFAULT_CACHE_DIR
        self.client = client
        self.timeout = timeout

    def resolve(self, version: str) -> BaseCodec:
        if not _SAFE_VERSION_RE.match(version):
            raise CodecLoadError(
                f"Refusing to fetch codec for unsafe version string {version!r}",
                details={"version": version},
            )
        module_path = self._fetch(version)
        return load_module_codec(version, module_path)

    def _fetch(self, version: str) -> Path:
        target = self.cache_dir / version / "codec.py"
        if target.exists():
            logging.debug("Using cached codec module for %s at %s", version, target)
            return target

        url = self.url_template.format(version=version)
        logging.debug("Fetching codec module for %s from %s", version, url)
        try:
            if self.client is not None:
                response = self.client.get(url, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                    response = client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise CodecLoadError(
                f"Failed to fetch codec version {version}",
                details={"url": url, "error": str(exc)},
            ) from exc

        if not response.text.strip():
            raise CodecLoadError(
                f"Codec source for version {version} is empty",
                details={"url": url},
            )

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(response.text, encoding="utf-8")
        return target


class ChainedResolver(CodecResolver):
    """Tries each resolver in order; fails only when all of them fail."""

    def __init__(self, resolvers: Sequence[CodecResolver]) -> None:
        if not resolvers:
            raise ValueError("ChainedResolver needs at least one resolver")
        self.resolvers: List[CodecResolver] = list(resolvers)

    def resolve(self, version: str) -> BaseCodec:
        errors: List[str] = []
        for resolver in self.resolvers:
            try:
                return resolver.resolve(version)
            except CodecLoadError as exc:
                errors.append(f"{type(resolver).__name__}: {exc.message}")
        raise CodecLoadError(
            f"No resolver could load codec version {version}",
            details={"version": version, "errors": errors},
        )


def default_resolver(
    codec_url_template: Optional[str] = None,
    *,
    cache_dir: Path | None = None,
) -> CodecResolver:
    """Registered codecs first, then the remote module source when configured."""
    resolvers: List[CodecResolver] = [RegisteredCodecResolver()]
    if codec_url_template:
        resolvers.append(RemoteModuleResolver(codec_url_template, cache_dir=cache_dir))
    return ChainedResolver(resolvers)


__all__ = [
    "CodecResolver",
    "RegisteredCodecResolver",
    "RemoteModuleResolver",
    "ChainedResolver",
    "default_resolver",
    "DEFAULT_CACHE_DIR",
]
