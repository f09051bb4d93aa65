from __future__ import annotations

"""Registry of codec implementations keyed by version."""

from typing import Dict, List, Optional, Type, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from .base import BaseCodec

_CODEC_REGISTRY: Dict[str, Type["BaseCodec"]] = {}
_CODEC_INFO: Dict[str, Dict[str, Optional[str]]] = {}


def _ensure_plugins_loaded() -> None:
    """Load plugins if they have not been loaded yet."""
    from lz4_playground.plugin_loader import load_plugins

    load_plugins()


def register_codec(
    version: str,
    cls: Type["BaseCodec"],
    *,
    display_name: str | None = None,
    source: str = "built-in",
) -> None:
    """Register ``cls`` as the implementation of codec ``version``."""
    prev = _CODEC_INFO.get(version)
    overrides = prev["source"] if prev else None
    _CODEC_REGISTRY[version] = cls
    _CODEC_INFO[version] = {
        "display_name": display_name or getattr(cls, "display_name", version),
        "codec_class": f"{cls.__module__}.{cls.__qualname__}",
        "source": source,
        "overrides": overrides,
    }


def get_codec_class(version: str) -> Type["BaseCodec"]:
    """Return the codec class registered for ``version``."""
    _ensure_plugins_loaded()
    return _CODEC_REGISTRY[version]


def available_codec_versions() -> List[str]:
    _ensure_plugins_loaded()
    return sorted(_CODEC_REGISTRY)


def get_codec_metadata(version: str) -> Dict[str, Optional[str]] | None:
    _ensure_plugins_loaded()
    info = _CODEC_INFO.get(version)
    if info:
        info_with_version = info.copy()
        info_with_version["version"] = version
        return info_with_version
    return None


def all_codec_metadata() -> Dict[str, Dict[str, Optional[str]]]:
    _ensure_plugins_loaded()
    return dict(_CODEC_INFO)


__all__ = [
    "register_codec",
    "get_codec_class",
    "available_codec_versions",
    "get_codec_metadata",
    "all_codec_metadata",
]
