"""LZ4 Playground session engine with lazy loading of submodules."""

from __future__ import annotations

import importlib
from typing import Any

__all__ = [
    "BaseCodec",
    "CodecLoader",
    "HistoryStore",
    "HistoryFilter",
    "Mode",
    "PerformanceMetrics",
    "HistoryEntry",
    "SessionFields",
    "ProcessingOrchestrator",
    "compute_metrics",
    "encode_share_token",
    "decode_share_token",
    "VersionRegistry",
]

_lazy_map = {
    "BaseCodec": "lz4_playground.codec",
    "CodecLoader": "lz4_playground.codec.loader",
    "HistoryStore": "lz4_playground.history",
    "HistoryFilter": "lz4_playground.history",
    "Mode": "lz4_playground.models",
    "PerformanceMetrics": "lz4_playground.models",
    "HistoryEntry": "lz4_playground.models",
    "SessionFields": "lz4_playground.models",
    "ProcessingOrchestrator": "lz4_playground.orchestrator",
    "compute_metrics": "lz4_playground.metrics",
    "encode_share_token": "lz4_playground.share",
    "decode_share_token": "lz4_playground.share",
    "VersionRegistry": "lz4_playground.versions",
}


def __getattr__(name: str) -> Any:  # pragma: no cover - simple passthrough
    if name in _lazy_map:
        module = importlib.import_module(_lazy_map[name])
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover - for completeness
    return sorted(list(globals().keys()) + list(_lazy_map.keys()))


__version__ = "0.1.0"
