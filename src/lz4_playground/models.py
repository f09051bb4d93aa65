from __future__ import annotations

"""Dataclasses shared by the codec loader, history store and orchestrator."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Mode(str, Enum):
    COMPRESS = "compress"
    DECOMPRESS = "decompress"

    @classmethod
    def parse(cls, value: "Mode | str") -> "Mode":
        """Return the mode for ``value``, accepting either the enum or its name."""
        if isinstance(value, Mode):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown mode '{value}'. Expected 'compress' or 'decompress'."
            ) from None


@dataclass
class SessionFields:
    """The bundle of input/output/mode/version for a single operation."""

    input_bytes: bytes = b""
    mode: Mode = Mode.COMPRESS
    codec_version: str = ""
    file_name: Optional[str] = None
    output_bytes: Optional[bytes] = None
    timestamp: Optional[int] = None

    @classmethod
    def empty(cls) -> "SessionFields":
        return cls()


@dataclass(frozen=True)
class PerformanceMetrics:
    original_size: int
    result_size: int
    ratio: float
    duration_ms: float
    throughput_mbps: float
    codec_version: str
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PerformanceMetrics":
        return cls(
            original_size=int(data["original_size"]),
            result_size=int(data["result_size"]),
            ratio=float(data["ratio"]),
            duration_ms=float(data["duration_ms"]),
            throughput_mbps=float(data["throughput_mbps"]),
            codec_version=str(data["codec_version"]),
            timestamp=int(data.get("timestamp") or 0),
        )


@dataclass(frozen=True)
class HistoryEntry:
    """
    One recorded operation. Entries are immutable; a filename correction
    produces a replacement entry via :func:`dataclasses.replace`.
    """

    mode: Mode
    timestamp: int
    original_size: int
    result_size: int
    ratio: float
    duration_ms: float
    throughput_mbps: float
    codec_version: str
    file_name: Optional[str] = None

    @classmethod
    def from_metrics(
        cls,
        metrics: PerformanceMetrics,
        mode: Mode,
        *,
        file_name: Optional[str] = None,
        timestamp: Optional[int] = None,
    ) -> "HistoryEntry":
        return cls(
            mode=mode,
            timestamp=timestamp if timestamp is not None else metrics.timestamp,
            original_size=metrics.original_size,
            result_size=metrics.result_size,
            ratio=metrics.ratio,
            duration_ms=metrics.duration_ms,
            throughput_mbps=metrics.throughput_mbps,
            codec_version=metrics.codec_version,
            file_name=file_name,
        )

    @property
    def metrics(self) -> PerformanceMetrics:
        return PerformanceMetrics(
            original_size=self.original_size,
            result_size=self.result_size,
            ratio=self.ratio,
            duration_ms=self.duration_ms,
            throughput_mbps=self.throughput_mbps,
            codec_version=self.codec_version,
            timestamp=self.timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            mode=Mode.parse(data["mode"]),
            timestamp=int(data["timestamp"]),
            original_size=int(data["original_size"]),
            result_size=int(data["result_size"]),
            ratio=float(data["ratio"]),
            duration_ms=float(data["duration_ms"]),
            throughput_mbps=float(data["throughput_mbps"]),
            codec_version=str(data["codec_version"]),
            file_name=data.get("file_name"),
        )


@dataclass
class ProcessResult:
    """Envelope returned by :meth:`ProcessingOrchestrator.process`."""

    mode: Mode
    version: str
    result_bytes: Optional[bytes] = None
    output_text: str = ""
    output_is_base64: bool = False
    metrics: Optional[PerformanceMetrics] = None
    file_name: Optional[str] = None
    timestamp: Optional[int] = None
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = [
    "Mode",
    "SessionFields",
    "PerformanceMetrics",
    "HistoryEntry",
    "ProcessResult",
]
