from __future__ import annotations

"""Performance metrics for a single compress/decompress operation."""

import math

from .constants import BYTES_PER_MB, MAX_SPEED_MBPS, MIN_DURATION_MS
from .models import Mode, PerformanceMetrics


def floor_duration(duration_ms: float) -> float:
    """Return ``duration_ms``, or ``MIN_DURATION_MS`` if it is not a positive number."""
    if not duration_ms > 0 or not math.isfinite(duration_ms):
        return MIN_DURATION_MS
    return float(duration_ms)


def compression_ratio(mode: Mode, original_size: int, result_size: int) -> float:
    """
    Ratio for ``mode``, rounded to three decimal places.

    For compression this is the fraction of bytes saved (1.0 = everything,
    0 = nothing; an expanded output is also reported as 0). For decompression
    it is the expansion factor.
    """
    if original_size == 0:
        return 0.0
    if mode is Mode.COMPRESS:
        ratio = (original_size - result_size) / original_size
        ratio = max(ratio, 0.0)
    else:
        ratio = result_size / original_size
    return round(ratio, 3)


def throughput_mbps(original_size: int, duration_ms: float) -> float:
    """MB/s over the original payload; 0 when the value is not measurable."""
    seconds = floor_duration(duration_ms) / 1000
    speed = (original_size / BYTES_PER_MB) / seconds
    if not math.isfinite(speed) or speed > MAX_SPEED_MBPS:
        return 0.0
    return speed


def compute_metrics(
    mode: Mode | str,
    original_size: int,
    result_size: int,
    duration_ms: float,
    codec_version: str,
    *,
    timestamp: int = 0,
) -> PerformanceMetrics:
    """Build the :class:`PerformanceMetrics` snapshot for one operation."""
    if original_size < 0 or result_size < 0:
        raise ValueError("Sizes must be non-negative")
    mode = Mode.parse(mode)
    duration = floor_duration(duration_ms)
    return PerformanceMetrics(
        original_size=original_size,
        result_size=result_size,
        ratio=compression_ratio(mode, original_size, result_size),
        duration_ms=duration,
        throughput_mbps=throughput_mbps(original_size, duration),
        codec_version=codec_version,
        timestamp=timestamp,
    )


__all__ = ["compute_metrics", "compression_ratio", "throughput_mbps", "floor_duration"]
