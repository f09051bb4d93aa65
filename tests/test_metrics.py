import math

import pytest

from lz4_playground.constants import BYTES_PER_MB, MIN_DURATION_MS
from lz4_playground.metrics import (
    compression_ratio,
    compute_metrics,
    floor_duration,
    throughput_mbps,
)
from lz4_playground.models import Mode


def test_compress_ratio_is_fraction_saved() -> None:
    m = compute_metrics(Mode.COMPRESS, 1000, 250, 2.0, "0.3.4", timestamp=5)
    assert m.ratio == 0.75
    assert m.duration_ms == 2.0
    assert m.throughput_mbps == pytest.approx((1000 / BYTES_PER_MB) / 0.002)
    assert m.codec_version == "0.3.4"
    assert m.timestamp == 5


def test_decompress_ratio_is_expansion_factor() -> None:
    assert compression_ratio(Mode.DECOMPRESS, 250, 1000) == 4.0


def test_ratio_rounded_to_three_places() -> None:
    assert compression_ratio(Mode.COMPRESS, 1000, 333) == 0.667


def test_expanded_output_reports_zero_saving() -> None:
    assert compression_ratio(Mode.COMPRESS, 10, 30) == 0.0


def test_empty_input_gives_zero_ratio_and_throughput() -> None:
    m = compute_metrics("compress", 0, 19, 0.0, "0.3.4")
    assert m.ratio == 0.0
    assert m.throughput_mbps == 0.0


@pytest.mark.parametrize("duration", [0.0, -3.0, float("nan")])
def test_degenerate_duration_is_floored(duration: float) -> None:
    assert floor_duration(duration) == MIN_DURATION_MS
    m = compute_metrics(Mode.COMPRESS, 1000, 500, duration, "0.3.4")
    assert m.duration_ms == MIN_DURATION_MS
    assert math.isfinite(m.throughput_mbps)


def test_implausible_speed_is_reported_as_zero() -> None:
    # 100 MB in the minimum duration is far beyond the cap.
    assert throughput_mbps(100 * BYTES_PER_MB, 0.0) == 0.0


def test_negative_sizes_rejected() -> None:
    with pytest.raises(ValueError):
        compute_metrics(Mode.COMPRESS, -1, 0, 1.0, "0.3.4")


def test_metrics_dict_round_trip_keeps_fields() -> None:
    from lz4_playground.models import PerformanceMetrics

    m = compute_metrics(Mode.DECOMPRESS, 10, 40, 1.5, "0.3.2", timestamp=42)
    assert PerformanceMetrics.from_dict(m.to_dict()) == m
