"""
Application constants for the LZ4 playground engine.
"""

# Minimum duration in milliseconds. Substituted for zero or negative timings
# before any throughput division.
MIN_DURATION_MS = 0.001

# Throughput above this (MB/s) is treated as unmeasurable and reported as 0.
MAX_SPEED_MBPS = 10_000

BYTES_PER_MB = 1024 * 1024

# Encoded input longer than this is left out of share tokens.
MAX_URL_DATA_SIZE = 2000

# Last known good codec version, tried once when a requested version fails.
FALLBACK_CODEC_VERSION = "0.3.2"

# Version reported when the registry cannot be reached.
DEFAULT_CODEC_VERSION = "0.3.4"

DEFAULT_REGISTRY_URL = "https://jsr.io/@nick/lz4/meta.json"

LZ4_EXTENSION = ".lz4"

HISTORY_KEY = "lz4-compression-history"
LAST_METRICS_KEY = "lz4-last-metrics"

SHARE_QUERY_PARAM = "state"
