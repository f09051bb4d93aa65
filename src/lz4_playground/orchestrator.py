from __future__ import annotations

"""Drives a single compress/decompress operation from raw input to history."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional, Union

from .binary_utils import decode_base64, decode_text_or_base64, encode_base64
from .codec.loader import CodecLoader
from .constants import LAST_METRICS_KEY, LZ4_EXTENSION
from .exceptions import CodecExecutionFailed, InvalidEncoding, PlaygroundError
from .history import HistoryStore
from .metrics import compute_metrics
from .models import HistoryEntry, Mode, PerformanceMetrics, ProcessResult
from .persistence import InMemoryKeyValueStore, KeyValueStore, load_value, save_value
from .samples import get_sample
from .share import DecodedShare, decode_share_token

InputData = Union[str, bytes, bytearray, memoryview]

SHARE_MISSING_DATA_WARNING = (
    "This shared link doesn't include the actual data, only the configuration."
)
SHARE_INVALID_WARNING = (
    "Failed to load the shared compression data. The link might be invalid or corrupted."
)


class ProcessingState(str, Enum):
    IDLE = "idle"
    PREPARING = "preparing"
    LOADING = "loading"
    EXECUTING = "executing"
    MEASURING = "measuring"
    RECORDING = "recording"
    FAILED = "failed"


_READY_STATES = (ProcessingState.IDLE, ProcessingState.FAILED)


def default_file_name(mode: Mode | str, *, now: datetime | None = None) -> str:
    """Name used for text input that was never given one."""
    moment = now or datetime.now(timezone.utc)
    stamp = moment.isoformat(timespec="milliseconds").replace(":", "-").replace(".", "-")
    if Mode.parse(mode) is Mode.COMPRESS:
        return f"untitled-{stamp}.txt"
    return f"compressed-{stamp}{LZ4_EXTENSION}"


def output_file_name(
    file_name: Optional[str], mode: Mode | str, *, now_ms: int | None = None
) -> str:
    """Apply the output extension policy: add ``.lz4`` on compress, strip it on decompress."""
    name = file_name or f"file-{now_ms if now_ms is not None else int(time.time() * 1000)}"
    if Mode.parse(mode) is Mode.COMPRESS:
        if not name.endswith(LZ4_EXTENSION):
            name = f"{name}{LZ4_EXTENSION}"
    elif name.endswith(LZ4_EXTENSION):
        name = name[: -len(LZ4_EXTENSION)]
    return name


@dataclass
class PreparedInput:
    text: str
    file_name: Optional[str]
    is_base64: bool


@dataclass
class SharedOpen:
    decoded: DecodedShare
    result: Optional[ProcessResult] = None
    warning: Optional[str] = None


def _decode_metrics(value: Any) -> Optional[PerformanceMetrics]:
    if value is None:
        return None
    return PerformanceMetrics.from_dict(value)


class ProcessingOrchestrator:
    """
    Runs ``process`` calls through
    ``IDLE -> PREPARING -> LOADING -> EXECUTING -> MEASURING -> RECORDING -> IDLE``.

    Any :class:`PlaygroundError` raised on the way moves the orchestrator to
    ``FAILED`` and is reported on :attr:`ProcessResult.error`. History and the
    last metrics snapshot are only written in ``RECORDING``, so a failed call
    leaves both untouched. Only one call may be in flight at a time.
    """

    def __init__(
        self,
        loader: CodecLoader | None = None,
        history: HistoryStore | None = None,
        storage: KeyValueStore | None = None,
        *,
        clock: Callable[[], float] = time.time,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.storage = storage if storage is not None else InMemoryKeyValueStore()
        self.loader = loader or CodecLoader()
        self.history = history if history is not None else HistoryStore(self.storage)
        self._clock = clock
        self._timer = timer
        self.state = ProcessingState.IDLE
        self.last_error: Optional[str] = None
        self.last_timestamp: Optional[int] = None
        self._last_metrics: Optional[PerformanceMetrics] = load_value(
            self.storage, LAST_METRICS_KEY, None, _decode_metrics
        )

    @property
    def last_metrics(self) -> Optional[PerformanceMetrics]:
        return self._last_metrics

    @property
    def busy(self) -> bool:
        return self.state not in _READY_STATES

    # --------------------------------------------------------------
    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    @staticmethod
    def _prepare(data: InputData, mode: Mode, is_base64: bool) -> bytes:
        if isinstance(data, (bytes, bytearray, memoryview)):
            return bytes(data)
        if mode is Mode.DECOMPRESS and is_base64:
            return decode_base64(data)
        try:
            return data.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidEncoding(
                "Input text is not valid UTF-8.",
                details={"reason": str(exc)},
            ) from exc

    def _execute(self, codec: Any, mode: Mode, payload: bytes) -> bytes:
        try:
            if mode is Mode.COMPRESS:
                return bytes(codec.compress(payload))
            return bytes(codec.decompress(payload))
        except Exception as exc:
            raise CodecExecutionFailed(
                f"Failed to {mode.value} data with codec {codec.version}: {exc}",
                details={"version": codec.version, "error_type": type(exc).__name__},
            ) from exc

    def _remember_metrics(self, metrics: PerformanceMetrics) -> None:
        self._last_metrics = metrics
        try:
            save_value(self.storage, LAST_METRICS_KEY, metrics.to_dict())
        except OSError as exc:
            logging.warning("Could not persist last metrics: %s", exc)

    def process(
        self,
        data: InputData,
        mode: Mode | str,
        version: str,
        file_name: Optional[str] = None,
        *,
        is_base64: bool = False,
    ) -> ProcessResult:
        """
        Compress or decompress ``data`` with codec ``version``.

        ``bytes`` input is treated as file content. ``str`` input is UTF-8
        text, unless ``mode`` is decompress and ``is_base64`` is set, in
        which case it is base64-decoded first.
        """
        mode = Mode.parse(mode)
        if self.busy:
            return ProcessResult(
                mode=mode,
                version=version,
                error="A processing operation is already in progress",
            )

        self.last_error = None
        try:
            self.state = ProcessingState.PREPARING
            payload = self._prepare(data, mode, is_base64)

            self.state = ProcessingState.LOADING
            codec = self.loader.ensure_loaded(version)

            self.state = ProcessingState.EXECUTING
            started = self._timer()
            output = self._execute(codec, mode, payload)
            elapsed_ms = (self._timer() - started) * 1000

            self.state = ProcessingState.MEASURING
            timestamp = self._now_ms()
            metrics = compute_metrics(
                mode,
                len(payload),
                len(output),
                elapsed_ms,
                codec.version,
                timestamp=timestamp,
            )

            self.state = ProcessingState.RECORDING
            name = output_file_name(file_name or default_file_name(mode), mode)
            self.history.append(
                HistoryEntry.from_metrics(metrics, mode, file_name=name)
            )
            self._remember_metrics(metrics)
        except PlaygroundError as exc:
            self.state = ProcessingState.FAILED
            self.last_error = exc.message
            logging.error("Processing error: %s", exc)
            return ProcessResult(
                mode=mode, version=version, error=exc.message, details=exc.details
            )
        except OSError as exc:
            self.state = ProcessingState.FAILED
            self.last_error = f"Could not record the operation: {exc}"
            logging.error("Processing error: %s", exc)
            return ProcessResult(mode=mode, version=version, error=self.last_error)
        except Exception as exc:
            self.state = ProcessingState.FAILED
            self.last_error = f"Unexpected error while processing: {exc}"
            logging.exception("Unexpected processing error")
            return ProcessResult(
                mode=mode,
                version=version,
                error=self.last_error,
                details={"error_type": type(exc).__name__},
            )

        if mode is Mode.COMPRESS:
            text, as_base64 = encode_base64(output), True
        else:
            text, as_base64 = decode_text_or_base64(output)

        self.last_timestamp = timestamp
        self.state = ProcessingState.IDLE
        return ProcessResult(
            mode=mode,
            version=codec.version,
            result_bytes=output,
            output_text=text,
            output_is_base64=as_base64,
            metrics=metrics,
            file_name=name,
            timestamp=timestamp,
        )

    # --------------------------------------------------------------
    def rename_output(self, old_name: Optional[str], new_name: Optional[str]) -> bool:
        """Correct the filename recorded for the most recent operation."""
        return self.history.rename_by_timestamp(self.last_timestamp, old_name, new_name)

    def prepare_sample(self, sample_id: str, mode: Mode | str, version: str) -> PreparedInput:
        """
        Return the input for a built-in sample.

        In decompress mode the sample is compressed on the fly and handed back
        as base64, falling back to the raw text if that fails.
        """
        sample = get_sample(sample_id)
        if sample is None:
            raise ValueError(f"Unknown sample '{sample_id}'")
        if Mode.parse(mode) is Mode.COMPRESS:
            return PreparedInput(sample.data, sample.file_name, False)
        try:
            codec = self.loader.ensure_loaded(version)
            compressed = codec.compress(sample.data.encode("utf-8"))
        except Exception as exc:
            logging.warning("Error compressing sample %s: %s", sample_id, exc)
            return PreparedInput(sample.data, sample.file_name, False)
        return PreparedInput(
            encode_base64(compressed),
            output_file_name(sample.file_name, Mode.COMPRESS),
            True,
        )

    def open_shared(self, token: str) -> SharedOpen:
        """
        Decode a share token and, when it carries input but no output,
        process that input straight away.
        """
        decoded = decode_share_token(token)
        if decoded.error is not None:
            return SharedOpen(decoded=decoded, warning=SHARE_INVALID_WARNING)
        if decoded.payload_omitted:
            return SharedOpen(decoded=decoded, warning=SHARE_MISSING_DATA_WARNING)

        session = decoded.session
        if session.timestamp:
            self.last_timestamp = session.timestamp
        if session.input_bytes and session.codec_version and session.output_bytes is None:
            result = self.process(
                session.input_bytes,
                session.mode,
                session.codec_version,
                session.file_name,
            )
            return SharedOpen(decoded=decoded, result=result)
        return SharedOpen(decoded=decoded)


__all__ = [
    "ProcessingOrchestrator",
    "ProcessingState",
    "PreparedInput",
    "SharedOpen",
    "default_file_name",
    "output_file_name",
]
