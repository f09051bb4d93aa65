from __future__ import annotations

"""Persistent, most-recent-first log of completed operations."""

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from .constants import HISTORY_KEY
from .models import HistoryEntry, Mode
from .persistence import InMemoryKeyValueStore, KeyValueStore, load_value, save_value

ALL_VERSIONS = "all"


@dataclass(frozen=True)
class HistoryFilter:
    """Filter applied to the history view: mode toggles, version, filename."""

    include_compress: bool = True
    include_decompress: bool = True
    version: str = ALL_VERSIONS
    file_name_query: str = ""

    def matches(self, entry: HistoryEntry) -> bool:
        if entry.mode is Mode.COMPRESS and not self.include_compress:
            return False
        if entry.mode is Mode.DECOMPRESS and not self.include_decompress:
            return False
        if self.version != ALL_VERSIONS and entry.codec_version != self.version:
            return False
        if self.file_name_query:
            name = (entry.file_name or "").lower()
            if self.file_name_query.lower() not in name:
                return False
        return True


@dataclass
class HistoryPage:
    entries: List[HistoryEntry]
    page: int
    per_page: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page) if self.per_page else 1

    @property
    def start_index(self) -> int:
        return (self.page - 1) * self.per_page


def _decode_entries(value: Any) -> List[HistoryEntry]:
    if not isinstance(value, list):
        raise TypeError("history must be a list")
    return [HistoryEntry.from_dict(item) for item in value]


class HistoryStore:
    """
    Ordered log of :class:`HistoryEntry` objects, newest first.

    Every mutation is written through to ``storage`` before it becomes
    visible, so a failed write leaves the in-memory log unchanged.
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        *,
        key: str = HISTORY_KEY,
    ) -> None:
        self.storage = storage if storage is not None else InMemoryKeyValueStore()
        self.key = key
        self._entries: List[HistoryEntry] = load_value(
            self.storage, key, [], _decode_entries
        )

    def __len__(self) -> int:
        return len(self._entries)

    def _commit(self, entries: List[HistoryEntry]) -> None:
        save_value(self.storage, self.key, [e.to_dict() for e in entries])
        self._entries = entries

    # --------------------------------------------------------------
    def append(self, entry: HistoryEntry) -> None:
        self._commit([entry] + self._entries)

    def iter_filtered(self, history_filter: HistoryFilter | None = None) -> Iterator[HistoryEntry]:
        """Lazily yield the entries that pass ``history_filter``."""
        flt = history_filter or HistoryFilter()
        return (entry for entry in list(self._entries) if flt.matches(entry))

    def list(
        self,
        history_filter: HistoryFilter | None = None,
        *,
        page: int = 1,
        per_page: int | None = None,
    ) -> List[HistoryEntry]:
        return self.page(history_filter, page=page, per_page=per_page).entries

    def page(
        self,
        history_filter: HistoryFilter | None = None,
        *,
        page: int = 1,
        per_page: int | None = None,
    ) -> HistoryPage:
        if page < 1:
            raise ValueError("page must be >= 1")
        filtered = list(self.iter_filtered(history_filter))
        if per_page is None:
            return HistoryPage(filtered, 1, len(filtered), len(filtered))
        if per_page < 1:
            raise ValueError("per_page must be >= 1")
        start = (page - 1) * per_page
        return HistoryPage(filtered[start:start + per_page], page, per_page, len(filtered))

    # --------------------------------------------------------------
    def delete_at(
        self,
        index: int,
        history_filter: HistoryFilter | None = None,
        *,
        page: int = 1,
        per_page: int | None = None,
    ) -> HistoryEntry:
        """
        Delete the entry shown at ``index`` of the given filtered page.

        The displayed entry is located in the full log by identity, so equal
        looking entries elsewhere in the log are left alone.
        """
        visible = self.list(history_filter, page=page, per_page=per_page)
        if not 0 <= index < len(visible):
            raise IndexError(f"history index {index} out of range")
        target = visible[index]
        position = next(i for i, entry in enumerate(self._entries) if entry is target)
        self._commit(self._entries[:position] + self._entries[position + 1:])
        return target

    def clear(self) -> None:
        self._commit([])

    def rename_by_timestamp(
        self,
        timestamp: Optional[int],
        old_name: Optional[str],
        new_name: Optional[str],
    ) -> bool:
        """
        Correct the filename of a recorded entry.

        Matches on ``timestamp`` when given, otherwise on the most recent entry
        named ``old_name``. Returns True if an entry changed.
        """
        if old_name == new_name:
            return False
        if timestamp is not None:
            position = next(
                (i for i, e in enumerate(self._entries) if e.timestamp == timestamp),
                None,
            )
        else:
            position = next(
                (i for i, e in enumerate(self._entries) if e.file_name == old_name),
                None,
            )
        if position is None:
            return False
        entries = list(self._entries)
        entries[position] = replace(entries[position], file_name=new_name)
        self._commit(entries)
        return True

    # --------------------------------------------------------------
    def versions(self) -> List[str]:
        """Distinct codec versions present in the log, in first-seen order."""
        return list(dict.fromkeys(e.codec_version for e in self._entries))

    def summarize_by_version(self) -> List[Dict[str, Any]]:
        """Average ratio and throughput per codec version, sorted by version."""
        summary = []
        for version in sorted(self.versions()):
            rows = [e for e in self._entries if e.codec_version == version]
            ratios = np.array([e.ratio for e in rows], dtype=float)
            speeds = np.array([e.throughput_mbps for e in rows], dtype=float)
            summary.append(
                {
                    "version": version,
                    "avg_ratio": float(ratios.mean()),
                    "avg_throughput_mbps": float(speeds.mean()),
                    "count": len(rows),
                }
            )
        return summary


__all__ = ["HistoryStore", "HistoryFilter", "HistoryPage", "ALL_VERSIONS"]
