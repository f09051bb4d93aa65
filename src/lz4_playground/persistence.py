from __future__ import annotations

"""Text key/value persistence used for history and the last metrics snapshot."""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

from .exceptions import PersistenceReadFailure

T = TypeVar("T")

_KEY_SAFE_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_.")


class KeyValueStore(ABC):
    """Abstract interface for text key/value storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the text stored under ``key`` or ``None``."""

    @abstractmethod
    def set(self, key: str, text: str) -> None:
        """Store ``text`` under ``key``."""


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary backed store; nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, text: str) -> None:
        self._data[key] = text


class FileKeyValueStore(KeyValueStore):
    """Stores each key as ``<root>/<key>.json``."""

    def __init__(self, root: str | os.PathLike) -> None:
        self.root = Path(root).expanduser()

    def _path(self, key: str) -> Path:
        if not key or not set(key) <= _KEY_SAFE_CHARS:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, text: str) -> None:
        path = self._path(key)
        self.root.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)


def _parse(key: str, text: str, convert: Callable[[Any], T]) -> T:
    try:
        return convert(json.loads(text))
    except (ValueError, TypeError, KeyError) as exc:
        raise PersistenceReadFailure(
            f"Stored value for '{key}' is not valid structured data",
            details={"error": str(exc)},
        ) from exc


def load_value(
    store: KeyValueStore,
    key: str,
    default: T,
    convert: Callable[[Any], T] = lambda value: value,
) -> T:
    """
    Read and convert the JSON value stored under ``key``.

    Missing keys, unreadable storage and corrupt text all yield ``default``.
    """
    try:
        text = store.get(key)
    except OSError as exc:
        logging.warning("Could not read stored value '%s': %s", key, exc)
        return default
    if text is None:
        return default
    try:
        return _parse(key, text, convert)
    except PersistenceReadFailure as exc:
        logging.warning("%s; resetting to the initial value", exc)
        return default


def save_value(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value))


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "FileKeyValueStore",
    "load_value",
    "save_value",
]
