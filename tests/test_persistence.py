from pathlib import Path

import pytest

from lz4_playground.persistence import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    load_value,
    save_value,
)


def test_file_store_round_trip(tmp_path: Path) -> None:
    store = FileKeyValueStore(tmp_path / "data")
    assert store.get("missing") is None
    save_value(store, "lz4-last-metrics", {"a": 1})
    assert (tmp_path / "data" / "lz4-last-metrics.json").exists()
    assert load_value(store, "lz4-last-metrics", None) == {"a": 1}
    assert not list((tmp_path / "data").glob("*.tmp"))


def test_file_store_rejects_path_like_keys(tmp_path: Path) -> None:
    store = FileKeyValueStore(tmp_path)
    with pytest.raises(ValueError):
        store.set("../escape", "x")


def test_corrupt_value_resets_to_default(caplog: pytest.LogCaptureFixture) -> None:
    store = InMemoryKeyValueStore({"k": "{not json"})
    assert load_value(store, "k", []) == []
    assert "resetting" in caplog.text


def test_conversion_failure_resets_to_default() -> None:
    store = InMemoryKeyValueStore({"k": '"a string"'})

    def convert(value):
        if not isinstance(value, list):
            raise TypeError("expected list")
        return value

    assert load_value(store, "k", ["default"], convert) == ["default"]


def test_unreadable_storage_gives_default() -> None:
    class BrokenStore(InMemoryKeyValueStore):
        def get(self, key):
            raise OSError("disk gone")

    assert load_value(BrokenStore(), "k", 7) == 7
