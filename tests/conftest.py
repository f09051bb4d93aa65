from pathlib import Path
from typing import Any, Iterable

import pytest

from lz4_playground import config as cfg
from lz4_playground.codec.base import BaseCodec
from lz4_playground.codec.resolvers import CodecResolver
from lz4_playground.exceptions import CodecLoadError
from lz4_playground.persistence import InMemoryKeyValueStore


class ReversingCodec(BaseCodec):
    """Test codec: reverses bytes and tags them with its version."""

    id = "reversing"
    display_name = "Reversing Test Codec"

    def compress(self, data: bytes) -> bytes:
        return self.version.encode() + b":" + data[::-1]

    def decompress(self, data: bytes) -> bytes:
        prefix = self.version.encode() + b":"
        if not data.startswith(prefix):
            raise ValueError("not produced by this codec")
        return data[len(prefix):][::-1]


class RecordingResolver(CodecResolver):
    def __init__(self, available: Iterable[str]) -> None:
        self.available = set(available)
        self.calls: list[str] = []

    def resolve(self, version: str) -> BaseCodec:
        self.calls.append(version)
        if version not in self.available:
            raise CodecLoadError(f"no codec {version}", details={"version": version})
        return ReversingCodec(version)


@pytest.fixture(autouse=True)
def skip_plugin_discovery(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent from plugins installed on the machine."""
    import lz4_playground.plugin_loader as pl

    monkeypatch.setattr(pl, "_loaded", True)


@pytest.fixture
def make_resolver():
    return RecordingResolver


@pytest.fixture
def memory_storage() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def patched_config_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Any:
    user_dir = tmp_path / "user"
    local_file = tmp_path / ".lz4playground.yaml"

    monkeypatch.setattr(cfg, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(cfg, "USER_CONFIG_PATH", user_dir / "config.yaml")
    monkeypatch.setattr(cfg, "LOCAL_CONFIG_PATH", local_file)
    monkeypatch.setattr(
        cfg,
        "SOURCE_USER_CONFIG",
        f"user global config file ({user_dir / 'config.yaml'})",
    )
    monkeypatch.setattr(
        cfg,
        "SOURCE_LOCAL_CONFIG",
        f"local project config file ({local_file})",
    )
    for key in cfg.DEFAULT_CONFIG:
        monkeypatch.delenv(cfg.ENV_VAR_PREFIX + key.upper(), raising=False)
    return tmp_path
