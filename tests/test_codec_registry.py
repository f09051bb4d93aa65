import pytest

from lz4_playground.codec import LZ4FrameCodec, registry
from lz4_playground.codec.base import BaseCodec
from lz4_playground.codec.registry import (
    available_codec_versions,
    get_codec_class,
    get_codec_metadata,
    register_codec,
)
from lz4_playground.constants import DEFAULT_CODEC_VERSION, FALLBACK_CODEC_VERSION


@pytest.fixture
def isolated_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry, "_CODEC_REGISTRY", dict(registry._CODEC_REGISTRY))
    monkeypatch.setattr(registry, "_CODEC_INFO", dict(registry._CODEC_INFO))


class NullCodec(BaseCodec):
    display_name = "Null"

    def compress(self, data: bytes) -> bytes:
        return data

    def decompress(self, data: bytes) -> bytes:
        return data


def test_builtin_versions_registered() -> None:
    versions = available_codec_versions()
    assert FALLBACK_CODEC_VERSION in versions
    assert DEFAULT_CODEC_VERSION in versions
    assert get_codec_class(DEFAULT_CODEC_VERSION) is LZ4FrameCodec
    info = get_codec_metadata(DEFAULT_CODEC_VERSION)
    assert info["source"] == "built-in"
    assert info["version"] == DEFAULT_CODEC_VERSION


def test_unknown_version() -> None:
    assert get_codec_metadata("0.0.0-missing") is None
    with pytest.raises(KeyError):
        get_codec_class("0.0.0-missing")


def test_override_records_previous_source(isolated_registry) -> None:
    register_codec(DEFAULT_CODEC_VERSION, NullCodec, source="test")
    info = get_codec_metadata(DEFAULT_CODEC_VERSION)
    assert info["overrides"] == "built-in"
    assert info["display_name"] == "Null"
    assert get_codec_class(DEFAULT_CODEC_VERSION) is NullCodec
