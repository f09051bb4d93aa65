import json
import re
from urllib.parse import quote

from lz4_playground.binary_utils import encode_base64
from lz4_playground.constants import MAX_URL_DATA_SIZE
from lz4_playground.models import Mode, SessionFields
from lz4_playground.share import (
    build_share_url,
    decode_share_token,
    encode_share_token,
    extract_share_token,
    parse_share_url,
)


def _legacy_token(payload: dict) -> str:
    return quote(json.dumps(payload), safe="")


def test_round_trip_preserves_all_fields() -> None:
    session = SessionFields(
        input_bytes=b"hello world",
        mode=Mode.DECOMPRESS,
        codec_version="0.3.4",
        file_name="my notes & stuff.txt",
        output_bytes=b"\x00\x01\x02",
        timestamp=1700000000123,
    )
    link = encode_share_token(session)
    assert not link.truncated
    decoded = decode_share_token(link.token)
    assert decoded.ok
    assert decoded.payload_omitted is False
    assert decoded.session == session


def test_token_is_url_safe() -> None:
    link = encode_share_token(
        SessionFields(b"a+b/c=d?e&f", Mode.COMPRESS, "0.3.2", "x y#z.txt")
    )
    assert re.fullmatch(r"[A-Za-z0-9%._~-]+", link.token)


def test_filename_with_percent_sequences_survives() -> None:
    session = SessionFields(b"x", Mode.COMPRESS, "0.3.4", file_name="100%25 done.txt")
    decoded = decode_share_token(encode_share_token(session).token)
    assert decoded.session.file_name == "100%25 done.txt"


def test_payload_at_threshold_is_kept() -> None:
    # 1500 bytes encode to exactly MAX_URL_DATA_SIZE base64 characters.
    data = b"a" * 1500
    assert len(encode_base64(data)) == MAX_URL_DATA_SIZE
    link = encode_share_token(SessionFields(data, Mode.COMPRESS, "0.3.4"))
    assert not link.truncated
    assert decode_share_token(link.token).session.input_bytes == data


def test_large_payload_is_omitted() -> None:
    session = SessionFields(
        input_bytes=b"a" * 1501,
        mode=Mode.COMPRESS,
        codec_version="0.3.4",
        file_name="big.txt",
        output_bytes=b"out",
    )
    link = encode_share_token(session)
    assert link.truncated
    decoded = decode_share_token(link.token)
    assert decoded.ok
    assert decoded.payload_omitted is True
    assert decoded.session.input_bytes == b""
    assert decoded.session.output_bytes is None
    assert decoded.session.codec_version == "0.3.4"
    assert decoded.session.file_name == "big.txt"


def test_empty_input_is_not_reported_as_omitted() -> None:
    decoded = decode_share_token(
        encode_share_token(SessionFields(b"", Mode.COMPRESS, "0.3.4")).token
    )
    assert decoded.payload_omitted is False
    assert decoded.session.input_bytes == b""


def test_malformed_token_yields_empty_session() -> None:
    for token in ("not-json", quote("[1, 2]"), _legacy_token({"m": "x", "v": "1"})):
        decoded = decode_share_token(token)
        assert not decoded.ok
        assert decoded.payload_omitted is True
        assert decoded.session == SessionFields.empty()


def test_bad_base64_payload_is_malformed() -> None:
    decoded = decode_share_token(_legacy_token({"d": "@@@", "m": "c", "v": "0.3.4"}))
    assert decoded.error is not None
    assert "reason" in decoded.error.details


def test_legacy_token_filename_is_unquoted() -> None:
    token = _legacy_token(
        {
            "d": encode_base64(b"hi"),
            "m": "c",
            "v": "0.3.2",
            "f": quote("my file.txt"),
        }
    )
    decoded = decode_share_token(token)
    assert decoded.ok
    assert decoded.session.file_name == "my file.txt"
    assert decoded.session.input_bytes == b"hi"


def test_build_and_extract_share_url() -> None:
    token = encode_share_token(SessionFields(b"hi", Mode.COMPRESS, "0.3.4")).token
    url = build_share_url("https://example.dev/app?foo=1#top", token)
    assert url == f"https://example.dev/app?state={token}"
    assert extract_share_token(url) == token
    assert parse_share_url(url).session.input_bytes == b"hi"


def test_url_without_state_is_normal() -> None:
    assert extract_share_token("https://example.dev/app?foo=1") is None
    assert parse_share_url("https://example.dev/") is None


def test_missing_mode_and_version_keep_payload() -> None:
    decoded = decode_share_token(
        _legacy_token({"s": 2, "d": encode_base64(b"hi"), "m": "c"})
    )
    assert decoded.ok
    assert decoded.payload_omitted is False
    assert decoded.session.input_bytes == b"hi"
    assert decoded.session.codec_version == ""

    decoded = decode_share_token(
        _legacy_token({"s": 2, "d": encode_base64(b"hi"), "v": "0.3.4"})
    )
    assert decoded.ok
    assert decoded.session.mode is Mode.DECOMPRESS
    assert decoded.session.codec_version == "0.3.4"


def test_deeply_nested_token_is_malformed() -> None:
    decoded = decode_share_token("[" * 100000)
    assert not decoded.ok
    assert decoded.payload_omitted is True
    assert decoded.session == SessionFields.empty()
