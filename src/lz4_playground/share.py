from __future__ import annotations

"""Compact, URL-safe share tokens for a session's input/output state."""

import binascii
import json
import logging
from dataclasses import dataclass
from typing import Literal, Optional
from urllib.parse import quote, unquote, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .binary_utils import decode_base64, encode_base64
from .constants import MAX_URL_DATA_SIZE, SHARE_QUERY_PARAM
from .exceptions import InvalidEncoding, MalformedShareToken
from .models import Mode, SessionFields

# Tokens without an ``s`` tag predate the schema tag and carry a filename
# that was percent-encoded a second time.
LEGACY_SCHEMA_VERSION = 1
SHARE_SCHEMA_VERSION = 2


class ShareState(BaseModel):
    """Field map serialized into a share token, keyed by single letters."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    schema_version: int = Field(LEGACY_SCHEMA_VERSION, alias="s")
    data: Optional[str] = Field(None, alias="d", description="Input bytes, base64.")
    mode: Optional[Literal["c", "d"]] = Field(None, alias="m")
    version: Optional[str] = Field(None, alias="v")
    file_name: Optional[str] = Field(None, alias="f")
    output: Optional[str] = Field(None, alias="o", description="Output bytes, base64.")
    timestamp: Optional[int] = Field(None, alias="t")


@dataclass
class ShareLink:
    token: str
    truncated: bool


@dataclass
class DecodedShare:
    session: SessionFields
    payload_omitted: bool
    error: Optional[MalformedShareToken] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def encode_share_token(session: SessionFields) -> ShareLink:
    """
    Serialize ``session`` into a share token.

    When the encoded input exceeds ``MAX_URL_DATA_SIZE`` characters, the
    input and output are both dropped and only the configuration is shared.
    """
    state = ShareState(
        s=SHARE_SCHEMA_VERSION,
        d=encode_base64(session.input_bytes),
        m="c" if Mode.parse(session.mode) is Mode.COMPRESS else "d",
        v=session.codec_version,
    )
    if session.file_name:
        state.file_name = session.file_name
    if session.output_bytes:
        state.output = encode_base64(session.output_bytes)
    if session.timestamp:
        state.timestamp = session.timestamp

    truncated = len(state.data or "") > MAX_URL_DATA_SIZE
    if truncated:
        state.data = None
        state.output = None

    payload = state.model_dump(by_alias=True, exclude_none=True)
    token = quote(json.dumps(payload, separators=(",", ":")), safe="")
    return ShareLink(token=token, truncated=truncated)


def _malformed(token: str, reason: str) -> DecodedShare:
    error = MalformedShareToken(
        "Share token could not be parsed", details={"reason": reason}
    )
    logging.warning("Error parsing share token: %s", error)
    return DecodedShare(session=SessionFields.empty(), payload_omitted=True, error=error)


def decode_share_token(token: str) -> DecodedShare:
    """
    Parse a token produced by :func:`encode_share_token`.

    Never raises for bad input: a malformed token yields empty session
    fields, ``payload_omitted=True`` and the error on ``DecodedShare.error``.
    """
    try:
        raw = json.loads(unquote(token))
    except (ValueError, TypeError, RecursionError) as exc:
        return _malformed(token, f"not valid JSON: {type(exc).__name__}")
    if not isinstance(raw, dict):
        return _malformed(token, "token does not hold an object")

    try:
        state = ShareState.model_validate(raw)
    except ValidationError as exc:
        return _malformed(token, f"invalid fields: {exc.error_count()} error(s)")

    try:
        input_bytes = decode_base64(state.data) if state.data is not None else b""
        output_bytes = decode_base64(state.output) if state.output else None
    except (InvalidEncoding, binascii.Error) as exc:
        return _malformed(token, f"payload is not base64: {exc}")

    file_name = state.file_name or None
    if file_name and state.schema_version == LEGACY_SCHEMA_VERSION:
        file_name = unquote(file_name)

    session = SessionFields(
        input_bytes=input_bytes,
        mode=Mode.COMPRESS if state.mode == "c" else Mode.DECOMPRESS,
        codec_version=state.version or "",
        file_name=file_name,
        output_bytes=output_bytes,
        timestamp=state.timestamp or None,
    )
    return DecodedShare(session=session, payload_omitted=state.data is None)


def build_share_url(base_url: str, token: str) -> str:
    """Return ``base_url`` with its query replaced by ``state=<token>``."""
    parts = urlsplit(base_url)
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, f"{SHARE_QUERY_PARAM}={token}", "")
    )


def extract_share_token(url: str) -> Optional[str]:
    """
    Return the raw ``state`` query value of ``url`` or ``None``.

    The value is returned still percent-encoded, exactly as produced by
    :func:`encode_share_token`.
    """
    query = urlsplit(url).query
    for pair in query.split("&"):
        name, sep, value = pair.partition("=")
        if sep and name == SHARE_QUERY_PARAM and value:
            return value
    return None


def parse_share_url(url: str) -> Optional[DecodedShare]:
    """Decode the share token carried by ``url``; ``None`` when there is none."""
    token = extract_share_token(url)
    if token is None:
        return None
    return decode_share_token(token)


__all__ = [
    "ShareState",
    "ShareLink",
    "DecodedShare",
    "encode_share_token",
    "decode_share_token",
    "build_share_url",
    "extract_share_token",
    "parse_share_url",
    "SHARE_SCHEMA_VERSION",
]
