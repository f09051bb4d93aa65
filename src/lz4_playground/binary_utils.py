"""Utility functions for handling binary data."""

import base64
import binascii
import re
from typing import Tuple

from .exceptions import InvalidEncoding

_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
_TEXT_CONTROL = frozenset(b"\t\n\r\f\b")


def encode_base64(data: bytes) -> str:
    """Encode ``data`` as standard base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Decode standard base64 ``text``, rejecting anything that is not base64."""
    try:
        return base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidEncoding(
            "Invalid base64 data. Please provide valid base64-encoded compressed data.",
            details={"reason": str(exc)},
        ) from exc


def is_likely_base64(text: str) -> bool:
    """Return True if ``text`` looks like padded base64."""
    return bool(_BASE64_RE.match(text)) and len(text) % 4 == 0


def is_binary_data(data: bytes) -> bool:
    """Guess whether ``data`` is binary by sampling for non-printable bytes."""
    sample = data[:1000]
    if not sample:
        return False
    non_text = sum(1 for byte in sample if (byte < 32 and byte not in _TEXT_CONTROL) or byte == 127)
    return non_text / len(sample) > 0.1


def decode_text_or_base64(data: bytes) -> Tuple[str, bool]:
    """
    Render ``data`` for display.

    Returns ``(text, is_base64)``: strict UTF-8 text when the bytes decode,
    otherwise their base64 form.
    """
    try:
        return data.decode("utf-8", errors="strict"), False
    except UnicodeDecodeError:
        return encode_base64(data), True


__all__ = [
    "encode_base64",
    "decode_base64",
    "is_likely_base64",
    "is_binary_data",
    "decode_text_or_base64",
]
