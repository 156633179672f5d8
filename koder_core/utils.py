"""
koder_core.utils
----------------
Byte/text codec and Base64 helpers shared by every component.

The text form maps each byte to the character with the same code point
(Latin-1), so arbitrary binary data can travel through text-only storage
and be Base64-encoded on the way out.
"""

from __future__ import annotations
import base64, binascii, time

from .errors import CodecError


def bytes_to_text(buf: bytes) -> str:
    return bytes(buf).decode("latin-1")


def text_to_bytes(text: str) -> bytes:
    try:
        return text.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise CodecError(f"code point above 255 at index {exc.start}") from exc


def b64e(b: bytes) -> str:
    return bytes_to_text(base64.b64encode(b))


def b64d(s: str) -> bytes:
    try:
        return base64.b64decode(text_to_bytes(s), validate=True)
    except binascii.Error as exc:
        raise CodecError(f"invalid base64: {exc}") from exc


def now_ms() -> int:
    # epoch milliseconds, the unit of the persisted ttl field
    return int(time.time() * 1000)
