"""
Primitive and identifier codecs.

Byte coercion, fixed-width big-endian integers, base64 (standard and URL-safe)
and the Asset ID <-> box name mapping used to address ARC-89 records.
"""

from __future__ import annotations

import base64
import binascii

from . import constants as const


def to_bytes(value: object, *, name: str = "value") -> bytes:
    """
    Coerce a byte-sequence-like value into an owned `bytes` object.

    Accepted shapes:
    - `bytes` (returned as is)
    - `bytearray` (copied)
    - `memoryview`, including slices of a larger buffer (copied)
    - `list` / `tuple` of ints in 0..255 (as returned by Algod/ABI decoding)

    Raises:
        TypeError: for `str` and any other shape, or for non-byte list items.
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, memoryview):
        return value.tobytes()
    if isinstance(value, (list, tuple)):
        for item in value:
            if (
                not isinstance(item, int)
                or isinstance(item, bool)
                or not 0 <= item <= const.MAX_UINT8
            ):
                raise TypeError(f"{name} must be bytes or a sequence of ints")
        return bytes(value)
    raise TypeError(f"{name} must be bytes or a sequence of ints")


def uint_to_bytes(value: int, size: int, *, name: str = "value") -> bytes:
    """Big-endian unsigned encoding of `value` on exactly `size` bytes."""
    if value < 0 or value >= 1 << (8 * size):
        raise ValueError(f"{name} must fit in uint{8 * size}")
    return int(value).to_bytes(size, "big", signed=False)


def bytes_to_uint(data: bytes) -> int:
    return int.from_bytes(data, "big", signed=False)


def asset_id_to_box_name(asset_id: int) -> bytes:
    """Convert an Asset ID (uint64) into the ARC-89 box key (8-byte big-endian)."""
    if not 0 <= asset_id <= const.MAX_UINT64:
        raise ValueError("asset_id must fit in uint64")
    return uint_to_bytes(asset_id, const.ASSET_METADATA_BOX_KEY_SIZE)


def box_name_to_asset_id(box_name: bytes) -> int:
    """Convert an ARC-89 box key (8-byte big-endian) back into an Asset ID."""
    if len(box_name) != const.ASSET_METADATA_BOX_KEY_SIZE:
        raise ValueError(
            f"box_name must be {const.ASSET_METADATA_BOX_KEY_SIZE} bytes, "
            f"got {len(box_name)}"
        )
    return bytes_to_uint(box_name)


def b64_encode(data: bytes) -> str:
    """Standard base64 (with padding)."""
    return base64.b64encode(data).decode("ascii")


def b64_decode(data_b64: str) -> bytes:
    """
    Standard base64 decode.

    Raises:
        binascii.Error / ValueError: on characters outside the alphabet or bad padding.
    """
    return base64.b64decode(data_b64, validate=True)


def b64url_encode(data: bytes) -> str:
    """URL-safe base64 (with padding), as used by the ARC-90 `box` parameter."""
    return base64.urlsafe_b64encode(data).decode("ascii")


def b64url_decode(data_b64url: str) -> bytes:
    """
    URL-safe base64 decode (padding required).

    Raises:
        binascii.Error: on characters outside the URL-safe alphabet or bad padding.
    """
    if "+" in data_b64url or "/" in data_b64url:
        raise binascii.Error("Standard base64 characters in base64url data")
    return base64.b64decode(data_b64url, altchars=b"-_", validate=True)
