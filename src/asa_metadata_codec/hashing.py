"""
ARC-89 hash engine.

All ARC-89 hashes are SHA-512/256 over a domain separator followed by
fixed-width fields:

    hh    = H("arc0089/header" || asset_id || identifiers || rev || irr || size)
    ph[i] = H("arc0089/page" || asset_id || i || len(page) || page)
    am    = H("arc0089/am" || hh || ph[0] || ph[1] || ...)

ARC-3 metadata files use their own `am` definition (see
`compute_arc3_metadata_hash`).
"""

from __future__ import annotations

import binascii
import hashlib
import json

from . import constants as const
from .codec import asset_id_to_box_name, b64_decode, to_bytes, uint_to_bytes
from .errors import (
    InvalidExtraMetadataError,
    InvalidPageIndexError,
    MetadataEncodingError,
)
from .pagination import paginate


def sha512_256(data: bytes) -> bytes:
    """
    SHA-512/256 digest.

    Python exposes this as 'sha512_256' in hashlib on most modern builds.
    """
    try:
        h = hashlib.new("sha512_256")
    except ValueError as err:
        raise RuntimeError(
            "hashlib does not support sha512_256 on this Python build"
        ) from err
    h.update(data)
    return h.digest()


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _byte(value: int, name: str) -> bytes:
    if not 0 <= value <= const.MAX_UINT8:
        raise ValueError(f"{name} must fit in byte")
    return bytes([value])


def compute_header_hash(
    *,
    asset_id: int,
    metadata_identifiers: int,
    reversible_flags: int,
    irreversible_flags: int,
    metadata_size: int,
) -> bytes:
    """
    Compute the 32-byte ARC-89 header hash `hh`.

    Raises:
        ValueError: if a flags byte is outside 0..255, `metadata_size` outside
            0..65535 or `asset_id` outside uint64.
    """
    if not 0 <= metadata_size <= const.MAX_UINT16:
        raise ValueError("metadata_size must fit in uint16")
    return sha512_256(
        b"".join(
            (
                const.HASH_DOMAIN_HEADER,
                asset_id_to_box_name(asset_id),
                _byte(metadata_identifiers, "metadata_identifiers"),
                _byte(reversible_flags, "reversible_flags"),
                _byte(irreversible_flags, "irreversible_flags"),
                uint_to_bytes(metadata_size, const.UINT16_SIZE),
            )
        )
    )


def compute_page_hash(
    *,
    asset_id: int,
    page_index: int,
    page_content: bytes,
) -> bytes:
    """
    Compute the 32-byte hash `ph[page_index]` of one metadata page.

    Raises:
        InvalidPageIndexError: if `page_index` does not fit in uint8.
        ValueError: if the page is longer than 65535 bytes.
    """
    if not 0 <= page_index <= const.MAX_UINT8:
        raise InvalidPageIndexError("page_index must fit in uint8")
    if len(page_content) > const.MAX_UINT16:
        raise ValueError("page_content length must fit in uint16")
    return sha512_256(
        b"".join(
            (
                const.HASH_DOMAIN_PAGE,
                asset_id_to_box_name(asset_id),
                bytes([page_index]),
                uint_to_bytes(len(page_content), const.UINT16_SIZE),
                page_content,
            )
        )
    )


def compute_metadata_hash(
    *,
    asset_id: int,
    metadata_identifiers: int,
    reversible_flags: int,
    irreversible_flags: int,
    metadata: bytes,
    page_size: int,
) -> bytes:
    """
    Compute the ARC-89 Metadata Hash `am`.

    With empty metadata there are no pages and `am = H("arc0089/am" || hh)`.
    """
    hh = compute_header_hash(
        asset_id=asset_id,
        metadata_identifiers=metadata_identifiers,
        reversible_flags=reversible_flags,
        irreversible_flags=irreversible_flags,
        metadata_size=len(metadata),
    )
    page_hashes = [
        compute_page_hash(asset_id=asset_id, page_index=i, page_content=page)
        for i, page in enumerate(paginate(metadata, page_size))
    ]
    return sha512_256(const.HASH_DOMAIN_METADATA + hh + b"".join(page_hashes))


def compute_arc3_metadata_hash(json_bytes: bytes) -> bytes:
    """
    Compute the ARC-3 Asset Metadata Hash of a JSON metadata file.

    Without an `extra_metadata` field this is SHA-256 of the file. Otherwise:

        am = SHA-512/256("arc0003/am" || SHA-512/256("arc0003/amj" || json) || extra)

    where `extra` is the base64-decoded `extra_metadata` value.
    """
    json_bytes = to_bytes(json_bytes, name="json_bytes")
    try:
        obj: object = json.loads(json_bytes.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MetadataEncodingError("Metadata file must be UTF-8 encoded JSON.") from e
    except (json.JSONDecodeError, RecursionError) as e:
        raise MetadataEncodingError("Invalid JSON metadata file.") from e

    if not isinstance(obj, dict) or "extra_metadata" not in obj:
        return sha256(json_bytes)

    extra_b64 = obj["extra_metadata"]
    if not isinstance(extra_b64, str):
        raise InvalidExtraMetadataError(
            '"extra_metadata" must be a base64 string when present.'
        )
    try:
        extra = b64_decode(extra_b64)
    except (binascii.Error, ValueError) as e:
        raise InvalidExtraMetadataError(
            'Could not base64-decode "extra_metadata".'
        ) from e

    json_h = sha512_256(const.ARC3_HASH_AMJ_PREFIX + json_bytes)
    return sha512_256(const.ARC3_HASH_AM_PREFIX + json_h + extra)
