"""
ARC-89 record model.

Read side: `AssetMetadataBox` parses the raw box value of the registry into a
fixed-layout `MetadataHeader` and a variable-length `MetadataBody`.

Write side: `AssetMetadata` carries the body and flags a client intends to
store, and derives the hash and MBR delta the registry will produce.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from . import constants as const
from .codec import bytes_to_uint, to_bytes, uint_to_bytes
from .errors import (
    BoxParseError,
    InvalidPageIndexError,
    InvariantViolationError,
    MetadataHashMismatchError,
)
from .flags import (
    MASK_ID_SHORT,
    IrreversibleFlags,
    MetadataFlags,
    ReversibleFlags,
    set_bit,
)
from .hashing import compute_header_hash, compute_metadata_hash, compute_page_hash
from .pagination import chunk_metadata_payload, page_count
from .parameters import MbrDelta, RegistryParameters, get_default_registry_params
from .validation import (
    decode_metadata_json,
    encode_metadata_json,
    is_arc3_metadata,
    validate_arc3_schema,
)

logger = logging.getLogger(__name__)

# ABI tuple values as decoded by the generated client / Algod
AbiValue = int | bytes | bool | Sequence["AbiValue"]


def _is_nonzero_32(am: bytes) -> bool:
    return len(am) == const.METADATA_HASH_SIZE and any(am)


def _check_override(asa_am: bytes | None) -> bytes | None:
    """Return the ASA `am` override if it is set (non-zero), else None."""
    if asa_am is None:
        return None
    asa_am = to_bytes(asa_am, name="asa_am")
    if len(asa_am) != const.METADATA_HASH_SIZE:
        raise ValueError("ASA `am` override must be exactly 32 bytes")
    return asa_am if _is_nonzero_32(asa_am) else None


def _resolve_override(
    *,
    asa_am: bytes,
    computed_hash: bytes,
    irreversible: IrreversibleFlags,
    enforce_immutable_on_override: bool,
    enforce_arc89_native_hash_match: bool,
) -> bytes:
    if enforce_immutable_on_override and not irreversible.immutable:
        raise InvariantViolationError("ASA `am` override requires immutable metadata")
    if (
        enforce_arc89_native_hash_match
        and irreversible.arc89_native
        and not irreversible.arc3
        and asa_am != computed_hash
    ):
        raise MetadataHashMismatchError(
            "ASA Metadata Hash (am) does not match the computed hash; "
            "ARC89 native metadata without ARC3 requires matching hashes"
        )
    return asa_am


@dataclass(frozen=True, slots=True)
class MetadataHeader:
    identifiers: int
    flags: MetadataFlags
    metadata_hash: bytes
    last_modified_round: int
    deprecated_by: int

    def __post_init__(self) -> None:
        if not 0 <= self.identifiers <= const.MAX_UINT8:
            raise ValueError("identifiers must fit in uint8")
        if len(self.metadata_hash) != const.METADATA_HASH_SIZE:
            raise ValueError("metadata_hash must be 32 bytes")
        if not 0 <= self.last_modified_round <= const.MAX_UINT64:
            raise ValueError("last_modified_round must fit in uint64")
        if not 0 <= self.deprecated_by <= const.MAX_UINT64:
            raise ValueError("deprecated_by must fit in uint64")

    @property
    def is_short(self) -> bool:
        return bool(self.identifiers & MASK_ID_SHORT)

    @property
    def is_immutable(self) -> bool:
        return self.flags.irreversible.immutable

    @property
    def is_arc3_compliant(self) -> bool:
        return self.flags.irreversible.arc3

    @property
    def is_arc89_native(self) -> bool:
        return self.flags.irreversible.arc89_native

    @property
    def is_arc20_smart_asa(self) -> bool:
        return self.flags.reversible.arc20

    @property
    def is_arc62_circulating_supply(self) -> bool:
        return self.flags.reversible.arc62

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated_by != 0

    @property
    def serialized(self) -> bytes:
        """The fixed 51-byte header as stored at the start of the box."""
        return b"".join(
            (
                bytes(
                    [
                        self.identifiers,
                        self.flags.reversible_byte,
                        self.flags.irreversible_byte,
                    ]
                ),
                self.metadata_hash,
                uint_to_bytes(self.last_modified_round, const.UINT64_SIZE),
                uint_to_bytes(self.deprecated_by, const.UINT64_SIZE),
            )
        )

    def expected_identifiers(
        self, *, body: MetadataBody, params: RegistryParameters | None = None
    ) -> int:
        """
        Identifiers byte with the short bit recomputed from `body`.

        Reserved bits are preserved from the observed header.
        """
        p = params or get_default_registry_params()
        return set_bit(
            bits=self.identifiers,
            mask=MASK_ID_SHORT,
            value=body.size <= p.short_metadata_size,
        )

    @staticmethod
    def from_tuple(value: Sequence[AbiValue]) -> MetadataHeader:
        """
        Decode the ABI tuple
        `(identifiers, rev_flags, irr_flags, hash, last_modified_round, deprecated_by)`.
        """
        if len(value) != 6:
            raise ValueError("Expected 6-tuple for metadata header")
        identifiers, rev, irr, metadata_hash, last_modified_round, deprecated_by = value

        for name, v in (
            ("identifiers", identifiers),
            ("reversible_flags", rev),
            ("irreversible_flags", irr),
            ("last_modified_round", last_modified_round),
            ("deprecated_by", deprecated_by),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be int")

        return MetadataHeader(
            identifiers=identifiers,  # type: ignore[arg-type]
            flags=MetadataFlags.from_bytes(rev, irr),  # type: ignore[arg-type]
            metadata_hash=to_bytes(metadata_hash, name="metadata_hash"),
            last_modified_round=last_modified_round,  # type: ignore[arg-type]
            deprecated_by=deprecated_by,  # type: ignore[arg-type]
        )


@dataclass(frozen=True, slots=True)
class MetadataBody:
    raw_bytes: bytes

    @property
    def size(self) -> int:
        return len(self.raw_bytes)

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    @property
    def is_short(self) -> bool:
        return self.size <= get_default_registry_params().short_metadata_size

    @property
    def json(self) -> dict[str, object]:
        return decode_metadata_json(self.raw_bytes)

    def total_pages(self, params: RegistryParameters | None = None) -> int:
        p = params or get_default_registry_params()
        return page_count(self.size, p.page_size)

    def get_page(
        self, page_index: int, params: RegistryParameters | None = None
    ) -> bytes:
        p = params or get_default_registry_params()
        total = self.total_pages(p)
        if not 0 <= page_index < total:
            raise InvalidPageIndexError(
                f"Page index {page_index} out of range (total pages: {total})"
            )
        start = page_index * p.page_size
        return self.raw_bytes[start : start + p.page_size]

    def chunked_payload(self, params: RegistryParameters | None = None) -> list[bytes]:
        """Head + extra payload chunks for a create/replace write group."""
        p = params or get_default_registry_params()
        return chunk_metadata_payload(
            self.raw_bytes,
            head_max_size=p.first_payload_max_size,
            extra_max_size=p.extra_payload_max_size,
        )

    def validate_size(self, params: RegistryParameters | None = None) -> None:
        p = params or get_default_registry_params()
        if self.size > p.max_metadata_size:
            raise ValueError(
                f"Metadata size {self.size} exceeds max {p.max_metadata_size}"
            )

    @staticmethod
    def from_json(
        obj: Mapping[str, object], *, arc3_compliant: bool = False
    ) -> MetadataBody:
        if arc3_compliant:
            validate_arc3_schema(obj)
        return MetadataBody(encode_metadata_json(obj))

    @staticmethod
    def empty() -> MetadataBody:
        """The empty body (stands for `{}`)."""
        return MetadataBody(b"")


@dataclass(frozen=True, slots=True)
class Pagination:
    metadata_size: int
    page_size: int
    total_pages: int

    @staticmethod
    def from_tuple(value: Sequence[int]) -> Pagination:
        if len(value) != 3:
            raise ValueError("Expected (metadata_size, page_size, total_pages)")
        return Pagination(*(int(v) for v in value))


@dataclass(frozen=True, slots=True)
class PaginatedMetadata:
    has_next_page: bool
    last_modified_round: int
    page_content: bytes

    @staticmethod
    def from_tuple(value: Sequence[AbiValue]) -> PaginatedMetadata:
        if len(value) != 3:
            raise ValueError(
                "Expected (has_next_page, last_modified_round, page_content)"
            )
        has_next_page, last_modified_round, page_content = value
        if not isinstance(has_next_page, bool):
            raise TypeError("has_next_page must be bool")
        if not isinstance(last_modified_round, int):
            raise TypeError("last_modified_round must be int")
        return PaginatedMetadata(
            has_next_page=has_next_page,
            last_modified_round=last_modified_round,
            page_content=to_bytes(page_content, name="page_content"),
        )


@dataclass(frozen=True, slots=True)
class MetadataExistence:
    asa_exists: bool
    metadata_exists: bool

    @staticmethod
    def from_tuple(value: Sequence[bool]) -> MetadataExistence:
        if len(value) != 2:
            raise ValueError("Expected (asa_exists, metadata_exists)")
        return MetadataExistence(bool(value[0]), bool(value[1]))


@dataclass(frozen=True, slots=True)
class AssetMetadataBox:
    """
    Parsed ARC-89 Asset Metadata Box.

    Box value layout (offsets fixed regardless of the configured header size):

        [0]      identifiers          byte
        [1]      reversible_flags     byte
        [2]      irreversible_flags   byte
        [3:35]   metadata_hash        byte[32]
        [35:43]  last_modified_round  uint64
        [43:51]  deprecated_by        uint64
        [header_size:]  metadata      byte[]

    Bytes between offset 51 and `header_size` (if larger) are opaque padding.
    """

    asset_id: int
    header: MetadataHeader
    body: MetadataBody

    @classmethod
    def parse(
        cls,
        *,
        asset_id: int,
        value: bytes,
        header_size: int | None = None,
        max_metadata_size: int | None = None,
        params: RegistryParameters | None = None,
    ) -> AssetMetadataBox:
        """
        Parse a raw box value.

        `header_size` and `max_metadata_size` default to `params` (or the
        compiled defaults when `params` is not given).

        Raises:
            BoxParseError: if the value is shorter than the header, too short
                to hold the fixed header fields, or the body exceeds
                `max_metadata_size`.
        """
        p = params or get_default_registry_params()
        if header_size is None:
            header_size = p.header_size
        if max_metadata_size is None:
            max_metadata_size = p.max_metadata_size
        value = to_bytes(value, name="value")

        if len(value) < header_size:
            raise BoxParseError(f"Box value too small: {len(value)} < {header_size}")
        if header_size < const.HEADER_SIZE:
            logger.warning(
                "Parsing asset %s with a %d-byte header, smaller than the %d-byte "
                "ARC-89 header: fixed fields overlap the metadata body",
                asset_id,
                header_size,
                const.HEADER_SIZE,
            )
        if len(value) < const.HEADER_SIZE:
            raise BoxParseError(
                f"Box value too small for the ARC-89 header: "
                f"{len(value)} < {const.HEADER_SIZE}"
            )

        body = value[header_size:]
        if len(body) > max_metadata_size:
            raise BoxParseError(
                f"Metadata exceeds max_metadata_size: {len(body)} > {max_metadata_size}"
            )

        header = MetadataHeader(
            identifiers=value[const.IDX_METADATA_IDENTIFIERS],
            flags=MetadataFlags.from_bytes(
                value[const.IDX_REVERSIBLE_FLAGS], value[const.IDX_IRREVERSIBLE_FLAGS]
            ),
            metadata_hash=value[const.IDX_METADATA_HASH : const.IDX_LAST_MODIFIED_ROUND],
            last_modified_round=bytes_to_uint(
                value[const.IDX_LAST_MODIFIED_ROUND : const.IDX_DEPRECATED_BY]
            ),
            deprecated_by=bytes_to_uint(
                value[const.IDX_DEPRECATED_BY : const.HEADER_SIZE]
            ),
        )
        return cls(asset_id=asset_id, header=header, body=MetadataBody(body))

    @property
    def serialized(self) -> bytes:
        """Box value with the default 51-byte header."""
        return self.header.serialized + self.body.raw_bytes

    @property
    def json(self) -> dict[str, object]:
        return self.body.json

    def compute_metadata_hash(self, *, params: RegistryParameters | None = None) -> bytes:
        """ARC-89 hash recomputed from the header flags and the body pages."""
        p = params or get_default_registry_params()
        return compute_metadata_hash(
            asset_id=self.asset_id,
            metadata_identifiers=self.header.expected_identifiers(
                body=self.body, params=p
            ),
            reversible_flags=self.header.flags.reversible_byte,
            irreversible_flags=self.header.flags.irreversible_byte,
            metadata=self.body.raw_bytes,
            page_size=p.page_size,
        )

    def expected_metadata_hash(
        self,
        *,
        params: RegistryParameters | None = None,
        asa_am: bytes | None = None,
        enforce_immutable_on_override: bool = True,
        enforce_arc89_native_hash_match: bool = True,
    ) -> bytes:
        """
        The *effective* metadata hash of this record.

        A non-zero ASA `am` (Asset Metadata Hash) overrides the computed hash,
        but only for immutable metadata. An all-zero `am` means no override.
        """
        override = _check_override(asa_am)
        computed = self.compute_metadata_hash(params=params)
        if override is None:
            return computed
        return _resolve_override(
            asa_am=override,
            computed_hash=computed,
            irreversible=self.header.flags.irreversible,
            enforce_immutable_on_override=enforce_immutable_on_override,
            enforce_arc89_native_hash_match=enforce_arc89_native_hash_match,
        )

    def hash_matches(
        self,
        *,
        params: RegistryParameters | None = None,
        asa_am: bytes | None = None,
        skip_validation_on_override: bool = True,
    ) -> bool:
        """
        Compare the stored header hash with the effective expected hash.

        With a non-zero `asa_am` and `skip_validation_on_override`, the ASA's
        `am` is authoritative and this returns True without recomputing.
        """
        if skip_validation_on_override and _check_override(asa_am) is not None:
            return True
        expected = self.expected_metadata_hash(params=params, asa_am=asa_am)
        return expected == self.header.metadata_hash

    def pagination(self, params: RegistryParameters | None = None) -> Pagination:
        p = params or get_default_registry_params()
        return Pagination(
            metadata_size=self.body.size,
            page_size=p.page_size,
            total_pages=self.body.total_pages(p),
        )

    def get_paginated_metadata(
        self, page: int, params: RegistryParameters | None = None
    ) -> PaginatedMetadata:
        """Rebuild the `arc89_get_metadata` getter output for `page`."""
        total = self.body.total_pages(params)
        content = b"" if page == 0 and total == 0 else self.body.get_page(page, params)
        return PaginatedMetadata(
            has_next_page=page + 1 < total,
            last_modified_round=self.header.last_modified_round,
            page_content=content,
        )

    def header_hash(self) -> bytes:
        return compute_header_hash(
            asset_id=self.asset_id,
            metadata_identifiers=self.header.identifiers,
            reversible_flags=self.header.flags.reversible_byte,
            irreversible_flags=self.header.flags.irreversible_byte,
            metadata_size=self.body.size,
        )

    def page_hash(self, page: int, params: RegistryParameters | None = None) -> bytes:
        return compute_page_hash(
            asset_id=self.asset_id,
            page_index=page,
            page_content=self.body.get_page(page, params),
        )

    def as_asset_metadata(self) -> AssetMetadata:
        return AssetMetadata(
            asset_id=self.asset_id,
            body=self.body,
            flags=self.header.flags,
            deprecated_by=self.header.deprecated_by,
        )


@dataclass(frozen=True, slots=True)
class AssetMetadataRecord:
    """An on-chain metadata record, located by registry app and asset."""

    app_id: int
    asset_id: int
    header: MetadataHeader
    body: MetadataBody

    @property
    def box(self) -> AssetMetadataBox:
        return AssetMetadataBox(
            asset_id=self.asset_id, header=self.header, body=self.body
        )

    @property
    def json(self) -> dict[str, object]:
        return self.body.json

    def as_asset_metadata(self) -> AssetMetadata:
        return self.box.as_asset_metadata()

    def expected_metadata_hash(
        self,
        *,
        params: RegistryParameters | None = None,
        asa_am: bytes | None = None,
    ) -> bytes:
        return self.box.expected_metadata_hash(params=params, asa_am=asa_am)

    def hash_matches(
        self,
        *,
        params: RegistryParameters | None = None,
        asa_am: bytes | None = None,
    ) -> bool:
        return self.box.hash_matches(params=params, asa_am=asa_am)


@dataclass(frozen=True, slots=True)
class AssetMetadata:
    """
    Metadata body and flags as intended for an ARC-89 write.

    Unlike a parsed box there is no `last_modified_round` (assigned by the
    ledger) and no stored hash: identifiers and hash are derived.
    """

    asset_id: int
    body: MetadataBody
    flags: MetadataFlags
    deprecated_by: int = 0

    @property
    def size(self) -> int:
        return self.body.size

    @property
    def is_empty(self) -> bool:
        return self.body.is_empty

    @property
    def is_short(self) -> bool:
        return self.body.is_short

    @property
    def is_immutable(self) -> bool:
        return self.flags.irreversible.immutable

    @property
    def is_arc3_compliant(self) -> bool:
        return self.flags.irreversible.arc3

    @property
    def is_arc89_native(self) -> bool:
        return self.flags.irreversible.arc89_native

    @property
    def is_arc20_smart_asa(self) -> bool:
        return self.flags.reversible.arc20

    @property
    def is_arc62_circulating_supply(self) -> bool:
        return self.flags.reversible.arc62

    @property
    def is_deprecated(self) -> bool:
        return self.deprecated_by != 0

    def identifiers_byte(self, params: RegistryParameters | None = None) -> int:
        """Identifiers as the registry will set them: only the short bit, from size."""
        p = params or get_default_registry_params()
        return MASK_ID_SHORT if self.size <= p.short_metadata_size else 0

    def compute_header_hash(
        self, *, params: RegistryParameters | None = None
    ) -> bytes:
        return compute_header_hash(
            asset_id=self.asset_id,
            metadata_identifiers=self.identifiers_byte(params),
            reversible_flags=self.flags.reversible_byte,
            irreversible_flags=self.flags.irreversible_byte,
            metadata_size=self.size,
        )

    def compute_page_hash(
        self, *, page_index: int, params: RegistryParameters | None = None
    ) -> bytes:
        return compute_page_hash(
            asset_id=self.asset_id,
            page_index=page_index,
            page_content=self.body.get_page(page_index, params),
        )

    def compute_arc89_metadata_hash(
        self, *, params: RegistryParameters | None = None
    ) -> bytes:
        """ARC-89 hash from identifiers, flags and pages, ignoring any `am` override."""
        p = params or get_default_registry_params()
        return compute_metadata_hash(
            asset_id=self.asset_id,
            metadata_identifiers=self.identifiers_byte(p),
            reversible_flags=self.flags.reversible_byte,
            irreversible_flags=self.flags.irreversible_byte,
            metadata=self.body.raw_bytes,
            page_size=p.page_size,
        )

    def compute_metadata_hash(
        self,
        *,
        asa_am: bytes | None = None,
        params: RegistryParameters | None = None,
        enforce_immutable_on_override: bool = True,
        enforce_arc89_native_hash_match: bool = True,
    ) -> bytes:
        """
        The metadata hash the registry will store.

        A non-zero ASA `am` takes precedence (the registry does not validate
        it), which ARC-89 only allows for metadata immutable at creation.
        """
        override = _check_override(asa_am)
        computed = self.compute_arc89_metadata_hash(params=params)
        if override is None:
            return computed
        return _resolve_override(
            asa_am=override,
            computed_hash=computed,
            irreversible=self.flags.irreversible,
            enforce_immutable_on_override=enforce_immutable_on_override,
            enforce_arc89_native_hash_match=enforce_arc89_native_hash_match,
        )

    def get_mbr_delta(
        self,
        *,
        old_size: int | None = None,
        params: RegistryParameters | None = None,
    ) -> MbrDelta:
        p = params or get_default_registry_params()
        return p.mbr_delta(old_metadata_size=old_size, new_metadata_size=self.size)

    def get_delete_mbr_delta(
        self, *, params: RegistryParameters | None = None
    ) -> MbrDelta:
        p = params or get_default_registry_params()
        return p.mbr_delta(
            old_metadata_size=self.size, new_metadata_size=0, delete=True
        )

    @classmethod
    def from_json(
        cls,
        *,
        asset_id: int,
        json_obj: Mapping[str, object],
        flags: MetadataFlags | None = None,
        deprecated_by: int = 0,
        arc3_compliant: bool = False,
    ) -> AssetMetadata:
        """
        Build write-intent metadata from a JSON object.

        ARC-3 metadata (explicit, or detected from ARC-3 specific fields) is
        schema-checked, and gets the ARC-3 irreversible flag unless `flags`
        are given explicitly.
        """
        is_arc3 = arc3_compliant or is_arc3_metadata(json_obj)
        if is_arc3:
            validate_arc3_schema(json_obj)

        body = MetadataBody(encode_metadata_json(json_obj))

        if flags is None:
            flags = MetadataFlags(
                reversible=ReversibleFlags.empty(),
                irreversible=IrreversibleFlags(arc3=is_arc3),
            )
        return cls(
            asset_id=asset_id, body=body, flags=flags, deprecated_by=deprecated_by
        )

    @classmethod
    def from_bytes(
        cls,
        *,
        asset_id: int,
        metadata_bytes: bytes,
        flags: MetadataFlags | None = None,
        deprecated_by: int = 0,
        validate_json_object: bool = True,
        arc3_compliant: bool = False,
    ) -> AssetMetadata:
        """
        Build write-intent metadata from raw bytes.

        With `validate_json_object` (default) the bytes must decode to a JSON
        object; ARC-3 schema validation requires it.
        """
        if arc3_compliant and not validate_json_object:
            raise ValueError("arc3_compliant=True requires validate_json_object=True")
        metadata_bytes = to_bytes(metadata_bytes, name="metadata_bytes")
        if validate_json_object:
            json_obj = decode_metadata_json(metadata_bytes)
            if arc3_compliant:
                validate_arc3_schema(json_obj)
        return cls(
            asset_id=asset_id,
            body=MetadataBody(metadata_bytes),
            flags=flags or MetadataFlags.empty(),
            deprecated_by=deprecated_by,
        )
