# ruff: noqa: RUF022
"""
ASA Metadata Codec.

Encoding and verification core of ARC-89 (ASA Metadata Registry):

- box record parsing/serialization (:class:`AssetMetadataBox`)
- domain-separated metadata hashing (:mod:`asa_metadata_codec.hashing`)
- pagination and write chunking (:mod:`asa_metadata_codec.pagination`)
- MBR (storage rent) deltas (:class:`RegistryParameters`)
- ARC-90 URIs (:class:`Arc90Uri`)

Everything here is pure and synchronous; :class:`AlgodBoxReader` is a thin
adapter feeding Algod box values into the codec.
"""

from __future__ import annotations

from . import constants, flags
from .algod import AlgodBoxReader
from .codec import (
    asset_id_to_box_name,
    b64_decode,
    b64_encode,
    b64url_decode,
    b64url_encode,
    box_name_to_asset_id,
    to_bytes,
)
from .config import RegistryConfig
from .deployments import (
    DEFAULT_DEPLOYMENTS,
    RegistryDeployment,
    find_deployment_by_genesis_hash,
)
from .errors import (
    AsaMetadataCodecError,
    AsaNotFoundError,
    BoxNotFoundError,
    BoxParseError,
    InvalidArc3PropertiesError,
    InvalidArc90UriError,
    InvalidExtraMetadataError,
    InvalidFlagIndexError,
    InvalidPageIndexError,
    InvariantViolationError,
    MetadataArc3Error,
    MetadataEncodingError,
    MetadataHashMismatchError,
    ParseError,
    RegistryResolutionError,
)
from .flags import IrreversibleFlags, MetadataFlags, ReversibleFlags, set_bit
from .hashing import (
    compute_arc3_metadata_hash,
    compute_header_hash,
    compute_metadata_hash,
    compute_page_hash,
)
from .models import (
    AssetMetadata,
    AssetMetadataBox,
    AssetMetadataRecord,
    MetadataBody,
    MetadataExistence,
    MetadataHeader,
    PaginatedMetadata,
    Pagination,
)
from .pagination import chunk_metadata_payload, chunks_for_slice, paginate
from .parameters import (
    MbrDelta,
    MbrDeltaSign,
    RegistryParameters,
    get_default_registry_params,
)
from .uri import Arc90Compliance, Arc90Uri, complete_partial_asset_url
from .validation import (
    decode_metadata_json,
    encode_metadata_json,
    is_arc3_metadata,
    validate_arc3_properties,
    validate_arc3_schema,
)

__all__ = [
    # Modules
    "constants",
    "flags",
    # Codec
    "to_bytes",
    "asset_id_to_box_name",
    "box_name_to_asset_id",
    "b64_encode",
    "b64_decode",
    "b64url_encode",
    "b64url_decode",
    # Hashing
    "compute_header_hash",
    "compute_page_hash",
    "compute_metadata_hash",
    "compute_arc3_metadata_hash",
    # Pagination
    "paginate",
    "chunk_metadata_payload",
    "chunks_for_slice",
    # Flags
    "set_bit",
    "ReversibleFlags",
    "IrreversibleFlags",
    "MetadataFlags",
    # Models
    "AssetMetadata",
    "AssetMetadataBox",
    "AssetMetadataRecord",
    "MetadataBody",
    "MetadataExistence",
    "MetadataHeader",
    "PaginatedMetadata",
    "Pagination",
    # Parameters
    "MbrDelta",
    "MbrDeltaSign",
    "RegistryParameters",
    "get_default_registry_params",
    # URI
    "Arc90Compliance",
    "Arc90Uri",
    "complete_partial_asset_url",
    # Validation
    "decode_metadata_json",
    "encode_metadata_json",
    "is_arc3_metadata",
    "validate_arc3_properties",
    "validate_arc3_schema",
    # Config and deployments
    "RegistryConfig",
    "RegistryDeployment",
    "DEFAULT_DEPLOYMENTS",
    "find_deployment_by_genesis_hash",
    # Record store
    "AlgodBoxReader",
    # Errors
    "AsaMetadataCodecError",
    "AsaNotFoundError",
    "BoxNotFoundError",
    "BoxParseError",
    "InvalidArc3PropertiesError",
    "InvalidArc90UriError",
    "InvalidExtraMetadataError",
    "InvalidFlagIndexError",
    "InvalidPageIndexError",
    "InvariantViolationError",
    "MetadataArc3Error",
    "MetadataEncodingError",
    "MetadataHashMismatchError",
    "ParseError",
    "RegistryResolutionError",
]
