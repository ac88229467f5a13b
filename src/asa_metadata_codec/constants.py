"""ARC-89 protocol constants shared with the registry contract."""

from typing import Final

# ---------------------------------------------------------------------------
# Integer bounds
# ---------------------------------------------------------------------------
MAX_UINT8: Final[int] = 2**8 - 1
MAX_UINT16: Final[int] = 2**16 - 1
MAX_UINT64: Final[int] = 2**64 - 1

UINT8_SIZE: Final[int] = 1
UINT16_SIZE: Final[int] = 2
UINT64_SIZE: Final[int] = 8
BYTE_SIZE: Final[int] = 1
BYTES32_SIZE: Final[int] = 32
BOOL_SIZE: Final[int] = 1


# ---------------------------------------------------------------------------
# Ledger (AVM) limits and storage rent
# ---------------------------------------------------------------------------
MAINNET_GH_B64: Final[str] = "wGHE2Pwdvd7S12BL5FaOP20EGYesN73ktiC1qzkkit8="
TESTNET_GH_B64: Final[str] = "SGO1GKSzyE7IEPItTxCByw9x8FmnrCDexi9/cOUJOiI="

MAX_BOX_SIZE: Final[int] = 32768
MAX_STACK_SIZE: Final[int] = 4096
MAX_ARG_SIZE: Final[int] = 2048
MAX_LOG_SIZE: Final[int] = 1024

FLAT_MBR: Final[int] = 2500  # microALGO
BYTE_MBR: Final[int] = 400  # microALGO


# ---------------------------------------------------------------------------
# ABI call overheads, used to derive payload ceilings
# ---------------------------------------------------------------------------
METHOD_SELECTOR_SIZE: Final[int] = 4
RETURN_PREFIX_SIZE: Final[int] = 4
DYNAMIC_LENGTH_SIZE: Final[int] = 2

# arc89_create_metadata(asset_id, rev_flags, irr_flags, size, payload)
CREATE_METADATA_OVERHEAD: Final[int] = (
    METHOD_SELECTOR_SIZE
    + UINT64_SIZE
    + BYTE_SIZE
    + BYTE_SIZE
    + UINT16_SIZE
    + DYNAMIC_LENGTH_SIZE
)
# arc89_extra_payload(asset_id, payload)
EXTRA_PAYLOAD_OVERHEAD: Final[int] = (
    METHOD_SELECTOR_SIZE + UINT64_SIZE + DYNAMIC_LENGTH_SIZE
)
# arc89_replace_metadata_slice(asset_id, offset, payload)
REPLACE_SLICE_OVERHEAD: Final[int] = (
    METHOD_SELECTOR_SIZE + UINT64_SIZE + UINT16_SIZE + DYNAMIC_LENGTH_SIZE
)
# arc89_get_metadata -> (bool,uint64,byte[])
GET_METADATA_RETURN_OVERHEAD: Final[int] = (
    RETURN_PREFIX_SIZE
    + BOOL_SIZE
    + UINT64_SIZE
    + DYNAMIC_LENGTH_SIZE
    + DYNAMIC_LENGTH_SIZE
)

FIRST_PAYLOAD_MAX_SIZE: Final[int] = MAX_ARG_SIZE - CREATE_METADATA_OVERHEAD
EXTRA_PAYLOAD_MAX_SIZE: Final[int] = MAX_ARG_SIZE - EXTRA_PAYLOAD_OVERHEAD
REPLACE_PAYLOAD_MAX_SIZE: Final[int] = MAX_ARG_SIZE - REPLACE_SLICE_OVERHEAD
PAGE_SIZE: Final[int] = MAX_LOG_SIZE - GET_METADATA_RETURN_OVERHEAD
MAX_PAGE_INDEXES: Final[int] = MAX_UINT8 + 1


# ---------------------------------------------------------------------------
# Asset Metadata Box layout
# ---------------------------------------------------------------------------
ASSET_METADATA_BOX_KEY_SIZE: Final[int] = UINT64_SIZE

IDX_METADATA_IDENTIFIERS: Final[int] = 0
IDX_REVERSIBLE_FLAGS: Final[int] = 1
IDX_IRREVERSIBLE_FLAGS: Final[int] = 2
IDX_METADATA_HASH: Final[int] = 3
IDX_LAST_MODIFIED_ROUND: Final[int] = IDX_METADATA_HASH + BYTES32_SIZE
IDX_DEPRECATED_BY: Final[int] = IDX_LAST_MODIFIED_ROUND + UINT64_SIZE
HEADER_SIZE: Final[int] = IDX_DEPRECATED_BY + UINT64_SIZE
IDX_METADATA: Final[int] = HEADER_SIZE

METADATA_HASH_SIZE: Final[int] = BYTES32_SIZE
MAX_METADATA_SIZE: Final[int] = FIRST_PAYLOAD_MAX_SIZE + 14 * EXTRA_PAYLOAD_MAX_SIZE
SHORT_METADATA_SIZE: Final[int] = MAX_STACK_SIZE


# ---------------------------------------------------------------------------
# Hash domain separators
# ---------------------------------------------------------------------------
HASH_DOMAIN_HEADER: Final[bytes] = b"arc0089/header"
HASH_DOMAIN_PAGE: Final[bytes] = b"arc0089/page"
HASH_DOMAIN_METADATA: Final[bytes] = b"arc0089/am"

ARC3_HASH_AM_PREFIX: Final[bytes] = b"arc0003/am"
ARC3_HASH_AMJ_PREFIX: Final[bytes] = b"arc0003/amj"


# ---------------------------------------------------------------------------
# ARC-90 URI
# ---------------------------------------------------------------------------
#   algorand://[net:<name>/]app/<app_id>?box=<base64url_box_name>[#arc<A>+<B>...]
ARC90_URI_SCHEME_NAME: Final[str] = "algorand"
ARC90_URI_APP_PATH_NAME: Final[str] = "app"
ARC90_URI_BOX_QUERY_NAME: Final[str] = "box"
ARC90_URI_NETAUTH_PREFIX: Final[str] = "net:"
ARC90_COMPLIANCE_PREFIX: Final[str] = "arc"
ARC90_COMPLIANCE_SEP: Final[str] = "+"

# ARC-3 compliance must be the sole entry of a compliance fragment.
ARC3_COMPLIANCE_NUMBER: Final[int] = 3
