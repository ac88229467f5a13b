from collections.abc import Callable

import pytest

from asa_metadata_codec import RegistryParameters, get_default_registry_params


def build_box_value(
    *,
    identifiers: int = 0,
    rev_flags: int = 0,
    irr_flags: int = 0,
    metadata_hash: bytes = b"\x00" * 32,
    last_modified_round: int = 0,
    deprecated_by: int = 0,
    metadata: bytes = b"",
) -> bytes:
    """Lay out an ARC-89 box value with the default 51-byte header."""
    return (
        bytes([identifiers, rev_flags, irr_flags])
        + metadata_hash
        + last_modified_round.to_bytes(8, "big")
        + deprecated_by.to_bytes(8, "big")
        + metadata
    )


@pytest.fixture
def box_value() -> Callable[..., bytes]:
    return build_box_value


@pytest.fixture
def default_params() -> RegistryParameters:
    return get_default_registry_params()


@pytest.fixture
def small_params() -> RegistryParameters:
    """Parameters with tiny pages/chunks so multi-page paths are cheap to exercise."""
    return RegistryParameters(
        key_size=8,
        header_size=51,
        max_metadata_size=1000,
        short_metadata_size=20,
        page_size=10,
        first_payload_max_size=16,
        extra_payload_max_size=32,
        replace_payload_max_size=24,
        flat_mbr=2500,
        byte_mbr=400,
    )
