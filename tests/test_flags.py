"""
Unit tests for asa_metadata_codec.flags.

Tests cover:
- Bit index and mask constants
- ReversibleFlags / IrreversibleFlags byte conversion
- Flag updates and creation-only irreversible bits
- MetadataFlags
"""

import pytest

from asa_metadata_codec import flags
from asa_metadata_codec.errors import InvalidFlagIndexError
from asa_metadata_codec.flags import (
    IrreversibleFlags,
    MetadataFlags,
    ReversibleFlags,
    set_bit,
)


class TestMasks:
    """Tests for mask constants and set_bit."""

    def test_mask_values(self) -> None:
        """Test masks match their bit indexes."""
        assert flags.MASK_ID_SHORT == 0x80
        assert flags.MASK_REV_ARC20 == 0x01
        assert flags.MASK_REV_ARC62 == 0x02
        assert flags.MASK_IRR_ARC3 == 0x01
        assert flags.MASK_IRR_ARC89_NATIVE == 0x02
        assert flags.MASK_IRR_IMMUTABLE == 0x80

    def test_set_bit_sets(self) -> None:
        """Test setting a bit preserves the others."""
        assert set_bit(bits=0b0000_0001, mask=0b1000_0000, value=True) == 0b1000_0001

    def test_set_bit_clears(self) -> None:
        """Test clearing a bit preserves the others."""
        assert set_bit(bits=0b1000_0001, mask=0b1000_0000, value=False) == 0b0000_0001


class TestReversibleFlags:
    """Tests for ReversibleFlags."""

    def test_empty(self) -> None:
        """Test empty flags encode to zero."""
        assert ReversibleFlags.empty().byte_value == 0

    def test_from_byte(self) -> None:
        """Test decoding ARC-20 and ARC-62 bits."""
        rf = ReversibleFlags.from_byte(0b0000_0011)
        assert rf.arc20
        assert rf.arc62
        assert not rf.reserved_2

    def test_msb_is_reserved_7(self) -> None:
        """Test bit 7 maps to the last field."""
        rf = ReversibleFlags.from_byte(0x80)
        assert rf.reserved_7
        assert not rf.arc20

    @pytest.mark.parametrize("value", [0, 1, 2, 0x55, 0xAA, 0xFF])
    def test_byte_roundtrip(self, value: int) -> None:
        """Test from_byte / byte_value round trip."""
        assert ReversibleFlags.from_byte(value).byte_value == value

    @pytest.mark.parametrize("value", [-1, 256])
    def test_from_byte_out_of_range(self, value: int) -> None:
        """Test byte values outside 0..255 raise."""
        with pytest.raises(ValueError, match="Byte value must be 0-255"):
            ReversibleFlags.from_byte(value)

    def test_with_flag_set_and_clear(self) -> None:
        """Test reversible flags can be set and cleared."""
        rf = ReversibleFlags.empty().with_flag(flags.REV_FLG_ARC62, True)
        assert rf.byte_value == 0x02
        assert rf.with_flag(flags.REV_FLG_ARC62, False).byte_value == 0

    def test_get_flag(self) -> None:
        """Test reading a flag by index."""
        rf = ReversibleFlags(arc20=True)
        assert rf.get_flag(flags.REV_FLG_ARC20)
        assert not rf.get_flag(flags.REV_FLG_ARC62)

    @pytest.mark.parametrize("index", [-1, 8])
    def test_invalid_index(self, index: int) -> None:
        """Test indexes outside 0..7 raise InvalidFlagIndexError."""
        with pytest.raises(InvalidFlagIndexError, match="Flag index must be 0-7"):
            ReversibleFlags.empty().with_flag(index, True)


class TestIrreversibleFlags:
    """Tests for IrreversibleFlags."""

    def test_from_byte(self) -> None:
        """Test decoding ARC-3, ARC-89 native and immutable bits."""
        irr = IrreversibleFlags.from_byte(0b1000_0011)
        assert irr.arc3
        assert irr.arc89_native
        assert irr.immutable

    def test_constructor_encodes(self) -> None:
        """Test creation-time flags encode to their masks."""
        irr = IrreversibleFlags(arc3=True, arc89_native=True)
        assert irr.byte_value == flags.MASK_IRR_ARC3 | flags.MASK_IRR_ARC89_NATIVE

    def test_with_flag_sets_immutable(self) -> None:
        """Test immutability can be set after creation."""
        irr = IrreversibleFlags.empty().with_flag(flags.IRR_FLG_IMMUTABLE)
        assert irr.immutable
        assert irr.byte_value == 0x80

    def test_with_flag_reserved(self) -> None:
        """Test reserved irreversible bits can be set after creation."""
        irr = IrreversibleFlags.empty().with_flag(flags.IRR_FLG_RESERVED_4)
        assert irr.byte_value == 0x10

    @pytest.mark.parametrize(
        "index", [flags.IRR_FLG_ARC3, flags.IRR_FLG_ARC89_NATIVE]
    )
    def test_creation_only_flags_rejected(self, index: int) -> None:
        """Test creation-only bits cannot be set by an update."""
        with pytest.raises(InvalidFlagIndexError, match="only be set at creation"):
            IrreversibleFlags.empty().with_flag(index)

    def test_invalid_index(self) -> None:
        """Test an out-of-range index raises."""
        with pytest.raises(InvalidFlagIndexError):
            IrreversibleFlags.empty().with_flag(8)

    def test_immutable_is_frozen(self) -> None:
        """Test flag dataclasses are immutable."""
        irr = IrreversibleFlags.empty()
        with pytest.raises(AttributeError):
            irr.immutable = True  # type: ignore[misc]


class TestMetadataFlags:
    """Tests for MetadataFlags."""

    def test_from_bytes(self) -> None:
        """Test combined decoding."""
        mf = MetadataFlags.from_bytes(0x01, 0x80)
        assert mf.reversible.arc20
        assert mf.irreversible.immutable
        assert mf.reversible_byte == 0x01
        assert mf.irreversible_byte == 0x80

    def test_empty(self) -> None:
        """Test empty combined flags."""
        mf = MetadataFlags.empty()
        assert mf.reversible_byte == 0
        assert mf.irreversible_byte == 0
