"""
ARC-89 header bit layout: metadata identifiers, reversible and irreversible flags.

Bit indexes are little-endian within the byte (0 = LSB, 7 = MSB), matching the
registry contract. Note that AVM `setbit/getbit` on byte arrays count from the
leftmost bit instead; the contract converts, clients use the masks below.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Final

from . import constants as const
from .errors import InvalidFlagIndexError

# ---------------------------------------------------------------------------
# Bit indexes
# ---------------------------------------------------------------------------
# Metadata Identifiers byte (set by the registry; clients just read)
ID_SHORT: Final[int] = 7  # derived from metadata size

# Reversible Flags byte (set by the ASA Manager Address)
REV_FLG_ARC20: Final[int] = 0
REV_FLG_ARC62: Final[int] = 1
REV_FLG_RESERVED_2: Final[int] = 2
REV_FLG_RESERVED_3: Final[int] = 3
REV_FLG_RESERVED_4: Final[int] = 4
REV_FLG_RESERVED_5: Final[int] = 5
REV_FLG_RESERVED_6: Final[int] = 6
REV_FLG_RESERVED_7: Final[int] = 7

# Irreversible Flags byte (set by the ASA Manager Address)
IRR_FLG_ARC3: Final[int] = 0  # creation-only
IRR_FLG_ARC89_NATIVE: Final[int] = 1  # creation-only
IRR_FLG_RESERVED_2: Final[int] = 2
IRR_FLG_RESERVED_3: Final[int] = 3
IRR_FLG_RESERVED_4: Final[int] = 4
IRR_FLG_RESERVED_5: Final[int] = 5
IRR_FLG_RESERVED_6: Final[int] = 6
IRR_FLG_IMMUTABLE: Final[int] = 7

IRR_CREATION_ONLY: Final[frozenset[int]] = frozenset(
    {IRR_FLG_ARC3, IRR_FLG_ARC89_NATIVE}
)

# ---------------------------------------------------------------------------
# Masks
# ---------------------------------------------------------------------------
MASK_ID_SHORT: Final[int] = 1 << ID_SHORT

MASK_REV_ARC20: Final[int] = 1 << REV_FLG_ARC20
MASK_REV_ARC62: Final[int] = 1 << REV_FLG_ARC62

MASK_IRR_ARC3: Final[int] = 1 << IRR_FLG_ARC3
MASK_IRR_ARC89_NATIVE: Final[int] = 1 << IRR_FLG_ARC89_NATIVE
MASK_IRR_IMMUTABLE: Final[int] = 1 << IRR_FLG_IMMUTABLE


def set_bit(*, bits: int, mask: int, value: bool) -> int:
    """Set (OR) or clear (AND NOT) `mask` within a byte, preserving other bits."""
    return (bits | mask) if value else (bits & ~mask & const.MAX_UINT8)


def _check_index(index: int) -> None:
    if not 0 <= index <= 7:
        raise InvalidFlagIndexError(f"Flag index must be 0-7, got {index}")


def _check_byte(value: int) -> None:
    if not 0 <= value <= const.MAX_UINT8:
        raise ValueError(f"Byte value must be 0-255, got {value}")


class _FlagByte:
    """
    Shared behaviour of the 8-field flag dataclasses.

    Field declaration order is the bit index: the first field is bit 0.
    """

    __slots__ = ()

    @property
    def byte_value(self) -> int:
        value = 0
        for index, f in enumerate(fields(self)):  # type: ignore[arg-type]
            if getattr(self, f.name):
                value |= 1 << index
        return value

    @classmethod
    def _from_byte(cls, value: int):  # type: ignore[no-untyped-def]
        _check_byte(value)
        names = [f.name for f in fields(cls)]  # type: ignore[arg-type]
        return cls(**{name: bool(value >> i & 1) for i, name in enumerate(names)})

    def _field_name(self, index: int) -> str:
        _check_index(index)
        return fields(self)[index].name  # type: ignore[arg-type]

    def get_flag(self, index: int) -> bool:
        return bool(getattr(self, self._field_name(index)))


@dataclass(frozen=True, slots=True)
class ReversibleFlags(_FlagByte):
    """
    Reversible flags byte, freely set and cleared by the ASA manager.

    Can be constructed from:
    - A raw byte value: ReversibleFlags.from_byte(0b00000011)
    - Individual flags: ReversibleFlags(arc20=True, arc62=True)
    """

    arc20: bool = False
    arc62: bool = False
    reserved_2: bool = False
    reserved_3: bool = False
    reserved_4: bool = False
    reserved_5: bool = False
    reserved_6: bool = False
    reserved_7: bool = False

    @classmethod
    def from_byte(cls, value: int) -> ReversibleFlags:
        return cls._from_byte(value)

    @classmethod
    def empty(cls) -> ReversibleFlags:
        return cls()

    def with_flag(self, index: int, value: bool) -> ReversibleFlags:
        return replace(self, **{self._field_name(index): value})


@dataclass(frozen=True, slots=True)
class IrreversibleFlags(_FlagByte):
    """
    Irreversible flags byte. Bits can only be set, never cleared.

    `arc3` and `arc89_native` can only be declared when the metadata is created.
    """

    arc3: bool = False
    arc89_native: bool = False
    reserved_2: bool = False
    reserved_3: bool = False
    reserved_4: bool = False
    reserved_5: bool = False
    reserved_6: bool = False
    immutable: bool = False

    @classmethod
    def from_byte(cls, value: int) -> IrreversibleFlags:
        return cls._from_byte(value)

    @classmethod
    def empty(cls) -> IrreversibleFlags:
        return cls()

    def with_flag(self, index: int) -> IrreversibleFlags:
        """Return a copy with flag `index` set, as a post-creation update would."""
        name = self._field_name(index)
        if index in IRR_CREATION_ONLY:
            raise InvalidFlagIndexError(
                f"Irreversible flag {index} can only be set at creation"
            )
        return replace(self, **{name: True})


@dataclass(frozen=True, slots=True)
class MetadataFlags:
    """Combined reversible and irreversible flags."""

    reversible: ReversibleFlags
    irreversible: IrreversibleFlags

    @property
    def reversible_byte(self) -> int:
        return self.reversible.byte_value

    @property
    def irreversible_byte(self) -> int:
        return self.irreversible.byte_value

    @staticmethod
    def from_bytes(reversible: int, irreversible: int) -> MetadataFlags:
        return MetadataFlags(
            reversible=ReversibleFlags.from_byte(reversible),
            irreversible=IrreversibleFlags.from_byte(irreversible),
        )

    @staticmethod
    def empty() -> MetadataFlags:
        return MetadataFlags(ReversibleFlags.empty(), IrreversibleFlags.empty())
