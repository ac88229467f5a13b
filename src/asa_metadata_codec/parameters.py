"""
Registry parameters and the storage-rent (MBR) model.

`RegistryParameters` holds the size/economics constants of a registry
deployment. Compiled defaults mirror the contract constants; a deployed
registry may report different values through its on-chain getter, which
always take precedence.
"""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, fields

from . import constants as const
from .errors import InvariantViolationError
from .pagination import page_count


class MbrDeltaSign(enum.IntEnum):
    NULL = 0
    POS = 1
    NEG = 255


@dataclass(frozen=True, slots=True)
class MbrDelta:
    """
    Signed Minimum Balance Requirement change, in microALGO.

    Normalized on construction: a NULL sign or a zero amount is always stored
    as `(NULL, 0)`, so a NULL delta can never carry a magnitude.
    """

    sign: MbrDeltaSign
    amount: int

    def __post_init__(self) -> None:
        sign = MbrDeltaSign(int(self.sign))
        amount = int(self.amount)
        if amount < 0:
            raise ValueError("MBR delta amount must be non-negative")
        if sign is MbrDeltaSign.NULL or amount == 0:
            sign, amount = MbrDeltaSign.NULL, 0
        object.__setattr__(self, "sign", sign)
        object.__setattr__(self, "amount", amount)

    @property
    def is_positive(self) -> bool:
        return self.sign is MbrDeltaSign.POS

    @property
    def is_negative(self) -> bool:
        return self.sign is MbrDeltaSign.NEG

    @property
    def is_zero(self) -> bool:
        return self.sign is MbrDeltaSign.NULL

    @property
    def signed_amount(self) -> int:
        return -self.amount if self.is_negative else self.amount

    @staticmethod
    def zero() -> MbrDelta:
        return MbrDelta(MbrDeltaSign.NULL, 0)

    @staticmethod
    def from_signed(delta: int) -> MbrDelta:
        if delta > 0:
            return MbrDelta(MbrDeltaSign.POS, delta)
        if delta < 0:
            return MbrDelta(MbrDeltaSign.NEG, -delta)
        return MbrDelta.zero()

    @staticmethod
    def from_tuple(value: Sequence[int]) -> MbrDelta:
        """Decode the ABI `(uint8 sign, uint64 amount)` tuple."""
        if len(value) != 2:
            raise ValueError("Expected (sign, amount)")
        try:
            sign = MbrDeltaSign(int(value[0]))
        except ValueError as e:
            raise ValueError(f"Invalid MBR delta sign: {value[0]}") from e
        return MbrDelta(sign=sign, amount=int(value[1]))


@dataclass(frozen=True, slots=True)
class RegistryParameters:
    key_size: int
    header_size: int
    max_metadata_size: int
    short_metadata_size: int
    page_size: int
    first_payload_max_size: int
    extra_payload_max_size: int
    replace_payload_max_size: int
    flat_mbr: int
    byte_mbr: int

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} must be non-negative")
        if self.page_size == 0:
            raise ValueError("page_size must be > 0")
        if self.max_metadata_size > const.MAX_BOX_SIZE - self.header_size:
            raise ValueError(
                f"max_metadata_size {self.max_metadata_size} does not fit in a box "
                f"with a {self.header_size}-byte header"
            )
        if page_count(self.max_metadata_size, self.page_size) > const.MAX_PAGE_INDEXES:
            raise ValueError("Page index of max_metadata_size must fit in uint8")

    @staticmethod
    def defaults() -> RegistryParameters:
        return RegistryParameters(
            key_size=const.ASSET_METADATA_BOX_KEY_SIZE,
            header_size=const.HEADER_SIZE,
            max_metadata_size=const.MAX_METADATA_SIZE,
            short_metadata_size=const.SHORT_METADATA_SIZE,
            page_size=const.PAGE_SIZE,
            first_payload_max_size=const.FIRST_PAYLOAD_MAX_SIZE,
            extra_payload_max_size=const.EXTRA_PAYLOAD_MAX_SIZE,
            replace_payload_max_size=const.REPLACE_PAYLOAD_MAX_SIZE,
            flat_mbr=const.FLAT_MBR,
            byte_mbr=const.BYTE_MBR,
        )

    @classmethod
    def from_tuple(cls, value: Sequence[int]) -> RegistryParameters:
        """Decode the 10-tuple returned by `arc89_get_metadata_registry_parameters`."""
        if len(value) != 10:
            raise ValueError("Expected 10-tuple of registry parameters")
        return cls(*(int(v) for v in value))

    def mbr_for_box(self, metadata_size: int) -> int:
        """MBR of a metadata box holding `metadata_size` bytes of metadata."""
        if metadata_size < 0:
            raise ValueError("metadata_size must be non-negative")
        return self.flat_mbr + self.byte_mbr * (
            self.key_size + self.header_size + metadata_size
        )

    def mbr_delta(
        self,
        *,
        old_metadata_size: int | None,
        new_metadata_size: int,
        delete: bool = False,
    ) -> MbrDelta:
        """
        MBR delta of moving a box from `old_metadata_size` to `new_metadata_size`.

        - `old_metadata_size=None` means the box is being created.
        - `delete=True` means the box is being deleted; the old size is required
          and the new size must be 0.
        """
        if new_metadata_size < 0:
            raise ValueError("new_metadata_size must be non-negative")

        if delete:
            if old_metadata_size is None:
                raise InvariantViolationError(
                    "old_metadata_size must be provided when delete=True"
                )
            if new_metadata_size != 0:
                raise InvariantViolationError(
                    "new_metadata_size must be 0 when delete=True"
                )
            return MbrDelta.from_signed(-self.mbr_for_box(old_metadata_size))

        if old_metadata_size is None:
            return MbrDelta.from_signed(self.mbr_for_box(new_metadata_size))

        return MbrDelta.from_signed(
            self.mbr_for_box(new_metadata_size) - self.mbr_for_box(old_metadata_size)
        )


# Frozen dataclass; safe to share.
_DEFAULT_REGISTRY_PARAMS: RegistryParameters | None = None


def get_default_registry_params() -> RegistryParameters:
    """Return the cached compiled-default `RegistryParameters`."""
    global _DEFAULT_REGISTRY_PARAMS
    if _DEFAULT_REGISTRY_PARAMS is None:
        _DEFAULT_REGISTRY_PARAMS = RegistryParameters.defaults()
    return _DEFAULT_REGISTRY_PARAMS
