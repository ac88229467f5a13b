"""
ARC-89 metadata JSON encoding rules and ARC-3 structural checks.

ARC-89 metadata is a UTF-8 encoded JSON object (RFC 8259) without a BOM.
Empty metadata bytes stand for the empty object `{}`.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Final, Literal

from . import constants as const
from . import flags
from .errors import InvalidArc3PropertiesError, MetadataArc3Error, MetadataEncodingError

UTF8_BOM: Final[bytes] = b"\xef\xbb\xbf"


def _reject_constant(name: str) -> object:
    raise ValueError(f"{name} is not valid JSON")


def decode_metadata_json(metadata: bytes) -> dict[str, object]:
    """
    Decode ARC-89 metadata bytes into a Python dict.

    Raises:
        MetadataEncodingError: on a BOM, invalid UTF-8, invalid JSON, or a
            top-level value that is not an object.
    """
    if metadata == b"":
        return {}

    if metadata.startswith(UTF8_BOM):
        raise MetadataEncodingError("Metadata MUST NOT include a UTF-8 BOM")

    try:
        txt = metadata.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MetadataEncodingError("Metadata is not valid UTF-8") from e

    try:
        obj: object = json.loads(txt, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise MetadataEncodingError("Metadata is not valid JSON") from e

    if not isinstance(obj, dict):
        raise MetadataEncodingError("Metadata JSON MUST be an object")
    return obj


def encode_metadata_json(obj: Mapping[str, object]) -> bytes:
    """
    Encode a JSON object as compact UTF-8 bytes (no BOM, no extra whitespace).

    The output is not canonicalized beyond key insertion order; ARC-89 hashes
    the raw bytes, so callers must keep the exact bytes they submit.
    """
    if not isinstance(obj, Mapping):
        raise MetadataEncodingError("Metadata JSON MUST be an object")
    try:
        txt = json.dumps(
            dict(obj), ensure_ascii=False, separators=(",", ":"), allow_nan=False
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise MetadataEncodingError("Object is not JSON-serializable") from e
    return txt.encode("utf-8")


# ---------------------------------------------------------------------------
# ARC-3
# ---------------------------------------------------------------------------
ARC3_STRING_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "name",
        "description",
        "image",
        "image_integrity",
        "image_mimetype",
        "background_color",
        "external_url",
        "external_url_integrity",
        "external_url_mimetype",
        "animation_url",
        "animation_url_integrity",
        "animation_url_mimetype",
        "unitName",
        "extra_metadata",
    }
)

# Fields whose presence is specific to ARC-3 (generic ones like `name` are not).
ARC3_INDICATOR_FIELDS: Final[frozenset[str]] = frozenset(
    {"decimals", "properties", "localization"}
)


def _type_name(value: object) -> str:
    return type(value).__name__


def _check_decimals(value: object) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise MetadataArc3Error(
            f"ARC-3 field 'decimals' must be an integer, got {_type_name(value)}"
        )
    if value < 0:
        raise MetadataArc3Error(
            f"ARC-3 field 'decimals' must be non-negative, got {value}"
        )


def _check_properties(value: object) -> None:
    if not isinstance(value, dict):
        raise MetadataArc3Error(
            f"ARC-3 field 'properties' must be an object, got {_type_name(value)}"
        )


def _check_localization(value: object) -> None:
    if not isinstance(value, dict):
        raise MetadataArc3Error(
            f"ARC-3 field 'localization' must be an object, got {_type_name(value)}"
        )
    for key in ("uri", "default", "locales"):
        if key not in value:
            raise MetadataArc3Error(
                f"ARC-3 'localization' object must have '{key}' field"
            )
    if not isinstance(value["uri"], str):
        raise MetadataArc3Error("ARC-3 'localization.uri' must be a string")
    if not isinstance(value["default"], str):
        raise MetadataArc3Error("ARC-3 'localization.default' must be a string")
    locales = value["locales"]
    if not isinstance(locales, list):
        raise MetadataArc3Error("ARC-3 'localization.locales' must be an array")
    if not all(isinstance(locale, str) for locale in locales):
        raise MetadataArc3Error(
            "ARC-3 'localization.locales' entries must be strings"
        )


_ARC3_FIELD_CHECKS: Final[Mapping[str, Callable[[object], None]]] = {
    "decimals": _check_decimals,
    "properties": _check_properties,
    "localization": _check_localization,
}


def validate_arc3_schema(obj: Mapping[str, object]) -> None:
    """
    Structurally validate a JSON object against the ARC-3 metadata schema
    (https://dev.algorand.co/arc-standards/arc-0003/#json-metadata-file-schema).

    Only known fields are checked; unknown fields are always allowed.

    Raises:
        MetadataArc3Error: on the first field that does not conform.
    """
    for key, value in obj.items():
        check = _ARC3_FIELD_CHECKS.get(key)
        if check is not None:
            check(value)
        elif key in ARC3_STRING_FIELDS and not isinstance(value, str):
            raise MetadataArc3Error(
                f"ARC-3 field '{key}' must be a string, got {_type_name(value)}"
            )


def is_arc3_metadata(obj: Mapping[str, object]) -> bool:
    """True if `obj` carries any ARC-3 specific field."""
    return not ARC3_INDICATOR_FIELDS.isdisjoint(obj.keys())


def is_positive_uint64(value: object) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 < value <= const.MAX_UINT64
    )


Arc3PropertiesKey = Literal["arc-20", "arc-62"]

# Reversible flag index -> ARC-3 `properties` key it requires.
ARC3_PROPERTIES_FLAG_TO_KEY: Final[Mapping[int, Arc3PropertiesKey]] = {
    flags.REV_FLG_ARC20: "arc-20",
    flags.REV_FLG_ARC62: "arc-62",
}


def validate_arc3_properties(
    body: Mapping[str, object], arc_key: Arc3PropertiesKey
) -> None:
    """
    Check that `properties[arc_key]["application-id"]` is a positive uint64.

    ARC-20 (Smart ASA) and ARC-62 (circulating supply) metadata point at their
    companion application this way.
    """
    properties = body.get("properties")
    if not isinstance(properties, dict):
        raise InvalidArc3PropertiesError(
            f"{arc_key.upper()} metadata must have a valid 'properties' field"
        )
    arc_value = properties.get(arc_key)
    if not isinstance(arc_value, dict):
        raise InvalidArc3PropertiesError(f"properties['{arc_key}'] must be an object")
    if not is_positive_uint64(arc_value.get("application-id")):
        raise InvalidArc3PropertiesError(
            f"properties['{arc_key}']['application-id'] must be a positive uint64"
        )
