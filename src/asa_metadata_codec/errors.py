from __future__ import annotations


class AsaMetadataCodecError(Exception):
    """Base class for all errors raised by this package."""


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------
class MetadataEncodingError(AsaMetadataCodecError, ValueError):
    """Raised when metadata bytes are not valid UTF-8 JSON object encoding (RFC 8259)."""


class InvalidExtraMetadataError(MetadataEncodingError, TypeError):
    """Raised when the ARC-3 `extra_metadata` field is not a valid base64 string."""


class MetadataArc3Error(AsaMetadataCodecError, ValueError):
    """
    Raised when metadata decodes to a valid JSON object that does not conform
    to the ARC-3 JSON schema.
    """


class InvalidArc3PropertiesError(MetadataArc3Error):
    """Raised when ARC-20/ARC-62 `properties` entries are missing or malformed."""


# ---------------------------------------------------------------------------
# Range
# ---------------------------------------------------------------------------
class InvalidFlagIndexError(AsaMetadataCodecError, ValueError):
    """Raised when a flag index is out of bounds or not settable."""


class InvalidPageIndexError(AsaMetadataCodecError, ValueError):
    """Raised when a page index is out of bounds."""


# ---------------------------------------------------------------------------
# Structural parsing
# ---------------------------------------------------------------------------
class ParseError(AsaMetadataCodecError, ValueError):
    """Raised when a wire value (box or URI) cannot be parsed."""


class BoxParseError(ParseError):
    """Raised when a metadata box value cannot be parsed according to ARC-89."""


class InvalidArc90UriError(ParseError):
    """Raised when an ARC-90 URI cannot be parsed or is not compatible with ARC-89."""


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------
class InvariantViolationError(AsaMetadataCodecError, ValueError):
    """Raised when inputs are well-formed but violate an ARC-89 rule."""


class MetadataHashMismatchError(InvariantViolationError):
    """
    Raised when the ASA metadata hash (am) does not match the computed hash.

    ARC-89 native metadata that is not ARC-3 compliant must carry an `am` equal
    to the computed metadata hash.
    """


# ---------------------------------------------------------------------------
# Record store
# ---------------------------------------------------------------------------
class AsaNotFoundError(AsaMetadataCodecError, LookupError):
    """Raised when an ASA is not found on-chain."""


class BoxNotFoundError(AsaMetadataCodecError, LookupError):
    """Raised when the expected metadata box does not exist."""


class RegistryResolutionError(AsaMetadataCodecError, RuntimeError):
    """Raised when the registry app id cannot be resolved from inputs."""
