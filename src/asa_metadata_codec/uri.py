"""
ARC-90 URIs locating ARC-89 metadata boxes.

    algorand://net:<name>/app/<app_id>?box=<base64url>#arc<A>+<B>...
    algorand://app/<app_id>?box=<base64url>#arc<A>+<B>...      (MainNet)

An empty `box` value makes a *partial* URI, as stored in an ASA's `url` field;
it is completed with the 8-byte box name of a specific Asset ID.
"""

from __future__ import annotations

import binascii
import logging
import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode, urlsplit

from . import constants as const
from .codec import (
    asset_id_to_box_name,
    b64_encode,
    b64url_decode,
    b64url_encode,
    box_name_to_asset_id,
)
from .errors import InvalidArc90UriError, InvariantViolationError

logger = logging.getLogger(__name__)

_ARC_NUMBER = r"(?:0|[1-9][0-9]*)"
_COMPLIANCE_RE = re.compile(
    rf"{const.ARC90_COMPLIANCE_PREFIX}{_ARC_NUMBER}"
    rf"(?:{re.escape(const.ARC90_COMPLIANCE_SEP)}{_ARC_NUMBER})*"
)
_UINT_RE = re.compile(r"[0-9]{1,20}")  # uint64 has at most 20 digits


def _has_invalid_arc3(arcs: tuple[int, ...]) -> bool:
    return const.ARC3_COMPLIANCE_NUMBER in arcs and len(arcs) > 1


@dataclass(frozen=True, slots=True)
class Arc90Compliance:
    """
    The ARC-90 compliance fragment `#arc<A>+<B>+...`.

    - First entry carries the `arc` prefix, subsequent entries are bare numbers.
    - Numbers are decimal without leading zeros.
    - ARC-3 must be the sole entry (`#arc3`).
    - Order is not significant and is preserved as written.
    """

    arcs: tuple[int, ...] = ()

    @classmethod
    def parse(cls, fragment: str | None) -> Arc90Compliance:
        """
        Parse a compliance fragment (with or without the leading `#`).

        Malformed fragments are not an error: they parse to no compliance.
        """
        if not fragment:
            return cls()
        frag = fragment[1:] if fragment.startswith("#") else fragment
        if not _COMPLIANCE_RE.fullmatch(frag):
            logger.debug("Ignoring malformed ARC-90 compliance fragment %r", fragment)
            return cls()

        body = frag[len(const.ARC90_COMPLIANCE_PREFIX) :]
        arcs = tuple(int(n) for n in body.split(const.ARC90_COMPLIANCE_SEP))
        if _has_invalid_arc3(arcs):
            logger.debug("Ignoring ARC-3 compliance combined with %r", arcs)
            return cls()
        return cls(arcs)

    def to_fragment(self) -> str | None:
        """Render as `#arc<A>+<B>...`, or None when there is no declared compliance."""
        if not self.arcs:
            return None
        if _has_invalid_arc3(self.arcs):
            raise InvariantViolationError(
                "ARC-3 must be the sole entry in compliance fragment"
            )
        if any(n < 0 for n in self.arcs):
            raise ValueError("ARC numbers must be non-negative")
        return "#" + const.ARC90_COMPLIANCE_PREFIX + const.ARC90_COMPLIANCE_SEP.join(
            str(n) for n in self.arcs
        )


@dataclass(frozen=True, slots=True)
class Arc90Uri:
    """Parsed ARC-90 URI referencing an ARC-89 metadata box."""

    # Network authority, e.g. "net:testnet"; None for MainNet.
    netauth: str | None
    app_id: int
    box_name: bytes | None
    compliance: Arc90Compliance = Arc90Compliance()

    def __post_init__(self) -> None:
        if not 0 <= self.app_id <= const.MAX_UINT64:
            raise ValueError("app_id must fit in uint64")
        if (
            self.box_name is not None
            and len(self.box_name) != const.ASSET_METADATA_BOX_KEY_SIZE
        ):
            raise ValueError(
                f"box_name must be {const.ASSET_METADATA_BOX_KEY_SIZE} bytes"
            )

    @property
    def asset_id(self) -> int | None:
        if self.box_name is None:
            return None
        return box_name_to_asset_id(self.box_name)

    @property
    def is_partial(self) -> bool:
        return self.box_name is None

    def with_asset_id(self, asset_id: int) -> Arc90Uri:
        return Arc90Uri(
            netauth=self.netauth,
            app_id=self.app_id,
            box_name=asset_id_to_box_name(asset_id),
            compliance=self.compliance,
        )

    def to_uri(self) -> str:
        """Render the URI; the box name is base64url in the `box` query parameter."""
        app_path = f"{const.ARC90_URI_APP_PATH_NAME}/{self.app_id}"
        location = f"{self.netauth}/{app_path}" if self.netauth else app_path
        box = b64url_encode(self.box_name) if self.box_name is not None else ""
        query = urlencode({const.ARC90_URI_BOX_QUERY_NAME: box})
        fragment = self.compliance.to_fragment() or ""
        return f"{const.ARC90_URI_SCHEME_NAME}://{location}?{query}{fragment}"

    def to_algod_box_name_b64(self) -> str:
        """The Algod `/box?name=` parameter expects standard base64 (with padding)."""
        if self.box_name is None:
            raise InvariantViolationError(
                "Cannot produce algod box name for a partial URI"
            )
        return b64_encode(self.box_name)

    @staticmethod
    def parse(uri: str) -> Arc90Uri:
        """
        Parse an ARC-90 app box URI.

        Raises:
            InvalidArc90UriError: on a wrong scheme, a missing `box` parameter,
                an unrecognized path, a non-numeric app id, or a box value that
                is not base64url of exactly 8 bytes.
        """
        try:
            parts = urlsplit(uri)
        except ValueError as e:
            raise InvalidArc90UriError("Malformed URI") from e
        if parts.scheme != const.ARC90_URI_SCHEME_NAME:
            raise InvalidArc90UriError(
                f"Not an {const.ARC90_URI_SCHEME_NAME}:// URI"
            )

        query = parse_qs(parts.query, keep_blank_values=True)
        box_values = query.get(const.ARC90_URI_BOX_QUERY_NAME)
        if box_values is None:
            raise InvalidArc90UriError(
                f"Missing '{const.ARC90_URI_BOX_QUERY_NAME}' query parameter"
            )

        netauth, app_id_text = _split_location(parts.netloc, parts.path)
        if not _UINT_RE.fullmatch(app_id_text):
            raise InvalidArc90UriError("Invalid app id in path")
        app_id = int(app_id_text)
        if app_id > const.MAX_UINT64:
            raise InvalidArc90UriError("App id must fit in uint64")

        box_name = _decode_box_value(box_values[0])
        return Arc90Uri(
            netauth=netauth,
            app_id=app_id,
            box_name=box_name,
            compliance=Arc90Compliance.parse(parts.fragment),
        )


def _split_location(netloc: str, path: str) -> tuple[str | None, str]:
    """Return `(netauth, app_id_text)` for the two supported URI shapes."""
    segments = [s for s in path.split("/") if s]
    app = const.ARC90_URI_APP_PATH_NAME
    if netloc.startswith(const.ARC90_URI_NETAUTH_PREFIX):
        if len(segments) != 2 or segments[0] != app:
            raise InvalidArc90UriError(
                f"Expected path '/{app}/<app_id>' for net: URIs"
            )
        return netloc, segments[1]
    if netloc == app and len(segments) == 1:
        return None, segments[0]
    raise InvalidArc90UriError("Unrecognized ARC-90 app URI shape")


def _decode_box_value(value: str) -> bytes | None:
    if value == "":
        return None
    try:
        box_name = b64url_decode(value)
    except (binascii.Error, ValueError) as e:
        raise InvalidArc90UriError("Invalid base64url box name") from e
    if len(box_name) != const.ASSET_METADATA_BOX_KEY_SIZE:
        raise InvalidArc90UriError("ARC-89 expects an 8-byte box name (asset id)")
    return box_name


def complete_partial_asset_url(asset_url: str, asset_id: int) -> str:
    """
    Complete a partial Asset URL into a full Asset Metadata URI.

    Example:
        algorand://net:testnet/app/752790676?box=#arc89
        -> algorand://net:testnet/app/752790676?box=AAAAAAAAAAE%3D#arc89

    A URL that is already complete is re-rendered unchanged.
    """
    parsed = Arc90Uri.parse(asset_url)
    if not parsed.is_partial:
        return parsed.to_uri()
    return parsed.with_asset_id(asset_id).to_uri()
