"""
Algod-backed record store.

Fetches raw ARC-89 boxes and ASA params through an `algosdk` Algod client and
hands them to the codec. No transactions are involved, so this is the fastest
read path; it performs no retries.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from algosdk.error import AlgodHTTPError

from .codec import asset_id_to_box_name, b64_decode
from .errors import (
    AsaNotFoundError,
    BoxNotFoundError,
    InvalidArc90UriError,
    ParseError,
)
from .models import AssetMetadataBox, AssetMetadataRecord, MetadataExistence
from .parameters import RegistryParameters, get_default_registry_params
from .uri import Arc90Uri

if TYPE_CHECKING:  # pragma: no cover
    from algosdk.v2client.algod import AlgodClient

logger = logging.getLogger(__name__)


def _is_not_found(error: AlgodHTTPError) -> bool:
    if error.code == 404:
        return True
    msg = str(error).lower()
    return "not found" in msg or "does not exist" in msg


@dataclass(slots=True)
class AlgodBoxReader:
    """
    Read ARC-89 metadata boxes and ASA params via Algod.

    Only two Algod endpoints are used:
    - `application_box_by_name(app_id, box_name)`
    - `asset_info(asset_id)` (existence checks and URI resolution)
    """

    algod: AlgodClient

    def get_box_value(self, *, app_id: int, box_name: bytes) -> bytes:
        """
        Fetch a raw box value.

        Raises:
            BoxNotFoundError: if the box doesn't exist.
        """
        logger.debug("Fetching box %s of app %d", box_name.hex(), app_id)
        try:
            resp = self.algod.application_box_by_name(app_id, box_name)
        except AlgodHTTPError as e:
            if _is_not_found(e):
                logger.debug("Box %s of app %d not found", box_name.hex(), app_id)
                raise BoxNotFoundError("Box not found") from e
            raise

        value_b64 = resp.get("value") if isinstance(resp, Mapping) else None
        if not isinstance(value_b64, str):
            raise RuntimeError(
                "Unexpected algod response shape for application_box_by_name"
            )
        return b64_decode(value_b64)

    def try_get_metadata_box(
        self,
        *,
        app_id: int,
        asset_id: int,
        params: RegistryParameters | None = None,
    ) -> AssetMetadataBox | None:
        """The parsed metadata box, or None if the box doesn't exist."""
        try:
            value = self.get_box_value(
                app_id=app_id, box_name=asset_id_to_box_name(asset_id)
            )
        except BoxNotFoundError:
            return None
        return AssetMetadataBox.parse(
            asset_id=asset_id,
            value=value,
            params=params or get_default_registry_params(),
        )

    def get_metadata_box(
        self,
        *,
        app_id: int,
        asset_id: int,
        params: RegistryParameters | None = None,
    ) -> AssetMetadataBox:
        box = self.try_get_metadata_box(app_id=app_id, asset_id=asset_id, params=params)
        if box is None:
            raise BoxNotFoundError("Metadata box not found")
        return box

    def get_asset_metadata_record(
        self,
        *,
        app_id: int,
        asset_id: int,
        params: RegistryParameters | None = None,
    ) -> AssetMetadataRecord:
        box = self.get_metadata_box(app_id=app_id, asset_id=asset_id, params=params)
        return AssetMetadataRecord(
            app_id=app_id, asset_id=asset_id, header=box.header, body=box.body
        )

    # ---------------------------------------------------------------------
    # ASA lookups
    # ---------------------------------------------------------------------

    def get_asset_info(self, asset_id: int) -> Mapping[str, Any]:
        try:
            resp = self.algod.asset_info(asset_id)
        except AlgodHTTPError as e:
            if _is_not_found(e):
                raise AsaNotFoundError(f"ASA {asset_id} not found") from e
            raise
        if not isinstance(resp, Mapping):
            raise RuntimeError("Unexpected algod response for asset_info")
        return resp

    def get_asset_url(self, asset_id: int) -> str | None:
        """The ASA's `url` param, or None if it has none."""
        params = self.get_asset_info(asset_id).get("params")
        url = params.get("url") if isinstance(params, Mapping) else None
        return str(url) if url else None

    def check_metadata_exists(
        self, *, app_id: int, asset_id: int
    ) -> MetadataExistence:
        """Off-chain equivalent of `arc89_check_metadata_exists`."""
        try:
            self.get_asset_info(asset_id)
            asa_exists = True
        except AsaNotFoundError:
            asa_exists = False
        try:
            self.get_box_value(app_id=app_id, box_name=asset_id_to_box_name(asset_id))
            metadata_exists = True
        except BoxNotFoundError:
            metadata_exists = False
        return MetadataExistence(asa_exists=asa_exists, metadata_exists=metadata_exists)

    def resolve_metadata_uri_from_asset(self, *, asset_id: int) -> Arc90Uri:
        """
        Resolve the Asset Metadata URI from the ASA's `url` field.

        Raises:
            InvalidArc90UriError: if the ASA has no url, or it is not an
                ARC-89 compatible ARC-90 URI.
        """
        url = self.get_asset_url(asset_id)
        if not url:
            raise InvalidArc90UriError(
                "ASA has no url field; cannot resolve ARC-89 metadata URI"
            )
        try:
            uri = Arc90Uri.parse(url)
        except ParseError as e:
            raise InvalidArc90UriError(
                "Failed to resolve ARC-89 URI from ASA url"
            ) from e
        return uri.with_asset_id(asset_id) if uri.is_partial else uri
