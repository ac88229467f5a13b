"""
Registry location configuration.

Protocol sizes live in `RegistryParameters`; this module only says *which*
registry instance to address (app id and ARC-90 network authority).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from .deployments import DEFAULT_DEPLOYMENTS, RegistryDeployment
from .errors import RegistryResolutionError
from .uri import Arc90Compliance, Arc90Uri

logger = logging.getLogger(__name__)

ENV_APP_ID: Final[str] = "ASA_METADATA_REGISTRY_APP_ID"
ENV_NETWORK: Final[str] = "ASA_METADATA_REGISTRY_NETWORK"


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Configuration for an ASA Metadata Registry singleton instance."""

    app_id: int | None = None
    netauth: str | None = None  # e.g. "net:testnet"; None for MainNet

    @classmethod
    def from_deployment(cls, deployment: RegistryDeployment) -> RegistryConfig:
        return cls(app_id=deployment.app_id, netauth=deployment.arc90_uri_netauth)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RegistryConfig:
        """
        Build a config from `ASA_METADATA_REGISTRY_NETWORK` (a key of
        `DEFAULT_DEPLOYMENTS`) and `ASA_METADATA_REGISTRY_APP_ID`, the latter
        overriding the deployment's app id.
        """
        env = os.environ if environ is None else environ
        config = cls()

        network = env.get(ENV_NETWORK)
        if network:
            deployment = DEFAULT_DEPLOYMENTS.get(network)
            if deployment is None:
                raise RegistryResolutionError(f"Unknown registry network: {network!r}")
            config = cls.from_deployment(deployment)

        app_id_raw = env.get(ENV_APP_ID)
        if app_id_raw:
            try:
                app_id = int(app_id_raw)
            except ValueError as e:
                raise RegistryResolutionError(
                    f"{ENV_APP_ID} must be an integer, got {app_id_raw!r}"
                ) from e
            config = cls(app_id=app_id, netauth=config.netauth)

        logger.debug(
            "Resolved registry config from environment: app_id=%s netauth=%s",
            config.app_id,
            config.netauth,
        )
        return config

    def _require_app_id(self) -> int:
        if self.app_id is None:
            raise RegistryResolutionError("Cannot build ARC-90 URI without app_id")
        return self.app_id

    def partial_uri(
        self, compliance: Arc90Compliance = Arc90Compliance()
    ) -> Arc90Uri:
        """The partial URI to store in an ASA `url` field."""
        return Arc90Uri(
            netauth=self.netauth,
            app_id=self._require_app_id(),
            box_name=None,
            compliance=compliance,
        )

    def arc90_uri(
        self, *, asset_id: int, compliance: Arc90Compliance = Arc90Compliance()
    ) -> Arc90Uri:
        return self.partial_uri(compliance).with_asset_id(asset_id)
