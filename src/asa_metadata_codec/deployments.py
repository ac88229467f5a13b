"""
Where the registry lives on each network.

Public networks are identified by their genesis hash; their ARC-90 URIs use a
`net:<name>` authority except on MainNet, which has none. LocalNet app ids are
assigned per sandbox and are left unset.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final, Literal

from .constants import MAINNET_GH_B64, TESTNET_GH_B64

Network = Literal["mainnet", "testnet", "localnet"]

MAINNET_TRUSTED_DEPLOYER_ADDR: Final[str] = (
    "XODGWLOMKUPTGL3ZV53H3GZZWMCTJVQ5B2BZICFD3STSLA2LPSH6V6RW3I"
)
TESTNET_TRUSTED_DEPLOYER_ADDR: Final[str] = (
    "QYK5DXJ27Y7WIWUJMP3FFOTEU56L4KTRP4CY2GAKRXZHHKLNWV6M7JLYJM"
)

TESTNET_ASA_METADATA_REGISTRY_APP_ID: Final[int] = 753_324_084


@dataclass(frozen=True, slots=True)
class RegistryDeployment:
    network: Network
    genesis_hash_b64: str | None
    app_id: int | None
    creator_address: str | None = None
    arc90_uri_netauth: str | None = None

    def __post_init__(self) -> None:
        if self.genesis_hash_b64 is None and self.network != "localnet":
            raise ValueError(f"{self.network} deployment needs a genesis_hash_b64")
        if self.arc90_uri_netauth is None and self.network != "mainnet":
            raise ValueError(f"{self.network} deployment needs an arc90_uri_netauth")


def _netauth(network: Network) -> str:
    return f"net:{network}"


DEFAULT_DEPLOYMENTS: Final[Mapping[str, RegistryDeployment]] = {
    "localnet": RegistryDeployment(
        network="localnet",
        genesis_hash_b64=None,
        app_id=None,
        arc90_uri_netauth=_netauth("localnet"),
    ),
    "testnet": RegistryDeployment(
        network="testnet",
        genesis_hash_b64=TESTNET_GH_B64,
        app_id=TESTNET_ASA_METADATA_REGISTRY_APP_ID,
        creator_address=TESTNET_TRUSTED_DEPLOYER_ADDR,
        arc90_uri_netauth=_netauth("testnet"),
    ),
    "mainnet": RegistryDeployment(
        network="mainnet",
        genesis_hash_b64=MAINNET_GH_B64,
        app_id=None,  # not deployed yet
        creator_address=MAINNET_TRUSTED_DEPLOYER_ADDR,
    ),
}


def find_deployment_by_genesis_hash(genesis_hash_b64: str) -> RegistryDeployment | None:
    """The known deployment for a network's genesis hash, if any."""
    return next(
        (
            d
            for d in DEFAULT_DEPLOYMENTS.values()
            if d.genesis_hash_b64 == genesis_hash_b64
        ),
        None,
    )
