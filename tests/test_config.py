"""
Unit tests for registry deployments and RegistryConfig.

Tests cover:
- Built-in deployments and genesis hash lookup
- RegistryConfig resolution from deployments and environment
- ARC-90 URIs built from a config
"""

import pytest

from asa_metadata_codec.config import ENV_APP_ID, ENV_NETWORK, RegistryConfig
from asa_metadata_codec.constants import MAINNET_GH_B64, TESTNET_GH_B64
from asa_metadata_codec.deployments import (
    DEFAULT_DEPLOYMENTS,
    TESTNET_ASA_METADATA_REGISTRY_APP_ID,
    RegistryDeployment,
    find_deployment_by_genesis_hash,
)
from asa_metadata_codec.errors import RegistryResolutionError
from asa_metadata_codec.uri import Arc90Compliance


class TestDeployments:
    """Tests for the built-in deployments."""

    def test_testnet(self) -> None:
        """Test the TestNet deployment."""
        testnet = DEFAULT_DEPLOYMENTS["testnet"]
        assert testnet.app_id == TESTNET_ASA_METADATA_REGISTRY_APP_ID
        assert testnet.arc90_uri_netauth == "net:testnet"
        assert testnet.genesis_hash_b64 == TESTNET_GH_B64

    def test_localnet(self) -> None:
        """Test LocalNet has a network authority but no fixed app id or genesis hash."""
        localnet = DEFAULT_DEPLOYMENTS["localnet"]
        assert localnet.arc90_uri_netauth == "net:localnet"
        assert localnet.app_id is None
        assert localnet.genesis_hash_b64 is None

    def test_mainnet_has_no_netauth(self) -> None:
        """Test MainNet URIs carry no network authority."""
        assert DEFAULT_DEPLOYMENTS["mainnet"].arc90_uri_netauth is None

    def test_find_by_genesis_hash(self) -> None:
        """Test lookup by genesis hash."""
        assert find_deployment_by_genesis_hash(MAINNET_GH_B64) is DEFAULT_DEPLOYMENTS[
            "mainnet"
        ]
        assert find_deployment_by_genesis_hash("unknown") is None

    def test_non_localnet_requires_genesis_hash(self) -> None:
        """Test public networks need a genesis hash."""
        with pytest.raises(ValueError, match="genesis_hash_b64"):
            RegistryDeployment(
                network="testnet",
                genesis_hash_b64=None,
                app_id=1,
                arc90_uri_netauth="net:testnet",
            )

    def test_non_mainnet_requires_netauth(self) -> None:
        """Test non-MainNet networks need a network authority."""
        with pytest.raises(ValueError, match="arc90_uri_netauth"):
            RegistryDeployment(network="localnet", genesis_hash_b64=None, app_id=1)


class TestRegistryConfig:
    """Tests for RegistryConfig."""

    def test_from_deployment(self) -> None:
        """Test config built from a deployment."""
        config = RegistryConfig.from_deployment(DEFAULT_DEPLOYMENTS["testnet"])
        assert config == RegistryConfig(
            app_id=TESTNET_ASA_METADATA_REGISTRY_APP_ID, netauth="net:testnet"
        )

    def test_from_env_empty(self) -> None:
        """Test an empty environment gives an empty config."""
        assert RegistryConfig.from_env({}) == RegistryConfig()

    def test_from_env_network(self) -> None:
        """Test the network variable selects a deployment."""
        config = RegistryConfig.from_env({ENV_NETWORK: "testnet"})
        assert config.app_id == TESTNET_ASA_METADATA_REGISTRY_APP_ID
        assert config.netauth == "net:testnet"

    def test_from_env_app_id_overrides(self) -> None:
        """Test the app id variable overrides the deployment app id."""
        config = RegistryConfig.from_env({ENV_NETWORK: "localnet", ENV_APP_ID: "1001"})
        assert config == RegistryConfig(app_id=1001, netauth="net:localnet")

    def test_from_env_unknown_network(self) -> None:
        """Test an unknown network raises."""
        with pytest.raises(RegistryResolutionError, match="Unknown registry network"):
            RegistryConfig.from_env({ENV_NETWORK: "betanet"})

    def test_from_env_bad_app_id(self) -> None:
        """Test a non-integer app id raises."""
        with pytest.raises(RegistryResolutionError, match="must be an integer"):
            RegistryConfig.from_env({ENV_APP_ID: "abc"})

    def test_from_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the process environment is used by default."""
        monkeypatch.setenv(ENV_APP_ID, "42")
        monkeypatch.delenv(ENV_NETWORK, raising=False)
        assert RegistryConfig.from_env() == RegistryConfig(app_id=42)

    def test_partial_uri(self) -> None:
        """Test the partial URI for an ASA url field."""
        config = RegistryConfig(app_id=752790676, netauth="net:testnet")
        uri = config.partial_uri(Arc90Compliance((89,)))
        assert uri.is_partial
        assert uri.to_uri() == "algorand://net:testnet/app/752790676?box=#arc89"

    def test_arc90_uri(self) -> None:
        """Test a full URI for one asset."""
        uri = RegistryConfig(app_id=5).arc90_uri(asset_id=1)
        assert uri.to_uri() == "algorand://app/5?box=AAAAAAAAAAE%3D"

    def test_uri_requires_app_id(self) -> None:
        """Test URIs cannot be built without an app id."""
        with pytest.raises(RegistryResolutionError, match="without app_id"):
            RegistryConfig(netauth="net:testnet").partial_uri()
