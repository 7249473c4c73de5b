"""
Network configuration for the tyronzil client.
"""
import importlib.resources
import json
import logging
import os
import urllib.parse
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Defaults shared by the orchestrator and the CLI
DEFAULT_GAS_LIMIT = 10000
CONFIRM_ATTEMPTS = 33
CONFIRM_INTERVAL_MS = 1000
HTTP_RETRY_COUNT = 3
HTTP_TIMEOUT = 30

# Minimum balances, in Qa (10^-12 ZIL)
TYRON_STAKE_QA = 100_000_000_000_000
USER_INIT_COST_QA = 20_000_000_000_000


class NetworkConfig:
    """Loads and caches the bundled Zilliqa network table."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network configurations from networks.json.

        Returns:
            Dictionary of network name to network configuration
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("tyronzil").joinpath("networks.json")
        with resource.open("r", encoding="utf-8") as f:
            cls._networks_cache = json.load(f)
        logger.debug("Loaded %d network configurations", len(cls._networks_cache))
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the configuration of a single network.

        Args:
            network: Network name, e.g. "testnet"

        Returns:
            The network configuration

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks.keys()))
            raise ValueError(f"Unknown network: {network}. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_rpc_url(cls, network: str) -> str:
        """
        Get the RPC URL for a network, honoring TYRONZIL_RPC_URL.
        """
        override = os.environ.get("TYRONZIL_RPC_URL")
        if override:
            logger.info("Using RPC URL from TYRONZIL_RPC_URL")
            return override
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_version(cls, network: str) -> int:
        """
        Transaction version for a network: chain id in the upper 16 bits,
        message version in the lower 16 bits.
        """
        config = cls.get_network(network)
        return (int(config["chainId"]) << 16) + int(config.get("msgVersion", 1))

    @classmethod
    def get_namespace(cls, network: str) -> str:
        return cls.get_network(network)["namespace"]

    @classmethod
    def get_tyron_init(cls, network: str) -> Optional[str]:
        """
        Address of the tyron init (registry) contract, honoring TYRONZIL_TYRON_INIT.
        """
        override = os.environ.get("TYRONZIL_TYRON_INIT")
        if override:
            return override
        return cls.get_network(network).get("tyronInit")


def validate_rpc_url(url: str) -> str:
    """
    Ensure an RPC URL uses https, unless it points at localhost.

    Raises:
        ValueError: If the URL is not secure
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.netloc.split(':')[0] if parsed.netloc else ''
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not is_local:
        raise ValueError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")
    return url.rstrip('/')
