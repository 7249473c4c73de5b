"""
JSON-RPC client for the Zilliqa blockchain API.
"""
import itertools
import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tyronzil.config import HTTP_RETRY_COUNT, HTTP_TIMEOUT, NetworkConfig, validate_rpc_url
from tyronzil.exceptions import NetworkError, RPCError
from tyronzil.utils import bare_hex

# Error message returned by GetBalance for addresses that never received funds
ACCOUNT_NOT_CREATED = "Account is not created"


class NetworkClient(Protocol):
    """Blockchain operations the orchestrator depends on"""
    version: int

    def get_balance(self, address: str) -> Tuple[int, int]:
        ...

    def get_minimum_gas_price(self) -> int:
        ...

    def get_smart_contract_state(self, address: str) -> Dict[str, Any]:
        ...

    def create_transaction(self, tx_params: Dict[str, Any]) -> Dict[str, Any]:
        ...

    def get_transaction(self, tx_id: str) -> Dict[str, Any]:
        ...


class ZilliqaAPI:
    """
    Thin JSON-RPC 2.0 client for a Zilliqa node.

    Each method maps to a single RPC call. Transport errors raise
    ``NetworkError``; error objects in the response raise ``RPCError``.
    """

    def __init__(
        self,
        rpc_url: str,
        version: int,
        retry_count: int = HTTP_RETRY_COUNT,
        timeout: int = HTTP_TIMEOUT,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the API client

        Args:
            rpc_url: Zilliqa API endpoint (e.g., "https://dev-api.zilliqa.com")
            version: Transaction version (chain id << 16 | message version)
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            logger: Optional logger instance

        Raises:
            ValueError: If the URL doesn't use https (unless it's localhost)
        """
        self.rpc_url = validate_rpc_url(rpc_url)
        self.version = version
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self._ids = itertools.count(1)

        # Setup HTTP session with retries on server errors
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

    @classmethod
    def from_network(cls, network: str, **kwargs) -> "ZilliqaAPI":
        """
        Create a client for a named network from networks.json.

        Args:
            network: Network name ("mainnet", "testnet" or "isolated")
            **kwargs: Passed through to the constructor
        """
        return cls(
            rpc_url=NetworkConfig.get_rpc_url(network),
            version=NetworkConfig.get_version(network),
            **kwargs
        )

    def __enter__(self) -> "ZilliqaAPI":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Send a JSON-RPC request and return its result.

        Raises:
            NetworkError: If the request fails or the body is not JSON
            RPCError: If the node returns an error object
        """
        body = {
            "id": str(next(self._ids)),
            "jsonrpc": "2.0",
            "method": method,
            "params": params if params is not None else [""],
        }
        self.logger.debug(f"RPC request: {method}")

        try:
            response = self.session.post(self.rpc_url, json=body, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.JSONDecodeError as e:
            # Subclass of RequestException, so it has to come first
            self.logger.error(f"Invalid JSON response for {method}: {e}")
            raise NetworkError(f"Invalid JSON response for {method}: {e}") from e
        except requests.RequestException as e:
            self.logger.error(f"RPC request {method} failed: {e}")
            raise NetworkError(f"RPC request {method} failed: {e}") from e

        error = payload.get("error")
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            code = error.get("code") if isinstance(error, dict) else None
            raise RPCError(message, code=code, method=method)

        if "result" not in payload:
            raise RPCError(f"Missing result in {method} response", method=method)
        return payload["result"]

    def get_balance(self, address: str) -> Tuple[int, int]:
        """
        Get the balance (in Qa) and current nonce of an account.

        Accounts that were never funded read as (0, 0).
        """
        try:
            result = self.request("GetBalance", [bare_hex(address)])
        except RPCError as e:
            if ACCOUNT_NOT_CREATED in str(e):
                self.logger.info(f"Account {address} is not created yet")
                return 0, 0
            raise
        return int(result["balance"]), int(result["nonce"])

    def get_minimum_gas_price(self) -> int:
        return int(self.request("GetMinimumGasPrice"))

    def get_network_id(self) -> str:
        return str(self.request("GetNetworkId"))

    def get_smart_contract_state(self, address: str) -> Dict[str, Any]:
        return self.request("GetSmartContractState", [bare_hex(address)])

    def create_transaction(self, tx_params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Broadcast a signed transaction.

        Returns:
            The node's result, holding "TranID" and, for deployments,
            "ContractAddress"
        """
        return self.request("CreateTransaction", [tx_params])

    def get_transaction(self, tx_id: str) -> Dict[str, Any]:
        return self.request("GetTransaction", [bare_hex(tx_id)])
