"""
The did:tyron:zil DID scheme.

A tyronZIL DID names the network namespace and the address of the user's
tyron-smart-contract: ``did:tyron:zil:<namespace>:<address>``.
"""
import re
from dataclasses import dataclass

from tyronzil.config import NetworkConfig
from tyronzil.crypto.keys import is_address, to_checksum_address
from tyronzil.utils import bare_hex

SCHEME = "did"
METHOD = "tyron"
BLOCKCHAIN = "zil"
PREFIX = f"{SCHEME}:{METHOD}:{BLOCKCHAIN}:"

_DID_RE = re.compile(r"^did:tyron:zil:(?P<namespace>[a-z]+):(?P<address>(0x)?[0-9a-fA-F]{40})$")


@dataclass(frozen=True)
class TyronZilScheme:
    """A parsed did:tyron:zil identifier"""
    namespace: str
    contract_address: str

    @property
    def did(self) -> str:
        return f"{PREFIX}{self.namespace}:{bare_hex(self.contract_address)}"

    def __str__(self) -> str:
        return self.did

    @classmethod
    def new(cls, network: str, contract_address: str) -> "TyronZilScheme":
        """
        Build the DID of a tyron-smart-contract on a network.

        Raises:
            ValueError: If the network or address is invalid
        """
        if not is_address(contract_address):
            raise ValueError(f"Invalid contract address: {contract_address}")
        return cls(
            namespace=NetworkConfig.get_namespace(network),
            contract_address=to_checksum_address(contract_address),
        )

    @classmethod
    def parse(cls, did: str) -> "TyronZilScheme":
        """
        Parse a did:tyron:zil string.

        Raises:
            ValueError: If the string is not a tyronZIL DID
        """
        match = _DID_RE.match(did.strip())
        if not match:
            raise ValueError(f"Not a did:tyron:zil identifier: {did}")
        return cls(
            namespace=match.group("namespace"),
            contract_address=to_checksum_address(match.group("address")),
        )


def network_for_namespace(namespace: str) -> str:
    """
    Find the network name of a DID namespace.

    Raises:
        ValueError: If no configured network uses the namespace
    """
    for name, config in NetworkConfig.load_networks().items():
        if config.get("namespace") == namespace:
            return name
    raise ValueError(f"No network is configured for namespace: {namespace}")
