"""
Blockchain layer: JSON-RPC client, transactions and the transaction orchestrator.
"""
from tyronzil.blockchain import transitions
from tyronzil.blockchain.api import NetworkClient, ZilliqaAPI
from tyronzil.blockchain.orchestrator import AccountState, TyronTransaction
from tyronzil.blockchain.transaction import LocalSigner, Signer, confirm, sign_transaction
from tyronzil.blockchain.transitions import TransitionTag

__all__ = [
    "transitions",
    "NetworkClient",
    "ZilliqaAPI",
    "AccountState",
    "TyronTransaction",
    "LocalSigner",
    "Signer",
    "confirm",
    "sign_transaction",
    "TransitionTag",
]
