"""
tyronzil - decentralized identity client for the Zilliqa blockchain platform.
"""
from tyronzil.blockchain import TyronTransaction, TransitionTag, ZilliqaAPI, transitions
from tyronzil.blockchain.transaction import LocalSigner, Signer
from tyronzil.config import NetworkConfig
from tyronzil.exceptions import (
    ConfirmationTimeoutError,
    ContractCodeError,
    DidResolutionError,
    ErrorCode,
    InsufficientBalanceError,
    NetworkError,
    RPCError,
    SigningError,
    TransactionRejectedError,
    TyronZilError,
    WrongKeyError,
)
from tyronzil.models import (
    ContractInit,
    DeploymentOutcome,
    GasParameters,
    Transition,
    TransitionParam,
    TransactionOutcome,
    TxObject,
    TxReceipt,
)
from tyronzil.version import __version__

__all__ = [
    "TyronTransaction",
    "TransitionTag",
    "ZilliqaAPI",
    "transitions",
    "LocalSigner",
    "Signer",
    "NetworkConfig",
    "ConfirmationTimeoutError",
    "ContractCodeError",
    "DidResolutionError",
    "ErrorCode",
    "InsufficientBalanceError",
    "NetworkError",
    "RPCError",
    "SigningError",
    "TransactionRejectedError",
    "TyronZilError",
    "WrongKeyError",
    "ContractInit",
    "DeploymentOutcome",
    "GasParameters",
    "Transition",
    "TransitionParam",
    "TransactionOutcome",
    "TxObject",
    "TxReceipt",
    "__version__",
]
