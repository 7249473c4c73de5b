"""
Exceptions for the tyronzil client.
"""
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """
    Failure kinds reported by the transaction orchestrator.

    These values are carried by ``TransactionOutcome.error_code`` so callers
    can tell failures apart without parsing log output.
    """
    UNKNOWN = "UNKNOWN"
    WRONG_KEY = "WRONG_KEY"
    NOT_ENOUGH_BALANCE = "NOT_ENOUGH_BALANCE"
    NETWORK_ERROR = "NETWORK_ERROR"
    RPC_ERROR = "RPC_ERROR"
    CONFIRMATION_TIMEOUT = "CONFIRMATION_TIMEOUT"
    TRANSACTION_REJECTED = "TRANSACTION_REJECTED"
    SIGNING_ERROR = "SIGNING_ERROR"
    CONTRACT_CODE_ERROR = "CONTRACT_CODE_ERROR"
    DID_RESOLUTION_ERROR = "DID_RESOLUTION_ERROR"


class TyronZilError(Exception):
    """Base exception for tyronzil errors."""
    error_code = ErrorCode.UNKNOWN


class WrongKeyError(TyronZilError):
    """Raised when a private key does not derive the expected address."""
    error_code = ErrorCode.WRONG_KEY

    def __init__(self, role: str, expected: str, actual: str):
        self.role = role
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"The {role} private key derives {actual}, expected {expected}"
        )


class InsufficientBalanceError(TyronZilError):
    """Raised when an account balance is below the required threshold."""
    error_code = ErrorCode.NOT_ENOUGH_BALANCE

    def __init__(self, role: str, balance: int, required: int):
        self.role = role
        self.balance = balance
        self.required = required
        super().__init__(
            f"The {role}'s balance must be at least {required / 10**12} ZIL"
            f" - Current balance: {balance / 10**12} ZIL"
        )


class NetworkError(TyronZilError):
    """Raised when the JSON-RPC endpoint cannot be reached."""
    error_code = ErrorCode.NETWORK_ERROR


class RPCError(TyronZilError):
    """Raised when the JSON-RPC endpoint returns an error object."""
    error_code = ErrorCode.RPC_ERROR

    def __init__(self, message: str, code: Optional[int] = None, method: Optional[str] = None):
        self.code = code
        self.method = method
        super().__init__(message)


class ConfirmationTimeoutError(TyronZilError):
    """Raised when a transaction is not confirmed within the polling budget."""
    error_code = ErrorCode.CONFIRMATION_TIMEOUT

    def __init__(self, tx_id: str, attempts: int):
        self.tx_id = tx_id
        self.attempts = attempts
        super().__init__(
            f"The transaction {tx_id} is still not confirmed after {attempts} attempts"
        )


class TransactionRejectedError(TyronZilError):
    """Raised when a transaction receipt reports failure."""
    error_code = ErrorCode.TRANSACTION_REJECTED


class SigningError(TyronZilError):
    """Raised when a signer fails to sign a transaction."""
    error_code = ErrorCode.SIGNING_ERROR


class ContractCodeError(TyronZilError):
    """Raised when contract source cannot be fetched or decoded."""
    error_code = ErrorCode.CONTRACT_CODE_ERROR


class DidResolutionError(TyronZilError):
    """Raised when a DID cannot be resolved into its contract state."""
    error_code = ErrorCode.DID_RESOLUTION_ERROR
