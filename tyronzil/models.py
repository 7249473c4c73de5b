"""
Data models for the tyronzil client.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tyronzil.config import TYRON_STAKE_QA, USER_INIT_COST_QA
from tyronzil.exceptions import ErrorCode


class TransitionParam(BaseModel):
    """A named, typed parameter of a contract transition"""
    vname: str
    type: str
    value: Any


class Transition(BaseModel):
    """Payload carried in the data field of a transition call"""
    tag: str = Field(..., alias="_tag")
    amount: str = Field(..., alias="_amount")
    sender: str = Field(..., alias="_sender")
    params: List[TransitionParam]

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """Wire shape, keys in dispatcher order."""
        return self.model_dump(by_alias=True)


class ContractInit(BaseModel):
    """
    Parameters recorded for a tyron-smart-contract and its accounts.

    ``tyron_init`` and ``contract_owner`` are only needed to deploy.
    """
    client_addr: str
    tyron_init: Optional[str] = None
    contract_owner: Optional[str] = None
    tyron_stake: int = TYRON_STAKE_QA
    user_init_cost: int = USER_INIT_COST_QA


class GasParameters(BaseModel):
    """Gas price (Qa) and gas limit, fixed for one session"""
    price: int
    limit: int

    model_config = ConfigDict(frozen=True)


class TxObject(BaseModel):
    """Unsigned Zilliqa transaction"""
    version: int
    nonce: int
    to_addr: str
    amount: int
    pub_key: str
    gas_price: int
    gas_limit: int
    code: str = ""
    data: str = ""
    priority: bool = False

    model_config = ConfigDict(frozen=True)


class TxReceipt(BaseModel):
    """Receipt of a confirmed Zilliqa transaction"""
    success: bool
    cumulative_gas: int = 0
    epoch_num: Optional[int] = None
    event_logs: List[Dict[str, Any]] = Field(default_factory=list)
    errors: Optional[Dict[str, Any]] = None
    exceptions: Optional[List[Dict[str, Any]]] = None


@dataclass
class TransactionOutcome:
    """
    Structured result of a submitted transaction.

    ``stage`` names the pipeline step that failed, and ``error_code`` the
    failure kind, so callers and tests never have to read log output.
    """
    success: bool
    tag: str
    tx_id: Optional[str] = None
    confirmed: bool = False
    gas_used: int = 0
    stage: Optional[str] = None
    error: str = ""
    error_code: ErrorCode = ErrorCode.UNKNOWN
    result: Dict[str, Any] = field(default_factory=dict)
    receipt: Optional[TxReceipt] = None

    @classmethod
    def failure(cls, tag: str, stage: str, error: Exception, tx_id: Optional[str] = None) -> "TransactionOutcome":
        return cls(
            success=False,
            tag=tag,
            tx_id=tx_id,
            stage=stage,
            error=str(error),
            error_code=getattr(error, "error_code", ErrorCode.UNKNOWN),
        )


@dataclass
class DeploymentOutcome:
    """Result of deploying and initializing a tyron-smart-contract"""
    deploy: TransactionOutcome
    init: Optional[TransactionOutcome] = None
    contract_address: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.deploy.success and self.init is not None and self.init.success

    @property
    def gas_used(self) -> int:
        return self.deploy.gas_used + (self.init.gas_used if self.init else 0)
