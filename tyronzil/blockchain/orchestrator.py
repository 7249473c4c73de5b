"""
TyronTransaction - orchestrates tyronZIL transactions.

A session validates the client (and optionally the user) account, fixes the
gas parameters, and then submits DID operations to a tyron-smart-contract:

1. Read the minimum gas price from the network
2. Check that each private key derives the expected address
3. Check that each account holds enough funds
4. Build, sign and broadcast the transaction
5. Poll for the receipt and report the gas consumed
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from tyronzil.blockchain import contract_code
from tyronzil.blockchain.api import NetworkClient, ZilliqaAPI
from tyronzil.blockchain.transaction import NIL_ADDRESS, LocalSigner, Signer, confirm, sign_transaction
from tyronzil.blockchain.transitions import TransitionTag
from tyronzil.config import CONFIRM_ATTEMPTS, CONFIRM_INTERVAL_MS
from tyronzil.crypto.keys import addresses_match, to_checksum_address
from tyronzil.exceptions import (
    DidResolutionError, InsufficientBalanceError, RPCError, SigningError,
    TransactionRejectedError, TyronZilError, WrongKeyError
)
from tyronzil.models import (
    ContractInit, DeploymentOutcome, GasParameters, Transition, TransitionParam,
    TransactionOutcome, TxObject
)
from tyronzil.utils import compact_json, qa_to_zil


CodeResolver = Callable[[NetworkClient, str, str], str]

DEPLOY_TAG = "Deploy"
CONTRACT_INIT_TAG = "ContractInit"


@dataclass
class AccountState:
    """
    A signer with the balance and nonce read at session start.

    The nonce is never re-read from the chain. Transactions are built with
    ``next_nonce`` and the nonce only advances once the node accepts one.
    """
    role: str
    signer: Signer
    balance: int
    nonce: int

    @property
    def address(self) -> str:
        return self.signer.address

    @property
    def next_nonce(self) -> int:
        return self.nonce + 1


def _as_signer(key: Union[str, Signer]) -> Signer:
    return LocalSigner(key) if isinstance(key, str) else key


class TyronTransaction:
    """
    Session for submitting tyronZIL transactions.

    Use ``TyronTransaction.initialize`` to create one; it raises if an
    account has the wrong key or too little balance. ``deploy`` and
    ``submit`` never raise for network or chain failures: they return an
    outcome naming the failed stage.
    """

    def __init__(
        self,
        api: NetworkClient,
        init: ContractInit,
        gas: GasParameters,
        client: AccountState,
        user: Optional[AccountState] = None,
        code_resolver: CodeResolver = contract_code.decode,
        confirm_attempts: int = CONFIRM_ATTEMPTS,
        confirm_interval_ms: int = CONFIRM_INTERVAL_MS,
        logger: Optional[logging.Logger] = None
    ):
        self.api = api
        self.init = init
        self.gas = gas
        self.client = client
        self.user = user
        self.code_resolver = code_resolver
        self.confirm_attempts = confirm_attempts
        self.confirm_interval_ms = confirm_interval_ms
        self.logger = logger or logging.getLogger(__name__)

    @property
    def version(self) -> int:
        return self.api.version

    @classmethod
    def initialize(
        cls,
        network: str,
        init: ContractInit,
        client_key: Union[str, Signer],
        gas_limit: int,
        user_key: Optional[Union[str, Signer]] = None,
        api: Optional[NetworkClient] = None,
        **kwargs
    ) -> "TyronTransaction":
        """
        Validate the accounts and create a session.

        Args:
            network: Network name, used when no api is given
            init: Contract parameters holding the expected addresses
            client_key: Client private key (hex) or signer
            gas_limit: Gas limit for every transaction of the session
            user_key: Optional user private key (hex) or signer, needed to deploy
            api: Network client; defaults to ZilliqaAPI for the network
            **kwargs: Passed through to the constructor

        Returns:
            A validated TyronTransaction

        Raises:
            WrongKeyError: If a key doesn't derive the expected address
            InsufficientBalanceError: If an account is below its threshold
            NetworkError: If the network cannot be reached
            RPCError: If the node rejects a request
        """
        if api is None:
            api = ZilliqaAPI.from_network(network)
        log = kwargs.get("logger") or logging.getLogger(__name__)

        # 1. Gas parameters
        gas_price = api.get_minimum_gas_price()
        log.info(f"The minimum gas price retrieved from the network is: {qa_to_zil(gas_price)} ZIL")
        gas = GasParameters(price=gas_price, limit=gas_limit)

        # 2. Client account
        client = cls._validate_account(
            api, "client", _as_signer(client_key), init.client_addr, init.tyron_stake, log
        )

        # 3. User account, when the session deploys a contract
        user = None
        if user_key is not None:
            user = cls._validate_account(
                api, "user", _as_signer(user_key), init.contract_owner, init.user_init_cost, log
            )

        return cls(api=api, init=init, gas=gas, client=client, user=user, **kwargs)

    @staticmethod
    def _validate_account(
        api: NetworkClient,
        role: str,
        signer: Signer,
        expected_address: str,
        min_balance: int,
        log: logging.Logger
    ) -> AccountState:
        if not addresses_match(signer.address, expected_address):
            raise WrongKeyError(role, expected_address, signer.address)

        balance, nonce = api.get_balance(signer.address)
        if balance < min_balance:
            raise InsufficientBalanceError(role, balance, min_balance)

        log.info(f"The {role}'s balance is {qa_to_zil(balance)} ZIL with nonce {nonce}")
        return AccountState(role=role, signer=signer, balance=balance, nonce=nonce)

    def deploy(self, version: str) -> DeploymentOutcome:
        """
        Deploy a tyron-smart-contract and call its ContractInit transition.

        The user account pays for both transactions. If the deployment
        succeeds but ContractInit fails, the outcome carries the deployed
        address with an unsuccessful ``init`` and nothing is rolled back.

        Args:
            version: Contract version tag known to the tyron init contract

        Returns:
            DeploymentOutcome

        Raises:
            ValueError: If the session has no user account or deploy parameters
        """
        if self.user is None:
            raise ValueError("Deploying a tyron-smart-contract requires the user's private key")
        if not self.init.tyron_init or not self.init.contract_owner:
            raise ValueError("Deploying a tyron-smart-contract requires tyron_init and contract_owner")

        self.logger.info(f"Deploying tyron-smart-contract version {version}...")
        try:
            code = self.code_resolver(self.api, self.init.tyron_init, version)
        except TyronZilError as e:
            self.logger.error(f"Failed to resolve contract code: {e}")
            return DeploymentOutcome(deploy=TransactionOutcome.failure(DEPLOY_TAG, "code", e))

        init_params = [
            TransitionParam(vname="_scilla_version", type="Uint32", value="0"),
            TransitionParam(vname="tyron_init", type="ByStr20", value=self.init.tyron_init),
            TransitionParam(vname="contract_owner", type="ByStr20", value=self.init.contract_owner),
        ]
        tx = TxObject(
            version=self.version,
            nonce=self.user.next_nonce,
            to_addr=NIL_ADDRESS,
            amount=0,
            pub_key=self.user.signer.public_key,
            gas_price=self.gas.price,
            gas_limit=self.gas.limit,
            code=code,
            data=compact_json([p.model_dump() for p in init_params]),
        )
        deployed = self._send(self.user, tx, DEPLOY_TAG)
        outcome = DeploymentOutcome(deploy=deployed)
        self.logger.info(f"Your tyron-smart-contract is deployed: {deployed.confirmed}")
        if not deployed.success:
            return outcome

        address = deployed.result.get("ContractAddress")
        if not address:
            error = RPCError("CreateTransaction returned no ContractAddress", method="CreateTransaction")
            self.logger.error(str(error))
            outcome.deploy = TransactionOutcome.failure(DEPLOY_TAG, "broadcast", error, tx_id=deployed.tx_id)
            return outcome
        outcome.contract_address = to_checksum_address(address)
        self.logger.info(f"Its Zilliqa address is: {outcome.contract_address}")
        self.logger.info(f"The total gas consumed by deploying your tyron-smart-contract was: {deployed.gas_used}")

        self.logger.info("Calling the ContractInit transition...")
        call = {
            "_tag": CONTRACT_INIT_TAG,
            "params": [
                TransitionParam(vname="clientAddress", type="String", value=self.init.client_addr).model_dump()
            ],
        }
        tx = TxObject(
            version=self.version,
            nonce=self.user.next_nonce,
            to_addr=outcome.contract_address,
            amount=0,
            pub_key=self.user.signer.public_key,
            gas_price=self.gas.price,
            gas_limit=self.gas.limit,
            data=compact_json(call),
        )
        outcome.init = self._send(self.user, tx, CONTRACT_INIT_TAG)
        self.logger.info(f"Your tyron-smart-contract is initialized: {outcome.init.confirmed}")
        self.logger.info(f"The total gas consumed by the ContractInit transition was: {outcome.init.gas_used}")
        return outcome

    def submit(
        self,
        contract_address: str,
        tag: Union[TransitionTag, str],
        params: List[TransitionParam]
    ) -> TransactionOutcome:
        """
        Submit a DID operation to a tyron-smart-contract.

        Args:
            contract_address: Address of the user's tyron-smart-contract
            tag: Transition to invoke
            params: Transition parameters, in the order the transition expects

        Returns:
            TransactionOutcome; never raises for network or chain failures
        """
        tag = tag.value if isinstance(tag, TransitionTag) else str(tag)
        self.logger.info(f"Processing your {tag} tyronZIL transaction...")

        # 1. Operation cost, read right before submission
        try:
            amount = self._operation_cost(contract_address)
        except TyronZilError as e:
            self.logger.error(f"Failed to read the operation cost: {e}")
            return TransactionOutcome.failure(tag, "operation_cost", e)

        # 2. Transaction envelope
        transition = Transition(
            tag=tag,
            amount=str(amount),
            sender=self.init.client_addr,
            params=params,
        )
        tx = TxObject(
            version=self.version,
            nonce=self.client.next_nonce,
            to_addr=contract_address,
            amount=amount,
            pub_key=self.client.signer.public_key,
            gas_price=self.gas.price,
            gas_limit=self.gas.limit,
            data=compact_json(transition.to_payload()),
        )

        # 3. Sign, broadcast and confirm
        outcome = self._send(self.client, tx, tag)
        if outcome.success:
            self.logger.info(f"The {tag} tyronZIL transaction has been successful!")
        else:
            self.logger.warning(f"The {tag} tyronZIL transaction has been unsuccessful!")
        self.logger.info(f"The total gas consumed in this {tag} transaction was: {outcome.gas_used}")
        return outcome

    def _operation_cost(self, contract_address: str) -> int:
        state = self.api.get_smart_contract_state(contract_address)
        cost = state.get("operation_cost") if isinstance(state, dict) else None
        if cost is None:
            raise DidResolutionError(f"The contract {contract_address} has no operation_cost field")
        try:
            return int(cost)
        except (TypeError, ValueError) as e:
            raise DidResolutionError(
                f"The operation_cost of {contract_address} is not an amount: {cost!r}"
            ) from e

    def _send(self, account: AccountState, tx: TxObject, tag: str) -> TransactionOutcome:
        """Sign, broadcast and confirm one transaction."""
        stage = "sign"
        tx_id = None
        try:
            try:
                tx_params = sign_transaction(tx, account.signer)
            except Exception as e:
                raise SigningError(f"Failed to sign transaction: {e}") from e

            stage = "broadcast"
            result = self.api.create_transaction(tx_params)
            self.logger.info(f"The transaction result is: {result}")
            tx_id = result.get("TranID")
            if not tx_id:
                raise RPCError(f"CreateTransaction returned no TranID: {result}", method="CreateTransaction")
            account.nonce = tx.nonce

            stage = "confirm"
            receipt = confirm(self.api, tx_id, self.confirm_attempts, self.confirm_interval_ms)
        except TyronZilError as e:
            self.logger.info("The transaction is confirmed: False")
            self.logger.error(f"The {tag} transaction failed at stage {stage}: {e}")
            return TransactionOutcome.failure(tag, stage, e, tx_id=tx_id)

        self.logger.info(f"The transaction is confirmed: {receipt.success}")
        outcome = TransactionOutcome(
            success=receipt.success,
            tag=tag,
            tx_id=tx_id,
            confirmed=receipt.success,
            gas_used=receipt.cumulative_gas,
            result=result,
            receipt=receipt,
        )
        if not receipt.success:
            error = TransactionRejectedError(f"The {tag} transaction was rejected: {receipt.errors}")
            outcome.stage = "receipt"
            outcome.error = str(error)
            outcome.error_code = error.error_code
        return outcome
