"""
tyronzil did <subcommand>: DID operations on the Zilliqa blockchain.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import typer

from tyronzil.blockchain import TyronTransaction, ZilliqaAPI, transitions
from tyronzil.blockchain.transitions import TransitionTag
from tyronzil.config import DEFAULT_GAS_LIMIT, NetworkConfig
from tyronzil.did import (
    KeyStore, OperationKey, TyronZilScheme, build_document, network_for_namespace,
    parse_services, resolve, serialize_document
)
from tyronzil.exceptions import TyronZilError
from tyronzil.models import ContractInit, TransactionOutcome

from tyronzil_cli import presenter

app = typer.Typer(
    name="did", help="Execute a tyronZIL DID operation", no_args_is_help=True, add_help_option=False
)

DEFAULT_CONTRACT_VERSION = "0.4"

NetworkOption = typer.Option("testnet", "--network", "-n", prompt="Network (mainnet, testnet, isolated)")
ClientKeyOption = typer.Option(..., "--client-key", prompt="Client private key", hide_input=True)
ClientAddressOption = typer.Option(..., "--client-address", prompt="Client address")
GasLimitOption = typer.Option(DEFAULT_GAS_LIMIT, "--gas-limit", prompt="Gas limit")
ServiceOption = typer.Option(None, "--service", "-s", help="Service as id=type=endpoint, repeatable")
KeyStoreOption = typer.Option(None, "--key-store", help="Path of the local key store")
DidOption = typer.Option(..., "--did", prompt="DID")


def _fail(message: str) -> None:
    presenter.error(message)
    raise typer.Exit(1)


def _api(network: str) -> ZilliqaAPI:
    try:
        return ZilliqaAPI.from_network(network)
    except ValueError as e:
        _fail(str(e))


def _session(network: str, api: ZilliqaAPI, init: ContractInit, client_key: str, gas_limit: int,
             user_key: Optional[str] = None) -> TyronTransaction:
    try:
        return TyronTransaction.initialize(network, init, client_key, gas_limit, user_key=user_key, api=api)
    except (TyronZilError, ValueError) as e:
        _fail(f"Failed to initialize the transaction: {e}")


def _stored_entry(store: KeyStore, did: str) -> Dict[str, Any]:
    entry = store.get(did)
    if entry is None:
        _fail(f"No operation keys found for {did} in {store.store_path}")
    if entry.get("status") == "deactivated":
        _fail(f"{did} is deactivated")
    return entry


def _network_of(did: str) -> str:
    try:
        return network_for_namespace(TyronZilScheme.parse(did).namespace)
    except ValueError as e:
        _fail(str(e))


def _services(values: List[str]) -> List[Dict[str, Any]]:
    try:
        return parse_services(values)
    except ValueError as e:
        _fail(str(e))


def _finish(outcome: TransactionOutcome) -> None:
    presenter.report_transaction(outcome)
    if not outcome.success:
        raise typer.Exit(1)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.command("create", add_help_option=False)
def create_command(
    network: str = NetworkOption,
    client_key: str = ClientKeyOption,
    client_address: str = ClientAddressOption,
    user_key: str = typer.Option(..., "--user-key", prompt="User private key", hide_input=True),
    user_address: str = typer.Option(..., "--user-address", prompt="User address"),
    gas_limit: int = GasLimitOption,
    contract_version: str = typer.Option(DEFAULT_CONTRACT_VERSION, "--contract-version", prompt="Contract version"),
    tyron_init: Optional[str] = typer.Option(None, "--tyron-init", help="Address of the tyron init contract"),
    service: Optional[List[str]] = ServiceOption,
    key_store: Optional[str] = KeyStoreOption,
) -> None:
    """Create a unique digital identity did:tyron:zil."""
    services = _services(service or [])
    with _api(network) as api:
        tyron_init = tyron_init or NetworkConfig.get_tyron_init(network) or typer.prompt("Tyron init contract address")
        init = ContractInit(tyron_init=tyron_init, contract_owner=user_address, client_addr=client_address)
        session = _session(network, api, init, client_key, gas_limit, user_key=user_key)

        # 1. Deploy and initialize the user's tyron-smart-contract
        deployment = session.deploy(contract_version)
        presenter.report_deployment(deployment)
        if not deployment.success:
            raise typer.Exit(1)

        # 2. Operation keys and DID document
        did = TyronZilScheme.new(network, deployment.contract_address).did
        signing_key = OperationKey.generate()
        update_key = OperationKey.generate()
        recovery_key = OperationKey.generate()
        document = serialize_document(build_document(did, signing_key, services))

        # 3. DidCreate transition
        params = transitions.create(did, document, update_key.commitment, recovery_key.commitment)
        outcome = session.submit(deployment.contract_address, TransitionTag.CREATE, params)

    if outcome.success:
        KeyStore(key_store).save(did, {
            "did": did,
            "network": network,
            "contract_address": deployment.contract_address,
            "contract_owner": user_address,
            "signing_key": signing_key.private_jwk,
            "update_key": update_key.private_jwk,
            "recovery_key": recovery_key.private_jwk,
            "status": "created",
            "updated_at": _now(),
        })
        presenter.info(f"Your DID is: {did}")
    _finish(outcome)


@app.command("resolve", add_help_option=False)
def resolve_command(did: str = DidOption) -> None:
    """Resolve the given DID into its DID document."""
    network = _network_of(did)
    with _api(network) as api:
        try:
            state = resolve(api, did)
        except TyronZilError as e:
            _fail(f"Failed to resolve {did}: {e}")
    presenter.report_resolution(state)


@app.command("update", add_help_option=False)
def update_command(
    did: str = DidOption,
    client_key: str = ClientKeyOption,
    client_address: str = ClientAddressOption,
    gas_limit: int = GasLimitOption,
    service: Optional[List[str]] = ServiceOption,
    key_store: Optional[str] = KeyStoreOption,
) -> None:
    """Update the DID document and rotate the update key."""
    store = KeyStore(key_store)
    entry = _stored_entry(store, did)
    network = _network_of(did)
    services = _services(service or [])

    update_key = OperationKey.from_jwk(entry["update_key"])
    signing_key = OperationKey.generate()
    new_update_key = OperationKey.generate()
    document = serialize_document(build_document(did, signing_key, services))
    params = transitions.update(update_key.reveal_value, document, new_update_key.commitment)

    with _api(network) as api:
        session = _session(network, api, ContractInit(client_addr=client_address), client_key, gas_limit)
        outcome = session.submit(entry["contract_address"], TransitionTag.UPDATE, params)

    if outcome.success:
        entry.update(
            signing_key=signing_key.private_jwk,
            update_key=new_update_key.private_jwk,
            status="updated",
            updated_at=_now(),
        )
        store.save(did, entry)
    _finish(outcome)


@app.command("recover", add_help_option=False)
def recover_command(
    did: str = DidOption,
    client_key: str = ClientKeyOption,
    client_address: str = ClientAddressOption,
    gas_limit: int = GasLimitOption,
    service: Optional[List[str]] = ServiceOption,
    key_store: Optional[str] = KeyStoreOption,
) -> None:
    """Recover the DID and create new keys."""
    store = KeyStore(key_store)
    entry = _stored_entry(store, did)
    network = _network_of(did)
    services = _services(service or [])

    recovery_key = OperationKey.from_jwk(entry["recovery_key"])
    signing_key = OperationKey.generate()
    new_update_key = OperationKey.generate()
    new_recovery_key = OperationKey.generate()
    document = serialize_document(build_document(did, signing_key, services))
    params = transitions.recover(
        recovery_key.reveal_value, document, new_update_key.commitment, new_recovery_key.commitment
    )

    with _api(network) as api:
        session = _session(network, api, ContractInit(client_addr=client_address), client_key, gas_limit)
        outcome = session.submit(entry["contract_address"], TransitionTag.RECOVER, params)

    if outcome.success:
        entry.update(
            signing_key=signing_key.private_jwk,
            update_key=new_update_key.private_jwk,
            recovery_key=new_recovery_key.private_jwk,
            status="recovered",
            updated_at=_now(),
        )
        store.save(did, entry)
    _finish(outcome)


@app.command("deactivate", add_help_option=False)
def deactivate_command(
    did: str = DidOption,
    client_key: str = ClientKeyOption,
    client_address: str = ClientAddressOption,
    gas_limit: int = GasLimitOption,
    key_store: Optional[str] = KeyStoreOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Deactivate the DID permanently."""
    store = KeyStore(key_store)
    entry = _stored_entry(store, did)
    network = _network_of(did)
    if not yes:
        typer.confirm(f"Deactivating {did} cannot be undone. Continue?", abort=True)

    recovery_key = OperationKey.from_jwk(entry["recovery_key"])
    params = transitions.deactivate(recovery_key.reveal_value)

    with _api(network) as api:
        session = _session(network, api, ContractInit(client_addr=client_address), client_key, gas_limit)
        outcome = session.submit(entry["contract_address"], TransitionTag.DEACTIVATE, params)

    if outcome.success:
        entry.update(status="deactivated", updated_at=_now())
        store.save(did, entry)
    _finish(outcome)
