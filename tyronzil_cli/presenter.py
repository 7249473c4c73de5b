"""
Console reporting of tyronzil outcomes.
"""
import json
import os
import sys
from typing import Any, Optional

import typer

from tyronzil.did.resolver import DidState
from tyronzil.models import DeploymentOutcome, TransactionOutcome


def should_use_color() -> bool:
    """
    Determine if color output should be used.

    Honors NO_COLOR (https://no-color.org) and only colors terminals.
    """
    if os.environ.get("NO_COLOR") is not None:
        return False
    return sys.stdout.isatty()


def _emit(label: str, value: Any = None, value_color: str = typer.colors.BRIGHT_YELLOW) -> None:
    color = should_use_color()
    text = typer.style(label, fg=typer.colors.YELLOW)
    if value is not None:
        text += typer.style(f"{value}", fg=value_color)
    typer.echo(text, color=color)


def info(message: str) -> None:
    typer.echo(typer.style(message, fg=typer.colors.BRIGHT_GREEN), color=should_use_color())


def error(message: str) -> None:
    typer.echo(typer.style(message, fg=typer.colors.RED), err=True, color=should_use_color())


def report_transaction(outcome: TransactionOutcome, name: Optional[str] = None) -> None:
    """Print the result of a submitted transaction."""
    name = name or outcome.tag
    if outcome.tx_id:
        _emit("Transaction ID: ", outcome.tx_id)
    _emit("The transaction is confirmed: ", outcome.confirmed)
    if outcome.success:
        info(f"The {name} tyronZIL transaction has been successful!")
    else:
        error(f"The {name} tyronZIL transaction has been unsuccessful!")
        if outcome.error:
            error(f"Failed at stage '{outcome.stage}' ({outcome.error_code.value}): {outcome.error}")
    _emit(f"The total gas consumed in this {name} transaction was: ", outcome.gas_used)


def report_deployment(outcome: DeploymentOutcome) -> None:
    """Print the result of deploying and initializing a tyron-smart-contract."""
    _emit("Your tyron-smart-contract is deployed: ", outcome.deploy.confirmed)
    if outcome.contract_address:
        _emit("Its Zilliqa address is: ", outcome.contract_address, typer.colors.BRIGHT_GREEN)
    if outcome.deploy.tx_id:
        _emit("Deployment Transaction ID: ", outcome.deploy.tx_id)
    _emit("The total gas consumed by deploying your tyron-smart-contract was: ", outcome.deploy.gas_used)
    if not outcome.deploy.success:
        error(f"Deployment failed at stage '{outcome.deploy.stage}': {outcome.deploy.error}")
        return

    if outcome.init is not None:
        _emit("Your tyron-smart-contract is initialized: ", outcome.init.confirmed)
        _emit("The total gas consumed by the ContractInit transition was: ", outcome.init.gas_used)
        if not outcome.init.success:
            error(f"ContractInit failed at stage '{outcome.init.stage}': {outcome.init.error}")
            error(
                f"The contract at {outcome.contract_address} is deployed but not initialized;"
                " call its ContractInit transition manually"
            )


def report_resolution(state: DidState) -> None:
    """Print a resolved DID and its document."""
    _emit("DID: ", state.did)
    _emit("Contract address: ", state.contract_address, typer.colors.BRIGHT_GREEN)
    _emit("Status: ", state.status)
    if state.operation_cost is not None:
        _emit("Operation cost: ", f"{state.operation_cost / 10**12} ZIL")
    if state.document is not None:
        _emit("DID document:")
        typer.echo(json.dumps(state.document, indent=2))
