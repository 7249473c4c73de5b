"""
Entry point of the tyronzil command-line interface.
"""
import logging

import typer

from tyronzil_cli.did_commands import app as did_app

app = typer.Typer(
    name="tyronzil",
    help="Decentralized identity client for the Zilliqa blockchain platform",
    no_args_is_help=True,
    add_help_option=False,
)
app.add_typer(did_app, name="did")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
