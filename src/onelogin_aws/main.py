"""onelogin-aws CLI entry point.

Generates temporary AWS credentials with OneLogin SAML and writes them to
~/.aws/credentials (and the region to ~/.aws/config).
"""

from __future__ import annotations

import logging

import typer

from onelogin_aws.commands.init_cmd import configure, init
from onelogin_aws.commands.login_cmd import login
from onelogin_aws.commands.token_cmd import app as token_app

app = typer.Typer(
    name="onelogin-aws",
    help="Generate AWS credentials with OneLogin SAML.",
    no_args_is_help=True,
)

app.command("init")(init)
app.command("configure")(configure)
app.command("login")(login)
app.add_typer(token_app, name="token")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """onelogin-aws: log in to AWS through OneLogin."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
