"""Access token command."""

import click

from ..client import ObtainToken
from .common import console, load_instance, report_failure


@click.command()
@click.option("--hostname", "-H", help="Instance hostname (default: MASTO_HOSTNAME)")
@click.option("--client-name", default="masto-tools", help="Name of the application")
@click.option("--scopes", default="read", help="Space separated scopes")
@click.option("--website", default="", help="Homepage of the application")
def token(hostname: str | None, client_name: str, scopes: str, website: str):
    """Obtain an access token."""
    inst = load_instance(hostname)
    obtain = ObtainToken(inst)

    try:
        # Create an application and get the URI for the authorization code.
        answer = obtain.register_application(client_name, scopes, website)
        if not answer:
            report_failure(answer)
            raise click.Abort()

        console.print(f"Please visit [link={answer}]{answer}[/link]")
        code = click.prompt("and paste the code here")

        answer = obtain.exchange_code(code.strip())
        if not answer:
            report_failure(answer)
            raise click.Abort()

        console.print(f"Your access token is: [green]{answer}[/green]")

    finally:
        obtain.close()
        inst.close()
