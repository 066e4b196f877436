"""Instance information command."""

import click

from ..client import Connection, V1
from .common import console, load_instance, report_failure


@click.command()
@click.option("--hostname", "-H", help="Instance hostname (default: MASTO_HOSTNAME)")
@click.option("--nodeinfo", is_flag=True, help="Also show the NodeInfo document")
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON")
def instance(hostname: str | None, nodeinfo: bool, as_json: bool):
    """Show information about an instance."""
    inst = load_instance(hostname)
    connection = Connection(inst)

    try:
        answer = connection.get(V1.INSTANCE)
        if not answer:
            report_failure(answer)
            raise click.Abort()

        if as_json:
            click.echo(answer.body)
        else:
            console.print(f"[bold]Instance:[/bold] {inst.hostname}")
            console.print(f"[bold]Max characters:[/bold] {inst.get_max_chars()}")
            console.print(f"[bold]Post formats:[/bold] {', '.join(inst.get_post_formats())}")

        if nodeinfo:
            answer = inst.get_nodeinfo()
            if not answer:
                report_failure(answer)
                raise click.Abort()
            click.echo(answer.body)

    finally:
        connection.close()
        inst.close()
