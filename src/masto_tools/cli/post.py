"""Post a status."""

import json

import click
from rich.markup import escape

from ..client import Answer, Connection, V1
from ..client.exceptions import MastoError
from .common import console, load_instance, report_failure

VISIBILITIES = ["public", "unlisted", "private", "direct"]


def _accepted(answer: Answer) -> bool:
    # Media uploads may answer 202 while the server is still processing.
    return answer.transport_error_code == 0 and answer.http_status in (200, 202)


@click.command()
@click.argument("status")
@click.option("--hostname", "-H", help="Instance hostname (default: MASTO_HOSTNAME)")
@click.option(
    "--attach", "-a", "attachments", multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="File to attach (repeatable)",
)
@click.option("--description", help="Description for the attachments")
@click.option("--visibility", type=click.Choice(VISIBILITIES), help="Visibility of the status")
@click.option("--spoiler", help="Content warning")
def post(
    status: str,
    hostname: str | None,
    attachments: tuple[str, ...],
    description: str | None,
    visibility: str | None,
    spoiler: str | None,
):
    """Post a status, optionally with attachments."""
    inst = load_instance(hostname)
    connection = Connection(inst)

    try:
        max_chars = inst.get_max_chars()
        if len(status) > max_chars:
            console.print(f"[red]Status is longer than {max_chars} characters.[/red]")
            raise click.Abort()

        media_ids = []
        for path in attachments:
            parameters = {"file": f"@file:{path}"}
            if description:
                parameters["description"] = description
            answer = connection.post(V1.MEDIA, parameters)
            if not _accepted(answer):
                report_failure(answer)
                raise click.Abort()
            media_ids.append(json.loads(answer.body)["id"])
            console.print(f"Attachment has ID: {media_ids[-1]}")

        parameters = {"status": status}
        if media_ids:
            parameters["media_ids"] = media_ids
        if visibility:
            parameters["visibility"] = visibility
        if spoiler:
            parameters["spoiler_text"] = spoiler

        answer = connection.post(V1.STATUSES, parameters)
        if not answer:
            report_failure(answer)
            raise click.Abort()

        url = json.loads(answer.body).get("url", "")
        console.print(f"[green]✓[/green] Posted {url}")

    except MastoError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise click.Abort()

    finally:
        connection.close()
        inst.close()
