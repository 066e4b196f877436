"""Streaming command."""

import threading
import time

import click
from rich.markup import escape

from ..client import Connection, V1
from .common import console, load_instance, report_failure

TIMELINES = {
    "public": V1.STREAMING_PUBLIC,
    "local": V1.STREAMING_PUBLIC_LOCAL,
    "remote": V1.STREAMING_PUBLIC_REMOTE,
    "user": V1.STREAMING_USER,
    "hashtag": V1.STREAMING_HASHTAG,
    "list": V1.STREAMING_LIST,
    "direct": V1.STREAMING_DIRECT,
}

# Cancellation takes effect when the next chunk (at worst a heartbeat) arrives.
CANCEL_GRACE_SECONDS = 30.0


@click.command()
@click.argument("timeline", type=click.Choice(list(TIMELINES)), default="public")
@click.option("--hostname", "-H", help="Instance hostname (default: MASTO_HOSTNAME)")
@click.option("--tag", help="Hashtag for the hashtag timeline")
@click.option("--list-id", help="List ID for the list timeline")
@click.option("--duration", "-d", default=10.0, help="Seconds to stream")
@click.option("--interval", "-i", default=2.0, help="Seconds between printing new events")
def stream(
    timeline: str,
    hostname: str | None,
    tag: str | None,
    list_id: str | None,
    duration: float,
    interval: float,
):
    """Print events from a streaming timeline."""
    parameters = {}
    if timeline == "hashtag":
        if not tag:
            raise click.UsageError("--tag is required for the hashtag timeline")
        parameters["tag"] = tag
    elif timeline == "list":
        if not list_id:
            raise click.UsageError("--list-id is required for the list timeline")
        parameters["list"] = list_id

    inst = load_instance(hostname)
    connection = Connection(inst)

    try:
        # Find out if the streaming service is fine.
        answer = connection.get(V1.STREAMING_HEALTH)
        if not answer or answer.body != "OK":
            report_failure(answer)
            raise click.Abort()

        result = {}

        def run():
            result["answer"] = connection.get(TIMELINES[timeline], parameters)

        thread = threading.Thread(target=run, daemon=True)
        thread.start()

        deadline = time.monotonic() + duration
        while time.monotonic() < deadline and thread.is_alive():
            time.sleep(interval)
            for event in connection.drain_events():
                console.print(f"[cyan]{event.type}[/cyan]: {escape(event.data[:70])} …")

        connection.cancel_stream()
        thread.join(CANCEL_GRACE_SECONDS)

        answer = result.get("answer")
        if answer is not None and not answer and answer.transport_error_code:
            report_failure(answer)

    finally:
        connection.close()
        inst.close()
