"""Shared helpers for CLI commands."""

import click
from rich.console import Console
from rich.markup import escape

from ..client import Answer, Instance, MastoConfig
from ..client.exceptions import MastoError

console = Console()


def load_instance(hostname: str | None) -> Instance:
    """Create an Instance from the environment, optionally overriding the hostname."""
    config = MastoConfig(hostname=hostname) if hostname else MastoConfig()
    try:
        return Instance.from_config(config)
    except (ValueError, MastoError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise click.Abort()


def report_failure(answer: Answer) -> None:
    """Print why a request failed."""
    if answer.transport_error_code == 0:
        # No transport error, so it must be an HTTP error.
        console.print(f"[red]HTTP status: {answer.http_status}[/red]")
        if answer.error_message:
            console.print(f"[red]{escape(answer.error_message)}[/red]")
    else:
        console.print(
            f"[red]Transport error {answer.transport_error_code}: {escape(answer.error_message)}[/red]"
        )
