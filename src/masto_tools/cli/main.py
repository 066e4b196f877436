"""The ``masto`` command.

Settings come from ``MASTO_*`` environment variables; a ``.env`` file in the
working directory is read first.
"""

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from masto_tools import __version__
from masto_tools.client.config import MastoConfig

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="masto")
@click.option("--verbose", "-v", is_flag=True, help="Log requests and responses (DEBUG)")
def cli(verbose: bool):
    """Talk to Mastodon, Pleroma and Akkoma instances."""
    level = "DEBUG" if verbose else MastoConfig().log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)


def setup_cli():
    """Attach the instance, post, stream and token commands to the group."""
    from .instance import instance
    from .post import post
    from .stream import stream
    from .token import token

    for command in (instance, post, stream, token):
        cli.add_command(command)


setup_cli()


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
