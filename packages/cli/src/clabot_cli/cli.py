"""CLI entry point for clabot.

Commands:
  check    — verify CLA coverage of pull requests and reconcile their labels
  signers  — validate a CLA signers file and look up identities in it
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from clabot_cli.commands.check import check_cmd
from clabot_cli.commands.signers import signers_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("clabot"),
    prog_name="clabot",
)
@click.option(
    "--config",
    "config_path",
    default=".clabot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CLABOT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Enforce Contributor License Agreements on GitHub pull requests."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(check_cmd)
main.add_command(signers_cmd)
