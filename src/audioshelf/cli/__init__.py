# ABOUTME: CLI package for audioshelf, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.logging import RichHandler

from audioshelf.cli.commands import (
    add_cmd,
    info_cmd,
    inspect_cmd,
    ls_cmd,
    rate_cmd,
    rm_cmd,
    select_cmd,
)


@click.group()
@click.version_option(package_name="audioshelf")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log engine activity.")
def cli(verbose: bool) -> None:
    """audioshelf - a CLI-first audiobook library manager."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


cli.add_command(add_cmd.add)
cli.add_command(ls_cmd.ls)
cli.add_command(info_cmd.info)
cli.add_command(select_cmd.select)
cli.add_command(rate_cmd.rate)
cli.add_command(rm_cmd.rm)
cli.add_command(rm_cmd.clear)
cli.add_command(inspect_cmd.inspect)
