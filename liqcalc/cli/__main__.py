"""liq-calc CLI - Command-line interface for payroll liquidation."""

import logging

import click

from liqcalc import __version__

from .liquidation_commands import liquidate, book
from .params_commands import params as params_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="liq-calc")
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline details to stderr.")
def cli(verbose):
    """liq-calc - Chilean monthly payroll liquidation.

    Legal parameters are loaded from (in order, per year):

    \b
    1. LIQ_CALC_PARAMETERS_PATH environment variable
    2. settings.json 'parameters_dir' key (set via 'settings parameters-dir')
    3. Parameter files bundled with the package

    Run 'liq-calc params list' to see the covered periods.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


cli.add_command(liquidate)
cli.add_command(book)
cli.add_command(params_group)
cli.add_command(settings_group)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
