"""Settings CLI commands for liq-calc.

Manages settings.json - legal parameter directory, preferences.
"""

import click
from pathlib import Path

from liqcalc.sdk import (
    load_settings,
    clear_setting,
    get_setting,
    set_setting,
    get_settings_path,
    get_parameters_dir,
)
from liqcalc.sdk.parameters import get_bundled_rules_dir


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - parameters_dir: directory with custom legal parameter files
    """
    pass


def _effective_parameters_dir() -> str:
    custom = get_parameters_dir()
    if custom:
        return f"{custom} (then bundled: {get_bundled_rules_dir()})"
    return f"{get_bundled_rules_dir()} (bundled)"


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    click.echo(f"  parameters_dir: {_effective_parameters_dir()}")


@settings.command("parameters-dir")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom parameters_dir, use bundled files only")
def settings_parameters_dir(path, clear):
    """Set or clear the custom legal parameter directory.

    PATH holds {year}.yaml files; a year found there replaces the bundled
    file for that year.

    Examples:
        liq-calc settings parameters-dir ~/payroll/parameters
        liq-calc settings parameters-dir --clear
    """
    if clear:
        if clear_setting("parameters_dir"):
            click.echo("Cleared parameters_dir setting.")
        else:
            click.echo("parameters_dir was not set.")
        return

    if not path:
        configured = get_setting("parameters_dir")
        if configured:
            click.echo(f"Current parameters_dir: {configured}")
        else:
            click.echo(f"No custom parameters_dir set. Using bundled: {get_bundled_rules_dir()}")
        return

    params_path = Path(path).expanduser().resolve()
    if not params_path.is_dir():
        raise click.ClickException(f"Not a directory: {params_path}")

    set_setting("parameters_dir", str(params_path))
    click.echo(f"Set parameters_dir: {params_path}")
    click.echo(f"Saved to: {get_settings_path()}")
