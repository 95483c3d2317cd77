"""Legal parameter CLI commands: inspect the periods the engine covers."""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table
from rich import box

from liqcalc.sdk import ParameterFileError, UnknownPeriodError, load_parameter_table
from liqcalc.sdk.money import format_clp


@click.group()
@click.option("--params-dir", type=click.Path(file_okay=False),
              help="Directory with legal parameter files (overrides configured one)")
@click.pass_context
def params(ctx, params_dir: Optional[str]):
    """Inspect legal parameters (rates, ceilings, tax brackets)."""
    try:
        ctx.obj = load_parameter_table(Path(params_dir) if params_dir else None)
    except ParameterFileError as e:
        raise click.ClickException(str(e))


@params.command("list")
@click.pass_obj
def params_list(table):
    """List the periods covered by the parameter table."""
    periods = table.list_periods()
    if not periods:
        click.echo("No legal parameters found.")
        return
    for period in periods:
        click.echo(period)


@params.command("show")
@click.argument("period")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.pass_obj
def params_show(table, period: str, output_format: str):
    """Show the legal parameters for PERIOD (YYYY-MM).

    \b
    Examples:
      liq-calc params show 2025-03
      liq-calc params show 2025-03 --format json
    """
    parts = period.split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise click.BadParameter(f"Invalid period '{period}'. Expected YYYY-MM.")

    try:
        parameter_set = table.resolve(int(parts[0]), int(parts[1]))
    except UnknownPeriodError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(parameter_set.model_dump(mode="json"), indent=2))
        return

    console = Console()
    summary = Table(title=f"Legal parameters {parameter_set.effective_period}",
                    show_header=False, box=box.ROUNDED)
    summary.add_column("key", style="dim")
    summary.add_column("value", justify="right")
    summary.add_row("UF", format_clp(parameter_set.uf_value_clp))
    summary.add_row("UTM", format_clp(parameter_set.utm_value_clp))
    summary.add_row("Ingreso mínimo", format_clp(parameter_set.minimum_wage_clp))
    summary.add_row(
        "Tope imponible",
        f"{parameter_set.contribution_ceiling_uf} UF "
        f"({format_clp(parameter_set.contribution_ceiling_clp)})",
    )
    summary.add_row("Tope gratificación mensual", format_clp(parameter_set.gratification_cap_clp))
    console.print(summary)

    afp = Table(title="AFP", box=box.SIMPLE)
    afp.add_column("Code")
    afp.add_column("Pension", justify="right")
    afp.add_column("Commission", justify="right")
    for code, rate in sorted(parameter_set.afp_rates.items()):
        afp.add_row(code, f"{rate.pension_rate:.2%}", f"{rate.commission_rate:.2%}")
    console.print(afp)

    tax = Table(title="Impuesto único (UTM)", box=box.SIMPLE)
    tax.add_column("From", justify="right")
    tax.add_column("To", justify="right")
    tax.add_column("Rate", justify="right")
    tax.add_column("Rebate", justify="right")
    for bracket in parameter_set.income_tax_brackets:
        upper = "-" if bracket.upper_bound_utm is None else str(bracket.upper_bound_utm)
        tax.add_row(
            str(bracket.lower_bound_utm), upper,
            f"{bracket.marginal_rate:.1%}", str(bracket.rebate_utm),
        )
    console.print(tax)

    family = Table(title="Asignación familiar", box=box.SIMPLE)
    family.add_column("Tramo")
    family.add_column("Income up to", justify="right")
    family.add_column("Per charge", justify="right")
    for tramo in parameter_set.family_allowance_brackets:
        limit = "-" if tramo.income_limit_clp is None else format_clp(tramo.income_limit_clp)
        family.add_row(tramo.tramo, limit, format_clp(tramo.amount_per_charge_clp))
    console.print(family)
