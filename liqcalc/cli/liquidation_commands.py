"""Liquidation CLI commands: single pay slip and monthly payroll book."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
import yaml
from rich.console import Console

from liqcalc.sdk import (
    EmployeeSnapshot,
    LiquidationError,
    ParameterFileError,
    calculate_liquidation,
    calculate_payroll_book,
    load_parameter_table,
)
from .renderers.liquidation_renderer import render_liquidation, render_payroll_book


def load_document(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON request document (JSON is valid YAML)."""
    try:
        with open(path, "r") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot parse {path}: {e}")

    if not isinstance(document, dict):
        raise click.ClickException(f"{path}: expected a mapping at top level")
    return document


def parse_period(value: Any) -> Tuple[int, int]:
    """Accept 'YYYY-MM' or {year, month}."""
    if isinstance(value, dict):
        try:
            return int(value["year"]), int(value["month"])
        except (KeyError, TypeError, ValueError):
            raise click.ClickException("period must have integer 'year' and 'month'")
    if isinstance(value, str):
        parts = value.split("-")
        if len(parts) == 2 and all(p.isdigit() for p in parts):
            return int(parts[0]), int(parts[1])
    raise click.ClickException(f"Invalid period '{value}'. Expected YYYY-MM.")


def _load_table(params_dir: Optional[str]):
    try:
        return load_parameter_table(Path(params_dir) if params_dir else None)
    except ParameterFileError as e:
        raise click.ClickException(str(e))


@click.command("liquidate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--params-dir", type=click.Path(file_okay=False),
              help="Directory with legal parameter files (overrides configured one)")
def liquidate(file: str, output_format: str, params_dir: Optional[str]):
    """Calculate one employee's monthly liquidation.

    FILE is a YAML or JSON document with 'employee', 'period' and optional
    'income_adjustments' and 'deduction_adjustments'.

    \b
    Examples:
      liq-calc liquidate march.yaml
      liq-calc liquidate march.json --format json
    """
    document = load_document(file)
    unknown = set(document) - {"employee", "period", "income_adjustments", "deduction_adjustments"}
    if unknown:
        raise click.ClickException(f"Unknown keys in {file}: {', '.join(sorted(unknown))}")

    table = _load_table(params_dir)

    try:
        result = calculate_liquidation(
            document.get("employee"),
            document.get("period"),
            document.get("income_adjustments"),
            document.get("deduction_adjustments"),
            table=table,
        )
    except LiquidationError as e:
        raise click.ClickException(str(e))

    data = result.model_dump(mode="json")
    if output_format == "json":
        click.echo(json.dumps(data, indent=2))
        return

    employee = EmployeeSnapshot.model_validate(document["employee"])
    render_liquidation(Console(), data, employee_name=employee.full_name)


@click.command("book")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--workers", type=click.IntRange(min=1), default=None,
              help="Parallel workers (default: Python's thread pool default)")
@click.option("--params-dir", type=click.Path(file_okay=False),
              help="Directory with legal parameter files (overrides configured one)")
def book(file: str, output_format: str, workers: Optional[int], params_dir: Optional[str]):
    """Calculate the payroll book for every employee of a month.

    FILE holds 'period' (YYYY-MM) and 'employees', a list of
    {employee, income_adjustments?, deduction_adjustments?, days_worked?}.
    Employees that fail are reported without stopping the others.

    \b
    Examples:
      liq-calc book payroll-2025-03.yaml
      liq-calc book payroll-2025-03.yaml --workers 8 --format json
    """
    document = load_document(file)
    if "period" not in document:
        raise click.ClickException(f"{file}: missing 'period'")
    employees = document.get("employees")
    if not isinstance(employees, list):
        raise click.ClickException(f"{file}: 'employees' must be a list")

    year, month = parse_period(document["period"])
    table = _load_table(params_dir)

    try:
        payroll = calculate_payroll_book(employees, year, month, table=table, max_workers=workers)
    except LiquidationError as e:
        raise click.ClickException(str(e))

    data = payroll.to_dict()
    if output_format == "json":
        click.echo(json.dumps(data, indent=2))
    else:
        render_payroll_book(Console(), data)

    if payroll.failures:
        raise click.ClickException(
            f"{len(payroll.failures)} of {len(payroll.entries)} liquidation(s) failed"
        )
