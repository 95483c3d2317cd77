"""Rich renderers for liquidations and payroll books.

Transforms SDK JSON output (model_dump(mode="json")) into formatted Rich
tables laid out like a Chilean pay slip.
"""

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from liqcalc.sdk.money import format_clp


MONTH_NAMES = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]


def period_label(year: int, month: int) -> str:
    """'Marzo 2025'"""
    return f"{MONTH_NAMES[month - 1]} {year}"


def render_liquidation(console: Console, data: dict, employee_name: str = "") -> None:
    """Render one liquidation as a pay slip.

    Args:
        console: Rich Console instance
        data: LiquidationResult.model_dump(mode="json")
        employee_name: Optional display name for the title
    """
    _render_warnings(console, data.get("warnings", []))

    period = data["period"]
    title = f"Liquidación de Sueldo - {period_label(period['year'], period['month'])}"
    subtitle = f"RUT {data['rut']}"
    if employee_name:
        subtitle = f"{employee_name} ({data['rut']})"

    table = Table(title=title, caption=subtitle, box=box.ROUNDED)
    table.add_column("", style="bold", min_width=32)
    table.add_column("Monto", justify="right", min_width=14)

    # Haberes
    table.add_row("[bold]HABERES IMPONIBLES[/bold]", "")
    days = period.get("days_worked", 30)
    base_label = "  Sueldo base" if days >= 30 else f"  Sueldo base ({days} días)"
    table.add_row(base_label, _fmt(data["base_salary"]))
    _add_optional(table, "  Horas extra", data["overtime_amount"])
    _add_optional(table, "  Bonos", data["bonuses"])
    _add_optional(table, "  Comisiones", data["commissions"])
    _add_optional(table, "  Gratificación legal (Art. 50)", data["legal_gratification_art50"])
    _add_optional(table, "  Gratificación convenida", data["gratification"])
    table.add_row("  [dim]Total imponible[/dim]", f"[dim]{_fmt(data['total_taxable_income'])}[/dim]")
    table.add_row("", "")

    table.add_row("[bold]HABERES NO IMPONIBLES[/bold]", "")
    _add_optional(table, "  Colación", data["food_allowance"])
    _add_optional(table, "  Movilización", data["transport_allowance"])
    _add_optional(table, "  Asignación familiar", data["family_allowance"])
    table.add_row(
        "  [dim]Total no imponible[/dim]",
        f"[dim]{_fmt(data['total_non_taxable_income'])}[/dim]",
    )
    table.add_row("", "")
    table.add_row("[bold]TOTAL HABERES[/bold]", f"[bold]{_fmt(data['total_gross_income'])}[/bold]")
    table.add_row("", "")

    # Descuentos
    table.add_row("[bold]DESCUENTOS LEGALES[/bold]", "")
    table.add_row(f"  AFP {data['afp_code']}", _fmt(data["afp_amount"]))
    table.add_row("  Comisión AFP", _fmt(data["afp_commission_amount"]))
    table.add_row(f"  Salud {data['health_institution_code']}", _fmt(data["health_amount"]))
    table.add_row("  Seguro de cesantía", _fmt(data["unemployment_amount"]))
    table.add_row("  Impuesto único", _fmt(data["income_tax_amount"]))
    table.add_row("", "")

    if data["total_other_deductions"]:
        table.add_row("[bold]OTROS DESCUENTOS[/bold]", "")
        table.add_row("  Descuentos voluntarios", _fmt(data["total_other_deductions"]))
        table.add_row("", "")

    table.add_row("[bold]TOTAL DESCUENTOS[/bold]", f"[bold]{_fmt(data['total_deductions'])}[/bold]")
    table.add_row("", "")
    table.add_row(
        "[bold green]LÍQUIDO A PAGAR[/bold green]",
        f"[bold green]{_fmt(data['net_salary'])}[/bold green]",
    )

    console.print(table)
    _render_footer(console, data)


def _render_footer(console: Console, data: dict) -> None:
    """Employer costs and the parameter set used."""
    costs = data["employer_costs"]
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value", justify="right")

    ceiling = " (tope aplicado)" if data["ceiling_applied"] else ""
    table.add_row("Base imponible", f"{_fmt(data['taxable_base_capped'])}{ceiling}")
    table.add_row("SIS", _fmt(costs["sis_amount"]))
    table.add_row("Cesantía empleador", _fmt(costs["unemployment_employer_amount"]))
    table.add_row("Mutual", _fmt(costs["mutual_amount"]))
    table.add_row("Costo empleador", _fmt(costs["total"]))
    table.add_row("Parámetros", data["effective_period"])

    console.print(Panel(table, title="Aportes del empleador", border_style="dim"))


def _render_warnings(console: Console, warnings: list) -> None:
    for warning in warnings:
        console.print(Panel(
            f"[yellow]{warning['message']}[/yellow]",
            title=warning["code"],
            border_style="yellow",
        ))


def render_payroll_book(console: Console, data: dict) -> None:
    """Render a payroll book summary, one row per employee.

    Args:
        console: Rich Console instance
        data: PayrollBook.to_dict()
    """
    year, month = (int(x) for x in data["period"].split("-"))

    table = Table(
        title=f"Libro de Remuneraciones - {period_label(year, month)}",
        box=box.ROUNDED,
    )
    table.add_column("RUT", style="bold")
    table.add_column("Haberes", justify="right")
    table.add_column("Descuentos", justify="right")
    table.add_column("Líquido", justify="right")
    table.add_column("Costo empleador", justify="right")

    for entry in data["entries"]:
        if "error" in entry:
            error = entry["error"]
            table.add_row(
                entry["rut"] or "?",
                f"[red]{error['type']}[/red]",
                "",
                "",
                "",
            )
            continue
        result = entry["result"]
        table.add_row(
            entry["rut"],
            _fmt(result["total_gross_income"]),
            _fmt(result["total_deductions"]),
            _fmt(result["net_salary"]),
            _fmt(result["employer_costs"]["total"]),
        )

    totals = data["totals"]
    table.add_section()
    table.add_row(
        "[bold]TOTAL[/bold]",
        f"[bold]{_fmt(totals['total_gross_income'])}[/bold]",
        f"[bold]{_fmt(totals['total_deductions'])}[/bold]",
        f"[bold green]{_fmt(totals['total_net_salary'])}[/bold green]",
        f"[bold]{_fmt(totals['total_employer_costs'])}[/bold]",
    )
    console.print(table)

    for entry in data["entries"]:
        if "error" in entry:
            console.print(Panel(
                f"[red]{entry['error']['message']}[/red]",
                title=f"Error: {entry['rut'] or '?'}",
                border_style="red",
            ))


def _add_optional(table: Table, label: str, amount: int) -> None:
    """Add a row only when the amount is non-zero."""
    if amount:
        table.add_row(label, _fmt(amount))


def _fmt(amount) -> str:
    """Format peso amount."""
    if amount is None:
        return "-"
    return format_clp(amount)
