"""Payroll book (libro de remuneraciones): every employee for one month.

The parameter set is resolved once for the month, then each employee is
liquidated independently on a thread pool. A failing employee is recorded
with its error and never blocks the others.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..errors import InvalidInputError, LiquidationError
from ..parameters import LegalParameterSet, LegalParameterTable, resolve_parameters
from ..schemas import LiquidationResult, PeriodContext
from .assembler import calculate_liquidation
from .inputs import coerce_model

logger = logging.getLogger(__name__)

ENTRY_KEYS = {"employee", "income_adjustments", "deduction_adjustments", "days_worked"}


@dataclass
class PayrollBookEntry:
    """Outcome for one employee: a result or the error that stopped it."""

    rut: str
    result: Optional[LiquidationResult] = None
    error: Optional[LiquidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"rut": self.rut, "result": self.result.model_dump(mode="json")}
        return {
            "rut": self.rut,
            "error": {"type": type(self.error).__name__, "message": str(self.error)},
        }


@dataclass
class PayrollBook:
    """All liquidations for one period, in input order."""

    period_key: str
    effective_period: str
    entries: List[PayrollBookEntry] = field(default_factory=list)

    @property
    def results(self) -> List[LiquidationResult]:
        return [e.result for e in self.entries if e.ok]

    @property
    def failures(self) -> List[PayrollBookEntry]:
        return [e for e in self.entries if not e.ok]

    @property
    def total_gross_income(self) -> int:
        return sum(r.total_gross_income for r in self.results)

    @property
    def total_deductions(self) -> int:
        return sum(r.total_deductions for r in self.results)

    @property
    def total_net_salary(self) -> int:
        return sum(r.net_salary for r in self.results)

    @property
    def total_employer_costs(self) -> int:
        return sum(r.employer_costs.total for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period_key,
            "effective_period": self.effective_period,
            "entries": [e.to_dict() for e in self.entries],
            "totals": {
                "employees": len(self.entries),
                "failed": len(self.failures),
                "total_gross_income": self.total_gross_income,
                "total_deductions": self.total_deductions,
                "total_net_salary": self.total_net_salary,
                "total_employer_costs": self.total_employer_costs,
            },
        }


def _entry_rut(entry: Any) -> str:
    if isinstance(entry, Mapping):
        employee = entry.get("employee")
        if isinstance(employee, Mapping):
            return str(employee.get("rut") or "")
        rut = getattr(employee, "rut", None)
        if rut is not None:
            return rut
    return ""


def _liquidate_entry(
    entry: Any,
    year: int,
    month: int,
    params: LegalParameterSet,
) -> PayrollBookEntry:
    rut = _entry_rut(entry)
    try:
        if not isinstance(entry, Mapping):
            raise InvalidInputError(f"Payroll entry must be a mapping, got {type(entry).__name__}")
        unknown = set(entry) - ENTRY_KEYS
        if unknown:
            raise InvalidInputError(f"Unknown payroll entry keys: {', '.join(sorted(unknown))}")

        period = {"year": year, "month": month}
        if entry.get("days_worked") is not None:
            period["days_worked"] = entry["days_worked"]

        result = calculate_liquidation(
            entry.get("employee"),
            period,
            entry.get("income_adjustments"),
            entry.get("deduction_adjustments"),
            params=params,
        )
        return PayrollBookEntry(rut=rut, result=result)
    except LiquidationError as e:
        logger.warning(f"Liquidation failed for {rut or '<unknown>'}: {e}")
        return PayrollBookEntry(rut=rut, error=e)


def calculate_payroll_book(
    entries: Iterable[Mapping[str, Any]],
    year: int,
    month: int,
    *,
    params: Optional[LegalParameterSet] = None,
    table: Optional[LegalParameterTable] = None,
    max_workers: Optional[int] = None,
) -> PayrollBook:
    """Liquidate every employee of a month.

    Args:
        entries: Mappings with 'employee' and optional 'income_adjustments',
                 'deduction_adjustments' and 'days_worked'
        year: Period year
        month: Period month
        params: Parameter set to use as-is (skips resolution)
        table: Table to resolve the period from (default: configured table)
        max_workers: Thread pool size (default: ThreadPoolExecutor's)

    Returns:
        PayrollBook with one entry per input, in input order

    Raises:
        InvalidInputError: Invalid year or month
        UnknownPeriodError: No legal parameters cover the period
    """
    period = coerce_model(PeriodContext, {"year": year, "month": month}, "period")
    period_key = period.period_key
    if params is None:
        params = resolve_parameters(period, table)

    entries = list(entries)
    logger.debug(f"Payroll book {period_key}: {len(entries)} employees")

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(_liquidate_entry, entry, year, month, params)
            for entry in entries
        ]
        book_entries = [future.result() for future in futures]

    return PayrollBook(
        period_key=period_key,
        effective_period=params.effective_period,
        entries=book_entries,
    )
