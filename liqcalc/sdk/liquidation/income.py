"""Income aggregation: haberes imponibles and no imponibles for a period.

Taxable income is the prorated base salary plus overtime, bonuses,
commissions and gratification. Non-taxable income is food, transport and
the family allowance (asignación familiar). Only the base salary and the
family allowance are prorated by days worked.
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple

from ..money import round_clp
from ..parameters import LegalParameterSet
from ..schemas import (
    GRATIFICATION_EXCEEDS_CAP,
    GRATIFICATION_IGNORED,
    EmployeeSnapshot,
    IncomeAdjustments,
    IncomeBreakdown,
    LiquidationWarning,
    PeriodContext,
)

logger = logging.getLogger(__name__)

DAYS_IN_MONTH = 30


def prorate(amount: int, days_worked: int) -> int:
    """Prorate a monthly amount by days worked (30-day month).

    30 or more days pays the full amount; 0 days pays nothing.
    """
    if days_worked >= DAYS_IN_MONTH:
        return amount
    return round_clp(Decimal(amount) * days_worked / DAYS_IN_MONTH)


def legal_gratification_cap(base_before_gratification: int, params: LegalParameterSet) -> Decimal:
    """Monthly Art. 50 gratification: 25% of the base, capped at 4.75 IMM / 12.

    Returned unrounded; callers round once when the line item is final.
    """
    quarter = params.gratification_rate * base_before_gratification
    return min(quarter, params.gratification_cap_clp)


def compute_family_allowance(
    employee: EmployeeSnapshot,
    period: PeriodContext,
    params: LegalParameterSet,
) -> Tuple[int, Optional[str]]:
    """Family allowance for the period and the tramo it was paid under.

    The tramo is chosen by the full monthly base salary; the amount is
    prorated by days worked.

    Returns:
        (amount, tramo) - tramo is None when the employee has no dependents
    """
    if employee.family_allowance_count == 0:
        return 0, None

    bracket = params.find_family_allowance_bracket(employee.base_salary_clp)
    monthly = employee.family_allowance_count * bracket.amount_per_charge_clp
    amount = prorate(monthly, period.days_worked)
    logger.debug(
        f"Family allowance tramo {bracket.tramo}: "
        f"{employee.family_allowance_count} x {bracket.amount_per_charge_clp} -> {amount}"
    )
    return amount, bracket.tramo


def aggregate_income(
    employee: EmployeeSnapshot,
    period: PeriodContext,
    income_adjustments: IncomeAdjustments,
    params: LegalParameterSet,
) -> IncomeBreakdown:
    """Compute taxable and non-taxable income for one employee and period.

    Args:
        employee: Contract data
        period: Period and days worked
        income_adjustments: Variable income for the period
        params: Legal parameters in force for the period

    Returns:
        IncomeBreakdown with every line item and income-stage warnings
    """
    warnings = []
    adj = income_adjustments

    base_salary = prorate(employee.base_salary_clp, period.days_worked)
    base_before_gratification = base_salary + adj.overtime_amount + adj.bonuses + adj.commissions
    cap = legal_gratification_cap(base_before_gratification, params)

    gratification = 0
    legal_gratification_art50 = 0
    regime = employee.legal_gratification_type

    if regime == "legal_art50":
        legal_gratification_art50 = round_clp(cap)
    elif regime == "contractual":
        gratification = adj.gratification
        if gratification > cap:
            warnings.append(LiquidationWarning(
                code=GRATIFICATION_EXCEEDS_CAP,
                message=(
                    f"Contractual gratification {gratification} exceeds the "
                    f"Art. 50 amount {round_clp(cap)}"
                ),
            ))

    if regime != "contractual" and adj.gratification > 0:
        warnings.append(LiquidationWarning(
            code=GRATIFICATION_IGNORED,
            message=(
                f"Gratification {adj.gratification} ignored: regime is '{regime}', "
                f"not 'contractual'"
            ),
        ))

    family_allowance, tramo = compute_family_allowance(employee, period, params)

    taxable_income = base_before_gratification + gratification + legal_gratification_art50
    non_taxable_income = adj.food_allowance + adj.transport_allowance + family_allowance

    logger.debug(
        f"Income for {employee.rut} {period.period_key}: "
        f"taxable={taxable_income} non_taxable={non_taxable_income}"
    )

    return IncomeBreakdown(
        base_salary=base_salary,
        overtime_amount=adj.overtime_amount,
        bonuses=adj.bonuses,
        commissions=adj.commissions,
        gratification=gratification,
        legal_gratification_art50=legal_gratification_art50,
        food_allowance=adj.food_allowance,
        transport_allowance=adj.transport_allowance,
        family_allowance=family_allowance,
        family_allowance_tramo=tramo,
        taxable_income=taxable_income,
        non_taxable_income=non_taxable_income,
        warnings=warnings,
    )
