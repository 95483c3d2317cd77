"""Liquidation assembler: one employee, one month, one pay slip.

Pipeline order: parameters -> income -> contributions -> income tax ->
deductions -> totals. Inputs are validated up front, so an
InvalidInputError means nothing was computed.
"""

import logging
from typing import Any, Mapping, Optional, Union

from ..errors import NegativeNetSalaryError
from ..parameters import LegalParameterSet, LegalParameterTable, resolve_parameters
from ..schemas import (
    DEDUCTION_LIMIT_EXCEEDED,
    DeductionAdjustments,
    EmployeeSnapshot,
    IncomeAdjustments,
    LiquidationResult,
    LiquidationWarning,
    PeriodContext,
)
from .contributions import cap_taxable_base, compute_contributions, compute_employer_costs
from .deductions import aggregate_deductions, coerce_deduction_adjustments
from .income import aggregate_income
from .income_tax import compute_income_tax
from .inputs import coerce_model

logger = logging.getLogger(__name__)


def calculate_liquidation(
    employee: Union[EmployeeSnapshot, Mapping[str, Any]],
    period: Union[PeriodContext, Mapping[str, Any]],
    income_adjustments: Optional[Union[IncomeAdjustments, Mapping[str, Any]]] = None,
    deduction_adjustments: Optional[Union[DeductionAdjustments, Mapping[str, Any]]] = None,
    *,
    params: Optional[LegalParameterSet] = None,
    table: Optional[LegalParameterTable] = None,
) -> LiquidationResult:
    """Calculate the monthly liquidation for one employee.

    Args:
        employee: Contract data (model or mapping)
        period: Year, month and days worked (model or mapping)
        income_adjustments: Variable income for the period (default: none)
        deduction_adjustments: Voluntary deductions (default: none)
        params: Parameter set to use as-is (skips resolution)
        table: Table to resolve the period from (default: configured table)

    Returns:
        LiquidationResult with every line item, totals and warnings

    Raises:
        InvalidInputError: Missing, malformed or negative input
        UnknownPeriodError: No legal parameters cover the period
        NegativeNetSalaryError: Total deductions exceed total gross income
    """
    employee = coerce_model(EmployeeSnapshot, employee, "employee")
    period = coerce_model(PeriodContext, period, "period")
    if income_adjustments is None:
        income_adjustments = IncomeAdjustments()
    income_adjustments = coerce_model(IncomeAdjustments, income_adjustments, "income_adjustments")
    deduction_adjustments = coerce_deduction_adjustments(deduction_adjustments)

    if params is None:
        params = resolve_parameters(period, table)
    elif params.effective_period != period.period_key:
        logger.warning(
            f"Liquidating {period.period_key} with parameters for {params.effective_period}"
        )

    income = aggregate_income(employee, period, income_adjustments, params)
    contributions = compute_contributions(
        income.taxable_income, employee, params, days_worked=period.days_worked
    )
    income_tax_amount = compute_income_tax(income.taxable_income, contributions, params)
    total_deductions = aggregate_deductions(contributions, income_tax_amount, deduction_adjustments)

    capped_base, _ = cap_taxable_base(income.taxable_income, params)
    employer_costs = compute_employer_costs(capped_base, employee, params)

    total_gross_income = income.taxable_income + income.non_taxable_income
    if total_deductions > total_gross_income:
        raise NegativeNetSalaryError(total_gross_income, total_deductions)
    net_salary = total_gross_income - total_deductions

    warnings = list(income.warnings) + list(contributions.warnings)
    deduction_limit = params.max_deduction_ratio * total_gross_income
    if total_gross_income > 0 and total_deductions > deduction_limit:
        warnings.append(LiquidationWarning(
            code=DEDUCTION_LIMIT_EXCEEDED,
            message=(
                f"Total deductions {total_deductions} exceed "
                f"{params.max_deduction_ratio:.0%} of gross income {total_gross_income}"
            ),
        ))

    logger.debug(
        f"Liquidation {employee.rut} {period.period_key}: gross={total_gross_income} "
        f"deductions={total_deductions} net={net_salary}"
    )

    return LiquidationResult(
        rut=employee.rut,
        period=period,
        effective_period=params.effective_period,
        base_salary=income.base_salary,
        overtime_amount=income.overtime_amount,
        bonuses=income.bonuses,
        commissions=income.commissions,
        gratification=income.gratification,
        legal_gratification_art50=income.legal_gratification_art50,
        total_taxable_income=income.taxable_income,
        food_allowance=income.food_allowance,
        transport_allowance=income.transport_allowance,
        family_allowance=income.family_allowance,
        total_non_taxable_income=income.non_taxable_income,
        total_gross_income=total_gross_income,
        afp_code=contributions.afp_code,
        afp_amount=contributions.afp_amount,
        afp_commission_amount=contributions.afp_commission_amount,
        health_institution_code=contributions.health_institution_code,
        health_amount=contributions.health_amount,
        unemployment_amount=contributions.unemployment_amount,
        taxable_base_capped=contributions.taxable_base_capped,
        ceiling_applied=contributions.ceiling_applied,
        income_tax_amount=income_tax_amount,
        total_other_deductions=deduction_adjustments.total,
        total_deductions=total_deductions,
        net_salary=net_salary,
        employer_costs=employer_costs,
        warnings=warnings,
    )
