"""Social security contributions (cotizaciones previsionales).

Employee side: AFP pension + commission, health (Fonasa or Isapre) and
unemployment insurance (AFC), all computed on the taxable income capped at
the tope imponible. Employer side: SIS, employer AFC share and mutual
insurance, reported separately and never deducted from the employee.

Each line item is computed in Decimal and rounded once (half-even).
"""

import logging
from decimal import Decimal
from typing import List, Tuple

from ..money import ZERO, round_clp
from ..parameters import LegalParameterSet
from ..schemas import (
    CEILING_APPLIED,
    DEFAULTED_AFP,
    DEFAULTED_HEALTH,
    DEFAULTED_HEALTH_PLAN,
    Contributions,
    EmployeeSnapshot,
    EmployerCosts,
    LiquidationWarning,
)
from .income import DAYS_IN_MONTH

logger = logging.getLogger(__name__)


def cap_taxable_base(taxable_income: int, params: LegalParameterSet) -> Tuple[Decimal, bool]:
    """Apply the tope imponible.

    Returns:
        (capped_base, ceiling_applied) - capped_base is unrounded
    """
    ceiling = params.contribution_ceiling_clp
    if taxable_income > ceiling:
        logger.debug(f"Taxable income {taxable_income} capped at {ceiling}")
        return ceiling, True
    return Decimal(taxable_income), False


def _resolve_afp(employee: EmployeeSnapshot, params: LegalParameterSet, warnings: List):
    code = employee.afp_code
    if code not in params.afp_rates:
        default = params.default_afp_code
        logger.warning(
            f"AFP {code} not in parameters for {params.effective_period}; using {default}"
        )
        warnings.append(LiquidationWarning(
            code=DEFAULTED_AFP,
            message=f"AFP {code} has no rates for {params.effective_period}; used {default}",
        ))
        code = default
    return code, params.afp_rates[code]


def _resolve_health(employee: EmployeeSnapshot, params: LegalParameterSet, warnings: List):
    code = employee.health_institution_code
    if code not in params.health_rates:
        default = params.default_health_code
        logger.warning(
            f"Health institution {code} not in parameters for "
            f"{params.effective_period}; using {default}"
        )
        warnings.append(LiquidationWarning(
            code=DEFAULTED_HEALTH,
            message=(
                f"Health institution {code} has no rule for "
                f"{params.effective_period}; used {default}"
            ),
        ))
        code = default
    return code, params.health_rates[code]


def compute_health_amount(
    capped_base: Decimal,
    employee: EmployeeSnapshot,
    code: str,
    params: LegalParameterSet,
    warnings: List,
    days_worked: int = DAYS_IN_MONTH,
) -> int:
    """Health contribution for the resolved institution.

    fixed: rate x capped base (Fonasa 7%).
    plan: the larger of the legal minimum (7% x capped base) and the plan
    value in UF, using the employee's plan or else the table default. The
    plan is prorated by days worked like the base salary. With no plan value
    at all the legal minimum is withheld.
    """
    rule = params.health_rates[code]
    minimum = params.health_minimum_rate * capped_base

    if rule.type == "fixed":
        return round_clp(rule.rate_or_plan_uf * capped_base)

    # No pay, no plan withheld
    if capped_base == ZERO:
        return 0

    plan_uf = employee.health_plan_uf
    if plan_uf is None:
        plan_uf = rule.rate_or_plan_uf
    if plan_uf is None:
        warnings.append(LiquidationWarning(
            code=DEFAULTED_HEALTH_PLAN,
            message=f"No plan value for {code}; withheld the legal minimum",
        ))
        return round_clp(minimum)

    plan_amount = plan_uf * params.uf_value_clp
    if days_worked < DAYS_IN_MONTH:
        plan_amount = plan_amount * days_worked / DAYS_IN_MONTH
    return round_clp(max(minimum, plan_amount))


def unemployment_rate(employee: EmployeeSnapshot, params: LegalParameterSet) -> Decimal:
    """Employee AFC rate; zero when the employee is not affiliated."""
    if not employee.has_unemployment_insurance:
        return ZERO
    return params.unemployment_rates.get(employee.contract_type, ZERO)


def compute_contributions(
    taxable_income: int,
    employee: EmployeeSnapshot,
    params: LegalParameterSet,
    days_worked: int = DAYS_IN_MONTH,
) -> Contributions:
    """Compute the employee's mandatory contributions.

    Args:
        taxable_income: Total haberes imponibles for the period
        employee: Contract data
        params: Legal parameters in force for the period
        days_worked: Days worked in the period, used to prorate an Isapre plan

    Returns:
        Contributions with each line item and contribution-stage warnings
    """
    warnings = []

    capped_base, ceiling_applied = cap_taxable_base(taxable_income, params)
    if ceiling_applied:
        warnings.append(LiquidationWarning(
            code=CEILING_APPLIED,
            message=(
                f"Taxable income {taxable_income} exceeds the contribution ceiling "
                f"of {params.contribution_ceiling_uf} UF ({round_clp(capped_base)})"
            ),
        ))

    afp_code, afp = _resolve_afp(employee, params, warnings)
    health_code, _ = _resolve_health(employee, params, warnings)
    afc_rate = unemployment_rate(employee, params)

    contributions = Contributions(
        afp_code=afp_code,
        pension_rate=afp.pension_rate,
        commission_rate=afp.commission_rate,
        afp_amount=round_clp(capped_base * afp.pension_rate),
        afp_commission_amount=round_clp(capped_base * afp.commission_rate),
        health_institution_code=health_code,
        health_amount=compute_health_amount(
            capped_base, employee, health_code, params, warnings, days_worked
        ),
        unemployment_rate=afc_rate,
        unemployment_amount=round_clp(capped_base * afc_rate),
        taxable_base_capped=round_clp(capped_base),
        ceiling_applied=ceiling_applied,
        warnings=warnings,
    )

    logger.debug(
        f"Contributions for {employee.rut}: base={contributions.taxable_base_capped} "
        f"afp={contributions.afp_amount}+{contributions.afp_commission_amount} "
        f"health={contributions.health_amount} afc={contributions.unemployment_amount}"
    )
    return contributions


def compute_employer_costs(
    capped_base: Decimal,
    employee: EmployeeSnapshot,
    params: LegalParameterSet,
) -> EmployerCosts:
    """Employer-borne charges on the capped taxable base.

    The employer AFC share follows the contract type and, like the employee
    share, is only paid for employees affiliated to the insurance.
    """
    rates = params.employer_rates
    if employee.has_unemployment_insurance:
        afc_rate = rates.unemployment_rates.get(employee.contract_type, ZERO)
    else:
        afc_rate = ZERO

    sis_amount = round_clp(capped_base * rates.sis_rate)
    unemployment_employer_amount = round_clp(capped_base * afc_rate)
    mutual_amount = round_clp(capped_base * rates.mutual_rate)

    return EmployerCosts(
        sis_amount=sis_amount,
        unemployment_employer_amount=unemployment_employer_amount,
        mutual_amount=mutual_amount,
        total=sis_amount + unemployment_employer_amount + mutual_amount,
    )
