"""Impuesto Único de Segunda Categoría (monthly employee income tax).

The tax base is the taxable income minus the mandatory contributions. It
is converted to UTM, taxed with the period's bracket table using the
"rebate" form (base x marginal rate - cantidad a rebajar), and converted
back to pesos.
"""

import logging
from decimal import Decimal

from ..money import ZERO, round_clp
from ..parameters import LegalParameterSet
from ..schemas import Contributions

logger = logging.getLogger(__name__)


def compute_tax_base(taxable_income: int, contributions: Contributions) -> int:
    """Taxable income net of mandatory contributions, floored at zero."""
    return max(0, taxable_income - contributions.total)


def compute_income_tax(
    taxable_income: int,
    contributions: Contributions,
    params: LegalParameterSet,
) -> int:
    """Compute the monthly income tax in pesos.

    Args:
        taxable_income: Total haberes imponibles for the period
        contributions: Employee contributions already computed
        params: Legal parameters with the bracket table and UTM value

    Returns:
        Income tax, rounded once to whole pesos
    """
    tax_base_clp = compute_tax_base(taxable_income, contributions)
    tax_base_utm = Decimal(tax_base_clp) / params.utm_value_clp

    bracket = params.find_tax_bracket(tax_base_utm)
    tax_utm = max(ZERO, tax_base_utm * bracket.marginal_rate - bracket.rebate_utm)
    tax = round_clp(tax_utm * params.utm_value_clp)

    logger.debug(
        f"Income tax: base={tax_base_clp} ({tax_base_utm:.4f} UTM) "
        f"bracket=[{bracket.lower_bound_utm}, {bracket.upper_bound_utm}) "
        f"rate={bracket.marginal_rate} -> {tax}"
    )
    return tax
