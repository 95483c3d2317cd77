"""Deduction aggregation: legal plus voluntary descuentos."""

from typing import Any, Mapping, Optional, Union

from ..errors import InvalidInputError
from ..schemas import Contributions, DeductionAdjustments
from .inputs import coerce_model


def coerce_deduction_adjustments(
    value: Optional[Union[DeductionAdjustments, Mapping[str, Any]]],
) -> DeductionAdjustments:
    """Validate voluntary deductions; None means no deductions.

    Raises:
        InvalidInputError: If any amount is negative or a key is unknown
    """
    if value is None:
        return DeductionAdjustments()
    return coerce_model(DeductionAdjustments, value, "deduction_adjustments")


def aggregate_deductions(
    contributions: Contributions,
    income_tax_amount: int,
    deduction_adjustments: Optional[Union[DeductionAdjustments, Mapping[str, Any]]] = None,
) -> int:
    """Sum mandatory contributions, income tax and voluntary deductions.

    Raises:
        InvalidInputError: If income_tax_amount or any adjustment is negative
    """
    if income_tax_amount < 0:
        raise InvalidInputError(f"Income tax cannot be negative: {income_tax_amount}")

    adjustments = coerce_deduction_adjustments(deduction_adjustments)
    return contributions.total + income_tax_amount + adjustments.total
