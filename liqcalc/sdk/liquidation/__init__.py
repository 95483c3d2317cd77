"""Liquidation pipeline: income, contributions, tax, deductions, totals."""

from .assembler import calculate_liquidation
from .book import PayrollBook, PayrollBookEntry, calculate_payroll_book
from .contributions import cap_taxable_base, compute_contributions, compute_employer_costs
from .deductions import aggregate_deductions, coerce_deduction_adjustments
from .income import aggregate_income, compute_family_allowance, legal_gratification_cap, prorate
from .income_tax import compute_income_tax, compute_tax_base

__all__ = [
    "calculate_liquidation",
    "PayrollBook",
    "PayrollBookEntry",
    "calculate_payroll_book",
    "cap_taxable_base",
    "compute_contributions",
    "compute_employer_costs",
    "aggregate_deductions",
    "coerce_deduction_adjustments",
    "aggregate_income",
    "compute_family_allowance",
    "legal_gratification_cap",
    "prorate",
    "compute_income_tax",
    "compute_tax_base",
]
