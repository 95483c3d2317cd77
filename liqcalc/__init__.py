"""liq-calc - Chilean payroll liquidation engine."""

__version__ = "0.3.0"
