"""Error taxonomy for the liquidation engine.

Every failure that leaves the pipeline is one of the three LiquidationError
subclasses below. Non-fatal conditions are reported as warnings on the
result instead (see schemas.LiquidationWarning).
"""


class LiquidationError(Exception):
    """Base class for engine failures."""
    pass


class InvalidInputError(LiquidationError):
    """Raised when caller input is missing, malformed or negative.

    Nothing is computed when this is raised.
    """
    pass


class UnknownPeriodError(LiquidationError):
    """Raised when no legal parameter set covers the requested period."""

    def __init__(self, year: int, month: int, message: str = ""):
        self.year = year
        self.month = month
        super().__init__(
            message or f"No legal parameters cover period {year:04d}-{month:02d}"
        )


class NegativeNetSalaryError(LiquidationError):
    """Raised when total deductions exceed total gross income.

    The net salary is never clamped to zero; a negative net means the input
    data or the parameter set is wrong.
    """

    def __init__(self, total_gross_income: int, total_deductions: int):
        self.total_gross_income = total_gross_income
        self.total_deductions = total_deductions
        super().__init__(
            f"Total deductions ({total_deductions}) exceed total gross income "
            f"({total_gross_income})"
        )


class ParameterFileError(Exception):
    """Raised when a legal parameter file cannot be parsed or validated."""
    pass
