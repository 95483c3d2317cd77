"""liq-calc SDK - Core functionality for monthly payroll liquidation."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    update_settings,
    clear_setting,
    get_parameters_dir,
)

from .errors import (
    LiquidationError,
    InvalidInputError,
    UnknownPeriodError,
    NegativeNetSalaryError,
    ParameterFileError,
)

from .money import round_clp, format_clp

from .schemas import (
    EmployeeSnapshot,
    PeriodContext,
    IncomeAdjustments,
    DeductionAdjustments,
    IncomeBreakdown,
    Contributions,
    EmployerCosts,
    LiquidationResult,
    LiquidationWarning,
)

from .parameters import (
    LegalParameterSet,
    LegalParameterTable,
    load_parameter_table,
    resolve_parameters,
)

from .liquidation import (
    aggregate_income,
    compute_contributions,
    compute_employer_costs,
    compute_income_tax,
    aggregate_deductions,
    calculate_liquidation,
    calculate_payroll_book,
    PayrollBook,
    PayrollBookEntry,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "update_settings",
    "clear_setting",
    "get_parameters_dir",
    # Errors
    "LiquidationError",
    "InvalidInputError",
    "UnknownPeriodError",
    "NegativeNetSalaryError",
    "ParameterFileError",
    # Money
    "round_clp",
    "format_clp",
    # Schemas
    "EmployeeSnapshot",
    "PeriodContext",
    "IncomeAdjustments",
    "DeductionAdjustments",
    "IncomeBreakdown",
    "Contributions",
    "EmployerCosts",
    "LiquidationResult",
    "LiquidationWarning",
    # Legal parameters
    "LegalParameterSet",
    "LegalParameterTable",
    "load_parameter_table",
    "resolve_parameters",
    # Liquidation
    "aggregate_income",
    "compute_contributions",
    "compute_employer_costs",
    "compute_income_tax",
    "aggregate_deductions",
    "calculate_liquidation",
    "calculate_payroll_book",
    "PayrollBook",
    "PayrollBookEntry",
]
