"""Legal parameters: rates, ceilings and tables in force per period."""

from .schemas import (
    AfpRate,
    EmployerRates,
    FamilyAllowanceBracket,
    HealthRate,
    IncomeTaxBracket,
    LegalParameterSet,
)
from .table import (
    LegalParameterTable,
    build_parameter_sets,
    get_bundled_rules_dir,
    load_parameter_table,
    load_rules_file,
    resolve_parameters,
)

__all__ = [
    "AfpRate",
    "EmployerRates",
    "FamilyAllowanceBracket",
    "HealthRate",
    "IncomeTaxBracket",
    "LegalParameterSet",
    "LegalParameterTable",
    "build_parameter_sets",
    "get_bundled_rules_dir",
    "load_parameter_table",
    "load_rules_file",
    "resolve_parameters",
]
