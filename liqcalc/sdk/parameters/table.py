"""Legal parameter table: period-indexed LegalParameterSet snapshots.

Parameters are stored one YAML file per year ({year}.yaml):

    year: 2025
    rules:              # rules in force from January
      contribution_ceiling_uf: 84.3
      minimum_wage_clp: 510000
      afp_rates: {...}
      ...
    changes:            # rules that change mid-year, from the keyed month on
      2:
        contribution_ceiling_uf: 87.8
    months:             # indicators per month; a month listed here is covered
      1: {uf_value_clp: 38384.41, utm_value_clp: 67429}
      ...

A month missing from `months` is not covered and resolving it raises
UnknownPeriodError. Sets are built once, frozen, and never mutated, so a
historical liquidation always resolves to the same snapshot.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import yaml
from pydantic import ValidationError

from ..config import get_parameters_dir
from ..errors import InvalidInputError, ParameterFileError, UnknownPeriodError
from .schemas import LegalParameterSet

logger = logging.getLogger(__name__)


def get_bundled_rules_dir() -> Path:
    """Get the directory of parameter files shipped with the package."""
    return Path(__file__).parent / "rules"


def _get_available_years(rules_dir: Path) -> List[int]:
    """Get sorted list of years with a parameter file in rules_dir."""
    if not rules_dir.is_dir():
        return []
    years = [int(p.stem) for p in rules_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years)


def load_rules_file(path: Path) -> dict:
    """Load one {year}.yaml parameter document.

    Raises:
        ParameterFileError: If the file is not valid YAML or not a mapping
    """
    try:
        with open(path, "r") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParameterFileError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(document, dict):
        raise ParameterFileError(f"{path}: expected a mapping at top level")

    return document


def _month_map(document: dict, key: str, source: str) -> Dict[int, dict]:
    """Read a month-keyed section (changes/months), validating the keys."""
    section = document.get(key) or {}
    if not isinstance(section, dict):
        raise ParameterFileError(f"{source}: '{key}' must be a mapping of month -> values")

    result = {}
    for month, values in section.items():
        try:
            month_number = int(month)
        except (TypeError, ValueError):
            raise ParameterFileError(f"{source}: '{key}' has invalid month {month!r}")
        if not 1 <= month_number <= 12:
            raise ParameterFileError(f"{source}: '{key}' has invalid month {month!r}")
        if not isinstance(values, dict):
            raise ParameterFileError(f"{source}: '{key}.{month}' must be a mapping")
        result[month_number] = values
    return result


def build_parameter_sets(document: dict, source: str = "<document>") -> List[LegalParameterSet]:
    """Build every covered month's LegalParameterSet from a year document.

    Args:
        document: Parsed {year}.yaml content
        source: Label for error messages (usually the file path)

    Returns:
        Parameter sets in month order

    Raises:
        ParameterFileError: If the document or any resulting set is invalid
    """
    try:
        year = int(document["year"])
    except (KeyError, TypeError, ValueError):
        raise ParameterFileError(f"{source}: missing or invalid 'year'")

    base_rules = document.get("rules") or {}
    if not isinstance(base_rules, dict):
        raise ParameterFileError(f"{source}: 'rules' must be a mapping")

    changes = _month_map(document, "changes", source)
    months = _month_map(document, "months", source)

    parameter_sets = []
    for month in sorted(months):
        values = dict(base_rules)
        for change_month in sorted(changes):
            if change_month <= month:
                values.update(changes[change_month])
        values.update(months[month])
        values["effective_period"] = f"{year:04d}-{month:02d}"

        try:
            parameter_sets.append(LegalParameterSet.model_validate(values))
        except ValidationError as e:
            raise ParameterFileError(
                f"{source}: invalid parameters for {year:04d}-{month:02d}: {e}"
            ) from e

    return parameter_sets


class LegalParameterTable:
    """Read-only registry of LegalParameterSet snapshots keyed by 'YYYY-MM'."""

    def __init__(self, parameter_sets: Iterable[LegalParameterSet] = ()):
        self._sets: Dict[str, LegalParameterSet] = {}
        for parameter_set in parameter_sets:
            key = parameter_set.effective_period
            if key in self._sets:
                raise ValueError(f"Duplicate parameter set for period {key}")
            self._sets[key] = parameter_set

    @classmethod
    def from_directories(cls, *rules_dirs: Path) -> "LegalParameterTable":
        """Load every {year}.yaml found in the given directories.

        Directories are listed highest precedence first: a year present in
        an earlier directory hides the same year in later ones.
        """
        files_by_year: Dict[int, Path] = {}
        for rules_dir in rules_dirs:
            for year in _get_available_years(rules_dir):
                files_by_year.setdefault(year, rules_dir / f"{year}.yaml")

        parameter_sets = []
        for year in sorted(files_by_year):
            path = files_by_year[year]
            logger.debug(f"Loading legal parameters for {year} from {path}")
            document = load_rules_file(path)
            sets = build_parameter_sets(document, source=str(path))
            if any(s.year != year for s in sets):
                raise ParameterFileError(f"{path}: 'year' does not match file name")
            parameter_sets.extend(sets)

        return cls(parameter_sets)

    def resolve(self, year: int, month: int) -> LegalParameterSet:
        """Get the parameter set covering a period.

        Raises:
            UnknownPeriodError: If no parameter set covers the period
        """
        key = f"{year:04d}-{month:02d}"
        parameter_set = self._sets.get(key)
        if parameter_set is None:
            raise UnknownPeriodError(year, month)
        return parameter_set

    def list_periods(self) -> List[str]:
        """Covered periods ('YYYY-MM'), oldest first."""
        return sorted(self._sets)

    def __contains__(self, period_key: str) -> bool:
        return period_key in self._sets

    def __len__(self) -> int:
        return len(self._sets)


@lru_cache(maxsize=8)
def _load_table(custom_dir: Optional[str]) -> LegalParameterTable:
    dirs = [Path(custom_dir)] if custom_dir else []
    dirs.append(get_bundled_rules_dir())
    return LegalParameterTable.from_directories(*dirs)


def load_parameter_table(parameters_dir: Optional[Path] = None) -> LegalParameterTable:
    """Load the legal parameter table (cached per directory).

    Args:
        parameters_dir: Custom directory overriding bundled files per year.
                        Defaults to the configured directory (see config).

    Returns:
        LegalParameterTable with every covered period
    """
    if parameters_dir is None:
        parameters_dir = get_parameters_dir()
    if parameters_dir is not None and not Path(parameters_dir).is_dir():
        logger.warning(f"Legal parameter directory not found: {parameters_dir}")
    return _load_table(str(parameters_dir) if parameters_dir else None)


def resolve_parameters(
    period,
    table: Optional[LegalParameterTable] = None,
) -> LegalParameterSet:
    """Resolve the legal parameter set for a period.

    Args:
        period: PeriodContext (anything with year/month) or a 'YYYY-MM' string
        table: Table to resolve from (default: load_parameter_table())

    Returns:
        The frozen LegalParameterSet for the period

    Raises:
        InvalidInputError: If the period is missing or malformed
        UnknownPeriodError: If no parameter set covers the period
    """
    year, month = _period_year_month(period)
    if table is None:
        table = load_parameter_table()
    parameter_set = table.resolve(year, month)
    logger.debug(f"Resolved legal parameters for {parameter_set.effective_period}")
    return parameter_set


def _period_year_month(period: Union[str, object]) -> tuple:
    if period is None:
        raise InvalidInputError("Missing required input: period")
    if isinstance(period, str):
        try:
            year_str, month_str = period.split("-")
            return int(year_str), int(month_str)
        except ValueError as e:
            raise InvalidInputError(f"Invalid period '{period}'. Expected YYYY-MM.") from e
    try:
        return int(period.year), int(period.month)
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidInputError(
            f"Invalid period {period!r}. Expected YYYY-MM or an object with year and month."
        ) from e
