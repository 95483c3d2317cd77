"""Tests for the legal parameter table and its YAML files."""

from decimal import Decimal

import pytest
import yaml

from liqcalc.sdk.errors import InvalidInputError, ParameterFileError, UnknownPeriodError
from liqcalc.sdk.parameters import (
    LegalParameterTable,
    build_parameter_sets,
    get_bundled_rules_dir,
    load_parameter_table,
    resolve_parameters,
)
from liqcalc.sdk.schemas import PeriodContext


def load_bundled(year: int) -> dict:
    with open(get_bundled_rules_dir() / f"{year}.yaml") as f:
        return yaml.safe_load(f)


@pytest.fixture
def bundled_table(isolated_config):
    return load_parameter_table()


class TestBundledTable:
    """The bundled files load and cover 2024 and 2025."""

    def test_covers_both_years(self, bundled_table):
        """Both bundled years load with all twelve months."""
        periods = bundled_table.list_periods()
        assert periods[0] == "2024-01"
        assert periods[-1] == "2025-12"
        assert len(bundled_table) == 24

    def test_uncovered_period_raises(self, bundled_table):
        """The error carries the year and month asked for."""
        with pytest.raises(UnknownPeriodError) as exc_info:
            bundled_table.resolve(2023, 12)
        assert exc_info.value.year == 2023
        assert exc_info.value.month == 12
        assert "2023-12" in str(exc_info.value)

    def test_mid_year_ceiling_change(self, bundled_table):
        """The February ceiling change holds for the rest of the year."""
        assert bundled_table.resolve(2025, 1).contribution_ceiling_uf == Decimal("84.3")
        assert bundled_table.resolve(2025, 2).contribution_ceiling_uf == Decimal("87.8")
        assert bundled_table.resolve(2025, 12).contribution_ceiling_uf == Decimal("87.8")

    def test_mid_year_minimum_wage_change(self, bundled_table):
        """Minimum wage changes in July 2024 and May 2025."""
        assert bundled_table.resolve(2024, 6).minimum_wage_clp == 460000
        assert bundled_table.resolve(2024, 7).minimum_wage_clp == 500000
        assert bundled_table.resolve(2025, 4).minimum_wage_clp == 510000
        assert bundled_table.resolve(2025, 5).minimum_wage_clp == 529000

    def test_family_tramos_follow_changes(self, bundled_table):
        before = bundled_table.resolve(2024, 6).family_allowance_brackets[0]
        after = bundled_table.resolve(2024, 7).family_allowance_brackets[0]
        assert before.income_limit_clp == 539328
        assert after.income_limit_clp == 586227

    def test_indicators_are_per_month(self, bundled_table):
        """UF and UTM come from each month's entry."""
        jan = bundled_table.resolve(2025, 1)
        feb = bundled_table.resolve(2025, 2)
        assert jan.utm_value_clp == Decimal("67429")
        assert feb.utm_value_clp == Decimal("67294")
        assert jan.uf_value_clp != feb.uf_value_clp

    def test_rates_are_exact_decimals(self, bundled_table):
        """Rates load as Decimal without float noise."""
        habitat = bundled_table.resolve(2025, 3).afp_rates["HABITAT"]
        assert habitat.pension_rate == Decimal("0.10")
        assert habitat.commission_rate == Decimal("0.0127")

    def test_sets_are_frozen(self, bundled_table):
        """Parameter sets cannot be mutated."""
        parameter_set = bundled_table.resolve(2025, 3)
        with pytest.raises(Exception):
            parameter_set.minimum_wage_clp = 1

    def test_resolve_is_stable(self, bundled_table):
        """Resolving twice returns the same snapshot."""
        assert bundled_table.resolve(2025, 3) is bundled_table.resolve(2025, 3)

    def test_resolve_parameters_accepts_period_or_key(self, bundled_table):
        """A PeriodContext and a YYYY-MM key resolve to the same set."""
        by_period = resolve_parameters(PeriodContext(year=2025, month=3), bundled_table)
        by_key = resolve_parameters("2025-03", bundled_table)
        assert by_period is by_key
        assert "2025-03" in bundled_table

    @pytest.mark.parametrize("period", ["2025/03", "2025-xx", "March 2025"])
    def test_malformed_period_key_is_invalid_input(self, bundled_table, period):
        """A string that is not YYYY-MM is rejected as invalid input."""
        with pytest.raises(InvalidInputError, match="Expected YYYY-MM") as exc_info:
            resolve_parameters(period, bundled_table)
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_missing_period_is_invalid_input(self, bundled_table):
        """None is reported as a missing input, not an AttributeError."""
        with pytest.raises(InvalidInputError, match="Missing required input: period"):
            resolve_parameters(None, bundled_table)

    def test_period_without_year_month_is_invalid_input(self, bundled_table):
        """An object lacking year/month is rejected and chained."""
        with pytest.raises(InvalidInputError) as exc_info:
            resolve_parameters(object(), bundled_table)
        assert isinstance(exc_info.value.__cause__, AttributeError)


class TestCustomDirectory:
    """A custom directory overrides bundled files year by year."""

    def _write_2025(self, directory, months):
        document = load_bundled(2025)
        document["months"] = months
        directory.mkdir(exist_ok=True)
        (directory / "2025.yaml").write_text(yaml.safe_dump(document))

    def test_custom_year_replaces_bundled(self, isolated_config, tmp_path):
        """A custom year file replaces the bundled one for that year."""
        custom = tmp_path / "params"
        self._write_2025(custom, {1: {"uf_value_clp": 40000, "utm_value_clp": 70000}})

        table = load_parameter_table(custom)

        assert table.resolve(2025, 1).utm_value_clp == Decimal("70000")
        with pytest.raises(UnknownPeriodError):
            table.resolve(2025, 2)
        # 2024 still comes from the bundled file
        assert "2024-06" in table

    def test_env_var_selects_directory(self, isolated_config, tmp_path, monkeypatch):
        """LIQ_CALC_PARAMETERS_PATH points at the custom directory."""
        custom = tmp_path / "env-params"
        self._write_2025(custom, {3: {"uf_value_clp": 41000, "utm_value_clp": 71000}})
        monkeypatch.setenv("LIQ_CALC_PARAMETERS_PATH", str(custom))

        table = load_parameter_table()

        assert table.resolve(2025, 3).uf_value_clp == Decimal("41000")
        assert "2025-04" not in table

    def test_invalid_yaml_raises(self, isolated_config, tmp_path):
        """Broken YAML raises ParameterFileError."""
        custom = tmp_path / "broken"
        custom.mkdir()
        (custom / "2026.yaml").write_text("year: 2026\nrules: [unclosed\n")

        with pytest.raises(ParameterFileError):
            LegalParameterTable.from_directories(custom)

    def test_year_must_match_file_name(self, isolated_config, tmp_path):
        """A year key that disagrees with the file name is rejected."""
        custom = tmp_path / "mismatch"
        custom.mkdir()
        document = load_bundled(2025)
        (custom / "2026.yaml").write_text(yaml.safe_dump(document))

        with pytest.raises(ParameterFileError, match="does not match"):
            LegalParameterTable.from_directories(custom)


class TestBuildParameterSets:
    """Building sets from a year document."""

    def test_changes_apply_from_their_month_on(self):
        """A change applies from its month to December."""
        document = load_bundled(2025)
        sets = build_parameter_sets(document)
        by_month = {s.month: s for s in sets}
        assert by_month[4].minimum_wage_clp == 510000
        assert by_month[5].minimum_wage_clp == 529000
        assert by_month[12].minimum_wage_clp == 529000

    def test_invalid_values_raise_parameter_file_error(self):
        """Pydantic errors are wrapped as ParameterFileError."""
        document = load_bundled(2025)
        document["rules"]["contribution_ceiling_uf"] = -1
        with pytest.raises(ParameterFileError, match="2025-01"):
            build_parameter_sets(document, source="test.yaml")

    def test_invalid_month_key(self):
        document = load_bundled(2025)
        document["months"] = {13: {"uf_value_clp": 1, "utm_value_clp": 1}}
        with pytest.raises(ParameterFileError, match="invalid month"):
            build_parameter_sets(document)

    def test_missing_year(self):
        with pytest.raises(ParameterFileError, match="year"):
            build_parameter_sets({"rules": {}, "months": {}})


class TestParameterSetValidation:
    """Table consistency checks on LegalParameterSet."""

    def test_gap_in_tax_brackets_rejected(self, make_params, params_data):
        """Consecutive tax brackets must share their bound."""
        brackets = params_data["income_tax_brackets"]
        brackets[1]["lower_bound_utm"] = "14"
        with pytest.raises(ValueError, match="not contiguous"):
            make_params(income_tax_brackets=brackets)

    def test_bounded_last_bracket_rejected(self, make_params):
        """The top bracket is open-ended."""
        brackets = [{"lower_bound_utm": "0", "upper_bound_utm": "10", "marginal_rate": "0"}]
        with pytest.raises(ValueError, match="unbounded"):
            make_params(income_tax_brackets=brackets)

    def test_default_afp_must_exist(self, make_params):
        """The default AFP must have rates."""
        with pytest.raises(ValueError, match="default_afp_code"):
            make_params(afp_rates={"UNO": {"pension_rate": "0.10", "commission_rate": "0.0046"}})

    def test_unknown_key_rejected(self, make_params):
        with pytest.raises(ValueError):
            make_params(surprise=True)

    def test_derived_amounts(self, params):
        """Ceiling and gratification cap in pesos."""
        assert params.contribution_ceiling_clp == Decimal("3287700.0")
        assert params.gratification_cap_clp == Decimal("4.75") * 500000 / 12
        assert (params.year, params.month) == (2025, 3)

    def test_find_tax_bracket_boundaries(self, params):
        """Lower bounds are inclusive and upper bounds exclusive."""
        assert params.find_tax_bracket(Decimal("13.4999")).marginal_rate == 0
        assert params.find_tax_bracket(Decimal("13.5")).marginal_rate == Decimal("0.04")
        assert params.find_tax_bracket(Decimal("1000")).upper_bound_utm is None

    def test_find_family_allowance_bracket(self, params):
        """The first tramo whose limit covers the income wins."""
        assert params.find_family_allowance_bracket(586227).tramo == "A"
        assert params.find_family_allowance_bracket(586228).tramo == "B"
        assert params.find_family_allowance_bracket(5000000).tramo == "D"
