"""Shared fixtures: a fixed legal parameter set and isolated configuration.

The fixed set uses round indicators (UF 39.000, UTM 68.000, minimum wage
500.000) so expected amounts can be worked out by hand.
"""

import copy

import pytest

from liqcalc.sdk.parameters import LegalParameterSet


PARAMS_DATA = {
    "effective_period": "2025-03",
    "afp_rates": {
        "CAPITAL": {"pension_rate": "0.10", "commission_rate": "0.0144"},
        "CUPRUM": {"pension_rate": "0.10", "commission_rate": "0.0144"},
        "HABITAT": {"pension_rate": "0.10", "commission_rate": "0.0127"},
        "MODELO": {"pension_rate": "0.10", "commission_rate": "0.0058"},
        "PLANVITAL": {"pension_rate": "0.10", "commission_rate": "0.0116"},
        "PROVIDA": {"pension_rate": "0.10", "commission_rate": "0.0145"},
        "UNO": {"pension_rate": "0.10", "commission_rate": "0.0046"},
    },
    "default_afp_code": "HABITAT",
    "health_rates": {
        "FONASA": {"type": "fixed", "rate_or_plan_uf": "0.07"},
        "BANMEDICA": {"type": "plan", "rate_or_plan_uf": None},
        "COLMENA": {"type": "plan", "rate_or_plan_uf": None},
        "CONSALUD": {"type": "plan", "rate_or_plan_uf": None},
        "CRUZ_BLANCA": {"type": "plan", "rate_or_plan_uf": None},
    },
    "default_health_code": "FONASA",
    "contribution_ceiling_uf": "84.3",
    "unemployment_rates": {"indefinido": "0.006", "plazo_fijo": "0", "obra_faena": "0"},
    "employer_rates": {
        "sis_rate": "0.0188",
        "mutual_rate": "0.0093",
        "unemployment_rates": {"indefinido": "0.024", "plazo_fijo": "0.03", "obra_faena": "0.03"},
    },
    "income_tax_brackets": [
        {"lower_bound_utm": "0", "upper_bound_utm": "13.5", "marginal_rate": "0", "rebate_utm": "0"},
        {"lower_bound_utm": "13.5", "upper_bound_utm": "30", "marginal_rate": "0.04", "rebate_utm": "0.54"},
        {"lower_bound_utm": "30", "upper_bound_utm": "50", "marginal_rate": "0.08", "rebate_utm": "1.74"},
        {"lower_bound_utm": "50", "upper_bound_utm": "70", "marginal_rate": "0.135", "rebate_utm": "4.49"},
        {"lower_bound_utm": "70", "upper_bound_utm": "90", "marginal_rate": "0.23", "rebate_utm": "11.14"},
        {"lower_bound_utm": "90", "upper_bound_utm": "120", "marginal_rate": "0.304", "rebate_utm": "17.80"},
        {"lower_bound_utm": "120", "upper_bound_utm": "310", "marginal_rate": "0.35", "rebate_utm": "23.32"},
        {"lower_bound_utm": "310", "upper_bound_utm": None, "marginal_rate": "0.40", "rebate_utm": "38.82"},
    ],
    "family_allowance_brackets": [
        {"tramo": "A", "income_limit_clp": 586227, "amount_per_charge_clp": 21243},
        {"tramo": "B", "income_limit_clp": 856247, "amount_per_charge_clp": 13036},
        {"tramo": "C", "income_limit_clp": 1335450, "amount_per_charge_clp": 4119},
        {"tramo": "D", "income_limit_clp": None, "amount_per_charge_clp": 0},
    ],
    "minimum_wage_clp": 500000,
    "uf_value_clp": "39000",
    "utm_value_clp": "68000",
}


@pytest.fixture
def params_data():
    """Raw parameter data (a fresh copy per test)."""
    return copy.deepcopy(PARAMS_DATA)


@pytest.fixture
def make_params():
    """Factory for LegalParameterSet with top-level overrides."""
    def _make(**overrides) -> LegalParameterSet:
        data = copy.deepcopy(PARAMS_DATA)
        data.update(overrides)
        return LegalParameterSet.model_validate(data)
    return _make


@pytest.fixture
def params(make_params):
    """Fixed parameter set for 2025-03."""
    return make_params()


@pytest.fixture
def employee_data():
    """Reference employee: 1.000.000 base, Habitat, Fonasa, indefinido with AFC."""
    return {
        "rut": "12.345.678-5",
        "first_name": "María",
        "last_name": "González",
        "base_salary_clp": 1000000,
        "contract_type": "indefinido",
        "afp_code": "HABITAT",
        "health_institution_code": "FONASA",
        "has_unemployment_insurance": True,
    }


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point configuration at an empty temp directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("LIQ_CALC_CONFIG_PATH", str(config_dir))
    monkeypatch.delenv("LIQ_CALC_PARAMETERS_PATH", raising=False)
    return config_dir
