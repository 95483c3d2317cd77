"""Pydantic schemas for legal parameter sets.

These schemas validate the parameters/rules/*.yaml files and provide typed
access to the rates, ceilings and tables a liquidation needs. A
LegalParameterSet is frozen: once resolved for a period it is a read-only
snapshot shared by every liquidation of that period.
"""

from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..schemas import AfpCode, ContractType, HealthInstitutionCode


class RuleModel(BaseModel):
    """Base for parameter schemas: frozen, strict keys."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class AfpRate(RuleModel):
    """Contribution rates for one AFP."""

    name: Optional[str] = None
    pension_rate: Decimal = Field(..., ge=0, le=1, description="Mandatory pension contribution")
    commission_rate: Decimal = Field(..., ge=0, le=1, description="AFP administration fee")


class HealthRate(RuleModel):
    """Health contribution rule for one institution.

    type 'fixed': rate_or_plan_uf is a rate applied to the capped base.
    type 'plan': rate_or_plan_uf is a default plan value in UF (None when
    plans are contracted per employee).
    """

    name: Optional[str] = None
    type: Literal["fixed", "plan"]
    rate_or_plan_uf: Optional[Decimal] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_fixed_rate(self) -> "HealthRate":
        if self.type == "fixed":
            if self.rate_or_plan_uf is None:
                raise ValueError("fixed health rate requires rate_or_plan_uf")
            if self.rate_or_plan_uf > 1:
                raise ValueError(f"fixed health rate must be in [0, 1], got {self.rate_or_plan_uf}")
        return self


class IncomeTaxBracket(RuleModel):
    """One row of the Impuesto Único de Segunda Categoría table, in UTM."""

    lower_bound_utm: Decimal = Field(..., ge=0)
    upper_bound_utm: Optional[Decimal] = Field(default=None, description="None for the top bracket")
    marginal_rate: Decimal = Field(..., ge=0, le=1)
    rebate_utm: Decimal = Field(default=Decimal("0"), ge=0, description="Cantidad a rebajar")

    def contains(self, amount_utm: Decimal) -> bool:
        if amount_utm < self.lower_bound_utm:
            return False
        return self.upper_bound_utm is None or amount_utm < self.upper_bound_utm


class FamilyAllowanceBracket(RuleModel):
    """Family allowance tramo: amount per dependent up to an income limit."""

    tramo: str = Field(..., min_length=1)
    income_limit_clp: Optional[int] = Field(default=None, ge=0, description="None for the last tramo")
    amount_per_charge_clp: int = Field(..., ge=0)


class EmployerRates(RuleModel):
    """Employer-borne contribution rates."""

    sis_rate: Decimal = Field(..., ge=0, le=1, description="Seguro de Invalidez y Sobrevivencia")
    mutual_rate: Decimal = Field(..., ge=0, le=1, description="Ley 16.744 base + additional rate")
    unemployment_rates: Dict[ContractType, Decimal] = Field(..., description="Employer AFC share")

    @field_validator("unemployment_rates")
    @classmethod
    def rates_in_range(cls, v: Dict[str, Decimal]) -> Dict[str, Decimal]:
        return _check_rate_map(v, "employer unemployment")


def _check_rate_map(rates: Dict[str, Decimal], label: str) -> Dict[str, Decimal]:
    for key, rate in rates.items():
        if rate < 0 or rate > 1:
            raise ValueError(f"{label} rate for '{key}' must be in [0, 1], got {rate}")
    return rates


class LegalParameterSet(RuleModel):
    """Complete legal parameters for one period (YYYY-MM)."""

    effective_period: str = Field(..., pattern=r"^\d{4}-(0[1-9]|1[0-2])$")

    afp_rates: Dict[AfpCode, AfpRate]
    default_afp_code: AfpCode
    health_rates: Dict[HealthInstitutionCode, HealthRate]
    default_health_code: HealthInstitutionCode = "FONASA"
    health_minimum_rate: Decimal = Field(default=Decimal("0.07"), ge=0, le=1)

    contribution_ceiling_uf: Decimal = Field(..., gt=0, description="Tope imponible in UF")
    unemployment_rates: Dict[ContractType, Decimal] = Field(..., description="Employee AFC rate")
    employer_rates: EmployerRates

    income_tax_brackets: List[IncomeTaxBracket] = Field(..., min_length=1)
    family_allowance_brackets: List[FamilyAllowanceBracket] = Field(..., min_length=1)

    minimum_wage_clp: int = Field(..., gt=0, description="Ingreso mínimo mensual")
    uf_value_clp: Decimal = Field(..., gt=0)
    utm_value_clp: Decimal = Field(..., gt=0)

    gratification_rate: Decimal = Field(default=Decimal("0.25"), ge=0, le=1)
    gratification_cap_wages: Decimal = Field(
        default=Decimal("4.75"), ge=0,
        description="Art. 50 annual cap, in minimum wages",
    )
    max_deduction_ratio: Decimal = Field(default=Decimal("0.45"), ge=0, le=1)

    @field_validator("unemployment_rates")
    @classmethod
    def unemployment_rates_in_range(cls, v: Dict[str, Decimal]) -> Dict[str, Decimal]:
        return _check_rate_map(v, "unemployment")

    @model_validator(mode="after")
    def check_tables(self) -> "LegalParameterSet":
        """Validate bracket continuity and default codes."""
        errors = []

        brackets = self.income_tax_brackets
        if brackets[0].lower_bound_utm != 0:
            errors.append("first income tax bracket must start at 0 UTM")
        for bracket in brackets:
            upper = bracket.upper_bound_utm
            if upper is not None and upper <= bracket.lower_bound_utm:
                errors.append(
                    f"income tax bracket [{bracket.lower_bound_utm}, {upper}) is empty"
                )
        for prev, nxt in zip(brackets, brackets[1:]):
            if prev.upper_bound_utm is None:
                errors.append("only the last income tax bracket may be unbounded")
            elif prev.upper_bound_utm != nxt.lower_bound_utm:
                errors.append(
                    f"income tax brackets not contiguous at {prev.upper_bound_utm} "
                    f"-> {nxt.lower_bound_utm}"
                )
        if brackets[-1].upper_bound_utm is not None:
            errors.append("last income tax bracket must be unbounded")

        tramos = self.family_allowance_brackets
        for prev, nxt in zip(tramos, tramos[1:]):
            if prev.income_limit_clp is None:
                errors.append("only the last family allowance tramo may be unbounded")
            elif nxt.income_limit_clp is not None and nxt.income_limit_clp <= prev.income_limit_clp:
                errors.append("family allowance limits must be strictly increasing")
        if tramos[-1].income_limit_clp is not None:
            errors.append("last family allowance tramo must be unbounded")

        if self.default_afp_code not in self.afp_rates:
            errors.append(f"default_afp_code {self.default_afp_code} missing from afp_rates")
        if self.default_health_code not in self.health_rates:
            errors.append(
                f"default_health_code {self.default_health_code} missing from health_rates"
            )

        if errors:
            raise ValueError("; ".join(errors))

        return self

    @property
    def year(self) -> int:
        return int(self.effective_period[:4])

    @property
    def month(self) -> int:
        return int(self.effective_period[5:])

    @property
    def contribution_ceiling_clp(self) -> Decimal:
        """Tope imponible in pesos (unrounded)."""
        return self.contribution_ceiling_uf * self.uf_value_clp

    @property
    def gratification_cap_clp(self) -> Decimal:
        """Monthly Art. 50 cap: 4.75 minimum wages / 12 (unrounded)."""
        return self.gratification_cap_wages * self.minimum_wage_clp / 12

    def find_tax_bracket(self, amount_utm: Decimal) -> IncomeTaxBracket:
        """Bracket b with b.lower <= amount < b.upper (top bracket unbounded)."""
        for bracket in self.income_tax_brackets:
            if bracket.contains(amount_utm):
                return bracket
        # Negative amounts never reach here (tax base is floored at 0)
        return self.income_tax_brackets[0]

    def find_family_allowance_bracket(self, income_clp: int) -> FamilyAllowanceBracket:
        """First tramo whose income limit is >= income."""
        for tramo in self.family_allowance_brackets:
            if tramo.income_limit_clp is None or income_clp <= tramo.income_limit_clp:
                return tramo
        return self.family_allowance_brackets[-1]
