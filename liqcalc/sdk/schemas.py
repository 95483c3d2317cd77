"""Pydantic schemas for liquidation inputs and results.

All schemas use extra='forbid' to reject unknown fields, ensuring typos in
request documents cause clear errors rather than silent ignoring. Codes
(contract type, AFP, health institution, gratification regime) are closed
sets; unrecognized values are rejected here, at the boundary.
"""

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Closed code sets
# =============================================================================

ContractType = Literal["indefinido", "plazo_fijo", "obra_faena"]

GratificationType = Literal["none", "legal_art50", "contractual"]

AfpCode = Literal[
    "CAPITAL",
    "CUPRUM",
    "HABITAT",
    "MODELO",
    "PLANVITAL",
    "PROVIDA",
    "UNO",
]

HealthInstitutionCode = Literal[
    "FONASA",
    "BANMEDICA",
    "COLMENA",
    "CONSALUD",
    "CRUZ_BLANCA",
    "ESENCIAL",
    "NUEVA_MASVIDA",
    "VIDA_TRES",
]

# Spellings seen in employee records that map onto a canonical code
CODE_ALIASES = {
    "PLAN_VITAL": "PLANVITAL",
    "AFP_HABITAT": "HABITAT",
    "AFP_CAPITAL": "CAPITAL",
    "AFP_CUPRUM": "CUPRUM",
    "AFP_MODELO": "MODELO",
    "AFP_PLANVITAL": "PLANVITAL",
    "AFP_PROVIDA": "PROVIDA",
    "AFP_UNO": "UNO",
    "NUEVA_MAS_VIDA": "NUEVA_MASVIDA",
    "COLMENA_GOLDEN_CROSS": "COLMENA",
}


def normalize_code(value):
    """Normalize an institution code: ' Cruz Blanca ' -> 'CRUZ_BLANCA'."""
    if not isinstance(value, str):
        return value
    code = value.strip().upper().replace("-", "_").replace(" ", "_")
    return CODE_ALIASES.get(code, code)


# =============================================================================
# Warning codes
# =============================================================================

DEFAULTED_AFP = "DEFAULTED_AFP"
DEFAULTED_HEALTH = "DEFAULTED_HEALTH"
DEFAULTED_HEALTH_PLAN = "DEFAULTED_HEALTH_PLAN"
GRATIFICATION_EXCEEDS_CAP = "GRATIFICATION_EXCEEDS_CAP"
GRATIFICATION_IGNORED = "GRATIFICATION_IGNORED"
CEILING_APPLIED = "CEILING_APPLIED"
DEDUCTION_LIMIT_EXCEEDED = "DEDUCTION_LIMIT_EXCEEDED"


class LiquidationWarning(BaseModel):
    """Non-fatal condition resolved by a documented default."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str = Field(..., description="Machine-readable code (e.g., 'DEFAULTED_AFP')")
    message: str = Field(..., description="Human-readable explanation")


# =============================================================================
# Inputs
# =============================================================================


class EmployeeSnapshot(BaseModel):
    """Employee contract data, immutable for the duration of a calculation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rut: str = Field(..., min_length=1, description="Chilean tax id (e.g., '12.345.678-9')")
    first_name: str = Field(default="", description="Given names")
    last_name: str = Field(default="", description="Family names")
    base_salary_clp: int = Field(..., gt=0, description="Contracted monthly base salary")
    contract_type: ContractType = Field(..., description="Contract modality")
    afp_code: AfpCode = Field(..., description="Pension fund administrator")
    health_institution_code: HealthInstitutionCode = Field(
        ..., description="FONASA or an Isapre"
    )
    family_allowance_count: int = Field(
        default=0, ge=0, description="Number of recognized family dependents (cargas)"
    )
    legal_gratification_type: GratificationType = Field(
        default="none", description="Gratification regime"
    )
    has_unemployment_insurance: bool = Field(
        default=True, description="Affiliated to the unemployment insurance (AFC)"
    )
    health_plan_uf: Optional[Decimal] = Field(
        default=None, gt=0, description="Contracted Isapre plan value in UF"
    )

    @field_validator("afp_code", "health_institution_code", mode="before")
    @classmethod
    def normalize_institution(cls, v):
        return normalize_code(v)

    @field_validator("contract_type", "legal_gratification_type", mode="before")
    @classmethod
    def normalize_regime(cls, v):
        if isinstance(v, str):
            return v.strip().lower().replace("-", "_").replace(" ", "_")
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class PeriodContext(BaseModel):
    """Calendar month being liquidated and days actually worked in it."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int = Field(..., ge=1990, le=2100)
    month: int = Field(..., ge=1, le=12)
    days_worked: int = Field(
        default=30, ge=0, le=31,
        description="Days worked; 30 or more counts as a full month",
    )

    @property
    def period_key(self) -> str:
        """Period as 'YYYY-MM'."""
        return f"{self.year:04d}-{self.month:02d}"


class IncomeAdjustments(BaseModel):
    """Ad-hoc income for the period (haberes variables)."""

    model_config = ConfigDict(extra="forbid")

    bonuses: int = Field(default=0, ge=0, description="Taxable bonuses")
    commissions: int = Field(default=0, ge=0, description="Taxable sales commissions")
    overtime_amount: int = Field(default=0, ge=0, description="Overtime pay (horas extra)")
    food_allowance: int = Field(default=0, ge=0, description="Colación (non-taxable)")
    transport_allowance: int = Field(default=0, ge=0, description="Movilización (non-taxable)")
    gratification: int = Field(
        default=0, ge=0,
        description="Contractual gratification; only used when the regime is 'contractual'",
    )


class DeductionAdjustments(BaseModel):
    """Voluntary deductions for the period (descuentos voluntarios)."""

    model_config = ConfigDict(extra="forbid")

    loan_deductions: int = Field(default=0, ge=0, description="Loan installments (caja, employer)")
    advance_payments: int = Field(default=0, ge=0, description="Salary advances (anticipos)")
    apv_amount: int = Field(default=0, ge=0, description="Voluntary pension savings (APV)")
    other_deductions: int = Field(default=0, ge=0, description="Any other agreed deduction")

    @property
    def total(self) -> int:
        return (
            self.loan_deductions
            + self.advance_payments
            + self.apv_amount
            + self.other_deductions
        )


# =============================================================================
# Pipeline stage outputs
# =============================================================================


class IncomeBreakdown(BaseModel):
    """Output of aggregate_income."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_salary: int = Field(..., ge=0, description="Base salary prorated by days worked")
    overtime_amount: int = Field(default=0, ge=0)
    bonuses: int = Field(default=0, ge=0)
    commissions: int = Field(default=0, ge=0)
    gratification: int = Field(default=0, ge=0, description="Contractual gratification used")
    legal_gratification_art50: int = Field(default=0, ge=0)
    food_allowance: int = Field(default=0, ge=0)
    transport_allowance: int = Field(default=0, ge=0)
    family_allowance: int = Field(default=0, ge=0)
    family_allowance_tramo: Optional[str] = Field(default=None)
    taxable_income: int = Field(..., ge=0, description="Total haberes imponibles")
    non_taxable_income: int = Field(..., ge=0, description="Total haberes no imponibles")
    warnings: List[LiquidationWarning] = Field(default_factory=list)


class Contributions(BaseModel):
    """Output of compute_contributions (employee-side social security)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    afp_code: AfpCode = Field(..., description="AFP actually used (after defaulting)")
    pension_rate: Decimal
    commission_rate: Decimal
    afp_amount: int = Field(..., ge=0)
    afp_commission_amount: int = Field(..., ge=0)
    health_institution_code: HealthInstitutionCode = Field(
        ..., description="Institution actually used (after defaulting)"
    )
    health_amount: int = Field(..., ge=0)
    unemployment_rate: Decimal
    unemployment_amount: int = Field(..., ge=0)
    taxable_base_capped: int = Field(..., ge=0, description="Base after the tope imponible")
    ceiling_applied: bool = False
    warnings: List[LiquidationWarning] = Field(default_factory=list)

    @property
    def total(self) -> int:
        """Total employee-side mandatory contributions."""
        return (
            self.afp_amount
            + self.afp_commission_amount
            + self.health_amount
            + self.unemployment_amount
        )


class EmployerCosts(BaseModel):
    """Employer-borne charges. Reported only; never part of the net pay."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sis_amount: int = Field(..., ge=0, description="Disability and survivor insurance (SIS)")
    unemployment_employer_amount: int = Field(..., ge=0, description="Employer AFC share")
    mutual_amount: int = Field(..., ge=0, description="Work accident insurance (mutual)")
    total: int = Field(..., ge=0)


# =============================================================================
# Result
# =============================================================================


class LiquidationResult(BaseModel):
    """Itemized monthly pay slip (liquidación de sueldo).

    total_gross_income and net_salary are computed by the assembler from the
    totals only, so the two balance identities hold by construction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    rut: str
    period: PeriodContext
    effective_period: str = Field(..., description="Parameter set used ('YYYY-MM')")

    # Haberes imponibles
    base_salary: int
    overtime_amount: int
    bonuses: int
    commissions: int
    gratification: int
    legal_gratification_art50: int
    total_taxable_income: int

    # Haberes no imponibles
    food_allowance: int
    transport_allowance: int
    family_allowance: int
    total_non_taxable_income: int

    total_gross_income: int

    # Descuentos legales
    afp_code: AfpCode
    afp_amount: int
    afp_commission_amount: int
    health_institution_code: HealthInstitutionCode
    health_amount: int
    unemployment_amount: int
    taxable_base_capped: int
    ceiling_applied: bool
    income_tax_amount: int

    # Descuentos voluntarios
    total_other_deductions: int

    total_deductions: int
    net_salary: int

    employer_costs: EmployerCosts
    warnings: List[LiquidationWarning] = Field(default_factory=list)

    @property
    def warning_codes(self) -> List[str]:
        return [w.code for w in self.warnings]
