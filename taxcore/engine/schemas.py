"""
schemas.py — tax engine Pydantic v2 data contracts.

Defines:
  - TaxRegime, AgeBracket enums
  - TaxSlab                  (one progressive band of a slab table)
  - SlabContribution         (line item: income and tax falling in one slab)
  - TaxCalculationResult     (slab tax → surcharge → cess for one regime)
  - AdvanceTaxInstallments   (four advance-tax payments with optional dates)
  - PenaltyDetail            (one violated 234B / 234C rule)
  - AdvanceTaxPenaltyResult  (234B + 234C interest with itemised rows)
  - RefundResult             (payments netted against liability)
  - RegimeComparisonResult   (old vs new with recommendation)
  - TaxPosition              (combined result handed to reporting layers)

All models are frozen: a result is built once per call and never mutated.
Every model loads back from its own model_dump() / model_dump_json() output;
the top slab bound travels as "unbounded" in JSON.
Monetary values are INR floats at full precision; only penalty interest is
rounded (to whole rupees) and that happens in advance_tax.py.
"""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Annotated, Any, List, Optional, Union

from pydantic import (
    BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, computed_field,
    model_validator,
)

from taxcore.engine.financial_year import FinancialYear

# Upper bound of the top slab. An explicit float sentinel rather than None so
# slab width arithmetic never touches a null.
UNBOUNDED = float("inf")

# JSON form of UNBOUNDED. JSON has no infinity and pydantic would otherwise write null.
UNBOUNDED_TAG = "unbounded"


def _bound_from_input(value: Any) -> Any:
    return UNBOUNDED if value == UNBOUNDED_TAG else value


def _bound_to_json(value: float) -> Union[float, str]:
    return UNBOUNDED_TAG if value == UNBOUNDED else value


IncomeBound = Annotated[
    float,
    BeforeValidator(_bound_from_input),
    PlainSerializer(_bound_to_json, when_used="json"),
]


class _ContractModel(BaseModel):
    """
    Frozen, extra="forbid" contract whose dumps load back.

    Computed fields appear in model_dump() output; on input they are dropped
    and recomputed rather than rejected as extra keys.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_computed_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            computed = cls.model_computed_fields
            if any(key in computed for key in data):
                return {key: value for key, value in data.items() if key not in computed}
        return data


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaxRegime(str, Enum):
    old = "old"
    new = "new"


class AgeBracket(str, Enum):
    under60 = "under60"
    sixty_79 = "60_79"
    eighty_plus = "80plus"


# ---------------------------------------------------------------------------
# Slabs
# ---------------------------------------------------------------------------

class TaxSlab(BaseModel):
    """A contiguous income band taxed at a single marginal rate."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    min_income: float = Field(..., ge=0)
    max_income: IncomeBound = UNBOUNDED    # UNBOUNDED for the top band
    rate_percent: float = Field(..., ge=0, le=100)
    description: str = ""

    @model_validator(mode="after")
    def _check_bounds(self) -> "TaxSlab":
        if self.max_income <= self.min_income:
            raise ValueError(
                f"Slab upper bound {self.max_income} must exceed lower bound {self.min_income}"
            )
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.max_income == UNBOUNDED

    @property
    def width(self) -> float:
        return self.max_income - self.min_income


class SlabContribution(BaseModel):
    """Income and tax attributed to one slab. Only slabs that received income appear."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    description: str
    income_in_slab: float
    rate_percent: float
    tax_amount: float
    min_income: float
    max_income: IncomeBound


# ---------------------------------------------------------------------------
# TaxCalculationResult: one regime, fully itemised
# ---------------------------------------------------------------------------

class TaxCalculationResult(BaseModel):
    """
    Slab tax, surcharge and cess for one (income, year, regime, age).

    Computation sequence:
      1. total_tax            = Σ slab contributions
      2. surcharge_amount     = total_tax × surcharge_rate / 100   (step on taxable income)
      3. total_with_surcharge = total_tax + surcharge_amount
      4. cess_amount          = 4% of total_with_surcharge          ← never of income
      5. total_with_cess      = total_with_surcharge + cess_amount
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    taxable_income: float
    financial_year: str                  # "2024-25"
    regime: TaxRegime
    age: int
    age_bracket: AgeBracket
    slab_breakdown: List[SlabContribution] = []

    total_tax: float
    surcharge_rate: float                # percent, e.g. 10.0
    surcharge_amount: float
    total_with_surcharge: float
    cess_amount: float
    total_with_cess: float
    effective_rate_percent: float        # 0 when taxable_income is 0


# ---------------------------------------------------------------------------
# Advance tax
# ---------------------------------------------------------------------------

class AdvanceTaxInstallments(_ContractModel):
    """
    Advance tax paid against the four statutory due dates.

    Each amount may carry the date it was actually paid. An amount without a
    date is taken as paid on its own due date (15-Jun / 15-Sep / 15-Dec / 15-Mar).
    """
    first_installment: float = Field(default=0, ge=0)     # due 15th June, 15% cumulative
    second_installment: float = Field(default=0, ge=0)    # due 15th September, 45%
    third_installment: float = Field(default=0, ge=0)     # due 15th December, 75%
    fourth_installment: float = Field(default=0, ge=0)    # due 15th March, 100%

    first_installment_date: Optional[date] = None
    second_installment_date: Optional[date] = None
    third_installment_date: Optional[date] = None
    fourth_installment_date: Optional[date] = None

    @computed_field
    @property
    def total_advance_tax_paid(self) -> float:
        return (
            self.first_installment
            + self.second_installment
            + self.third_installment
            + self.fourth_installment
        )

    def payments(self, financial_year: Union[FinancialYear, str]) -> list[tuple[date, float]]:
        """(effective payment date, amount) for every non-zero installment."""
        fy = FinancialYear.coerce(financial_year)
        amounts = (
            self.first_installment,
            self.second_installment,
            self.third_installment,
            self.fourth_installment,
        )
        paid_on = (
            self.first_installment_date,
            self.second_installment_date,
            self.third_installment_date,
            self.fourth_installment_date,
        )
        return [
            (paid or due, amount)
            for amount, paid, due in zip(amounts, paid_on, fy.installment_due_dates)
            if amount > 0
        ]

    def paid_by(self, cutoff: date, financial_year: Union[FinancialYear, str]) -> float:
        """Sum of installments whose effective payment date is on or before `cutoff`."""
        return sum(
            amount for paid_on, amount in self.payments(financial_year) if paid_on <= cutoff
        )


class PenaltyDetail(BaseModel):
    """One violated advance-tax rule. interest_amount is already in whole rupees."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    installment_period: str
    required_amount: float
    actual_amount: float
    shortfall: float
    monthly_rate_percent: float
    day_count: int
    interest_amount: float
    section: str                         # "234B" | "234C"
    description: str


class AdvanceTaxPenaltyResult(_ContractModel):
    """
    Section 234B (annual 90% rule) and 234C (installment deferment) interest.

    Both components are 0 and penalty_details is empty when
    total_tax_liability - tds_deducted <= ₹10,000.
    """
    # Inputs echoed back for reporting
    total_tax_liability: float
    tds_deducted: float
    advance_tax_paid: AdvanceTaxInstallments
    filing_date: date
    financial_year: str

    section_234b_interest: float = 0
    section_234c_interest: float = 0
    penalty_details: List[PenaltyDetail] = []

    @computed_field
    @property
    def total_penalty(self) -> float:
        return max(0.0, self.section_234b_interest + self.section_234c_interest)

    @computed_field
    @property
    def has_penalties(self) -> bool:
        return self.total_penalty > 0


# ---------------------------------------------------------------------------
# RefundResult
# ---------------------------------------------------------------------------

class RefundResult(_ContractModel):
    """
    Taxes paid netted against liability. At most one of refund_amount /
    additional_due is non-zero, and refund_amount - additional_due equals
    total_paid - total_liability.
    """
    total_liability: float               # includes advance-tax interest when penalties were folded in
    tds_deducted: float
    advance_tax_paid: float
    self_assessment_paid: float
    refund_amount: float
    additional_due: float
    is_refund_due: bool

    advance_tax_penalties: Optional[AdvanceTaxPenaltyResult] = None

    @computed_field
    @property
    def total_paid(self) -> float:
        return self.tds_deducted + self.advance_tax_paid + self.self_assessment_paid


# ---------------------------------------------------------------------------
# RegimeComparisonResult
# ---------------------------------------------------------------------------

class RegimeComparisonResult(BaseModel):
    """Output of compare_regimes(). Ties go to the new regime."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    old_regime: TaxCalculationResult
    new_regime: TaxCalculationResult
    recommended_regime: TaxRegime
    savings_amount: float                # abs(old.total_with_cess - new.total_with_cess)
    summary: str


# ---------------------------------------------------------------------------
# TaxPosition: combined result of compute_tax_position()
# ---------------------------------------------------------------------------

class TaxPosition(BaseModel):
    """Tax, refund/demand and advance-tax interest for one request, surfaced flat for reporting."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    resolved_financial_year: str         # differs from the request only after a year fallback
    tax_calculation: TaxCalculationResult
    refund: RefundResult

    section_234b_interest: float = 0
    section_234c_interest: float = 0
    total_advance_tax_penalties: float = 0
    has_advance_tax_penalties: bool = False
    total_liability_with_penalties: float

    advance_tax_penalties: Optional[AdvanceTaxPenaltyResult] = None


__all__ = [
    "UNBOUNDED",
    "UNBOUNDED_TAG",
    "TaxRegime",
    "AgeBracket",
    "TaxSlab",
    "SlabContribution",
    "TaxCalculationResult",
    "AdvanceTaxInstallments",
    "PenaltyDetail",
    "AdvanceTaxPenaltyResult",
    "RefundResult",
    "RegimeComparisonResult",
    "TaxPosition",
]
