"""
schemas.py — intake Pydantic v2 request contracts.

Defines:
  - TaxComputationRequest     (taxable income + payments → compute_tax_position)
  - RegimeComparisonRequest   (single taxable income + old-regime deductions)

These are the narrow "taxable income + payments" value structs handed to the
engine. Gross salary, Form 16 parsing and deduction itemisation happen
upstream; by the time a request is built, taxable income is a single number.

extra='forbid' ensures unknown fields raise a ValidationError.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from taxcore.config import settings
from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.schemas import AdvanceTaxInstallments, TaxRegime

MIN_AGE = 18
MAX_AGE = 120


class TaxComputationRequest(BaseModel):
    """
    Everything compute_tax_position() needs for one taxpayer and year.

    financial_year accepts "2024-25" or "24-25" and is parsed once, here.
    When advance_tax_paid is supplied without filing_date, interest is computed
    as if the return is filed on the statutory due date (31-July of the AY).
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    taxable_income: float = Field(
        ..., ge=0,
        description="Taxable income in INR after all regime-appropriate deductions.",
    )
    financial_year: FinancialYear = Field(
        ...,
        description="Financial year, e.g. '2024-25'.",
    )
    regime: TaxRegime = Field(
        default=TaxRegime.new,
        description="Tax regime the taxable income was computed for.",
    )
    age: int = Field(
        default_factory=lambda: settings.default_age, ge=MIN_AGE, le=MAX_AGE,
        description="Taxpayer age on the last day of the financial year.",
    )
    tds_deducted: float = Field(
        default=0, ge=0,
        description="Tax deducted at source (Form 16 / 26AS).",
    )
    advance_tax_paid: Optional[AdvanceTaxInstallments] = Field(
        default=None,
        description="Advance tax installments with optional payment dates.",
    )
    self_assessment_tax_paid: float = Field(
        default=0, ge=0,
        description="Self-assessment tax paid before filing.",
    )
    filing_date: Optional[date] = Field(
        default=None,
        description="Date the return is filed. Enables Section 234B/234C interest.",
    )

    @property
    def wants_penalties(self) -> bool:
        return self.advance_tax_paid is not None or self.filing_date is not None


class RegimeComparisonRequest(BaseModel):
    """Old vs new comparison from one taxable income and the old-regime deductions."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    taxable_income: float = Field(
        ..., ge=0,
        description="Taxable income under the new regime.",
    )
    financial_year: FinancialYear
    age: int = Field(default_factory=lambda: settings.default_age, ge=MIN_AGE, le=MAX_AGE)
    old_regime_deductions: float = Field(
        default=0, ge=0,
        description="Deductions available only under the old regime (80C, 80D, HRA, 24b …).",
    )

    @property
    def old_regime_taxable_income(self) -> float:
        return max(0.0, self.taxable_income - self.old_regime_deductions)


__all__ = ["TaxComputationRequest", "RegimeComparisonRequest", "MIN_AGE", "MAX_AGE"]
