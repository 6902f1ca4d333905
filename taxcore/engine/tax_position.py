"""
Combined tax position — the one call a reporting or API layer makes.

    request → business rules → calculate_tax → refund (with 234B/234C when
    advance tax or a filing date is supplied) → TaxPosition

Year fallback lives here, not in the slab provider: with
settings.fallback_to_latest_year enabled, an unconfigured year is retried
with the latest configured one and a warning is logged.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from taxcore.config import settings
from taxcore.engine.comparator import compare_regimes
from taxcore.engine.errors import TaxEngineError, UnsupportedPeriodError
from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.refund import calculate_refund, calculate_refund_with_penalties
from taxcore.engine.schemas import (
    AdvanceTaxInstallments, RegimeComparisonResult, TaxPosition,
)
from taxcore.engine.slab_tables import DEFAULT_SLAB_TABLES, SlabTableProvider
from taxcore.engine.tax_calculator import calculate_tax
from taxcore.intake.schemas import RegimeComparisonRequest, TaxComputationRequest
from taxcore.intake.validator import validate_business_rules

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _with_year_fallback(
    fy: FinancialYear,
    provider: SlabTableProvider,
    compute: Callable[[FinancialYear], T],
) -> tuple[FinancialYear, T]:
    """Run compute(fy); on UnsupportedPeriodError optionally retry with the latest year."""
    try:
        return fy, compute(fy)
    except UnsupportedPeriodError:
        if not settings.fallback_to_latest_year:
            raise
        latest = provider.latest_financial_year()
        if latest == fy:
            raise
        logger.warning(
            "No slab table for FY %s, falling back to FY %s", fy.label, latest.label,
        )
        return latest, compute(latest)


def compute_tax_position(
    request: TaxComputationRequest,
    *,
    slab_tables: Optional[SlabTableProvider] = None,
) -> TaxPosition:
    """
    Tax, refund/demand and advance-tax interest for one request.

    Raises:
        BusinessRuleError: installment or filing dates violate intake rules.
        UnsupportedPeriodError: year not configured (and fallback disabled).
    """
    provider = slab_tables or DEFAULT_SLAB_TABLES
    validate_business_rules(request)

    try:
        fy, tax = _with_year_fallback(
            request.financial_year,
            provider,
            lambda year: calculate_tax(
                request.taxable_income, year, request.regime, request.age,
                slab_tables=provider,
            ),
        )

        if request.wants_penalties:
            installments = request.advance_tax_paid or AdvanceTaxInstallments()
            # Penalty dates follow the requested year; only the slab table may fall back
            filing_date = request.filing_date or request.financial_year.filing_due_date
            refund = calculate_refund_with_penalties(
                tax,
                request.tds_deducted,
                installments,
                request.self_assessment_tax_paid,
                filing_date,
                request.financial_year,
            )
        else:
            refund = calculate_refund(
                tax, request.tds_deducted, 0, request.self_assessment_tax_paid,
            )
    except TaxEngineError:
        raise
    except Exception:
        logger.exception(
            "Error calculating tax position income=%.2f fy=%s",
            request.taxable_income, request.financial_year.label,
        )
        raise

    penalties = refund.advance_tax_penalties
    return TaxPosition(
        resolved_financial_year=fy.label,
        tax_calculation=tax,
        refund=refund,
        section_234b_interest=penalties.section_234b_interest if penalties else 0,
        section_234c_interest=penalties.section_234c_interest if penalties else 0,
        total_advance_tax_penalties=penalties.total_penalty if penalties else 0,
        has_advance_tax_penalties=penalties.has_penalties if penalties else False,
        total_liability_with_penalties=refund.total_liability,
        advance_tax_penalties=penalties,
    )


def compare_regimes_for_request(
    request: RegimeComparisonRequest,
    *,
    slab_tables: Optional[SlabTableProvider] = None,
) -> RegimeComparisonResult:
    """Old regime taxable income = max(0, taxable_income - old_regime_deductions)."""
    provider = slab_tables or DEFAULT_SLAB_TABLES
    _, comparison = _with_year_fallback(
        request.financial_year,
        provider,
        lambda year: compare_regimes(
            request.old_regime_taxable_income,
            request.taxable_income,
            year,
            request.age,
            request.old_regime_deductions,
            slab_tables=provider,
        ),
    )
    return comparison


__all__ = ["compute_tax_position", "compare_regimes_for_request"]
