"""
Regime comparator — runs the tax calculator once per regime and recommends
the cheaper one. Ties go to the New Regime (no investment lock-ins needed).
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.schemas import RegimeComparisonResult, TaxCalculationResult, TaxRegime
from taxcore.engine.slab_tables import SlabTableProvider, format_inr
from taxcore.engine.tax_calculator import calculate_tax

logger = logging.getLogger(__name__)


def _summary(
    old: TaxCalculationResult,
    new: TaxCalculationResult,
    recommended: TaxRegime,
    savings: float,
    old_regime_deductions: float,
) -> str:
    lines = [
        f"Old Regime Tax: {format_inr(old.total_with_cess)}",
        f"New Regime Tax: {format_inr(new.total_with_cess)}",
        f"Recommended: {recommended.value.capitalize()} Tax Regime",
    ]
    if savings > 0:
        lines.append(f"Tax Savings: {format_inr(savings)}")
    else:
        lines.append("Both regimes result in similar tax liability")
    if old_regime_deductions > 0:
        lines.append(f"Old Regime deductions claimed: {format_inr(old_regime_deductions)}")
    return "\n".join(lines)


def compare_regimes(
    taxable_income_old: float,
    taxable_income_new: float,
    financial_year: Union[FinancialYear, str],
    age: int = 30,
    old_regime_deductions: float = 0,
    *,
    slab_tables: Optional[SlabTableProvider] = None,
) -> RegimeComparisonResult:
    """
    Compare old and new regime tax.

    taxable_income_old must already have old-regime deductions subtracted;
    old_regime_deductions is reported in the summary only.
    """
    fy = FinancialYear.coerce(financial_year)

    # Step 1: Calculate both regimes
    old = calculate_tax(taxable_income_old, fy, TaxRegime.old, age, slab_tables=slab_tables)
    new = calculate_tax(taxable_income_new, fy, TaxRegime.new, age, slab_tables=slab_tables)

    # Step 2: Determine winner, tie → New Regime
    recommended = TaxRegime.new if new.total_with_cess <= old.total_with_cess else TaxRegime.old
    savings = abs(old.total_with_cess - new.total_with_cess)

    logger.info(
        "Regimes compared fy=%s old=%.2f new=%.2f recommended=%s",
        fy.label, old.total_with_cess, new.total_with_cess, recommended.value,
    )

    return RegimeComparisonResult(
        old_regime=old,
        new_regime=new,
        recommended_regime=recommended,
        savings_amount=savings,
        summary=_summary(old, new, recommended, savings, old_regime_deductions),
    )


__all__ = ["compare_regimes"]
