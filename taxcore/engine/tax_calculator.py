"""
Tax calculator — slab tax, then surcharge, then cess.
Pure Python, deterministic. Same input → same output, no rounding.

IMPORTANT: surcharge is a literal step function of taxable income applied to
the WHOLE slab tax. No marginal relief is applied: ₹50,00,001 of income pays
the full 10% surcharge. Do not "fix" this here.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from taxcore.engine.errors import NoSlabsConfiguredError
from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.schemas import SlabContribution, TaxCalculationResult, TaxRegime
from taxcore.engine.slab_tables import DEFAULT_SLAB_TABLES, SlabTableProvider, age_bracket_for

logger = logging.getLogger(__name__)

# ===========================================================================
# SURCHARGE TIERS: list[tuple[income_threshold, rate_percent]], highest first
# Rate applies when taxable_income is strictly ABOVE the threshold.
# ===========================================================================

SURCHARGE_50L  = 5_000_000
SURCHARGE_1CR  = 10_000_000
SURCHARGE_2CR  = 20_000_000
SURCHARGE_5CR  = 50_000_000

NEW_REGIME_SURCHARGE_TIERS: list[tuple[float, float]] = [
    (SURCHARGE_2CR, 25),    # >2Cr: 25%, new regime cap
    (SURCHARGE_1CR, 15),    # >1Cr: 15%
    (SURCHARGE_50L, 10),    # >50L: 10%
]

OLD_REGIME_SURCHARGE_TIERS: list[tuple[float, float]] = [
    (SURCHARGE_5CR, 37),    # >5Cr: 37%, old regime only
    (SURCHARGE_2CR, 25),
    (SURCHARGE_1CR, 15),
    (SURCHARGE_50L, 10),
]

CESS_RATE_PERCENT = 4     # Health & Education cess on (tax + surcharge)


def surcharge_rate_for(taxable_income: float, regime: Union[TaxRegime, str]) -> float:
    """Surcharge percent for the income's tier; 0 at or below ₹50L."""
    tiers = (
        NEW_REGIME_SURCHARGE_TIERS
        if TaxRegime(regime) is TaxRegime.new
        else OLD_REGIME_SURCHARGE_TIERS
    )
    for threshold, rate in tiers:
        if taxable_income > threshold:
            return float(rate)
    return 0.0


def calculate_tax(
    taxable_income: float,
    financial_year: Union[FinancialYear, str],
    regime: Union[TaxRegime, str] = TaxRegime.new,
    age: int = 30,
    *,
    slab_tables: Optional[SlabTableProvider] = None,
) -> TaxCalculationResult:
    """
    Apply the (year, regime, age) slab table to taxable_income, then surcharge and cess.

    Precondition: taxable_income >= 0. Clamping negative income is the caller's job.

    Raises:
        UnsupportedPeriodError: no slab table for the year/regime/age bracket.
        NoSlabsConfiguredError: table registered but empty.
        ValueError: negative taxable_income or age.
    """
    if taxable_income < 0:
        raise ValueError(f"Taxable income must not be negative: {taxable_income}")

    fy = FinancialYear.coerce(financial_year)
    regime = TaxRegime(regime)
    provider = slab_tables or DEFAULT_SLAB_TABLES

    # Step 1: Slabs for the key
    slabs = provider.get_slabs(fy, regime, age)
    if not slabs:
        raise NoSlabsConfiguredError(
            f"No tax slabs found for financial year {fy.label}, regime {regime.value}, age {age}"
        )

    # Step 2: Walk slabs ascending, attributing income band by band
    remaining = float(taxable_income)
    total_tax = 0.0
    breakdown: list[SlabContribution] = []
    for slab in sorted(slabs, key=lambda s: s.min_income):
        if remaining <= 0:
            break
        if slab.min_income >= taxable_income:
            continue
        income_in_slab = min(remaining, slab.width)
        if income_in_slab <= 0:
            continue
        slab_tax = income_in_slab * slab.rate_percent / 100
        total_tax += slab_tax
        remaining -= income_in_slab
        breakdown.append(SlabContribution(
            description=slab.description,
            income_in_slab=income_in_slab,
            rate_percent=slab.rate_percent,
            tax_amount=slab_tax,
            min_income=slab.min_income,
            max_income=slab.max_income,
        ))
        logger.debug("Slab %s income=%.2f tax=%.2f", slab.description, income_in_slab, slab_tax)

    # Step 3: Surcharge on the whole slab tax (no marginal relief)
    surcharge_rate = surcharge_rate_for(taxable_income, regime)
    surcharge_amount = total_tax * surcharge_rate / 100
    total_with_surcharge = total_tax + surcharge_amount

    # Step 4: Cess on tax + surcharge, never on income
    cess_amount = total_with_surcharge * CESS_RATE_PERCENT / 100
    total_with_cess = total_with_surcharge + cess_amount

    # Step 5: Effective rate
    effective_rate = total_with_cess / taxable_income * 100 if taxable_income > 0 else 0.0

    logger.info(
        "Tax calculated fy=%s regime=%s income=%.2f total_with_cess=%.2f",
        fy.label, regime.value, taxable_income, total_with_cess,
    )

    return TaxCalculationResult(
        taxable_income=taxable_income,
        financial_year=fy.label,
        regime=regime,
        age=age,
        age_bracket=age_bracket_for(age),
        slab_breakdown=breakdown,
        total_tax=total_tax,
        surcharge_rate=surcharge_rate,
        surcharge_amount=surcharge_amount,
        total_with_surcharge=total_with_surcharge,
        cess_amount=cess_amount,
        total_with_cess=total_with_cess,
        effective_rate_percent=effective_rate,
    )


__all__ = [
    "calculate_tax",
    "surcharge_rate_for",
    "NEW_REGIME_SURCHARGE_TIERS",
    "OLD_REGIME_SURCHARGE_TIERS",
    "CESS_RATE_PERCENT",
]
