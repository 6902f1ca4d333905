"""
Slab table provider tests — age brackets, table invariants, lookup failures.
"""
from __future__ import annotations

import pytest

from taxcore.engine.errors import UnsupportedPeriodError
from taxcore.engine.schemas import UNBOUNDED, AgeBracket, TaxRegime, TaxSlab
from taxcore.engine.slab_tables import (
    DEFAULT_SLAB_TABLES, SlabTableProvider, age_bracket_for, format_inr, slabs_from_bands,
)


# ===========================================================================
# Age brackets
# ===========================================================================

@pytest.mark.parametrize(
    "age,expected",
    [
        (0, AgeBracket.under60),
        (59, AgeBracket.under60),
        (60, AgeBracket.sixty_79),
        (79, AgeBracket.sixty_79),
        (80, AgeBracket.eighty_plus),
        (104, AgeBracket.eighty_plus),
    ],
)
def test_age_bracket_boundaries(age: int, expected: AgeBracket) -> None:
    assert age_bracket_for(age) is expected


def test_negative_age_rejected() -> None:
    with pytest.raises(ValueError):
        age_bracket_for(-1)


# ===========================================================================
# Default table invariants
# ===========================================================================

@pytest.mark.parametrize("financial_year", ["2022-23", "2023-24", "2024-25", "2025-26"])
@pytest.mark.parametrize("regime", [TaxRegime.old, TaxRegime.new])
@pytest.mark.parametrize("age", [30, 65, 85])
def test_default_tables_contiguous_and_unbounded(
    financial_year: str, regime: TaxRegime, age: int,
) -> None:
    slabs = DEFAULT_SLAB_TABLES.get_slabs(financial_year, regime, age)

    assert slabs, "supported year must never return an empty table"
    assert slabs[0].min_income == 0
    for lower, upper in zip(slabs, slabs[1:]):
        assert upper.min_income == lower.max_income
        assert not lower.is_unbounded
    assert slabs[-1].is_unbounded
    assert slabs[-1].max_income == UNBOUNDED


def test_new_regime_is_age_invariant() -> None:
    under60 = DEFAULT_SLAB_TABLES.get_slabs("2024-25", TaxRegime.new, 30)
    senior = DEFAULT_SLAB_TABLES.get_slabs("2024-25", TaxRegime.new, 65)
    super_senior = DEFAULT_SLAB_TABLES.get_slabs("2024-25", TaxRegime.new, 85)
    assert under60 == senior == super_senior


def test_old_regime_zero_band_rises_with_age() -> None:
    zero_bands = [
        DEFAULT_SLAB_TABLES.get_slabs("2024-25", TaxRegime.old, age)[0].max_income
        for age in (30, 65, 85)
    ]
    assert zero_bands == [250_000, 300_000, 500_000]


def test_budget_2025_new_regime_breakpoints() -> None:
    slabs = DEFAULT_SLAB_TABLES.get_slabs("2025-26", TaxRegime.new, 30)
    assert [s.max_income for s in slabs[:-1]] == [
        400_000, 800_000, 1_200_000, 1_600_000, 2_000_000, 2_400_000,
    ]
    assert [s.rate_percent for s in slabs] == [0, 5, 10, 15, 20, 25, 30]


def test_slab_descriptions() -> None:
    slabs = DEFAULT_SLAB_TABLES.get_slabs("2024-25", TaxRegime.new, 30)
    assert slabs[0].description == "Up to ₹3,00,000"
    assert slabs[1].description == "₹3,00,001 to ₹7,00,000"
    assert slabs[-1].description == "Above ₹15,00,000"


def test_supported_financial_years_newest_first() -> None:
    labels = [fy.label for fy in DEFAULT_SLAB_TABLES.supported_financial_years()]
    assert labels == ["2025-26", "2024-25", "2023-24", "2022-23"]
    assert DEFAULT_SLAB_TABLES.latest_financial_year().label == "2025-26"


# ===========================================================================
# Lookup failures and custom tables
# ===========================================================================

def test_unknown_year_reports_absence_without_fallback() -> None:
    with pytest.raises(UnsupportedPeriodError) as exc_info:
        DEFAULT_SLAB_TABLES.get_slabs("2030-31", TaxRegime.old, 70)
    err = exc_info.value
    assert (err.financial_year, err.regime, err.age_bracket) == ("2030-31", "old", "60_79")


def test_missing_regime_in_custom_table() -> None:
    provider = SlabTableProvider({
        (2024, TaxRegime.new, AgeBracket.under60): slabs_from_bands([(300_000, 0), (UNBOUNDED, 10)]),
    })
    assert len(provider.get_slabs("2024-25", "new", 30)) == 2
    with pytest.raises(UnsupportedPeriodError):
        provider.get_slabs("2024-25", "old", 30)


def test_non_contiguous_table_rejected() -> None:
    gap = (
        TaxSlab(min_income=0, max_income=300_000, rate_percent=0),
        TaxSlab(min_income=400_000, rate_percent=10),
    )
    with pytest.raises(ValueError):
        SlabTableProvider({(2024, TaxRegime.new, AgeBracket.under60): gap})


def test_bounded_top_slab_rejected() -> None:
    bounded = (TaxSlab(min_income=0, max_income=300_000, rate_percent=0),)
    with pytest.raises(ValueError):
        SlabTableProvider({(2024, TaxRegime.new, AgeBracket.under60): bounded})


def test_slab_upper_bound_must_exceed_lower() -> None:
    with pytest.raises(ValueError):
        TaxSlab(min_income=500_000, max_income=500_000, rate_percent=5)


def test_empty_provider_has_no_latest_year() -> None:
    with pytest.raises(UnsupportedPeriodError):
        SlabTableProvider({}).latest_financial_year()


@pytest.mark.parametrize(
    "amount,expected",
    [
        (0, "₹0"),
        (500, "₹500"),
        (250_000, "₹2,50,000"),
        (1_500_000, "₹15,00,000"),
        (12_345_678, "₹1,23,45,678"),
        (999.6, "₹1,000"),
        (31_200.4, "₹31,200"),
    ],
)
def test_format_inr_indian_grouping(amount: float, expected: str) -> None:
    assert format_inr(amount) == expected
