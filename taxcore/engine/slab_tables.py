"""
Slab table provider — progressive rate bands per (financial year, regime, age bracket).

Tables are built once at import into an immutable mapping keyed by the
structured tuple (start_year, TaxRegime, AgeBracket). The provider only
reports absence (UnsupportedPeriodError); falling back to another year is a
caller decision (see tax_position.py and settings.fallback_to_latest_year).

Configured years:
  FY 2022-23  new regime 2.5L/5L/7.5L/10L/12.5L/15L breakpoints
  FY 2023-24  same bands as FY 2024-25
  FY 2024-25  new regime 3L/7L/10L/12L/15L breakpoints
  FY 2025-26  new regime 4L/8L/12L/16L/20L/24L breakpoints (Budget 2025)
Old regime bands are unchanged across all four years. The new regime is
age-invariant; the old regime raises the zero band to 3L for seniors (60-79)
and 5L for super seniors (80+).
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from taxcore.engine.errors import UnsupportedPeriodError
from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.schemas import UNBOUNDED, AgeBracket, TaxRegime, TaxSlab

logger = logging.getLogger(__name__)

SlabKey = tuple[int, TaxRegime, AgeBracket]

# ===========================================================================
# AGE BRACKET BOUNDARIES
# ===========================================================================

SENIOR_CITIZEN_AGE       = 60
SUPER_SENIOR_CITIZEN_AGE = 80

# ===========================================================================
# BAND DEFINITIONS: list[tuple[ceiling, rate_percent]]
# ===========================================================================

OLD_REGIME_BANDS: dict[AgeBracket, list[tuple[float, float]]] = {
    AgeBracket.under60: [
        (250_000,   0),     # 0–2.5L: 0%
        (500_000,   5),     # 2.5–5L: 5%
        (1_000_000, 20),    # 5–10L: 20%
        (UNBOUNDED, 30),    # >10L: 30%
    ],
    AgeBracket.sixty_79: [
        (300_000,   0),     # 0–3L: 0%
        (500_000,   5),
        (1_000_000, 20),
        (UNBOUNDED, 30),
    ],
    AgeBracket.eighty_plus: [
        (500_000,   0),     # 0–5L: 0%
        (1_000_000, 20),
        (UNBOUNDED, 30),
    ],
}

NEW_REGIME_BANDS_FY2022_23: list[tuple[float, float]] = [
    (250_000,   0),
    (500_000,   5),
    (750_000,   10),
    (1_000_000, 15),
    (1_250_000, 20),
    (1_500_000, 25),
    (UNBOUNDED, 30),
]

NEW_REGIME_BANDS_FY2024_25: list[tuple[float, float]] = [
    (300_000,   0),     # 0–3L: 0%
    (700_000,   5),     # 3–7L: 5%
    (1_000_000, 10),    # 7–10L: 10%
    (1_200_000, 15),    # 10–12L: 15%
    (1_500_000, 20),    # 12–15L: 20%
    (UNBOUNDED, 30),    # >15L: 30%
]

NEW_REGIME_BANDS_FY2025_26: list[tuple[float, float]] = [
    (400_000,   0),     # 0–4L: 0%
    (800_000,   5),     # 4–8L: 5%
    (1_200_000, 10),    # 8–12L: 10%
    (1_600_000, 15),    # 12–16L: 15%
    (2_000_000, 20),    # 16–20L: 20%
    (2_400_000, 25),    # 20–24L: 25%
    (UNBOUNDED, 30),    # >24L: 30%
]

# FY start year → new regime bands
NEW_REGIME_BANDS_BY_YEAR: dict[int, list[tuple[float, float]]] = {
    2022: NEW_REGIME_BANDS_FY2022_23,
    2023: NEW_REGIME_BANDS_FY2024_25,
    2024: NEW_REGIME_BANDS_FY2024_25,
    2025: NEW_REGIME_BANDS_FY2025_26,
}


# ===========================================================================
# INTERNAL HELPERS
# ===========================================================================

def format_inr(amount: float) -> str:
    """Whole-rupee amount with Indian digit grouping: 1500000 → '₹15,00,000'."""
    digits = str(int(round(amount)))
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return "₹" + ",".join(groups + [tail])


def _describe(floor: float, ceiling: float) -> str:
    if ceiling == UNBOUNDED:
        return f"Above {format_inr(floor)}" if floor else "All income"
    if floor == 0:
        return f"Up to {format_inr(ceiling)}"
    return f"{format_inr(floor + 1)} to {format_inr(ceiling)}"


def slabs_from_bands(bands: Sequence[tuple[float, float]]) -> tuple[TaxSlab, ...]:
    """Turn (ceiling, rate_percent) pairs into contiguous TaxSlabs starting at 0."""
    slabs: list[TaxSlab] = []
    floor = 0.0
    for ceiling, rate in bands:
        slabs.append(TaxSlab(
            min_income=floor,
            max_income=ceiling,
            rate_percent=rate,
            description=_describe(floor, ceiling),
        ))
        floor = ceiling
    return tuple(slabs)


def _check_table(key: SlabKey, slabs: Sequence[TaxSlab]) -> tuple[TaxSlab, ...]:
    """
    Slabs must start at 0, be contiguous and ascending, and end unbounded.
    An empty table is accepted here; calculate_tax reports it as NoSlabsConfiguredError.
    """
    ordered = tuple(slabs)
    if not ordered:
        return ordered
    if ordered[0].min_income != 0:
        raise ValueError(f"Slab table {key} must start at 0")
    for lower, upper in zip(ordered, ordered[1:]):
        if upper.min_income != lower.max_income:
            raise ValueError(
                f"Slab table {key} is not contiguous at {lower.max_income} → {upper.min_income}"
            )
    if not ordered[-1].is_unbounded:
        raise ValueError(f"Slab table {key} must end with an unbounded slab")
    return ordered


def age_bracket_for(age: int) -> AgeBracket:
    """Below 60 → under60; 60–79 → 60_79; 80 and above → 80plus."""
    if age < 0:
        raise ValueError(f"Age cannot be negative: {age}")
    if age >= SUPER_SENIOR_CITIZEN_AGE:
        return AgeBracket.eighty_plus
    if age >= SENIOR_CITIZEN_AGE:
        return AgeBracket.sixty_79
    return AgeBracket.under60


# ===========================================================================
# PROVIDER
# ===========================================================================

class SlabTableProvider:
    """Read-only lookup of slab tables; safe to share between threads."""

    def __init__(self, tables: Mapping[SlabKey, Sequence[TaxSlab]]) -> None:
        checked = {key: _check_table(key, slabs) for key, slabs in tables.items()}
        self._tables: Mapping[SlabKey, tuple[TaxSlab, ...]] = MappingProxyType(checked)

    def get_slabs(
        self,
        financial_year: Union[FinancialYear, str],
        regime: Union[TaxRegime, str],
        age: int,
    ) -> tuple[TaxSlab, ...]:
        fy = FinancialYear.coerce(financial_year)
        regime = TaxRegime(regime)
        bracket = age_bracket_for(age)
        key = (fy.start_year, regime, bracket)
        try:
            slabs = self._tables[key]
        except KeyError:
            raise UnsupportedPeriodError(fy.label, regime.value, bracket.value) from None
        logger.debug(
            "Slab table fy=%s regime=%s bracket=%s slabs=%d",
            fy.label, regime.value, bracket.value, len(slabs),
        )
        return slabs

    def supported_financial_years(self) -> list[FinancialYear]:
        """Configured years, newest first."""
        years = sorted({start_year for start_year, _, _ in self._tables}, reverse=True)
        return [FinancialYear(start_year=year) for year in years]

    def latest_financial_year(self) -> FinancialYear:
        years = self.supported_financial_years()
        if not years:
            raise UnsupportedPeriodError("any")
        return years[0]


def build_default_slab_tables() -> SlabTableProvider:
    tables: dict[SlabKey, tuple[TaxSlab, ...]] = {}
    old_slabs = {bracket: slabs_from_bands(bands) for bracket, bands in OLD_REGIME_BANDS.items()}
    for start_year, new_bands in NEW_REGIME_BANDS_BY_YEAR.items():
        new_slabs = slabs_from_bands(new_bands)
        for bracket in AgeBracket:
            tables[(start_year, TaxRegime.new, bracket)] = new_slabs
            tables[(start_year, TaxRegime.old, bracket)] = old_slabs[bracket]
    return SlabTableProvider(tables)


# Built once at import; pass another provider via slab_tables= to override.
DEFAULT_SLAB_TABLES = build_default_slab_tables()


__all__ = [
    "SlabKey",
    "SlabTableProvider",
    "DEFAULT_SLAB_TABLES",
    "build_default_slab_tables",
    "slabs_from_bands",
    "age_bracket_for",
    "format_inr",
    "SENIOR_CITIZEN_AGE",
    "SUPER_SENIOR_CITIZEN_AGE",
]
