"""
Per-year tax configuration — standard deduction, exemption limits, surcharge and cess.

Upstream form collection uses these to turn gross salary into the taxable
income this engine consumes. Lookup is exact: an unconfigured year raises
UnsupportedPeriodError and the caller picks a fallback if it wants one.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Union

from pydantic import BaseModel, ConfigDict

from taxcore.engine.errors import UnsupportedPeriodError
from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.tax_calculator import CESS_RATE_PERCENT, NEW_REGIME_SURCHARGE_TIERS


class TaxConfiguration(BaseModel):
    """Limits and rates for one financial year."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    financial_year: str
    standard_deduction: float
    professional_tax_limit: float
    basic_exemption_limit: float
    senior_citizen_exemption_limit: float
    super_senior_citizen_exemption_limit: float

    # New regime surcharge (threshold, rate_percent), highest first
    surcharge_tiers: List[tuple[float, float]] = list(NEW_REGIME_SURCHARGE_TIERS)
    cess_rate_percent: float = CESS_RATE_PERCENT


def _configuration(label: str, standard_deduction: float) -> TaxConfiguration:
    return TaxConfiguration(
        financial_year=label,
        standard_deduction=standard_deduction,
        professional_tax_limit=2_500,
        basic_exemption_limit=250_000,
        senior_citizen_exemption_limit=300_000,
        super_senior_citizen_exemption_limit=500_000,
    )


# FY start year → configuration. Standard deduction rose to ₹75,000 from FY 2024-25.
_CONFIGURATIONS: Mapping[int, TaxConfiguration] = MappingProxyType({
    2023: _configuration("2023-24", 50_000),
    2024: _configuration("2024-25", 75_000),
    2025: _configuration("2025-26", 75_000),
})


def get_tax_configuration(financial_year: Union[FinancialYear, str]) -> TaxConfiguration:
    fy = FinancialYear.coerce(financial_year)
    try:
        return _CONFIGURATIONS[fy.start_year]
    except KeyError:
        raise UnsupportedPeriodError(fy.label) from None


def available_financial_years() -> list[str]:
    """Configured year labels, oldest first."""
    return [config.financial_year for _, config in sorted(_CONFIGURATIONS.items())]


__all__ = ["TaxConfiguration", "get_tax_configuration", "available_financial_years"]
