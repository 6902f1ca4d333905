"""
Advance-tax interest — Section 234B (annual 90% rule) and Section 234C
(installment deferment). Pure functions. No I/O.

Both sections are skipped entirely when
    net liability = total tax liability - TDS <= ₹10,000
because no advance tax is due below that threshold.

234B
  required  = 90% of net liability
  shortfall = required - total advance tax paid
  period    = 1-April of the assessment year → later of (31-July due date, filing date)
  interest  = shortfall × 1% × months, "month or part thereof", minimum 1

234C (cumulative checkpoints, fixed statutory months)
  15-Jun  15%  3 months
  15-Sep  45%  3 months
  15-Dec  75%  3 months
  15-Mar 100%  1 month
  Paid-by-date only counts installments actually paid on or before the
  checkpoint. An installment with no recorded date is taken as paid on its
  own due date.

Every row's interest is rounded to whole rupees when the row is created;
section totals are sums of the rounded rows.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Union

from dateutil.relativedelta import relativedelta

from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.schemas import (
    AdvanceTaxInstallments, AdvanceTaxPenaltyResult, PenaltyDetail,
)

logger = logging.getLogger(__name__)

# ===========================================================================
# STATUTORY CONSTANTS
# ===========================================================================

ADVANCE_TAX_THRESHOLD        = 10_000   # No advance tax if net liability <= ₹10,000
INTEREST_RATE_PER_MONTH      = 1.0      # percent, simple interest
SECTION_234B_REQUIRED_SHARE  = 0.90     # 90% of net liability

SECTION_234B = "234B"
SECTION_234C = "234C"

# (cumulative share, fixed interest months, label) per checkpoint, in due-date order
SECTION_234C_CHECKPOINTS: list[tuple[float, int, str]] = [
    (0.15, 3, "1st Installment (15th June)"),
    (0.45, 3, "2nd Installment (15th September)"),
    (0.75, 3, "3rd Installment (15th December)"),
    (1.00, 1, "4th Installment (15th March)"),
]


# ===========================================================================
# INTERNAL HELPERS
# ===========================================================================

def months_for_interest(start: date, end: date) -> int:
    """
    Months between start and end with any part of a month counted as a whole one.
    Steps a month at a time from start until the cursor reaches end. Minimum 1.
    """
    months = 0
    cursor = start
    while cursor < end:
        months += 1
        cursor = start + relativedelta(months=months)
    return max(months, 1)


def _interest(shortfall: float, months: int) -> float:
    return shortfall * INTEREST_RATE_PER_MONTH / 100 * months


def _whole_rupees(amount: float) -> float:
    return float(round(amount))


def _section_234b(
    net_liability: float,
    total_advance_paid: float,
    fy: FinancialYear,
    filing_date: date,
) -> list[PenaltyDetail]:
    required = net_liability * SECTION_234B_REQUIRED_SHARE
    shortfall = max(0.0, required - total_advance_paid)
    if shortfall <= 0:
        return []

    # Filed on time → interest runs to the due date; filed late → to the filing date
    interest_start = fy.next_start
    interest_end = max(fy.filing_due_date, filing_date)
    if interest_end <= interest_start:
        return []

    months = months_for_interest(interest_start, interest_end)
    interest = _whole_rupees(_interest(shortfall, months))
    logger.debug(
        "234B shortfall=%.2f months=%d interest=%.0f", shortfall, months, interest,
    )
    return [PenaltyDetail(
        installment_period="Annual Assessment",
        required_amount=required,
        actual_amount=total_advance_paid,
        shortfall=shortfall,
        monthly_rate_percent=INTEREST_RATE_PER_MONTH,
        day_count=(interest_end - interest_start).days,
        interest_amount=interest,
        section=SECTION_234B,
        description="Failure to Pay Advance Tax (90% rule violation)",
    )]


def _section_234c(
    net_liability: float,
    installments: AdvanceTaxInstallments,
    fy: FinancialYear,
) -> list[PenaltyDetail]:
    details: list[PenaltyDetail] = []
    for (share, months, label), due in zip(SECTION_234C_CHECKPOINTS, fy.installment_due_dates):
        required = net_liability * share
        paid = installments.paid_by(due, fy)
        shortfall = max(0.0, required - paid)
        if shortfall <= 0:
            continue
        interest = _whole_rupees(_interest(shortfall, months))
        logger.debug(
            "234C %s required=%.2f paid=%.2f interest=%.0f", label, required, paid, interest,
        )
        details.append(PenaltyDetail(
            installment_period=label,
            required_amount=required,
            actual_amount=paid,
            shortfall=shortfall,
            monthly_rate_percent=INTEREST_RATE_PER_MONTH,
            day_count=months * 30,      # approximate, for display only
            interest_amount=interest,
            section=SECTION_234C,
            description=f"Deferment of {label} - {share:.0%} of total tax due",
        ))
    return details


# ===========================================================================
# PUBLIC API
# ===========================================================================

def calculate_advance_tax_penalties(
    total_tax_liability: float,
    tds_deducted: float,
    installments: AdvanceTaxInstallments,
    filing_date: date,
    financial_year: Union[FinancialYear, str],
) -> AdvanceTaxPenaltyResult:
    """
    Section 234B and 234C interest for one financial year.

    Args:
        total_tax_liability: tax including surcharge and cess (total_with_cess).
        tds_deducted: tax withheld at source; reduces the advance-tax base.
        installments: advance tax paid, with optional payment dates.
        filing_date: date the return was (or will be) filed.
        financial_year: FinancialYear or "YYYY-YY" / "YY-YY" text.

    Raises:
        InvalidPeriodFormatError: financial_year text cannot be parsed.
    """
    fy = FinancialYear.coerce(financial_year)
    inputs = dict(
        total_tax_liability=total_tax_liability,
        tds_deducted=tds_deducted,
        advance_tax_paid=installments,
        filing_date=filing_date,
        financial_year=fy.label,
    )

    net_liability = total_tax_liability - tds_deducted
    if net_liability <= ADVANCE_TAX_THRESHOLD:
        logger.info(
            "No advance tax liability fy=%s net_liability=%.2f", fy.label, net_liability,
        )
        return AdvanceTaxPenaltyResult(**inputs)

    details_234b = _section_234b(
        net_liability, installments.total_advance_tax_paid, fy, filing_date,
    )
    details_234c = _section_234c(net_liability, installments, fy)

    interest_234b = sum(d.interest_amount for d in details_234b)
    interest_234c = sum(d.interest_amount for d in details_234c)

    logger.info(
        "Advance tax interest fy=%s 234B=%.0f 234C=%.0f",
        fy.label, interest_234b, interest_234c,
    )

    return AdvanceTaxPenaltyResult(
        **inputs,
        section_234b_interest=interest_234b,
        section_234c_interest=interest_234c,
        penalty_details=details_234b + details_234c,
    )


__all__ = [
    "calculate_advance_tax_penalties",
    "months_for_interest",
    "ADVANCE_TAX_THRESHOLD",
    "INTEREST_RATE_PER_MONTH",
    "SECTION_234C_CHECKPOINTS",
]
