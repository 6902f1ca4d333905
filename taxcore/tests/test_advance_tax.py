"""
Advance-tax interest test suite — Sections 234B and 234C, FY 2024-25.
All expected values hand-computed at 1% per month simple interest.

FY 2024-25 anchors used throughout:
  checkpoints 15-Jun-2024 / 15-Sep-2024 / 15-Dec-2024 / 15-Mar-2025
  234B window starts 1-Apr-2025, due date 31-Jul-2025

Groups:
  1. ₹10,000 threshold
  2. Section 234B (90% rule, month-or-part counting)
  3. Section 234C (date-aware cumulative checkpoints)
  4. Rounding and totals
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

import pytest

from taxcore.engine.advance_tax import calculate_advance_tax_penalties, months_for_interest
from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.schemas import AdvanceTaxInstallments

FY = "2024-25"
NOTHING_PAID = AdvanceTaxInstallments()

# Paid in full, each installment on time (cumulative 15k / 45k / 75k / 100k)
ON_TIME_100K = AdvanceTaxInstallments(
    first_installment=15_000, first_installment_date=date(2024, 6, 10),
    second_installment=30_000, second_installment_date=date(2024, 9, 10),
    third_installment=30_000, third_installment_date=date(2024, 12, 10),
    fourth_installment=25_000, fourth_installment_date=date(2025, 3, 10),
)


# ===========================================================================
# TEST GROUP 1: ₹10,000 threshold
# ===========================================================================

@pytest.mark.parametrize(
    "liability,tds",
    [(10_000, 0), (20_000, 10_000), (60_000, 55_000), (0, 0), (5_000, 20_000)],
)
def test_no_penalty_at_or_below_threshold(liability: float, tds: float) -> None:
    """Net liability <= ₹10,000 → no 234B/234C for any payment pattern."""
    result = calculate_advance_tax_penalties(liability, tds, NOTHING_PAID, date(2026, 3, 31), FY)

    assert result.penalty_details == []
    assert result.section_234b_interest == 0
    assert result.section_234c_interest == 0
    assert result.total_penalty == 0
    assert result.has_penalties is False
    assert result.financial_year == "2024-25"


def test_threshold_is_strict() -> None:
    """₹10,001 of net liability is above the threshold."""
    result = calculate_advance_tax_penalties(10_001, 0, NOTHING_PAID, date(2025, 7, 31), FY)
    assert result.has_penalties


# ===========================================================================
# TEST GROUP 2: Section 234B
# ===========================================================================

@dataclass
class Case234B:
    description: str
    liability: float
    filing_date: date
    installments: AdvanceTaxInstallments = field(default_factory=AdvanceTaxInstallments)
    expected_months_interest: float = 0     # expected 234B interest in rupees
    expected_day_count: int = 0


CASES_234B: list[Case234B] = [
    Case234B(
        description="filed_before_due_date_interest_runs_to_31_july",
        liability=50_000, filing_date=date(2025, 6, 30),
        # shortfall 45000 × 1% × 4 months (Apr, May, Jun, Jul)
        expected_months_interest=1_800, expected_day_count=121,
    ),
    Case234B(
        description="filed_on_due_date",
        liability=50_000, filing_date=date(2025, 7, 31),
        expected_months_interest=1_800, expected_day_count=121,
    ),
    Case234B(
        description="filed_three_months_late",
        liability=50_000, filing_date=date(2025, 10, 31),
        # 1-Apr → 31-Oct: 7 months (Apr..Oct), 45000 × 7%
        expected_months_interest=3_150, expected_day_count=213,
    ),
    Case234B(
        description="filed_1_august_cursor_lands_on_end",
        liability=50_000, filing_date=date(2025, 8, 1),
        expected_months_interest=1_800, expected_day_count=122,
    ),
    Case234B(
        description="filed_2_august_part_month_counts",
        liability=50_000, filing_date=date(2025, 8, 2),
        expected_months_interest=2_250, expected_day_count=123,
    ),
    Case234B(
        description="partial_advance_tax_shortfall_below_90pct",
        liability=100_000, filing_date=date(2025, 7, 15),
        installments=AdvanceTaxInstallments(fourth_installment=60_000),
        # required 90000, paid 60000, shortfall 30000 × 4%
        expected_months_interest=1_200, expected_day_count=121,
    ),
    Case234B(
        description="exactly_90pct_paid_no_234b",
        liability=100_000, filing_date=date(2025, 12, 1),
        installments=AdvanceTaxInstallments(fourth_installment=90_000),
        expected_months_interest=0,
    ),
]


@pytest.mark.parametrize(
    "case",
    [pytest.param(c, id=c.description) for c in CASES_234B],
)
def test_section_234b(case: Case234B) -> None:
    result = calculate_advance_tax_penalties(
        case.liability, 0, case.installments, case.filing_date, FY,
    )
    rows = [d for d in result.penalty_details if d.section == "234B"]

    assert result.section_234b_interest == case.expected_months_interest
    if case.expected_months_interest == 0:
        assert rows == []
        return
    assert len(rows) == 1
    row = rows[0]
    assert row.installment_period == "Annual Assessment"
    assert row.required_amount == pytest.approx(case.liability * 0.90)
    assert row.actual_amount == case.installments.total_advance_tax_paid
    assert row.interest_amount == case.expected_months_interest
    assert row.monthly_rate_percent == 1.0
    assert row.day_count == case.expected_day_count


def test_tds_reduces_234b_base() -> None:
    """Liability 80,000 with TDS 30,000 → net 50,000 → same as the 50k case."""
    result = calculate_advance_tax_penalties(80_000, 30_000, NOTHING_PAID, date(2025, 7, 31), FY)
    assert result.section_234b_interest == 1_800
    assert result.tds_deducted == 30_000


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (date(2025, 4, 1), date(2025, 7, 31), 4),
        (date(2025, 4, 1), date(2025, 8, 1), 4),
        (date(2025, 4, 1), date(2025, 8, 2), 5),
        (date(2025, 4, 1), date(2025, 4, 2), 1),
        (date(2025, 4, 1), date(2025, 4, 1), 1),     # minimum one month
        (date(2025, 1, 31), date(2025, 3, 1), 2),    # Feb clamps to 28th
        (date(2024, 1, 31), date(2024, 2, 29), 1),    # leap-year clamp to 29th
        (date(2024, 8, 31), date(2024, 10, 1), 2),    # Sep clamps to 30th
        (date(2025, 4, 1), date(2026, 4, 1), 12),
    ],
)
def test_months_for_interest(start: date, end: date, expected: int) -> None:
    assert months_for_interest(start, end) == expected


# ===========================================================================
# TEST GROUP 3: Section 234C
# ===========================================================================

def test_nothing_paid_late_filing_all_rows() -> None:
    """
    Net liability ₹50,000, no advance tax, filed 31-Oct-2025 (3 months late).
    234B: 45000 × 7% = 3150.
    234C: 7500×3% + 22500×3% + 37500×3% + 50000×1% = 225 + 675 + 1125 + 500 = 2525.
    """
    result = calculate_advance_tax_penalties(50_000, 0, NOTHING_PAID, date(2025, 10, 31), FY)

    rows_234c = [d for d in result.penalty_details if d.section == "234C"]
    assert [d.interest_amount for d in rows_234c] == [225, 675, 1_125, 500]
    assert [d.required_amount for d in rows_234c] == pytest.approx([7_500, 22_500, 37_500, 50_000])
    assert [d.day_count for d in rows_234c] == [90, 90, 90, 30]
    assert rows_234c[0].installment_period == "1st Installment (15th June)"
    assert rows_234c[0].description == "Deferment of 1st Installment (15th June) - 15% of total tax due"
    assert rows_234c[3].description.endswith("100% of total tax due")

    assert result.section_234b_interest == 3_150
    assert result.section_234c_interest == 2_525
    assert result.total_penalty == 5_675
    assert len(result.penalty_details) == 5
    assert result.penalty_details[0].section == "234B"


def test_paid_on_time_no_penalty() -> None:
    result = calculate_advance_tax_penalties(100_000, 0, ON_TIME_100K, date(2025, 7, 31), FY)
    assert result.penalty_details == []
    assert result.total_penalty == 0


def test_undated_installments_count_on_their_own_due_dates() -> None:
    undated = AdvanceTaxInstallments(
        first_installment=15_000, second_installment=30_000,
        third_installment=30_000, fourth_installment=25_000,
    )
    result = calculate_advance_tax_penalties(100_000, 0, undated, date(2025, 7, 31), FY)
    assert result.total_penalty == 0


def test_234c_uses_payment_dates_not_total_paid() -> None:
    """
    Full ₹1,00,000 paid, but all of it on 10-Mar-2025.

    Date-aware: nothing was paid by 15-Jun, 15-Sep or 15-Dec, so the first three
    checkpoints are short by 15000 / 45000 / 75000 → 450 + 1350 + 2250 = 4050.
    Summing the total paid regardless of date would report no 234C at all;
    this pins the date-aware behaviour.
    """
    all_in_march = AdvanceTaxInstallments(
        first_installment=15_000, first_installment_date=date(2025, 3, 10),
        second_installment=30_000, second_installment_date=date(2025, 3, 10),
        third_installment=30_000, third_installment_date=date(2025, 3, 10),
        fourth_installment=25_000, fourth_installment_date=date(2025, 3, 10),
    )
    result = calculate_advance_tax_penalties(100_000, 0, all_in_march, date(2025, 7, 31), FY)

    rows = [d for d in result.penalty_details if d.section == "234C"]
    assert [d.actual_amount for d in rows] == [0, 0, 0]
    assert [d.interest_amount for d in rows] == [450, 1_350, 2_250]
    assert result.section_234c_interest == 4_050
    assert result.section_234b_interest == 0     # total paid clears the 90% test


def test_early_single_payment_covers_every_checkpoint() -> None:
    upfront = AdvanceTaxInstallments(
        first_installment=100_000, first_installment_date=date(2024, 5, 1),
    )
    result = calculate_advance_tax_penalties(100_000, 0, upfront, date(2025, 7, 31), FY)
    assert result.total_penalty == 0


def test_only_final_checkpoint_short() -> None:
    """90% paid on schedule: 234B clear, 234C only on the 15-Mar checkpoint (10000 × 1%)."""
    ninety = AdvanceTaxInstallments(
        first_installment=15_000, second_installment=30_000,
        third_installment=30_000, fourth_installment=15_000,
    )
    result = calculate_advance_tax_penalties(100_000, 0, ninety, date(2025, 7, 31), FY)

    assert result.section_234b_interest == 0
    assert [d.installment_period for d in result.penalty_details] == [
        "4th Installment (15th March)",
    ]
    assert result.section_234c_interest == 100


def test_paid_by_helper() -> None:
    fy = FinancialYear.parse(FY)
    late_first = AdvanceTaxInstallments(
        first_installment=10_000, first_installment_date=date(2024, 7, 1),
        second_installment=5_000,
    )
    assert late_first.paid_by(date(2024, 6, 15), fy) == 0
    assert late_first.paid_by(date(2024, 9, 15), fy) == 15_000
    assert late_first.total_advance_tax_paid == 15_000


# ===========================================================================
# TEST GROUP 4: Rounding and totals
# ===========================================================================

@pytest.mark.parametrize("liability", [12_345.67, 98_765.43, 1_234_567.89])
def test_interest_rows_are_whole_rupees(liability: float) -> None:
    result = calculate_advance_tax_penalties(liability, 0, NOTHING_PAID, date(2025, 11, 20), FY)

    assert result.penalty_details
    for row in result.penalty_details:
        assert float(row.interest_amount).is_integer()
    assert result.total_penalty == sum(d.interest_amount for d in result.penalty_details)
    assert result.total_penalty >= 0


def test_accepts_two_digit_year_and_financial_year_instance() -> None:
    a = calculate_advance_tax_penalties(50_000, 0, NOTHING_PAID, date(2025, 10, 31), "24-25")
    b = calculate_advance_tax_penalties(
        50_000, 0, NOTHING_PAID, date(2025, 10, 31), FinancialYear(start_year=2024),
    )
    assert a == b
    assert a.financial_year == "2024-25"
