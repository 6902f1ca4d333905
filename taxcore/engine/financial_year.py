"""
financial_year.py — structured Financial Year value and its statutory calendar.

A financial year (FY) runs 1-April to 31-March. Its income is assessed in the
following assessment year (AY), which is where the filing deadline and the
Section 234B interest window live.

Parsing is strict: "2024-25" and "24-25" are accepted, the second part must be
the year after the first. "2024-26", "2024-2025", "FY24" all fail with
InvalidPeriodFormatError rather than being guessed at.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from taxcore.engine.errors import InvalidPeriodFormatError

_FY_PATTERN = re.compile(r"^(\d{4}|\d{2})-(\d{2})$")
_MIN_START_YEAR = 2000
_MAX_START_YEAR = 2098


class FinancialYear(BaseModel):
    """
    Financial year identified by the calendar year in which it starts.

    Model fields typed as FinancialYear also accept the "YYYY-YY" / "YY-YY"
    string form; the before-validator parses it.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_year: int = Field(..., ge=_MIN_START_YEAR, le=_MAX_START_YEAR)

    @model_validator(mode="before")
    @classmethod
    def _parse_text(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"start_year": _parse_start_year(data)}
        return data

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "FinancialYear":
        """Parse 'YYYY-YY' or 'YY-YY'. Raises InvalidPeriodFormatError otherwise."""
        if not isinstance(text, str):
            raise InvalidPeriodFormatError(text)
        return cls(start_year=_parse_start_year(text))

    @classmethod
    def coerce(cls, value: Union["FinancialYear", str]) -> "FinancialYear":
        """Accept an already-built FinancialYear or its string form."""
        if isinstance(value, FinancialYear):
            return value
        return cls.parse(value)

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    @property
    def label(self) -> str:
        return f"{self.start_year}-{(self.start_year + 1) % 100:02d}"

    @property
    def assessment_year_label(self) -> str:
        return f"{self.start_year + 1}-{(self.start_year + 2) % 100:02d}"

    def __str__(self) -> str:
        return self.label

    # ------------------------------------------------------------------
    # Calendar anchors
    # ------------------------------------------------------------------

    @property
    def start(self) -> date:
        return date(self.start_year, 4, 1)

    @property
    def first_installment_due(self) -> date:
        return date(self.start_year, 6, 15)

    @property
    def second_installment_due(self) -> date:
        return date(self.start_year, 9, 15)

    @property
    def third_installment_due(self) -> date:
        return date(self.start_year, 12, 15)

    @property
    def fourth_installment_due(self) -> date:
        return date(self.start_year + 1, 3, 15)

    @property
    def end(self) -> date:
        return date(self.start_year + 1, 3, 31)

    @property
    def next_start(self) -> date:
        """1-April of the assessment year. Section 234B interest starts here."""
        return date(self.start_year + 1, 4, 1)

    @property
    def filing_due_date(self) -> date:
        """Statutory return due date for individuals: 31-July of the assessment year."""
        return date(self.start_year + 1, 7, 31)

    @property
    def installment_due_dates(self) -> tuple[date, date, date, date]:
        return (
            self.first_installment_due,
            self.second_installment_due,
            self.third_installment_due,
            self.fourth_installment_due,
        )

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def _parse_start_year(text: str) -> int:
    match = _FY_PATTERN.match(text.strip())
    if match is None:
        raise InvalidPeriodFormatError(text)
    first, second = match.groups()
    start_year = int(first) if len(first) == 4 else 2000 + int(first)
    if int(second) != (start_year + 1) % 100:
        raise InvalidPeriodFormatError(text)
    if not _MIN_START_YEAR <= start_year <= _MAX_START_YEAR:
        raise InvalidPeriodFormatError(text)
    return start_year


def current_financial_year(today: Optional[date] = None) -> FinancialYear:
    """FY containing `today`. April onwards belongs to the FY starting that year."""
    today = today or date.today()
    start_year = today.year if today.month >= 4 else today.year - 1
    return FinancialYear(start_year=start_year)


def recent_financial_years(
    today: Optional[date] = None,
    count: int = 6,
    assessment: bool = False,
) -> list[str]:
    """
    Labels for the current FY and the (count - 1) preceding ones, newest first.
    With assessment=True the matching assessment-year labels are returned instead.
    """
    current = current_financial_year(today)
    years = [FinancialYear(start_year=current.start_year - i) for i in range(count)]
    if assessment:
        return [fy.assessment_year_label for fy in years]
    return [fy.label for fy in years]


__all__ = [
    "FinancialYear",
    "current_financial_year",
    "recent_financial_years",
]
