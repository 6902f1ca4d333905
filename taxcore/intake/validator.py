"""
Intake business-rule validator

Validates a TaxComputationRequest against date rules AFTER Pydantic structural
validation has already passed. Collects all violations in a single pass and
raises BusinessRuleError carrying a list of {field, issue} dicts.

Rules enforced:
  1. Each advance-tax installment date falls inside the financial year
     (1-April to 31-March). Tax paid after 31-March is self-assessment tax.
  2. filing_date is not before 1-April of the assessment year.

Negative amounts and out-of-range ages are rejected by the schema, not here.
"""
from __future__ import annotations

import logging
from typing import Any

from taxcore.engine.errors import BusinessRuleError
from taxcore.intake.schemas import TaxComputationRequest

logger = logging.getLogger(__name__)

_INSTALLMENT_DATE_FIELDS = (
    "first_installment_date",
    "second_installment_date",
    "third_installment_date",
    "fourth_installment_date",
)


def validate_business_rules(request: TaxComputationRequest) -> None:
    """
    Validate request against the intake date rules.

    Raises:
        BusinessRuleError: If any rule is violated; .violations lists every one.
    """
    violations: list[dict[str, Any]] = []
    fy = request.financial_year

    # ---- 1. Installment dates inside the financial year --------------------
    if request.advance_tax_paid is not None:
        for field_name in _INSTALLMENT_DATE_FIELDS:
            paid_on = getattr(request.advance_tax_paid, field_name)
            if paid_on is not None and not fy.contains(paid_on):
                violations.append({
                    "field": f"advance_tax_paid.{field_name}",
                    "issue": (
                        f"Payment date {paid_on.isoformat()} is outside FY {fy.label} "
                        f"({fy.start.isoformat()} to {fy.end.isoformat()}). "
                        "Tax paid after 31st March is self-assessment tax."
                    ),
                })

    # ---- 2. Filing date in or after the assessment year ---------------------
    if request.filing_date is not None and request.filing_date < fy.next_start:
        violations.append({
            "field": "filing_date",
            "issue": (
                f"Filing date {request.filing_date.isoformat()} is before the start of "
                f"AY {fy.assessment_year_label} ({fy.next_start.isoformat()})."
            ),
        })

    if violations:
        logger.info(
            "Business rule validation failed fy=%s violations=%d", fy.label, len(violations),
        )
        raise BusinessRuleError(violations)


__all__ = ["validate_business_rules"]
