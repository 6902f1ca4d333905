"""
Refund / demand — nets taxes paid against the computed liability.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Union

from taxcore.engine.advance_tax import calculate_advance_tax_penalties
from taxcore.engine.financial_year import FinancialYear
from taxcore.engine.schemas import (
    AdvanceTaxInstallments, AdvanceTaxPenaltyResult, RefundResult, TaxCalculationResult,
)

logger = logging.getLogger(__name__)


def _net(
    total_liability: float,
    tds_deducted: float,
    advance_tax_paid: float,
    self_assessment_paid: float,
    penalties: Optional[AdvanceTaxPenaltyResult] = None,
) -> RefundResult:
    total_paid = tds_deducted + advance_tax_paid + self_assessment_paid
    return RefundResult(
        total_liability=total_liability,
        tds_deducted=tds_deducted,
        advance_tax_paid=advance_tax_paid,
        self_assessment_paid=self_assessment_paid,
        refund_amount=max(0.0, total_paid - total_liability),
        additional_due=max(0.0, total_liability - total_paid),
        is_refund_due=total_paid > total_liability,
        advance_tax_penalties=penalties,
    )


def calculate_refund(
    result: TaxCalculationResult,
    tds_deducted: float,
    advance_tax_paid: float = 0,
    self_assessment_paid: float = 0,
) -> RefundResult:
    """Refund if payments exceed total_with_cess, additional tax due otherwise."""
    refund = _net(result.total_with_cess, tds_deducted, advance_tax_paid, self_assessment_paid)
    logger.info(
        "Refund calculated liability=%.2f paid=%.2f refund=%.2f due=%.2f",
        refund.total_liability, refund.total_paid, refund.refund_amount, refund.additional_due,
    )
    return refund


def calculate_refund_with_penalties(
    result: TaxCalculationResult,
    tds_deducted: float,
    installments: AdvanceTaxInstallments,
    self_assessment_paid: float,
    filing_date: date,
    financial_year: Optional[Union[FinancialYear, str]] = None,
) -> RefundResult:
    """
    Like calculate_refund, but first adds Section 234B/234C interest to the liability.

    The returned total_liability is total_with_cess + total_penalty, and the
    penalty breakdown rides along in advance_tax_penalties. financial_year
    defaults to the one the tax result was computed for.
    """
    penalties = calculate_advance_tax_penalties(
        result.total_with_cess,
        tds_deducted,
        installments,
        filing_date,
        financial_year or result.financial_year,
    )
    refund = _net(
        result.total_with_cess + penalties.total_penalty,
        tds_deducted,
        installments.total_advance_tax_paid,
        self_assessment_paid,
        penalties,
    )
    logger.info(
        "Refund with penalties liability=%.2f penalty=%.0f refund=%.2f due=%.2f",
        refund.total_liability, penalties.total_penalty,
        refund.refund_amount, refund.additional_due,
    )
    return refund


__all__ = ["calculate_refund", "calculate_refund_with_penalties"]
