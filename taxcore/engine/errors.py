"""
errors.py — typed failures raised by the tax engine.

Every failure is raised synchronously to the immediate caller; nothing here is
retried and no partially-built result ever escapes a failed computation.
"""
from __future__ import annotations

import json
from typing import Any, Optional


class TaxEngineError(Exception):
    """Base class for all tax engine failures."""


class UnsupportedPeriodError(TaxEngineError, LookupError):
    """No slab table (or year configuration) exists for the requested key."""

    def __init__(
        self,
        financial_year: str,
        regime: Optional[str] = None,
        age_bracket: Optional[str] = None,
    ) -> None:
        self.financial_year = financial_year
        self.regime = regime
        self.age_bracket = age_bracket
        parts = [f"financial year {financial_year}"]
        if regime is not None:
            parts.append(f"regime {regime}")
        if age_bracket is not None:
            parts.append(f"age bracket {age_bracket}")
        super().__init__("No tax table configured for " + ", ".join(parts))


class InvalidPeriodFormatError(TaxEngineError, ValueError):
    """Financial-year text is not 'YYYY-YY' or 'YY-YY' with consecutive years."""

    def __init__(self, text: Any) -> None:
        self.text = text
        super().__init__(f"Invalid financial year format: {text!r}")


class NoSlabsConfiguredError(TaxEngineError, RuntimeError):
    """A slab table is registered for the key but holds no slabs."""


class BusinessRuleError(TaxEngineError, ValueError):
    """
    One or more intake business rules were violated.

    The message is a JSON-encoded list of {"field": str, "issue": str} dicts so
    a calling layer can build its own error envelope without re-parsing text.
    """

    def __init__(self, violations: list[dict[str, Any]]) -> None:
        self.violations = violations
        super().__init__(json.dumps(violations))


__all__ = [
    "TaxEngineError",
    "UnsupportedPeriodError",
    "InvalidPeriodFormatError",
    "NoSlabsConfiguredError",
    "BusinessRuleError",
]
