"""Investor-facing warnings derived from a finished run.

Rules only read the aggregates; they never change any computed value.
"""

from __future__ import annotations

from enum import Enum

DSCR_DEFAULT = 1.0
DSCR_COVENANT = 1.25


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"


def npv_warning(npv: float, discount_rate_pct: float) -> str | None:
    if npv < 0:
        return f"Project NPV is negative at {discount_rate_pct:g}% discount rate."
    return None


def dscr_warning(dscr_min: float | None) -> str | None:
    if dscr_min is None:
        return None
    if dscr_min < DSCR_DEFAULT:
        return ("DSCR falls below 1.0x: loan default risk. "
                "Increase equity or reduce debt.")
    if dscr_min < DSCR_COVENANT:
        return "DSCR below 1.25x: may not meet lender covenants."
    return None


def evaluate_warnings(npv: float, dscr_min: float | None,
                      discount_rate_pct: float) -> list[str]:
    """All applicable warnings, NPV first."""
    checks = [
        npv_warning(npv, discount_rate_pct),
        dscr_warning(dscr_min),
    ]
    return [w for w in checks if w is not None]


def classify_warning(text: str) -> Severity:
    """Negative NPV and default risk are critical; the rest are warnings."""
    if "negative" in text or "default risk" in text:
        return Severity.CRITICAL
    return Severity.WARNING
