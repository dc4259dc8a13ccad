"""Generic financial formulas: stateless, no scenario knowledge."""

from __future__ import annotations

import math

HOURS_PER_YEAR = 8760
DAYS_PER_YEAR = 365
MONTHS_PER_YEAR = 12


def escalation(pct: float, year_index: int) -> float:
    """Compound growth factor (1 + pct/100)^y."""
    return (1 + pct / 100) ** year_index


def discount_factor(rate_pct: float, year_index: int) -> float:
    """Divisor applied to a year-y cash flow. Same shape as escalation."""
    return (1 + rate_pct / 100) ** year_index


def discounted(cash_flow: float, rate_pct: float, year_index: int) -> float:
    """cash_flow / (1 + r)^y.

    A zero divisor (rate of -100 %) gives a signed infinity, or nan for a
    zero cash flow, instead of raising.
    """
    factor = discount_factor(rate_pct, year_index)
    if factor == 0:
        return math.copysign(math.inf, cash_flow) if cash_flow else math.nan
    return cash_flow / factor


def learning_exponent(learning_rate: float) -> float:
    """Wright's law exponent b = log2(LR). LR=0.9 gives b ~ -0.152.

    LR <= 0 maps to -inf, so n^b is 0 for n > 1.
    """
    if learning_rate <= 0:
        return -math.inf
    return math.log(learning_rate) / math.log(2)


def monthly_annuity(loan: float, annual_rate_pct: float, years: int) -> float:
    """Level monthly payment for a fully amortising loan.

    Returns 0 if loan <= 0, years <= 0 or rate <= 0 (caller handles
    the zero-rate straight-line case).
    """
    if loan <= 0 or years <= 0 or annual_rate_pct <= 0:
        return 0.0
    r_m = annual_rate_pct / 100 / MONTHS_PER_YEAR
    n = years * MONTHS_PER_YEAR
    return loan * r_m / (1 - (1 + r_m) ** -n)


def calc_ebitda(revenue: float, opex: float) -> float:
    """Earnings before interest, tax, depreciation, amortisation."""
    return revenue - opex


def calc_dscr(ebitda: float, debt_service: float) -> float | None:
    """EBITDA / debt service. None when no debt service is due."""
    if debt_service > 0:
        return ebitda / debt_service
    return None


def net_carbon_credit(methane: float, fuel: float, emissions: float) -> float:
    """Creditable tCO2e: offsets net of project emissions, floored at 0."""
    return max(0.0, methane + fuel - emissions)
