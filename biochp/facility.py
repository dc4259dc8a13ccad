"""Fleet loan: annual debt service + amortisation schedule.

The debt-funded share of fleet CAPEX (plus arrangement fees) is repaid as
a level monthly annuity, reported annually (12 x monthly payment).
Zero-rate loans fall back to straight-line; no principal or no term means
no debt service at all.

build_debt_terms(): closed-form annual payment used by the projection.
build_loan_schedule(): year-by-year balance table for display / audit.
"""

from __future__ import annotations

from biochp.config import ScenarioInputs
from biochp.formulas import MONTHS_PER_YEAR, monthly_annuity
from biochp.types import DebtTerms


def annual_debt_service(loan_amount: float, principal: float,
                        rate_pct: float, term_years: int) -> float:
    """Annual payment on the loan.

    rate > 0, term > 0: 12 x monthly annuity payment.
    rate = 0, term > 0: loan / term (straight-line).
    principal <= 0 or term <= 0: 0.
    """
    if principal <= 0 or term_years <= 0:
        return 0.0
    if rate_pct > 0:
        return monthly_annuity(loan_amount, rate_pct, term_years) * MONTHS_PER_YEAR
    return loan_amount / term_years


def build_debt_terms(inputs: ScenarioInputs, fleet_total: float) -> DebtTerms:
    principal = fleet_total * (1 - inputs.equity_fraction)
    loan_amount = principal * (1 + inputs.loan_fee_pct / 100)
    payment = annual_debt_service(
        loan_amount, principal, inputs.debt_rate_pct, inputs.loan_term_years)
    return DebtTerms(
        principal=principal,
        loan_amount=loan_amount,
        rate_pct=inputs.debt_rate_pct,
        term_years=inputs.loan_term_years,
        annual_payment=payment,
    )


def build_loan_schedule(terms: DebtTerms) -> list[dict]:
    """Annual amortisation table.

    Each loan year runs 12 monthly steps: interest = balance x r/12,
    payment = annual_payment / 12, principal = payment - interest.
    Straight-line loans have no interest component.

    Returns:
        List of dicts with keys:
        Year, Opening, Interest, Principal, Payment, Closing
    """
    rows = []
    if terms.annual_payment <= 0:
        return rows

    balance = terms.loan_amount
    r_m = terms.rate_pct / 100 / MONTHS_PER_YEAR
    monthly_payment = terms.annual_payment / MONTHS_PER_YEAR

    for yi in range(terms.term_years):
        opening = balance
        interest = 0.0
        for _ in range(MONTHS_PER_YEAR):
            month_interest = balance * r_m
            interest += month_interest
            balance = balance + month_interest - monthly_payment
        rows.append({
            "Year": yi + 1,
            "Opening": opening,
            "Interest": interest,
            "Principal": terms.annual_payment - interest,
            "Payment": terms.annual_payment,
            "Closing": balance,
        })
    return rows
