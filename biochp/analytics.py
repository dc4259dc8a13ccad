"""Post-projection valuation: computed on the COMPLETED year sequence.

READ-ONLY on the projection output; nothing here feeds back into the
fold. NPV is already the final cumulative DCF, IRR is solved here by
bracketed bisection.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from biochp.types import YearRecord

# ── IRR solver constants ────────────────────────────────────────

IRR_LO = -0.5
IRR_HI = 2.0
IRR_TOL = 1e-4
IRR_MAX_ITER = 100
IRR_EDGE = 0.01   # endpoint still this close to its start = no root found


# ── NPV / IRR ───────────────────────────────────────────────────


def npv_at(rate: float, cashflows: Sequence[float]) -> float:
    """Net present value at a decimal rate (0.07 = 7 %). Year 0 undiscounted."""
    return sum(cf / (1 + rate) ** y for y, cf in enumerate(cashflows))


def irr_bisection(
    cashflows: Sequence[float],
    lo: float = IRR_LO,
    hi: float = IRR_HI,
    tol: float = IRR_TOL,
    max_iter: int = IRR_MAX_ITER,
) -> float | None:
    """IRR via bisection on [lo, hi].

    Assumes NPV falls as the rate rises (outflows first): positive NPV at
    the midpoint moves the lower bound up, otherwise the upper bound comes
    down. Stops once the bracket is narrower than tol.

    Returns None when either bound never moved away from where it started,
    i.e. no sign change inside the bracket (all-positive or all-negative
    flows, or an IRR outside [lo, hi]).
    """
    lo0, hi0 = lo, hi
    for _ in range(max_iter):
        mid = (lo + hi) / 2
        if npv_at(mid, cashflows) > 0:
            lo = mid
        else:
            hi = mid
        if abs(hi - lo) < tol:
            break
    if abs(lo - lo0) > IRR_EDGE and abs(hi - hi0) > IRR_EDGE:
        return (lo + hi) / 2
    return None


def project_irr(years: Iterable[YearRecord]) -> float | None:
    """Project IRR from the year cash flows."""
    return irr_bisection([r.cf for r in years])


# ── DSCR ────────────────────────────────────────────────────────


def dscr_series(years: Iterable[YearRecord]) -> list[float | None]:
    return [r.dscr for r in years]


def dscr_min(years: Iterable[YearRecord]) -> float | None:
    """Minimum DSCR across years with debt service. None if there are none."""
    vals = [v for v in dscr_series(years) if v is not None]
    return min(vals) if vals else None


def dscr_avg(years: Iterable[YearRecord]) -> float | None:
    vals = [v for v in dscr_series(years) if v is not None]
    return sum(vals) / len(vals) if vals else None


# ── Payback ─────────────────────────────────────────────────────


def payback_year(cumulative: Sequence[float]) -> int | None:
    """First index > 0 at which the cumulative series is non-negative."""
    for y, value in enumerate(cumulative):
        if y > 0 and value >= 0:
            return y
    return None


# ── Summary metrics (used by sweeps) ────────────────────────────


def extract_metrics(result) -> dict:
    """Headline metrics of a ModelResult as a flat dict row."""
    return {
        "npv": result.npv,
        "irr": result.irr,
        "payback_disc": result.payback_disc,
        "payback_simple": result.payback_simple,
        "dscr_min": result.dscr_min,
        "dscr_avg": dscr_avg(result.years),
        "total_revenue": sum(r.rev_total for r in result.years),
        "total_ebitda": sum(r.ebitda for r in result.years),
        "yr1_ebitda": result.yr1_ebitda,
    }
