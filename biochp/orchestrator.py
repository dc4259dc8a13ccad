"""Model orchestrator: one scenario through the full pipeline.

Execution order:
    1. Unit performance (hours, energy, throughput, net carbon)
    2. CAPEX schedule (learning curve)
    3. Debt terms (annuity on debt-funded CAPEX)
    4. Projection fold (years 0..T, NPV, payback)
    5. Valuation (IRR, min DSCR)
    6. Diagnostics (warnings)

Every call is independent: no caching, no module state.
"""

from __future__ import annotations

import logging

from biochp.analytics import dscr_min, project_irr
from biochp.capex import build_capex_schedule
from biochp.config import ScenarioInputs
from biochp.diagnostics import evaluate_warnings
from biochp.facility import build_debt_terms
from biochp.loop import run_projection, unit_performance
from biochp.savings import customer_savings
from biochp.types import ModelResult, SensitivityRow

logger = logging.getLogger(__name__)


def evaluate(inputs: ScenarioInputs | None = None) -> ModelResult:
    """Run the full model for one scenario."""
    if inputs is None:
        inputs = ScenarioInputs.defaults()

    perf = unit_performance(inputs)
    capex = build_capex_schedule(inputs)
    debt = build_debt_terms(inputs, capex.fleet_total)
    proj = run_projection(inputs, capex, debt, perf)

    irr = project_irr(proj.years)
    min_dscr = dscr_min(proj.years)
    warnings = evaluate_warnings(proj.npv, min_dscr, inputs.discount_rate_pct)

    # Year 1 = first full operating year; horizon 0 falls back to year 0
    yr1 = proj.years[1] if len(proj.years) > 1 else proj.years[0]
    n1 = yr1.units_deployed

    def per_unit(value: float) -> float:
        return value / n1 if n1 > 0 else 0.0

    logger.debug(
        "evaluate: NPV=%.0f IRR=%s payback=%s DSCR_min=%s (%d years, %d units)",
        proj.npv, irr, proj.payback_disc, min_dscr,
        len(proj.years), inputs.n_units,
    )

    return ModelResult(
        npv=proj.npv,
        irr=irr,
        payback_disc=proj.payback_disc,
        payback_simple=proj.payback_simple,
        dscr_min=min_dscr,
        rev_per_unit=per_unit(yr1.rev_total),
        rev_per_unit_power=per_unit(yr1.rev_power),
        rev_per_unit_thermal=per_unit(yr1.rev_thermal),
        rev_per_unit_tipping=per_unit(yr1.rev_tipping),
        rev_per_unit_carbon=per_unit(yr1.rev_carbon),
        years=proj.years,
        warnings=tuple(warnings),
        yr1_revenue=yr1.rev_total,
        yr1_opex=yr1.opex,
        yr1_ebitda=yr1.ebitda,
        unit_performance=perf,
        capex_schedule=capex,
        debt=debt,
        savings=customer_savings(inputs, perf),
    )


def sensitivity(inputs: ScenarioInputs | None = None) -> list[SensitivityRow]:
    """Tornado rows for the tracked parameters, largest swing first."""
    from biochp.scenarios import run_tornado
    return run_tornado(inputs)
