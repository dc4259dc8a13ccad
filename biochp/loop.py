"""Year-by-year projection: a left fold over project years 0..T.

Each step reads the previous fold state (running cumulative cash flows,
units already deployed, payback years found so far) and emits one frozen
YearRecord. Nothing is mutated in place, so any intermediate year can be
inspected on its own.

Per year:
    1. Units deployed (rollout rate, capped at fleet size) -> CAPEX of new units
    2. Revenue by stream, each escalated independently
    3. OPEX (maintenance, fuel processing, fixed at 3 %/yr)
    4. EBITDA, debt service, DSCR
    5. Cash flow, discounted cash flow, cumulative sums, payback triggers
"""

from __future__ import annotations

import math
from functools import reduce
from typing import NamedTuple

from biochp.capex import capex_for_units
from biochp.config import ScenarioInputs
from biochp.formulas import (
    DAYS_PER_YEAR, HOURS_PER_YEAR,
    calc_dscr, calc_ebitda, discounted, escalation, net_carbon_credit,
)
from biochp.types import CapexSchedule, DebtTerms, UnitPerformance, YearRecord

# Insurance + management escalate at a fixed rate; not a scenario input.
FIXED_COST_ESCALATION_PCT = 3.0


class ProjectionState(NamedTuple):
    """Fold accumulator."""
    records: tuple[YearRecord, ...] = ()
    units_deployed: int = 0
    cum_dcf: float = 0.0
    cum_cf: float = 0.0
    payback_disc: int | None = None
    payback_simple: int | None = None


class Projection(NamedTuple):
    years: tuple[YearRecord, ...]
    npv: float
    payback_disc: int | None
    payback_simple: int | None


def unit_performance(inputs: ScenarioInputs) -> UnitPerformance:
    hours_yr = HOURS_PER_YEAR * inputs.availability
    return UnitPerformance(
        hours_yr=hours_yr,
        e_power_yr=inputs.elec_output_kw * hours_yr,
        e_thermal_yr=inputs.thermal_output_kw * hours_yr,
        feedstock_tpy=inputs.feedstock_tpd * DAYS_PER_YEAR * inputs.availability,
        carbon_net=net_carbon_credit(
            inputs.carbon_methane_offset,
            inputs.carbon_fuel_offset,
            inputs.carbon_project_emissions,
        ),
    )


def units_deployed(y: int, n_units: int, units_per_year: float) -> int:
    """Fleet size in service in year y. Year 0 always has unit 1."""
    return min(n_units, math.floor(y * units_per_year) + 1)


def tipped_waste(units: int, feedstock_tpy: float, supply_tpy: float) -> float:
    """Tons accepted: fleet throughput, capped by the waste available."""
    return min(units * feedstock_tpy, supply_tpy)


def project_year(
    state: ProjectionState,
    y: int,
    *,
    inputs: ScenarioInputs,
    perf: UnitPerformance,
    capex: CapexSchedule,
    debt: DebtTerms,
) -> ProjectionState:
    """One fold step: previous state + year index -> next state."""
    p = inputs
    n = units_deployed(y, p.n_units, p.units_per_year)
    capex_year = capex_for_units(capex, state.units_deployed, n)

    # Revenue
    rev_power = (n * perf.e_power_yr * p.power_utilization * p.power_rate
                 * escalation(p.power_escalation_pct, y))
    rev_thermal = (n * perf.e_thermal_yr * p.thermal_utilization * p.thermal_rate
                   * escalation(p.thermal_escalation_pct, y))
    waste_t = tipped_waste(n, perf.feedstock_tpy, p.waste_supply_tpy)
    rev_tipping = waste_t * p.tipping_fee * escalation(p.tipping_escalation_pct, y)
    rev_carbon = (n * perf.carbon_net * p.carbon_price
                  * escalation(p.carbon_escalation_pct, y))
    rev_total = rev_power + rev_thermal + rev_tipping + rev_carbon

    # OPEX
    opex_maint = (n * perf.e_power_yr * p.maintenance_rate
                  * escalation(p.maintenance_escalation_pct, y))
    opex_fuel = (n * perf.feedstock_tpy * p.fuel_processing_cost
                 * escalation(p.fuel_escalation_pct, y))
    opex_fixed = (n * (p.insurance_cost + p.management_cost)
                  * escalation(FIXED_COST_ESCALATION_PCT, y))
    opex = opex_maint + opex_fuel + opex_fixed

    ebitda = calc_ebitda(rev_total, opex)
    ds = debt.annual_payment if y < p.loan_term_years else 0.0
    cf = rev_total - opex - capex_year - ds
    dcf = discounted(cf, p.discount_rate_pct, y)
    cum_dcf = state.cum_dcf + dcf
    cum_cf = state.cum_cf + cf

    payback_disc = state.payback_disc
    if payback_disc is None and y > 0 and cum_dcf >= 0:
        payback_disc = y
    payback_simple = state.payback_simple
    if payback_simple is None and y > 0 and cum_cf >= 0:
        payback_simple = y

    record = YearRecord(
        y=y,
        year=p.start_year + y,
        units_deployed=n,
        rev_power=rev_power,
        rev_thermal=rev_thermal,
        rev_tipping=rev_tipping,
        rev_carbon=rev_carbon,
        rev_total=rev_total,
        waste_tipped_t=waste_t,
        opex_maint=opex_maint,
        opex_fuel=opex_fuel,
        opex_fixed=opex_fixed,
        opex=opex,
        ebitda=ebitda,
        debt_service=ds,
        dscr=calc_dscr(ebitda, ds),
        capex=capex_year,
        cf=cf,
        dcf=dcf,
        cum_dcf=cum_dcf,
        cum_cf=cum_cf,
    )
    return ProjectionState(
        records=state.records + (record,),
        units_deployed=n,
        cum_dcf=cum_dcf,
        cum_cf=cum_cf,
        payback_disc=payback_disc,
        payback_simple=payback_simple,
    )


def run_projection(
    inputs: ScenarioInputs,
    capex: CapexSchedule,
    debt: DebtTerms,
    perf: UnitPerformance | None = None,
) -> Projection:
    """Fold project_year over y = 0..project_years.

    The final cumulative discounted cash flow is the NPV.
    """
    if perf is None:
        perf = unit_performance(inputs)

    def step(state: ProjectionState, y: int) -> ProjectionState:
        return project_year(state, y, inputs=inputs, perf=perf,
                            capex=capex, debt=debt)

    final = reduce(step, range(inputs.project_years + 1), ProjectionState())
    return Projection(
        years=final.records,
        npv=final.cum_dcf,
        payback_disc=final.payback_disc,
        payback_simple=final.payback_simple,
    )
