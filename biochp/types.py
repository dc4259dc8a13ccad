"""Data shapes for the calculation engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass


# ── Unit performance ────────────────────────────────────────────

@dataclass(frozen=True)
class UnitPerformance:
    """Annual physical output of one unit (before utilisation)."""
    hours_yr: float          # 8760 x availability
    e_power_yr: float        # kWh electric
    e_thermal_yr: float      # kWh thermal
    feedstock_tpy: float     # tons processed
    carbon_net: float        # creditable tCO2e


# ── CAPEX / Debt ────────────────────────────────────────────────

@dataclass(frozen=True)
class CapexSchedule:
    unit1_cost: float
    unit_capex: tuple[float, ...]   # one entry per fleet unit, rank order
    fleet_total: float


@dataclass(frozen=True)
class DebtTerms:
    principal: float          # debt-funded share of fleet capex
    loan_amount: float        # principal + fees
    rate_pct: float
    term_years: int
    annual_payment: float


# ── Year row ────────────────────────────────────────────────────

@dataclass(frozen=True)
class YearRecord:
    """One projection year. Produced once by the fold, never mutated."""
    y: int
    year: int
    units_deployed: int
    rev_power: float
    rev_thermal: float
    rev_tipping: float
    rev_carbon: float
    rev_total: float
    waste_tipped_t: float
    opex_maint: float
    opex_fuel: float
    opex_fixed: float
    opex: float
    ebitda: float
    debt_service: float
    dscr: float | None
    capex: float
    cf: float
    dcf: float
    cum_dcf: float
    cum_cf: float

    def to_dict(self) -> dict:
        return asdict(self)


# ── Customer savings ────────────────────────────────────────────

@dataclass(frozen=True)
class CustomerSavings:
    """Per-unit, year-1 host cost today vs. under the service contract."""
    current_power: float
    current_thermal: float
    current_waste: float
    current_total: float
    service_power: float
    service_thermal: float
    service_waste: float
    service_total: float
    savings_annual: float
    savings_pct: float


# ── Model Result ────────────────────────────────────────────────

@dataclass(frozen=True)
class ModelResult:
    """Complete output for one scenario run."""
    npv: float
    irr: float | None
    payback_disc: int | None
    payback_simple: int | None
    dscr_min: float | None
    rev_per_unit: float
    rev_per_unit_power: float
    rev_per_unit_thermal: float
    rev_per_unit_tipping: float
    rev_per_unit_carbon: float
    years: tuple[YearRecord, ...]
    warnings: tuple[str, ...]
    yr1_revenue: float
    yr1_opex: float
    yr1_ebitda: float
    unit_performance: UnitPerformance
    capex_schedule: CapexSchedule
    debt: DebtTerms
    savings: CustomerSavings

    @property
    def cash_flows(self) -> list[float]:
        return [r.cf for r in self.years]

    @property
    def dataframe(self):
        """Year table as a pandas DataFrame. Lazy import."""
        import pandas as pd
        return pd.DataFrame([r.to_dict() for r in self.years]).set_index("year")

    def to_dict(self) -> dict:
        """Nested plain dict, ready for json.dump."""
        return asdict(self)


# ── Sensitivity ─────────────────────────────────────────────────

@dataclass(frozen=True)
class SensitivityRow:
    label: str
    attr: str
    lo: float       # NPV delta at -20 %
    hi: float       # NPV delta at +20 %
    range: float    # |NPV(+20 %) - NPV(-20 %)|

    def to_dict(self) -> dict:
        return asdict(self)

