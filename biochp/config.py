"""Scenario inputs + JSON config loading: no UI."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml

_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


@lru_cache(maxsize=16)
def load_config(name: str) -> dict:
    """Load a JSON config file by name (without .json extension)."""
    path = _CONFIG_DIR / f"{name}.json"
    with open(path, "r") as f:
        return json.load(f)


def load_presets() -> dict:
    return load_config("scenarios")


def load_sensitivity_config() -> dict:
    return load_config("sensitivity")


def preset_names() -> list[str]:
    return list(load_presets().keys())


@dataclass(frozen=True)
class ScenarioInputs:
    """One scenario for a single model run.

    Rates ending in ``_pct`` are percentages (3.0 = 3 %/yr).
    Availability and utilisation are plain fractions.
    Defaults are the base case.
    """
    # Unit performance
    elec_output_kw: float = 225.0
    thermal_output_kw: float = 400.0
    availability: float = 0.92
    feedstock_tpd: float = 5.0
    n_units: int = 3
    # Power sales
    power_rate: float = 0.10            # per kWh
    power_utilization: float = 1.0
    power_escalation_pct: float = 3.0
    # Thermal sales
    thermal_rate: float = 0.027         # per kWh thermal
    thermal_utilization: float = 1.0
    thermal_escalation_pct: float = 3.0
    # Tipping
    tipping_fee: float = 80.0           # per ton
    waste_supply_tpy: float = 3000.0
    tipping_escalation_pct: float = 3.0
    # Carbon credits (tCO2e per unit-year)
    carbon_methane_offset: float = 1200.0
    carbon_fuel_offset: float = 1100.0
    carbon_project_emissions: float = 500.0
    carbon_price: float = 20.0
    carbon_escalation_pct: float = 3.0
    # Customer baseline (what the host pays today)
    customer_power_rate: float = 0.143
    customer_thermal_rate: float = 0.034
    customer_waste_rate: float = 100.0
    # CAPEX, unit 1
    equipment_cost: float = 660000.0
    ancillary_cost: float = 45000.0
    install_cost: float = 25000.0
    # OPEX
    maintenance_rate: float = 0.025     # per kWh generated
    fuel_processing_cost: float = 70.0  # per ton
    insurance_cost: float = 2000.0      # per unit-year
    management_cost: float = 2920.0     # per unit-year
    maintenance_escalation_pct: float = 3.0
    fuel_escalation_pct: float = 3.0
    # Financing
    equity_fraction: float = 0.50
    debt_rate_pct: float = 6.0
    loan_term_years: int = 5
    loan_fee_pct: float = 2.0
    # Valuation
    discount_rate_pct: float = 7.0
    project_years: int = 10
    start_year: int = 2026
    # Fleet rollout
    learning_rate: float = 0.90
    units_per_year: float = 2.0

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def with_overrides(self, **changes: Any) -> "ScenarioInputs":
        """Return a copy with the given fields replaced.

        Raises ValueError on any name that is not a ScenarioInputs field.
        """
        unknown = sorted(set(changes) - set(self.field_names()))
        if unknown:
            raise ValueError(f"Unknown scenario input(s): {', '.join(unknown)}")
        return replace(self, **_coerce(changes))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ScenarioInputs":
        """Build from a plain dict of overrides on top of the defaults."""
        return cls().with_overrides(**dict(mapping))

    @classmethod
    def from_preset(cls, name: str) -> "ScenarioInputs":
        """Apply a named preset from config/scenarios.json to the defaults."""
        presets = load_presets()
        if name not in presets:
            raise ValueError(
                f"Unknown scenario preset: {name}. "
                f"Available: {', '.join(presets)}")
        return cls.from_mapping(presets[name])

    @classmethod
    def from_file(cls, path: str | Path,
                  base: "ScenarioInputs | None" = None) -> "ScenarioInputs":
        """Load overrides from a .json or .yaml/.yml file."""
        path = Path(path)
        suffix = path.suffix.lower()
        with open(path, "r") as f:
            if suffix == ".json":
                data = json.load(f)
            elif suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                raise ValueError(f"Unsupported scenario file type: {path.suffix}")
        if base is None:
            base = cls()
        return base.with_overrides(**(data or {}))

    @classmethod
    def defaults(cls) -> "ScenarioInputs":
        """Return default ScenarioInputs (base case)."""
        return cls()

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.field_names()}


_INT_FIELDS = {"n_units", "loan_term_years", "project_years", "start_year"}


def _coerce(changes: dict) -> dict:
    """Integer fields stay integers; everything else becomes float."""
    out = {}
    for key, value in changes.items():
        if key in _INT_FIELDS:
            number = float(value)
            if not number.is_integer():
                raise ValueError(
                    f"Scenario input {key} must be a whole number, got {value!r}")
            out[key] = int(number)
        else:
            out[key] = float(value)
    return out
