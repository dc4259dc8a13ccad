"""Customer savings: what one host site pays today vs. under the service.

Per unit, year 1, no escalation. Waste is capped by the site's supply,
same as tipping revenue.
"""

from __future__ import annotations

from biochp.config import ScenarioInputs
from biochp.types import CustomerSavings, UnitPerformance


def customer_savings(inputs: ScenarioInputs,
                     perf: UnitPerformance) -> CustomerSavings:
    p = inputs
    power_kwh = perf.e_power_yr * p.power_utilization
    thermal_kwh = perf.e_thermal_yr * p.thermal_utilization
    waste_t = min(perf.feedstock_tpy, p.waste_supply_tpy)

    current_power = power_kwh * p.customer_power_rate
    current_thermal = thermal_kwh * p.customer_thermal_rate
    current_waste = waste_t * p.customer_waste_rate
    current_total = current_power + current_thermal + current_waste

    service_power = power_kwh * p.power_rate
    service_thermal = thermal_kwh * p.thermal_rate
    service_waste = waste_t * p.tipping_fee
    service_total = service_power + service_thermal + service_waste

    savings = current_total - service_total
    return CustomerSavings(
        current_power=current_power,
        current_thermal=current_thermal,
        current_waste=current_waste,
        current_total=current_total,
        service_power=service_power,
        service_thermal=service_thermal,
        service_waste=service_waste,
        service_total=service_total,
        savings_annual=savings,
        savings_pct=(savings / current_total * 100) if current_total > 0 else 0.0,
    )
