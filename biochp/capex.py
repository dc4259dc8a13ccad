"""Fleet CAPEX under a learning curve.

Unit n (1-based) costs C1 * n^b with b = log2(LR), so every doubling of
cumulative units multiplies cost by LR. Units are deployed in rank order
1..N; the projection recognises a unit's cost in the year it deploys.
"""

from __future__ import annotations

from biochp.config import ScenarioInputs
from biochp.formulas import learning_exponent
from biochp.types import CapexSchedule


def unit1_capex(inputs: ScenarioInputs) -> float:
    """Installed cost of the first unit: equipment + ancillary + install."""
    return inputs.equipment_cost + inputs.ancillary_cost + inputs.install_cost


def build_unit_capex(base_cost: float, n_units: int,
                     learning_rate: float) -> list[float]:
    """Per-unit cost vector, length n_units.

    Unit 1 is exactly base_cost and unit 2 exactly base_cost * LR
    (set directly rather than via the power law, which drifts in the
    last bit for some LR values).
    """
    b = learning_exponent(learning_rate) if n_units >= 3 else 0.0
    costs = []
    for n in range(1, n_units + 1):
        if n == 1:
            costs.append(base_cost)
        elif n == 2:
            costs.append(base_cost * learning_rate)
        else:
            costs.append(base_cost * n ** b)
    return costs


def build_capex_schedule(inputs: ScenarioInputs) -> CapexSchedule:
    base = unit1_capex(inputs)
    costs = build_unit_capex(base, inputs.n_units, inputs.learning_rate)
    return CapexSchedule(
        unit1_cost=base,
        unit_capex=tuple(costs),
        fleet_total=sum(costs),
    )


def capex_for_units(schedule: CapexSchedule, prev_units: int,
                    units: int) -> float:
    """CAPEX for units prev_units+1 .. units (1-based rank order)."""
    return sum(schedule.unit_capex[prev_units:units])
