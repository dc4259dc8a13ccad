"""Scenario runner + sensitivity sweep engine.

Tornado: baseline NPV once, then each tracked input at x0.8 and x1.2
(all else fixed) -> NPV deltas, sorted by swing.
Sweep: one input across N evenly spaced values -> metric rows.

Each perturbed run is a full, independent evaluate() call, so the model
is re-run 16 times for a tornado. Perturbations are not clamped to any
physical range (availability 0.92 x 1.2 = 1.104 is computed as-is).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from biochp.analytics import extract_metrics
from biochp.config import ScenarioInputs, load_sensitivity_config
from biochp.orchestrator import evaluate
from biochp.types import SensitivityRow

logger = logging.getLogger(__name__)


# ── Tornado (one-at-a-time ±20 %) ───────────────────────────────


@dataclass(frozen=True)
class TrackedParameter:
    attr: str
    label: str


def tracked_parameters() -> list[TrackedParameter]:
    """The fixed whitelist from config/sensitivity.json, in config order."""
    cfg = load_sensitivity_config()
    return [TrackedParameter(p["attr"], p["label"]) for p in cfg["parameters"]]


def perturbation_factors() -> tuple[float, float]:
    cfg = load_sensitivity_config()["perturbation"]
    return cfg["low"], cfg["high"]


def perturb(inputs: ScenarioInputs, attr: str, factor: float) -> ScenarioInputs:
    """Copy of inputs with one field scaled by factor."""
    return inputs.with_overrides(**{attr: getattr(inputs, attr) * factor})


def run_tornado(
    base_inputs: ScenarioInputs | None = None,
    parameters: list[TrackedParameter] | None = None,
) -> list[SensitivityRow]:
    """NPV deltas at low/high perturbation, sorted by descending range."""
    if base_inputs is None:
        base_inputs = ScenarioInputs.defaults()
    if parameters is None:
        parameters = tracked_parameters()
    low, high = perturbation_factors()

    base_npv = evaluate(base_inputs).npv

    rows = []
    for p in parameters:
        npv_lo = evaluate(perturb(base_inputs, p.attr, low)).npv
        npv_hi = evaluate(perturb(base_inputs, p.attr, high)).npv
        rows.append(SensitivityRow(
            label=p.label,
            attr=p.attr,
            lo=npv_lo - base_npv,
            hi=npv_hi - base_npv,
            range=abs(npv_hi - npv_lo),
        ))
        logger.debug("tornado %s: lo=%.0f hi=%.0f", p.attr, npv_lo, npv_hi)

    rows.sort(key=lambda r: r.range, reverse=True)
    return rows


def sensitivity_dataframe(rows: list[SensitivityRow]):
    """Tornado rows as a pandas DataFrame. Lazy import."""
    import pandas as pd
    return pd.DataFrame([r.to_dict() for r in rows])


# ── Single-variable sweeps ──────────────────────────────────────


@dataclass
class SweepVariable:
    """A variable to sweep in sensitivity analysis.

    attr: ScenarioInputs attribute name (e.g. "power_rate")
    base: Base case value (e.g. 0.10)
    low: Low end of sweep range (e.g. 0.06)
    high: High end of sweep range (e.g. 0.14)
    steps: Number of steps (e.g. 5 -> values at 0.06, 0.08, ..., 0.14)
    label: Human-readable label for charts (e.g. "Power Rate")
    """
    attr: str
    base: float
    low: float
    high: float
    steps: int = 9
    label: str = ""

    @property
    def values(self) -> list[float]:
        """Generate sweep values from low to high."""
        if self.steps <= 1:
            return [self.base]
        step_size = (self.high - self.low) / (self.steps - 1)
        return [self.low + i * step_size for i in range(self.steps)]


@dataclass
class SweepResult:
    """Result of a sensitivity sweep. rows[i] = {swept value + metrics}."""
    variable: SweepVariable
    rows: list[dict] = field(default_factory=list)

    @property
    def dataframe(self):
        """Convert to pandas DataFrame. Lazy import."""
        import pandas as pd
        return pd.DataFrame(self.rows)


def run_sweep(
    variable: SweepVariable,
    base_inputs: ScenarioInputs | None = None,
) -> SweepResult:
    """Run the full model once per value of variable, collecting metrics."""
    if base_inputs is None:
        base_inputs = ScenarioInputs.defaults()

    result = SweepResult(variable=variable)
    for val in variable.values:
        model_result = evaluate(base_inputs.with_overrides(**{variable.attr: val}))
        row = {variable.attr: val, "is_base": abs(val - variable.base) < 1e-10}
        row.update(extract_metrics(model_result))
        result.rows.append(row)

    logger.debug("sweep %s: %d runs", variable.attr, len(result.rows))
    return result


def run_multi_sweep(
    variables: list[SweepVariable],
    base_inputs: ScenarioInputs | None = None,
) -> list[SweepResult]:
    """One sweep per variable (one at a time, not a grid)."""
    if base_inputs is None:
        base_inputs = ScenarioInputs.defaults()
    return [run_sweep(v, base_inputs) for v in variables]


def default_sweeps(base_inputs: ScenarioInputs | None = None,
                   spread: float = 0.4, steps: int = 5) -> list[SweepVariable]:
    """±spread sweeps around the base value of every tracked parameter."""
    if base_inputs is None:
        base_inputs = ScenarioInputs.defaults()
    out = []
    for p in tracked_parameters():
        base = getattr(base_inputs, p.attr)
        out.append(SweepVariable(
            attr=p.attr, base=base,
            low=base * (1 - spread), high=base * (1 + spread),
            steps=steps, label=p.label,
        ))
    return out
