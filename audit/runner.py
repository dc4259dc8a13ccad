"""Audit runner -- orchestrates all checks against engine output."""

from __future__ import annotations

from biochp.config import ScenarioInputs
from biochp.orchestrator import evaluate
from biochp.types import ModelResult
from audit.checks import (
    check_year_identities,
    check_fleet,
    check_facility,
    check_valuation,
    classify_check,
)


def run_all_checks(
    result: ModelResult | None = None,
    inputs: ScenarioInputs | None = None,
) -> dict:
    """Run all audit checks. If result is None, runs the model first.

    inputs must be the scenario that produced result (defaults otherwise).

    Returns dict with:
        results: list of (section, name, expected, actual, delta, passed)
        summary: dict with counts
        model_result: the ModelResult used
    """
    if inputs is None:
        inputs = ScenarioInputs.defaults()
    if result is None:
        result = evaluate(inputs)

    all_results: list[tuple] = []
    all_results.extend(check_year_identities(result, inputs))
    all_results.extend(check_fleet(result, inputs))
    all_results.extend(check_facility(result))
    all_results.extend(check_valuation(result, inputs))

    # Summary
    arith = [r for r in all_results
             if classify_check(r[0], r[1]) == "arithmetic"]
    design = [r for r in all_results
              if classify_check(r[0], r[1]) == "model_design"]

    return {
        "results": all_results,
        "summary": {
            "total": len(all_results),
            "arithmetic_pass": sum(1 for r in arith if r[5]),
            "arithmetic_fail": sum(1 for r in arith if not r[5]),
            "design_pass": sum(1 for r in design if r[5]),
            "design_fail": sum(1 for r in design if not r[5]),
        },
        "model_result": result,
    }
