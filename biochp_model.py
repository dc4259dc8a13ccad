#!/usr/bin/env python3
"""
BioCHP Fleet Financial Model
----------------------------
Command-line runner for the fleet engine: one scenario, optional tornado
sensitivity, optional export of the year table.

Usage:
    python biochp_model.py                          # Base case summary
    python biochp_model.py --scenario optimistic    # Named preset
    python biochp_model.py --inputs site.yaml       # Overrides from file
    python biochp_model.py --sensitivity            # Tornado table
    python biochp_model.py --export out.xlsx        # Year table (.json/.xlsx)
"""

import argparse
import json
import logging
from pathlib import Path

from biochp.config import ScenarioInputs, preset_names
from biochp.diagnostics import Severity, classify_warning
from biochp.facility import build_loan_schedule
from biochp.orchestrator import evaluate, sensitivity
from biochp.scenarios import sensitivity_dataframe

logger = logging.getLogger("biochp_model")


def _money(v):
    if v is None:
        return "-"
    sign = "-" if v < 0 else ""
    v = abs(v)
    if v >= 1e6:
        return f"{sign}${v / 1e6:.1f}M"
    if v >= 1e3:
        return f"{sign}${v / 1e3:.0f}K"
    return f"{sign}${v:.0f}"


def summary(inputs, result) -> str:
    """Plain-text scenario summary."""
    irr = f"{result.irr * 100:.1f}%" if result.irr is not None else "-"
    payback = (f"{result.payback_disc} yrs" if result.payback_disc is not None
               else f"> {inputs.project_years}")
    dscr = f"{result.dscr_min:.2f}x" if result.dscr_min is not None else "-"

    lines = [
        "=" * 60,
        "BIOCHP FLEET FINANCIAL MODEL",
        "=" * 60,
        f"  Units:            {inputs.n_units} "
        f"({inputs.units_per_year:g}/yr, LR {inputs.learning_rate:.2f})",
        f"  Fleet CAPEX:      {_money(result.capex_schedule.fleet_total)}",
        f"  Loan:             {_money(result.debt.loan_amount)} "
        f"-> {_money(result.debt.annual_payment)}/yr",
        "",
        f"  NPV @ {inputs.discount_rate_pct:g}%:       {_money(result.npv)}",
        f"  IRR:              {irr}",
        f"  Payback (disc):   {payback}",
        f"  DSCR min:         {dscr}",
        f"  Revenue / unit:   {_money(result.rev_per_unit)}/yr",
        f"  Customer savings: {result.savings.savings_pct:.1f}% "
        f"({_money(result.savings.savings_annual)}/yr)",
    ]
    if result.warnings:
        lines.append("")
        for w in result.warnings:
            tag = "!!" if classify_warning(w) is Severity.CRITICAL else " !"
            lines.append(f"  {tag} {w}")
    lines.append("=" * 60)
    return "\n".join(lines)


def export(inputs, result, path: Path) -> Path:
    """Write the year table. .xlsx goes through pandas/openpyxl."""
    suffix = path.suffix.lower()
    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".xlsx":
        import pandas as pd
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            result.dataframe.to_excel(writer, sheet_name="Years")
            schedule = build_loan_schedule(result.debt)
            if schedule:
                pd.DataFrame(schedule).to_excel(
                    writer, sheet_name="Loan", index=False)
    elif suffix == ".json":
        with open(path, "w") as f:
            json.dump({"inputs": inputs.to_dict(), "result": result.to_dict()},
                      f, indent=2)
    else:
        raise ValueError(f"Unsupported export type: {path.suffix}")
    return path


def main():
    parser = argparse.ArgumentParser(description="BioCHP Fleet Financial Model")
    parser.add_argument("--scenario", choices=preset_names(), default=None,
                        help="Apply a named preset to the defaults")
    parser.add_argument("--inputs", type=Path, default=None,
                        help="JSON/YAML file of input overrides")
    parser.add_argument("--sensitivity", action="store_true",
                        help="Print the +/-20%% tornado table")
    parser.add_argument("--export", type=Path, default=None,
                        help="Write year table to .json or .xlsx")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    inputs = (ScenarioInputs.from_preset(args.scenario) if args.scenario
              else ScenarioInputs.defaults())
    if args.inputs is not None:
        inputs = ScenarioInputs.from_file(args.inputs, base=inputs)
        logger.info("Loaded overrides from %s", args.inputs)

    result = evaluate(inputs)
    print(summary(inputs, result))

    if args.sensitivity:
        df = sensitivity_dataframe(sensitivity(inputs))
        print()
        print(df[["label", "lo", "hi", "range"]].to_string(
            index=False, float_format=lambda v: f"{v:,.0f}"))

    if args.export is not None:
        path = export(inputs, result, args.export)
        print(f"Output saved to: {path}")


if __name__ == "__main__":
    main()
