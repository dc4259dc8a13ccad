"""Audit report formatter -- JSON + text output."""

from __future__ import annotations

import json
from collections import OrderedDict
from datetime import datetime
from pathlib import Path

from audit.checks import classify_check


def _verdict(summary: dict) -> str:
    return "CONSISTENT" if summary["arithmetic_fail"] == 0 else "ARITHMETIC_ERRORS"


def write_json_report(audit_data: dict, output_path: str | Path) -> Path:
    """Write audit results to JSON file."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    result = audit_data["model_result"]
    report = {
        "timestamp": datetime.now().isoformat(),
        "npv": result.npv,
        "irr": result.irr,
        "summary": audit_data["summary"],
        "verdict": _verdict(audit_data["summary"]),
        "checks": [
            {
                "section": r[0],
                "name": r[1],
                "expected": r[2],
                "actual": r[3],
                "delta": r[4],
                "passed": r[5],
                "category": classify_check(r[0], r[1]),
            }
            for r in audit_data["results"]
        ],
    }

    with open(path, "w") as f:
        json.dump(report, f, indent=2)

    return path


def _group_by_section(results: list[tuple]) -> OrderedDict[str, list]:
    sections: OrderedDict[str, list] = OrderedDict()
    for r in results:
        sections.setdefault(r[0], []).append(r)
    return sections


def format_text_report(audit_data: dict) -> str:
    """Format audit results as human-readable text."""
    summary = audit_data["summary"]
    sections = _group_by_section(audit_data["results"])
    lines: list[str] = []

    lines.append("=" * 72)
    lines.append("BIOCHP FLEET MODEL - AUDIT REPORT")
    lines.append("=" * 72)
    lines.append("")

    for category, title in (("arithmetic", "ARITHMETIC CHECKS"),
                            ("model_design", "MODEL DESIGN CHECKS")):
        lines.append(title)
        lines.append("-" * 72)
        for sec, checks in sections.items():
            subset = [r for r in checks if classify_check(r[0], r[1]) == category]
            if not subset:
                continue
            fails = [r for r in subset if not r[5]]
            status = "ALL PASS" if not fails else f"{len(fails)} FAIL"
            lines.append(f"  {sec} ({len(subset)} checks, {status})")
            for r in fails:
                lines.append(f"    FAIL  {r[1]}")
                lines.append(f"          expected: {r[2]:>16,.2f}")
                lines.append(f"          actual:   {r[3]:>16,.2f}")
                lines.append(f"          delta:    {r[4]:>16,.4f}")
            if not fails:
                lines.append(f"    (max delta: {max(r[4] for r in subset):,.6f})")
        lines.append("")

    lines.append("=" * 72)
    lines.append(
        f"  Total checks: {summary['total']}  |  "
        f"arithmetic {summary['arithmetic_pass']} pass / "
        f"{summary['arithmetic_fail']} fail  |  "
        f"design {summary['design_pass']} pass / "
        f"{summary['design_fail']} gap(s)")
    lines.append(f"  VERDICT: {_verdict(summary)}")
    lines.append("=" * 72)

    return "\n".join(lines)
