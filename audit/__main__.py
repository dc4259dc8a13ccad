"""CLI entry: python -m audit [preset]"""

import sys
from pathlib import Path

from biochp.config import ScenarioInputs
from audit.runner import run_all_checks
from audit.report import write_json_report, format_text_report


def main():
    preset = sys.argv[1] if len(sys.argv) > 1 else "base"
    inputs = ScenarioInputs.from_preset(preset)

    print(f"Running model ({preset})...")
    audit_data = run_all_checks(inputs=inputs)

    print(format_text_report(audit_data))

    output_dir = Path(__file__).resolve().parent.parent / "output"
    json_path = write_json_report(
        audit_data, output_dir / f"audit_report_{preset}.json")
    print(f"\nJSON report written to: {json_path}")

    if audit_data["summary"]["arithmetic_fail"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
