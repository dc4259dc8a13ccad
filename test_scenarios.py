"""Scenario inputs, presets, tornado sensitivity and sweeps."""

import json
from dataclasses import FrozenInstanceError

import pytest

from biochp import evaluate, sensitivity
from biochp.config import ScenarioInputs, preset_names
from biochp.scenarios import (
    SweepVariable, TrackedParameter, default_sweeps, perturb, run_multi_sweep,
    run_sweep, run_tornado, sensitivity_dataframe, tracked_parameters,
)


# ---- Inputs / presets ----

class TestScenarioInputs:
    def test_defaults_are_base_case(self):
        assert ScenarioInputs.defaults() == ScenarioInputs.from_preset("base")

    def test_presets(self):
        assert preset_names() == ["conservative", "base", "optimistic"]
        opt = ScenarioInputs.from_preset("optimistic")
        assert opt.n_units == 10
        assert opt.power_rate == 0.12
        # Fields outside the preset keep their defaults
        assert opt.loan_term_years == ScenarioInputs().loan_term_years

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown scenario preset"):
            ScenarioInputs.from_preset("aggressive")

    def test_with_overrides_returns_new_instance(self):
        base = ScenarioInputs()
        changed = base.with_overrides(power_rate=0.2)
        assert changed.power_rate == 0.2
        assert base.power_rate == 0.10

    def test_with_overrides_rejects_unknown_fields(self):
        with pytest.raises(ValueError, match="Unknown scenario input"):
            ScenarioInputs().with_overrides(power_price=0.2)

    def test_integer_fields_stay_integers(self):
        inputs = ScenarioInputs.from_mapping({"n_units": 4.0, "project_years": "12"})
        assert inputs.n_units == 4 and isinstance(inputs.n_units, int)
        assert inputs.project_years == 12

    def test_fractional_integer_field_rejected(self):
        with pytest.raises(ValueError, match="whole number"):
            ScenarioInputs().with_overrides(loan_term_years=4.5)
        assert ScenarioInputs().with_overrides(loan_term_years=4.0).loan_term_years == 4

    def test_inputs_are_frozen(self):
        with pytest.raises(FrozenInstanceError):
            ScenarioInputs().power_rate = 1.0

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "site.yaml"
        path.write_text("n_units: 2\ntipping_fee: 95\n")
        inputs = ScenarioInputs.from_file(path)
        assert inputs.n_units == 2
        assert inputs.tipping_fee == 95.0

    def test_from_json_file_on_preset(self, tmp_path):
        path = tmp_path / "site.json"
        path.write_text(json.dumps({"discount_rate_pct": 9}))
        inputs = ScenarioInputs.from_file(
            path, base=ScenarioInputs.from_preset("conservative"))
        assert inputs.discount_rate_pct == 9.0
        assert inputs.n_units == 1

    def test_unsupported_file_type(self, tmp_path):
        path = tmp_path / "site.toml"
        path.write_text("")
        with pytest.raises(ValueError, match="Unsupported"):
            ScenarioInputs.from_file(path)


# ---- Tornado ----

class TestTornado:
    def test_eight_tracked_parameters(self):
        labels = [p.label for p in tracked_parameters()]
        assert labels == [
            "Power Rate", "Thermal Rate", "Tipping Fee", "Carbon Price",
            "Availability", "BioCHP Cost", "Fuel Process Cost", "Discount Rate",
        ]

    def test_rows_sorted_by_descending_range(self):
        rows = sensitivity(ScenarioInputs())
        assert len(rows) == 8
        ranges = [r.range for r in rows]
        assert ranges == sorted(ranges, reverse=True)

    def test_largest_swing_first(self):
        inputs = ScenarioInputs()
        rows = sensitivity(inputs)
        swings = {}
        for p in tracked_parameters():
            lo = evaluate(perturb(inputs, p.attr, 0.8)).npv
            hi = evaluate(perturb(inputs, p.attr, 1.2)).npv
            swings[p.label] = abs(hi - lo)
        assert rows[0].label == max(swings, key=swings.get)

    def test_deltas_relative_to_baseline(self):
        inputs = ScenarioInputs()
        base_npv = evaluate(inputs).npv
        row = next(r for r in sensitivity(inputs) if r.attr == "power_rate")
        assert row.hi == pytest.approx(
            evaluate(inputs.with_overrides(power_rate=0.12)).npv - base_npv)
        assert row.lo < 0 < row.hi
        assert row.range == pytest.approx(abs(row.hi - row.lo))

    def test_discount_rate_direction(self):
        row = next(r for r in sensitivity(ScenarioInputs()) if r.attr == "discount_rate_pct")
        assert row.hi < 0 < row.lo

    def test_perturbation_is_unclamped(self):
        assert perturb(ScenarioInputs(availability=0.92), "availability", 1.2
                       ).availability == pytest.approx(1.104)

    def test_custom_parameter_list(self):
        rows = run_tornado(ScenarioInputs(),
                           [TrackedParameter("tipping_fee", "Tipping")])
        assert [r.label for r in rows] == ["Tipping"]

    def test_deterministic(self):
        inputs = ScenarioInputs.from_preset("conservative")
        assert sensitivity(inputs) == sensitivity(inputs)

    def test_dataframe(self):
        df = sensitivity_dataframe(sensitivity(ScenarioInputs()))
        assert list(df.columns) == ["label", "attr", "lo", "hi", "range"]
        assert len(df) == 8


# ---- Sweeps ----

class TestSweeps:
    def test_sweep_values(self):
        v = SweepVariable(attr="power_rate", base=0.10, low=0.06, high=0.14, steps=5)
        assert v.values == pytest.approx([0.06, 0.08, 0.10, 0.12, 0.14])
        assert SweepVariable(attr="power_rate", base=0.1, low=0, high=1,
                             steps=1).values == [0.1]

    def test_run_sweep_rows(self):
        v = SweepVariable(attr="power_rate", base=0.10, low=0.06, high=0.14, steps=3)
        result = run_sweep(v)
        assert len(result.rows) == 3
        assert [r["is_base"] for r in result.rows] == [False, True, False]
        npvs = [r["npv"] for r in result.rows]
        assert npvs == sorted(npvs)
        assert result.rows[1]["npv"] == pytest.approx(evaluate().npv)

    def test_sweep_dataframe(self):
        v = SweepVariable(attr="tipping_fee", base=80, low=60, high=100, steps=3)
        df = run_sweep(v).dataframe
        assert "npv" in df.columns and "tipping_fee" in df.columns
        assert len(df) == 3

    def test_multi_sweep_one_per_variable(self):
        sweeps = default_sweeps(steps=3)
        assert len(sweeps) == 8
        results = run_multi_sweep(sweeps[:2])
        assert [r.variable.attr for r in results] == ["power_rate", "thermal_rate"]
