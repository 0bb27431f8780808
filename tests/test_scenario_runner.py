import json
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from finmath.finance.numeric import DECIMAL
from finmath.scenario_runner import RunResult, evaluate, format_rounded, run_case, run_cases, run_file

ROOT = Path(__file__).resolve().parents[1]
REFERENCE = ROOT / "finmath" / "inputs" / "scenarios" / "reference_cases.yaml"


def test_reference_cases_all_agree(tmp_path, monkeypatch):
    monkeypatch.delenv("VALIDATION_MODE", raising=False)
    res = run_file(REFERENCE, tmp_path / "out")
    assert isinstance(res, RunResult)
    s = res.summary
    assert s["cases"] == 16
    assert s["errors"] == 0
    assert s["agreed"] == s["cases"]
    assert s["results"]["pmt_car_loan"] == "101.15"
    assert s["results"]["irr_semiannual_quote"] == "0.0608"
    assert s["results"]["rate_zero_interest"] == "0.0000"

    assert json.loads(res.summary_path.read_text(encoding="utf-8")) == s
    df = pd.read_csv(res.results_path)
    assert list(df.columns) == ["name", "function", "digits", "decimal", "float", "agree", "error"]
    assert len(df) == 16
    assert df["agree"].all()


def test_jsonl_output(tmp_path):
    res = run_file(REFERENCE, tmp_path, fmt="jsonl", mode="strict")
    assert res.results_path.name == "scenario_results.jsonl"
    lines = res.results_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 16
    assert json.loads(lines[0])["name"] == "pmt_car_loan"


def test_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        run_file(REFERENCE, tmp_path, fmt="xlsx")


def test_failing_case_is_recorded_not_raised():
    row = run_case(
        {"name": "no_periods", "function": "pmt", "args": {"rate": 0.01, "nper": 0, "pv": 1000}},
        digits=2,
        exact=DECIMAL,
    )
    assert row["agree"] is False
    assert row["decimal"] == "" and row["float"] == ""
    assert row["error"].startswith("InvalidArgumentError: nper")


def test_case_digits_override_file_digits():
    rows = run_cases(
        {
            "digits": 2,
            "cases": [
                {"name": "a", "function": "sln", "args": {"cost": 10, "salvage": 0, "life": 3}},
                {"name": "b", "function": "sln", "args": {"cost": 10, "salvage": 0, "life": 3}, "digits": 5},
            ],
        }
    )
    assert [r["decimal"] for r in rows] == ["3.33", "3.33333"]
    assert all(r["agree"] for r in rows)


def test_decimal_precision_from_file():
    rows = run_cases(
        {"decimal_precision": 4, "cases": [{"function": "sln", "args": {"cost": 1, "salvage": 0, "life": 3}}]}
    )
    assert rows[0]["name"] == "sln"
    assert rows[0]["decimal"] == "0.33"


def test_evaluate():
    assert evaluate("SLN", {"cost": 10000, "salvage": 1000, "life": 5}) == 1800
    assert isinstance(evaluate("sln", {"cost": 1, "salvage": 0, "life": 4}, num=DECIMAL), Decimal)
    with pytest.raises(KeyError):
        evaluate("xnpv", {})


@pytest.mark.parametrize(
    "value,digits,expected",
    [
        (101.1477, 2, "101.15"),
        (-0.001, 2, "0.00"),
        (Decimal("-0.0000"), 2, "0.00"),
        (-1.5, 2, "-1.50"),
        (-10.0, 0, "-10"),
        (Decimal("0.06080"), 4, "0.0608"),
    ],
)
def test_format_rounded(value, digits, expected):
    assert format_rounded(value, digits) == expected
