# finmath/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import json

import pandas as pd

from finmath.errors import FinancialError
from finmath.finance.numeric import DEFAULT_DECIMAL_PRECISION, FLOAT, Numeric, get_numeric
from .schema import CALLABLES, SCHEMA
from .validate import _mode_from_env_or_flag, load_scenarios_from_file, validate_scenarios_dict

DEFAULT_DIGITS = 2


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None


def evaluate(function: str, args: Dict[str, Any], *, num: Numeric = FLOAT):
    """Call one financial function by name with keyword args in the given representation."""
    name = function.lower()
    if name not in CALLABLES:
        raise KeyError(f"unknown function {function!r}; expected one of {sorted(SCHEMA)}")
    return CALLABLES[name](**args, num=num)


def format_rounded(value: Any, digits: int) -> str:
    """Fixed-point text at `digits` places, with no negative zero."""
    text = f"{value:.{digits}f}"
    if text.lstrip("-").strip("0.") == "":
        text = text.lstrip("-")
    return text


def _try(function: str, args: Dict[str, Any], num: Numeric):
    try:
        return evaluate(function, args, num=num), ""
    except (FinancialError, ArithmeticError, TypeError) as e:
        return None, f"{type(e).__name__}: {e}"


def run_case(case: Dict[str, Any], *, digits: int, exact: Numeric) -> Dict[str, Any]:
    """
    Evaluate one case in both representations. `agree` is True when both
    succeed and round to the same text.
    """
    fn = str(case["function"]).lower()
    d = int(case.get("digits", digits))
    dec, dec_err = _try(fn, case["args"], exact)
    flt, flt_err = _try(fn, case["args"], FLOAT)
    dec_txt = format_rounded(dec, d) if dec is not None else ""
    flt_txt = format_rounded(flt, d) if flt is not None else ""
    return {
        "name": case.get("name", fn),
        "function": fn,
        "digits": d,
        "decimal": dec_txt,
        "float": flt_txt,
        "agree": bool(dec_txt) and dec_txt == flt_txt,
        "error": dec_err or flt_err,
    }


def run_cases(data: Dict[str, Any], *, precision: Optional[int] = None) -> List[Dict[str, Any]]:
    digits = int(data.get("digits", DEFAULT_DIGITS))
    prec = precision or int(data.get("decimal_precision", DEFAULT_DECIMAL_PRECISION))
    exact = get_numeric("decimal", prec)
    return [run_case(c, digits=digits, exact=exact) for c in data["cases"]]


def _write(rows: List[Dict[str, Any]], out_dir: Path, fmt: str) -> Path:
    df = pd.DataFrame(rows, columns=["name", "function", "digits", "decimal", "float", "agree", "error"])
    if fmt == "jsonl":
        path = out_dir / "scenario_results.jsonl"
        df.to_json(path, orient="records", lines=True)
    else:
        path = out_dir / "scenario_results.csv"
        df.to_csv(path, index=False)
    return path


def run_file(
    cfg_path: Path | str,
    out_dir: Path | str,
    *,
    fmt: str = "csv",
    mode: Optional[str] = None,
    precision: Optional[int] = None,
) -> RunResult:
    """
    Validate and evaluate a scenario file, writing results plus summary.json
    into out_dir. Validation failures raise SystemExit.
    """
    if fmt not in ("csv", "jsonl"):
        raise ValueError(f"unsupported format: {fmt!r}")
    data = load_scenarios_from_file(Path(cfg_path))
    validate_scenarios_dict(data, mode=_mode_from_env_or_flag(mode))

    rows = run_cases(data, precision=precision)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    results_path = _write(rows, out, fmt)

    summary = {
        "cases": len(rows),
        "agreed": sum(1 for r in rows if r["agree"]),
        "errors": sum(1 for r in rows if r["error"]),
        "results": {r["name"]: r["decimal"] for r in rows},
    }
    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2, sort_keys=True), encoding="utf-8")
    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path)


__all__ = ["RunResult", "evaluate", "format_rounded", "run_case", "run_cases", "run_file"]
