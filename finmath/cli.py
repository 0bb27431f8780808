# finmath/cli.py
from __future__ import annotations

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List

from .config import Settings, load_settings
from .errors import FinancialError
from .finance.schedule import amortization_schedule
from .schema import SCHEMA
from .scenario_runner import evaluate, format_rounded, run_file


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--numeric",
        choices=["decimal", "float"],
        default=None,
        help="Numeric representation (default: from config / FINMATH_NUMERIC, else decimal).",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to a YAML settings file (numeric, decimal_precision, digits, guess).",
    )
    p.add_argument(
        "--due",
        choices=["end", "begin"],
        default="end",
        help="Payments due at the end (default) or beginning of each period.",
    )


def _parse_args(argv: List[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="finmath",
        description="Annuity, depreciation and rate-of-return calculations",
    )
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("call", help="Evaluate one function and print the rounded result.")
    c.add_argument("function", choices=sorted(SCHEMA), help="Function name.")
    c.add_argument(
        "values",
        nargs="+",
        help="Positional arguments in the function's order; for npv the rate then the flows, for irr the flows.",
    )
    c.add_argument("--guess", default=None, help="Starting point for irr / rate.")
    c.add_argument("--factor", default=None, help="Declining-balance factor for ddb (default 2).")
    c.add_argument("--digits", type=int, default=None, help="Decimal places to print (default: from config, else 2).")
    _add_common(c)

    s = sub.add_parser("scenarios", help="Evaluate a scenario file under both representations.")
    s.add_argument("--scenarios", required=True, help="YAML/JSON scenario file.")
    s.add_argument(
        "--outputs-dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    s.add_argument(
        "--format",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for result rows (default: csv).",
    )
    s.add_argument("--config", default=None, help="Path to a YAML settings file.")
    v = s.add_mutually_exclusive_group()
    v.add_argument("--strict", action="store_true", help="Enable strict validation (unknown keys raise).")
    v.add_argument("--relaxed", action="store_true", help="Enable relaxed validation (unknown keys ignored).")

    a = sub.add_parser("schedule", help="Write the amortization schedule of a loan to CSV.")
    a.add_argument("rate")
    a.add_argument("nper")
    a.add_argument("pv")
    a.add_argument("fv", nargs="?", default="0")
    a.add_argument("--outputs-dir", default="outputs", help="Directory for schedule.csv (default: outputs).")
    _add_common(a)
    return p.parse_args(argv)


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    return _parse_args(argv)


def _apply_validation_mode(ns: argparse.Namespace) -> None:
    # Default: leave env as-is; flags override explicitly.
    if getattr(ns, "strict", False):
        os.environ["VALIDATION_MODE"] = "strict"
    elif getattr(ns, "relaxed", False):
        os.environ["VALIDATION_MODE"] = "relaxed"


def _settings(ns: argparse.Namespace) -> Settings:
    settings = load_settings(ns.config)
    numeric = getattr(ns, "numeric", None)
    if numeric:
        settings = replace(settings, numeric=numeric)
    return settings


def _call_args(function: str, values: List[str], ns: argparse.Namespace, settings: Settings) -> Dict[str, Any]:
    """Map CLI positionals onto the function's parameters."""
    params = SCHEMA[function]["params"]
    if function == "irr":
        return {"cashflows": values, "guess": ns.guess if ns.guess is not None else settings.guess}
    if function == "npv":
        return {"rate": values[0], "cashflows": values[1:]}

    positional = [p for p in params if p not in ("due", "guess", "factor")]
    if len(values) > len(positional):
        raise SystemExit(f"{function} takes at most {len(positional)} values, got {len(values)}")
    if len(values) < SCHEMA[function]["required"]:
        raise SystemExit(f"{function} needs at least {SCHEMA[function]['required']} values, got {len(values)}")
    args: Dict[str, Any] = dict(zip(positional, values))
    if "due" in params:
        args["due"] = ns.due
    if "guess" in params:
        args["guess"] = ns.guess if ns.guess is not None else settings.guess
    if "factor" in params and ns.factor is not None:
        args["factor"] = ns.factor
    return args


def _run_call(ns: argparse.Namespace) -> int:
    settings = _settings(ns)
    args = _call_args(ns.function, ns.values, ns, settings)
    value = evaluate(ns.function, args, num=settings.backend())
    digits = ns.digits if ns.digits is not None else settings.digits
    print(format_rounded(value, digits))
    return 0


def _run_scenarios(ns: argparse.Namespace) -> int:
    _apply_validation_mode(ns)
    settings = load_settings(ns.config)
    res = run_file(
        Path(ns.scenarios).resolve(),
        Path(ns.outputs_dir).resolve(),
        fmt=ns.fmt,
        precision=settings.decimal_precision,
    )
    s = res.summary
    print(f"Ran {s['cases']} cases: {s['agreed']} agree, {s['errors']} with errors.")
    print(f"Wrote {res.results_path} and {res.summary_path}")
    return 0


def _run_schedule(ns: argparse.Namespace) -> int:
    settings = _settings(ns)
    df = amortization_schedule(ns.rate, ns.nper, ns.pv, ns.fv, ns.due, num=settings.backend())
    out = Path(ns.outputs_dir).resolve()
    out.mkdir(parents=True, exist_ok=True)
    path = out / "schedule.csv"
    df.to_csv(path, index=False)
    print(f"Wrote {len(df)} periods to {path}")
    return 0


def main(argv: List[str] | None = None) -> int:
    try:
        ns = _parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on usage errors and 0 on --help
        return int(e.code) if isinstance(e.code, int) else 2

    runners = {"call": _run_call, "scenarios": _run_scenarios, "schedule": _run_schedule}
    try:
        return runners[ns.command](ns)
    except FinancialError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except SystemExit as e:
        # validation failures carry a message instead of a code
        if isinstance(e.code, int):
            return e.code
        print(f"ERROR: {e.code}", file=sys.stderr)
        return 2
    except (OSError, ValueError, ArithmeticError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


__all__ = ["main", "parse_args"]
