# finmath/validate.py
from __future__ import annotations
import os, sys, json
from pathlib import Path
from typing import Any, Dict, Iterable, List
import yaml

from .schema import CASE_KEYS, SCENARIO_KEYS, SCHEMA


def _mode_from_env_or_flag(flag: str | None) -> str:
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def validate_case(case: Any, *, index: int = 0, mode: str = "relaxed") -> None:
    """
    Per-case guardrails:
      - relaxed: require {function, args}; function must be known
      - strict : also require a name and reject unknown case keys / arguments
    """
    where = f"cases[{index}]"
    if not isinstance(case, dict):
        raise SystemExit(f"{where}: expected a mapping, got {type(case).__name__}")

    required = {"function", "args"}
    if mode == "strict":
        required |= {"name"}
    missing = sorted(k for k in required if k not in case)
    if missing:
        raise SystemExit(f"{where}: missing required keys: {missing}")

    fn = str(case["function"]).lower()
    if fn not in SCHEMA:
        raise SystemExit(f"{where}: unknown function {case['function']!r}; expected one of {sorted(SCHEMA)}")

    args = case["args"]
    if not isinstance(args, dict):
        raise SystemExit(f"{where}: args must be a mapping of parameter name to value")

    entry = SCHEMA[fn]
    params = entry["params"]
    missing_args = [p for p in params[: entry["required"]] if p not in args]
    if missing_args:
        raise SystemExit(f"{where}: {fn} missing required args: {missing_args}")

    if mode == "strict":
        unknown = [k for k in case if k not in CASE_KEYS]
        if unknown:
            raise SystemExit(f"{where}: unknown keys (strict mode): {unknown}")
        unknown_args = [k for k in args if k not in params]
        if unknown_args:
            raise SystemExit(f"{where}: {fn} does not take {unknown_args} (strict mode)")


def validate_scenarios_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> None:
    """
    Minimal guardrails:
      - relaxed: require a non-empty `cases` list
      - strict : also reject unknown top-level keys
    """
    if not isinstance(data, dict):
        raise SystemExit("scenario file must hold a mapping at top level")
    cases = data.get("cases")
    if not isinstance(cases, list) or not cases:
        raise SystemExit("missing required key: 'cases' (a non-empty list)")

    if mode == "strict":
        unknown = [k for k in data.keys() if k not in SCENARIO_KEYS]
        if unknown:
            raise SystemExit(f"unknown top-level keys (strict mode): {unknown}")

    digits = data.get("digits", 0)
    if not isinstance(digits, int) or digits < 0:
        raise SystemExit("digits must be an integer >= 0")

    for i, case in enumerate(cases):
        validate_case(case, index=i, mode=mode)


def load_scenarios_from_file(path: Path) -> Dict[str, Any]:
    p = Path(path)
    if p.is_dir():
        # scenario_runner handles one file at a time
        raise SystemExit(f"{p} is a directory (expected a file)")
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text) or {}
    return json.loads(text or "{}")


def _iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.rglob(ext))


def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="finmath.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON scenario files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = _mode_from_env_or_flag(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in _iter_input_files(target):
            any_seen = True
            try:
                data = load_scenarios_from_file(f)
                validate_scenarios_dict(data, mode=mode)
                print(f"OK: {f}")
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
            except (OSError, ValueError, yaml.YAMLError) as e:
                print(f"{f}: ERROR: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0


if __name__ == "__main__":
    raise SystemExit(_main())
