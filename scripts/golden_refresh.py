from __future__ import annotations
import json, os, subprocess, sys
from pathlib import Path

SCENARIO = Path("finmath/inputs/scenarios/reference_cases.yaml")
OUTDIR   = Path("_out_golden_baseline")
BASELINE = Path("tests/golden/summary.json")

def main() -> int:
    if not SCENARIO.exists():
        print(f"[x] Missing scenario: {SCENARIO}", file=sys.stderr)
        return 2

    OUTDIR.mkdir(parents=True, exist_ok=True)
    env = os.environ.copy()
    env["VALIDATION_MODE"] = "strict"

    cmd = [
        sys.executable, "-m", "finmath", "scenarios",
        "--scenarios", str(SCENARIO),
        "--outputs-dir", str(OUTDIR),
        "--format", "csv",
    ]
    subprocess.run(cmd, check=True, env=env)

    sj = OUTDIR / "summary.json"
    if not sj.exists():
        print("[x] summary.json not produced; check CLI/run_file", file=sys.stderr)
        return 3

    data = json.loads(sj.read_text(encoding="utf-8"))
    if data.get("errors"):
        print(f"[x] {data['errors']} reference case(s) failed; not refreshing", file=sys.stderr)
        return 4
    if data.get("agreed") != data.get("cases"):
        print("[x] decimal and float results disagree; not refreshing", file=sys.stderr)
        return 5

    # Only the rounded decimal results go into the baseline
    BASELINE.parent.mkdir(parents=True, exist_ok=True)
    BASELINE.write_text(json.dumps(data["results"], indent=2, sort_keys=True) + "\n", encoding="utf-8")
    print(f"[ok] Wrote baseline {BASELINE}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
