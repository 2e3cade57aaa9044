#!/usr/bin/env python3
"""
Check a solver's SAT certificate against a DIMACS CNF formula.

Usage:
  python3 scripts/check_witness.py formula.cnf solver.out

Prints exactly one line, `VERIFIED` or `NOT VERIFIED`, on stdout.
Exit codes: 0 when a verdict is printed, 1 on a fatal input error (no verdict),
2 on a usage error.
"""

from __future__ import annotations

import argparse
import hashlib
import json
import sys
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from witness.checker import MODES, validate_witness  # noqa: E402
from witness.errors import WitnessError  # noqa: E402


def _sha256(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def _write_report(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Verify a SAT certificate against a DIMACS CNF formula")
    ap.add_argument("cnf", type=Path, help="DIMACS CNF formula")
    ap.add_argument("certificate", type=Path, help="Solver output with 's SATISFIABLE' and 'v' lines")
    ap.add_argument(
        "--mode",
        choices=MODES,
        default="stream",
        help="stream: check clauses while reading (default); materialize: read the whole formula first",
    )
    ap.add_argument(
        "--strict-unassigned",
        action="store_true",
        help="Reject certificates that leave any declared variable unassigned",
    )
    ap.add_argument("--report", type=Path, default=None, help="Optional path to write a JSON report")
    args = ap.parse_args(argv)

    try:
        verdict = validate_witness(
            cnf_path=args.cnf,
            certificate_path=args.certificate,
            mode=args.mode,
            strict_unassigned=args.strict_unassigned,
        )
    except (WitnessError, OSError) as ex:
        if args.report is not None:
            _write_report(
                args.report,
                {
                    "ok": False,
                    "error": str(ex),
                    "error_type": type(ex).__name__,
                    "cnf": str(args.cnf),
                    "certificate": str(args.certificate),
                },
            )
        print(f"ERROR: {ex}", file=sys.stderr)
        return 1

    if args.report is not None:
        report = verdict.as_report()
        report["cnf"] = str(args.cnf)
        report["certificate"] = str(args.certificate)
        report["cnf_sha256"] = _sha256(args.cnf)
        report["certificate_sha256"] = _sha256(args.certificate)
        _write_report(args.report, report)

    print("VERIFIED" if verdict.ok else "NOT VERIFIED")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
