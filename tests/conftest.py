from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SCRIPT_DIR = REPO_ROOT / "scripts"
for p in (REPO_ROOT, SCRIPT_DIR):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


def dimacs_text(nvars: int, clauses: list[list[int]], *, nclauses: int | None = None) -> str:
    declared = len(clauses) if nclauses is None else nclauses
    lines = [f"p cnf {nvars} {declared}"]
    lines.extend(" ".join(str(lit) for lit in clause + [0]) for clause in clauses)
    return "\n".join(lines) + "\n"


def certificate_text(literals: list[int], *, status: str | None = "SATISFIABLE") -> str:
    lines = ["c produced by test"]
    if status is not None:
        lines.append(f"s {status}")
    lines.append("v " + " ".join(str(lit) for lit in literals + [0]))
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def two_clause_cnf(write_file) -> Path:
    return write_file("f.cnf", "p cnf 2 2\n1 2 0\n-1 -2 0\n")
