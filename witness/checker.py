"""
Satisfaction checking of a DIMACS formula against a solver certificate.

The checker consumes any iterable of clauses: the clause list of a
materialized `Formula`, or a `ClauseStream` that parses clauses on demand.
Both go through `check_clauses`, so the two modes cannot disagree on a
verdict for well-formed input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from witness.assignment import Assignment
from witness.certificate import parse_certificate
from witness.formula import Formula, open_dimacs, parse_dimacs, read_dimacs_header
from witness.literal import Lit

MODES = ("stream", "materialize")
UNASSIGNED_SAMPLE = 20


class ClauseWatch:
    """Tracks whether any literal of the clause being read is satisfied."""

    def __init__(self, assignment: Assignment) -> None:
        self.assignment = assignment
        self.satisfied = False

    def observe(self, lit: Lit) -> bool:
        if not self.satisfied and lit.sat_by(self.assignment):
            self.satisfied = True
        return self.satisfied

    def close(self) -> bool:
        satisfied = self.satisfied
        self.satisfied = False
        return satisfied


@dataclass(frozen=True)
class Verdict:
    ok: bool
    num_vars: int
    num_clauses: int
    clauses_checked: int
    mode: str = "materialize"
    first_unsat_clause_idx: int | None = None
    first_unsat_clause: tuple[Lit, ...] | None = None
    unassigned_count: int = 0
    first_unassigned_vars: list[int] = field(default_factory=list)
    strict_unassigned: bool = False

    def as_report(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "mode": self.mode,
            "strict_unassigned": self.strict_unassigned,
            "num_vars": self.num_vars,
            "num_clauses": self.num_clauses,
            "clauses_checked": self.clauses_checked,
            "first_unsat_clause_idx": self.first_unsat_clause_idx,
            "first_unsat_clause": (
                [lit.to_dimacs() for lit in self.first_unsat_clause]
                if self.first_unsat_clause is not None
                else None
            ),
            "unassigned_count": self.unassigned_count,
            "first_unassigned_vars": self.first_unassigned_vars,
        }


def check_clauses(
    clauses: Iterable[tuple[Lit, ...]],
    assignment: Assignment,
    *,
    num_vars: int,
    num_clauses: int,
    mode: str = "materialize",
    strict_unassigned: bool = False,
) -> Verdict:
    assignment.check_range(num_vars)

    watch = ClauseWatch(assignment)
    checked = 0
    first_unsat_idx: int | None = None
    first_unsat: tuple[Lit, ...] | None = None
    for idx, clause in enumerate(clauses, start=1):
        checked = idx
        for lit in clause:
            if watch.observe(lit):
                break
        if not watch.close():
            first_unsat_idx = idx
            first_unsat = clause
            break

    unassigned = assignment.unassigned_count(num_vars)
    ok = first_unsat_idx is None
    if strict_unassigned and unassigned:
        ok = False

    return Verdict(
        ok=ok,
        num_vars=num_vars,
        num_clauses=num_clauses,
        clauses_checked=checked,
        mode=mode,
        first_unsat_clause_idx=first_unsat_idx,
        first_unsat_clause=first_unsat,
        unassigned_count=unassigned,
        first_unassigned_vars=assignment.unassigned_vars(num_vars, limit=UNASSIGNED_SAMPLE),
        strict_unassigned=strict_unassigned,
    )


def check_formula(formula: Formula, assignment: Assignment, *, strict_unassigned: bool = False) -> Verdict:
    return check_clauses(
        formula.clauses,
        assignment,
        num_vars=formula.num_vars,
        num_clauses=formula.num_clauses,
        mode="materialize",
        strict_unassigned=strict_unassigned,
    )


def validate_witness(
    *,
    cnf_path: Path,
    certificate_path: Path,
    mode: str = "stream",
    strict_unassigned: bool = False,
) -> Verdict:
    if mode not in MODES:
        raise ValueError(f"unknown mode {mode!r}; expected one of {', '.join(MODES)}")

    # The header is read before the certificate so that certificate values
    # are range-checked against V before the assignment table grows.
    if mode == "materialize":
        header = read_dimacs_header(cnf_path)
        assignment = parse_certificate(certificate_path, num_vars=header.num_vars)
        formula = parse_dimacs(cnf_path)
        return check_formula(formula, assignment, strict_unassigned=strict_unassigned)

    with open_dimacs(cnf_path) as stream:
        assignment = parse_certificate(certificate_path, num_vars=stream.num_vars)
        return check_clauses(
            stream,
            assignment,
            num_vars=stream.num_vars,
            num_clauses=stream.num_clauses,
            mode="stream",
            strict_unassigned=strict_unassigned,
        )
