from __future__ import annotations

import random

import pytest

from conftest import certificate_text, dimacs_text
from witness.assignment import Assignment
from witness.certificate import read_certificate
from witness.checker import ClauseWatch, check_clauses, check_formula, validate_witness
from witness.errors import ClauseCountMismatch, InvalidLiteral, MissingSatisfiableStatus, VariableOutOfRange
from witness.formula import ClauseStream, read_formula
from witness.literal import Lit

BOTH_MODES = pytest.mark.parametrize("mode", ["stream", "materialize"])


def _assignment(*values: int) -> Assignment:
    return Assignment.from_literals(Lit.from_dimacs(v) for v in values)


def _check_text(text: str, assignment: Assignment, mode: str):
    if mode == "materialize":
        return check_formula(read_formula(text.splitlines()), assignment)
    stream = ClauseStream(text.splitlines())
    return check_clauses(
        stream,
        assignment,
        num_vars=stream.num_vars,
        num_clauses=stream.num_clauses,
        mode="stream",
    )


def test_clause_watch_tracks_current_clause():
    watch = ClauseWatch(_assignment(1, -2))
    assert not watch.observe(Lit.from_dimacs(-1))
    assert watch.observe(Lit.from_dimacs(-2))
    # stays set until the clause is closed
    assert watch.observe(Lit.from_dimacs(-1))
    assert watch.close()
    assert not watch.satisfied
    assert not watch.close()


@BOTH_MODES
def test_verified_example(two_clause_cnf, write_file, mode):
    cert = write_file("cert.txt", "s SATISFIABLE\nv 1 -2 0\n")
    verdict = validate_witness(cnf_path=two_clause_cnf, certificate_path=cert, mode=mode)
    assert verdict.ok
    assert verdict.mode == mode
    assert verdict.clauses_checked == 2
    assert verdict.first_unsat_clause_idx is None


@BOTH_MODES
def test_not_verified_example(two_clause_cnf, write_file, mode):
    cert = write_file("cert.txt", "s SATISFIABLE\nv -1 -2 0\n")
    verdict = validate_witness(cnf_path=two_clause_cnf, certificate_path=cert, mode=mode)
    assert not verdict.ok
    assert verdict.first_unsat_clause_idx == 1
    assert [lit.to_dimacs() for lit in verdict.first_unsat_clause] == [1, 2]


@BOTH_MODES
def test_empty_clause_never_verified(mode):
    text = dimacs_text(2, [[1, 2], [], [-1]])
    for values in ([1, 2], [-1, 2], [-1, -2], [1, -2]):
        verdict = _check_text(text, _assignment(*values), mode)
        assert not verdict.ok
    assert _check_text(text, _assignment(-1, 2), mode).first_unsat_clause_idx == 2


@BOTH_MODES
def test_unassigned_variable_never_satisfies(mode):
    text = dimacs_text(3, [[1, 2], [3]])
    assert _check_text(dimacs_text(3, [[1, 2]]), _assignment(2), mode).ok
    verdict = _check_text(text, _assignment(2), mode)
    assert not verdict.ok
    assert verdict.first_unsat_clause_idx == 2
    assert verdict.unassigned_count == 2
    assert verdict.first_unassigned_vars == [1, 3]


@BOTH_MODES
def test_certificate_variable_beyond_formula(two_clause_cnf, write_file, mode):
    cert = write_file("cert.txt", certificate_text([1, -2, 3]))
    with pytest.raises(VariableOutOfRange, match="literal 3 out of range"):
        validate_witness(cnf_path=two_clause_cnf, certificate_path=cert, mode=mode)


@BOTH_MODES
def test_formula_variable_beyond_header(write_file, mode):
    cnf = write_file("f.cnf", "p cnf 2 1\n1 5 0\n")
    cert = write_file("cert.txt", certificate_text([-1, 2]))
    with pytest.raises(VariableOutOfRange):
        validate_witness(cnf_path=cnf, certificate_path=cert, mode=mode)


@BOTH_MODES
def test_missing_clause_is_fatal(write_file, mode):
    cnf = write_file("f.cnf", dimacs_text(2, [[1, 2]], nclauses=2))
    cert = write_file("cert.txt", certificate_text([1, 2]))
    with pytest.raises(ClauseCountMismatch):
        validate_witness(cnf_path=cnf, certificate_path=cert, mode=mode)


@BOTH_MODES
def test_missing_status_is_fatal(two_clause_cnf, write_file, mode):
    cert = write_file("cert.txt", "v 1 -2 0\n")
    with pytest.raises(MissingSatisfiableStatus):
        validate_witness(cnf_path=two_clause_cnf, certificate_path=cert, mode=mode)


def test_stream_stops_at_first_unsatisfied_clause(write_file):
    cnf = write_file("f.cnf", "p cnf 2 3\n1 0\n-1 0\ngarbage here\n")
    cert = write_file("cert.txt", certificate_text([1]))

    verdict = validate_witness(cnf_path=cnf, certificate_path=cert, mode="stream")
    assert not verdict.ok
    assert verdict.clauses_checked == 2

    with pytest.raises(InvalidLiteral):
        validate_witness(cnf_path=cnf, certificate_path=cert, mode="materialize")


def test_strict_unassigned(write_file):
    cnf = write_file("f.cnf", dimacs_text(3, [[1, 2]]))
    cert = write_file("cert.txt", certificate_text([1]))
    assert validate_witness(cnf_path=cnf, certificate_path=cert).ok
    verdict = validate_witness(cnf_path=cnf, certificate_path=cert, strict_unassigned=True)
    assert not verdict.ok
    assert verdict.first_unsat_clause_idx is None
    assert verdict.unassigned_count == 2


def test_unknown_mode(two_clause_cnf, write_file):
    cert = write_file("cert.txt", certificate_text([1, -2]))
    with pytest.raises(ValueError, match="unknown mode"):
        validate_witness(cnf_path=two_clause_cnf, certificate_path=cert, mode="parallel")


def test_report_shape():
    text = dimacs_text(2, [[1, 2], [-1, -2]])
    report = _check_text(text, _assignment(-1, -2), "materialize").as_report()
    assert report == {
        "ok": False,
        "mode": "materialize",
        "strict_unassigned": False,
        "num_vars": 2,
        "num_clauses": 2,
        "clauses_checked": 1,
        "first_unsat_clause_idx": 1,
        "first_unsat_clause": [1, 2],
        "unassigned_count": 0,
        "first_unassigned_vars": [],
    }


def test_modes_agree_on_random_instances():
    rng = random.Random(20240611)
    for _ in range(300):
        nvars = rng.randint(1, 8)
        clauses = [
            [rng.choice([-1, 1]) * rng.randint(1, nvars) for _ in range(rng.randint(0, 4))]
            for _ in range(rng.randint(0, 12))
        ]
        text = dimacs_text(nvars, clauses)
        values = [v if rng.random() < 0.5 else -v for v in range(1, nvars + 1) if rng.random() < 0.85]
        cert = certificate_text(values).splitlines()

        materialized = _check_text(text, read_certificate(cert), "materialize")
        streamed = _check_text(text, read_certificate(cert), "stream")

        assert materialized.ok == streamed.ok
        assert materialized.first_unsat_clause_idx == streamed.first_unsat_clause_idx

        truth = {abs(v): v > 0 for v in values}
        expected = all(any(truth.get(abs(lit)) == (lit > 0) for lit in clause) for clause in clauses)
        assert materialized.ok == expected


@BOTH_MODES
@pytest.mark.parametrize("value", [2_000_000_000, -2_000_000_000, 2_147_483_648])
def test_huge_certificate_variable_rejected_before_allocation(two_clause_cnf, write_file, mode, value):
    cert = write_file("cert.txt", f"s SATISFIABLE\nv 1 {value} 0\n")
    with pytest.raises(VariableOutOfRange, match="nvars=2"):
        validate_witness(cnf_path=two_clause_cnf, certificate_path=cert, mode=mode)
