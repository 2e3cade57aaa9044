from __future__ import annotations

from .assignment import Assignment
from .certificate import parse_certificate, read_certificate
from .checker import MODES, ClauseWatch, Verdict, check_clauses, check_formula, validate_witness
from .errors import WitnessError
from .formula import ClauseStream, Formula, open_dimacs, parse_dimacs, read_dimacs_header, read_formula
from .literal import Lit, TriState

__all__ = [
    "MODES",
    "Assignment",
    "ClauseStream",
    "ClauseWatch",
    "Formula",
    "Lit",
    "TriState",
    "Verdict",
    "WitnessError",
    "check_clauses",
    "check_formula",
    "open_dimacs",
    "parse_certificate",
    "parse_dimacs",
    "read_certificate",
    "read_dimacs_header",
    "read_formula",
    "validate_witness",
]
