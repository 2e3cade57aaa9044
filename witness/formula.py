"""
DIMACS CNF reader.

Two ways to consume a formula:
  - `parse_dimacs` / `read_formula` materialize every clause into a `Formula`,
  - `open_dimacs` yields a `ClauseStream` that hands out one clause at a time
    and keeps nothing once the consumer moves on.

Both share the same header handling and body tokenizer, so they accept and
reject exactly the same inputs.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from witness.errors import ClauseCountMismatch, MalformedHeader, VariableOutOfRange
from witness.lexing import COMMENT_TAG, PROBLEM_TAG, Phase, numbered, parse_int
from witness.literal import MAX_VAR, Lit

_COUNT_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Header:
    num_vars: int
    num_clauses: int


@dataclass(frozen=True)
class Formula:
    num_vars: int
    num_clauses: int
    clauses: list[tuple[Lit, ...]]


def parse_header(line: str, *, source: str | None = None, lineno: int | None = None) -> Header:
    parts = line.split()
    if len(parts) != 4 or parts[:2] != [PROBLEM_TAG, "cnf"]:
        raise MalformedHeader(f"malformed header: {line!r}", source=source, lineno=lineno)
    if not all(_COUNT_RE.fullmatch(p) for p in parts[2:]):
        raise MalformedHeader(f"header counts must be non-negative integers: {line!r}", source=source, lineno=lineno)
    num_vars, num_clauses = int(parts[2]), int(parts[3])
    if num_vars > MAX_VAR:
        raise MalformedHeader(f"variable count {num_vars} exceeds {MAX_VAR}", source=source, lineno=lineno)
    return Header(num_vars=num_vars, num_clauses=num_clauses)


class ClauseStream:
    """
    Lazy, non-restartable sequence of clauses read from DIMACS text.

    The header is read on construction. Iterating yields each clause as soon as
    its terminating 0 is read. Running off the end of the input checks the
    clause count against the header; a consumer that stops early skips that
    check.
    """

    def __init__(self, lines: Iterable[str], *, source: str = "<cnf>") -> None:
        self.source = source
        self.phase = Phase.PREAMBLE
        self.clauses_read = 0
        self._lines = numbered(lines)
        self.header = self._read_header()
        self.phase = Phase.HEADER
        self._body = self._iter_body()

    @property
    def num_vars(self) -> int:
        return self.header.num_vars

    @property
    def num_clauses(self) -> int:
        return self.header.num_clauses

    def __iter__(self) -> "ClauseStream":
        return self

    def __next__(self) -> tuple[Lit, ...]:
        return next(self._body)

    def close(self) -> None:
        self._body.close()
        self.phase = Phase.DONE

    def _read_header(self) -> Header:
        for lineno, line in self._lines:
            if line[0] == COMMENT_TAG:
                continue
            if line[0] == PROBLEM_TAG:
                return parse_header(line, source=self.source, lineno=lineno)
            raise MalformedHeader(f"expected 'p cnf' header, got {line!r}", source=self.source, lineno=lineno)
        raise MalformedHeader("missing 'p cnf' header", source=self.source)

    def _iter_body(self) -> Iterator[tuple[Lit, ...]]:
        num_vars = self.header.num_vars
        num_clauses = self.header.num_clauses
        current: list[Lit] = []
        for lineno, line in self._lines:
            if line[0] == COMMENT_TAG:
                continue
            if line[0] == PROBLEM_TAG:
                raise MalformedHeader(f"second header line: {line!r}", source=self.source, lineno=lineno)
            self.phase = Phase.BODY
            for token in line.split():
                value = parse_int(token, source=self.source, lineno=lineno)
                if value == 0:
                    self.clauses_read += 1
                    if self.clauses_read > num_clauses:
                        raise ClauseCountMismatch(
                            f"header declares {num_clauses} clause(s) but more follow",
                            source=self.source,
                            lineno=lineno,
                        )
                    clause = tuple(current)
                    current = []
                    yield clause
                elif abs(value) > num_vars:
                    raise VariableOutOfRange(
                        f"literal {value} out of range for nvars={num_vars}",
                        source=self.source,
                        lineno=lineno,
                    )
                else:
                    current.append(Lit.from_dimacs(value))

        self.phase = Phase.DONE
        if current:
            raise ClauseCountMismatch(
                "input ended with unterminated clause (missing trailing 0)",
                source=self.source,
            )
        if self.clauses_read != num_clauses:
            raise ClauseCountMismatch(
                f"header declares {num_clauses} clause(s) but input has {self.clauses_read}",
                source=self.source,
            )


def read_formula(lines: Iterable[str], *, source: str = "<cnf>") -> Formula:
    stream = ClauseStream(lines, source=source)
    clauses = list(stream)
    return Formula(num_vars=stream.num_vars, num_clauses=stream.num_clauses, clauses=clauses)


def read_dimacs_header(path: Path) -> Header:
    with path.open(encoding="utf-8") as f:
        stream = ClauseStream(f, source=str(path))
        stream.close()
        return stream.header


def parse_dimacs(path: Path) -> Formula:
    with path.open(encoding="utf-8") as f:
        return read_formula(f, source=str(path))


@contextmanager
def open_dimacs(path: Path) -> Iterator[ClauseStream]:
    with path.open(encoding="utf-8") as f:
        stream = ClauseStream(f, source=str(path))
        try:
            yield stream
        finally:
            stream.close()
