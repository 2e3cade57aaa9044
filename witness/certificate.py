from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from witness.assignment import Assignment
from witness.errors import (
    DuplicateStatusLine,
    InvalidLineTag,
    InvalidLiteral,
    MissingSatisfiableStatus,
    VariableOutOfRange,
)
from witness.lexing import COMMENT_TAG, STATUS_TAG, VALUE_TAG, Phase, numbered, parse_int
from witness.literal import Lit

SATISFIABLE = "SATISFIABLE"


class CertificateReader:
    """
    Reads SAT-competition solver output: `c` comments, one `s SATISFIABLE`
    status line, and `v` lines of signed literals, each line closed by 0.

    Iterating yields (lineno, literal) pairs in file order (the sparse form of
    the assignment). The status requirement is enforced once the input is
    exhausted, so a missing status line is reported after all values are read.
    When `num_vars` is given, every value is range-checked before it is packed,
    so nothing is allocated for a variable the formula cannot hold.
    """

    def __init__(self, lines: Iterable[str], *, source: str = "<certificate>", num_vars: int | None = None) -> None:
        self.source = source
        self.num_vars = num_vars
        self.phase = Phase.PREAMBLE
        self.status_lineno: int | None = None
        self._lines = lines

    def __iter__(self) -> Iterator[tuple[int, Lit]]:
        if self.phase is not Phase.PREAMBLE:
            raise RuntimeError("certificate input has already been consumed")
        for lineno, line in numbered(self._lines):
            tag = line[0]
            if tag == COMMENT_TAG:
                continue
            if tag == STATUS_TAG:
                self._read_status(line, lineno)
            elif tag == VALUE_TAG:
                self.phase = Phase.BODY
                yield from self._read_values(line, lineno)
            else:
                raise InvalidLineTag(f"unrecognized line tag {tag!r}: {line!r}", source=self.source, lineno=lineno)

        self.phase = Phase.DONE
        if self.status_lineno is None:
            raise MissingSatisfiableStatus(f"no 's {SATISFIABLE}' status line", source=self.source)

    def _read_status(self, line: str, lineno: int) -> None:
        if self.status_lineno is not None:
            raise DuplicateStatusLine(
                f"second status line (first at line {self.status_lineno}): {line!r}",
                source=self.source,
                lineno=lineno,
            )
        if line[1:].split() != [SATISFIABLE]:
            raise MissingSatisfiableStatus(
                f"expected 's {SATISFIABLE}', got {line!r}", source=self.source, lineno=lineno
            )
        self.status_lineno = lineno
        if self.phase is Phase.PREAMBLE:
            self.phase = Phase.HEADER

    def _read_values(self, line: str, lineno: int) -> Iterator[tuple[int, Lit]]:
        tokens = line[1:].split()
        for idx, token in enumerate(tokens):
            value = parse_int(token, source=self.source, lineno=lineno)
            if value == 0:
                if idx != len(tokens) - 1:
                    raise InvalidLiteral(
                        f"values after terminating 0: {' '.join(tokens[idx + 1:])!r}",
                        source=self.source,
                        lineno=lineno,
                    )
                return
            if self.num_vars is not None and abs(value) > self.num_vars:
                raise VariableOutOfRange(
                    f"certificate literal {value} out of range for nvars={self.num_vars}",
                    source=self.source,
                    lineno=lineno,
                )
            yield lineno, Lit.parse(token, source=self.source, lineno=lineno)


def iter_certificate_literals(
    lines: Iterable[str], *, source: str = "<certificate>", num_vars: int | None = None
) -> Iterator[Lit]:
    for _, lit in CertificateReader(lines, source=source, num_vars=num_vars):
        yield lit


def read_certificate(
    lines: Iterable[str], *, source: str = "<certificate>", num_vars: int | None = None
) -> Assignment:
    assignment = Assignment()
    for lineno, lit in CertificateReader(lines, source=source, num_vars=num_vars):
        assignment.assign(lit, source=source, lineno=lineno)
    return assignment


def parse_certificate(path: Path, *, num_vars: int | None = None) -> Assignment:
    with path.open(encoding="utf-8") as f:
        return read_certificate(f, source=str(path), num_vars=num_vars)
