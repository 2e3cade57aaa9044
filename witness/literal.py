"""
Packed literal representation.

A literal is one unsigned 32-bit value: the variable id in the low 31 bits and
the polarity in bit 31 (set for positive literals). DIMACS `-3` packs to
`0x00000003`, DIMACS `3` packs to `0x80000003`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from witness.errors import InvalidLiteral
from witness.lexing import parse_int

if TYPE_CHECKING:
    from witness.assignment import Assignment


POS_MASK = 0x80000000
MAX_VAR = POS_MASK - 1


class TriState(IntEnum):
    UNASSIGNED = 0
    FALSE = 1
    TRUE = 2


@dataclass(frozen=True)
class Lit:
    raw: int

    def __post_init__(self) -> None:
        if self.raw < 0 or self.raw > (POS_MASK | MAX_VAR) or (self.raw & MAX_VAR) == 0:
            raise InvalidLiteral(f"packed literal {self.raw:#x} has no variable")

    @classmethod
    def from_var(cls, var: int, is_pos: bool) -> "Lit":
        if var < 1 or var > MAX_VAR:
            raise InvalidLiteral(f"variable {var} outside 1..{MAX_VAR}")
        return cls(var | (POS_MASK if is_pos else 0))

    @classmethod
    def from_dimacs(cls, value: int) -> "Lit":
        if value == 0:
            raise InvalidLiteral("0 is a clause terminator, not a literal")
        return cls.from_var(abs(value), value > 0)

    @classmethod
    def parse(cls, token: str, *, source: str | None = None, lineno: int | None = None) -> "Lit":
        value = parse_int(token, source=source, lineno=lineno)
        try:
            return cls.from_dimacs(value)
        except InvalidLiteral as e:
            raise InvalidLiteral(e.detail, source=source, lineno=lineno) from e

    @property
    def var(self) -> int:
        return self.raw & MAX_VAR

    @property
    def is_pos(self) -> bool:
        return bool(self.raw & POS_MASK)

    @property
    def required(self) -> TriState:
        """Value the variable must hold for this literal to be true."""
        return TriState.TRUE if self.is_pos else TriState.FALSE

    def sat_by(self, assignment: "Assignment") -> bool:
        return assignment[self.var] == self.required

    def to_dimacs(self) -> int:
        return self.var if self.is_pos else -self.var

    def __neg__(self) -> "Lit":
        return Lit(self.raw ^ POS_MASK)

    # Ordering ignores polarity; equality does not.
    def __lt__(self, other: "Lit") -> bool:
        if not isinstance(other, Lit):
            return NotImplemented
        return self.var < other.var

    def __str__(self) -> str:
        return str(self.to_dimacs())
