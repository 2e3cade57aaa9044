from __future__ import annotations

from typing import Iterable

import numpy as np

from witness.errors import ContradictoryAssignment, VariableOutOfRange
from witness.literal import Lit, TriState


class Assignment:
    """
    Dense tri-state table indexed by variable id (slot 0 is unused).

    The table grows to hold the largest variable recorded, so a certificate can
    be read before the formula's variable count is known. Variables past the
    end of the table read as unassigned.
    """

    def __init__(self, num_vars: int = 0) -> None:
        self._values = np.zeros(num_vars + 1, dtype=np.int8)
        self._max_var = 0

    @classmethod
    def from_literals(cls, literals: Iterable[Lit], *, num_vars: int | None = None) -> "Assignment":
        assignment = cls(num_vars or 0)
        for lit in literals:
            if num_vars is not None and lit.var > num_vars:
                raise VariableOutOfRange(f"literal {lit} exceeds declared variable count {num_vars}")
            assignment.assign(lit)
        return assignment

    @property
    def max_var(self) -> int:
        return self._max_var

    def __getitem__(self, var: int) -> TriState:
        if 0 <= var < len(self._values):
            return TriState(int(self._values[var]))
        return TriState.UNASSIGNED

    def __contains__(self, var: int) -> bool:
        return self[var] != TriState.UNASSIGNED

    def __len__(self) -> int:
        return int(np.count_nonzero(self._values))

    def assign(self, lit: Lit, *, source: str | None = None, lineno: int | None = None) -> None:
        var = lit.var
        if var >= len(self._values):
            self._grow(var)
        current = int(self._values[var])
        if current == TriState.UNASSIGNED:
            self._values[var] = lit.required
            self._max_var = max(self._max_var, var)
        elif current != lit.required:
            raise ContradictoryAssignment(
                f"variable {var} assigned both {-lit} and {lit}",
                source=source,
                lineno=lineno,
            )

    def _grow(self, var: int) -> None:
        size = max(var + 1, 2 * len(self._values))
        grown = np.zeros(size, dtype=np.int8)
        grown[: len(self._values)] = self._values
        self._values = grown

    def check_range(self, num_vars: int) -> None:
        if self._max_var > num_vars:
            raise VariableOutOfRange(
                f"certificate assigns variable {self._max_var} but formula declares {num_vars} variable(s)"
            )

    def literals(self) -> list[Lit]:
        """Sparse form: one literal per assigned variable, ascending by variable."""
        return [
            Lit.from_var(int(var), int(self._values[var]) == TriState.TRUE)
            for var in np.flatnonzero(self._values)
        ]

    def unassigned_count(self, num_vars: int) -> int:
        table = self._values[1 : num_vars + 1]
        beyond = max(0, num_vars - (len(self._values) - 1))
        return int(np.count_nonzero(table == TriState.UNASSIGNED)) + beyond

    def unassigned_vars(self, num_vars: int, limit: int | None = None) -> list[int]:
        table = self._values[1 : num_vars + 1]
        found = (np.flatnonzero(table == TriState.UNASSIGNED) + 1).tolist()
        if limit is not None and len(found) >= limit:
            return found[:limit]
        stop = num_vars + 1
        if limit is not None:
            stop = min(stop, len(self._values) + limit - len(found))
        found.extend(range(len(self._values), stop))
        return found
