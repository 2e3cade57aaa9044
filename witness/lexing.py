from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, Iterator

from witness.errors import InvalidLiteral

COMMENT_TAG = "c"
PROBLEM_TAG = "p"
STATUS_TAG = "s"
VALUE_TAG = "v"

_INT_RE = re.compile(r"-?[0-9]+")


class Phase(Enum):
    PREAMBLE = "preamble"
    HEADER = "header"
    BODY = "body"
    DONE = "done"


def numbered(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
    """Yield (lineno, line) for non-blank lines, 1-based."""
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if line:
            yield lineno, line


def parse_int(token: str, *, source: str | None = None, lineno: int | None = None) -> int:
    # int() alone would accept "+3" and "1_000"
    if _INT_RE.fullmatch(token) is None:
        raise InvalidLiteral(f"non-integer literal: {token!r}", source=source, lineno=lineno)
    return int(token)
