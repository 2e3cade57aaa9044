from __future__ import annotations


class WitnessError(RuntimeError):
    """Fatal condition while reading a formula or certificate."""

    def __init__(self, message: str, *, source: str | None = None, lineno: int | None = None) -> None:
        self.source = source
        self.lineno = lineno
        self.detail = message
        super().__init__(_located(message, source, lineno))


def _located(message: str, source: str | None, lineno: int | None) -> str:
    if source is None:
        return message
    if lineno is None:
        return f"{source}: {message}"
    return f"{source}:{lineno}: {message}"


class InvalidLiteral(WitnessError):
    pass


class MalformedHeader(WitnessError):
    pass


class VariableOutOfRange(WitnessError):
    pass


class ClauseCountMismatch(WitnessError):
    pass


class MissingSatisfiableStatus(WitnessError):
    pass


class DuplicateStatusLine(WitnessError):
    pass


class ContradictoryAssignment(WitnessError):
    pass


class InvalidLineTag(WitnessError):
    pass
