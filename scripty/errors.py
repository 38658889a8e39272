from typing import Any, List, Optional


class ScriptyError(Exception):
    """Base class for errors reported to the REPL or script runner."""


class ParseError(ScriptyError):
    """Raised when source text does not match the grammar.

    Carries the 1-based line and column of the failure, the UTF-8 byte offset
    into the source and the names of the tokens that would have been accepted.
    """
    def __init__(self, message: str, line: int, column: int, pos: int = 0,
                 expected: Optional[List[str]] = None):
        super().__init__(f"line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column
        self.pos = pos
        self.expected = expected or []


class ScriptRuntimeError(ScriptyError):
    """Exception type used to propagate fatal ScriptyScript runtime errors."""
    def __init__(self, kind: str, message: str):
        super().__init__(f"{kind}: {message}")
        self.kind = kind
        self.message = message


class Signal:
    """Control-flow marker returned by statement execution."""


class BreakSignal(Signal):
    def __repr__(self) -> str:
        return 'Break'


class ContinueSignal(Signal):
    def __repr__(self) -> str:
        return 'Continue'


class ReturnSignal(Signal):
    """Carries the value of a `return` statement up to the enclosing call."""
    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"Return({self.value!r})"


BREAK = BreakSignal()
CONTINUE = ContinueSignal()
