"""Errors raised while compiling and applying sound change rules."""

from enum import Enum


class ErrorKind(Enum):
    """Short, machine readable names for rule script errors."""
    UNKNOWN_CATEGORY = "UnknownCategory"
    UNBALANCED_GROUP = "UnbalancedGroup"
    EMPTY_TARGET = "EmptyTarget"
    INVALID_ENVIRONMENT = "InvalidEnvironment"
    AMBIGUOUS_CORRESPONDENCE = "AmbiguousCorrespondence"
    UNEXPECTED_TOKEN = "UnexpectedToken"

    def __str__(self):
        return self.value


class ParseError(ValueError):
    """A rule script could not be compiled.

    Parameters
    ----------
    kind: ErrorKind
    line: int
        1-based line number of the offending rule
    message: str
        Human readable description of the problem
    """
    def __init__(self, kind: ErrorKind, line: int, message: str):
        super().__init__(f"{message} on line {line}")
        self.kind = kind
        self.line = line
        self.message = message

    def __repr__(self):
        return "{}(kind={!r}, line={!r}, message={!r})".format(
            self.__class__.__name__, str(self.kind), self.line, self.message
        )

    def to_dict(self):
        return {
            "success": False,
            "message": str(self),
            "kind": str(self.kind),
            "line": self.line,
        }


class InputError(ValueError):
    """A word could not be split into grapheme clusters."""


class BudgetExceeded(RuntimeError):
    """The matcher used up its step budget on a single word."""
