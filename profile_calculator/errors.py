"""Error kinds raised by the profile calculator core.

Every failure the core reports to its caller is one of four kinds:
- ArgumentError: wrong operand count or shape for the requested operation
- ListFormatError: malformed bracket syntax in a module list
- ProfileIOError: file or network read/write failure, including a bad target extension
- ProfileParseError: malformed JSON in a profile document or catalog response
"""


class ProfileCalcError(Exception):
    """Base class for all errors reported by the calculator."""

    kind = "error"


class ArgumentError(ProfileCalcError):
    """Operands do not fit the requested operation."""

    kind = "argument"


class ListFormatError(ProfileCalcError):
    """A module list file is badly formatted."""

    kind = "list-format"

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number


class ProfileIOError(ProfileCalcError, OSError):
    """Reading or writing a profile, list or catalog failed."""

    kind = "io"


class ProfileParseError(ProfileCalcError, ValueError):
    """A profile document or catalog response could not be parsed."""

    kind = "parse"


__all__ = [
    "ArgumentError",
    "ListFormatError",
    "ProfileCalcError",
    "ProfileIOError",
    "ProfileParseError",
]
