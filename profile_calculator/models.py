"""Immutable per-command request values.

The CLI (or the interactive shell) builds one request per command and hands it
to the runner. Requests are frozen so nothing carries over between commands.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Operation(str, Enum):
    """Set operation to apply to the operand profiles."""

    UNION = "union"
    INTERSECTION = "intersection"
    DIFFERENCE = "difference"

    @property
    def accepts_directory(self) -> bool:
        return self is not Operation.DIFFERENCE


@dataclass(frozen=True)
class ProfileFiles:
    """Two explicit profile files, in operand order."""

    first: Path
    second: Path


@dataclass(frozen=True)
class ProfileDirectory:
    """A directory whose immediate profile files are the operands."""

    path: Path


OperandSet = ProfileFiles | ProfileDirectory


@dataclass(frozen=True)
class CreateRequest:
    """Create one profile from a module list file.

    Attributes:
        list_path: Module list text file
        target_path: Destination profile, or None for the default filename
        use_names: True if the list holds display names instead of codes
        verbose: Narrate progress on the console
    """

    list_path: Path
    target_path: Path | None = None
    use_names: bool = False
    verbose: bool = False


@dataclass(frozen=True)
class CalculationRequest:
    """Combine existing profiles with a set operation.

    Attributes:
        operation: Which set operation to apply
        operands: Two profile files or one directory of profiles
        target_path: Destination profile, or None for the default filename
        verbose: Narrate progress on the console
        keep_duplicates: Pass duplicate codes through (False collapses them)
    """

    operation: Operation
    operands: OperandSet
    target_path: Path | None = None
    verbose: bool = False
    keep_duplicates: bool = True


Request = CreateRequest | CalculationRequest
