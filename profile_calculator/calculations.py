"""Set operations across existing profiles."""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from rich.text import Text

from . import set_operations
from .errors import ArgumentError
from .errors import ProfileIOError
from .models import OperandSet
from .models import Operation
from .models import ProfileDirectory
from .models import ProfileFiles
from .profile_store import ProfileStore
from .profile_store import is_profile_path
from .profile_store import require_profile_path
from .settings import DEFAULT_TARGET

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)

_ALGORITHMS: dict[Operation, Callable[[Sequence[Sequence[str]]], list[str]]] = {
    Operation.UNION: set_operations.union_all,
    Operation.INTERSECTION: set_operations.intersection_all,
    Operation.DIFFERENCE: set_operations.difference_all,
}


def list_directory_profiles(directory: Path) -> list[Path]:
    """List the profile files directly inside a directory, sorted by name.

    Raises:
        ProfileIOError: If the directory cannot be listed
        ArgumentError: If the directory holds no profile files
    """
    directory = Path(directory)
    try:
        children = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ProfileIOError(f"Cannot list profile directory {directory}: {e}") from e

    profiles = [child for child in children if child.is_file() and is_profile_path(child)]
    if not profiles:
        raise ArgumentError(f"No profiles in the provided directory: {directory}")
    return profiles


class ProfileCalculations:
    """
    Combines two or more profiles into one with a set operation.

    Contract:
    - Inputs: two profile files or one directory of profiles, optional target path
    - Outputs: one profile written to the target path
    - Errors: ArgumentError for operands that do not fit the operation,
      ProfileIOError / ProfileParseError from reading and writing
    - Operands are read in operand order; a directory's profiles in file name order
    """

    def __init__(
        self,
        operands: OperandSet,
        target_path: Path | None = None,
        verbose: bool = False,
        console: Console | None = None,
        keep_duplicates: bool = True,
        store: ProfileStore | None = None,
    ):
        self.operands = operands
        self.target_path = Path(target_path) if target_path is not None else Path(DEFAULT_TARGET)
        self.verbose = verbose
        self.console = console
        self.keep_duplicates = keep_duplicates
        self.store = store or ProfileStore()

    def operand_paths(self) -> list[Path]:
        """Resolve the operand set to the list of profile paths."""
        if isinstance(self.operands, ProfileFiles):
            return [Path(self.operands.first), Path(self.operands.second)]
        return list_directory_profiles(self.operands.path)

    def compute_union(self) -> list[str]:
        """Write the union of all operands to the target."""
        return self.compute(Operation.UNION)

    def compute_intersection(self) -> list[str]:
        """Write the intersection of all operands to the target."""
        return self.compute(Operation.INTERSECTION)

    def compute_difference(self) -> list[str]:
        """Write the first operand minus the second to the target.

        Raises:
            ArgumentError: If the operands are a directory
        """
        return self.compute(Operation.DIFFERENCE)

    def compute(self, operation: Operation) -> list[str]:
        """Apply a set operation across the operands and write the result.

        Args:
            operation: Operation to apply

        Returns:
            Module codes written to the target profile
        """
        if isinstance(self.operands, ProfileDirectory) and not operation.accepts_directory:
            raise ArgumentError(f"A directory of profiles cannot be used for {operation.value}, supply exactly 2 profiles")

        require_profile_path(self.target_path)

        paths = self.operand_paths()
        contents = []
        for path in paths:
            codes = self.store.read(path)
            self._narrate(f"Read {len(codes)} modules from {path}")
            contents.append(codes)

        result = _ALGORITHMS[operation](contents)
        if not self.keep_duplicates:
            result = set_operations.collapse_duplicates(result)
        self._narrate(f"Calculated {operation.value} of {len(paths)} profiles: {len(result)} modules")

        self.store.write(self.target_path, result)
        self._narrate(f"Profile written to {self.target_path}")
        logger.info(f"Wrote {operation.value} of {len(paths)} profiles to {self.target_path}")
        return result

    def _narrate(self, message: str) -> None:
        if self.verbose and self.console is not None:
            self.console.print(Text(message, style="dim"))
