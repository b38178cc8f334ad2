"""Profile creation from module lists.

The module list may hold module codes or, with ``use_names``, module display
names which are resolved to codes through the module catalog.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from rich.text import Text

from .catalog import CatalogClient
from .catalog import CatalogFetcher
from .catalog import NameResolver
from .module_list import ModuleListParser
from .profile_store import ProfileStore
from .profile_store import require_profile_path
from .settings import DEFAULT_TARGET

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)


class ProfileCreator:
    """Creates a single profile from a module list file."""

    def __init__(
        self,
        list_path: Path,
        target_path: Path | None = None,
        use_names: bool = False,
        verbose: bool = False,
        catalog_fetcher: CatalogFetcher | None = None,
        console: Console | None = None,
        store: ProfileStore | None = None,
    ):
        """Initialize the creator.

        Args:
            list_path: Module list text file
            target_path: Destination profile. Defaults to calculated.json in the current directory.
            use_names: True if the list holds module names instead of module codes
            verbose: Narrate progress on the console
            catalog_fetcher: Callable returning catalog records. Defaults to CatalogClient().fetch.
            console: Rich console for narration
            store: Profile store used for writing
        """
        self.list_path = Path(list_path)
        self.target_path = Path(target_path) if target_path is not None else Path(DEFAULT_TARGET)
        self.use_names = use_names
        self.verbose = verbose
        self.catalog_fetcher = catalog_fetcher or CatalogClient().fetch
        self.console = console
        self.store = store or ProfileStore()

    def create_profile(self) -> list[str]:
        """Create the profile at the target path.

        Returns:
            Module codes written to the profile

        Raises:
            ListFormatError: If the module list is badly formatted
            ProfileIOError: If reading, fetching or writing fails, or the target is not a JSON file
            ProfileParseError: If the catalog response cannot be parsed
        """
        tokens = ModuleListParser().parse_file(self.list_path)
        for token in tokens:
            self._narrate(f"Identified module: {token}")
        self._narrate("Module list read successfully.")

        if self.use_names:
            codes = self._resolve_names(tokens)
        else:
            # Codes are not checked against the catalog, the mod selector handles unknown codes
            codes = tokens

        require_profile_path(self.target_path)
        self.store.write(self.target_path, codes)
        self._narrate(f"Profile written to {self.target_path}")
        logger.info(f"Created profile {self.target_path} from {self.list_path} ({len(codes)} modules)")
        return codes

    def _resolve_names(self, names: list[str]) -> list[str]:
        self._narrate("Fetching module catalog...")
        catalog = self.catalog_fetcher()

        resolver = NameResolver(on_unresolved=lambda name: self._narrate(f"Unable to find match for module name: {name}"))
        codes = resolver.resolve_all(names, catalog)
        self._narrate(f"Converted {len(codes)} of {len(names)} module names to codes.")
        return codes

    def _narrate(self, message: str) -> None:
        if self.verbose and self.console is not None:
            self.console.print(Text(message, style="dim"))
