"""Module catalog client and name-to-code resolution."""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Iterable
from typing import Any

import httpx
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

from .errors import ProfileIOError
from .errors import ProfileParseError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = "https://ktane.timwi.de/json/raw"

# Key holding the record array when the catalog is wrapped in an object
CATALOG_RECORDS_KEY = "KtaneModules"


class CatalogEntry(BaseModel):
    """One catalog record mapping a module code to its display name."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    module_id: str = Field(..., alias="ModuleID", description="Canonical module code")
    name: str = Field(..., alias="Name", description="Human-readable module name")


CatalogFetcher = Callable[[], list[CatalogEntry]]


class CatalogClient:
    """Fetches the module catalog.

    Every call to fetch() performs a fresh request - nothing is cached between
    operations and failed requests are not retried.
    """

    def __init__(self, catalog_url: str | None = None, timeout: float | None = None):
        """Initialize catalog client.

        Args:
            catalog_url: URL of the catalog JSON document. If None, uses the public catalog.
            timeout: Request timeout in seconds. None blocks until the server answers.
        """
        self.catalog_url = catalog_url or DEFAULT_CATALOG_URL
        self.timeout = timeout

    def fetch(self) -> list[CatalogEntry]:
        """Fetch and validate the catalog.

        Returns:
            Catalog records in document order

        Raises:
            ProfileIOError: If the request fails or returns an error status
            ProfileParseError: If the response is not a valid catalog document
        """
        logger.info(f"Fetching module catalog from {self.catalog_url}")
        try:
            response = httpx.get(self.catalog_url, timeout=self.timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch catalog: {e}")
            raise ProfileIOError(f"Failed to fetch module catalog from {self.catalog_url}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ProfileParseError(f"Module catalog at {self.catalog_url} is not valid JSON: {e}") from e

        entries = parse_catalog(data)
        logger.debug(f"Catalog contains {len(entries)} records")
        return entries


def parse_catalog(data: Any) -> list[CatalogEntry]:
    """Validate a decoded catalog document.

    Accepts either a bare array of records or an object holding the array
    under ``KtaneModules``.

    Raises:
        ProfileParseError: If the document does not contain a record array
    """
    if isinstance(data, dict):
        data = data.get(CATALOG_RECORDS_KEY)
    if not isinstance(data, list):
        raise ProfileParseError("Module catalog must be a JSON array of {ModuleID, Name} records")

    try:
        return [CatalogEntry.model_validate(record) for record in data]
    except ValidationError as e:
        raise ProfileParseError(f"Invalid module catalog record: {e.errors()[0]['msg']}") from e


class NameResolver:
    """Resolves module display names to module codes.

    Matching is exact and case-insensitive. When the catalog holds the same
    name more than once, the first record wins. Names missing from the catalog
    are dropped rather than reported as errors.
    """

    def __init__(self, on_unresolved: Callable[[str], None] | None = None):
        self.on_unresolved = on_unresolved

    def resolve_all(self, names: Iterable[str], catalog: Iterable[CatalogEntry]) -> list[str]:
        """Resolve names to codes, preserving input order.

        Args:
            names: Display names to resolve
            catalog: Catalog records, in catalog order

        Returns:
            Codes for every name that matched a record
        """
        table = build_name_table(catalog)
        codes: list[str] = []

        for name in names:
            code = table.get(name.lower())
            if code is None:
                logger.debug(f"No catalog match for module name: {name}")
                if self.on_unresolved:
                    self.on_unresolved(name)
                continue
            logger.debug(f"Resolved module name {name} to {code}")
            codes.append(code)

        return codes


def build_name_table(catalog: Iterable[CatalogEntry]) -> dict[str, str]:
    """Build a lower-cased name to code lookup, keeping the first record per name."""
    table: dict[str, str] = {}
    for entry in catalog:
        table.setdefault(entry.name.lower(), entry.module_id)
    return table
