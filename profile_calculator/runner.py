"""Single entry point for executing calculator requests.

Both the single-shot CLI commands and the interactive shell run requests
through execute(). Failures of the four calculator error kinds come back as an
OperationResult instead of an exception, so the caller decides whether an error
ends the process or only the current command.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import TYPE_CHECKING

from .calculations import ProfileCalculations
from .catalog import CatalogClient
from .catalog import CatalogFetcher
from .creator import ProfileCreator
from .errors import ProfileCalcError
from .models import CalculationRequest
from .models import CreateRequest
from .models import Request
from .settings import CalculatorSettings

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one request: the written profile, or the error that stopped it."""

    target_path: Path | None = None
    codes: list[str] = field(default_factory=list)
    error: ProfileCalcError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, target_path: Path, codes: list[str]) -> OperationResult:
        return cls(target_path=target_path, codes=codes)

    @classmethod
    def failure(cls, error: ProfileCalcError) -> OperationResult:
        return cls(error=error)


def execute(
    request: Request,
    settings: CalculatorSettings | None = None,
    console: Console | None = None,
    catalog_fetcher: CatalogFetcher | None = None,
) -> OperationResult:
    """Execute one create or calculation request.

    Args:
        request: Fully resolved request for this command
        settings: Resolved settings (defaults to built-in defaults)
        console: Console for verbose narration
        catalog_fetcher: Catalog source override, used for name resolution

    Returns:
        OperationResult carrying the written codes or the error
    """
    if not isinstance(request, (CreateRequest, CalculationRequest)):
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    settings = settings or CalculatorSettings()
    target = request.target_path or Path(settings.default_target)

    try:
        if isinstance(request, CreateRequest):
            fetcher = catalog_fetcher or CatalogClient(settings.catalog_url, settings.catalog_timeout).fetch
            creator = ProfileCreator(
                request.list_path,
                target_path=target,
                use_names=request.use_names,
                verbose=request.verbose,
                catalog_fetcher=fetcher,
                console=console,
            )
            codes = creator.create_profile()
        else:
            calculations = ProfileCalculations(
                request.operands,
                target_path=target,
                verbose=request.verbose,
                console=console,
                keep_duplicates=request.keep_duplicates,
            )
            codes = calculations.compute(request.operation)
    except ProfileCalcError as e:
        logger.warning(f"Request failed ({e.kind}): {e}")
        return OperationResult.failure(e)

    return OperationResult.success(target, codes)
