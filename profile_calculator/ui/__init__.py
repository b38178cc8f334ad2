"""Console display helpers for the CLI."""

from .error_display import display_error
from .error_display import display_result

__all__ = ["display_error", "display_result"]
