"""Error and result display for calculator commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape as _escape_markup
from rich.panel import Panel
from rich.text import Text

from ..errors import ArgumentError
from ..errors import ListFormatError
from ..errors import ProfileCalcError
from ..errors import ProfileIOError
from ..errors import ProfileParseError

if TYPE_CHECKING:
    from rich.console import Console

    from ..runner import OperationResult

# Panel title and a hint for each error kind
_ERROR_STYLES: dict[type[ProfileCalcError], tuple[str, str]] = {
    ArgumentError: ("Invalid Operands", "Supply two profile files, or one directory for union and intersect."),
    ListFormatError: ("Badly Formatted Module List", "Bracket lines must look like [mod1, mod2, mod3]."),
    ProfileIOError: ("File Error", "Check the path exists and that output files end in .json."),
    ProfileParseError: ("Invalid Profile Data", "Profiles must be JSON objects with an EnabledList array."),
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a non-empty display message.

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'

        >>> format_error_message(KeyError())
        'KeyError: (no additional details)'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    return f"{error_type}: (no additional details)"


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings."""
    return _escape_markup(str(value))


def display_error(console: Console, error: BaseException) -> None:
    """Render an error as a panel."""
    title, hint = "Error", ""
    for error_type, (error_title, error_hint) in _ERROR_STYLES.items():
        if isinstance(error, error_type):
            title, hint = error_title, error_hint
            break

    body = Text(format_error_message(error, include_type=False))
    if hint:
        body.append(f"\n\n{hint}", style="dim")

    console.print(Panel(body, title=f"[bold red]{title}[/bold red]", border_style="red", expand=False))


def display_result(console: Console, result: OperationResult) -> None:
    """Report the outcome of a request."""
    if result.error is not None:
        display_error(console, result.error)
        return

    count = len(result.codes)
    noun = "module" if count == 1 else "modules"
    console.print(f"[green]✓ Wrote {count} {noun} to[/green] [cyan]{escape_markup(result.target_path)}[/cyan]")
