"""Profile Calculator CLI - create profiles and combine them with set operations."""

import logging
import shlex
from pathlib import Path

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from prompt_toolkit.history import InMemoryHistory
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .catalog import CatalogClient
from .catalog import build_name_table
from .console import console
from .errors import ArgumentError
from .errors import ProfileCalcError
from .logging_setup import init_json_logging
from .models import CalculationRequest
from .models import CreateRequest
from .models import OperandSet
from .models import Operation
from .models import ProfileDirectory
from .models import ProfileFiles
from .models import Request
from .runner import execute
from .settings import SETTINGS_DIRNAME
from .settings import CalculatorSettings
from .settings import SettingsManager
from .ui import display_error
from .ui import display_result
from .ui.error_display import escape_markup

logger = logging.getLogger(__name__)

SHELL_EXIT_WORDS = ("exit", "quit")


def resolve_operands(paths: tuple[Path, ...], operation: Operation) -> OperandSet:
    """Decide whether the command-line operands are two files or one directory.

    Raises:
        ArgumentError: If the operands do not fit the operation
    """
    if len(paths) == 1 and paths[0].is_dir():
        if not operation.accepts_directory:
            raise ArgumentError(f"{operation.value.capitalize()} does not accept a directory, supply exactly 2 profiles")
        return ProfileDirectory(paths[0])

    if len(paths) != 2:
        got = f"got {len(paths)} operand" if len(paths) == 1 else f"got {len(paths)} operands"
        if operation.accepts_directory:
            raise ArgumentError(f"{operation.value.capitalize()} needs 2 profiles or 1 directory, {got}")
        raise ArgumentError(f"{operation.value.capitalize()} needs exactly 2 profiles, {got}")

    for path in paths:
        if path.is_dir():
            raise ArgumentError(f"A directory can only be given as the sole operand: {path}")
    return ProfileFiles(paths[0], paths[1])


def _run_request(settings: CalculatorSettings, request: Request) -> None:
    """Execute a request and report it; a failed request exits with status 1."""
    result = execute(request, settings=settings, console=console)
    display_result(console, result)
    if not result.ok:
        click.get_current_context().exit(1)


def _run_calculation(
    settings: CalculatorSettings,
    operation: Operation,
    operands: tuple[Path, ...],
    target: Path | None,
    verbose: bool,
    dedupe: bool,
) -> None:
    try:
        operand_set = resolve_operands(operands, operation)
    except ArgumentError as e:
        display_error(console, e)
        click.get_current_context().exit(1)

    request = CalculationRequest(
        operation=operation,
        operands=operand_set,
        target_path=target,
        verbose=verbose,
        keep_duplicates=not dedupe,
    )
    _run_request(settings, request)


output_option = click.option(
    "--output",
    "-o",
    "target",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Destination profile (.json). Defaults to calculated.json",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Show progress details")
dedupe_option = click.option(
    "--dedupe", is_flag=True, help="Collapse duplicate module codes in the result (kept by default)"
)
operands_argument = click.argument("operands", nargs=-1, type=click.Path(path_type=Path))


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="profile-calc")
@click.option("--log-level", default=None, help="Log level for the JSONL log (overrides settings)")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """Profile Calculator - build and combine mod selector profiles."""
    settings = SettingsManager().load()
    try:
        init_json_logging(settings.log_path, log_level or settings.log_level)
    except OSError as e:
        console.print(f"[yellow]⚠️ Logging disabled, cannot open {escape_markup(settings.log_path)}: {e}[/yellow]")
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("list_file", type=click.Path(path_type=Path))
@output_option
@click.option("--names", "-n", "use_names", is_flag=True, help="List holds module names, resolve them to codes")
@verbose_option
@click.pass_obj
def create(settings: CalculatorSettings, list_file: Path, target: Path | None, use_names: bool, verbose: bool):
    """Create a profile from a module list file."""
    request = CreateRequest(list_path=list_file, target_path=target, use_names=use_names, verbose=verbose)
    _run_request(settings, request)


@cli.command()
@operands_argument
@output_option
@verbose_option
@dedupe_option
@click.pass_obj
def union(settings: CalculatorSettings, operands: tuple[Path, ...], target: Path | None, verbose: bool, dedupe: bool):
    """Union of two profiles, or of every profile in a directory."""
    _run_calculation(settings, Operation.UNION, operands, target, verbose, dedupe)


@cli.command()
@operands_argument
@output_option
@verbose_option
@dedupe_option
@click.pass_obj
def intersect(
    settings: CalculatorSettings, operands: tuple[Path, ...], target: Path | None, verbose: bool, dedupe: bool
):
    """Intersection of two profiles, or of every profile in a directory."""
    _run_calculation(settings, Operation.INTERSECTION, operands, target, verbose, dedupe)


@cli.command()
@operands_argument
@output_option
@verbose_option
@dedupe_option
@click.pass_obj
def difference(
    settings: CalculatorSettings, operands: tuple[Path, ...], target: Path | None, verbose: bool, dedupe: bool
):
    """Modules of the first profile that are not in the second."""
    _run_calculation(settings, Operation.DIFFERENCE, operands, target, verbose, dedupe)


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def resolve(settings: CalculatorSettings, names: tuple[str, ...]):
    """Look up the module codes for module names."""
    client = CatalogClient(settings.catalog_url, settings.catalog_timeout)
    try:
        with console.status("[dim]Fetching module catalog...[/dim]", spinner="dots"):
            catalog = client.fetch()
    except ProfileCalcError as e:
        display_error(console, e)
        click.get_current_context().exit(1)

    table_lookup = build_name_table(catalog)

    table = Table(title="Module Codes", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green")
    table.add_column("Code")

    for name in names:
        code = table_lookup.get(name.lower())
        table.add_row(escape_markup(name), escape_markup(code) if code else "[yellow]not found[/yellow]")

    console.print(table)


def _create_prompt_session() -> PromptSession:
    """Create configured PromptSession for the shell.

    Provides:
    - Persistent history at ~/.profile-calculator/repl_history
    - History search with Ctrl-R
    - Fallback to in-memory history when the history file is unusable
    """
    history_path = Path.home() / SETTINGS_DIRNAME / "repl_history"

    try:
        history_path.parent.mkdir(parents=True, exist_ok=True)
        history = FileHistory(str(history_path))
    except Exception as e:
        history = InMemoryHistory()
        logger.warning(f"Could not load history from {history_path}: {e}. Using in-memory history for this session.")

    return PromptSession(
        message=HTML("<ansigreen><b>profile-calc></b></ansigreen> "),
        history=history,
        enable_history_search=True,
    )


def run_shell_command(line: str) -> int:
    """Run one shell line as a CLI command.

    Each line goes through the click group from scratch, so every command builds
    its own request and settings. Usage errors are reported, not raised.

    Returns:
        Exit status of the command
    """
    try:
        args = shlex.split(line)
    except ValueError as e:
        console.print(f"[red]Cannot parse command:[/red] {escape_markup(e)}")
        return 2

    if not args:
        return 0
    if args[0] == "help":
        args = [*args[1:], "--help"]
    if args[0] == "shell" and "--help" not in args:
        console.print("[yellow]Already in the shell.[/yellow]")
        return 0

    try:
        status = cli.main(args=args, prog_name="profile-calc", standalone_mode=False)
    except click.exceptions.Abort:
        console.print("[yellow]Aborted[/yellow]")
        return 1
    except click.ClickException as e:
        console.print(f"[red]Error:[/red] {escape_markup(e.format_message())}")
        return e.exit_code

    return status if isinstance(status, int) else 0


@cli.command()
@click.option("--verbose", "-v", is_flag=True, help="Show tracebacks for unexpected errors")
def shell(verbose: bool):
    """Run commands interactively until exit."""
    prompt_session = _create_prompt_session()
    console.print(
        Panel.fit(
            "[bold cyan]Profile Calculator Shell[/bold cyan]\n"
            "Commands: create | union | intersect | difference | resolve | help | Exit: Ctrl-D",
            border_style="cyan",
        )
    )

    while True:
        try:
            line = prompt_session.prompt()
        except KeyboardInterrupt:
            continue
        except EOFError:
            console.print("\n[dim]Exiting...[/dim]")
            break

        if line.strip().lower() in SHELL_EXIT_WORDS:
            break
        if not line.strip():
            continue

        try:
            run_shell_command(line)
        except Exception as e:
            console.print(f"[red]Error:[/red] {escape_markup(e)}")
            if verbose:
                console.print_exception()


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
