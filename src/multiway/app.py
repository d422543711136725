"""
Command-line interface for multiway using Typer.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from multiway import __version__
from multiway.api import load_table, partition_frame, save_table
from multiway.config import PartitionParams, load_partition_params
from multiway.evaluation import compare_objectives, summarize
from multiway.exceptions import PartitionError
from multiway.optimization import Objective
from multiway.utils.logging import (
    LogLevel,
    log_error,
    log_success,
    setup_logging,
)

app = typer.Typer(
    help="multiway: split numbers into k groups with near-equal sums",
    add_completion=False,
)
console = Console()


def _setup_logging_from_flags(
    verbose: bool = False, quiet: bool = False, debug: bool = False
):
    """Setup logging based on CLI flags or environment variable."""
    level_from_flags: LogLevel | None = None
    if debug:
        level_from_flags = LogLevel.DEBUG
    elif verbose:
        level_from_flags = LogLevel.VERBOSE
    elif quiet:
        level_from_flags = LogLevel.QUIET

    if level_from_flags is not None:
        setup_logging(level_from_flags)
    else:
        # No flags set, let setup_logging handle it (will check env var)
        setup_logging()


def _load_params(config: Path | None, verbose: bool) -> PartitionParams:
    if config is None:
        params = PartitionParams()
    else:
        if not config.exists():
            log_error(f"Config file not found: {config}")
            raise typer.Exit(1)
        try:
            params = load_partition_params(config)
        except ValueError as e:
            log_error(str(e))
            raise typer.Exit(1)
    if verbose:
        params.runtime.verbose = True
    return params


def _split_columns(raw: str | None) -> list[str] | None:
    if not raw:
        return None
    return [c.strip() for c in raw.split(",") if c.strip()]


def _print_group_table(title: str, sums: list[float], counts: list[int]) -> None:
    table = Table(title=title, show_header=True, min_width=len(title) + 4)
    table.add_column("Group", style="cyan")
    table.add_column("Sum", style="green")
    table.add_column("Items", style="green")
    for j, (total, count) in enumerate(zip(sums, counts), start=1):
        table.add_row(str(j), f"{total:g}", str(count))
    console.print(table)


@app.command()
def partition(
    input_file: Path = typer.Argument(..., help="CSV or JSON table, one row per item"),
    size_column: str = typer.Option(
        ..., "--size-column", "-s", help="Column holding the item sizes"
    ),
    k: int = typer.Option(..., "--groups", "-k", help="Number of groups"),
    objective: str | None = typer.Option(
        None,
        "--objective",
        help="min-largest, max-smallest or min-range (default from config)",
    ),
    alpha: float | None = typer.Option(
        None, "--alpha", help="Weight of the label-balancing term"
    ),
    label_columns: str | None = typer.Option(
        None, "--label-columns", "-l", help="Comma-separated label weight columns"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write rows plus a Group column (.csv or .json)"
    ),
    strict: bool | None = typer.Option(
        None,
        "--strict/--no-strict",
        help="Fail unless the solver proves optimality (default from config)",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Partition the rows of a table into k groups of near-equal size sums.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    if not input_file.exists():
        log_error(f"Input file not found: {input_file}")
        raise typer.Exit(1)

    if objective is not None:
        try:
            objective = Objective.parse(objective).value
        except ValueError as e:
            log_error(str(e))
            raise typer.Exit(1)

    params = _load_params(config, verbose)

    try:
        df = load_table(input_file)
        if quiet:
            frame, solution = partition_frame(
                df,
                size_column,
                k,
                objective,
                label_columns=_split_columns(label_columns),
                config=params,
                strict=strict,
                alpha=alpha,
            )
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Solving partition model...", total=None)
                frame, solution = partition_frame(
                    df,
                    size_column,
                    k,
                    objective,
                    label_columns=_split_columns(label_columns),
                    config=params,
                    strict=strict,
                    alpha=alpha,
                )
                progress.update(task, completed=True)

        if not quiet:
            counts = [solution.assignment.count(j) for j in range(1, solution.k + 1)]
            _print_group_table(
                f"Partition ({solution.objective})", solution.group_sums, counts
            )
            console.print(
                f"[dim]Range {solution.group_range:g} | {solution.solver_name} "
                f"{solution.solver_status} in {solution.solver_runtime_sec:.2f}s[/dim]"
            )

        if output is not None:
            save_table(frame, output)
            log_success(f"Results saved to {output}")

    except (FileNotFoundError, ValueError, PartitionError) as e:
        log_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        log_error(f"Unexpected error: {e}")
        if debug:
            console.print_exception()
        raise typer.Exit(1)


@app.command()
def compare(
    input_file: Path = typer.Argument(..., help="CSV or JSON table, one row per item"),
    size_column: str = typer.Option(
        ..., "--size-column", "-s", help="Column holding the item sizes"
    ),
    k: int = typer.Option(..., "--groups", "-k", help="Number of groups"),
    baselines: int = typer.Option(
        2, "--baselines", "-b", help="Number of random baseline assignments"
    ),
    seed: int = typer.Option(431, "--seed", help="Seed for the random baselines"),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Solve with every objective and compare group sums with random assignments.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    if not input_file.exists():
        log_error(f"Input file not found: {input_file}")
        raise typer.Exit(1)

    params = _load_params(config, verbose)

    try:
        df = load_table(input_file)
        if size_column not in df.columns:
            raise ValueError(f"Columns not found in table: ['{size_column}']")
        table_df = compare_objectives(
            df[size_column].tolist(),
            k,
            params=params,
            random_baselines=baselines,
            seed=seed,
            show_progress=not quiet,
        )
    except (FileNotFoundError, ValueError, PartitionError) as e:
        log_error(str(e))
        raise typer.Exit(1)

    table = Table(title="Group sums by algorithm", show_header=True)
    table.add_column("Group", style="cyan")
    for column in table_df.columns:
        table.add_column(column, style="green")
    for group, row in table_df.iterrows():
        table.add_row(str(group), *(f"{value:g}" for value in row))
    for stat in ("smallest", "largest", "range"):
        table.add_row(
            stat,
            *(f"{summarize(table_df[c])[stat]:g}" for c in table_df.columns),
            style="bold",
        )
    console.print(table)


@app.command()
def version() -> None:
    """Show the multiway version."""
    console.print(f"multiway {__version__}")


if __name__ == "__main__":
    app()
