"""Command-line interface for the packagedb compiler."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from packagedb.config.settings import BuildConfig

app = typer.Typer(
    name="packagedb",
    help="Validate and compile the package metadata database.",
    no_args_is_help=True,
)

console = Console()

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        "-r",
        help="Root of the source tree (packages/, groups/, schemas/). Defaults to cwd.",
        file_okay=False,
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to a packagedb.yaml configuration file.",
        dir_okay=False,
    ),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logs."),
    ] = False,
    log_json: Annotated[
        bool,
        typer.Option("--log-json", help="Emit logs as JSON lines on stderr."),
    ] = False,
) -> None:
    """Validate and compile the package metadata database."""
    from packagedb.utils.logging import configure_logging

    configure_logging(level="DEBUG" if verbose else "WARNING", json_output=log_json)


def _load_build_config(config: Path | None, root: Path | None) -> "BuildConfig":
    """Load configuration or exit with a readable error."""
    import yaml

    from packagedb.config.loader import load_config

    try:
        return load_config(config, root=root)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error: invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def validate(
    root: RootOption = None,
    config: ConfigOption = None,
    plain: Annotated[
        bool,
        typer.Option("--plain", help="Print the report as plain text lines (stable for diffs)."),
    ] = False,
) -> None:
    """
    Run every check over the source tree and report all problems.

    Exits non-zero iff at least one hard error was found; warnings never fail.
    """
    from packagedb.errors import PackageDBError
    from packagedb.validation import ConsoleReporter, ValidationRunner

    build_config = _load_build_config(config, root)
    if not plain:
        console.print(f"[blue]Validating {build_config.source.root}[/blue]")

    try:
        outcome = ValidationRunner(build_config).run()
    except PackageDBError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    if plain:
        for line in outcome.report.lines():
            typer.echo(line)
    else:
        ConsoleReporter(console).print_results(outcome)

    if not outcome.passed:
        raise typer.Exit(code=1)


@app.command(name="compile")
def compile_database(root: RootOption = None, config: ConfigOption = None) -> None:
    """
    Compile the source tree into target/packages.db and its SHA-256 file.

    Aborts on the first hard error; existing artifacts are left untouched.
    """
    from packagedb.build import run_compile
    from packagedb.errors import PackageDBError

    build_config = _load_build_config(config, root)
    console.print(f"[blue]Compiling {build_config.source.root}[/blue]")

    try:
        result = run_compile(build_config)
    except PackageDBError as e:
        console.print(f"[red]Compilation failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    for warning in result.report.warnings:
        console.print(f"  ⚠ {warning.render()}", style="yellow", markup=False)

    console.print()
    table = Table(title="Database compiled successfully")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", str(result.database.version))
    table.add_row("Packages", str(len(result.database.packages)))
    table.add_row("Groups", str(len(result.database.groups)))
    table.add_row("Size", f"{result.size_bytes / 1024:.1f} KB")
    table.add_row("SHA-256", result.checksum[:16])
    console.print(table)
    console.print(f"\n[green]Wrote {result.database_path}[/green]")
    console.print(f"[green]Wrote {result.checksum_path}[/green]")


@app.command()
def stats(root: RootOption = None, config: ConfigOption = None) -> None:
    """Show package counts, category breakdown and platform coverage."""
    from packagedb.errors import PackageDBError
    from packagedb.stats import StatsReporter, compute_stats
    from packagedb.validation import ValidationRunner

    build_config = _load_build_config(config, root)

    try:
        outcome = ValidationRunner(build_config).run()
    except PackageDBError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    if not outcome.passed:
        console.print(
            f"[yellow]Warning: {len(outcome.report.errors)} validation error(s); "
            "statistics cover valid records only. Run `packagedb validate`.[/yellow]"
        )

    source = build_config.source
    result = compute_stats(
        outcome.packages,
        outcome.groups,
        database_path=build_config.database_path,
        profiles_dir=source.profiles_path,
        mappings_dir=source.mappings_path,
        extension=source.extension,
    )
    StatsReporter(console).print_stats(result)


@app.command()
def verify(root: RootOption = None, config: ConfigOption = None) -> None:
    """Re-hash the compiled database and compare it with its stored checksum."""
    from packagedb.utils.hashing import verify_checksum

    build_config = _load_build_config(config, root)
    database_path = build_config.database_path
    checksum_path = build_config.checksum_path

    try:
        ok = verify_checksum(database_path, checksum_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("[yellow]Run `packagedb compile` first.[/yellow]")
        raise typer.Exit(code=1) from e

    if not ok:
        console.print(f"[red]Checksum mismatch for {database_path}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓ {database_path} matches {checksum_path.name}[/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from packagedb import __version__

    console.print(f"packagedb version {__version__}")


if __name__ == "__main__":
    app()
