"""Command-line interface for the address hierarchy import."""

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console

if TYPE_CHECKING:
    from addressimport.config.settings import ImportConfig
    from addressimport.loading.loader import LoadOutcome
    from addressimport.session import ImportSession

app = typer.Typer(
    name="addressimport",
    help="Validate address hierarchy CSV files and load them into the database.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]
DatabaseOption = Annotated[
    Path | None,
    typer.Option(
        "--database",
        "-d",
        help="SQLite database path. Overrides database.path from the config.",
        dir_okay=False,
    ),
]
CsvArgument = Annotated[
    Path,
    typer.Argument(help="CSV file with the eight address columns.", dir_okay=False),
]


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Log level. Overrides logging.level."),
    ] = None,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit logs as JSON."),
    ] = False,
) -> None:
    """Address hierarchy import (regions, provinces, LGUs, barangays)."""
    ctx.obj = {"log_level": log_level, "json_logs": json_logs}


def _setup(
    ctx: typer.Context,
    config_path: Path | None,
    *,
    database: Path | None = None,
    batch_size: int | None = None,
    atomic: bool | None = None,
) -> "ImportConfig":
    """Load config, apply command-line overrides and configure logging."""
    from pydantic import ValidationError

    from addressimport.config import ImportConfig, load_config
    from addressimport.utils.logging import configure_logging

    try:
        config = load_config(config_path) if config_path else ImportConfig()
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(code=1) from e

    if database is not None:
        config = config.model_copy(
            update={"database": config.database.model_copy(update={"path": database})}
        )
    load_updates: dict[str, object] = {}
    if batch_size is not None:
        load_updates["batch_size"] = batch_size
    if atomic is not None:
        load_updates["atomic"] = atomic
    if load_updates:
        config = config.model_copy(update={"load": config.load.model_copy(update=load_updates)})

    options = ctx.obj or {}
    configure_logging(
        level=options.get("log_level") or config.logging.level,
        json_output=options.get("json_logs") or config.logging.json_output,
    )
    return config


def _run_with_interrupt(session: "ImportSession") -> "LoadOutcome":
    """
    Run replace_all on a worker thread so Ctrl-C can cancel between operations.

    The running store call always completes; the loader stops before the next.
    """
    cancel = threading.Event()
    result: dict[str, "LoadOutcome"] = {}
    errors: list[BaseException] = []

    def target() -> None:
        try:
            result["outcome"] = session.replace_all(cancel)
        except BaseException as e:  # re-raised on the main thread
            errors.append(e)

    worker = threading.Thread(target=target, name="address-load", daemon=True)
    worker.start()
    try:
        while worker.is_alive():
            worker.join(timeout=0.2)
    except KeyboardInterrupt:
        cancel.set()
        console.print("[yellow]Cancelling after the current operation...[/yellow]")
        worker.join()

    if errors:
        raise errors[0]
    return result["outcome"]


@app.command()
def validate(
    ctx: typer.Context,
    csv_file: CsvArgument,
    config: ConfigOption = None,
) -> None:
    """Validate a CSV file without touching the database."""
    from addressimport.errors import RowSourceError
    from addressimport.ingestion import CsvRowSource
    from addressimport.validation import ConsoleReporter, ValidationReport, build_report

    import_config = _setup(ctx, config)
    reporter = ConsoleReporter(console, max_errors=import_config.display.max_errors)

    source = CsvRowSource(csv_file)
    try:
        report = build_report(source.load()).report
    except RowSourceError as e:
        report = ValidationReport.source_failure(str(e))

    reporter.print_report(report, source=source.name)
    if not report.valid:
        raise typer.Exit(code=1)


@app.command("replace-all")
def replace_all(
    ctx: typer.Context,
    csv_file: CsvArgument,
    config: ConfigOption = None,
    database: DatabaseOption = None,
    batch_size: Annotated[
        int | None,
        typer.Option(
            "--batch-size",
            "-b",
            min=1,
            help="Barangay records per insert call. Overrides load.batch_size.",
        ),
    ] = None,
    atomic: Annotated[
        bool,
        typer.Option(
            "--atomic",
            help="Run the whole replace in one transaction (also enabled by load.atomic).",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation."),
    ] = False,
) -> None:
    """
    Replace ALL regions, provinces, LGUs and barangays with the file's contents.

    Every existing row of the four tables is deleted before the new data is
    inserted.
    """
    from addressimport.errors import StoreError
    from addressimport.loading import SQLiteAddressStore
    from addressimport.session import ImportSession
    from addressimport.validation import ConsoleReporter

    import_config = _setup(
        ctx, config, database=database, batch_size=batch_size, atomic=atomic or None
    )
    reporter = ConsoleReporter(console, max_errors=import_config.display.max_errors)
    db_path = import_config.database.path

    try:
        store = SQLiteAddressStore(
            db_path, enforce_foreign_keys=import_config.database.enforce_foreign_keys
        )
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    with store:
        session = ImportSession(store, import_config)
        report = session.load_file(csv_file)
        reporter.print_report(report, source=session.source_name)
        if not report.valid:
            raise typer.Exit(code=1)

        if not yes:
            typer.confirm(
                f"This deletes all address data in {db_path} and loads "
                f"{session.row_count} rows. Continue?",
                abort=True,
            )

        console.print(f"[blue]Processing data, please wait...[/blue] [dim]({db_path})[/dim]")
        outcome = _run_with_interrupt(session)
        reporter.print_outcome(outcome)
        if not outcome.ok:
            raise typer.Exit(code=1)


@app.command("init-db")
def init_db(
    ctx: typer.Context,
    config: ConfigOption = None,
    database: DatabaseOption = None,
) -> None:
    """Create the address tables if they do not exist."""
    from addressimport.errors import StoreError
    from addressimport.hierarchy import HIERARCHY_TABLES
    from addressimport.loading import SQLiteAddressStore

    import_config = _setup(ctx, config, database=database)
    db_path = import_config.database.path

    try:
        with SQLiteAddressStore(
            db_path, enforce_foreign_keys=import_config.database.enforce_foreign_keys
        ) as store:
            counts = {table: store.count(table) for table in HIERARCHY_TABLES}
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(f"[green]Database ready: {db_path}[/green]")
    for table, count in counts.items():
        console.print(f"  {table}: {count}")


if __name__ == "__main__":
    app()
