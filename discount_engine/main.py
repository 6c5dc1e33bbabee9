from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer

from discount_engine.config import get_settings
from discount_engine.errors import IngestError
from discount_engine.infrastructure.store import available_stores
from discount_engine.orchestrator import RunConfig, run_batch
from discount_engine.reporter import print_records, print_rules, print_summary
from discount_engine.rules import DEFAULT_CATALOG
from discount_engine.utils.logging import configure_logging

app = typer.Typer(help="Retail discount rules engine CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"input={settings.input_path} header={settings.input_has_header} "
        f"on_malformed={settings.malformed_row_policy} | "
        f"store={settings.record_store} delay_ms={settings.store_delay_ms} | "
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@app.command()
def rules() -> None:
    """
    List the discount rules in evaluation order.
    """
    print_rules(DEFAULT_CATALOG)


@app.command()
def run(
    input_path: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help=(
            "Transactions CSV to price (default INPUT_PATH, the bundled sample). "
            "Generate a larger one with scripts/generate_data.py."
        ),
    ),
    store: Optional[str] = typer.Option(
        None,
        "--store",
        "-s",
        help="Record store to save priced records to (log, postgres).",
    ),
    on_malformed: Optional[str] = typer.Option(
        None,
        "--on-malformed",
        help="What to do with a row whose numbers do not parse: abort or skip.",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        help="Stop after this many records.",
    ),
    preview: Optional[int] = typer.Option(
        None,
        "--preview",
        "-p",
        help="Number of priced records to display (default from settings).",
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        help="Also write logs, including the rule audit trail, to this file.",
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON."),
    save_summary: bool = typer.Option(
        False,
        "--save-summary",
        help="Write the batch summary to results/.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON."),
) -> None:
    """
    Price every record of the input file and save each one.
    """
    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        json_logs=json_logs or settings.log_json,
        log_file=log_file or settings.log_file,
    )

    if store is not None and store not in available_stores():
        raise typer.BadParameter(
            f"unknown store '{store}'. Available: {', '.join(available_stores())}",
            param_hint="--store",
        )
    if on_malformed is not None and on_malformed not in ("abort", "skip"):
        raise typer.BadParameter("must be 'abort' or 'skip'", param_hint="--on-malformed")

    config = RunConfig(
        input_path=input_path,
        store=store,
        malformed_row_policy=on_malformed,  # type: ignore[arg-type]
        limit=limit,
        preview_rows=preview,
        persist_summary=save_summary,
    )
    try:
        result = run_batch(config)
    except IngestError as exc:
        typer.echo(f"Batch aborted: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(json.dumps(dict(result.summary), indent=2))
        return
    print_records(result.preview)
    print_summary(result.summary)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
