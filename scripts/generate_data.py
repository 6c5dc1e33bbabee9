"""
Synthetic transaction generator for the discount engine.

Writes a deterministic pseudo-random transactions CSV in the format the engine
reads. The generated rows exercise every rule: products near expiry, cheese and
wine (including a few lowercase names), Visa payments, large quantities, and
sales on March 23rd.
"""

from __future__ import annotations

import csv
import random
import sys
import time
from datetime import datetime, timedelta
from pathlib import Path

import typer

from discount_engine.ingest import FIELDS

app = typer.Typer(help="Generate a synthetic transactions CSV.")

PRODUCTS = [
    "Cheese - Cheddar",
    "Cheese - Brie",
    "Cheese - Gouda",
    "cheese - soft",
    "Wine - Red",
    "Wine - White",
    "Wine - Rose",
    "Milk - Whole",
    "Bread - Sourdough",
    "Coffee - Arabica",
]
CHANNELS = ["Store", "App"]
PAYMENT_METHODS = ["Visa", "Cash"]


def _generate_rows_csv(csv_path: Path, rows: int, batch_size: int, seed: int) -> None:
    rng = random.Random(seed)
    year_start = datetime(2023, 1, 1)

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(FIELDS)

        buffer: list[list[str]] = []
        for _ in range(rows):
            sold_at = year_start + timedelta(
                days=rng.randint(0, 364), seconds=rng.randint(0, 86_399)
            )
            # Roughly one sale in fifty lands on the March 23rd special.
            if rng.random() < 0.02:
                sold_at = sold_at.replace(month=3, day=23)
            expiry = sold_at.date() + timedelta(days=rng.randint(1, 60))
            buffer.append(
                [
                    sold_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
                    rng.choice(PRODUCTS),
                    expiry.isoformat(),
                    str(rng.randint(1, 20)),
                    f"{rng.uniform(1, 200):.2f}",
                    rng.choice(CHANNELS),
                    rng.choice(PAYMENT_METHODS),
                ]
            )
            if len(buffer) >= batch_size:
                writer.writerows(buffer)
                buffer.clear()
        if buffer:
            writer.writerows(buffer)


@app.command()
def main(
    rows: int = typer.Option(
        1_000,
        "--rows",
        "-r",
        help="Number of transactions to generate.",
    ),
    batch_size: int = typer.Option(
        500,
        "--batch-size",
        "-b",
        help="Batch size for CSV buffering during generation.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("data/TRX1000.csv"),
        "--output",
        "-o",
        help="CSV output path.",
    ),
) -> None:
    """
    Generate a synthetic transactions CSV.
    """
    start = time.perf_counter()
    output.parent.mkdir(parents=True, exist_ok=True)

    typer.echo(f"Generating {rows:,} transactions -> {output} (batch={batch_size}, seed={seed})")
    _generate_rows_csv(output, rows=rows, batch_size=batch_size, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(f"CSV generation completed in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
