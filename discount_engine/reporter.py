from __future__ import annotations

from typing import Iterable, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from discount_engine.domain.models import Record
from discount_engine.orchestrator import BatchSummary
from discount_engine.rules import DiscountRule


def print_records(records: Sequence[Record], console: Optional[Console] = None) -> None:
    """
    Render priced records as a rich table.

    Discount and final price are shown rounded to two decimals; the records
    themselves carry unrounded values.
    """
    console = console or Console()

    if not records:
        console.print("[yellow]No records to display.[/yellow]")
        return

    table = Table(
        title="Priced Records",
        box=box.ROUNDED,
        caption=f"First {len(records)} record(s) of the batch",
    )
    table.add_column("Timestamp", style="cyan", no_wrap=True)
    table.add_column("Product", style="magenta")
    table.add_column("Expiry", style="dim")
    table.add_column("Qty", justify="right")
    table.add_column("Unit Price", justify="right")
    table.add_column("Channel")
    table.add_column("Payment")
    table.add_column("Discount %", justify="right", style="yellow")
    table.add_column("Final Price", justify="right", style="bold green")

    for record in records:
        table.add_row(
            record.timestamp,
            record.product_name,
            record.expiry_date,
            str(record.quantity),
            f"{record.unit_price:,.2f}",
            record.channel,
            record.payment_method,
            f"{record.discount:.2f}",
            f"{record.final_price:,.2f}",
        )

    console.print(table)


def print_summary(summary: BatchSummary, console: Optional[Console] = None) -> None:
    """Render batch metrics as a two-column table."""
    console = console or Console()

    table = Table(title="Batch Summary", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right")

    table.add_row("Input", summary.get("input_path", "-"))
    table.add_row("Store", summary.get("store", "-"))
    table.add_row("Records priced", f"{summary.get('records', 0):,}")
    table.add_row("Rows skipped", f"{summary.get('skipped_rows', 0):,}")
    table.add_row("Discounted", f"{summary.get('discounted', 0):,}")
    table.add_row("Saved", f"{summary.get('saved', 0):,}")

    failed = summary.get("failed_saves", 0)
    table.add_row("Failed saves", f"[red]{failed:,}[/red]" if failed else "0")
    table.add_row("Gross total", f"{summary.get('gross_total', 0.0):,.2f}")
    table.add_row("Net total", f"{summary.get('net_total', 0.0):,.2f}")
    table.add_row("Duration (s)", f"{summary.get('duration_seconds', 0.0):.3f}")
    table.add_row("Throughput (records/s)", f"{summary.get('throughput_records_per_sec', 0.0):,.2f}")

    peak_rss = summary.get("peak_rss_bytes")
    table.add_row("Peak Memory (MB)", f"{peak_rss / (1024 * 1024):.2f}" if peak_rss else "N/A")
    cpu = summary.get("cpu_percent")
    table.add_row("CPU %", f"{cpu:.1f}" if cpu is not None else "N/A")

    console.print(table)


def print_rules(rules: Iterable[DiscountRule], console: Optional[Console] = None) -> None:
    console = console or Console()

    table = Table(title="Discount Rules", box=box.ROUNDED, caption="Evaluation order")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Rule", style="cyan")
    for position, rule in enumerate(rules, start=1):
        table.add_row(str(position), rule.name)

    console.print(table)
