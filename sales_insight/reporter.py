from __future__ import annotations

from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from sales_insight.analytics import InsightsSummary, LocationSummary
from sales_insight.domain.models import ProductRecord


def _product_table(title: Optional[str] = None) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Wght", justify="right")
    table.add_column("Color")
    table.add_column("Location", style="magenta")
    table.add_column("Sold", justify="right", style="green")
    table.add_column("Price", justify="right", style="yellow")
    table.add_column("Past Sales", style="dim")
    return table


def _add_product_row(table: Table, record: ProductRecord) -> None:
    window = ", ".join(str(value) for value in record.past_sales.values) or "-"
    table.add_row(
        str(record.id),
        record.name,
        f"{record.weight:.2f}",
        record.color,
        record.location,
        str(record.units_sold),
        f"${record.price:.2f}",
        window,
    )


def print_products(
    records: Iterable[ProductRecord],
    console: Optional[Console] = None,
    title: Optional[str] = "Products",
) -> None:
    """
    Render records as a rich table, in the order given.
    """
    console = console or Console()
    table = _product_table(title)
    rows = 0
    for record in records:
        _add_product_row(table, record)
        rows += 1

    if not rows:
        console.print("[yellow]No products to display.[/yellow]")
        return
    console.print(table)


def print_insights(summary: InsightsSummary, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(f"Total Revenue: {summary.total_revenue:.2f}")
    if summary.best_seller is not None:
        best = summary.best_seller
        console.print(f"Best Seller: {best.name} ({best.units_sold} units)", markup=False)
    if summary.least_seller is not None:
        least = summary.least_seller
        console.print(f"Least Seller: {least.name} ({least.units_sold} units)", markup=False)


def print_location(summary: LocationSummary, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(
        f"Location: {summary.location} | Units: {summary.units} | Revenue: {summary.revenue:.2f}",
        markup=False,
    )


__all__ = ["print_insights", "print_location", "print_products"]
