"""
Synthetic data generator for Sales Insight.

Writes a deterministic pseudo-random product catalog in the flat-file format
read by `sales-insight`, going through the AVL index so the output is a file
the tool itself would have saved.
"""

from __future__ import annotations

import random
import sys
import time
from pathlib import Path
from typing import List

import typer

from sales_insight.domain.models import ProductRecord, SalesWindow
from sales_insight.index.avl import ProductIndex
from sales_insight.storage.flat_file import save_index

app = typer.Typer(help="Generate a synthetic sales data file.")

NAMES = ["Mug", "Lamp", "Chair", "Kettle", "Towel", "Basket", "Candle", "Vase", "Clock", "Rug"]
COLORS = ["red", "blue", "green", "black", "white", "grey"]
LOCATIONS = ["North", "South", "East", "West", "Online"]


def _generate_records(rows: int, seed: int) -> List[ProductRecord]:
    rng = random.Random(seed)
    ids = rng.sample(range(1, rows * 10 + 1), rows)

    records: List[ProductRecord] = []
    for product_id in ids:
        history = [rng.randint(0, 500) for _ in range(rng.randint(0, SalesWindow.CAPACITY))]
        records.append(
            ProductRecord(
                id=product_id,
                name=f"{rng.choice(NAMES)}-{product_id}",
                weight=round(rng.uniform(0.1, 25.0), 2),
                color=rng.choice(COLORS),
                location=rng.choice(LOCATIONS),
                units_sold=rng.randint(0, 1_000),
                price=round(rng.uniform(1, 500), 2),
                past_sales=SalesWindow(values=history),
            )
        )
    return records


def _write_data_file(path: Path, rows: int, seed: int) -> int:
    index = ProductIndex()
    for record in _generate_records(rows, seed):
        index.insert(record)
    return save_index(index, path)


@app.command()
def main(
    rows: int = typer.Option(
        1_000,
        "--rows",
        "-r",
        help="Number of products to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path = typer.Option(
        Path("sales_data.txt"),
        "--output",
        "-o",
        help="Data file to write (overwritten).",
    ),
) -> None:
    """
    Generate a synthetic product catalog.
    """
    start = time.perf_counter()
    typer.echo(f"Generating {rows:,} products -> {output} (seed={seed})")
    written = _write_data_file(output, rows=rows, seed=seed)
    duration = time.perf_counter() - start
    typer.echo(f"Wrote {written:,} records in {duration:.2f}s")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
