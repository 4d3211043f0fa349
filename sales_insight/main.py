from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from sales_insight.config import get_settings
from sales_insight.domain.errors import (
    IndexInvariantError,
    InsufficientHistoryError,
    SalesInsightError,
)
from sales_insight.reporter import print_insights, print_location, print_products
from sales_insight.session import SalesSession, open_session
from sales_insight.utils.logging import configure_logging

app = typer.Typer(help="Sales Insight: product sales catalog on an AVL index.")

MENU = """
=== SALES INSIGHT (AVL + Prediction) ===
1. Add New Product
2. Search Product by ID
3. Display All Products
4. Update Product Sales
5. Delete Product
6. View Insights
7. Analyze by Location
8. Predict Sales of Product
9. Save & Exit"""


def _data_file(ctx: typer.Context) -> Path:
    return ctx.obj or get_settings().data_file


def _fail(exc: SalesInsightError) -> typer.Exit:
    typer.echo(str(exc), err=True)
    return typer.Exit(code=1)


@app.callback()
def _configure(
    ctx: typer.Context,
    data_file: Optional[Path] = typer.Option(
        None,
        "--data-file",
        "-f",
        help="Data file to load and save (default from SALES_DATA_FILE).",
    ),
) -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    ctx.obj = data_file


@app.command()
def info(ctx: typer.Context) -> None:
    """
    Show effective configuration and index shape.
    """
    settings = get_settings()
    path = _data_file(ctx)
    session = SalesSession.load(path, profile_io=settings.profile_io)
    typer.echo(
        f"file={path} | env={settings.app_env} | log_level={settings.log_level} | "
        f"records={len(session.index)} height={session.index.height}"
    )


@app.command()
def add(
    ctx: typer.Context,
    product_id: int = typer.Argument(..., help="Unique product ID."),
    name: str = typer.Option(..., "--name", "-n"),
    weight: float = typer.Option(0.0, "--weight", "-w"),
    color: str = typer.Option("", "--color", "-c"),
    location: str = typer.Option(..., "--location", "-l"),
    units: int = typer.Option(0, "--units", "-u", help="Units sold."),
    price: float = typer.Option(..., "--price", "-p"),
) -> None:
    """
    Add a new product. Fails if the ID already exists.
    """
    try:
        with open_session(_data_file(ctx)) as session:
            session.add_product(
                id=product_id,
                name=name,
                weight=weight,
                color=color,
                location=location,
                units_sold=units,
                price=price,
            )
    except SalesInsightError as exc:
        raise _fail(exc)
    typer.echo(f"Added product {product_id}.")


@app.command()
def show(ctx: typer.Context, product_id: int = typer.Argument(...)) -> None:
    """
    Search for a product by ID.
    """
    with open_session(_data_file(ctx), autosave=False) as session:
        record = session.find(product_id)
    if record is None:
        typer.echo("Not found.", err=True)
        raise typer.Exit(code=1)
    print_products([record], title=None)


@app.command("list")
def list_products(ctx: typer.Context) -> None:
    """
    Display all products in ascending ID order.
    """
    with open_session(_data_file(ctx), autosave=False) as session:
        print_products(session.products())


@app.command("update-sales")
def update_sales(
    ctx: typer.Context,
    product_id: int = typer.Argument(...),
    units: int = typer.Option(..., "--units", "-u", help="New units sold."),
    past_sale: int = typer.Option(
        ..., "--past-sale", "-s", help="Past month sales value to store."
    ),
) -> None:
    """
    Overwrite units sold and push a value into the product's sales window.
    """
    try:
        with open_session(_data_file(ctx)) as session:
            session.update_sales(product_id, units, past_sale)
    except SalesInsightError as exc:
        raise _fail(exc)
    typer.echo("Updated.")


@app.command()
def delete(ctx: typer.Context, product_id: int = typer.Argument(...)) -> None:
    """
    Delete a product by ID.
    """
    try:
        with open_session(_data_file(ctx)) as session:
            session.remove_product(product_id)
    except SalesInsightError as exc:
        raise _fail(exc)
    typer.echo(f"Deleted product {product_id}.")


@app.command()
def insights(ctx: typer.Context) -> None:
    """
    Show total revenue, best seller and least seller.
    """
    with open_session(_data_file(ctx), autosave=False) as session:
        print_insights(session.insights())


@app.command()
def location(ctx: typer.Context, name: str = typer.Argument(..., help="Exact location.")) -> None:
    """
    Sum units and revenue for one location.
    """
    with open_session(_data_file(ctx), autosave=False) as session:
        print_location(session.location(name))


@app.command()
def predict(ctx: typer.Context, product_id: int = typer.Argument(...)) -> None:
    """
    Predict next-month sales from the product's past sales.
    """
    try:
        with open_session(_data_file(ctx), autosave=False) as session:
            predicted = session.predict(product_id)
    except InsufficientHistoryError:
        typer.echo("Not enough past data.")
        return
    except SalesInsightError as exc:
        raise _fail(exc)
    typer.echo(f"Predicted next-month sales: {predicted} units")


@app.command()
def verify(ctx: typer.Context) -> None:
    """
    Load the data file and check the index invariants.
    """
    session = SalesSession.load(_data_file(ctx))
    try:
        session.index.check_invariants()
    except IndexInvariantError as exc:
        raise _fail(exc)
    report = session.load_report
    typer.echo(
        f"OK: {report.loaded} records, height {session.index.height}, "
        f"{report.skipped} skipped, {report.duplicates} duplicate(s)"
    )


def _shell_add(session: SalesSession) -> None:
    product_id = typer.prompt("ID", type=int)
    name = typer.prompt("Name")
    weight = typer.prompt("Weight", type=float)
    color = typer.prompt("Color")
    loc = typer.prompt("Location")
    units = typer.prompt("Units Sold", type=int)
    price = typer.prompt("Price", type=float)
    session.add_product(
        id=product_id,
        name=name,
        weight=weight,
        color=color,
        location=loc,
        units_sold=units,
        price=price,
    )


def _shell_search(session: SalesSession) -> None:
    record = session.find(typer.prompt("Enter Product ID", type=int))
    if record is None:
        typer.echo("Not found.")
    else:
        print_products([record], title=None)


def _shell_update(session: SalesSession) -> None:
    record = session.index.get(typer.prompt("Enter Product ID", type=int))
    units = typer.prompt("Enter new units sold", type=int)
    past_sale = typer.prompt("Enter past month sales value to store", type=int)
    session.update_sales(record.id, units, past_sale)
    typer.echo("Updated.")


def _shell_delete(session: SalesSession) -> None:
    session.remove_product(typer.prompt("Enter ID to delete", type=int))


def _shell_predict(session: SalesSession) -> None:
    try:
        predicted = session.predict(typer.prompt("Enter Product ID", type=int))
    except InsufficientHistoryError:
        typer.echo("Not enough past data.")
        return
    typer.echo(f"Predicted next-month sales: {predicted} units")


@app.command()
def shell(ctx: typer.Context) -> None:
    """
    Interactive menu. Changes are written on "Save & Exit".
    """
    settings = get_settings()
    session = SalesSession.load(_data_file(ctx), profile_io=settings.profile_io)
    actions = {
        "1": _shell_add,
        "2": _shell_search,
        "3": lambda s: print_products(s.products()),
        "4": _shell_update,
        "5": _shell_delete,
        "6": lambda s: print_insights(s.insights()),
        "7": lambda s: print_location(s.location(typer.prompt("Enter Location"))),
        "8": _shell_predict,
    }

    while True:
        typer.echo(MENU)
        choice = typer.prompt("Enter choice").strip()
        if choice == "9":
            session.save()
            typer.echo("Saved. Exiting.")
            return
        action = actions.get(choice)
        if action is None:
            typer.echo("Invalid choice.")
            continue
        try:
            action(session)
        except SalesInsightError as exc:
            typer.echo(str(exc))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
