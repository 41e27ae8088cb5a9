import typer
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from piggyback.budgets.slugs import generate_unique_slug
from piggyback.categorization.categories import category_display_name
from piggyback.domain.enums import BudgetView
from piggyback.domain.models import Transaction
from piggyback.logging_setup import configure_logging
from piggyback.parsers.factory import ParserFactory
from piggyback.services.budget_view_service import BudgetViewService
from piggyback.services.categorization_service import CategorizationService
from piggyback.services.snapshot import Snapshot, load_snapshot
from piggyback.sharing import income_proportional_split, transaction_share_percentage

app = typer.Typer(
    name="piggyback",
    help="Categorize bank transactions and split shared budgets",
    add_completion=False,
)

console = Console()

class State:
    verbose: bool = False
    categorization: Optional[CategorizationService] = None
    budget_views: Optional[BudgetViewService] = None


state = State()

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    )
):
    """
    Piggyback - categorize transactions and split shared budgets.
    """
    configure_logging("INFO" if verbose else None)

    if not ParserFactory.get_available_sources():
        ParserFactory.load_parsers_from_config()

    if state.categorization is None:
        state.categorization = CategorizationService()
        state.budget_views = BudgetViewService()

    state.verbose = verbose


def _load_inputs(filepath: Path, source: str, snapshot_path: Optional[Path]):
    snapshot = load_snapshot(snapshot_path) if snapshot_path else Snapshot()

    # Up API pages only carry category ids, the share config is keyed by name
    options = {}
    if source == "up-api" and snapshot.category_names:
        options["category_names"] = snapshot.category_names
    parser = ParserFactory.create_parser(source, **options)
    transactions = parser.parse(str(filepath))
    return transactions, snapshot


def _format_cents(amount_cents: int) -> str:
    color = "green" if amount_cents >= 0 else "red"
    sign = "+" if amount_cents >= 0 else "-"
    return f"[{color}]{sign}${abs(amount_cents) / 100:,.2f}[/{color}]"


def _fail(e: Exception):
    console.print(f"[bold red]Error:[/bold red] {e}")
    if state.verbose:
        console.print_exception()
    raise typer.Exit(code=1)


FILE_ARGUMENT = typer.Argument(
    ...,
    help="Path to the transactions file",
    exists=True,
    file_okay=True,
    dir_okay=False,
)
SNAPSHOT_OPTION = typer.Option(
    None,
    "--snapshot", "-s",
    help="JSON file with overrides, merchant rules and share settings",
    exists=True,
    dir_okay=False,
)


@app.command(name="categorize")
def categorize(
    filepath: Path = FILE_ARGUMENT,
    source: str = typer.Option(
        "up-api",
        "--source", "-f",
        help="Transaction source (up-api, csv-export)"
    ),
    snapshot_path: Optional[Path] = SNAPSHOT_OPTION,
):
    """
    Resolve the category of every transaction in a file.

    Examples:
        piggyback categorize page.json
        piggyback categorize page.json --snapshot choices.json
    """
    try:
        transactions, snapshot = _load_inputs(filepath, source, snapshot_path)
        result = state.categorization.categorize_batch(
            transactions,
            overrides=snapshot.overrides,
            merchant_rules=snapshot.merchant_rules,
        )

        table = Table(title=f"Categorized transactions ({result.total})")
        table.add_column("Description", style="white", max_width=40)
        table.add_column("Amount", justify="right")
        table.add_column("Category", style="magenta")
        table.add_column("Parent", style="dim")
        table.add_column("Decided by", style="cyan")

        for txn, assignment_source in zip(result.transactions, result.sources):
            table.add_row(
                txn.description[:40],
                _format_cents(txn.amount_cents),
                category_display_name(txn.category_id),
                txn.parent_category_id or "",
                assignment_source.value,
            )

        console.print(table)
        console.print(Panel.fit(str(result), border_style="cyan"))

    except Exception as e:
        _fail(e)


@app.command(name="shares")
def shares(
    filepath: Path = FILE_ARGUMENT,
    source: str = typer.Option(
        "csv-export",
        "--source", "-f",
        help="Transaction source (up-api, csv-export)"
    ),
    snapshot_path: Optional[Path] = SNAPSHOT_OPTION,
    view: BudgetView = typer.Option(
        BudgetView.MY,
        "--view",
        help="Budget view: my or our",
        case_sensitive=False,
    ),
    details: bool = typer.Option(
        False,
        "--details",
        help="List each transaction with its share percentage",
    ),
):
    """
    Show spending per category in My Budget or Our Budget.

    Examples:
        piggyback shares export.csv --snapshot choices.json
        piggyback shares export.csv --snapshot choices.json --view our
    """
    try:
        transactions, snapshot = _load_inputs(filepath, source, snapshot_path)
        config = snapshot.share_config

        breakdown = state.budget_views.category_breakdown(transactions, config, view)
        title = "My Budget" if view is BudgetView.MY else "Our Budget"

        if not breakdown:
            console.print(Panel(
                "[yellow]No spending found for this view[/yellow]",
                title=title,
                border_style="yellow"
            ))
            return

        category_table = Table(title=f"{title} by category", show_header=True, padding=(0, 2))
        category_table.add_column("Category", style="cyan", no_wrap=True)
        category_table.add_column("Spent", justify="right", style="red")
        category_table.add_column("Transactions", justify="right", style="dim")
        for row in breakdown:
            category_table.add_row(
                row.category_name,
                f"${row.total_dollars:,.2f}",
                str(row.transaction_count),
            )
        console.print(category_table)

        if details:
            _print_share_details(
                state.budget_views.visible_transactions(transactions, config, view), snapshot
            )

        summary = state.budget_views.summary(transactions, config)
        console.print(Panel(
            f"[bold]Shared:[/bold]   ${summary.total_shared / 100:>10,.2f}\n"
            f"  You:      ${summary.user_share_of_shared / 100:>10,.2f}\n"
            f"  Partner:  ${summary.partner_share_of_shared / 100:>10,.2f}\n"
            f"[bold]Personal:[/bold] ${summary.total_personal / 100:>10,.2f}",
            title="[bold]Shared vs personal[/bold]",
            border_style="cyan",
            padding=(1, 2)
        ))

    except Exception as e:
        _fail(e)


def _print_share_details(transactions: List[Transaction], snapshot: Snapshot):
    txn_table = Table(show_header=True, padding=(0, 1))
    txn_table.add_column("Description", style="white", max_width=40)
    txn_table.add_column("Category", style="dim")
    txn_table.add_column("Amount", justify="right")
    txn_table.add_column("Your share", justify="right")

    for txn in transactions:
        txn_table.add_row(
            txn.description[:40],
            txn.category_name or "Uncategorized",
            _format_cents(txn.amount_cents),
            f"{transaction_share_percentage(txn, snapshot.share_config)}%",
        )
    console.print(txn_table)


@app.command(name="split")
def split(
    user_income: int = typer.Argument(..., help="Your income in cents", min=0),
    partner_income: int = typer.Argument(..., help="Partner's income in cents", min=0),
):
    """
    Suggest a share percentage proportional to income.

    Examples:
        piggyback split 600000 400000
    """
    percentage = income_proportional_split(user_income, partner_income)
    console.print(
        f"[bold]You:[/bold] {percentage}%   [bold]Partner:[/bold] {100 - percentage}%"
    )


@app.command(name="slug")
def slug(
    name: str = typer.Argument(..., help="Budget name"),
    existing: Optional[List[str]] = typer.Option(
        None,
        "--existing", "-e",
        help="Slug already in use (repeatable)",
    ),
):
    """
    Generate a URL slug for a budget name.

    Examples:
        piggyback slug "Food & Dining" -e food-and-dining
    """
    console.print(generate_unique_slug(name, existing or []))


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
