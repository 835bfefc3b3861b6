"""Family Portfolio CLI: main entry point."""

import logging

import typer

from ..data.database import get_db
from .commands import contributions, members, prices, report, securities, settings, summary, transactions

app = typer.Typer(
    name="fp",
    help="Jointly-owned investment account tracker: who put in what, who owns what",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(members.app, name="members", help="Manage family members")
app.add_typer(contributions.app, name="contributions", help="Cash contributions to the pool")
app.add_typer(securities.app, name="securities", help="Tracked securities & ownership")
app.add_typer(transactions.app, name="tx", help="Record allocated buy/sell transactions")
app.add_typer(prices.app, name="prices", help="Refresh market prices")
app.add_typer(summary.app, name="summary", help="Portfolio, cash & activity summaries")
app.add_typer(report.app, name="report", help="Reports & CSV export")
app.add_typer(settings.app, name="config", help="Show or change settings")


@app.callback()
def startup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging and initialize the database on first run."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    get_db()


if __name__ == "__main__":
    app()
