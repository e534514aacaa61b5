"""CLI for the Shopify payment sync.

Runs the reconciliation for single orders, fetches Shopify orders for
inspection and starts the HTTP API.
"""

import json

import typer
from rich.console import Console
from rich.table import Table

from shopify_payment_sync.config import get_settings
from shopify_payment_sync.core.models import OutcomeStatus
from shopify_payment_sync.core.reconciliation import PaymentReconciler
from shopify_payment_sync.exceptions import PaymentSyncError
from shopify_payment_sync.integrations.plenty_client import PlentyClient
from shopify_payment_sync.integrations.shopify_client import ShopifyOrderClient
from shopify_payment_sync.monitoring.logging import setup_logging

app = typer.Typer(
    name="shopify-payment-sync",
    help="Add the PayPal part of Shopify split payments to plentymarkets orders",
    add_completion=False,
)

console = Console()

STATUS_STYLES = {
    OutcomeStatus.SUCCESS: "green",
    OutcomeStatus.SKIPPED: "yellow",
    OutcomeStatus.FAILED: "red",
}


@app.command()
def reconcile(
    order_id: int = typer.Argument(..., help="plentymarkets order id"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Load a plentymarkets order and create its missing PayPal payment."""
    settings = get_settings()
    setup_logging(settings, verbose=verbose)

    try:
        plenty = PlentyClient.from_settings(settings)
        order = plenty.get_order(order_id)
    except PaymentSyncError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    reconciler = PaymentReconciler(
        order_fetcher=ShopifyOrderClient.from_config(
            settings.sync_config(), timeout=settings.http_timeout
        ),
        payments_reader=plenty,
    )
    outcome = reconciler.handle(order, settings.sync_config(), plenty.write_access())

    table = Table(title=f"Order {order_id}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    style = STATUS_STYLES[outcome.status]
    table.add_row("Status", f"[{style}]{outcome.status.value}[/{style}]")
    table.add_row("Reason", outcome.reason.value)
    table.add_row("Shopify order", outcome.external_order_id or "-")
    table.add_row("Transaction", outcome.transaction_id or "-")
    table.add_row("Payment", str(outcome.payment_id) if outcome.payment_id else "-")
    table.add_row("Message", outcome.message)
    console.print(table)

    if outcome.status is OutcomeStatus.FAILED:
        raise typer.Exit(1)


@app.command("fetch-order")
def fetch_order(
    external_order_id: str = typer.Argument(..., help="Shopify order id or GID"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Fetch a Shopify order and print its normalized form."""
    settings = get_settings()
    setup_logging(settings, verbose=verbose)

    client = ShopifyOrderClient.from_config(settings.sync_config(), timeout=settings.http_timeout)
    try:
        order = client.fetch_by_external_id(external_order_id)
    except PaymentSyncError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if order is None:
        console.print(f"[yellow]Not found:[/yellow] {external_order_id}")
        raise typer.Exit(1)

    console.print_json(json.dumps(order.model_dump(mode="json")))


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind host"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port"),
) -> None:
    """Start the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "shopify_payment_sync.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
