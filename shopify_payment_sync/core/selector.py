"""Selection of the PayPal transaction to reconcile."""
from typing import Iterable, Optional

from .models import Transaction


def select_paypal_transaction(transactions: Iterable[Transaction]) -> Optional[Transaction]:
    """
    Return the first PayPal transaction that carries a settlement amount.

    Transactions are scanned in the order Shopify reports them, so the earliest
    qualifying entry wins. Entries for other gateways, and PayPal entries
    without amount or currency (e.g. refunds without settlement), are ignored.

    Args:
        transactions: Ordered Shopify transactions

    Returns:
        Optional[Transaction]: The transaction to reconcile, or None
    """
    for transaction in transactions:
        if transaction.is_paypal and transaction.has_settlement:
            return transaction
    return None
