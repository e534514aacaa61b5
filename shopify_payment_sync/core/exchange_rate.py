"""Exchange rate resolution for new payments."""
from decimal import Decimal
from typing import Iterable

from .models import OrderAmount

DEFAULT_EXCHANGE_RATE = Decimal("1.0")


def resolve_exchange_rate(amounts: Iterable[OrderAmount], payment_currency: str) -> Decimal:
    """
    Derive the exchange rate to store on a payment.

    A payment in a currency the order already records never needs conversion,
    so any same-currency entry yields 1.0 even when a stored rate appears
    earlier in the list. Otherwise the first positive stored rate, in list
    order, is used. Falls back to 1.0.

    Args:
        amounts: Currency amounts recorded on the plentymarkets order
        payment_currency: Currency of the payment being created

    Returns:
        Decimal: Exchange rate, always positive
    """
    amounts = list(amounts)

    if any(amount.currency == payment_currency for amount in amounts):
        return DEFAULT_EXCHANGE_RATE

    for amount in amounts:
        rate = amount.exchange_rate
        if rate is not None and rate > 0:
            return rate

    return DEFAULT_EXCHANGE_RATE
