"""
Duplicate guard for PayPal payments.

This check is the only thing preventing a second payment for the same Shopify
transaction: there is no unique constraint on the plentymarkets side. It must
therefore run against the payment list as read at call time.
"""
from typing import Iterable

from .models import TRANSACTION_ID_PROPERTY_TYPE, ExistingPayment


def has_matching_payment(
    existing_payments: Iterable[ExistingPayment],
    transaction_id: str,
    paypal_mop_id: int,
) -> bool:
    """
    Check whether a PayPal payment for this transaction is already booked.

    A payment matches when its method of payment is the configured PayPal id
    and it carries a transaction-id property equal to ``transaction_id``.
    Amount and currency are not compared.

    Args:
        existing_payments: Payments currently attached to the order
        transaction_id: Shopify transaction id to look for (exact match)
        paypal_mop_id: Configured PayPal method of payment id

    Returns:
        bool: True if the order is already reconciled for this transaction
    """
    for payment in existing_payments:
        if payment.mop_id != paypal_mop_id:
            continue
        if transaction_id in payment.property_values(TRANSACTION_ID_PROPERTY_TYPE):
            return True
    return False
