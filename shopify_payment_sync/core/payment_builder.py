"""
Payment record builder and committer.

The committer creates the payment first and only then links it to the order.
There is no rollback: if the relation fails after the payment was created the
payment is left unlinked and the failure is logged for manual follow-up.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import structlog

from shopify_payment_sync.exceptions import ConfigurationError, WriteError

from .exchange_rate import DEFAULT_EXCHANGE_RATE
from .models import (
    NOTE_PROPERTY_TYPE,
    PAYMENT_NOTE,
    SOURCE_TAG,
    SOURCE_TAG_PROPERTY_TYPE,
    TRANSACTION_ID_PROPERTY_TYPE,
    CommittedPayment,
    PaymentDraft,
    Property,
    Transaction,
)
from .ports import WriteAccess

logger = structlog.get_logger(__name__)


def build_payment_draft(
    mop_id: int,
    transaction: Transaction,
    exchange_rate: Decimal = DEFAULT_EXCHANGE_RATE,
    now: Optional[datetime] = None,
) -> PaymentDraft:
    """
    Assemble the plentymarkets payment for a Shopify PayPal transaction.

    Args:
        mop_id: PayPal method of payment id
        transaction: Selected PayPal transaction (must carry amount and currency)
        exchange_rate: Rate resolved from the order amounts
        now: Fallback receive time when Shopify has no processed timestamp

    Returns:
        PaymentDraft: Booked, approved, non-system payment

    Raises:
        ConfigurationError: If mop_id is not a positive integer
        ValueError: If the transaction has no settlement amount
    """
    if mop_id <= 0:
        raise ConfigurationError(
            "PayPal method of payment id must be a positive integer",
            key="paypal_mop_id",
        )
    if not transaction.has_settlement:
        raise ValueError("Transaction has no amount or currency to book")

    received_at = transaction.processed_at or now or datetime.now(timezone.utc)

    return PaymentDraft(
        mop_id=mop_id,
        amount=transaction.amount,
        currency=transaction.currency,
        exchange_rate=exchange_rate,
        received_at=received_at,
        properties=(
            Property(type_id=TRANSACTION_ID_PROPERTY_TYPE, value=transaction.transaction_id),
            Property(type_id=NOTE_PROPERTY_TYPE, value=PAYMENT_NOTE),
            Property(type_id=SOURCE_TAG_PROPERTY_TYPE, value=SOURCE_TAG),
        ),
    )


class PaymentCommitter:
    """Persists a payment draft and its primary order relation."""

    def commit(self, draft: PaymentDraft, order_id: int, access: WriteAccess) -> CommittedPayment:
        """
        Create the payment, then link it to the order as primary relation.

        Args:
            draft: Payment to create
            order_id: plentymarkets order id
            access: Elevated write capability

        Returns:
            CommittedPayment: The created payment

        Raises:
            WriteError: If payment creation or linking fails
        """
        payment = access.payments.create(draft)

        try:
            access.relations.link(payment.id, order_id, primary=True)
        except WriteError as e:
            logger.error(
                "payment_relation_missing",
                order_id=order_id,
                payment_id=payment.id,
                transaction_id=draft.transaction_id,
                error=str(e),
            )
            raise

        logger.info(
            "paypal_payment_created",
            order_id=order_id,
            payment_id=payment.id,
            transaction_id=draft.transaction_id,
            amount=str(draft.amount),
            currency=draft.currency,
            granted_for=access.granted_for,
        )
        return payment
