"""
Reconciliation entry point for Shopify split payments.

For one plentymarkets order:
1. Resolve the Shopify order id from the order properties
2. Validate configuration
3. Fetch the Shopify order
4. Gate on the shopify_payments + paypal split
5. Select the PayPal transaction
6. Gate on an existing payment for that transaction
7. Resolve the exchange rate
8. Build and commit the payment with its order relation

Every failure is caught here and returned as a ReconciliationOutcome.
"""
from typing import Any, Optional

import structlog

from shopify_payment_sync.config import SyncConfig
from shopify_payment_sync.exceptions import ConfigurationError, FetchError, WriteError
from shopify_payment_sync.monitoring.metrics import metrics

from .classifier import is_split_payment
from .duplicate_guard import has_matching_payment
from .exchange_rate import resolve_exchange_rate
from .models import OutcomeReason, OutcomeStatus, PlentyOrder, ReconciliationOutcome
from .payment_builder import PaymentCommitter, build_payment_draft
from .ports import ExistingPaymentsReader, OrderFetcher, WriteAccess
from .selector import select_paypal_transaction

logger = structlog.get_logger(__name__)


class PaymentReconciler:
    """
    Ensures a plentymarkets order has the PayPal part of a Shopify split payment.

    Runs synchronously and to completion for one order. Concurrent runs for the
    same order are not serialized here; callers that can fire the trigger twice
    at once must hold their own lock.
    """

    def __init__(
        self,
        order_fetcher: OrderFetcher,
        payments_reader: ExistingPaymentsReader,
        committer: Optional[PaymentCommitter] = None,
    ):
        """
        Initialize the reconciler.

        Args:
            order_fetcher: Shopify order source
            payments_reader: plentymarkets payment list source
            committer: Optional payment committer
        """
        self.order_fetcher = order_fetcher
        self.payments_reader = payments_reader
        self.committer = committer or PaymentCommitter()

    def handle(
        self, order: PlentyOrder, config: SyncConfig, access: WriteAccess
    ) -> ReconciliationOutcome:
        """
        Reconcile one plentymarkets order.

        Args:
            order: Order delivered by the trigger
            config: Configuration snapshot for this run
            access: Elevated write capability for payment creation

        Returns:
            ReconciliationOutcome: success, skipped-with-reason or failed-with-message
        """
        external_order_id = order.external_order_id
        log = logger.bind(order_id=order.id, external_order_id=external_order_id or None)

        if not external_order_id:
            log.warning("missing_external_order_id")
            outcome = self._outcome(
                order,
                OutcomeStatus.SKIPPED,
                OutcomeReason.MISSING_EXTERNAL_ORDER_ID,
                message="Order has no Shopify order id property",
            )
        else:
            try:
                outcome = self._reconcile(order, external_order_id, config, access, log)
            except ConfigurationError as e:
                log.error("config_missing", key=e.key, error=str(e))
                outcome = self._failed(order, OutcomeReason.CONFIGURATION, e)
            except FetchError as e:
                log.error("fetch_failed", error=str(e), status_code=e.status_code)
                outcome = self._failed(order, OutcomeReason.FETCH_FAILED, e)
            except WriteError as e:
                log.error("payment_write_failed", error=str(e), status_code=e.status_code)
                outcome = self._failed(order, OutcomeReason.WRITE_FAILED, e)
            except Exception as e:
                log.error("reconciliation_unexpected_error", error=str(e), exc_info=True)
                outcome = self._failed(order, OutcomeReason.UNEXPECTED, e)

        metrics.record_outcome(outcome.status.value, outcome.reason.value)
        return outcome

    def _reconcile(
        self,
        order: PlentyOrder,
        external_order_id: str,
        config: SyncConfig,
        access: WriteAccess,
        log: Any,
    ) -> ReconciliationOutcome:
        config.validate_complete()
        skip_log = log.info if config.enable_debug_log else log.debug

        shopify_order = self.order_fetcher.fetch_by_external_id(external_order_id)
        if shopify_order is None:
            log.info("shopify_order_not_found")
            return self._outcome(
                order,
                OutcomeStatus.SKIPPED,
                OutcomeReason.ORDER_NOT_FOUND,
                message="Shopify returned no order",
            )

        if not is_split_payment(shopify_order.gateway_names):
            skip_log(
                "no_paypal_split",
                gateway_names=", ".join(shopify_order.payment_gateway_names),
            )
            return self._outcome(
                order,
                OutcomeStatus.SKIPPED,
                OutcomeReason.NOT_SPLIT_PAYMENT,
                message="Order is not a Shopify Payments + PayPal split",
            )

        transaction = select_paypal_transaction(shopify_order.transactions)
        if transaction is None:
            log.warning("missing_paypal_amount")
            return self._outcome(
                order,
                OutcomeStatus.SKIPPED,
                OutcomeReason.NO_PAYPAL_TRANSACTION,
                message="No PayPal transaction with a settlement amount",
            )

        existing_payments = self.payments_reader.list_for_order(order.id)
        if has_matching_payment(
            existing_payments, transaction.transaction_id, config.paypal_mop_id
        ):
            skip_log("payment_already_exists", transaction_id=transaction.transaction_id)
            return self._outcome(
                order,
                OutcomeStatus.SKIPPED,
                OutcomeReason.ALREADY_RECONCILED,
                transaction_id=transaction.transaction_id,
                message="PayPal payment already booked for this transaction",
            )

        exchange_rate = resolve_exchange_rate(order.amounts, transaction.currency)
        draft = build_payment_draft(config.paypal_mop_id, transaction, exchange_rate)
        payment = self.committer.commit(draft, order.id, access)
        metrics.record_payment_created(draft.currency)

        return self._outcome(
            order,
            OutcomeStatus.SUCCESS,
            OutcomeReason.PAYMENT_CREATED,
            transaction_id=transaction.transaction_id,
            payment_id=payment.id,
            message="PayPal payment created",
        )

    @staticmethod
    def _outcome(
        order: PlentyOrder,
        status: OutcomeStatus,
        reason: OutcomeReason,
        **kwargs: Any,
    ) -> ReconciliationOutcome:
        return ReconciliationOutcome(
            status=status,
            reason=reason,
            order_id=order.id,
            external_order_id=order.external_order_id or None,
            **kwargs,
        )

    def _failed(
        self, order: PlentyOrder, reason: OutcomeReason, error: Exception
    ) -> ReconciliationOutcome:
        return self._outcome(order, OutcomeStatus.FAILED, reason, message=str(error))
