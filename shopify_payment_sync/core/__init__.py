"""Core payment reconciliation logic."""
from .classifier import is_split_payment
from .duplicate_guard import has_matching_payment
from .exchange_rate import resolve_exchange_rate
from .payment_builder import PaymentCommitter, build_payment_draft
from .ports import WriteAccess
from .reconciliation import PaymentReconciler
from .selector import select_paypal_transaction

__all__ = [
    "PaymentCommitter",
    "PaymentReconciler",
    "WriteAccess",
    "build_payment_draft",
    "has_matching_payment",
    "is_split_payment",
    "resolve_exchange_rate",
    "select_paypal_transaction",
]
