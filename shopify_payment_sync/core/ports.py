"""
Collaborator contracts for the payment sync.

The reconciliation core talks to Shopify and plentymarkets only through these
protocols. HTTP implementations live in ``shopify_payment_sync.integrations``;
the in-memory implementations below back the tests and local dry runs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol

from shopify_payment_sync.exceptions import FetchError, WriteError

from .models import CommittedPayment, ExistingPayment, PaymentDraft, ShopifyOrder


class OrderFetcher(Protocol):
    """Resolves a Shopify order from the external id stored in plentymarkets."""

    def fetch_by_external_id(self, external_order_id: str) -> Optional[ShopifyOrder]:
        """Return the normalized order, None if Shopify has no such order."""
        ...


class ExistingPaymentsReader(Protocol):
    """Lists payments attached to a plentymarkets order."""

    def list_for_order(self, order_id: int) -> list[ExistingPayment]:
        """Return the current payments, normalized to ExistingPayment."""
        ...


class PaymentWriter(Protocol):
    """Creates payments in plentymarkets."""

    def create(self, draft: PaymentDraft) -> CommittedPayment:
        """Persist the draft and return the created payment."""
        ...


class OrderRelationWriter(Protocol):
    """Links payments to plentymarkets orders."""

    def link(self, payment_id: int, order_id: int, primary: bool) -> None:
        """Create the payment/order relation."""
        ...


@dataclass(frozen=True)
class WriteAccess:
    """
    Elevated write capability for the payment and relation stores.

    Holding a WriteAccess is what allows the committer to write; callers grant
    it explicitly per trigger instead of switching a global mode.
    """

    payments: PaymentWriter
    relations: OrderRelationWriter
    granted_for: str = "shopify_split_paypal"


# ============================================================================
# IN-MEMORY IMPLEMENTATIONS (for testing and local development)
# ============================================================================


class InMemoryOrderFetcher:
    """Order fetcher backed by a dict of external id -> order."""

    def __init__(self, orders: Optional[dict[str, ShopifyOrder]] = None):
        self._orders: dict[str, ShopifyOrder] = dict(orders or {})
        self.calls: list[str] = []
        self.error: Optional[FetchError] = None

    def fetch_by_external_id(self, external_order_id: str) -> Optional[ShopifyOrder]:
        self.calls.append(external_order_id)
        if self.error is not None:
            raise self.error
        return self._orders.get(external_order_id)


class InMemoryPaymentStore:
    """
    Payment store implementing reader, payment writer and relation writer.

    Created payments become visible to ``list_for_order`` once linked, the
    same way they do in plentymarkets.
    """

    def __init__(self, start_id: int = 1000):
        self._next_id = start_id
        self._payments: dict[int, ExistingPayment] = {}
        self._drafts: dict[int, PaymentDraft] = {}
        self.relations: list[tuple[int, int, bool]] = []
        self.list_calls: list[int] = []
        self.events: list[str] = []
        self.fail_create: Optional[WriteError] = None
        self.fail_link: Optional[WriteError] = None

    def seed(self, order_id: int, payments: Iterable[Any]) -> None:
        """Attach pre-existing payments (any raw shape) to an order."""
        for raw in payments:
            payment = ExistingPayment.from_raw(raw)
            payment_id = payment.id if payment.id is not None else self._allocate_id()
            self._payments[payment_id] = payment.model_copy(update={"id": payment_id})
            self.relations.append((payment_id, order_id, False))

    @property
    def created(self) -> list[PaymentDraft]:
        return list(self._drafts.values())

    def _allocate_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def list_for_order(self, order_id: int) -> list[ExistingPayment]:
        self.list_calls.append(order_id)
        linked = [pid for pid, oid, _ in self.relations if oid == order_id]
        return [self._payments[pid] for pid in linked if pid in self._payments]

    def create(self, draft: PaymentDraft) -> CommittedPayment:
        if self.fail_create is not None:
            raise self.fail_create
        payment_id = self._allocate_id()
        self._drafts[payment_id] = draft
        self._payments[payment_id] = ExistingPayment(
            id=payment_id, mop_id=draft.mop_id, properties=draft.properties
        )
        self.events.append(f"create:{payment_id}")
        return CommittedPayment(id=payment_id)

    def link(self, payment_id: int, order_id: int, primary: bool) -> None:
        if self.fail_link is not None:
            raise self.fail_link
        if payment_id not in self._payments:
            raise WriteError(f"Payment {payment_id} does not exist")
        self.relations.append((payment_id, order_id, primary))
        self.events.append(f"link:{payment_id}:{order_id}")

    def write_access(self) -> WriteAccess:
        return WriteAccess(payments=self, relations=self)
