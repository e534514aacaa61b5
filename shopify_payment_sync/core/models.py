"""
Domain models for the Shopify / plentymarkets payment sync.

Shopify orders and plentymarkets payments arrive in loosely shaped JSON.
Everything is normalized into these models at the integration boundary so
the decision logic only ever sees one representation.
"""
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum, IntEnum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# plentymarkets property type ids
TRANSACTION_ID_PROPERTY_TYPE = 1
EXTERNAL_ORDER_ID_PROPERTY_TYPE = 7
NOTE_PROPERTY_TYPE = 22
SOURCE_TAG_PROPERTY_TYPE = 23

PAYMENT_NOTE = "Shopify split payment fix"
SOURCE_TAG = "shopify_paypal_split"

SHOPIFY_ORDER_GID_PREFIX = "gid://shopify/Order/"


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a JSON number or numeric string to Decimal, None if unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


class PaymentStatus(IntEnum):
    """plentymarkets payment status codes used by the sync."""

    APPROVED = 2


class PaymentTransactionType(IntEnum):
    """plentymarkets payment transaction types."""

    PROVISIONAL = 1
    BOOKED = 2


class Property(BaseModel):
    """Generic typeId/value extension field on plentymarkets orders and payments."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type_id: int = Field(default=0, alias="typeId")
    value: str = ""

    @field_validator("type_id", mode="before")
    @classmethod
    def coerce_type_id(cls, v: Any) -> int:
        if v is None or v == "":
            return 0
        return int(v)

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> str:
        return "" if v is None else str(v)

    def to_payload(self) -> dict[str, Any]:
        return {"typeId": self.type_id, "value": self.value}


class Transaction(BaseModel):
    """A single Shopify order transaction."""

    model_config = ConfigDict(frozen=True)

    transaction_id: str = ""
    gateway: str = ""
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    processed_at: Optional[datetime] = None
    kind: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_paypal(self) -> bool:
        """Gateway name contains "paypal" (covers variants like paypal_express)."""
        return "paypal" in self.gateway.lower()

    @property
    def has_settlement(self) -> bool:
        return self.amount is not None and self.currency is not None

    @classmethod
    def from_graphql(cls, node: Mapping[str, Any]) -> "Transaction":
        """
        Build a transaction from a Shopify GraphQL transaction node.

        Amount and currency are taken from the shop-currency money set.
        """
        shop_money = (node.get("amountSet") or {}).get("shopMoney") or {}
        return cls(
            transaction_id=str(node.get("id") or ""),
            gateway=str(node.get("gateway") or ""),
            amount=to_decimal(shop_money.get("amount")),
            currency=shop_money.get("currencyCode") or None,
            processed_at=node.get("processedAt") or None,
            kind=node.get("kind"),
            status=node.get("status"),
        )


class ShopifyOrder(BaseModel):
    """Normalized Shopify order as seen by the sync."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    payment_gateway_names: tuple[str, ...] = ()
    transactions: tuple[Transaction, ...] = ()

    @field_validator("payment_gateway_names", mode="before")
    @classmethod
    def casefold_gateway_names(cls, v: Any) -> tuple[str, ...]:
        return tuple(str(name).lower() for name in (v or ()))

    @property
    def gateway_names(self) -> frozenset[str]:
        return frozenset(self.payment_gateway_names)

    @classmethod
    def from_graphql(cls, order: Mapping[str, Any]) -> "ShopifyOrder":
        """
        Build an order from the ``data.order`` object of a GraphQL response.

        Transactions may be a plain list or a connection with ``edges``/``node``.
        """
        raw_transactions = order.get("transactions") or []
        if isinstance(raw_transactions, Mapping):
            raw_transactions = [
                edge.get("node") or {} for edge in raw_transactions.get("edges") or []
            ]

        return cls(
            id=str(order.get("id") or ""),
            name=order.get("name"),
            payment_gateway_names=order.get("paymentGatewayNames") or (),
            transactions=tuple(Transaction.from_graphql(t) for t in raw_transactions),
        )


class OrderAmount(BaseModel):
    """Currency amount block recorded on a plentymarkets order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    currency: str
    exchange_rate: Optional[Decimal] = Field(default=None, alias="exchangeRate")


class PlentyOrder(BaseModel):
    """The plentymarkets order a reconciliation run is triggered for."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    properties: tuple[Property, ...] = ()
    amounts: tuple[OrderAmount, ...] = ()

    @field_validator("amounts", mode="before")
    @classmethod
    def drop_amounts_without_currency(cls, v: Any) -> Any:
        if v is None:
            return ()
        return tuple(
            a for a in v
            if not isinstance(a, Mapping) or a.get("currency") is not None
        )

    @field_validator("properties", mode="before")
    @classmethod
    def default_properties(cls, v: Any) -> Any:
        return () if v is None else v

    @property
    def external_order_id(self) -> str:
        """Shopify order id stored on the order, empty when absent."""
        for prop in self.properties:
            if prop.type_id == EXTERNAL_ORDER_ID_PROPERTY_TYPE:
                return prop.value.strip()
        return ""


class ExistingPayment(BaseModel):
    """A payment already attached to a plentymarkets order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, from_attributes=True)

    id: Optional[int] = None
    mop_id: Optional[int] = Field(default=None, alias="mopId")
    properties: tuple[Property, ...] = ()

    @field_validator("mop_id", mode="before")
    @classmethod
    def coerce_mop_id(cls, v: Any) -> Optional[int]:
        if v is None or v == "":
            return None
        return int(v)

    @field_validator("properties", mode="before")
    @classmethod
    def normalize_properties(cls, v: Any) -> Any:
        if v is None:
            return ()
        return tuple(
            p if isinstance(p, (Property, Mapping)) else Property.model_validate(
                p, from_attributes=True
            )
            for p in v
        )

    @classmethod
    def from_raw(cls, raw: Any) -> "ExistingPayment":
        """
        Normalize a payment given as a model, a mapping or an attribute object.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, Mapping):
            return cls.model_validate(dict(raw))
        return cls.model_validate(raw, from_attributes=True)

    def property_values(self, type_id: int) -> list[str]:
        return [p.value for p in self.properties if p.type_id == type_id]


class PaymentDraft(BaseModel):
    """Payment to be created in plentymarkets for a Shopify PayPal transaction."""

    model_config = ConfigDict(frozen=True)

    mop_id: int
    transaction_type: PaymentTransactionType = PaymentTransactionType.BOOKED
    status: PaymentStatus = PaymentStatus.APPROVED
    amount: Decimal
    currency: str
    exchange_rate: Decimal = Decimal("1.0")
    received_at: datetime
    is_system_payment: bool = False
    properties: tuple[Property, ...] = ()

    @property
    def transaction_id(self) -> str:
        for prop in self.properties:
            if prop.type_id == TRANSACTION_ID_PROPERTY_TYPE:
                return prop.value
        return ""

    def to_payload(self) -> dict[str, Any]:
        """Render the draft as a plentymarkets REST payment body."""
        return {
            "mopId": self.mop_id,
            "type": "credit",
            "transactionType": int(self.transaction_type),
            "status": int(self.status),
            "amount": float(self.amount),
            "currency": self.currency,
            "exchangeRate": float(self.exchange_rate),
            "isSystemPayment": self.is_system_payment,
            "receivedAt": self.received_at.isoformat(),
            "properties": [p.to_payload() for p in self.properties],
            "regenerateHash": True,
        }


class CommittedPayment(BaseModel):
    """Payment as returned by plentymarkets after creation."""

    model_config = ConfigDict(frozen=True)

    id: int


class OutcomeStatus(str, Enum):
    """Overall result of one reconciliation attempt."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class OutcomeReason(str, Enum):
    """Why a reconciliation attempt ended the way it did."""

    PAYMENT_CREATED = "payment_created"
    MISSING_EXTERNAL_ORDER_ID = "missing_external_order_id"
    ORDER_NOT_FOUND = "order_not_found"
    NOT_SPLIT_PAYMENT = "not_split_payment"
    NO_PAYPAL_TRANSACTION = "no_paypal_transaction"
    ALREADY_RECONCILED = "already_reconciled"
    CONFIGURATION = "configuration"
    FETCH_FAILED = "fetch_failed"
    WRITE_FAILED = "write_failed"
    UNEXPECTED = "unexpected"


class ReconciliationOutcome(BaseModel):
    """Structured result returned to the trigger source instead of raw exceptions."""

    status: OutcomeStatus
    reason: OutcomeReason
    order_id: Optional[int] = None
    external_order_id: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_id: Optional[int] = None
    message: str = ""
