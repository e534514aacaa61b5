"""
Pytest configuration and fixtures.
"""
from decimal import Decimal
from typing import Any

import pytest

from shopify_payment_sync.config import Settings, SyncConfig
from shopify_payment_sync.core.models import (
    OrderAmount,
    PlentyOrder,
    Property,
    ShopifyOrder,
    Transaction,
)
from shopify_payment_sync.core.ports import InMemoryOrderFetcher, InMemoryPaymentStore

PAYPAL_MOP_ID = 5
EXTERNAL_ORDER_ID = "5012345678901"


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast tests without I/O")
    config.addinivalue_line("markers", "integration: tests crossing the HTTP boundary")


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        shop_name="lanius-test",
        api_version="2025-01",
        access_token="shpat_test_token",
        plenty_base_url="https://plenty.example.test",
        plenty_api_token="plenty_test_token",
        paypal_mop_id=PAYPAL_MOP_ID,
        app_env="test",
        log_level="DEBUG",
        log_json=False,
    )


@pytest.fixture
def sync_config(test_settings: Settings) -> SyncConfig:
    return test_settings.sync_config()


@pytest.fixture
def paypal_transaction() -> Transaction:
    return Transaction(
        transaction_id="txn_1",
        gateway="paypal",
        amount=Decimal("42.50"),
        currency="EUR",
        processed_at="2025-03-01T10:15:00Z",
        kind="SALE",
        status="SUCCESS",
    )


@pytest.fixture
def split_order(paypal_transaction: Transaction) -> ShopifyOrder:
    """Shopify order paid with Shopify Payments and PayPal."""
    return ShopifyOrder(
        id=f"gid://shopify/Order/{EXTERNAL_ORDER_ID}",
        name="#1001",
        payment_gateway_names=["shopify_payments", "paypal"],
        transactions=(
            Transaction(
                transaction_id="txn_card",
                gateway="shopify_payments",
                amount=Decimal("57.50"),
                currency="EUR",
            ),
            paypal_transaction,
        ),
    )


@pytest.fixture
def plenty_order() -> PlentyOrder:
    return PlentyOrder(
        id=4711,
        properties=(Property(type_id=7, value=EXTERNAL_ORDER_ID),),
        amounts=(OrderAmount(currency="EUR", exchange_rate=Decimal("1")),),
    )


@pytest.fixture
def order_fetcher(split_order: ShopifyOrder) -> InMemoryOrderFetcher:
    return InMemoryOrderFetcher({EXTERNAL_ORDER_ID: split_order})


@pytest.fixture
def payment_store() -> InMemoryPaymentStore:
    return InMemoryPaymentStore()
