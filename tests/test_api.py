"""
Tests for the HTTP API.
"""
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture

from shopify_payment_sync.api import routes
from shopify_payment_sync.api.main import app
from shopify_payment_sync.api.routes import get_order_fetcher, get_plenty_client
from shopify_payment_sync.config import Settings, get_settings
from shopify_payment_sync.core.ports import InMemoryOrderFetcher, InMemoryPaymentStore
from shopify_payment_sync.exceptions import FetchError

from .conftest import EXTERNAL_ORDER_ID, PAYPAL_MOP_ID

ORDER_EVENT = {
    "order": {
        "id": 4711,
        "properties": [{"typeId": 7, "value": EXTERNAL_ORDER_ID}],
        "amounts": [{"currency": "EUR", "exchangeRate": 1}],
    }
}


@pytest.fixture
def client(
    test_settings: Settings,
    order_fetcher: InMemoryOrderFetcher,
    payment_store: InMemoryPaymentStore,
) -> Iterator[TestClient]:
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_order_fetcher] = lambda: order_fetcher
    app.dependency_overrides[get_plenty_client] = lambda: payment_store
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


class TestProcedureEndpoint:
    """POST /procedures/shopify-split-paypal"""

    @pytest.mark.integration
    def test_creates_payment(
        self, client: TestClient, payment_store: InMemoryPaymentStore
    ) -> None:
        response = client.post("/procedures/shopify-split-paypal", json=ORDER_EVENT)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["reason"] == "payment_created"
        assert body["transaction_id"] == "txn_1"
        assert "X-Request-ID" in response.headers

        [draft] = payment_store.created
        assert draft.mop_id == PAYPAL_MOP_ID
        assert (body["payment_id"], 4711, True) in payment_store.relations

    @pytest.mark.integration
    def test_repeated_event_is_skipped(
        self, client: TestClient, payment_store: InMemoryPaymentStore
    ) -> None:
        client.post("/procedures/shopify-split-paypal", json=ORDER_EVENT)
        response = client.post("/procedures/shopify-split-paypal", json=ORDER_EVENT)

        assert response.json()["reason"] == "already_reconciled"
        assert len(payment_store.created) == 1

    @pytest.mark.integration
    def test_missing_mop_id_is_reported(
        self,
        client: TestClient,
        test_settings: Settings,
        payment_store: InMemoryPaymentStore,
    ) -> None:
        unconfigured = test_settings.model_copy(update={"paypal_mop_id": 0})
        app.dependency_overrides[get_settings] = lambda: unconfigured

        response = client.post("/procedures/shopify-split-paypal", json=ORDER_EVENT)

        body = response.json()
        assert body["status"] == "failed"
        assert body["reason"] == "configuration"
        assert payment_store.list_calls == []

    @pytest.mark.integration
    def test_invalid_body(self, client: TestClient) -> None:
        response = client.post("/procedures/shopify-split-paypal", json={"order": {}})

        assert response.status_code == 422


class TestDiagnosticEndpoint:
    """GET /shopify-payment-fix/test-order"""

    @pytest.mark.integration
    def test_requires_external_order_id(self, client: TestClient) -> None:
        response = client.get("/shopify-payment-fix/test-order", params={"externalOrderId": " "})

        assert response.status_code == 400
        assert response.json()["ok"] is False

    @pytest.mark.integration
    def test_returns_order(self, client: TestClient, order_fetcher: InMemoryOrderFetcher) -> None:
        response = client.get(
            "/shopify-payment-fix/test-order", params={"externalOrderId": EXTERNAL_ORDER_ID}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["order"]["payment_gateway_names"] == ["shopify_payments", "paypal"]
        assert order_fetcher.calls == [EXTERNAL_ORDER_ID]

    @pytest.mark.integration
    def test_not_found(self, client: TestClient, mocker: MockerFixture) -> None:
        logger = mocker.patch.object(routes, "logger")

        response = client.get("/shopify-payment-fix/test-order", params={"externalOrderId": "999"})

        assert response.status_code == 404
        assert response.json()["ok"] is False
        logger.error.assert_called_once_with("diagnostic_order_not_found", external_order_id="999")

    @pytest.mark.integration
    def test_fetch_failure(self, client: TestClient, order_fetcher: InMemoryOrderFetcher) -> None:
        order_fetcher.error = FetchError("Shopify responded with status 503")

        response = client.get(
            "/shopify-payment-fix/test-order", params={"externalOrderId": EXTERNAL_ORDER_ID}
        )

        assert response.status_code == 500
        assert "503" in response.json()["message"]

    @pytest.mark.integration
    def test_never_writes(
        self, client: TestClient, payment_store: InMemoryPaymentStore
    ) -> None:
        client.get("/shopify-payment-fix/test-order", params={"externalOrderId": EXTERNAL_ORDER_ID})

        assert payment_store.created == []
        assert payment_store.list_calls == []


class TestMonitoringEndpoints:
    """Health and metrics."""

    @pytest.mark.integration
    def test_health_configured(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert all(body["checks"].values())

    @pytest.mark.integration
    def test_health_degraded(self, client: TestClient, test_settings: Settings) -> None:
        app.dependency_overrides[get_settings] = lambda: test_settings.model_copy(
            update={"access_token": ""}
        )

        body = client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["checks"]["shopify_configured"] is False

    @pytest.mark.integration
    def test_metrics(self, client: TestClient) -> None:
        client.post("/procedures/shopify-split-paypal", json=ORDER_EVENT)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "payment_sync_outcomes_total" in response.text
