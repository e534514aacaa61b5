"""
Tests for the command line interface.
"""
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture
from typer.testing import CliRunner

from shopify_payment_sync import cli
from shopify_payment_sync.config import Settings
from shopify_payment_sync.core.models import PlentyOrder
from shopify_payment_sync.core.ports import InMemoryOrderFetcher, InMemoryPaymentStore
from shopify_payment_sync.exceptions import FetchError

from .conftest import EXTERNAL_ORDER_ID

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_settings(mocker: MockerFixture, test_settings: Settings) -> Settings:
    mocker.patch.object(cli, "get_settings", return_value=test_settings)
    mocker.patch.object(cli, "setup_logging")
    return test_settings


class TestReconcileCommand:
    """shopify-payment-sync reconcile"""

    @pytest.mark.unit
    def test_reconciles_order(
        self,
        mocker: MockerFixture,
        plenty_order: PlentyOrder,
        order_fetcher: InMemoryOrderFetcher,
        payment_store: InMemoryPaymentStore,
    ) -> None:
        mocker.patch.object(payment_store, "get_order", create=True, return_value=plenty_order)
        mocker.patch.object(cli.PlentyClient, "from_settings", return_value=payment_store)
        mocker.patch.object(cli.ShopifyOrderClient, "from_config", return_value=order_fetcher)

        result = runner.invoke(cli.app, ["reconcile", "4711"])

        assert result.exit_code == 0
        assert "payment_created" in result.output
        assert len(payment_store.created) == 1

    @pytest.mark.unit
    def test_order_lookup_failure(self, mocker: MockerFixture) -> None:
        plenty = MagicMock()
        plenty.get_order.side_effect = FetchError("plentymarkets GET /rest/orders/1 failed")
        mocker.patch.object(cli.PlentyClient, "from_settings", return_value=plenty)

        result = runner.invoke(cli.app, ["reconcile", "1"])

        assert result.exit_code == 1
        assert "Error" in result.output


class TestFetchOrderCommand:
    """shopify-payment-sync fetch-order"""

    @pytest.mark.unit
    def test_prints_order(
        self, mocker: MockerFixture, order_fetcher: InMemoryOrderFetcher
    ) -> None:
        mocker.patch.object(cli.ShopifyOrderClient, "from_config", return_value=order_fetcher)

        result = runner.invoke(cli.app, ["fetch-order", EXTERNAL_ORDER_ID])

        assert result.exit_code == 0
        assert "shopify_payments" in result.output

    @pytest.mark.unit
    def test_not_found(self, mocker: MockerFixture) -> None:
        mocker.patch.object(
            cli.ShopifyOrderClient, "from_config", return_value=InMemoryOrderFetcher()
        )

        result = runner.invoke(cli.app, ["fetch-order", "42"])

        assert result.exit_code == 1
        assert "Not found" in result.output
