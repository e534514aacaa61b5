"""
Unit tests for the split-payment classifier.
"""
import pytest

from shopify_payment_sync.core.classifier import is_split_payment


class TestIsSplitPayment:
    """Test suite for is_split_payment."""

    @pytest.mark.unit
    def test_platform_and_paypal(self) -> None:
        assert is_split_payment({"shopify_payments", "paypal"}) is True

    @pytest.mark.unit
    def test_case_insensitive(self) -> None:
        assert is_split_payment(["Shopify_Payments", "PayPal"]) is True

    @pytest.mark.unit
    def test_extra_gateways_do_not_matter(self) -> None:
        assert is_split_payment(["gift_card", "shopify_payments", "paypal"]) is True

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "gateway_names",
        [
            [],
            ["shopify_payments"],
            ["paypal"],
            ["manual", "gift_card"],
            ["shopify_payments", "paypal_express"],
            ["shopify payments", "paypal"],
        ],
    )
    def test_missing_either_tag(self, gateway_names: list[str]) -> None:
        """Only exact tags count; variants such as paypal_express do not."""
        assert is_split_payment(gateway_names) is False
