"""
Unit tests for the duplicate guard.
"""
import pytest

from shopify_payment_sync.core.duplicate_guard import has_matching_payment
from shopify_payment_sync.core.models import ExistingPayment, Property

MOP_ID = 5


def payment(mop_id: int | None, *properties: tuple[int, str]) -> ExistingPayment:
    return ExistingPayment(
        mop_id=mop_id,
        properties=tuple(Property(type_id=t, value=v) for t, v in properties),
    )


class TestHasMatchingPayment:
    """Test suite for has_matching_payment."""

    @pytest.mark.unit
    def test_no_payments(self) -> None:
        assert has_matching_payment([], "txn_1", MOP_ID) is False

    @pytest.mark.unit
    def test_matching_payment(self) -> None:
        payments = [payment(MOP_ID, (22, "note"), (1, "txn_1"))]

        assert has_matching_payment(payments, "txn_1", MOP_ID) is True

    @pytest.mark.unit
    def test_id_differing_by_one_character(self) -> None:
        payments = [payment(MOP_ID, (1, "txn_1"))]

        assert has_matching_payment(payments, "txn_2", MOP_ID) is False
        assert has_matching_payment(payments, "txn_1 ", MOP_ID) is False

    @pytest.mark.unit
    def test_other_method_of_payment_ignored(self) -> None:
        payments = [payment(6000, (1, "txn_1"))]

        assert has_matching_payment(payments, "txn_1", MOP_ID) is False

    @pytest.mark.unit
    def test_transaction_id_in_other_property_type_ignored(self) -> None:
        payments = [payment(MOP_ID, (22, "txn_1"), (23, "txn_1"))]

        assert has_matching_payment(payments, "txn_1", MOP_ID) is False

    @pytest.mark.unit
    def test_payment_without_mop_id(self) -> None:
        payments = [payment(None, (1, "txn_1"))]

        assert has_matching_payment(payments, "txn_1", MOP_ID) is False

    @pytest.mark.unit
    def test_raw_mappings_are_normalized_before_comparison(self) -> None:
        """Payments read as raw mappings compare the same as structured ones."""
        raw = [
            {"mopId": "5", "properties": [{"typeId": "1", "value": "txn_1"}]},
        ]
        payments = [ExistingPayment.from_raw(p) for p in raw]

        assert has_matching_payment(payments, "txn_1", MOP_ID) is True

    @pytest.mark.unit
    def test_any_payment_in_list_can_match(self) -> None:
        payments = [
            payment(MOP_ID, (1, "txn_0")),
            payment(6000, (1, "txn_1")),
            payment(MOP_ID, (1, "txn_1")),
        ]

        assert has_matching_payment(payments, "txn_1", MOP_ID) is True
