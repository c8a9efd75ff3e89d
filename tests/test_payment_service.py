"""
Payment status derivation tests
"""
import itertools

import pytest

from models.product import PartialPayment, PaymentStatus
from services.payment_service import derive_payment


class TestDerivePaymentScenarios:
    """Reference scenarios"""

    def test_advance_only_is_partial(self) -> None:
        summary = derive_payment(1000, 300, [])
        assert summary.remaining_amount == 700
        assert summary.payment_status == PaymentStatus.PARTIAL

    def test_full_advance_is_paid(self) -> None:
        summary = derive_payment(1000, 1000, [])
        assert summary.remaining_amount == 0
        assert summary.payment_status == PaymentStatus.PAID

    def test_partial_payment_settles(self) -> None:
        summary = derive_payment(500, 0, [{"amount": 500}])
        assert summary.remaining_amount == 0
        assert summary.payment_status == PaymentStatus.PAID

    def test_nothing_paid_is_unpaid(self) -> None:
        summary = derive_payment(400, 0, [])
        assert summary.remaining_amount == 400
        assert summary.total_paid == 0
        assert summary.payment_status == PaymentStatus.UNPAID

    def test_overpayment_is_clamped(self) -> None:
        summary = derive_payment(100, 80, [{"amount": 50}])
        assert summary.remaining_amount == 0
        assert summary.total_paid == 130
        assert summary.payment_status == PaymentStatus.PAID

    def test_zero_amount_order_is_paid(self) -> None:
        assert derive_payment(0, 0, []).payment_status == PaymentStatus.PAID


class TestDerivePaymentInputs:
    """Accepted partial payment shapes and malformed input"""

    def test_accepts_orm_rows_dicts_and_numbers(self) -> None:
        payments = [PartialPayment(amount=100), {"amount": 50}, 25]
        summary = derive_payment(300, 0, payments)
        assert summary.total_paid == 175
        assert summary.remaining_amount == 125

    def test_malformed_values_count_as_zero(self) -> None:
        summary = derive_payment("abc", None, [{"amount": "x"}, {"nope": 1}])
        assert summary.remaining_amount == 0
        assert summary.total_paid == 0
        assert summary.payment_status == PaymentStatus.PAID

    def test_string_amounts(self) -> None:
        summary = derive_payment("1000", "250", [{"amount": "250"}])
        assert summary.remaining_amount == 500
        assert summary.payment_status == PaymentStatus.PARTIAL

    def test_none_partials(self) -> None:
        assert derive_payment(10, 5, None).remaining_amount == 5


class TestDerivePaymentProperties:
    """Invariants over a grid of non-negative inputs"""

    AMOUNTS = [0, 1, 99.99, 500, 1000]
    PAYMENTS = [0, 0.01, 250, 1000]

    @pytest.mark.parametrize(
        "amount, advance, partial",
        list(itertools.product(AMOUNTS, PAYMENTS, PAYMENTS)),
    )
    def test_remaining_formula_and_status(self, amount, advance, partial) -> None:
        summary = derive_payment(amount, advance, [{"amount": partial}])
        expected = round(max(amount - advance - partial, 0), 2)

        assert summary.remaining_amount == expected
        assert summary.remaining_amount >= 0
        assert (summary.payment_status == PaymentStatus.PAID) == (summary.remaining_amount == 0)
        if summary.payment_status == PaymentStatus.UNPAID:
            assert advance + partial == 0
