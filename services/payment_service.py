from typing import Any, Iterable, NamedTuple, Optional
from models.product import PaymentStatus
from services.money import to_amount, round_money, sum_amounts

class PaymentSummary(NamedTuple):
    total_paid: float
    remaining_amount: float
    payment_status: PaymentStatus

def _payment_value(payment: Any) -> Any:
    """Partial payments arrive as ORM rows, dicts or bare numbers"""
    if isinstance(payment, dict):
        return payment.get("amount")
    if hasattr(payment, "amount"):
        return payment.amount
    return payment

def derive_payment(
    amount: Any,
    advance_amount: Any = 0,
    partial_payments: Optional[Iterable[Any]] = None
) -> PaymentSummary:
    """
    Derive remaining balance and payment status of an order.

    remaining = max(amount - advance - sum(partials), 0); overpayment never
    yields a negative remainder. Status is paid when nothing remains,
    partial when something remains and something was paid, else unpaid.
    Malformed amounts count as 0 (see services.money).
    """
    total = to_amount(amount)
    total_paid = round_money(
        to_amount(advance_amount) + sum_amounts(_payment_value(p) for p in (partial_payments or []))
    )
    remaining = round_money(max(total - total_paid, 0.0))

    if remaining == 0:
        status = PaymentStatus.PAID
    elif total_paid > 0:
        status = PaymentStatus.PARTIAL
    else:
        status = PaymentStatus.UNPAID

    return PaymentSummary(total_paid=total_paid, remaining_amount=remaining, payment_status=status)
