"""
Dashboard feed: manual transactions, product mirrors and products that
have no mirror yet, merged into one list with income/expense totals.
"""
from models.product import Product, PaymentStatus
from models.transaction import Transaction, TransactionType, TransactionStatus
from services.money import to_amount, round_money
from services.transaction_sync import category_label, UNCATEGORIZED
from utils.dates import parse_date, to_iso_date, period_bounds
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

@dataclass
class FeedEntry:
    id: int
    source: str  # "transaction" or "product"
    name: str
    buy: str
    owner: Optional[str]
    type: str
    amount: float
    advance_amount: float
    remaining_amount: float
    effective_amount: float
    status: str
    is_paid: bool
    date: Optional[str]
    related_product_id: Optional[int] = None

    def to_dict(self) -> Dict:
        return asdict(self)

@dataclass
class FeedSummary:
    total_income: float = 0.0
    total_expense: float = 0.0
    net_profit: float = 0.0
    total_products: int = 0
    records: int = 0

def effective_amount(amount: float, advance_amount: float, status: str) -> float:
    """Income recognized so far: the full amount once done, else only the advance"""
    return amount if status == TransactionStatus.DONE.value else advance_amount

def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else value

def _entry(id, source, name, buy, owner, type_, amount, advance, remaining, status, entry_date, related_product_id):
    amount = to_amount(amount)
    advance = to_amount(advance)
    return FeedEntry(
        id=id,
        source=source,
        name=name or "Unnamed",
        buy=buy or UNCATEGORIZED,
        owner=owner,
        type=type_,
        amount=amount,
        advance_amount=advance,
        remaining_amount=to_amount(remaining),
        effective_amount=effective_amount(amount, advance, status),
        status=status,
        is_paid=status == TransactionStatus.DONE.value,
        date=entry_date,
        related_product_id=related_product_id,
    )

def _product_state(product: Product):
    """Live status and remaining balance of an order"""
    paid = product.payment_status == PaymentStatus.PAID
    status = TransactionStatus.DONE.value if paid else TransactionStatus.PENDING.value
    remaining = 0.0 if paid else product.remaining_amount
    return status, remaining

def from_transaction(transaction: Transaction, product: Optional[Product]) -> FeedEntry:
    """Feed entry for a stored transaction; a linked product's live state wins over the mirror"""
    if product is not None:
        status, remaining = _product_state(product)
        return _entry(
            transaction.id, "transaction", product.name, category_label(product), product.owner_name,
            TransactionType.IN.value, product.amount, product.advance_amount, remaining, status,
            to_iso_date(product.date), product.id,
        )

    remaining = to_amount(transaction.remaining_amount)
    status = _enum_value(transaction.status) or (
        TransactionStatus.PENDING.value if remaining > 0 else TransactionStatus.DONE.value
    )
    return _entry(
        transaction.id, "transaction", transaction.name, transaction.buy, transaction.owner,
        _enum_value(transaction.type) or TransactionType.IN.value, transaction.amount,
        transaction.advance_amount, remaining, status, transaction.date, transaction.related_product_id,
    )

def from_product(product: Product) -> FeedEntry:
    """Pseudo-transaction for an order whose mirror is missing"""
    status, remaining = _product_state(product)
    return _entry(
        product.id, "product", product.name, category_label(product), product.owner_name,
        TransactionType.IN.value, product.amount, product.advance_amount, remaining, status,
        to_iso_date(product.date), product.id,
    )

def transaction_entries(transactions: Iterable[Transaction], products: Iterable[Product]) -> List[FeedEntry]:
    """Stored transactions only, each overlaid with its product's live state"""
    by_id = {p.id: p for p in products}
    return [from_transaction(t, by_id.get(t.related_product_id)) for t in transactions]

def _sort_key(entry: FeedEntry) -> datetime:
    return parse_date(entry.date) or datetime.min

def build_feed(transactions: Iterable[Transaction], products: Iterable[Product]) -> List[FeedEntry]:
    """
    Merge transactions and unmirrored products, newest first.
    Entries sharing a date keep their input order (transactions, then products).
    """
    products = list(products)
    by_id = {p.id: p for p in products}
    entries = []
    mirrored = set()
    for transaction in transactions:
        product = None
        if transaction.related_product_id is not None:
            product = by_id.get(transaction.related_product_id)
            mirrored.add(transaction.related_product_id)
        entries.append(from_transaction(transaction, product))

    entries.extend(from_product(p) for p in products if p.id not in mirrored)
    return sorted(entries, key=_sort_key, reverse=True)

def summarize_feed(entries: Iterable[FeedEntry]) -> FeedSummary:
    summary = FeedSummary()
    labels = set()
    for entry in entries:
        summary.records += 1
        if entry.type == TransactionType.IN.value:
            summary.total_income += entry.effective_amount
        elif entry.type == TransactionType.OUT.value:
            summary.total_expense += entry.effective_amount
        if entry.buy and entry.buy not in ("None", UNCATEGORIZED):
            labels.add(entry.buy)
    summary.total_income = round_money(summary.total_income)
    summary.total_expense = round_money(summary.total_expense)
    summary.net_profit = round_money(summary.total_income - summary.total_expense)
    summary.total_products = len(labels)
    return summary

SORTERS = {
    "latest": (lambda e: _sort_key(e), True),
    "oldest": (lambda e: _sort_key(e), False),
    "highest": (lambda e: e.amount, True),
    "lowest": (lambda e: e.amount, False),
    "name": (lambda e: (e.name or "").lower(), False),
}

def filter_entries(
    entries: Iterable[FeedEntry],
    q: Optional[str] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    person: Optional[str] = None,
    min_amount: Optional[float] = None,
    period: Optional[str] = None,
    sort_by: str = "latest",
    today: Optional[date] = None,
) -> List[FeedEntry]:
    """Transactions-page filters. "all" or None disables a filter."""
    needle = (q or "").strip().lower()
    bounds = period_bounds(period, today) if period and period != "all" else None

    def keep(entry: FeedEntry) -> bool:
        if needle and needle not in (entry.name or "").lower():
            return False
        if type and type != "all" and entry.type != type:
            return False
        if category and category != "all":
            labels = [label.strip() for label in (entry.buy or "").split(",")]
            if category not in labels:
                return False
        if person and person != "all" and entry.owner != person:
            return False
        if min_amount is not None and entry.amount < min_amount:
            return False
        if bounds:
            entry_date = parse_date(entry.date)
            if entry_date is None or not bounds[0] <= entry_date.date() <= bounds[1]:
                return False
        return True

    key, reverse = SORTERS.get(sort_by, SORTERS["latest"])
    return sorted((e for e in entries if keep(e)), key=key, reverse=reverse)

def cash_totals(entries: Iterable[FeedEntry]) -> Dict[str, float]:
    """Gross in/out over a filtered list"""
    income = expense = 0.0
    for entry in entries:
        if entry.type == TransactionType.IN.value:
            income += entry.amount
        elif entry.type == TransactionType.OUT.value:
            expense += entry.amount
    return {
        "income": round_money(income),
        "expense": round_money(expense),
        "balance": round_money(income - expense),
    }
