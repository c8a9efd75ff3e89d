from sqlalchemy.orm import Query, Session
from models.ledger import LedgerEntry, LedgerType
from services.money import to_amount, round_money
from typing import Dict, Iterable, Optional

def ledger_query(
    db: Session,
    person: Optional[str] = None,
    type: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> Query:
    """
    Ledger view filters: case-insensitive person substring, exact type and an
    inclusive [date_from, date_to] range on the YYYY-MM-DD date column.
    Result is newest first; same-day entries keep the most recently created first.
    """
    query = db.query(LedgerEntry)
    if type and type != "all":
        query = query.filter(LedgerEntry.type == LedgerType(type))
    needle = (person or "").strip()
    if needle:
        query = query.filter(LedgerEntry.person.ilike(f"%{needle}%"))
    if date_from:
        query = query.filter(LedgerEntry.date >= date_from)
    if date_to:
        query = query.filter(LedgerEntry.date <= date_to)
    return query.order_by(
        LedgerEntry.date.desc(),
        LedgerEntry.created_at.desc(),
        LedgerEntry.id.desc()
    )

def _type_value(entry: LedgerEntry) -> str:
    return entry.type.value if hasattr(entry.type, "value") else entry.type

def ledger_totals(entries: Iterable[LedgerEntry]) -> Dict[str, float]:
    income = expense = 0.0
    for entry in entries:
        if _type_value(entry) == LedgerType.INCOME.value:
            income += to_amount(entry.amount)
        else:
            expense += to_amount(entry.amount)
    return {
        "income": round_money(income),
        "expense": round_money(expense),
        "balance": round_money(income - expense),
    }
