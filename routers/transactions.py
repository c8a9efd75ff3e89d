from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import Field, validator
from typing import List, Optional
from datetime import datetime
from database import get_db
from models.product import Product
from models.transaction import Transaction, TransactionType, TransactionStatus
from services.feed_service import transaction_entries, filter_entries, cash_totals
from services.money import to_amount, round_money
from services.transaction_sync import TransactionSyncService
from utils.dates import parse_date
from routers.common import ApiModel, TotalsResponse, get_or_404
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])

class TransactionCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    buy: Optional[str] = Field(None, max_length=500)
    owner: Optional[str] = Field(None, max_length=100)
    amount: float = Field(..., ge=0)
    advance_amount: float = Field(0, ge=0)
    remaining_amount: float = Field(0, ge=0)
    type: TransactionType
    date: str

    @validator("date")
    def validate_date(cls, v):
        if parse_date(v) is None:
            raise ValueError("date must be an ISO-8601 date or date-time")
        return v

class TransactionUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    buy: Optional[str] = Field(None, max_length=500)
    owner: Optional[str] = Field(None, max_length=100)
    amount: Optional[float] = Field(None, ge=0)
    advance_amount: Optional[float] = Field(None, ge=0)
    remaining_amount: Optional[float] = Field(None, ge=0)
    type: Optional[TransactionType] = None
    date: Optional[str] = None

    @validator("date")
    def validate_date(cls, v):
        if v is not None and parse_date(v) is None:
            raise ValueError("date must be an ISO-8601 date or date-time")
        return v

class TransactionResponse(ApiModel):
    id: int
    name: str
    buy: Optional[str]
    owner: Optional[str]
    amount: float
    advance_amount: float
    remaining_amount: float
    type: TransactionType
    status: TransactionStatus
    date: str
    related_product_id: Optional[int]
    created_at: datetime
    updated_at: datetime

class TransactionEntry(ApiModel):
    id: int
    source: str
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

class TransactionListResponse(ApiModel):
    transactions: List[TransactionEntry]
    totals: TotalsResponse

class ReconcileResponse(ApiModel):
    products: int
    created: int
    updated: int
    duplicates_removed: int
    orphans_removed: int

def _manual_status(transaction: Transaction) -> TransactionStatus:
    """Manual entries are done once nothing remains outstanding"""
    if to_amount(transaction.remaining_amount) > 0:
        return TransactionStatus.PENDING
    return TransactionStatus.DONE

@router.get("/", response_model=TransactionListResponse)
def get_transactions(
    q: Optional[str] = None,
    type: Optional[str] = None,
    category: Optional[str] = None,
    person: Optional[str] = None,
    min_amount: Optional[float] = None,
    period: Optional[str] = None,
    sort_by: str = "latest",
    db: Session = Depends(get_db)
):
    """Stored transactions with product mirrors showing the order's live state"""
    transactions = db.query(Transaction).order_by(Transaction.id).all()
    products = db.query(Product).all()
    entries = filter_entries(
        transaction_entries(transactions, products),
        q=q,
        type=type,
        category=category,
        person=person,
        min_amount=min_amount,
        period=period,
        sort_by=sort_by
    )
    return TransactionListResponse(
        transactions=[TransactionEntry(**e.to_dict()) for e in entries],
        totals=TotalsResponse(**cash_totals(entries))
    )

@router.post("/", response_model=TransactionResponse)
def create_transaction(request: TransactionCreate, db: Session = Depends(get_db)):
    """Record a manual cash movement not tied to any order"""
    transaction = Transaction(
        name=" ".join(request.name.split()),
        buy=request.buy,
        owner=request.owner,
        amount=round_money(request.amount),
        advance_amount=round_money(request.advance_amount),
        remaining_amount=round_money(min(request.remaining_amount, request.amount)),
        type=request.type,
        date=request.date
    )
    transaction.status = _manual_status(transaction)
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    return transaction

@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile_transactions(db: Session = Depends(get_db)):
    """Rebuild every product mirror from the products table"""
    report = TransactionSyncService.reconcile(db)
    logger.info(f"Reconciled transaction mirrors: {report}")
    return ReconcileResponse(**report.__dict__)

@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(transaction_id: int, request: TransactionUpdate, db: Session = Depends(get_db)):
    transaction = get_or_404(db, Transaction, transaction_id, "Transaction")
    if transaction.related_product_id is not None:
        raise HTTPException(
            status_code=409,
            detail="Transaction mirrors a product order; edit the product instead"
        )

    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="Empty body")
    for field, value in changes.items():
        if value is not None:
            setattr(transaction, field, value)
    transaction.remaining_amount = round_money(min(to_amount(transaction.remaining_amount), to_amount(transaction.amount)))
    transaction.status = _manual_status(transaction)

    db.commit()
    db.refresh(transaction)
    return transaction

@router.delete("/")
def delete_product_transactions(related_product_id: int, db: Session = Depends(get_db)):
    """Delete every transaction linked to a product"""
    deleted = TransactionSyncService.delete_mirrors(db, related_product_id)
    return {"success": True, "deletedCount": deleted}

@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: int, db: Session = Depends(get_db)):
    transaction = get_or_404(db, Transaction, transaction_id, "Transaction")
    db.delete(transaction)
    db.commit()
    return {"success": True, "deletedCount": 1}
