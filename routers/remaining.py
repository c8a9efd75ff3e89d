from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import Field
from typing import List, Optional
from datetime import datetime
from database import get_db
from models.product import Product
from models.remaining import RemainingBalance
from services.money import to_amount
from services.payment_service import derive_payment
from routers.common import ApiModel, get_or_404

router = APIRouter(prefix="/api/remaining", tags=["Remaining"])

class RemainingCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=1, max_length=30)
    amount: float = Field(..., gt=0)
    advance_amount: float = Field(0, ge=0)
    note: str = ""

class RemainingUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    amount: Optional[float] = Field(None, gt=0)
    advance_amount: Optional[float] = Field(None, ge=0)
    note: Optional[str] = None

class RemainingResponse(ApiModel):
    id: int
    name: str
    phone: str
    amount: float
    advance_amount: float
    remaining_amount: float
    note: str
    created_at: datetime
    updated_at: datetime

class OutstandingOrder(ApiModel):
    id: int
    name: str
    phone: str
    owner_name: Optional[str]
    amount: float
    advance_amount: float
    remaining_amount: float
    date: datetime

def _recalculate(record: RemainingBalance):
    record.remaining_amount = derive_payment(record.amount, record.advance_amount).remaining_amount

@router.get("/", response_model=List[RemainingResponse])
def get_remaining_balances(db: Session = Depends(get_db)):
    return db.query(RemainingBalance).order_by(
        RemainingBalance.created_at.desc(), RemainingBalance.id.desc()
    ).all()

@router.get("/outstanding", response_model=List[OutstandingOrder])
def get_outstanding_orders(q: Optional[str] = None, db: Session = Depends(get_db)):
    """Orders that still have money owed, optionally filtered by customer name"""
    query = db.query(Product).filter(Product.remaining_amount > 0)
    if q and q.strip():
        query = query.filter(Product.name.ilike(f"%{q.strip()}%"))
    products = query.order_by(Product.date.desc()).all()
    return [
        OutstandingOrder(
            id=p.id,
            name=p.name,
            phone=p.phone,
            owner_name=p.owner_name,
            amount=to_amount(p.amount),
            advance_amount=to_amount(p.advance_amount),
            remaining_amount=to_amount(p.remaining_amount),
            date=p.date
        )
        for p in products
    ]

@router.get("/{record_id}", response_model=RemainingResponse)
def get_remaining_balance(record_id: int, db: Session = Depends(get_db)):
    return get_or_404(db, RemainingBalance, record_id, "Record")

@router.post("/", response_model=RemainingResponse)
def create_remaining_balance(request: RemainingCreate, db: Session = Depends(get_db)):
    record = RemainingBalance(**request.model_dump())
    _recalculate(record)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record

@router.put("/{record_id}", response_model=RemainingResponse)
def update_remaining_balance(record_id: int, request: RemainingUpdate, db: Session = Depends(get_db)):
    record = get_or_404(db, RemainingBalance, record_id, "Record")
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="Empty body")
    for field, value in changes.items():
        if value is not None:
            setattr(record, field, value)
    _recalculate(record)
    db.commit()
    db.refresh(record)
    return record

@router.delete("/{record_id}")
def delete_remaining_balance(record_id: int, db: Session = Depends(get_db)):
    record = get_or_404(db, RemainingBalance, record_id, "Record")
    db.delete(record)
    db.commit()
    return {"message": "Deleted successfully"}
