from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from pydantic import Field, validator
from typing import List, Optional
from datetime import datetime
from config import settings
from database import get_db
from models.ledger import LedgerEntry, LedgerType
from models.log import LogCategory
from services.ledger_service import ledger_query, ledger_totals
from utils.dates import is_iso_date
from utils.logger import log_info
from routers.common import ApiModel, TotalsResponse, get_or_404

router = APIRouter(prefix="/api/ledger", tags=["Ledger"])

def _check_date(v):
    if v is not None and not is_iso_date(v):
        raise ValueError("date must be YYYY-MM-DD")
    return v

class LedgerCreate(ApiModel):
    type: LedgerType
    amount: float = Field(..., ge=0)
    person: str = Field("", max_length=200)
    category: str = Field("", max_length=200)
    description: str = ""
    date: str

    @validator("date")
    def validate_date(cls, v):
        return _check_date(v)

class LedgerUpdate(ApiModel):
    type: Optional[LedgerType] = None
    amount: Optional[float] = Field(None, ge=0)
    person: Optional[str] = Field(None, max_length=200)
    category: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    date: Optional[str] = None

    @validator("date")
    def validate_date(cls, v):
        return _check_date(v)

class LedgerResponse(ApiModel):
    id: int
    type: LedgerType
    amount: float
    person: str
    category: str
    description: str
    date: str
    created_at: datetime
    updated_at: datetime

def _filtered(db: Session, type, person, date_from, date_to):
    for value in (date_from, date_to):
        if value and not is_iso_date(value):
            raise HTTPException(status_code=400, detail="from/to must be YYYY-MM-DD")
    return ledger_query(db, person=person, type=type, date_from=date_from, date_to=date_to)

@router.get("/", response_model=List[LedgerResponse])
def get_ledger(
    type: Optional[LedgerType] = None,
    person: Optional[str] = None,
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    limit: int = Query(settings.ledger_default_limit, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """Ledger entries newest first, filtered by type, person and date range"""
    return _filtered(db, type.value if type else None, person, date_from, date_to).limit(limit).all()

@router.get("/summary", response_model=TotalsResponse)
def get_ledger_summary(
    type: Optional[LedgerType] = None,
    person: Optional[str] = None,
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    db: Session = Depends(get_db)
):
    entries = _filtered(db, type.value if type else None, person, date_from, date_to).all()
    return TotalsResponse(**ledger_totals(entries))

@router.post("/", response_model=LedgerResponse, status_code=201)
def create_ledger_entry(request: LedgerCreate, db: Session = Depends(get_db)):
    entry = LedgerEntry(
        type=request.type,
        amount=request.amount,
        person=request.person.strip(),
        category=request.category.strip(),
        description=request.description,
        date=request.date
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    log_info(
        f"Ledger {entry.type.value} of {entry.amount} recorded",
        category=LogCategory.LEDGER,
        entity_type="ledger",
        entity_id=entry.id
    )
    return entry

@router.put("/{entry_id}", response_model=LedgerResponse)
def update_ledger_entry(entry_id: int, request: LedgerUpdate, db: Session = Depends(get_db)):
    entry = get_or_404(db, LedgerEntry, entry_id, "Ledger entry")
    for field, value in request.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(entry, field, value)
    db.commit()
    db.refresh(entry)
    return entry

@router.delete("/{entry_id}")
def delete_ledger_entry(entry_id: int, db: Session = Depends(get_db)):
    entry = get_or_404(db, LedgerEntry, entry_id, "Ledger entry")
    db.delete(entry)
    db.commit()
    return {"message": "Deleted"}
