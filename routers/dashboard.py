from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from database import get_db
from models.product import Product
from models.transaction import Transaction
from services.feed_service import build_feed, summarize_feed
from routers.transactions import TransactionEntry
from routers.common import ApiModel

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])

class DashboardSummaryResponse(ApiModel):
    total_income: float = 0.0
    total_expense: float = 0.0
    net_profit: float = 0.0
    total_products: int = 0
    records: int = 0

def _load_feed(db: Session):
    transactions = db.query(Transaction).order_by(Transaction.id).all()
    products = db.query(Product).order_by(Product.id).all()
    return build_feed(transactions, products)

@router.get("/", response_model=List[TransactionEntry])
def get_dashboard_feed(db: Session = Depends(get_db)):
    """Transactions plus orders without a mirror, newest first"""
    return [TransactionEntry(**entry.to_dict()) for entry in _load_feed(db)]

@router.get("/summary", response_model=DashboardSummaryResponse)
def get_dashboard_summary(db: Session = Depends(get_db)):
    """Recognized income and expense: full amount once done, otherwise the advance"""
    summary = summarize_feed(_load_feed(db))
    return DashboardSummaryResponse(**summary.__dict__)
