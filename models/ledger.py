from sqlalchemy import Column, Integer, Float, String, Text, DateTime, Enum as SQLEnum
from datetime import datetime
from database import Base
import enum

class LedgerType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"

class LedgerEntry(Base):
    """Manual bookkeeping record, independent of products and transactions"""
    __tablename__ = "ledger_entries"
    
    id = Column(Integer, primary_key=True, index=True)
    type = Column(SQLEnum(LedgerType, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    person = Column(String(200), nullable=False, default="")
    category = Column(String(200), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
