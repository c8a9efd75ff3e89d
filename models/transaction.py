from sqlalchemy import Column, Integer, Float, String, DateTime, Enum as SQLEnum
from datetime import datetime
from database import Base
import enum

class TransactionType(str, enum.Enum):
    IN = "in"
    OUT = "out"

class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    DONE = "done"

class Transaction(Base):
    """Cash movement. Either a manual entry or the mirror of a product order."""
    __tablename__ = "transactions"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    buy = Column(String(500), nullable=True)  # category label
    owner = Column(String(100), nullable=True)
    amount = Column(Float, nullable=False, default=0.0)
    advance_amount = Column(Float, nullable=False, default=0.0)
    remaining_amount = Column(Float, nullable=False, default=0.0)
    type = Column(SQLEnum(TransactionType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    status = Column(
        SQLEnum(TransactionStatus, values_callable=lambda e: [m.value for m in e]),
        default=TransactionStatus.DONE,
        nullable=False,
    )
    date = Column(String(32), nullable=False, index=True)  # ISO-8601 date or date-time
    # Not a foreign key: the mirror is maintained by TransactionSyncService
    related_product_id = Column(Integer, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
