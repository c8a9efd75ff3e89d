from sqlalchemy import Column, Integer, Float, String, Text, DateTime
from datetime import datetime
from database import Base

class RemainingBalance(Base):
    """Outstanding balance kept outside of the order book"""
    __tablename__ = "remaining_balances"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=False)
    amount = Column(Float, nullable=False)
    advance_amount = Column(Float, nullable=False, default=0.0)
    remaining_amount = Column(Float, nullable=False, default=0.0)
    note = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
