from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
from database import Base
import enum

class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"

class WorkStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"

class Product(Base):
    """A customer print order. Source of truth for its payment fields."""
    __tablename__ = "products"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    phone = Column(String(30), nullable=False)
    owner_name = Column(String(100), nullable=True)
    amount = Column(Float, nullable=False, default=0.0)
    advance_amount = Column(Float, nullable=False, default=0.0)
    remaining_amount = Column(Float, nullable=False, default=0.0)
    payment_status = Column(
        SQLEnum(PaymentStatus, values_callable=lambda e: [m.value for m in e]),
        default=PaymentStatus.UNPAID,
        nullable=False,
    )
    work_status = Column(
        SQLEnum(WorkStatus, values_callable=lambda e: [m.value for m in e]),
        default=WorkStatus.PENDING,
        nullable=False,
    )
    date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    # Relationships
    items = relationship(
        "ProductItem",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductItem.position",
    )
    partial_payments = relationship(
        "PartialPayment",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="PartialPayment.id",
    )

    @property
    def categories(self):
        return [item.category for item in self.items]

class ProductItem(Base):
    __tablename__ = "product_items"
    
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    category = Column(String(200), nullable=False)
    qty = Column(Float, nullable=False, default=1.0)
    unit_price = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)  # qty * unit_price
    
    product = relationship("Product", back_populates="items")

class PartialPayment(Base):
    __tablename__ = "partial_payments"
    
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    date = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    product = relationship("Product", back_populates="partial_payments")
