from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload
from pydantic import Field, validator
from typing import List, Optional
from datetime import datetime
from config import settings
from database import get_db
from models.product import Product, PaymentStatus, WorkStatus
from services.owner_service import OwnerResolver, get_owner_resolver
from services.product_service import ProductService
from utils.dates import parse_date
from routers.common import ApiModel, get_or_404, bad_request

router = APIRouter(prefix="/api/products", tags=["Products"])

class LineItemIn(ApiModel):
    category: str = Field(..., min_length=1, max_length=200)
    qty: float = Field(1, ge=0)
    unit_price: float = Field(0, ge=0)

def _migrate_legacy_buy(v):
    """Old clients send buy as a label or a list of labels"""
    if v is None:
        return v
    if isinstance(v, str):
        v = [v] if v.strip() and v != "None" else []
    return [{"category": item} if isinstance(item, str) else item for item in v]

def _clean_text(v):
    """Collapse whitespace; blank values are rejected"""
    if v is None:
        return v
    v = " ".join(v.split())
    if not v:
        raise ValueError("must not be blank")
    return v

def _check_date(v):
    if v is not None and parse_date(v) is None:
        raise ValueError("date must be an ISO-8601 date or date-time")
    return v

class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=1, max_length=30)
    items: List[LineItemIn] = Field(default_factory=list, alias="buy")
    amount: Optional[float] = Field(None, ge=0)
    advance_amount: float = Field(0, ge=0)
    work_status: WorkStatus = WorkStatus.PENDING
    date: Optional[str] = None

    @validator("items", pre=True)
    def migrate_buy(cls, v):
        return _migrate_legacy_buy(v) or []

    @validator("name", "phone")
    def strip_text(cls, v):
        return _clean_text(v)

    @validator("date")
    def validate_date(cls, v):
        return _check_date(v)

class ProductUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    items: Optional[List[LineItemIn]] = Field(None, alias="buy")
    amount: Optional[float] = Field(None, ge=0)
    advance_amount: Optional[float] = Field(None, ge=0)
    work_status: Optional[WorkStatus] = None
    date: Optional[str] = None

    @validator("items", pre=True)
    def migrate_buy(cls, v):
        return _migrate_legacy_buy(v)

    @validator("name", "phone")
    def strip_text(cls, v):
        return _clean_text(v)

    @validator("date")
    def validate_date(cls, v):
        return _check_date(v)

class PaymentCreate(ApiModel):
    amount: float = Field(..., gt=0)
    date: Optional[str] = None

    @validator("date")
    def validate_date(cls, v):
        return _check_date(v)

class LineItemResponse(ApiModel):
    category: str
    qty: float
    unit_price: float
    total: float

class PartialPaymentResponse(ApiModel):
    id: int
    amount: float
    date: datetime

class ProductResponse(ApiModel):
    id: int
    name: str
    phone: str
    items: List[LineItemResponse] = Field(default_factory=list, alias="buy")
    owner_name: Optional[str] = None
    amount: float
    advance_amount: float
    remaining_amount: float
    payment_status: PaymentStatus
    work_status: WorkStatus
    partial_payments: List[PartialPaymentResponse] = []
    date: datetime
    created_at: datetime
    updated_at: datetime

class BalanceResponse(ApiModel):
    total_received: float
    currency: str

def build_product_response(product: Product) -> ProductResponse:
    """Build product response including line items and payments"""
    return ProductResponse(
        id=product.id,
        name=product.name,
        phone=product.phone,
        items=[LineItemResponse(
            category=i.category,
            qty=i.qty,
            unit_price=i.unit_price,
            total=i.total
        ) for i in product.items],
        owner_name=product.owner_name,
        amount=product.amount,
        advance_amount=product.advance_amount,
        remaining_amount=product.remaining_amount,
        payment_status=product.payment_status,
        work_status=product.work_status,
        partial_payments=[PartialPaymentResponse(
            id=p.id,
            amount=p.amount,
            date=p.date
        ) for p in product.partial_payments],
        date=product.date,
        created_at=product.created_at,
        updated_at=product.updated_at
    )

def _load_products(db: Session, q: Optional[str] = None):
    query = db.query(Product).options(
        selectinload(Product.items),
        selectinload(Product.partial_payments)
    )
    if q and q.strip():
        query = query.filter(Product.name.ilike(f"%{q.strip()}%"))
    return query.order_by(Product.date.desc(), Product.id.desc()).all()

@router.get("/", response_model=List[ProductResponse])
def get_products(q: Optional[str] = None, db: Session = Depends(get_db)):
    """All orders, newest first. q filters by customer name (case-insensitive)."""
    products = _load_products(db, q)
    return [build_product_response(p) for p in products]

@router.get("/balance", response_model=BalanceResponse)
def get_balance(db: Session = Depends(get_db)):
    """Money received so far across all orders"""
    return BalanceResponse(
        total_received=ProductService.total_received(db.query(Product).all()),
        currency=settings.currency
    )

@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return build_product_response(get_or_404(db, Product, product_id, "Product"))

@router.post("/", response_model=ProductResponse)
def create_product(
    request: ProductCreate,
    db: Session = Depends(get_db),
    resolver: OwnerResolver = Depends(get_owner_resolver)
):
    try:
        product = ProductService.create_product(db, request.model_dump(), resolver)
    except ValueError as e:
        raise bad_request(e)
    return build_product_response(product)

@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    request: ProductUpdate,
    db: Session = Depends(get_db),
    resolver: OwnerResolver = Depends(get_owner_resolver)
):
    product = get_or_404(db, Product, product_id, "Product")
    changes = request.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="Empty body")
    try:
        product = ProductService.update_product(db, product, changes, resolver)
    except ValueError as e:
        raise bad_request(e)
    return build_product_response(product)

@router.patch("/{product_id}/work-status", response_model=ProductResponse)
def toggle_work_status(product_id: int, db: Session = Depends(get_db)):
    """Flip an order between pending and done"""
    product = get_or_404(db, Product, product_id, "Product")
    return build_product_response(ProductService.toggle_work_status(db, product))

@router.post("/{product_id}/payments", response_model=ProductResponse)
def add_payment(
    product_id: int,
    request: PaymentCreate,
    db: Session = Depends(get_db),
    resolver: OwnerResolver = Depends(get_owner_resolver)
):
    product = get_or_404(db, Product, product_id, "Product")
    try:
        product = ProductService.add_payment(db, product, request.amount, request.date, resolver)
    except ValueError as e:
        raise bad_request(e)
    return build_product_response(product)

@router.post("/{product_id}/pay", response_model=ProductResponse)
def mark_paid(
    product_id: int,
    db: Session = Depends(get_db),
    resolver: OwnerResolver = Depends(get_owner_resolver)
):
    """Settle the outstanding balance"""
    product = get_or_404(db, Product, product_id, "Product")
    return build_product_response(ProductService.settle(db, product, resolver))

@router.post("/{product_id}/unpay", response_model=ProductResponse)
def undo_payment(
    product_id: int,
    db: Session = Depends(get_db),
    resolver: OwnerResolver = Depends(get_owner_resolver)
):
    """Drop partial payments; only the advance stays credited"""
    product = get_or_404(db, Product, product_id, "Product")
    return build_product_response(ProductService.reopen(db, product, resolver))

@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    product = get_or_404(db, Product, product_id, "Product")
    ProductService.delete_product(db, product)
    return {"message": "Product deleted successfully"}
