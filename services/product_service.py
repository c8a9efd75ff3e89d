from sqlalchemy.orm import Session
from models.product import Product, ProductItem, PartialPayment, WorkStatus
from models.log import LogCategory
from services.money import to_amount, round_money
from services.payment_service import derive_payment
from services.owner_service import OwnerResolver
from services.transaction_sync import TransactionSyncService
from utils.dates import parse_date
from utils.logger import log_info
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ("name", "phone")

def build_items(items: Iterable[Dict[str, Any]]) -> List[ProductItem]:
    """Line items with total = qty * unit_price"""
    rows = []
    for position, item in enumerate(items):
        qty = to_amount(item.get("qty", 1))
        unit_price = to_amount(item.get("unit_price"))
        rows.append(ProductItem(
            position=position,
            category=item["category"],
            qty=qty,
            unit_price=unit_price,
            total=round_money(qty * unit_price)
        ))
    return rows

def items_total(items: Iterable[ProductItem]) -> float:
    return round_money(sum(item.total for item in items))

class ProductService:
    """Order mutations. Each one recomputes derived fields, commits, then syncs the mirror."""

    @staticmethod
    def recalculate(product: Product, resolver: OwnerResolver, amount: Any = None) -> Product:
        """
        Recompute amount, remaining balance, payment status and owner.
        Priced line items always define the amount; an explicit amount is
        only used when the items carry no price (legacy label-only orders).
        """
        priced_total = items_total(product.items)
        if priced_total > 0:
            product.amount = priced_total
        elif amount is not None:
            product.amount = to_amount(amount)
        else:
            product.amount = to_amount(product.amount)

        product.advance_amount = to_amount(product.advance_amount)
        summary = derive_payment(product.amount, product.advance_amount, product.partial_payments)
        product.remaining_amount = summary.remaining_amount
        product.payment_status = summary.payment_status
        product.owner_name = resolver.resolve(product.categories)
        return product

    @staticmethod
    def _save(db: Session, product: Product) -> Product:
        db.commit()
        db.refresh(product)
        TransactionSyncService.sync_product(db, product)
        return product

    @staticmethod
    def create_product(db: Session, data: Dict[str, Any], resolver: OwnerResolver) -> Product:
        items = build_items(data.get("items") or [])
        if items_total(items) <= 0 and data.get("amount") is None:
            raise ValueError("amount is required when line items carry no price")

        product = Product(
            name=data["name"],
            phone=data["phone"],
            advance_amount=data.get("advance_amount") or 0.0,
            work_status=data.get("work_status") or WorkStatus.PENDING,
            date=parse_date(data.get("date")) or datetime.utcnow(),
        )
        product.items = items
        ProductService.recalculate(product, resolver, amount=data.get("amount"))
        db.add(product)
        db.commit()
        db.refresh(product)

        log_info(
            f"Order created for {product.name}",
            category=LogCategory.ORDER_MANAGEMENT,
            details={"amount": product.amount, "phone": product.phone},
            entity_type="product",
            entity_id=product.id
        )
        TransactionSyncService.sync_product(db, product)
        return product

    @staticmethod
    def update_product(db: Session, product: Product, changes: Dict[str, Any], resolver: OwnerResolver) -> Product:
        """Apply a partial update. Keys absent from changes are left alone."""
        for field in PRODUCT_FIELDS:
            if changes.get(field) is not None:
                setattr(product, field, changes[field])
        if changes.get("work_status") is not None:
            product.work_status = changes["work_status"]
        if changes.get("date") is not None:
            parsed = parse_date(changes["date"])
            if parsed is None:
                raise ValueError("date must be an ISO-8601 date or date-time")
            product.date = parsed
        if changes.get("advance_amount") is not None:
            product.advance_amount = changes["advance_amount"]
        if changes.get("items") is not None:
            product.items = build_items(changes["items"])

        ProductService.recalculate(product, resolver, amount=changes.get("amount"))
        return ProductService._save(db, product)

    @staticmethod
    def add_payment(db: Session, product: Product, amount: Any, date: Any, resolver: OwnerResolver) -> Product:
        value = to_amount(amount)
        if value <= 0:
            raise ValueError("payment amount must be greater than 0")
        product.partial_payments.append(
            PartialPayment(amount=value, date=parse_date(date) or datetime.utcnow())
        )
        ProductService.recalculate(product, resolver)
        return ProductService._save(db, product)

    @staticmethod
    def settle(db: Session, product: Product, resolver: OwnerResolver) -> Product:
        """Record a payment for whatever is still owed"""
        ProductService.recalculate(product, resolver)
        if product.remaining_amount <= 0:
            return product
        return ProductService.add_payment(db, product, product.remaining_amount, None, resolver)

    @staticmethod
    def reopen(db: Session, product: Product, resolver: OwnerResolver) -> Product:
        """Undo settlement: drop partial payments so only the advance counts"""
        product.partial_payments.clear()
        ProductService.recalculate(product, resolver)
        return ProductService._save(db, product)

    @staticmethod
    def toggle_work_status(db: Session, product: Product) -> Product:
        if product.work_status == WorkStatus.DONE:
            product.work_status = WorkStatus.PENDING
        else:
            product.work_status = WorkStatus.DONE
        return ProductService._save(db, product)

    @staticmethod
    def delete_product(db: Session, product: Product) -> Optional[int]:
        """Delete the order, then every mirror linked to it"""
        product_id = product.id
        db.delete(product)
        db.commit()
        log_info(
            f"Order {product_id} deleted",
            category=LogCategory.ORDER_MANAGEMENT,
            entity_type="product",
            entity_id=product_id
        )
        return TransactionSyncService.remove_product(db, product_id)

    @staticmethod
    def total_received(products: Iterable[Product]) -> float:
        return round_money(sum(to_amount(p.amount) - to_amount(p.remaining_amount) for p in products))
