from sqlalchemy.orm import Session
from models.product import Product, PaymentStatus
from models.transaction import Transaction, TransactionType, TransactionStatus
from models.log import LogLevel, LogCategory
from utils.dates import to_iso_date
from utils.logger import DatabaseLogger, log_info
from dataclasses import dataclass
from typing import Dict, List, Optional
import traceback
import logging

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

@dataclass
class ReconcileReport:
    products: int = 0
    created: int = 0
    updated: int = 0
    duplicates_removed: int = 0
    orphans_removed: int = 0

def category_label(product: Product) -> str:
    """Single label describing an order's line items"""
    categories = list(dict.fromkeys(c for c in product.categories if c))
    return ", ".join(categories) if categories else UNCATEGORIZED

def mirror_fields(product: Product) -> Dict:
    """Transaction fields copied from a product's derived state"""
    paid = product.payment_status == PaymentStatus.PAID
    return {
        "name": product.name,
        "buy": category_label(product),
        "owner": product.owner_name,
        "amount": product.amount,
        "advance_amount": product.advance_amount,
        "remaining_amount": product.remaining_amount,
        "type": TransactionType.IN,
        "status": TransactionStatus.DONE if paid else TransactionStatus.PENDING,
        "date": to_iso_date(product.date),
        "related_product_id": product.id,
    }

class TransactionSyncService:
    """
    Keeps one mirrored Transaction per Product.

    Mirrors are written after the product has been committed. A failed
    mirror write is rolled back and logged but never propagated, so the
    product mutation always stands; the two records may disagree until the
    next successful sync or a reconcile() pass.
    """

    @staticmethod
    def find_mirror(db: Session, product_id: int) -> Optional[Transaction]:
        return db.query(Transaction).filter(
            Transaction.related_product_id == product_id
        ).order_by(Transaction.id).first()

    @staticmethod
    def upsert_mirror(db: Session, product: Product) -> Transaction:
        """Find-or-create the product's transaction and overwrite its mirrored fields"""
        transaction = TransactionSyncService.find_mirror(db, product.id)
        fields = mirror_fields(product)
        if transaction is None:
            transaction = Transaction(**fields)
            db.add(transaction)
        else:
            for key, value in fields.items():
                setattr(transaction, key, value)
        db.commit()
        db.refresh(transaction)
        return transaction

    @staticmethod
    def delete_mirrors(db: Session, product_id: int) -> int:
        """Delete every transaction linked to product_id"""
        deleted = db.query(Transaction).filter(
            Transaction.related_product_id == product_id
        ).delete(synchronize_session=False)
        db.commit()
        return deleted

    @staticmethod
    def sync_product(db: Session, product: Product) -> Optional[Transaction]:
        """Best-effort mirror upsert. Returns None when the write failed."""
        try:
            return TransactionSyncService.upsert_mirror(db, product)
        except Exception as e:
            db.rollback()
            TransactionSyncService._report_failure("upsert", product.id, e)
            return None

    @staticmethod
    def remove_product(db: Session, product_id: int) -> Optional[int]:
        """Best-effort mirror removal. Returns None when the delete failed."""
        try:
            return TransactionSyncService.delete_mirrors(db, product_id)
        except Exception as e:
            db.rollback()
            TransactionSyncService._report_failure("delete", product_id, e)
            return None

    @staticmethod
    def _report_failure(action: str, product_id: int, error: Exception):
        logger.error(f"Transaction {action} for product {product_id} failed: {error}")
        DatabaseLogger.log_error(
            error_type="TransactionSyncError",
            error_message=f"{action} mirror for product {product_id}: {error}",
            stack_trace=traceback.format_exc(),
            request_data={"product_id": product_id, "action": action},
            severity=LogLevel.WARNING
        )

    @staticmethod
    def reconcile(db: Session) -> ReconcileReport:
        """
        Rebuild every mirror from the products table.
        Idempotent: a second run reports no changes.
        """
        report = ReconcileReport()
        products = {p.id: p for p in db.query(Product).all()}
        report.products = len(products)

        linked: List[Transaction] = db.query(Transaction).filter(
            Transaction.related_product_id.isnot(None)
        ).order_by(Transaction.id).all()

        kept: Dict[int, Transaction] = {}
        for transaction in linked:
            product_id = transaction.related_product_id
            if product_id not in products:
                db.delete(transaction)
                report.orphans_removed += 1
            elif product_id in kept:
                db.delete(transaction)
                report.duplicates_removed += 1
            else:
                kept[product_id] = transaction

        for product_id, product in products.items():
            fields = mirror_fields(product)
            transaction = kept.get(product_id)
            if transaction is None:
                db.add(Transaction(**fields))
                report.created += 1
            elif any(getattr(transaction, key) != value for key, value in fields.items()):
                for key, value in fields.items():
                    setattr(transaction, key, value)
                report.updated += 1

        db.commit()
        log_info(
            "Transaction mirrors reconciled",
            category=LogCategory.TRANSACTION_SYNC,
            details=report.__dict__
        )
        return report
