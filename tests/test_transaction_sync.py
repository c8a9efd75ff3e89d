"""
Product <-> Transaction mirror tests
"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.product import Product, PaymentStatus
from models.transaction import Transaction, TransactionStatus, TransactionType
from services.owner_service import OwnerResolver
from services.product_service import ProductService
from services.transaction_sync import TransactionSyncService, mirror_fields


def _create(db: Session, resolver: OwnerResolver, **overrides) -> Product:
    data = {
        "name": "Ahmad",
        "phone": "0791234567",
        "items": [],
        "amount": 800,
        "advance_amount": 200,
        "date": "2025-03-01",
    }
    data.update(overrides)
    return ProductService.create_product(db, data, resolver)


def _mirrors(db: Session, product_id: int):
    return db.query(Transaction).filter(Transaction.related_product_id == product_id).all()


class TestMirrorOnCreate:

    def test_create_writes_one_mirror(self, db: Session, resolver: OwnerResolver) -> None:
        product = _create(db, resolver)

        mirrors = _mirrors(db, product.id)
        assert len(mirrors) == 1
        mirror = mirrors[0]
        assert mirror.remaining_amount == 600
        assert mirror.advance_amount == 200
        assert mirror.amount == 800
        assert mirror.type == TransactionType.IN
        assert mirror.status == TransactionStatus.PENDING
        assert mirror.date == "2025-03-01"

    def test_paid_product_mirror_is_done(self, db: Session, resolver: OwnerResolver) -> None:
        product = _create(db, resolver, advance_amount=800)
        assert product.payment_status == PaymentStatus.PAID
        assert _mirrors(db, product.id)[0].status == TransactionStatus.DONE

    def test_mirror_label_lists_categories(self, db: Session, resolver: OwnerResolver) -> None:
        product = _create(db, resolver, items=[
            {"category": "Banner Printing", "qty": 1, "unit_price": 300},
            {"category": "Poster", "qty": 2, "unit_price": 50},
        ])
        mirror = _mirrors(db, product.id)[0]
        assert mirror.buy == "Banner Printing, Poster"
        assert mirror.owner == "Nazir"
        assert mirror.amount == 400


class TestMirrorUpsert:

    def test_sync_twice_keeps_one_mirror(self, db: Session, resolver: OwnerResolver) -> None:
        product = _create(db, resolver)

        TransactionSyncService.sync_product(db, product)
        TransactionSyncService.sync_product(db, product)

        assert len(_mirrors(db, product.id)) == 1

    def test_update_overwrites_mirror(self, db: Session, resolver: OwnerResolver) -> None:
        product = _create(db, resolver)
        ProductService.update_product(db, product, {"advance_amount": 500}, resolver)

        mirrors = _mirrors(db, product.id)
        assert len(mirrors) == 1
        assert mirrors[0].remaining_amount == 300
        assert mirrors[0].advance_amount == 500

    def test_update_recreates_missing_mirror(self, db: Session, resolver: OwnerResolver) -> None:
        product = _create(db, resolver)
        db.query(Transaction).delete()
        db.commit()

        ProductService.update_product(db, product, {"name": "Ahmad Khan"}, resolver)

        mirrors = _mirrors(db, product.id)
        assert len(mirrors) == 1
        assert mirrors[0].name == "Ahmad Khan"


class TestMirrorOnDelete:

    def test_delete_removes_every_linked_transaction(self, db: Session, resolver: OwnerResolver) -> None:
        target = _create(db, resolver)
        other = _create(db, resolver, name="Bilal")
        # simulate earlier duplication
        db.add(Transaction(**mirror_fields(target)))
        db.add(Transaction(name="Rent", amount=100, type=TransactionType.OUT, date="2025-03-02"))
        db.commit()
        target_id = target.id

        deleted = ProductService.delete_product(db, target)

        assert deleted == 2
        assert _mirrors(db, target_id) == []
        assert len(_mirrors(db, other.id)) == 1
        assert db.query(Transaction).filter(Transaction.related_product_id.is_(None)).count() == 1


class TestSyncFailure:
    """Mirror failures never undo the product write"""

    def test_failed_upsert_keeps_product(self, db: Session, resolver: OwnerResolver) -> None:
        with patch.object(TransactionSyncService, "upsert_mirror", side_effect=SQLAlchemyError("boom")):
            product = _create(db, resolver)

        assert db.query(Product).filter(Product.id == product.id).count() == 1
        assert _mirrors(db, product.id) == []

    def test_failed_upsert_returns_none(self, db: Session, resolver: OwnerResolver) -> None:
        product = _create(db, resolver)
        with patch.object(TransactionSyncService, "upsert_mirror", side_effect=RuntimeError("down")):
            assert TransactionSyncService.sync_product(db, product) is None

    def test_failed_delete_leaves_orphan(self, db: Session, resolver: OwnerResolver) -> None:
        product = _create(db, resolver)
        product_id = product.id
        with patch.object(TransactionSyncService, "delete_mirrors", side_effect=SQLAlchemyError("boom")):
            assert ProductService.delete_product(db, product) is None

        assert db.query(Product).count() == 0
        assert len(_mirrors(db, product_id)) == 1


class TestReconcile:

    def test_repairs_missing_stale_duplicate_and_orphan(self, db: Session, resolver: OwnerResolver) -> None:
        missing = _create(db, resolver, name="Missing")
        stale = _create(db, resolver, name="Stale")
        duplicated = _create(db, resolver, name="Duplicated")

        db.query(Transaction).filter(Transaction.related_product_id == missing.id).delete()
        db.add(Transaction(**mirror_fields(duplicated)))
        orphan = mirror_fields(duplicated)
        orphan["related_product_id"] = 9999
        db.add(Transaction(**orphan))
        db.commit()
        with patch.object(TransactionSyncService, "upsert_mirror", side_effect=SQLAlchemyError("boom")):
            ProductService.update_product(db, stale, {"advance_amount": 800}, resolver)

        report = TransactionSyncService.reconcile(db)

        assert report.products == 3
        assert report.created == 1
        assert report.updated == 1
        assert report.duplicates_removed == 1
        assert report.orphans_removed == 1
        for product in (missing, stale, duplicated):
            assert len(_mirrors(db, product.id)) == 1
        assert _mirrors(db, stale.id)[0].status == TransactionStatus.DONE
        assert _mirrors(db, 9999) == []

    def test_second_run_changes_nothing(self, db: Session, resolver: OwnerResolver) -> None:
        _create(db, resolver)
        _create(db, resolver, name="Bilal", advance_amount=800)

        TransactionSyncService.reconcile(db)
        report = TransactionSyncService.reconcile(db)

        assert (report.created, report.updated, report.duplicates_removed, report.orphans_removed) == (0, 0, 0, 0)

    def test_leaves_manual_transactions_alone(self, db: Session) -> None:
        db.add(Transaction(name="Paper stock", amount=1200, type=TransactionType.OUT, date="2025-02-01"))
        db.commit()

        report = TransactionSyncService.reconcile(db)

        assert report.products == 0
        assert db.query(Transaction).count() == 1
