"""Manual stock adjustments: restocks, corrections and write-offs."""

import pytest

from stockroom.core.exceptions import InvalidOperationError, NotFoundError
from stockroom.models.inventory import Product, StockChangeType, StockLog
from stockroom.services import catalog, inventory


def _ledger_count(db, product_id):
    return db.query(StockLog).filter(StockLog.product_id == product_id).count()


class TestAdjustStock:
    def test_low_stock_flag_follows_adjustment(self, db, mouse):
        assert mouse.stock == 50
        assert mouse.is_low_stock is False

        product = inventory.adjust_stock(db, mouse.id, -42, StockChangeType.ADJUSTMENT, notes="Stock count")

        assert product.stock == 8
        assert product.is_low_stock is True

    def test_adjustment_is_logged_with_before_and_after(self, db, mouse):
        inventory.adjust_stock(db, mouse.id, 15, StockChangeType.RESTOCK, notes="Delivery #42")

        entry = (
            db.query(StockLog)
            .filter(StockLog.product_id == mouse.id, StockLog.notes == "Delivery #42")
            .one()
        )
        assert entry.change_type == StockChangeType.RESTOCK
        assert entry.quantity == 15
        assert entry.before == 50
        assert entry.after == 65

    def test_negative_result_is_rejected_and_stock_untouched(self, db, mouse):
        before_entries = _ledger_count(db, mouse.id)

        with pytest.raises(InvalidOperationError) as exc_info:
            inventory.adjust_stock(db, mouse.id, -100, StockChangeType.DAMAGE)

        assert "Stock cannot be negative" in str(exc_info.value)
        assert exc_info.value.context["available"] == 50
        assert exc_info.value.context["requested"] == -100
        db.expire_all()
        assert db.get(Product, mouse.id).stock == 50
        assert _ledger_count(db, mouse.id) == before_entries

    def test_adjusting_to_exactly_zero_is_allowed(self, db, mouse):
        product = inventory.adjust_stock(db, mouse.id, -50, StockChangeType.DAMAGE)
        assert product.stock == 0

    def test_zero_quantity_is_rejected(self, db, mouse):
        with pytest.raises(InvalidOperationError):
            inventory.adjust_stock(db, mouse.id, 0, StockChangeType.ADJUSTMENT)

    def test_sale_is_not_a_manual_change_type(self, db, mouse):
        with pytest.raises(InvalidOperationError):
            inventory.adjust_stock(db, mouse.id, -1, StockChangeType.SALE)

    def test_unknown_product(self, db):
        with pytest.raises(NotFoundError):
            inventory.adjust_stock(db, "missing", 5, StockChangeType.RESTOCK)

    def test_inactive_product_cannot_be_adjusted(self, db, mouse):
        catalog.deactivate_product(db, mouse.id)
        with pytest.raises(InvalidOperationError):
            inventory.adjust_stock(db, mouse.id, 5, StockChangeType.RESTOCK)


class TestMoveStock:
    def test_guarded_update_refuses_to_go_below_zero(self, db, mouse):
        assert inventory.move_stock(db, mouse.id, -51) is None
        assert inventory.move_stock(db, mouse.id, -50) == 0
        db.rollback()
        db.expire_all()
        assert db.get(Product, mouse.id).stock == 50


class TestConcurrentAdjustment:
    def test_stock_drained_after_read_rolls_back(self, db, mouse, monkeypatch):
        before_entries = _ledger_count(db, mouse.id)
        original_get_product = inventory.get_product

        def read_then_drain(session, product_id):
            product = original_get_product(session, product_id)
            session.query(Product).filter(Product.id == product_id).update(
                {Product.stock: 1}, synchronize_session=False
            )
            return product

        monkeypatch.setattr(inventory, "get_product", read_then_drain)

        with pytest.raises(InvalidOperationError) as exc_info:
            inventory.adjust_stock(db, mouse.id, -10, StockChangeType.ADJUSTMENT)

        assert exc_info.value.context == {"product_id": mouse.id, "requested": -10}
        db.expire_all()
        assert db.get(Product, mouse.id).stock == 50
        assert _ledger_count(db, mouse.id) == before_entries
