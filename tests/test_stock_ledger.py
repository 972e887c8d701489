"""Stock ledger: append-only entries that reconstruct every stock value."""

import pytest

from stockroom.models.inventory import StockChangeType, StockLog
from stockroom.services import inventory, sales, stock_ledger


class TestAppend:
    def test_append_writes_entry_without_committing(self, db, mouse):
        entry = stock_ledger.append(
            db,
            product_id=mouse.id,
            change_type=StockChangeType.ADJUSTMENT,
            quantity=-3,
            before=50,
            after=47,
            notes="Count correction",
        )
        assert entry.id is not None
        assert db.query(StockLog).filter(StockLog.notes == "Count correction").count() == 1

        db.rollback()
        assert db.query(StockLog).filter(StockLog.notes == "Count correction").count() == 0

    def test_unbalanced_entry_is_a_programming_error(self, db, mouse):
        with pytest.raises(AssertionError):
            stock_ledger.append(
                db,
                product_id=mouse.id,
                change_type=StockChangeType.RESTOCK,
                quantity=5,
                before=50,
                after=56,
            )


class TestQueries:
    def test_recent_entries_newest_first_and_limited(self, db, mouse):
        inventory.adjust_stock(db, mouse.id, 10, StockChangeType.RESTOCK, notes="first")
        inventory.adjust_stock(db, mouse.id, -1, StockChangeType.DAMAGE, notes="second")
        inventory.adjust_stock(db, mouse.id, 2, StockChangeType.ADJUSTMENT, notes="third")

        entries = stock_ledger.recent_entries(db, mouse.id, limit=2)
        assert [e.notes for e in entries] == ["third", "second"]

    def test_history_filters_by_change_type(self, db, mouse):
        inventory.adjust_stock(db, mouse.id, 10, StockChangeType.RESTOCK)
        inventory.adjust_stock(db, mouse.id, -1, StockChangeType.DAMAGE)

        damage = stock_ledger.history(db, mouse.id, change_type=StockChangeType.DAMAGE)
        assert len(damage) == 1
        assert damage[0].quantity == -1

        # initial stock + restock
        restocks = stock_ledger.history(db, mouse.id, change_type=StockChangeType.RESTOCK)
        assert len(restocks) == 2


class TestReconstruction:
    def test_ledger_replays_to_current_stock(self, db, mouse, make_product):
        hub = make_product(name="USB-C Hub", stock=25)
        inventory.adjust_stock(db, mouse.id, 20, StockChangeType.RESTOCK)
        sale = sales.create_sale(db, [(mouse.id, 5), (hub.id, 3)])
        inventory.adjust_stock(db, hub.id, -2, StockChangeType.DAMAGE)
        sales.delete_sale(db, sale.id)

        for product in (mouse, hub):
            db.refresh(product)
            entries = list(reversed(stock_ledger.history(db, product.id, limit=1000)))
            running = 0
            for entry in entries:
                assert entry.before == running
                assert entry.after == entry.before + entry.quantity
                assert entry.after >= 0
                running = entry.after
            assert running == product.stock

        assert mouse.stock == 70
        assert hub.stock == 23
