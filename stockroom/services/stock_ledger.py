"""
Append-only stock ledger.

Every change to ``Product.stock`` is paired with exactly one StockLog row
carrying the signed delta and before/after snapshots, so the stock value at
any point in time can be rebuilt from the ledger. This module only ever
inserts and reads; keeping ``Product.stock`` in step is the caller's job, and
the row is written inside the caller's transaction (flushed, never committed).
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from stockroom.models.inventory import StockChangeType, StockLog


def append(
    db: Session,
    product_id: str,
    change_type: StockChangeType,
    quantity: int,
    before: int,
    after: int,
    notes: Optional[str] = None,
) -> StockLog:
    assert after == before + quantity, (
        f"unbalanced ledger entry for {product_id}: {before} + {quantity} != {after}"
    )
    entry = StockLog(
        product_id=product_id,
        change_type=change_type,
        quantity=quantity,
        before=before,
        after=after,
        notes=notes,
    )
    db.add(entry)
    db.flush()
    return entry


def recent_entries(db: Session, product_id: str, limit: int) -> List[StockLog]:
    """Most recent ``limit`` entries for a product, newest first."""
    return (
        db.query(StockLog)
        .filter(StockLog.product_id == product_id)
        .order_by(StockLog.created_at.desc())
        .limit(limit)
        .all()
    )


def history(
    db: Session,
    product_id: str,
    skip: int = 0,
    limit: int = 100,
    change_type: Optional[StockChangeType] = None,
) -> List[StockLog]:
    query = db.query(StockLog).filter(StockLog.product_id == product_id)
    if change_type:
        query = query.filter(StockLog.change_type == change_type)
    return query.order_by(StockLog.created_at.desc()).offset(skip).limit(limit).all()
