"""
Single-product stock movements: restocks, corrections, damage write-offs.

Each movement commits together with its ledger entry or not at all.
"""
from typing import Optional

from sqlalchemy.orm import Session

from stockroom.core.database import utcnow
from stockroom.core.exceptions import InvalidOperationError
from stockroom.core.logging_config import get_logger
from stockroom.models.inventory import Product, StockChangeType
from stockroom.services import stock_ledger
from stockroom.services.catalog import get_product

logger = get_logger(__name__)


def move_stock(db: Session, product_id: str, quantity: int) -> Optional[int]:
    """
    Add ``quantity`` (signed) to a product's stock in one guarded UPDATE.

    The floor check runs inside the UPDATE itself, so two writers racing on
    the same row cannot push stock below zero. Returns the new stock, or
    None when the guard rejected the change. Does not commit.
    """
    updated = (
        db.query(Product)
        .filter(Product.id == product_id, Product.stock + quantity >= 0)
        .update(
            {Product.stock: Product.stock + quantity, Product.updated_at: utcnow()},
            synchronize_session=False,
        )
    )
    if not updated:
        return None
    return db.query(Product.stock).filter(Product.id == product_id).scalar()


def adjust_stock(
    db: Session,
    product_id: str,
    quantity: int,
    change_type: StockChangeType,
    notes: Optional[str] = None,
) -> Product:
    """
    Apply a signed stock delta to one product and log it.

    Raises NotFoundError for an unknown product and InvalidOperationError when
    the product is inactive, the delta is zero, the change type is SALE, or the
    result would be negative. On failure the product's stock is untouched.
    """
    product = get_product(db, product_id)

    if not product.is_active:
        raise InvalidOperationError(f"Product {product.name} is inactive", product_id=product_id)
    if change_type == StockChangeType.SALE:
        raise InvalidOperationError("Sales must be recorded through a sale transaction")
    if quantity == 0:
        raise InvalidOperationError("Adjustment quantity must not be zero")

    current = product.stock
    if current + quantity < 0:
        logger.warning(
            f"Rejected stock adjustment for {product.sku}: {current} {quantity:+d} would be negative",
            extra={"product_id": product_id},
        )
        raise InvalidOperationError(
            "Stock cannot be negative",
            product_id=product_id,
            available=current,
            requested=quantity,
        )

    try:
        after = move_stock(db, product_id, quantity)
        if after is None:
            # stock moved underneath us since the read above
            raise InvalidOperationError("Stock cannot be negative", product_id=product_id, requested=quantity)
        stock_ledger.append(
            db,
            product_id=product_id,
            change_type=change_type,
            quantity=quantity,
            before=after - quantity,
            after=after,
            notes=notes,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(product)
    logger.info(
        f"Adjusted stock of {product.sku} by {quantity:+d} ({change_type.value}) to {product.stock}",
        extra={"product_id": product_id},
    )
    return product
