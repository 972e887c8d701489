"""
Sale transactions.

A sale is validated in full before anything is written, then executed in a
single database transaction: every stock decrement, every ledger entry and
the Sale with its items commit together, or none of them do.
"""
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session, joinedload

from stockroom.core.exceptions import InsufficientStockError, InvalidOperationError, NotFoundError
from stockroom.core.logging_config import get_logger
from stockroom.models.inventory import Product, StockChangeType
from stockroom.models.sales import Sale, SaleItem
from stockroom.models.user import new_id
from stockroom.services import stock_ledger
from stockroom.services.inventory import move_stock

logger = get_logger(__name__)

SaleLine = Tuple[str, int]


def _with_details(query):
    return query.options(
        joinedload(Sale.items)
        .joinedload(SaleItem.product)
        .options(joinedload(Product.category), joinedload(Product.supplier))
    )


def _validate_lines(db: Session, lines: Sequence[SaleLine]) -> None:
    """Reject the whole sale before any write if any line cannot be filled."""
    if not lines:
        raise InvalidOperationError("A sale needs at least one item")

    requested: Dict[str, int] = OrderedDict()
    for product_id, quantity in lines:
        if quantity <= 0:
            raise InvalidOperationError(
                f"Quantity for product {product_id} must be a positive integer",
                product_id=product_id,
                requested=quantity,
            )
        requested[product_id] = requested.get(product_id, 0) + quantity

    for product_id, quantity in requested.items():
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise NotFoundError(f"Product with ID {product_id} not found", product_id=product_id)
        if not product.is_active:
            raise InvalidOperationError(f"Product {product.name} is inactive", product_id=product_id)
        if product.stock < quantity:
            logger.warning(
                f"Rejected sale: {product.sku} has {product.stock}, {quantity} requested",
                extra={"product_id": product_id},
            )
            raise InsufficientStockError(product.id, product.name, product.stock, quantity)


def create_sale(db: Session, lines: Sequence[SaleLine]) -> Sale:
    """
    Sell ``lines`` of ``(product_id, quantity)``.

    Price and cost are copied from each product at the moment of sale so later
    catalog edits never rewrite history.
    """
    _validate_lines(db, lines)

    sale_id = new_id()
    total = Decimal("0")
    profit = Decimal("0")
    items: List[SaleItem] = []

    try:
        for position, (product_id, quantity) in enumerate(lines):
            product = (
                db.query(Product)
                .filter(Product.id == product_id)
                .with_for_update()
                .populate_existing()
                .one()
            )
            price = Decimal(product.price)
            cost = Decimal(product.cost)
            subtotal = price * quantity
            item_profit = (price - cost) * quantity
            total += subtotal
            profit += item_profit

            after = move_stock(db, product_id, -quantity)
            if after is None:
                # another sale drained the stock after validation
                raise InsufficientStockError(product.id, product.name, product.stock, quantity)

            stock_ledger.append(
                db,
                product_id=product_id,
                change_type=StockChangeType.SALE,
                quantity=-quantity,
                before=after + quantity,
                after=after,
                notes=f"Sale {sale_id}",
            )
            items.append(
                SaleItem(
                    product_id=product_id,
                    position=position,
                    quantity=quantity,
                    price=price,
                    cost=cost,
                    subtotal=subtotal,
                    profit=item_profit,
                )
            )

        sale = Sale(id=sale_id, total=total, profit=profit, items=items)
        db.add(sale)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        f"Recorded sale {sale_id}: {len(items)} item(s), total {total}, profit {profit}",
        extra={"sale_id": sale_id},
    )
    return get_sale(db, sale_id)


def get_sale(db: Session, sale_id: str) -> Sale:
    sale = _with_details(db.query(Sale)).filter(Sale.id == sale_id).first()
    if not sale:
        raise NotFoundError(f"Sale with ID {sale_id} not found")
    return sale


def list_sales(
    db: Session,
    skip: int = 0,
    limit: Optional[int] = 100,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Sale]:
    query = db.query(Sale)
    if start:
        query = query.filter(Sale.created_at >= start)
    if end:
        query = query.filter(Sale.created_at <= end)
    return (
        _with_details(query)
        .order_by(Sale.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def delete_sale(db: Session, sale_id: str) -> None:
    """
    Remove a sale and put its goods back on the shelf.

    Each item's quantity is returned to stock with a RETURN ledger entry in
    the same transaction as the delete, so the ledger still balances.
    """
    sale = get_sale(db, sale_id)
    item_count = len(sale.items)
    try:
        for item in sale.items:
            after = move_stock(db, item.product_id, item.quantity)
            stock_ledger.append(
                db,
                product_id=item.product_id,
                change_type=StockChangeType.RETURN,
                quantity=item.quantity,
                before=after - item.quantity,
                after=after,
                notes=f"Sale {sale_id} deleted",
            )
        db.delete(sale)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Deleted sale {sale_id} and restocked {item_count} item(s)", extra={"sale_id": sale_id})
