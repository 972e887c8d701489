"""
Read-only aggregations over sales and stock for the dashboard and reports.

Nothing here writes. Money comes back as Decimal; the response schemas turn
it into JSON numbers.
"""
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from stockroom.core.config import settings
from stockroom.core.database import utcnow
from stockroom.models.inventory import Category, Product
from stockroom.models.sales import Sale, SaleItem
from stockroom.services.sales import list_sales

ZERO = Decimal("0")
CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


def _totals(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> Dict[str, Any]:
    """Revenue, profit and sale count for sales in ``[start, end)``."""
    query = db.query(
        func.coalesce(func.sum(Sale.total), 0),
        func.coalesce(func.sum(Sale.profit), 0),
        func.count(Sale.id),
    )
    if start:
        query = query.filter(Sale.created_at >= start)
    if end:
        query = query.filter(Sale.created_at < end)
    revenue, profit, count = query.one()
    return {"revenue": _money(revenue), "profit": _money(profit), "sales": count}


def _active_products(db: Session):
    return (
        db.query(Product)
        .options(joinedload(Product.category), joinedload(Product.supplier))
        .filter(Product.is_active.is_(True))
    )


def _add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def best_selling(db: Session, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """Products ranked by units sold over all history."""
    quantity = func.sum(SaleItem.quantity).label("total_quantity")
    rows = (
        db.query(Product, quantity, func.sum(SaleItem.subtotal).label("total_revenue"))
        .join(SaleItem, SaleItem.product_id == Product.id)
        .group_by(Product.id)
        .order_by(quantity.desc(), Product.name)
        .limit(limit or settings.DASHBOARD_TOP_N)
        .all()
    )
    return [
        {"product": product, "total_quantity": int(total_quantity), "total_revenue": _money(total_revenue)}
        for product, total_quantity, total_revenue in rows
    ]


def dashboard(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or utcnow()
    today = datetime(now.year, now.month, now.day)
    month_start = datetime(now.year, now.month, 1)

    active = db.query(func.count(Product.id)).filter(Product.is_active.is_(True))
    total_products = active.scalar()
    low_stock_count = active.filter(Product.is_low_stock).scalar()

    return {
        "daily": _totals(db, start=today),
        "monthly": _totals(db, start=month_start),
        "inventory": {"total_products": total_products, "low_stock_count": low_stock_count},
        "best_selling": best_selling(db),
        "recent_sales": list_sales(db, limit=settings.DASHBOARD_TOP_N),
    }


def category_performance(
    db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    revenue = func.sum(SaleItem.subtotal).label("revenue")
    query = (
        db.query(Category, revenue, func.sum(SaleItem.quantity))
        .join(Product, Product.category_id == Category.id)
        .join(SaleItem, SaleItem.product_id == Product.id)
        .join(Sale, Sale.id == SaleItem.sale_id)
    )
    if start:
        query = query.filter(Sale.created_at >= start)
    if end:
        query = query.filter(Sale.created_at <= end)
    rows = query.group_by(Category.id).order_by(revenue.desc()).all()
    return [
        {"category": category, "revenue": _money(total), "quantity": int(quantity)}
        for category, total, quantity in rows
    ]


def sales_report(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Every sale in the inclusive range ``[start, end]`` (either side may be
    open), newest first, with a summary and revenue per category.
    """
    sales = list_sales(db, skip=0, limit=None, start=start, end=end)
    total_revenue = sum((Decimal(s.total) for s in sales), ZERO)
    total_profit = sum((Decimal(s.profit) for s in sales), ZERO)
    average = _money(total_revenue / len(sales)) if sales else ZERO

    return {
        "start_date": start,
        "end_date": end,
        "sales": sales,
        "summary": {
            "total_sales": len(sales),
            "total_revenue": total_revenue,
            "total_profit": total_profit,
            "average_order_value": average,
        },
        "category_performance": category_performance(db, start, end),
    }


def inventory_report(db: Session) -> Dict[str, Any]:
    """Stock valuation of every active product at cost and at retail price."""
    rows = []
    total_stock_value = ZERO
    total_retail_value = ZERO
    for product in _active_products(db).order_by(Product.name).all():
        stock_value = Decimal(product.cost) * product.stock
        retail_value = Decimal(product.price) * product.stock
        total_stock_value += stock_value
        total_retail_value += retail_value
        rows.append({"product": product, "stock_value": stock_value, "retail_value": retail_value})

    return {
        "products": rows,
        "summary": {
            "total_products": len(rows),
            "total_stock_value": total_stock_value,
            "total_retail_value": total_retail_value,
            "potential_profit": total_retail_value - total_stock_value,
        },
    }


def profit_report(db: Session, now: Optional[datetime] = None, months: int = 12) -> Dict[str, Any]:
    """
    Revenue, profit and sale count per calendar month for the last ``months``
    months, current month included, oldest first. Months without sales are
    reported as zeros.
    """
    now = now or utcnow()
    current = date(now.year, now.month, 1)

    monthly_data = []
    for offset in range(months - 1, -1, -1):
        month_start = _add_months(current, -offset)
        next_start = _add_months(month_start, 1)
        totals = _totals(
            db,
            start=datetime.combine(month_start, datetime.min.time()),
            end=datetime.combine(next_start, datetime.min.time()),
        )
        monthly_data.append({
            "month": month_start.strftime("%b %Y"),
            "month_start": month_start,
            **totals,
        })
    return {"monthly_data": monthly_data}


def low_stock_products(db: Session) -> List[Dict[str, Any]]:
    """Active products below their minimum, lowest stock first."""
    products = (
        _active_products(db)
        .filter(Product.is_low_stock)
        .order_by(Product.stock, Product.name)
        .all()
    )
    return [{"product": p, "stock_deficit": p.min_stock - p.stock} for p in products]
