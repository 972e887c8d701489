from stockroom.models.user import User, Role
from stockroom.models.inventory import Product, Category, Supplier, StockLog, StockChangeType
from stockroom.models.sales import Sale, SaleItem

__all__ = [
    "User", "Role",
    "Product", "Category", "Supplier", "StockLog", "StockChangeType",
    "Sale", "SaleItem",
]
