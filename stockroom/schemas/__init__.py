from stockroom.schemas.auth import Token, UserCreate, UserResponse
from stockroom.schemas.inventory import (
    ProductCreate, ProductUpdate, ProductResponse, StockAdjust,
    CategoryCreate, SupplierCreate,
)
from stockroom.schemas.sales import SaleCreate, SaleResponse
from stockroom.schemas.reports import DateRange, validate_date_range

__all__ = [
    "Token", "UserCreate", "UserResponse",
    "ProductCreate", "ProductUpdate", "ProductResponse", "StockAdjust",
    "CategoryCreate", "SupplierCreate",
    "SaleCreate", "SaleResponse",
    "DateRange", "validate_date_range",
]
