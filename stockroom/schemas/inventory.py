from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from stockroom.models.inventory import StockChangeType

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None

class CategorySummary(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True

class CategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    product_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SupplierCreate(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None

class SupplierUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None

class SupplierSummary(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True

class SupplierResponse(BaseModel):
    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    product_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    sku: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    cost: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=10, ge=0)
    category_id: str
    supplier_id: str

class ProductUpdate(BaseModel):
    """Direct edit of catalog fields. Stock only moves through adjustments and sales."""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    sku: Optional[str] = Field(default=None, min_length=1)
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    cost: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    min_stock: Optional[int] = Field(default=None, ge=0)
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None

    class Config:
        extra = "forbid"

class StockAdjust(BaseModel):
    quantity: int
    change_type: StockChangeType
    notes: Optional[str] = None

class StockLogResponse(BaseModel):
    id: str
    product_id: str
    change_type: StockChangeType
    quantity: int
    before: int
    after: int
    notes: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True

class ProductResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    sku: str
    price: float
    cost: float
    stock: int
    min_stock: int
    is_low_stock: bool
    is_active: bool
    category_id: str
    supplier_id: str
    category: Optional[CategorySummary] = None
    supplier: Optional[SupplierSummary] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ProductDetailResponse(ProductResponse):
    stock_logs: List[StockLogResponse] = []

class LowStockProductResponse(ProductResponse):
    stock_deficit: int
