from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from stockroom.schemas.inventory import ProductResponse

class SaleItemCreate(BaseModel):
    product_id: str
    quantity: int = Field(ge=1)

class SaleCreate(BaseModel):
    items: List[SaleItemCreate] = Field(min_length=1)

class SaleItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    price: float
    cost: float
    subtotal: float
    profit: float
    product: Optional[ProductResponse] = None

    class Config:
        from_attributes = True

class SaleResponse(BaseModel):
    id: str
    total: float
    profit: float
    created_at: datetime
    items: List[SaleItemResponse] = []

    class Config:
        from_attributes = True
