from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from stockroom.core.database import get_db
from stockroom.models.user import User
from stockroom.schemas.reports import validate_date_range
from stockroom.schemas.sales import SaleCreate, SaleResponse
from stockroom.services import sales as sales_service
from stockroom.api.v1.dependencies import require_permission_dependency

router = APIRouter()

@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
def create_sale(
    sale: SaleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("sales", "create"))
):
    """
    Record a sale. Either every item is sold and stock is decremented,
    or nothing changes and the first failing item is reported.
    """
    return sales_service.create_sale(db, [(item.product_id, item.quantity) for item in sale.items])

@router.get("", response_model=List[SaleResponse])
def get_sales(
    skip: int = 0,
    limit: int = 100,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("sales", "view"))
):
    """List sales newest first, optionally within a date range"""
    date_range = validate_date_range(start_date, end_date)
    return sales_service.list_sales(db, skip=skip, limit=limit, start=date_range.start, end=date_range.end)

@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(
    sale_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("sales", "view"))
):
    return sales_service.get_sale(db, sale_id)

@router.delete("/{sale_id}")
def delete_sale(
    sale_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("sales", "delete"))
):
    """Delete a sale - Admin only. Sold quantities are returned to stock."""
    sales_service.delete_sale(db, sale_id)
    return {"message": "Sale deleted and stock restored"}
