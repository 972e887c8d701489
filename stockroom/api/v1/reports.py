from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from stockroom.core.database import get_db
from stockroom.models.user import User
from stockroom.schemas.inventory import ProductResponse
from stockroom.schemas.reports import (
    DashboardResponse, SalesReportResponse, InventoryReportResponse,
    InventoryReportProduct, ProfitReportResponse, validate_date_range,
)
from stockroom.services import reports as reports_service
from stockroom.api.v1.dependencies import require_permission_dependency

router = APIRouter()

@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("reports", "view"))
):
    """Today's and this month's takings, stock counts, best sellers and recent sales"""
    return reports_service.dashboard(db)

@router.get("/sales", response_model=SalesReportResponse)
def get_sales_report(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("reports", "view"))
):
    date_range = validate_date_range(start_date, end_date)
    return reports_service.sales_report(db, date_range.start, date_range.end)

@router.get("/inventory", response_model=InventoryReportResponse)
def get_inventory_report(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("reports", "view"))
):
    report = reports_service.inventory_report(db)
    products = []
    for row in report["products"]:
        p_dict = ProductResponse.model_validate(row["product"]).model_dump()
        p_dict["stock_value"] = row["stock_value"]
        p_dict["retail_value"] = row["retail_value"]
        products.append(InventoryReportProduct(**p_dict))
    return {"products": products, "summary": report["summary"]}

@router.get("/profit", response_model=ProfitReportResponse)
def get_profit_report(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("reports", "view"))
):
    """Revenue and profit for each of the last 12 months, oldest first"""
    return reports_service.profit_report(db)
