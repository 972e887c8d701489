from pydantic import BaseModel, TypeAdapter, ValidationError
from typing import Dict, List, Optional
from datetime import date, datetime, time, timezone
from stockroom.core.exceptions import RequestValidationFailed
from stockroom.schemas.inventory import ProductResponse, CategorySummary
from stockroom.schemas.sales import SaleResponse

class DateRange(BaseModel):
    """Inclusive bounds, naive UTC. Either side may be open."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

_DATETIME = TypeAdapter(datetime)

def _parse_bound(field: str, raw: str, end_of_day: bool, errors: List[Dict[str, str]]) -> Optional[datetime]:
    raw = raw.strip()
    try:
        if len(raw) == 10:
            day = date.fromisoformat(raw)
            return datetime.combine(day, time.max if end_of_day else time.min)
        value = _DATETIME.validate_python(raw)
    except (ValueError, ValidationError):
        errors.append({"field": field, "message": f"'{raw}' is not an ISO-8601 date or datetime"})
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

def validate_date_range(start_date: Optional[str], end_date: Optional[str]) -> DateRange:
    """
    Turn the raw ``start_date``/``end_date`` query parameters into a DateRange.

    A date-only end bound covers that whole day. Raises RequestValidationFailed
    listing every offending parameter.
    """
    errors: List[Dict[str, str]] = []
    start = _parse_bound("start_date", start_date, False, errors) if start_date else None
    end = _parse_bound("end_date", end_date, True, errors) if end_date else None

    if start and end and start > end:
        errors.append({"field": "end_date", "message": "end_date must not be before start_date"})
    if errors:
        raise RequestValidationFailed(errors)
    return DateRange(start=start, end=end)

class PeriodTotals(BaseModel):
    revenue: float
    profit: float
    sales: int

class InventoryCounts(BaseModel):
    total_products: int
    low_stock_count: int

class BestSellingProduct(BaseModel):
    product: ProductResponse
    total_quantity: int
    total_revenue: float

class DashboardResponse(BaseModel):
    daily: PeriodTotals
    monthly: PeriodTotals
    inventory: InventoryCounts
    best_selling: List[BestSellingProduct]
    recent_sales: List[SaleResponse]

class SalesReportSummary(BaseModel):
    total_sales: int
    total_revenue: float
    total_profit: float
    average_order_value: float

class CategoryRevenue(BaseModel):
    category: CategorySummary
    revenue: float
    quantity: int

class SalesReportResponse(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    sales: List[SaleResponse]
    summary: SalesReportSummary
    category_performance: List[CategoryRevenue] = []

class InventoryReportProduct(ProductResponse):
    stock_value: float
    retail_value: float

class InventoryReportSummary(BaseModel):
    total_products: int
    total_stock_value: float
    total_retail_value: float
    potential_profit: float

class InventoryReportResponse(BaseModel):
    products: List[InventoryReportProduct]
    summary: InventoryReportSummary

class MonthlyProfit(BaseModel):
    month: str
    month_start: date
    revenue: float
    profit: float
    sales: int

class ProfitReportResponse(BaseModel):
    monthly_data: List[MonthlyProfit]
