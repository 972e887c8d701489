from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from stockroom.core.config import settings
from stockroom.core.database import get_db
from stockroom.models.inventory import Product, StockChangeType
from stockroom.models.user import User
from stockroom.schemas.inventory import (
    CategoryCreate, CategoryResponse, CategoryUpdate,
    SupplierCreate, SupplierResponse, SupplierUpdate,
    ProductCreate, ProductUpdate, ProductResponse, ProductDetailResponse,
    LowStockProductResponse, StockAdjust, StockLogResponse,
)
from stockroom.services import catalog, inventory, reports, stock_ledger
from stockroom.api.v1.dependencies import require_permission_dependency

router = APIRouter()

# Categories
@router.get("/categories", response_model=List[CategoryResponse])
def get_categories(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "view"))
):
    """Get all categories with their product counts"""
    result = []
    for category, product_count in catalog.list_categories(db, skip, limit):
        c_dict = CategoryResponse.model_validate(category).model_dump()
        c_dict["product_count"] = product_count
        result.append(CategoryResponse(**c_dict))
    return result

@router.get("/categories/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "view"))
):
    category = catalog.get_category(db, category_id)
    c_dict = CategoryResponse.model_validate(category).model_dump()
    c_dict["product_count"] = catalog.count_category_products(db, category_id)
    return CategoryResponse(**c_dict)

@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "create"))
):
    return catalog.create_category(db, category)

@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    category: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "edit"))
):
    db_category = catalog.update_category(db, category_id, category)
    c_dict = CategoryResponse.model_validate(db_category).model_dump()
    c_dict["product_count"] = catalog.count_category_products(db, category_id)
    return CategoryResponse(**c_dict)

@router.delete("/categories/{category_id}")
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "delete"))
):
    """Delete a category - fails with 409 while products still use it"""
    catalog.delete_category(db, category_id)
    return {"message": "Category deleted successfully"}

# Suppliers
@router.get("/suppliers", response_model=List[SupplierResponse])
def get_suppliers(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "view"))
):
    result = []
    for supplier, product_count in catalog.list_suppliers(db, skip, limit):
        s_dict = SupplierResponse.model_validate(supplier).model_dump()
        s_dict["product_count"] = product_count
        result.append(SupplierResponse(**s_dict))
    return result

@router.get("/suppliers/{supplier_id}", response_model=SupplierResponse)
def get_supplier(
    supplier_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "view"))
):
    supplier = catalog.get_supplier(db, supplier_id)
    s_dict = SupplierResponse.model_validate(supplier).model_dump()
    s_dict["product_count"] = catalog.count_supplier_products(db, supplier_id)
    return SupplierResponse(**s_dict)

@router.post("/suppliers", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
def create_supplier(
    supplier: SupplierCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "create"))
):
    return catalog.create_supplier(db, supplier)

@router.put("/suppliers/{supplier_id}", response_model=SupplierResponse)
def update_supplier(
    supplier_id: str,
    supplier: SupplierUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "edit"))
):
    db_supplier = catalog.update_supplier(db, supplier_id, supplier)
    s_dict = SupplierResponse.model_validate(db_supplier).model_dump()
    s_dict["product_count"] = catalog.count_supplier_products(db, supplier_id)
    return SupplierResponse(**s_dict)

@router.delete("/suppliers/{supplier_id}")
def delete_supplier(
    supplier_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "delete"))
):
    """Delete a supplier - fails with 409 while products still use it"""
    catalog.delete_supplier(db, supplier_id)
    return {"message": "Supplier deleted successfully"}

# Products
@router.get("/products", response_model=List[ProductResponse])
def get_products(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    supplier_id: Optional[str] = None,
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "view"))
):
    """List products; search matches name or SKU"""
    return catalog.list_products(
        db,
        skip=skip,
        limit=limit,
        search=search,
        category_id=category_id,
        supplier_id=supplier_id,
        include_inactive=include_inactive,
    )

@router.get("/products/low-stock", response_model=List[LowStockProductResponse])
def get_low_stock_products(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("stock", "view"))
):
    """Active products whose stock is below their minimum"""
    result = []
    for row in reports.low_stock_products(db):
        p_dict = ProductResponse.model_validate(row["product"]).model_dump()
        p_dict["stock_deficit"] = row["stock_deficit"]
        result.append(LowStockProductResponse(**p_dict))
    return result

def _product_detail(db: Session, product: Product) -> ProductDetailResponse:
    p_dict = ProductResponse.model_validate(product).model_dump()
    p_dict["stock_logs"] = [
        StockLogResponse.model_validate(entry)
        for entry in stock_ledger.recent_entries(db, product.id, settings.STOCK_LOG_PREVIEW_LIMIT)
    ]
    return ProductDetailResponse(**p_dict)

@router.get("/products/{product_id}", response_model=ProductDetailResponse)
def get_product(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "view"))
):
    """Product with its most recent stock movements"""
    return _product_detail(db, catalog.get_product(db, product_id))

@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product: ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "create"))
):
    return catalog.create_product(db, product)

@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str,
    product_update: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "edit"))
):
    """Edit catalog fields. Stock is changed through adjust-stock or sales only."""
    return catalog.update_product(db, product_id, product_update)

@router.delete("/products/{product_id}")
def delete_product(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("catalog", "delete"))
):
    # Soft delete - sales and stock logs keep referencing the product
    catalog.deactivate_product(db, product_id)
    return {"message": "Product deactivated successfully"}

@router.post("/products/{product_id}/adjust-stock", response_model=ProductResponse)
def adjust_stock(
    product_id: str,
    adjustment: StockAdjust,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("stock", "adjust"))
):
    """Restock, correct or write off stock; the movement is recorded in the stock log"""
    return inventory.adjust_stock(
        db,
        product_id,
        quantity=adjustment.quantity,
        change_type=adjustment.change_type,
        notes=adjustment.notes,
    )

@router.get("/products/{product_id}/stock-logs", response_model=List[StockLogResponse])
def get_stock_logs(
    product_id: str,
    skip: int = 0,
    limit: int = Query(100, ge=1, le=1000),
    change_type: Optional[StockChangeType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission_dependency("stock", "view"))
):
    catalog.get_product(db, product_id)
    return stock_ledger.history(db, product_id, skip=skip, limit=limit, change_type=change_type)
