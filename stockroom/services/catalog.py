"""Products, categories and suppliers: the reference data sales and stock hang off."""
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from stockroom.core.exceptions import ConflictError, NotFoundError
from stockroom.core.logging_config import get_logger
from stockroom.models.inventory import Category, Product, StockChangeType, Supplier
from stockroom.schemas.inventory import (
    CategoryCreate, CategoryUpdate,
    ProductCreate, ProductUpdate,
    SupplierCreate, SupplierUpdate,
)
from stockroom.services import stock_ledger

logger = get_logger(__name__)


def _commit(db: Session, conflict_message: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(conflict_message) from e
    except Exception:
        db.rollback()
        raise


# Categories

def list_categories(db: Session, skip: int = 0, limit: int = 100) -> List[Tuple[Category, int]]:
    """Categories with the number of products (active or not) filed under each."""
    return (
        db.query(Category, func.count(Product.id))
        .outerjoin(Product, Product.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_category(db: Session, category_id: str) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError(f"Category with ID {category_id} not found")
    return category


def count_category_products(db: Session, category_id: str) -> int:
    return db.query(func.count(Product.id)).filter(Product.category_id == category_id).scalar()


def create_category(db: Session, data: CategoryCreate) -> Category:
    if db.query(Category).filter(Category.name == data.name).first():
        raise ConflictError(f"Category '{data.name}' already exists")

    category = Category(**data.model_dump())
    db.add(category)
    _commit(db, f"Category '{data.name}' already exists")
    db.refresh(category)
    logger.info(f"Created category {category.name}", extra={"category_id": category.id})
    return category


def update_category(db: Session, category_id: str, data: CategoryUpdate) -> Category:
    category = get_category(db, category_id)
    update_data = data.model_dump(exclude_unset=True)

    new_name = update_data.get("name")
    if new_name and new_name != category.name:
        if db.query(Category).filter(Category.name == new_name).first():
            raise ConflictError(f"Category '{new_name}' already exists")

    for field, value in update_data.items():
        setattr(category, field, value)

    _commit(db, f"Category '{new_name}' already exists")
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: str) -> None:
    category = get_category(db, category_id)
    in_use = count_category_products(db, category_id)
    if in_use:
        raise ConflictError(
            f"Category '{category.name}' still has {in_use} product(s)",
            product_count=in_use,
        )
    db.delete(category)
    _commit(db, f"Category '{category.name}' is still referenced")
    logger.info(f"Deleted category {category_id}")


# Suppliers

def list_suppliers(db: Session, skip: int = 0, limit: int = 100) -> List[Tuple[Supplier, int]]:
    return (
        db.query(Supplier, func.count(Product.id))
        .outerjoin(Product, Product.supplier_id == Supplier.id)
        .group_by(Supplier.id)
        .order_by(Supplier.name)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_supplier(db: Session, supplier_id: str) -> Supplier:
    supplier = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not supplier:
        raise NotFoundError(f"Supplier with ID {supplier_id} not found")
    return supplier


def count_supplier_products(db: Session, supplier_id: str) -> int:
    return db.query(func.count(Product.id)).filter(Product.supplier_id == supplier_id).scalar()


def create_supplier(db: Session, data: SupplierCreate) -> Supplier:
    supplier = Supplier(**data.model_dump())
    db.add(supplier)
    _commit(db, "Supplier could not be created")
    db.refresh(supplier)
    logger.info(f"Created supplier {supplier.name}", extra={"supplier_id": supplier.id})
    return supplier


def update_supplier(db: Session, supplier_id: str, data: SupplierUpdate) -> Supplier:
    supplier = get_supplier(db, supplier_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(supplier, field, value)
    _commit(db, "Supplier could not be updated")
    db.refresh(supplier)
    return supplier


def delete_supplier(db: Session, supplier_id: str) -> None:
    supplier = get_supplier(db, supplier_id)
    in_use = count_supplier_products(db, supplier_id)
    if in_use:
        raise ConflictError(
            f"Supplier '{supplier.name}' still supplies {in_use} product(s)",
            product_count=in_use,
        )
    db.delete(supplier)
    _commit(db, f"Supplier '{supplier.name}' is still referenced")
    logger.info(f"Deleted supplier {supplier_id}")


# Products

def list_products(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    category_id: Optional[str] = None,
    supplier_id: Optional[str] = None,
    include_inactive: bool = False,
) -> List[Product]:
    query = db.query(Product).options(joinedload(Product.category), joinedload(Product.supplier))
    if not include_inactive:
        query = query.filter(Product.is_active.is_(True))
    if category_id:
        query = query.filter(Product.category_id == category_id)
    if supplier_id:
        query = query.filter(Product.supplier_id == supplier_id)
    if search:
        pattern = f"%{search}%"
        query = query.filter(Product.name.ilike(pattern) | Product.sku.ilike(pattern))
    return query.order_by(Product.name).offset(skip).limit(limit).all()


def get_product(db: Session, product_id: str) -> Product:
    product = (
        db.query(Product)
        .options(joinedload(Product.category), joinedload(Product.supplier))
        .filter(Product.id == product_id)
        .first()
    )
    if not product:
        raise NotFoundError(f"Product with ID {product_id} not found")
    return product


def _check_sku_free(db: Session, sku: str, product_id: Optional[str] = None) -> None:
    existing = db.query(Product).filter(Product.sku == sku).first()
    if existing and existing.id != product_id:
        raise ConflictError(f"Product with SKU {sku} already exists", sku=sku)


def create_product(db: Session, data: ProductCreate) -> Product:
    """
    Create a product. Opening stock is written to the ledger as a RESTOCK
    from zero in the same transaction.
    """
    _check_sku_free(db, data.sku)
    get_category(db, data.category_id)
    get_supplier(db, data.supplier_id)

    product = Product(**data.model_dump())
    db.add(product)
    try:
        db.flush()
        if product.stock > 0:
            stock_ledger.append(
                db,
                product_id=product.id,
                change_type=StockChangeType.RESTOCK,
                quantity=product.stock,
                before=0,
                after=product.stock,
                notes="Initial stock",
            )
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(f"Product with SKU {data.sku} already exists", sku=data.sku) from e
    except Exception:
        db.rollback()
        raise
    _commit(db, f"Product with SKU {data.sku} already exists")

    logger.info(f"Created product {product.sku}", extra={"product_id": product.id})
    return get_product(db, product.id)


def update_product(db: Session, product_id: str, data: ProductUpdate) -> Product:
    product = get_product(db, product_id)
    # description is the only nullable catalog field
    update_data = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field == "description"
    }

    if update_data.get("sku") is not None:
        _check_sku_free(db, update_data["sku"], product_id)
    if update_data.get("category_id") is not None:
        get_category(db, update_data["category_id"])
    if update_data.get("supplier_id") is not None:
        get_supplier(db, update_data["supplier_id"])

    for field, value in update_data.items():
        setattr(product, field, value)

    if "sku" in update_data:
        _commit(db, f"Product with SKU {update_data['sku']} already exists")
    else:
        _commit(db, f"Product {product_id} could not be updated")
    return get_product(db, product_id)


def deactivate_product(db: Session, product_id: str) -> Product:
    """Soft delete: sale items and ledger entries keep pointing at the row."""
    product = get_product(db, product_id)
    product.is_active = False
    _commit(db, "Product could not be deactivated")
    logger.info(f"Deactivated product {product.sku}", extra={"product_id": product_id})
    return product
