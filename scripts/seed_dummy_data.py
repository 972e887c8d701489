"""Seed database with sample users, catalog and sales"""
import sys
from pathlib import Path

# Add parent directory to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(dotenv_path=backend_dir / '.env')

from decimal import Decimal
from stockroom.core.database import SessionLocal
from stockroom.core.logging_config import setup_logging, get_logger
from stockroom.core.permissions import ADMIN, STAFF
from stockroom.core.security import get_password_hash
from stockroom.models.user import User, Role
from stockroom.models.inventory import Category, Supplier, Product
from stockroom.schemas.inventory import ProductCreate
from stockroom.services import catalog, sales

logger = get_logger("scripts.seed_dummy_data")

USERS = [
    {"email": "admin@test.com", "full_name": "Admin User", "role": ADMIN, "password": "password123"},
    {"email": "staff@test.com", "full_name": "Staff User", "role": STAFF, "password": "password123"},
]

CATEGORIES = ["Electronics", "Furniture", "Office Supplies"]

SUPPLIERS = [
    {"name": "Tech Distributors Inc.", "email": "sales@techdist.com", "phone": "+1-555-1000"},
    {"name": "Furniture World", "email": "orders@furnitureworld.com", "phone": "+1-555-2000"},
    {"name": "Office Mart", "email": "info@officemart.com", "phone": "+1-555-3000"},
]

# name, sku, price, cost, stock, min_stock, category, supplier
PRODUCTS = [
    ("Wireless Mouse", "ELEC-001", "29.99", "15.00", 50, 10, "Electronics", "Tech Distributors Inc."),
    ("Mechanical Keyboard", "ELEC-002", "89.99", "45.00", 30, 5, "Electronics", "Tech Distributors Inc."),
    ("USB-C Hub", "ELEC-003", "49.99", "25.00", 25, 10, "Electronics", "Tech Distributors Inc."),
    ("Webcam HD", "ELEC-004", "79.99", "40.00", 8, 10, "Electronics", "Tech Distributors Inc."),
    ("Office Chair", "FURN-001", "199.99", "100.00", 15, 5, "Furniture", "Furniture World"),
    ("Standing Desk", "FURN-002", "399.99", "200.00", 10, 3, "Furniture", "Furniture World"),
    ("Desk Lamp", "FURN-003", "39.99", "20.00", 40, 10, "Furniture", "Furniture World"),
    ("Notebook Set", "SUPP-001", "12.99", "6.00", 100, 20, "Office Supplies", "Office Mart"),
    ("Pen Pack (12pcs)", "SUPP-002", "8.99", "4.00", 150, 30, "Office Supplies", "Office Mart"),
    ("Sticky Notes", "SUPP-003", "5.99", "2.50", 200, 50, "Office Supplies", "Office Mart"),
]

SALES = [
    [("ELEC-001", 2), ("SUPP-001", 2), ("SUPP-002", 2)],
    [("ELEC-002", 1), ("FURN-001", 1)],
]

def seed_dummy_data():
    """Populate the catalog and record a couple of sales through the sale service"""
    db = SessionLocal()
    try:
        roles = {role.name: role for role in db.query(Role).all()}
        if ADMIN not in roles or STAFF not in roles:
            logger.error("Roles not found. Please run init_db.py first.")
            return

        for user_data in USERS:
            if not db.query(User).filter(User.email == user_data["email"]).first():
                db.add(User(
                    email=user_data["email"],
                    full_name=user_data["full_name"],
                    hashed_password=get_password_hash(user_data["password"]),
                    role_id=roles[user_data["role"]].id,
                ))
        db.commit()
        logger.info(f"Seeded {len(USERS)} users")

        categories = {}
        for name in CATEGORIES:
            category = db.query(Category).filter(Category.name == name).first()
            if not category:
                category = Category(name=name)
                db.add(category)
            categories[name] = category

        suppliers = {}
        for supplier_data in SUPPLIERS:
            supplier = db.query(Supplier).filter(Supplier.name == supplier_data["name"]).first()
            if not supplier:
                supplier = Supplier(**supplier_data)
                db.add(supplier)
            suppliers[supplier_data["name"]] = supplier
        db.commit()
        logger.info(f"Seeded {len(categories)} categories and {len(suppliers)} suppliers")

        created = 0
        for name, sku, price, cost, stock, min_stock, category_name, supplier_name in PRODUCTS:
            if db.query(Product).filter(Product.sku == sku).first():
                continue
            catalog.create_product(db, ProductCreate(
                name=name,
                sku=sku,
                price=Decimal(price),
                cost=Decimal(cost),
                stock=stock,
                min_stock=min_stock,
                category_id=categories[category_name].id,
                supplier_id=suppliers[supplier_name].id,
            ))
            created += 1
        logger.info(f"Seeded {created} products")

        if created:
            product_ids = {p.sku: p.id for p in db.query(Product).all()}
            for lines in SALES:
                sale = sales.create_sale(db, [(product_ids[sku], quantity) for sku, quantity in lines])
                logger.info(f"Seeded sale {sale.id} ({sale.total})")

        logger.info("Dummy data seeding completed")
    except Exception:
        db.rollback()
        logger.error("Error seeding dummy data", exc_info=True)
        raise
    finally:
        db.close()

if __name__ == "__main__":
    setup_logging()
    seed_dummy_data()
