"""Initialize database with default roles and the first admin account"""
import sys
import os
from pathlib import Path

backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from dotenv import load_dotenv
load_dotenv(dotenv_path=backend_dir / '.env')

from stockroom.core.config import settings
from stockroom.core.database import SessionLocal, engine, Base
from stockroom.core.logging_config import setup_logging, get_logger
from stockroom.core.permissions import ADMIN, STAFF
from stockroom.core.security import get_password_hash
from stockroom.models.user import Role, User
import stockroom.models  # noqa: F401  registers every table on Base.metadata

logger = get_logger("scripts.init_db")

DEFAULT_ROLES = [
    {"name": ADMIN, "description": "Full access: catalog, stock, sales, reports and users"},
    {"name": STAFF, "description": "Point of sale: view catalog, record sales, view reports"},
]

def init_db(db=None):
    """Create tables, default roles and (if configured) the first admin user"""
    Base.metadata.create_all(bind=engine)

    own_session = db is None
    db = db or SessionLocal()
    try:
        for role_data in DEFAULT_ROLES:
            if not db.query(Role).filter(Role.name == role_data["name"]).first():
                db.add(Role(**role_data))
        db.flush()

        email = settings.FIRST_ADMIN_EMAIL
        password = settings.FIRST_ADMIN_PASSWORD
        if email and password:
            if not db.query(User).filter(User.email == email).first():
                admin_role = db.query(Role).filter(Role.name == ADMIN).one()
                db.add(User(
                    email=email,
                    full_name="Administrator",
                    hashed_password=get_password_hash(password),
                    role_id=admin_role.id,
                ))
                logger.info(f"Created first admin {email}")
        else:
            logger.warning("FIRST_ADMIN_EMAIL/FIRST_ADMIN_PASSWORD not set; no admin account created")

        db.commit()
        logger.info("Database initialized successfully")
    except Exception:
        db.rollback()
        logger.error("Error initializing database", exc_info=True)
        raise
    finally:
        if own_session:
            db.close()

if __name__ == "__main__":
    setup_logging()
    try:
        init_db()
    except Exception:
        sys.exit(1)
