from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./stockroom.db"

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS - comma separated list of allowed origins
    FRONTEND_URLS: str = "http://localhost:5173,http://localhost:3000"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" or "json"
    LOG_REQUEST_ID: bool = True  # Enable request ID tracking

    # Inventory
    STOCK_LOG_PREVIEW_LIMIT: int = 20  # ledger entries embedded in product detail
    DASHBOARD_TOP_N: int = 10

    # Bootstrap admin (scripts/init_db.py)
    FIRST_ADMIN_EMAIL: Optional[str] = None
    FIRST_ADMIN_PASSWORD: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.FRONTEND_URLS.split(",") if o.strip()]

settings = Settings()
