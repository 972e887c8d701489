from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from stockroom.core.config import settings
from stockroom.core.database import engine
from stockroom.core.exceptions import StockroomError
from stockroom.core.logging_config import setup_logging, get_logger
from stockroom.core.middleware import RequestIDMiddleware
from stockroom.api.v1 import api_router

# Setup logging
setup_logging()
logger = get_logger(__name__)

SERVICE_NAME = "Stockroom Inventory & POS API"
VERSION = "1.0.0"

app = FastAPI(
    title=SERVICE_NAME,
    description="Inventory, stock ledger and point-of-sale backend for a small business",
    version=VERSION
)

# Request ID middleware (add first for request tracking)
if settings.LOG_REQUEST_ID:
    app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

@app.exception_handler(StockroomError)
async def stockroom_error_handler(request: Request, exc: StockroomError):
    """Map domain errors raised by the services to JSON responses"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

# Include routers
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {"message": SERVICE_NAME, "version": VERSION}

@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}

@app.get("/health/detailed")
def health_detailed():
    """Detailed health check with database connectivity"""
    health_info = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION
    }

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        health_info["database"] = "connected"
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        health_info["database"] = f"error: {str(e)}"
        health_info["status"] = "degraded"

    return health_info
