from fastapi import APIRouter
from stockroom.api.v1 import auth, inventory, sales, reports

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(inventory.router, tags=["Inventory"])
api_router.include_router(sales.router, prefix="/sales", tags=["Sales"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
