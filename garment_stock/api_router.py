from fastapi import APIRouter
from .api import cutting_records, manufacturing_orders, qr_products, transactions, stock_room, fabrics, system

# Create main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(fabrics.router, prefix="/api", tags=["Fabrics"])
api_router.include_router(cutting_records.router, prefix="/api", tags=["Cutting Records"])
api_router.include_router(manufacturing_orders.router, prefix="/api", tags=["Manufacturing Orders"])
api_router.include_router(qr_products.router, prefix="/api", tags=["QR Products"])
api_router.include_router(transactions.router, prefix="/api", tags=["Transactions"])
api_router.include_router(stock_room.router, prefix="/api", tags=["Stock Room"])
api_router.include_router(system.router, prefix="/api", tags=["System"])
