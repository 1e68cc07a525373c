"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from fxdash.api.v1.endpoints import prices, indicators, market, dashboard

router = APIRouter()

# Include all endpoint routers
router.include_router(prices.router, prefix="/eur-usd", tags=["Price History"])
router.include_router(indicators.router, prefix="/eur-usd", tags=["Indicators"])
router.include_router(market.router, prefix="/market", tags=["Market Data"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
