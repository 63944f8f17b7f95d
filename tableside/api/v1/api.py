"""API v1 router composition."""

from fastapi import APIRouter

from tableside.api.v1.endpoints import billing, coupons, items, restaurants, tables

api_router: APIRouter = APIRouter()
api_router.include_router(tables.router, prefix="/tables", tags=["tables"])
api_router.include_router(restaurants.router, prefix="/restaurants", tags=["restaurants"])
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(coupons.router, prefix="/coupons", tags=["coupons"])
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
