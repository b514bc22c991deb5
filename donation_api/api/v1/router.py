"""
API v1 router - aggregates all endpoint modules.
"""

from fastapi import APIRouter

from donation_api.api.v1.endpoints import health, products, users

api_router = APIRouter(prefix="/v1")

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
