"""
API v1 router aggregation.
"""
from fastapi import APIRouter

from routedesk.api.v1.endpoints import orders, drivers, routes

api_router = APIRouter()

api_router.include_router(
    orders.router,
    prefix="/orders",
    tags=["Orders"],
)

api_router.include_router(
    drivers.router,
    prefix="/drivers",
    tags=["Drivers"],
)

api_router.include_router(
    routes.router,
    prefix="/routes",
    tags=["Routes"],
)
