"""API routes."""

from fastapi import APIRouter

from tableside.api.routes import (
    menu,
    orders,
    tables,
    service_requests,
    billing_requests,
    reservations,
    feedback,
    loyalty,
)

api_router = APIRouter()

api_router.include_router(menu.router)
api_router.include_router(orders.router)
api_router.include_router(tables.router)
api_router.include_router(service_requests.router)
api_router.include_router(billing_requests.router)
api_router.include_router(reservations.router)
api_router.include_router(feedback.router)
api_router.include_router(loyalty.router)
