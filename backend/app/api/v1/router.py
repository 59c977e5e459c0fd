from fastapi import APIRouter

from app.api.v1 import dashboard, insights, stores, users

api_router = APIRouter()

api_router.include_router(users.router, tags=["users"])
api_router.include_router(stores.router, prefix="/stores", tags=["stores"])
api_router.include_router(insights.router, prefix="/insights", tags=["insights"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
