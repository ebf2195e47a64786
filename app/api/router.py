from fastapi import APIRouter
from app.api.endpoints import users, toasts, seed

api_router = APIRouter()

# Combine all sub-routers into one
api_router.include_router(users.router)
api_router.include_router(toasts.router)
api_router.include_router(seed.router)
