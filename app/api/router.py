from fastapi import APIRouter

from app.api.routers.chat import router as chat_router
from app.api.routers.presentations import router as presentations_router
from app.api.routers.private import router as private_router

api_router = APIRouter()
api_router.include_router(chat_router)
api_router.include_router(presentations_router)
api_router.include_router(private_router)
