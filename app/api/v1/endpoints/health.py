# app/api/v1/endpoints/health.py
from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()

@router.get("/", summary="Health check")
async def health_root():
    return {"status": "ok", "app": settings.APP_NAME}
