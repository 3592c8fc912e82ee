# app/services/scheduler.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from fastapi import FastAPI  # 型別標註用

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.db.session import AsyncSessionLocal
from app.services.token_cleanup import cleanup_expired_tokens

logger = logging.getLogger(__name__)

scheduler: Optional[AsyncIOScheduler] = None

@asynccontextmanager
async def lifespan_scheduler(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan：啟動 / 關閉 APScheduler。
    token 沒設定過期時間時沒有東西需要清，就不啟動排程。
    """
    global scheduler
    if not settings.TOKEN_EXPIRE_MINUTES:
        logger.info("Token expiry disabled; cleanup scheduler not started")
        yield
        return

    interval = settings.TOKEN_CLEANUP_INTERVAL_MINUTES
    scheduler = AsyncIOScheduler(timezone="UTC")
    scheduler.add_job(run_cleanup_job, IntervalTrigger(minutes=interval))
    scheduler.start()
    logger.info("APScheduler started: expired token cleanup every %s minutes", interval)
    try:
        yield
    finally:
        scheduler.shutdown(wait=False)
        scheduler = None
        logger.info("APScheduler shutdown")

async def run_cleanup_job() -> int:
    """排程作業：建立一次性 DB session 來清理過期 token。"""
    async with AsyncSessionLocal() as db:
        try:
            deleted = await cleanup_expired_tokens(db)
        except Exception:
            logger.exception("Token cleanup failed")
            await db.rollback()
            return 0
    logger.info("Token cleanup done", extra={"deleted": deleted})
    return deleted
