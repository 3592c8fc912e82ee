# app/services/token_cleanup.py
from datetime import datetime, timezone
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user_tokens import UserToken

async def cleanup_expired_tokens(db: AsyncSession) -> int:
    """刪除已過期的 session token，回傳刪除數量。expires_at 為 NULL 的永不過期，不動。"""
    now = datetime.now(timezone.utc).replace(tzinfo=None)  # DB 多半是 naive UTC
    stmt = delete(UserToken).where(UserToken.expires_at.is_not(None), UserToken.expires_at < now)
    res = await db.execute(stmt)
    await db.commit()
    return res.rowcount or 0
