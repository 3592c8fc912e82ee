# app/core/deps.py
from typing import Optional
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import AuthError
from app.core.security import TokenCodec, get_token_codec
from app.db.session import get_db
from app.models.users import User
from app.services.users import find_by_token


# token 放在自訂 header（預設 x-auth）；缺少時不自動報錯，統一由 get_current_user 回 401
auth_header_scheme = APIKeyHeader(name=settings.AUTH_HEADER, auto_error=False)


async def get_auth_token(token: Optional[str] = Depends(auth_header_scheme)) -> str:
    if not token or not token.strip():
        raise AuthError()
    return token.strip()


async def get_current_user(
    token: str = Depends(get_auth_token),
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> User:
    """
    從 header token 解析目前使用者：
      1️⃣ 驗證簽章
      2️⃣ 確認 token 仍在使用者的清單（未登出）
    任一失敗 → AuthError（由 errors.py 轉成 401 {}）
    """
    return await find_by_token(db, token, codec)
