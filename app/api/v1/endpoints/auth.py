# app/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, HTTPException, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.deps import get_auth_token, get_current_user
from app.core.errors import AuthError
from app.core.security import TokenCodec, get_token_codec
from app.db.session import get_db
from app.models.users import User
from app.schemas.user import LoginRequest, UserRead
from app.services.users import INVALID_CREDENTIALS, find_by_credentials, issue_session, remove_token

router = APIRouter(tags=["auth"])


# === 登入 ===
@router.post("/login", response_model=UserRead)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    """
    帳密正確 → 附加一個新 token（多裝置可同時登入），放在 x-auth header。
    帳密錯誤 → 400，不區分「查無帳號」或「密碼錯誤」。
    """
    try:
        user = await find_by_credentials(db, payload.email, payload.password)
    except AuthError:
        # 統一訊息避免帳號探測
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_CREDENTIALS)

    token = await issue_session(db, user, codec)
    response.headers[settings.AUTH_HEADER] = token
    return user


# === 目前登入者 ===
@router.get("/me", response_model=UserRead)
async def read_me(current_user: User = Depends(get_current_user)):
    return current_user


# === 登出（只移除這次帶來的 token） ===
@router.delete("/me/token", response_model=dict)
async def logout(
    current_user: User = Depends(get_current_user),
    token: str = Depends(get_auth_token),
    db: AsyncSession = Depends(get_db),
):
    await remove_token(db, current_user, token)
    logger.info("User {} logged out", current_user.id)
    return {"detail": "Logged out"}
