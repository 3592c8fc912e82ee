# app/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import TokenCodec, get_token_codec
from app.db.session import get_db
from app.schemas.user import UserCreate, UserRead
from app.services.users import issue_session, register

router = APIRouter(tags=["users"])

# === 註冊（開放） ===
@router.post("", response_model=UserRead)
async def create_user(
    payload: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
):
    # 格式 / 長度 / 重複 email 的錯誤由 ValidationError handler 轉成 400
    user = await register(db, payload.email, payload.password)

    # 註冊完直接發第一個 session，token 放在 header
    token = await issue_session(db, user, codec)
    response.headers[settings.AUTH_HEADER] = token
    return user
