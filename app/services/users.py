# app/services/users.py
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import AuthError, InvalidToken, ValidationError
from app.core.security import (
    ACCESS_AUTH,
    TokenCodec,
    hash_password,
    hash_password_async,
    verify_password_async,
)
from app.models.user_tokens import UserToken
from app.models.users import User

# 帳號不存在 / 密碼錯誤共用同一訊息，避免帳號探測
INVALID_CREDENTIALS = "Invalid credentials"


@lru_cache
def _dummy_hash() -> str:
    # 帳號不存在時拿來陪跑 bcrypt，讓回應時間和密碼錯誤一致
    return hash_password("not-a-real-password")


def _check_email(raw: Optional[str]) -> str:
    email = (raw or "").strip()
    if not email:
        raise ValidationError("email", "Path `email` is required")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("email", f"{email} is not a valid email")
    return email


def _check_password(raw: Optional[str]) -> str:
    password = raw or ""
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            "password",
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
        )
    return password


async def _get_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


# === 註冊 ===
async def register(db: AsyncSession, email: Optional[str], password: Optional[str]) -> User:
    """
    建立帳號：
      1️⃣ 驗 email 格式（去頭尾空白）
      2️⃣ 驗密碼長度
      3️⃣ email 是否已被註冊（DB 唯一索引再擋一次）
      4️⃣ 先雜湊，再寫入
    新帳號不帶任何 token；登入後才會有。
    """
    email = _check_email(email)
    password = _check_password(password)

    if await _get_by_email(db, email) is not None:
        raise ValidationError("email", "Email is already registered")

    user = User(
        email=email,
        password_hash=await hash_password_async(password),
        tokens=[],
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # 併發註冊同一 email，交給 unique index 判定
        await db.rollback()
        raise ValidationError("email", "Email is already registered")

    logger.info("User registered: {}", user.id)
    return user


# === 帳密登入 ===
async def find_by_credentials(
    db: AsyncSession, email: Optional[str], password: Optional[str]
) -> User:
    user = await _get_by_email(db, (email or "").strip())
    if user is None:
        await verify_password_async(password or "", _dummy_hash())
        raise AuthError(INVALID_CREDENTIALS)
    if not await verify_password_async(password or "", user.password_hash):
        raise AuthError(INVALID_CREDENTIALS)
    return user


# === 簽發 session token ===
async def issue_session(db: AsyncSession, user: User, codec: TokenCodec) -> str:
    """
    簽發 token 並附加到使用者的 token 清單。
    只做單筆 INSERT（不整包讀出再寫回），併發登入 / 登出不會互相覆蓋。
    commit 失敗就 rollback 並往上丟，不回傳 token。
    """
    # rollback 後 user 會被 expire，先記下 id
    user_id = user.id
    now = datetime.now(timezone.utc)
    token = codec.issue(user_id, issued_at=now)
    expires_at = codec.expires_at(now)

    db.add(UserToken(
        user_id=user_id,
        access=ACCESS_AUTH,
        token=token,
        expires_at=expires_at.replace(tzinfo=None) if expires_at else None,  # DB 存 naive UTC
    ))
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Failed to persist session token for user {}", user_id)
        raise

    await db.refresh(user, attribute_names=["tokens"])
    logger.info("Session issued for user {}", user_id)
    return token


# === 用 token 找使用者 ===
async def find_by_token(db: AsyncSession, token: str, codec: TokenCodec) -> User:
    """
    兩段檢查都要過：
      - 簽章有效（codec.verify）
      - token 字串仍存在於該使用者的清單（沒被登出）
    """
    try:
        claims = codec.verify(token)
    except InvalidToken as e:
        logger.debug("Rejected token: {}", e)
        raise AuthError()

    if claims.access != ACCESS_AUTH:
        raise AuthError()

    q = (
        select(User)
        .join(UserToken, UserToken.user_id == User.id)
        .where(
            User.id == claims.subject_id,
            UserToken.token == token,
            UserToken.access == ACCESS_AUTH,
        )
    )
    result = await db.execute(q)
    user = result.scalars().first()
    if user is None:
        logger.debug("Token not found for user {} (revoked?)", claims.subject_id)
        raise AuthError()
    return user


# === 登出：移除單一 token ===
async def remove_token(db: AsyncSession, user: User, token: str) -> None:
    """單筆 DELETE；找不到就什麼都不做"""
    stmt = delete(UserToken).where(
        UserToken.user_id == user.id,
        UserToken.token == token,
    )
    result = await db.execute(stmt)
    await db.commit()
    await db.refresh(user, attribute_names=["tokens"])
    if result.rowcount:
        logger.info("Session removed for user {}", user.id)
