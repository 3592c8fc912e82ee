# app/core/security.py
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, NamedTuple, Optional
from uuid import uuid4

from jose import jwt, JWTError
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.errors import InvalidToken

# 本系統只有一種 access scope
ACCESS_AUTH = "auth"

# === Password Hashing ===
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",
    bcrypt__default_rounds=settings.BCRYPT_ROUNDS,
    # 若密碼超過 72 bytes，不拋錯（與現有流程相容）
    bcrypt__truncate_error=False,
)

def _sanitize_password(p: str) -> str:
    # bcrypt 只吃前 72 bytes，避免極長密碼在某些環境報錯
    return p[:72] if isinstance(p, str) else p

def hash_password(plain: str) -> str:
    # 每次呼叫都會產生新的 salt
    return pwd_context.hash(_sanitize_password(plain))

def verify_password(plain: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(_sanitize_password(plain), password_hash)
    except (ValueError, TypeError):
        # 存的 hash 格式壞掉 → 視同不符
        return False

async def hash_password_async(plain: str) -> str:
    """bcrypt 很吃 CPU，丟到 threadpool 避免卡住事件圈"""
    return await run_in_threadpool(hash_password, plain)

async def verify_password_async(plain: str, password_hash: str) -> bool:
    return await run_in_threadpool(verify_password, plain, password_hash)


# === JWT ===
class TokenClaims(NamedTuple):
    subject_id: str
    access: str


class TokenCodec:
    """
    簽發 / 驗證 session token。
    金鑰由建構子注入（不讀全域），測試可自行建立獨立的 codec。
    payload 只有簽章沒有加密，不可放任何機密。
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: Optional[int] = None):
        if not secret:
            raise ValueError("TokenCodec requires a non-empty secret")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def expires_at(self, issued_at: datetime) -> Optional[datetime]:
        if not self.expire_minutes:
            return None
        return issued_at + timedelta(minutes=self.expire_minutes)

    def issue(self, user_id: str, issued_at: Optional[datetime] = None) -> str:
        """
        簽發 token：sub / access / jti / iat，有設定過期時間才加 exp。
        jti 讓同一秒內的多次登入也拿到不同字串。
        """
        now = issued_at or datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "sub": str(user_id),
            "access": ACCESS_AUTH,
            "jti": uuid4().hex,
            "iat": int(now.timestamp()),
        }
        exp = self.expires_at(now)
        if exp is not None:
            claims["exp"] = int(exp.timestamp())
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        驗證簽章並取出 (subject_id, access)。
        任何問題（空字串、亂碼、簽章不符、過期、欄位缺漏）一律 InvalidToken。
        """
        if not token or not isinstance(token, str):
            raise InvalidToken("empty token")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidToken(str(e)) from e

        sub = payload.get("sub")
        access = payload.get("access")
        if not isinstance(sub, str) or not sub or not isinstance(access, str):
            raise InvalidToken("malformed token payload")
        return TokenClaims(subject_id=sub, access=access)


@lru_cache
def get_token_codec() -> TokenCodec:
    """FastAPI 依賴：整個 process 共用同一把金鑰"""
    return TokenCodec(
        settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.TOKEN_EXPIRE_MINUTES,
    )
