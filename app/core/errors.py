# app/core/errors.py
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException


# === 領域例外 ===
class ValidationError(Exception):
    """輸入不符規則（email 格式、密碼長度、email 重複、todo 文字空白）。"""

    def __init__(self, field: str, reason: str, *, entity: str = "User"):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason
        self.entity = entity


class AuthError(Exception):
    """帳密不符或 token 無效 / 已登出。訊息刻意統一，不透露是哪一種。"""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class InvalidToken(Exception):
    """簽章 / 格式錯誤；只在 security 與 services 之間流動，不會直接到邊界。"""


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):
        # 統一輸出格式
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):
        # 客製化，但保持資訊節制
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(ValidationError)
    async def domain_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "detail": f"{exc.entity} validation failed",
                "errors": [{"field": exc.field, "reason": exc.reason}],
            },
        )

    @app.exception_handler(AuthError)
    async def auth_exc_handler(request: Request, exc: AuthError):
        # 不帶任何細節
        return JSONResponse(status_code=401, content={})

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        # 小強化：避免洩露伺服器細節
        resp = await call_next(request)
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        return resp
