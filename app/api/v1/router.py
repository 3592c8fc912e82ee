# app/api/v1/router.py
from fastapi import APIRouter

# 匯入所有已定義的 endpoint 模組
from .endpoints import health, ping, users, auth, todos

# === API 主路由 ===
api_router = APIRouter()

# 系統健康檢查
api_router.include_router(health.router, prefix="/health", tags=["health"])

# ping 用於連線測試
api_router.include_router(ping.router, prefix="/ping", tags=["ping"])

# 使用者註冊
api_router.include_router(users.router, prefix="/users", tags=["users"])

# 登入 / 目前使用者 / 登出（同樣掛在 /users 底下）
api_router.include_router(auth.router, prefix="/users", tags=["auth"])

# 待辦事項（需要登入）
api_router.include_router(todos.router, prefix="/todos", tags=["todos"])
