# app/models/__init__.py
# 集中匯入，確保 relationship 以字串引用時所有 mapper 都已註冊
from app.models.base import Base
from app.models.users import User
from app.models.user_tokens import UserToken
from app.models.todos import Todo

__all__ = ["Base", "User", "UserToken", "Todo"]
