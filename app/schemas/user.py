# app/schemas/user.py
from typing import Optional

from pydantic import BaseModel

class UserCreate(BaseModel):
    # 允許缺省：email 格式與密碼長度交給 services.users.register 驗證，
    # 才能回 400 並標出是哪個欄位
    email: Optional[str] = None
    password: Optional[str] = None

class LoginRequest(BaseModel):
    # 缺欄位同樣走 find_by_credentials → 400 Invalid credentials
    email: Optional[str] = None
    password: Optional[str] = None

class UserRead(BaseModel):
    # 對外只露出 id / email
    id: str
    email: str

    class Config:
        # Pydantic v2：允許從 ORM 物件轉模型
        from_attributes = True
