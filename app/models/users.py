# app/models/users.py
from datetime import datetime
from typing import List, TYPE_CHECKING
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.models.base import Base, new_id

if TYPE_CHECKING:
    from app.models.user_tokens import UserToken


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    # 只存 bcrypt 雜湊，永遠不存明文
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    # 依 UserToken.id 排序 = 附加順序；selectin 讓 async 查詢時一併載入
    tokens: Mapped[List["UserToken"]] = relationship(
        back_populates="user",
        order_by="UserToken.id",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
