# app/services/todos.py
import time
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ValidationError
from app.models.base import is_valid_id
from app.models.todos import Todo
from app.models.users import User


def _now_ms() -> int:
    return int(time.time() * 1000)


def _clean_text(raw: Optional[str]) -> str:
    text = (raw or "").strip()
    if not text:
        raise ValidationError("text", "Path `text` is required", entity="Todo")
    return text


async def create_todo(db: AsyncSession, user: User, text: Optional[str]) -> Todo:
    todo = Todo(text=_clean_text(text), completed=False, completed_at=None, creator=user.id)
    db.add(todo)
    await db.commit()
    return todo


async def list_todos(db: AsyncSession, user: User) -> List[Todo]:
    q = select(Todo).where(Todo.creator == user.id).order_by(Todo.created_at, Todo.id)
    result = await db.execute(q)
    return list(result.scalars().all())


async def get_todo(db: AsyncSession, user: User, todo_id: str) -> Optional[Todo]:
    """id 格式不對、不存在、或不是自己的，一律回 None"""
    if not is_valid_id(todo_id):
        return None
    q = select(Todo).where(Todo.id == todo_id, Todo.creator == user.id)
    result = await db.execute(q)
    return result.scalar_one_or_none()


async def delete_todo(db: AsyncSession, user: User, todo_id: str) -> Optional[Todo]:
    todo = await get_todo(db, user, todo_id)
    if todo is None:
        return None
    await db.delete(todo)
    await db.commit()
    return todo


async def update_todo(
    db: AsyncSession,
    user: User,
    todo_id: str,
    text: Optional[str] = None,
    completed: Optional[bool] = None,
) -> Optional[Todo]:
    """
    只處理 text / completed：
      - completed 為 True → 記錄完成時間（毫秒）
      - 其他情況 → completed=False，completed_at 清空
    """
    todo = await get_todo(db, user, todo_id)
    if todo is None:
        return None

    if text is not None:
        todo.text = _clean_text(text)

    if completed is True:
        todo.completed = True
        todo.completed_at = _now_ms()
    else:
        todo.completed = False
        todo.completed_at = None

    await db.commit()
    return todo
