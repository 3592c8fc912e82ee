# app/api/v1/endpoints/todos.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_current_user
from app.db.session import get_db
from app.models.users import User
from app.schemas.todo import TodoCreate, TodoEnvelope, TodoList, TodoRead, TodoUpdate
from app.services import todos as todo_service

router = APIRouter(tags=["todos"])


def _not_found() -> HTTPException:
    # id 格式錯誤、不存在、或屬於別人，一律 404
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")


@router.post("", response_model=TodoRead)
async def create_todo(
    payload: TodoCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await todo_service.create_todo(db, current_user, payload.text)


@router.get("", response_model=TodoList)
async def list_todos(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"todos": await todo_service.list_todos(db, current_user)}


@router.get("/{todo_id}", response_model=TodoEnvelope)
async def read_todo(
    todo_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    todo = await todo_service.get_todo(db, current_user, todo_id)
    if todo is None:
        raise _not_found()
    return {"todo": todo}


@router.delete("/{todo_id}", response_model=TodoEnvelope)
async def delete_todo(
    todo_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    todo = await todo_service.delete_todo(db, current_user, todo_id)
    if todo is None:
        raise _not_found()
    return {"todo": todo}


@router.patch("/{todo_id}", response_model=TodoEnvelope)
async def update_todo(
    todo_id: str,
    payload: TodoUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    todo = await todo_service.update_todo(
        db, current_user, todo_id, text=payload.text, completed=payload.completed
    )
    if todo is None:
        raise _not_found()
    return {"todo": todo}
