# app/schemas/todo.py
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictBool


class TodoCreate(BaseModel):
    # 允許缺省，空白 / 缺少時由 service 回 400（field=text）
    text: Optional[str] = None


class TodoUpdate(BaseModel):
    # 只接受這兩個欄位，其餘一律忽略
    text: Optional[str] = None
    # 不做字串轉型："true" 不算完成
    completed: Optional[StrictBool] = None


class TodoRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    text: str
    completed: bool
    # 從 ORM 讀 completed_at，輸出成 completedAt（epoch ms）
    completed_at: Optional[int] = Field(None, serialization_alias="completedAt")
    creator: str


class TodoEnvelope(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    todo: TodoRead


class TodoList(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    todos: List[TodoRead]
