# app/models/base.py
import re
from uuid import uuid4

from sqlalchemy.orm import DeclarativeBase

_ID_RE = re.compile(r"[0-9a-f]{32}")


class Base(DeclarativeBase):
    pass


def new_id() -> str:
    """不透明的 32 字元 hex id（users / todos 共用）"""
    return uuid4().hex


def is_valid_id(value: str) -> bool:
    return isinstance(value, str) and _ID_RE.fullmatch(value) is not None
