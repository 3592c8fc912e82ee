# tests/conftest.py
import asyncio
import os
from typing import Tuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import delete

# ---- 測試期環境變數（先於 app 載入）----
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
# bcrypt 最低成本，讓測試不要太慢
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from app.main import app  # noqa: E402
from app.db.session import AsyncSessionLocal, engine  # noqa: E402
from app.models import Base, Todo, User, UserToken  # noqa: E402
from app.core.security import TokenCodec  # noqa: E402

metadata = Base.metadata


@pytest.fixture(scope="session", autouse=True)
def create_test_db():
    """測試前自動 create_all，測試後 drop_all（用 asyncio.run 避免事件圈衝突）。"""
    async def init_models():
        async with engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)
            await conn.run_sync(metadata.create_all)

    async def drop_models():
        async with engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)
        await engine.dispose()

    asyncio.run(init_models())
    yield
    asyncio.run(drop_models())


@pytest_asyncio.fixture(autouse=True)
async def clean_tables():
    """每個測試從空資料表開始，避免測試間互相影響。"""
    async with AsyncSessionLocal() as session:
        await session.execute(delete(Todo))
        await session.execute(delete(UserToken))
        await session.execute(delete(User))
        await session.commit()
    yield


@pytest_asyncio.fixture
async def client():
    """使用 ASGITransport 直接掛載 app，不需啟動伺服器。"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def db():
    session = AsyncSessionLocal()
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def codec() -> TokenCodec:
    """獨立金鑰，與 app 的 settings 無關"""
    return TokenCodec("isolated-test-secret")


async def register_and_login(client: AsyncClient, email: str, password: str = "password123") -> Tuple[dict, str]:
    """透過 API 註冊，回傳 (body, x-auth token)"""
    r = await client.post("/users", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json(), r.headers["x-auth"]
