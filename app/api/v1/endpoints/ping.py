# app/api/v1/endpoints/ping.py
import time

from fastapi import APIRouter

router = APIRouter()

@router.get("/", summary="Ping service")
async def ping():
    # 附上伺服器時間（毫秒），方便前端量延遲
    return {"message": "pong", "server_time": int(time.time() * 1000)}
