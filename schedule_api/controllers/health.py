from typing import Any, Dict

from fastapi import APIRouter

from schedule_api import db, state
from schedule_api.dependencies import OptionalRedis

router = APIRouter()


@router.get("/health")
async def health(redis_client: OptionalRedis) -> Dict[str, Any]:
    redis_status = "disconnected"
    if redis_client:
        try:
            await redis_client.ping()
            redis_status = "healthy"
        except Exception:
            redis_status = "unhealthy"

    if state.db_enabled:
        database = {**db.get_pool_stats(), "reachable": await db.ping()}
    else:
        database = {"status": "disabled"}
    return {"status": "ok", "redis": redis_status, "database": database}
