from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from order_lifecycle.queue import replay_dlq

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/side-effects/dlq/replay")
async def dlq_replay(limit: int = Query(default=100, ge=1, le=1000)) -> JSONResponse:
    """
    Replay failed side effects (e.g. stock reversions) from the DLQ to the main queue.
    Returns number of messages replayed.
    """
    replayed = await replay_dlq(limit=limit)
    return JSONResponse(
        status_code=200,
        content={"status": "ok", "replayed": replayed},
    )
