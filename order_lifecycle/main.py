import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from redis.exceptions import RedisError

from order_lifecycle.errors import OrderNotFoundError, TransitionRejectedError
from order_lifecycle.metrics import (
    get_metrics_bytes,
    get_metrics_content_type,
    side_effect_queue_depth,
    transitions_rejected_total,
)
from order_lifecycle.queue import queue_depth
from order_lifecycle.redis_client import close_redis, get_redis
from order_lifecycle.routes import admin, notifications, orders

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await get_redis()
    yield
    await close_redis()


app = FastAPI(title="Order Lifecycle", lifespan=lifespan)
app.include_router(orders.router)
app.include_router(notifications.router)
app.include_router(admin.router)


@app.exception_handler(TransitionRejectedError)
async def transition_rejected(request: Request, exc: TransitionRejectedError) -> JSONResponse:
    transitions_rejected_total.labels(
        current_status=str(exc.current_status),
        attempted_status=str(exc.target_status),
    ).inc()
    return JSONResponse(
        status_code=422,
        content={
            "status": "rejected",
            "error": type(exc).__name__,
            "message": str(exc),
            "current_status": exc.current_status,
            "target_status": exc.target_status,
        },
    )


@app.exception_handler(OrderNotFoundError)
async def order_not_found(request: Request, exc: OrderNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"status": "not_found", "message": str(exc)})


@app.exception_handler(RedisError)
async def redis_unavailable(request: Request, exc: RedisError) -> JSONResponse:
    logger.error("Redis unavailable while handling %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"status": "unavailable", "message": "Side-effect queue unavailable, try again"},
    )


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus scrape endpoint: transitions, notifications, side-effect queue depth."""
    try:
        side_effect_queue_depth.set(await queue_depth())
    except RedisError:
        logger.warning("Could not read side-effect queue depth", exc_info=True)
    return Response(
        content=get_metrics_bytes(),
        media_type=get_metrics_content_type(),
    )
