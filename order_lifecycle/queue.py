"""
Side-effect queue on Redis: transitions LPUSH descriptors, the worker BRPOPs them.
Failed descriptors end up on the DLQ list and can be replayed onto the main queue.
"""
import json
import logging
from collections.abc import Iterable

import redis.asyncio as redis
from redis.exceptions import RedisError

from order_lifecycle.config import settings
from order_lifecycle.coordinator import SideEffect
from order_lifecycle.metrics import side_effects_enqueued_total
from order_lifecycle.redis_client import check_idempotency, get_redis

logger = logging.getLogger(__name__)


def _make_body(effect: SideEffect, attempts: int = 0) -> dict:
    return {
        "effect_id": effect.effect_id,
        "kind": effect.kind.value,
        "order_id": effect.order_id,
        "business_id": effect.business_id,
        "attempts": attempts,
    }


async def push_side_effects(effects: Iterable[SideEffect], r: redis.Redis | None = None) -> int:
    """
    Queue each side effect once. Returns how many were actually queued.
    If the push fails the idempotency key is released and the error re-raised,
    so the same request can be queued again later.
    """
    r = r or await get_redis()
    queued = 0
    for effect in effects:
        key = f"side_effect:{effect.effect_id}"
        if await check_idempotency(r, key):
            logger.info("Side effect %s already requested, skipped", effect.effect_id)
            continue
        try:
            await r.lpush(settings.side_effect_queue_key, json.dumps(_make_body(effect)))
        except RedisError:
            logger.exception("Could not queue side effect %s", effect.effect_id)
            await r.delete(key)
            raise
        side_effects_enqueued_total.labels(kind=effect.kind.value).inc()
        queued += 1
    return queued


async def queue_depth(r: redis.Redis | None = None) -> int:
    r = r or await get_redis()
    return await r.llen(settings.side_effect_queue_key)


async def replay_dlq(limit: int = 100, r: redis.Redis | None = None) -> int:
    """
    Move messages from the DLQ back onto the main queue with attempts reset.
    Returns number of messages replayed.
    """
    r = r or await get_redis()
    replayed = 0
    while replayed < limit:
        raw = await r.rpop(settings.side_effect_dlq_key)
        if raw is None:
            break
        replayed += 1
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Dropping malformed DLQ message")
            continue
        if not data.get("kind") or not data.get("order_id"):
            logger.warning("Dropping DLQ message without kind/order_id")
            continue
        body = {
            "effect_id": data.get("effect_id") or f"{data['kind']}:{data['order_id']}",
            "kind": data["kind"],
            "order_id": data["order_id"],
            "business_id": data.get("business_id"),
            "attempts": 0,
        }
        await r.lpush(settings.side_effect_queue_key, json.dumps(body))
    return replayed
