"""
Worker: pull side-effect requests from Redis and execute them against the owning services.
- Exponential backoff re-queue on failure, manual DLQ after max retries.
- Prometheus /metrics on settings.worker_metrics_port (worker metrics).
- Graceful shutdown on SIGTERM.
Run: python -m order_lifecycle.worker
"""
import asyncio
import json
import logging
import signal
import sys
import threading
import time
from collections.abc import Awaitable, Callable

import httpx
import redis.asyncio as redis

from order_lifecycle.config import settings
from order_lifecycle.coordinator import SideEffectKind
from order_lifecycle.metrics import (
    side_effects_dlq_total,
    side_effects_failed_total,
    side_effects_processed_total,
)

logger = logging.getLogger(__name__)

BRPOP_TIMEOUT = 5
GRACEFUL_SHUTDOWN_WAIT_SEC = 30

Handler = Callable[[httpx.AsyncClient, dict], Awaitable[None]]


def _start_metrics_server() -> None:
    from prometheus_client import start_http_server
    start_http_server(settings.worker_metrics_port)


async def revert_stock(client: httpx.AsyncClient, data: dict) -> None:
    """Ask the stock service to put a cancelled order's items back on the shelf."""
    url = f"{settings.inventory_api_url.rstrip('/')}/stores/{data['business_id']}/orders/{data['order_id']}/revert-stock"
    resp = await client.post(url)
    resp.raise_for_status()


HANDLERS: dict[str, Handler] = {
    SideEffectKind.REVERT_STOCK.value: revert_stock,
}

# Fields a message must carry before its handler is called
REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    SideEffectKind.REVERT_STOCK.value: ("business_id",),
}


def _backoff_seconds(attempts: int) -> int:
    return 2 ** attempts


async def _dead_letter(r: redis.Redis, data: dict, attempts: int, error: str) -> None:
    await r.lpush(settings.side_effect_dlq_key, json.dumps({
        **data,
        "attempts": attempts,
        "last_error": error,
        "failed_at": time.time(),
    }))
    side_effects_dlq_total.inc()


async def process_one(
    r: redis.Redis,
    client: httpx.AsyncClient,
    raw: str,
    sem: asyncio.Semaphore,
) -> None:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON from queue: %s", e)
        return
    effect_id = data.get("effect_id")
    kind = data.get("kind")
    attempts = data.get("attempts", 0)
    if not effect_id or not data.get("order_id"):
        logger.warning("Message missing effect_id/order_id, skipping")
        return
    handler = HANDLERS.get(kind)
    if handler is None:
        logger.warning("No handler for side effect kind=%s (effect_id=%s), skipping", kind, effect_id)
        return
    missing = [name for name in REQUIRED_FIELDS.get(kind, ()) if not data.get(name)]
    if missing:
        # not retried: the message itself is incomplete
        logger.error("effect_id=%s missing %s, moved to DLQ", effect_id, ", ".join(missing))
        await _dead_letter(r, data, attempts, f"missing {', '.join(missing)}")
        return

    async with sem:
        try:
            await handler(client, data)
            logger.info("Processed effect_id=%s", effect_id)
            side_effects_processed_total.inc()
        except Exception as e:
            side_effects_failed_total.inc()
            logger.exception("Failed to process effect_id=%s (attempt %d): %s", effect_id, attempts + 1, e)
            next_attempts = attempts + 1
            if next_attempts >= settings.worker_max_retries:
                await _dead_letter(r, data, next_attempts, str(e))
                logger.warning("Moved effect_id=%s to DLQ after %d attempts", effect_id, settings.worker_max_retries)
            else:
                backoff_sec = _backoff_seconds(attempts)
                logger.info("Re-queuing effect_id=%s in %ds (attempt %d/%d)", effect_id, backoff_sec, next_attempts, settings.worker_max_retries)
                await asyncio.sleep(backoff_sec)
                await r.lpush(settings.side_effect_queue_key, json.dumps({**data, "attempts": next_attempts}))


async def run_worker(shutdown_event: asyncio.Event) -> None:
    sem = asyncio.Semaphore(settings.worker_concurrency)
    logger.info(
        "Listening on %s (concurrency=%d, max_retries=%d) ...",
        settings.side_effect_queue_key,
        settings.worker_concurrency,
        settings.worker_max_retries,
    )
    r = redis.from_url(settings.redis_url, decode_responses=True)
    client = httpx.AsyncClient(timeout=settings.inventory_timeout_seconds)
    tasks: set[asyncio.Task] = set()
    try:
        while not shutdown_event.is_set():
            result = await r.brpop(settings.side_effect_queue_key, timeout=BRPOP_TIMEOUT)
            if result is None:
                continue
            _key, raw = result
            t = asyncio.create_task(process_one(r, client, raw, sem))
            tasks.add(t)
            t.add_done_callback(tasks.discard)
    finally:
        if tasks:
            logger.info("Graceful shutdown: waiting for %d in-flight task(s) (max %ds) ...", len(tasks), GRACEFUL_SHUTDOWN_WAIT_SEC)
            _, pending = await asyncio.wait(tasks, timeout=GRACEFUL_SHUTDOWN_WAIT_SEC, return_when=asyncio.ALL_COMPLETED)
            for t in pending:
                t.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        await client.aclose()
        await r.aclose()
        logger.info("Worker stopped.")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stdout,
    )
    threading.Thread(target=_start_metrics_server, daemon=True).start()
    logger.info("Metrics server listening on port %s", settings.worker_metrics_port)

    shutdown_event = asyncio.Event()

    def on_signal():
        shutdown_event.set()

    loop = asyncio.new_event_loop()
    try:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, on_signal)
    except NotImplementedError:
        signal.signal(signal.SIGTERM, lambda *a: shutdown_event.set())
        signal.signal(signal.SIGINT, lambda *a: shutdown_event.set())

    asyncio.set_event_loop(loop)
    try:
        loop.run_until_complete(run_worker(shutdown_event))
    finally:
        loop.close()


if __name__ == "__main__":
    main()
