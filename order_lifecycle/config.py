from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    redis_url: str = "redis://localhost:6379/0"

    # Side effects requested by transitions (e.g. stock reversion) are queued here
    side_effect_queue_key: str = "queue:order_side_effects"
    side_effect_dlq_key: str = "queue:order_side_effects:dlq"
    side_effect_idempotency_ttl_seconds: int = 86400  # duplicate requests for the same effect are dropped
    worker_concurrency: int = 10  # max concurrent side effects (semaphore limit)
    worker_max_retries: int = 5  # after this many attempts, move to DLQ
    worker_metrics_port: int = 9090

    # Stock service the worker calls to revert inventory of a cancelled order
    inventory_api_url: str = "http://localhost:3000/api/admin"
    inventory_timeout_seconds: float = 10.0

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
