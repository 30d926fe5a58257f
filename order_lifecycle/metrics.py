"""
Prometheus metrics: transitions (API), prepared notifications, side effects (worker), queue depth.
"""
from prometheus_client import Counter, Gauge, generate_latest

# API: status transitions
transitions_applied_total = Counter(
    "transitions_applied_total",
    "Total order status transitions accepted",
    ["target_status"],
)
transitions_rejected_total = Counter(
    "transitions_rejected_total",
    "Total transitions rejected (illegal edge, missing reason, shortcut not allowed)",
    ["current_status", "attempted_status"],
)
notifications_prepared_total = Counter(
    "notifications_prepared_total",
    "Total customer messages prepared for a user-initiated send",
    ["status", "order_type"],
)

# Side effects
side_effects_enqueued_total = Counter(
    "side_effects_enqueued_total",
    "Total side effects queued for execution",
    ["kind"],
)
side_effects_processed_total = Counter(
    "side_effects_processed_total",
    "Total side effects executed successfully",
)
side_effects_failed_total = Counter(
    "side_effects_failed_total",
    "Total side effect attempts that failed (retried or sent to DLQ)",
)
side_effects_dlq_total = Counter(
    "side_effects_dlq_total",
    "Total side effects moved to DLQ after max retries",
)

side_effect_queue_depth = Gauge(
    "side_effect_queue_depth",
    "Number of side effects waiting in the queue",
)


def get_metrics_content_type():
    return "text/plain; charset=utf-8; version=0.0.4"


def get_metrics_bytes():
    return generate_latest()
